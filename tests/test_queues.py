import threading
import time

import pytest

from aikari.queues import PoolQueue, SinglePointMessageQueue


def test_queue_is_fifo():
    queue = SinglePointMessageQueue()
    for item in ["a", "b", "c"]:
        queue.push(item)
    assert [queue.pop(), queue.pop(), queue.pop()] == ["a", "b", "c"]


def test_queue_length_and_emptiness():
    queue = SinglePointMessageQueue()
    assert queue.is_empty()
    assert len(queue) == 0
    queue.push(1)
    queue.push(2)
    assert not queue.is_empty()
    assert len(queue) == 2
    queue.pop()
    assert len(queue) == 1


def test_pop_blocks_until_push():
    queue = SinglePointMessageQueue()
    received = []
    done = threading.Event()

    def consumer():
        received.append(queue.pop())
        done.set()

    thread = threading.Thread(target=consumer, daemon=True)
    thread.start()
    time.sleep(0.05)
    assert not done.is_set()
    assert len(queue) == 0
    queue.push("hello")
    assert done.wait(5)
    assert received == ["hello"]
    assert queue.is_empty()


def test_pool_runs_all_tasks():
    results = []
    lock = threading.Lock()
    finished = threading.Semaphore(0)

    def work(task):
        with lock:
            results.append(task * 2)
        finished.release()

    with PoolQueue(3, work) as pool:
        for value in range(10):
            pool.push_task(value)
        for _ in range(10):
            assert finished.acquire(timeout=5)

    assert sorted(results) == [value * 2 for value in range(10)]


def test_pool_runs_tasks_in_parallel():
    barrier = threading.Barrier(2, timeout=5)
    out = SinglePointMessageQueue()

    def work(task):
        try:
            barrier.wait()
        except threading.BrokenBarrierError:
            out.push("broken")
            return
        out.push(task)

    with PoolQueue(2, work) as pool:
        pool.push_task("x")
        pool.push_task("y")
        collected = sorted([out.pop(), out.pop()])

    assert collected == ["x", "y"]
    assert out.is_empty()


def test_pool_survives_failing_task():
    out = SinglePointMessageQueue()
    done = threading.Event()

    def work(task):
        if task == "bad":
            raise ValueError("boom")
        out.push(task)
        done.set()

    with PoolQueue(1, work) as pool:
        pool.push_task("bad")
        pool.push_task("good")
        assert done.wait(5)

    assert out.pop() == "good"
    assert out.is_empty()


def test_closed_pool_runs_nothing():
    results = []
    pool = PoolQueue(2, results.append)
    pool.close()
    pool.push_task("late")
    time.sleep(0.1)
    assert results == []


@pytest.mark.parametrize("count", [1, 4])
def test_pool_close_is_repeatable(count):
    out = SinglePointMessageQueue()
    done = threading.Event()

    def work(task):
        out.push(task)
        done.set()

    pool = PoolQueue(count, work)
    pool.push_task("once")
    assert done.wait(5)
    pool.close()
    pool.close()
    assert out.pop() == "once"
    assert len(out) == 0