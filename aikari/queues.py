"""Thread-safe queues used for passing messages between threads."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, Generic, List, TypeVar

T = TypeVar("T")

_log = logging.getLogger(__name__)


class SinglePointMessageQueue(Generic[T]):
    """Unbounded FIFO queue whose ``pop`` blocks until a value is available."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()

    def push(self, value: T) -> None:
        """Append a value and wake one waiting consumer."""
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def pop(self) -> T:
        """Remove and return the oldest value, waiting for one if needed."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._items))
            return self._items.popleft()

    def is_empty(self) -> bool:
        with self._cond:
            return not self._items

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)


class PoolQueue(Generic[T]):
    """A fixed pool of worker threads that run ``exec_func`` on queued tasks.

    Closing the pool stops the workers; tasks still queued at that point
    are dropped.
    """

    def __init__(self, threads: int, exec_func: Callable[[T], object]) -> None:
        self._exec_func = exec_func
        self._tasks: Deque[T] = deque()
        self._cond = threading.Condition()
        self._running = True
        self._workers: List[threading.Thread] = [
            threading.Thread(
                target=self._worker_loop, name=f"pool-worker-{index}", daemon=True
            )
            for index in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    def push_task(self, task: T) -> None:
        """Queue a task for the next free worker."""
        with self._cond:
            self._tasks.append(task)
            self._cond.notify()

    def close(self) -> None:
        """Stop all workers and wait for them to finish their current task."""
        with self._cond:
            self._running = False
            self._cond.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "PoolQueue[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: not self._running or bool(self._tasks))
                if not self._running:
                    return
                task = self._tasks.popleft()
            try:
                self._exec_func(task)
            except Exception:
                _log.exception("Pool task raised an exception")