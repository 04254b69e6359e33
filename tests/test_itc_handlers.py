import concurrent.futures
import threading

import pytest

from aikari.itc_handlers import MainToSubMsgHandler, SubToMainMsgHandler
from aikari.itc_types import (
    MainToSubControlMessage,
    MainToSubControlReplyMessage,
    MainToSubDestroyMessage,
    MainToSubMessage,
    MainToSubWebSocketMessage,
    MessageType,
    SubToMainControlMessage,
    SubToMainControlReplyMessage,
    SubToMainDestroyMessage,
    SubToMainMessage,
    SubToMainWebSocketReply,
)
from aikari.queues import SinglePointMessageQueue

WAIT = 5.0


class RecordingMain(MainToSubMsgHandler):
    def __init__(self, *args):
        self.controls = []
        self.replies = []
        self.ws = []
        self.seen = threading.Event()
        super().__init__(*args)

    def on_control_message(self, msg):
        self.controls.append(msg)
        self.seen.set()

    def on_control_reply(self, msg):
        self.replies.append(msg)
        self.seen.set()

    def on_websocket_message(self, msg):
        self.ws.append(msg)
        self.seen.set()


class RecordingSub(SubToMainMsgHandler):
    def __init__(self, *args):
        self.controls = []
        self.replies = []
        self.ws = []
        self.seen = threading.Event()
        super().__init__(*args)

    def on_control_message(self, msg):
        self.controls.append(msg)
        self.seen.set()

    def on_control_reply(self, msg):
        self.replies.append(msg)
        self.seen.set()

    def on_websocket_message(self, msg):
        self.ws.append(msg)
        self.seen.set()


@pytest.fixture
def main_side():
    src = SinglePointMessageQueue()
    dest = SinglePointMessageQueue()
    handler = RecordingMain(src, dest, "PLS")
    yield handler, src, dest
    handler.manual_destroy()


@pytest.fixture
def sub_side():
    src = SinglePointMessageQueue()
    report = SinglePointMessageQueue()
    handler = RecordingSub(src, report, "PLS")
    yield handler, src, report
    src.push(SubToMainMessage(MessageType.DESTROY_MESSAGE, SubToMainDestroyMessage()))
    handler.manual_destroy()


def test_log_headers():
    src, dest = SinglePointMessageQueue(), SinglePointMessageQueue()
    main = MainToSubMsgHandler(src, dest, "PLS")
    sub = SubToMainMsgHandler(SinglePointMessageQueue(), src, "PLS")
    try:
        assert main.log_header == "[Main->PLS]"
        assert sub.log_header == "[PLS->Main]"
    finally:
        main.manual_destroy()
        sub.src_queue.push(
            SubToMainMessage(MessageType.DESTROY_MESSAGE, SubToMainDestroyMessage())
        )
        sub.manual_destroy()


def test_control_message_dispatched_from_queue(main_side):
    handler, src, _ = main_side
    msg = MainToSubControlMessage(method="ping", data={"a": 1}, event_id="e1")
    src.push(MainToSubMessage(MessageType.CONTROL_MESSAGE, msg))
    assert handler.seen.wait(WAIT)
    assert handler.controls == [msg]


def test_websocket_message_dispatched(main_side):
    handler, src, _ = main_side
    msg = MainToSubWebSocketMessage(method="ws", data=[1, 2], event_id="w1")
    src.push(MainToSubMessage(MessageType.WS_MESSAGE, msg))
    assert handler.seen.wait(WAIT)
    assert handler.ws == [msg]


def test_reply_runs_listeners_once(main_side):
    handler, _, _ = main_side
    got = []
    fired = threading.Event()

    def callback(reply):
        got.append(reply)
        fired.set()

    handler.add_ctrl_msg_callback_listener("ev", callback)
    reply = MainToSubControlReplyMessage(data={"ok": True}, event_id="ev")
    handler.handle_msg(MainToSubMessage(MessageType.CONTROL_MESSAGE_REPLY, reply))
    assert fired.wait(WAIT)
    assert got == [reply]
    assert handler.replies == [reply]

    fired.clear()
    handler.handle_msg(MainToSubMessage(MessageType.CONTROL_MESSAGE_REPLY, reply))
    assert not fired.wait(0.2)
    assert got == [reply]
    assert handler.replies == [reply, reply]


def test_listener_for_other_event_not_called(main_side):
    handler, _, _ = main_side
    fired = threading.Event()
    handler.add_ctrl_msg_callback_listener("other", lambda reply: fired.set())
    reply = MainToSubControlReplyMessage(event_id="ev")
    handler.handle_msg(MainToSubMessage(MessageType.CONTROL_MESSAGE_REPLY, reply))
    assert not fired.wait(0.2)
    assert handler.replies == [reply]


def test_create_ctrl_msg_future_resolves(main_side):
    handler, src, _ = main_side
    future = handler.create_ctrl_msg_future("evf")
    reply = MainToSubControlReplyMessage(data=42, event_id="evf")
    src.push(MainToSubMessage(MessageType.CONTROL_MESSAGE_REPLY, reply))
    assert future.result(WAIT) == reply


def test_send_ctrl_msg_sync_round_trip(main_side):
    handler, src, dest = main_side
    ctrl = SubToMainControlMessage(method="get", data={"k": "v"}, from_module="pls", event_id="sync1")

    def main_thread():
        sent = dest.pop()
        assert sent.type == MessageType.CONTROL_MESSAGE
        src.push(
            MainToSubMessage(
                MessageType.CONTROL_MESSAGE_REPLY,
                MainToSubControlReplyMessage(data=sent.msg.data, event_id=sent.msg.event_id),
            )
        )

    responder = threading.Thread(target=main_thread, daemon=True)
    responder.start()
    result = handler.send_ctrl_msg_sync(ctrl, WAIT)
    responder.join(WAIT)
    assert result.event_id == "sync1"
    assert result.data == {"k": "v"}


def test_send_ctrl_msg_sync_timeout(main_side):
    handler, _, dest = main_side
    ctrl = SubToMainControlMessage(method="get", event_id="never")
    with pytest.raises(concurrent.futures.TimeoutError):
        handler.send_ctrl_msg_sync(ctrl, 0.1)
    sent = dest.pop()
    assert sent.msg is ctrl


def test_wrong_payload_is_swallowed(main_side):
    handler, _, _ = main_side
    handler.handle_msg(
        MainToSubMessage(MessageType.CONTROL_MESSAGE, MainToSubWebSocketMessage())
    )
    handler.handle_msg(
        MainToSubMessage(MessageType.DESTROY_MESSAGE, MainToSubDestroyMessage())
    )
    assert handler.controls == []
    assert handler.ws == []


def test_main_manual_destroy_notifies_main_side():
    src, dest = SinglePointMessageQueue(), SinglePointMessageQueue()
    handler = MainToSubMsgHandler(src, dest, "PLS")
    handler.manual_destroy()
    assert len(dest) == 1
    assert dest.pop().type == MessageType.DESTROY_MESSAGE
    assert src.is_empty()


def test_sub_to_main_dispatch(sub_side):
    handler, src, _ = sub_side
    msg = SubToMainControlMessage(method="m", from_module="pls", event_id="s1")
    src.push(SubToMainMessage(MessageType.CONTROL_MESSAGE, msg))
    assert handler.seen.wait(WAIT)
    assert handler.controls == [msg]


def test_sub_to_main_websocket(sub_side):
    handler, src, _ = sub_side
    msg = SubToMainWebSocketReply(success=True, code=0, data={"x": 1}, event_id="w")
    src.push(SubToMainMessage(MessageType.WS_MESSAGE, msg))
    assert handler.seen.wait(WAIT)
    assert handler.ws == [msg]


def test_sub_to_main_reply_listener(sub_side):
    handler, _, _ = sub_side
    got = []
    fired = threading.Event()

    def callback(reply):
        got.append(reply)
        fired.set()

    handler.add_ctrl_msg_callback_listener("r1", callback)
    reply = SubToMainControlReplyMessage(data="done", from_module="pls", event_id="r1")
    handler.handle_msg(SubToMainMessage(MessageType.CONTROL_MESSAGE_REPLY, reply))
    assert fired.wait(WAIT)
    assert got == [reply]
    assert handler.replies == [reply]


def test_sub_manual_destroy_pushes_nothing():
    src, report = SinglePointMessageQueue(), SinglePointMessageQueue()
    handler = SubToMainMsgHandler(src, report, "PLS")
    src.push(SubToMainMessage(MessageType.DESTROY_MESSAGE, SubToMainDestroyMessage()))
    handler.manual_destroy()
    assert report.is_empty()
    assert src.is_empty()