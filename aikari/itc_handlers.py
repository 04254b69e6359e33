"""Handlers that consume inter-thread message queues and dispatch messages."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

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
from aikari.logger import get_logger
from aikari.queues import PoolQueue, SinglePointMessageQueue

DEFAULT_THREAD_COUNT = 4

M = TypeVar("M")
R = TypeVar("R")


class _MsgHandlerBase(Generic[M, R]):
    """Reads messages from a source queue and handles them on a thread pool."""

    _control_type: Type[Any]
    _reply_type: Type[Any]
    _ws_type: Type[Any]

    def __init__(self, src_queue: SinglePointMessageQueue, log_header: str) -> None:
        self.src_queue = src_queue
        self.log_header = log_header
        self._listeners: Dict[str, List[Callable[[R], object]]] = {}
        self._listeners_lock = threading.Lock()
        self._pool: PoolQueue = PoolQueue(DEFAULT_THREAD_COUNT, self._dispatch)
        self._worker = threading.Thread(
            target=self._src_msg_worker, name=f"{log_header}-worker", daemon=True
        )
        self._worker.start()

    def _add_listener(self, event_id: str, callback: Callable[[R], object]) -> None:
        with self._listeners_lock:
            self._listeners.setdefault(event_id, []).append(callback)

    def _dispatch(self, msg: Any) -> None:
        log = get_logger()
        try:
            if msg.type == MessageType.CONTROL_MESSAGE:
                self.on_control_message(self._expect(msg.msg, self._control_type))
            elif msg.type == MessageType.CONTROL_MESSAGE_REPLY:
                reply = self._expect(msg.msg, self._reply_type)
                self._fire_listeners(reply)
                self.on_control_reply(reply)
            elif msg.type == MessageType.WS_MESSAGE:
                self.on_websocket_message(self._expect(msg.msg, self._ws_type))
            else:
                log.error(
                    "%s Received unknown message type: TypeID=%s",
                    self.log_header,
                    int(msg.type),
                )
        except Exception as err:
            log.error(
                "%s Unexpected error processing message: %s", self.log_header, err
            )

    def _log_unhandled(self, kind: str, msg: Any) -> None:
        get_logger().debug("%s Unhandled %s: %r", self.log_header, kind, msg)

    def on_control_message(self, msg: Any) -> None:
        self._log_unhandled("control message", msg)

    def on_control_reply(self, msg: Any) -> None:
        self._log_unhandled("control reply", msg)

    def on_websocket_message(self, msg: Any) -> None:
        self._log_unhandled("websocket message", msg)

    @staticmethod
    def _expect(payload: Any, expected: Type[Any]) -> Any:
        if not isinstance(payload, expected):
            raise TypeError(
                f"Expected {expected.__name__}, got {type(payload).__name__}"
            )
        return payload

    def _fire_listeners(self, reply: Any) -> None:
        with self._listeners_lock:
            callbacks = self._listeners.pop(reply.event_id, [])
        for callback in callbacks:
            threading.Thread(target=callback, args=(reply,), daemon=True).start()

    def _src_msg_worker(self) -> None:
        log = get_logger()
        try:
            log.info("%s Starting message queue handler...", self.log_header)
            while True:
                msg = self.src_queue.pop()
                if msg.type == MessageType.DESTROY_MESSAGE:
                    log.info("%s Destroy SIG received, exiting loop...", self.log_header)
                    break
                self._pool.push_task(msg)
        except Exception as err:
            log.critical(
                "%s Critical error occurred running msg handling loop, error: %s",
                self.log_header,
                err,
            )

    def _join_and_close(self) -> None:
        if self._worker.is_alive() and self._worker is not threading.current_thread():
            self._worker.join()
        self._pool.close()


class MainToSubMsgHandler(
    _MsgHandlerBase[MainToSubControlMessage, MainToSubControlReplyMessage]
):
    """Sub-module side: handles messages sent from the main thread."""

    _control_type = MainToSubControlMessage
    _reply_type = MainToSubControlReplyMessage
    _ws_type = MainToSubWebSocketMessage

    def __init__(
        self,
        src_queue: SinglePointMessageQueue,
        dest_queue: SinglePointMessageQueue,
        sub_module_name: str,
    ) -> None:
        self.dest_queue = dest_queue
        super().__init__(src_queue, f"[Main->{sub_module_name}]")

    def manual_destroy(self) -> None:
        """Stop this handler and tell the main side to stop as well."""
        self.src_queue.push(
            MainToSubMessage(MessageType.DESTROY_MESSAGE, MainToSubDestroyMessage())
        )
        self.dest_queue.push(
            SubToMainMessage(MessageType.DESTROY_MESSAGE, SubToMainDestroyMessage())
        )
        self._join_and_close()

    def add_ctrl_msg_callback_listener(
        self,
        event_id: str,
        callback: Callable[[MainToSubControlReplyMessage], object],
    ) -> None:
        """Register a one-shot callback for the reply carrying ``event_id``."""
        self._add_listener(event_id, callback)

    def create_ctrl_msg_future(
        self, event_id: str
    ) -> "Future[MainToSubControlReplyMessage]":
        """Return a future resolved by the reply carrying ``event_id``."""
        future: "Future[MainToSubControlReplyMessage]" = Future()
        self.add_ctrl_msg_callback_listener(event_id, future.set_result)
        return future

    def send_ctrl_msg_sync(
        self, ctrl_msg: SubToMainControlMessage, timeout: Optional[float] = None
    ) -> MainToSubControlReplyMessage:
        """Send a control message to the main side and wait for its reply."""
        future = self.create_ctrl_msg_future(ctrl_msg.event_id)
        self.dest_queue.push(SubToMainMessage(MessageType.CONTROL_MESSAGE, ctrl_msg))
        return future.result(timeout)

    def handle_msg(self, msg: MainToSubMessage) -> None:
        """Dispatch one message to the matching hook; errors are logged."""
        self._dispatch(msg)

    def on_control_message(self, msg: MainToSubControlMessage) -> None:
        """Called for each control message; logs it at debug level by default."""
        self._log_unhandled("control message", msg)

    def on_control_reply(self, msg: MainToSubControlReplyMessage) -> None:
        """Called for each control reply after its listeners have been started."""
        self._log_unhandled("control reply", msg)

    def on_websocket_message(self, msg: MainToSubWebSocketMessage) -> None:
        """Called for each websocket message; logs it at debug level by default."""
        self._log_unhandled("websocket message", msg)


class SubToMainMsgHandler(
    _MsgHandlerBase[SubToMainControlMessage, SubToMainControlReplyMessage]
):
    """Main side: handles messages sent from a sub-module."""

    _control_type = SubToMainControlMessage
    _reply_type = SubToMainControlReplyMessage
    _ws_type = SubToMainWebSocketReply

    def __init__(
        self,
        src_queue: SinglePointMessageQueue,
        report_queue: SinglePointMessageQueue,
        sub_module_name: str,
    ) -> None:
        self.report_queue = report_queue
        super().__init__(src_queue, f"[{sub_module_name}->Main]")

    def manual_destroy(self) -> None:
        """Wait for the worker to stop; the destroy message comes from the sub side."""
        self._join_and_close()

    def add_ctrl_msg_callback_listener(
        self,
        event_id: str,
        callback: Callable[[SubToMainControlReplyMessage], object],
    ) -> None:
        """Register a one-shot callback for the reply carrying ``event_id``."""
        self._add_listener(event_id, callback)

    def handle_msg(self, msg: SubToMainMessage) -> None:
        """Dispatch one message to the matching hook; errors are logged."""
        self._dispatch(msg)

    def on_control_message(self, msg: SubToMainControlMessage) -> None:
        """Called for each control message; logs it at debug level by default."""
        self._log_unhandled("control message", msg)

    def on_control_reply(self, msg: SubToMainControlReplyMessage) -> None:
        """Called for each control reply after its listeners have been started."""
        self._log_unhandled("control reply", msg)

    def on_websocket_message(self, msg: SubToMainWebSocketReply) -> None:
        """Called for each websocket reply; logs it at debug level by default."""
        self._log_unhandled("websocket reply", msg)