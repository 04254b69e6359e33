"""Message types exchanged between the main thread and sub-modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union


class MessageType(IntEnum):
    CONTROL_MESSAGE = 0
    CONTROL_MESSAGE_REPLY = 1
    WS_MESSAGE = 2
    DESTROY_MESSAGE = 3


@dataclass
class WebSocketInfo:
    is_broadcast: Optional[bool] = None
    client_id: Optional[str] = None


# Main -> Sub


@dataclass
class MainToSubControlMessage:
    method: str = ""
    data: Any = None
    from_module: str = "launcher"
    event_id: str = ""


@dataclass
class MainToSubControlReplyMessage:
    data: Any = None
    from_module: str = "launcher"
    event_id: str = ""


@dataclass
class MainToSubWebSocketMessage:
    method: str = ""
    data: Any = None
    event_id: str = ""
    ws_info: WebSocketInfo = field(default_factory=WebSocketInfo)


@dataclass
class MainToSubDestroyMessage:
    destroy: bool = True


@dataclass
class MainToSubMessage:
    type: MessageType
    msg: Union[
        MainToSubControlMessage,
        MainToSubControlReplyMessage,
        MainToSubWebSocketMessage,
        MainToSubDestroyMessage,
    ]


# Sub -> Main


@dataclass
class SubToMainControlMessage:
    method: str = ""
    data: Any = None
    from_module: str = ""
    event_id: str = ""


@dataclass
class SubToMainControlReplyMessage:
    data: Any = None
    from_module: str = ""
    event_id: str = ""


@dataclass
class SubToMainWebSocketReply:
    success: bool = False
    code: int = 0
    data: Any = None
    event_id: str = ""
    ws_info: WebSocketInfo = field(default_factory=WebSocketInfo)


@dataclass
class SubToMainDestroyMessage:
    destroy: bool = True


@dataclass
class SubToMainMessage:
    type: MessageType
    msg: Union[
        SubToMainControlMessage,
        SubToMainControlReplyMessage,
        SubToMainWebSocketReply,
        SubToMainDestroyMessage,
    ]