"""MQTT topic parsing and packet re-identification for the relay."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

from aikari.strings import split

MODULE_NAME = "PLS"
WS_MSG_TYPE_PUSH = "PUSH"

SW_CORE_PROC_KILLED_MSG = (
    "SeewoCore process has been killed, SSA might be reloaded in seconds."
)
SW_CORE_PROC_KILLED_PUSH_METHOD = "$aura.pls.init.pushSwCoreOnKillEvent"
BROKER_HOSTNAME = "iot-broker-mis.seewo.com"
BROKER_PORT = 8883
TLS_CERT_IDENTIFIER = "mqtt"


class PacketOperationType(Enum):
    PKT_TRANSPARENT = 0
    PKT_MODIFIED = 1
    PKT_VIRTUAL = 2
    CTRL_THREAD_END = 3


class PacketEndpointType(Enum):
    GET = 0
    POST = 1
    RPC = 2


class PacketSide(Enum):
    REQ = 0
    REP = 1


_SIDE_NAMES = {PacketSide.REQ: "request", PacketSide.REP: "response"}


class ConnackCode(IntEnum):
    """Return codes of an MQTT 3.1.1 CONNACK packet."""

    CONN_ACCEPT = 0
    CONN_DENIED_EPROTOCOL = 1
    CONN_DENIED_EIDENTIFIER = 2
    CONN_DENIED_EUNAVAILABLE = 3
    CONN_DENIED_EUNRECOGAUTH = 4
    CONN_DENIED_EUNAUTHORIZED = 5


@dataclass
class PacketTopicProps:
    """The parts of a ``/sys/<productKey>/<deviceId>/...`` topic."""

    endpoint_type: PacketEndpointType = PacketEndpointType.GET
    device_id: str = ""
    product_key: str = ""
    side: PacketSide = PacketSide.REQ
    msg_id: Optional[str] = None


@dataclass
class FlaggedPacket:
    type: PacketOperationType = PacketOperationType.PKT_TRANSPARENT
    packet: Optional[Any] = None
    props: PacketTopicProps = field(default_factory=PacketTopicProps)


@dataclass(frozen=True)
class SubscribePacket:
    packet_id: int
    entries: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class SubackPacket:
    packet_id: int
    entries: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class UnsubscribePacket:
    packet_id: int
    entries: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class UnsubackPacket:
    packet_id: int


@dataclass(frozen=True)
class PublishPacket:
    packet_id: int
    topic: str
    payload: Any
    opts: Any = None


class PacketIdMap:
    """Thread-safe links from relayed packet ids back to the original ids.

    Links are kept after they are resolved; resolving an id that was never
    linked gives 0.
    """

    def __init__(self) -> None:
        self._links: Dict[int, int] = {}
        self._lock = threading.Lock()

    def link(self, new_id: int, old_id: int) -> None:
        """Record that ``new_id`` stands for ``old_id``."""
        with self._lock:
            self._links[new_id] = old_id

    def resolve(self, packet_id: int) -> int:
        """Return the original id linked to ``packet_id``, or 0."""
        with self._lock:
            return self._links.get(packet_id, 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)

    def __contains__(self, packet_id: object) -> bool:
        with self._lock:
            return packet_id in self._links


def _part(parts: List[str], index: int, topic: str) -> str:
    try:
        return parts[index]
    except IndexError:
        raise ValueError(f"Invalid topic: {topic}") from None


def get_packet_props(topic: str) -> PacketTopicProps:
    """Parse a topic of the form ``/sys/<productKey>/<deviceId>/<action>/<side>[/<id>]``."""
    parts = split(topic, "/")
    if len(parts) <= 4:
        raise ValueError(f"Invalid topic: {topic}")
    action = parts[4]
    side = (
        PacketSide.REP
        if _part(parts, 5, topic) == "response"
        else PacketSide.REQ
    )
    props = PacketTopicProps(
        product_key=parts[2],
        device_id=parts[3],
        side=side,
    )
    if action == "rpc":
        props.endpoint_type = PacketEndpointType.RPC
        props.msg_id = _part(parts, 6, topic)
    elif action == "thing":
        props.endpoint_type = PacketEndpointType.POST
    else:
        props.endpoint_type = PacketEndpointType.GET
        props.msg_id = _part(parts, 6, topic)
    return props


def _require_msg_id(props: PacketTopicProps) -> str:
    if props.msg_id is None:
        raise ValueError(
            f"Packet props of endpoint type {props.endpoint_type.name} need a msg_id"
        )
    return props.msg_id


def merge_topic(props: PacketTopicProps) -> str:
    """Build the topic string described by ``props``."""
    head = f"/sys/{props.product_key}/{props.device_id}"
    if props.endpoint_type == PacketEndpointType.GET:
        return f"{head}/up/{_SIDE_NAMES[props.side]}/{_require_msg_id(props)}"
    if props.endpoint_type == PacketEndpointType.POST:
        return f"{head}/thing/post"
    if props.endpoint_type == PacketEndpointType.RPC:
        return f"{head}/rpc/{_SIDE_NAMES[props.side]}/{_require_msg_id(props)}"
    raise ValueError(f"Invalid packet prop endpointType: {props.endpoint_type!r}")


def reconstruct_packet(
    packet: Any,
    new_packet_id: Callable[[], int],
    packet_id_map: PacketIdMap,
    topic: Optional[str] = None,
    payload: Optional[Any] = None,
) -> Any:
    """Return a copy of ``packet`` carrying an id valid on the other link.

    SUBSCRIBE and UNSUBSCRIBE get a fresh id from ``new_packet_id`` that is
    linked to the original; their acknowledgements get the original id back
    from ``packet_id_map``. PUBLISH gets a fresh id and, when given, a new
    topic and payload. Any other packet is returned unchanged.
    """
    if isinstance(packet, SubscribePacket):
        new_id = new_packet_id()
        packet_id_map.link(new_id, packet.packet_id)
        return SubscribePacket(new_id, packet.entries)
    if isinstance(packet, SubackPacket):
        return SubackPacket(packet_id_map.resolve(packet.packet_id), packet.entries)
    if isinstance(packet, UnsubscribePacket):
        new_id = new_packet_id()
        packet_id_map.link(new_id, packet.packet_id)
        return UnsubscribePacket(new_id, packet.entries)
    if isinstance(packet, UnsubackPacket):
        return UnsubackPacket(packet_id_map.resolve(packet.packet_id))
    if isinstance(packet, PublishPacket):
        return PublishPacket(
            new_packet_id(),
            packet.topic if topic is None else topic,
            packet.payload if payload is None else payload,
            packet.opts,
        )
    return packet