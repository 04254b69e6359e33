# aikari

Shared building blocks for applications made of several worker modules that
talk to a main thread over in-process message queues.

## What is inside

- `aikari.queues`
  - `SinglePointMessageQueue`: an unbounded, thread-safe FIFO. `pop` blocks
    until a value is available. It also has `push`, `is_empty` and `len()`.
  - `PoolQueue(threads, exec_func)`: a fixed pool of worker threads that calls
    `exec_func` on every task given to `push_task`. If a task raises, the
    exception is logged. `close()` stops the workers. Tasks still queued at that
    point are dropped. It can be used as a context manager.
- `aikari.itc_types`: dataclasses for the messages exchanged between the main
  thread and sub-modules. `MainToSubMessage` and `SubToMainMessage` pair a
  `MessageType` with a payload. The payloads are the control, control-reply,
  websocket and destroy messages, plus `WebSocketInfo`.
- `aikari.itc_handlers`: `MainToSubMsgHandler` (sub-module side) and
  `SubToMainMsgHandler` (main side).
  - Each one reads its source queue on a worker thread and stops on a destroy
    message.
  - Each message is handed to a pool of four threads. The pool calls
    `on_control_message`, `on_control_reply` or `on_websocket_message`.
    Subclass the handler and override these hooks.
  - A control reply first starts, each on its own thread, the one-shot
    callbacks registered for its event id with `add_ctrl_msg_callback_listener`.
  - `MainToSubMsgHandler` also has `create_ctrl_msg_future` and
    `send_ctrl_msg_sync(ctrl_msg, timeout=None)`. The latter pushes a control
    message to the main side and waits for the matching reply.
  - `manual_destroy` stops the handler.
- `aikari.states`: `StatesManager.get_instance(store_type)` returns one
  lock-guarded state store per store type. The state is built with
  `store_type.create_default()` when the type has it, otherwise with
  `store_type()`. The store offers `get_state` (a shallow copy), `get_val`,
  `set_val` and `reset_val` (sets a field to `None`). Unknown field names raise
  `AttributeError`.
- `aikari.config_manager`
  - `deep_merge_config` fills the keys missing from a user config with the
    keys of a default config, recursing into nested objects.
  - `ConfigManager` is an abstract base for a JSON config file. Subclasses
    implement `load_config` and `dump_config`.
  - `init_config` does one of two things. It reads the user's file and merges
    it with the default file. If the user's file does not exist, it writes the
    default out instead.
  - `write_config` writes compact JSON and creates the directory if needed.
  - Failures raise `ConfigError`.
- `aikari.logger`
  - `init_logger(module_name, text_color, bg_color)` sets up the shared
    `aikari` logger. It writes coloured lines to stdout, tagged with the
    module name and the level.
  - Besides the standard levels there is a `TRACE` level (5).
  - `get_logger` returns the shared logger.
  - `AikariFormatter` and `module_section` are the pieces it is built from.
- `aikari.dns`: `get_dns_a_records(target_domain, query_host=...)` resolves A
  records over DNS-over-HTTPS. It returns an empty list on any failure.
- `aikari.hosts`
  - `ensure_host_line(host_line, hosts_dir=None)` appends a line to the hosts
    file unless some line already contains it. It returns `True` only when it
    appended the line.
  - `default_hosts_dir` returns the hosts directory. On Windows it is read
    from the registry, falling back to the usual path. Elsewhere it is `/etc`.
- `aikari.mqtt_packets`
  - `get_packet_props` parses `/sys/<productKey>/<deviceId>/...` topics into
    `PacketTopicProps`. `merge_topic` builds them back.
  - `reconstruct_packet` gives SUBSCRIBE, UNSUBSCRIBE and PUBLISH packets a
    fresh packet id. For SUBSCRIBE and UNSUBSCRIBE it records the link in a
    `PacketIdMap`. SUBACK and UNSUBACK get their original id back. PUBLISH can
    also get a new topic and payload. Other packets are returned unchanged.
  - The module also defines the packet dataclasses, the `PacketEndpointType`,
    `PacketSide`, `PacketOperationType` and `ConnackCode` enums, and
    `FlaggedPacket`.
- `aikari.strings`: `split` (single-character delimiter, a trailing empty
  field dropped) and `expand_env` (`%NAME%` references).
- `aikari.crypto`: `gen_random_hex_secure` (positive even length) and
  `gen_random_hex_insecure` (time-seeded, so calls in the same second repeat).

## What it does not do

This is a library only. It has no command-line program. It does not include
an MQTT broker, an MQTT client or a network relay. `mqtt_packets` only
describes packets and rewrites their ids and topics, and sending them is left
to the caller.

## Installation

```
pip install .
```

## Examples

```python
from aikari.queues import PoolQueue, SinglePointMessageQueue

results = SinglePointMessageQueue()
with PoolQueue(4, lambda task: results.push(task * 2)) as pool:
    pool.push_task(21)
    print(results.pop())  # 42
```

```python
from aikari.mqtt_packets import get_packet_props, merge_topic

props = get_packet_props("/sys/product/device-0001/rpc/request/17")
print(props.endpoint_type, props.msg_id)  # PacketEndpointType.RPC 17
print(merge_topic(props))  # /sys/product/device-0001/rpc/request/17
```

```python
from aikari.logger import init_logger, get_logger

init_logger("PLS", 30, 46)
get_logger().info("ready")
```

## Running the tests

```
pip install .[test]
pytest
```