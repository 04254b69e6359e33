"""Per-type singleton holders of shared, lock-guarded state."""

from __future__ import annotations

import copy
import threading
from typing import Any, ClassVar, Dict, Generic, Tuple, Type, TypeVar

S = TypeVar("S")


class StatesManager(Generic[S]):
    """Owns one state object and guards every access to it with a lock.

    The state is built from ``store_type.create_default()`` when the type
    provides it, otherwise by calling ``store_type()``.
    """

    _instances: ClassVar[Dict[Tuple[type, type], "StatesManager[Any]"]] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, store_type: Type[S]) -> None:
        factory = getattr(store_type, "create_default", None)
        self._state: S = factory() if callable(factory) else store_type()
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls, store_type: Type[S]) -> "StatesManager[S]":
        """Return the single manager for ``store_type``, creating it once."""
        key = (cls, store_type)
        with cls._registry_lock:
            instance = cls._instances.get(key)
            if instance is None:
                instance = cls(store_type)
                cls._instances[key] = instance
            return instance

    def get_state(self) -> S:
        """Return a shallow snapshot of the whole state."""
        with self._lock:
            return copy.copy(self._state)

    def get_val(self, key: str) -> Any:
        with self._lock:
            self._check_key(key)
            return getattr(self._state, key)

    def set_val(self, key: str, value: Any) -> None:
        with self._lock:
            self._check_key(key)
            setattr(self._state, key, value)

    def reset_val(self, key: str) -> None:
        """Clear a field by setting it to ``None``."""
        with self._lock:
            self._check_key(key)
            setattr(self._state, key, None)

    def _check_key(self, key: str) -> None:
        if not hasattr(self._state, key):
            raise AttributeError(
                f"{type(self._state).__name__} has no field {key!r}"
            )