from __future__ import annotations

from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """
    Observer slot for schedule notifications.

    The scheduling service emits project ids through it after a recalculation
    is committed or rejected; listeners (dashboards, exporters, caches) run
    synchronously in the emitting thread, in connection order.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], None]] = []
        self._lock: RLock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def connect(self, listener: Callable[[T], None]) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def disconnect(self, listener: Callable[[T], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, payload: T) -> None:
        """
        Call every listener with ``payload``.

        A listener held through a dead ``weakref.proxy`` raises ReferenceError;
        it is dropped. Any other exception propagates to the emitter.
        """
        with self._lock:
            listeners = list(self._listeners)
        dead: list[Callable[[T], None]] = []
        for listener in listeners:
            try:
                listener(payload)
            except ReferenceError:
                dead.append(listener)
        if dead:
            with self._lock:
                self._listeners = [cb for cb in self._listeners if not any(cb is d for d in dead)]
