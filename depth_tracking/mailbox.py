"""Single-slot, latest-wins hand-off between the acquisition thread and the
per-tick consumer."""
from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LatestSlot(Generic[T]):
    """
    Holds at most one value. ``put`` overwrites an unconsumed value,
    ``take`` never blocks and returns ``None`` when nothing new arrived.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self.puts = 0
        self.dropped = 0

    def put(self, value: T) -> None:
        with self._lock:
            if self._value is not None:
                self.dropped += 1
            self._value = value
            self.puts += 1

    def take(self) -> Optional[T]:
        with self._lock:
            value, self._value = self._value, None
            return value

    def has_value(self) -> bool:
        with self._lock:
            return self._value is not None
