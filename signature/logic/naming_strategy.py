from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol

from core.helpers.date_time_helper import unix_millis


class NamingStrategy(Protocol):
    def next_name(self) -> str: ...


class TimestampNamingStrategy:
    """
    Default: signed_<unix-millis>.pdf

    Names handed out by one instance are strictly increasing; a request landing
    in an already used millisecond gets the next free one.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None, prefix: str = "signed_") -> None:
        self._clock = clock or unix_millis
        self._prefix = prefix
        self._last = 0
        self._lock = threading.Lock()

    def next_millis(self) -> int:
        with self._lock:
            now = self._clock()
            self._last = now if now > self._last else self._last + 1
            return self._last

    def next_name(self) -> str:
        return f"{self._prefix}{self.next_millis()}.pdf"
