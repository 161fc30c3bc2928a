from __future__ import annotations

import re
import threading

from signature.logic.naming_strategy import TimestampNamingStrategy


def test_name_format() -> None:
    naming = TimestampNamingStrategy(clock=lambda: 1_700_000_000_123)
    assert naming.next_name() == "signed_1700000000123.pdf"


def test_real_clock_produces_millis() -> None:
    assert re.fullmatch(r"signed_\d{13}\.pdf", TimestampNamingStrategy().next_name())


def test_same_millisecond_gets_next_free_value() -> None:
    naming = TimestampNamingStrategy(clock=lambda: 1000)
    assert [naming.next_name() for _ in range(3)] == [
        "signed_1000.pdf", "signed_1001.pdf", "signed_1002.pdf",
    ]


def test_concurrent_requests_never_collide() -> None:
    naming = TimestampNamingStrategy(clock=lambda: 5)
    names: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            name = naming.next_name()
            with lock:
                names.append(name)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(names) == len(set(names)) == 400
