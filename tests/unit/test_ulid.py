"""Unit tests for the ULID request-id utility (app/utils/ulid.py).

Covers:
  - generate_ulid() returns a 26-char Crockford Base32 string
  - 1,000 generated ULIDs are unique
  - ULIDs sort in generation order across milliseconds
  - Safe to use directly as the X-EvenKeel-Request-ID header value
"""

from __future__ import annotations

import re
import threading
import time

from app.utils.ulid import generate_ulid

# Crockford Base32 charset: 0-9 and A-Z, excluding I, L, O, U
ULID_CHARSET = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


def test_generate_ulid_format() -> None:
    """generate_ulid() returns a 26-char uppercase Crockford Base32 str."""
    result = generate_ulid()
    assert isinstance(result, str)
    assert ULID_CHARSET.match(result), f"ULID {result!r} has an invalid format"


def test_generate_ulid_unique_1000() -> None:
    """1,000 generated ULIDs must all be unique."""
    ulids = [generate_ulid() for _ in range(1000)]
    assert len(set(ulids)) == 1000
    assert all(ULID_CHARSET.match(u) for u in ulids)


def test_generate_ulid_lexicographic_order() -> None:
    """ULIDs from a later millisecond sort after earlier ones."""
    first_batch = [generate_ulid() for _ in range(10)]
    time.sleep(0.002)
    second_batch = [generate_ulid() for _ in range(10)]
    assert all(b > a for a in first_batch for b in second_batch)


def test_generate_ulid_thread_safe() -> None:
    """generate_ulid() produces unique values across threads."""
    results: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        ulids = [generate_ulid() for _ in range(50)]
        with lock:
            results.extend(ulids)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(results)) == 500


def test_generate_ulid_valid_as_http_header_value() -> None:
    """Request IDs are set verbatim as a header value."""
    ulid = generate_ulid()
    assert all(0x20 <= ord(c) <= 0x7E for c in ulid)
    assert not set("\r\n\x00:") & set(ulid)
