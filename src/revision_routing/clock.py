from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class Clock(Protocol):
    def now_ms(self) -> int: ...


@dataclass(frozen=True)
class SystemClock:
    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class FixedClock:
    fixed_ms: int

    def now_ms(self) -> int:
        return self.fixed_ms


def parse_timestamp_ms(value: object) -> int | None:
    """Parse an ISO-8601 timestamp carrying a UTC offset into epoch milliseconds.

    Returns None for anything that is not such a string; naive timestamps are
    rejected because their instant is ambiguous.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        return None
    return (parsed - _EPOCH) // _ONE_MS


def format_timestamp(timestamp_ms: int) -> str:
    return (_EPOCH + timestamp_ms * _ONE_MS).isoformat()
