"""Clock helpers; components take a clock so tests can pin time."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def epoch_seconds(value: datetime) -> int:
    return int(value.timestamp())
