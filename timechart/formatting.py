from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from timechart.series import Instant, to_epoch_seconds


def as_datetime(instant: Instant) -> datetime:
    return datetime.fromtimestamp(to_epoch_seconds(instant), tz=timezone.utc)


def format_currency(value: Any, decimals: int = 2) -> str:
    """Fixed decimals with comma thousands separators; None renders as zero."""
    if value is None:
        value = 0.0
    return f"{float(value):,.{decimals}f}"


def format_date(instant: Instant | None) -> str:
    if instant is None:
        return ""
    return as_datetime(instant).strftime("%Y-%m-%d")


def format_short_date(instant: Instant | None) -> str:
    if instant is None:
        return ""
    return as_datetime(instant).strftime("%m/%d")


@dataclass(frozen=True)
class Formatters:
    """Label formatting collaborators used by the axis renderer and tooltip."""

    currency: Callable[[float], str] = format_currency
    short_date: Callable[[float], str] = format_short_date
    date: Callable[[float], str] = format_date
