from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Union

import numpy as np

from timechart.errors import ChartDataError


Instant = Union[datetime, date, float, int, str, np.datetime64]


def to_epoch_seconds(value: Instant) -> float:
    """Normalize an instant to float seconds since the Unix epoch (naive datetimes are UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp()
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise ChartDataError("timestamp is NaT")
        return float(value.astype("datetime64[us]").astype(np.int64)) / 1e6
    if isinstance(value, bool):
        raise ChartDataError(f"unsupported timestamp type: {type(value)!r}")
    if isinstance(value, (int, float, Decimal, np.integer, np.floating)):
        out = float(value)
        if not np.isfinite(out):
            raise ChartDataError(f"timestamp is not finite: {value!r}")
        return out
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ChartDataError(f"unparseable timestamp: {value!r}") from exc
        return to_epoch_seconds(parsed)
    raise ChartDataError(f"unsupported timestamp type: {type(value)!r}")


def to_value(raw: Any) -> float:
    if isinstance(raw, bool) or raw is None:
        raise ChartDataError(f"value is not numeric: {raw!r}")
    try:
        out = float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"value is not numeric: {raw!r}") from exc
    if not np.isfinite(out):
        raise ChartDataError(f"value is not finite: {raw!r}")
    return out


@dataclass(frozen=True)
class DataPoint:
    timestamp: float
    value: float

    @classmethod
    def of(cls, timestamp: Instant, value: Any) -> "DataPoint":
        return cls(timestamp=to_epoch_seconds(timestamp), value=to_value(value))


@dataclass(frozen=True)
class Series:
    """Points in chronological order. Callers pass them sorted; no sorting happens here."""

    points: tuple[DataPoint, ...] = ()
    timestamps: np.ndarray = field(init=False, repr=False, compare=False)
    values: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        points = tuple(self.points)
        ts = np.asarray([p.timestamp for p in points], dtype=np.float64)
        vs = np.asarray([p.value for p in points], dtype=np.float64)
        ts.setflags(write=False)
        vs.setflags(write=False)
        object.__setattr__(self, "points", points)
        object.__setattr__(self, "timestamps", ts)
        object.__setattr__(self, "values", vs)

    @classmethod
    def of(cls, points: Iterable[DataPoint]) -> "Series":
        return cls(points=tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> DataPoint:
        return self.points[index]

    def __iter__(self):
        return iter(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points
