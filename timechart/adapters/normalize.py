from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from timechart.errors import ChartDataError
from timechart.series import DataPoint, Series


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


DEFAULT_X_KEY = "date"
DEFAULT_Y_KEY = "value"


def normalize_series(
    data: Any,
    *,
    x_key: str = DEFAULT_X_KEY,
    y_key: str = DEFAULT_Y_KEY,
) -> Series:
    """Build a Series from points, (timestamp, value) pairs, keyed records or a DataFrame.

    Order is preserved as given; callers are expected to pass chronological data.
    """
    if data is None:
        return Series()
    if isinstance(data, Series):
        return data
    if pd is not None and isinstance(data, pd.DataFrame):
        return _from_dataframe(data, x_key=x_key, y_key=y_key)
    if isinstance(data, (str, bytes, bytearray, Mapping)) or not isinstance(data, Iterable):
        raise ChartDataError(f"unsupported series input type: {type(data)!r}")

    points: list[DataPoint] = []
    for i, record in enumerate(data):
        points.append(_coerce_record(record, index=i, x_key=x_key, y_key=y_key))
    return Series.of(points)


def _coerce_record(record: Any, *, index: int, x_key: str, y_key: str) -> DataPoint:
    if isinstance(record, DataPoint):
        return record
    if isinstance(record, Mapping):
        if x_key not in record or y_key not in record:
            raise ChartDataError(f"record {index} is missing `{x_key}` or `{y_key}`")
        raw_ts, raw_value = record[x_key], record[y_key]
    elif isinstance(record, Sequence) and not isinstance(record, (str, bytes, bytearray)):
        if len(record) != 2:
            raise ChartDataError(f"record {index} must be a (timestamp, value) pair")
        raw_ts, raw_value = record[0], record[1]
    else:
        raise ChartDataError(f"record {index} has unsupported type: {type(record)!r}")
    try:
        return DataPoint.of(raw_ts, raw_value)
    except ChartDataError as exc:
        raise ChartDataError(f"record {index}: {exc}") from exc


def _from_dataframe(frame: Any, *, x_key: str, y_key: str) -> Series:
    for key in (x_key, y_key):
        if key not in frame.columns:
            raise ChartDataError(f"column not found: {key}")
    points = [
        _coerce_record((ts, value), index=i, x_key=x_key, y_key=y_key)
        for i, (ts, value) in enumerate(zip(frame[x_key].tolist(), frame[y_key].tolist(), strict=True))
    ]
    return Series.of(points)
