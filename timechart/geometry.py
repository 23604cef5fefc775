from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from timechart.series import Series


DEFAULT_HEADROOM_RATIO = 0.1


@dataclass(frozen=True)
class Padding:
    top: float = 20.0
    right: float = 20.0
    bottom: float = 30.0
    left: float = 50.0


DEFAULT_PADDING = Padding()


@dataclass(frozen=True)
class PlotRect:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_canvas(cls, width: float, height: float, padding: Padding = DEFAULT_PADDING) -> "PlotRect":
        # Containers smaller than the padding collapse to a zero-area rect.
        return cls(
            left=padding.left,
            top=padding.top,
            width=max(0.0, float(width) - padding.left - padding.right),
            height=max(0.0, float(height) - padding.top - padding.bottom),
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class DataDomain:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def x_degenerate(self) -> bool:
        return self.max_x == self.min_x

    @property
    def y_degenerate(self) -> bool:
        return self.max_y == self.min_y


def compute_domain(series: Series, headroom_ratio: float = DEFAULT_HEADROOM_RATIO) -> DataDomain:
    """Time extent plus value extent widened by `headroom_ratio` of each extreme's magnitude.

    For non-negative data this is `min * 0.9` / `max * 1.1`; taking the magnitude keeps
    every value inside the domain when the extremes are negative.
    """
    if series.is_empty:
        raise ValueError("cannot compute the domain of an empty series")
    vmin = float(np.min(series.values))
    vmax = float(np.max(series.values))
    return DataDomain(
        min_x=float(np.min(series.timestamps)),
        max_x=float(np.max(series.timestamps)),
        min_y=vmin - abs(vmin) * headroom_ratio,
        max_y=vmax + abs(vmax) * headroom_ratio,
    )


@dataclass(frozen=True)
class GeometryMapper:
    """Scale functions from data space onto one plot rectangle.

    Degenerate spans map to the center of the rectangle on that axis.
    """

    domain: DataDomain
    rect: PlotRect

    def scale_x(self, timestamp: float) -> float:
        d = self.domain
        if d.x_degenerate:
            return self.rect.left + self.rect.width / 2.0
        return self.rect.left + self.rect.width * (float(timestamp) - d.min_x) / (d.max_x - d.min_x)

    def scale_y(self, value: float) -> float:
        d = self.domain
        if d.y_degenerate:
            return self.rect.top + self.rect.height / 2.0
        return self.rect.bottom - self.rect.height * (float(value) - d.min_y) / (d.max_y - d.min_y)

    def map_series(self, series: Series) -> tuple[np.ndarray, np.ndarray]:
        d = self.domain
        if d.x_degenerate:
            xs = np.full(len(series), self.rect.left + self.rect.width / 2.0, dtype=np.float64)
        else:
            xs = self.rect.left + self.rect.width * (series.timestamps - d.min_x) / (d.max_x - d.min_x)
        if d.y_degenerate:
            ys = np.full(len(series), self.rect.top + self.rect.height / 2.0, dtype=np.float64)
        else:
            ys = self.rect.bottom - self.rect.height * (series.values - d.min_y) / (d.max_y - d.min_y)
        return xs, ys

    def nearest_index(self, series: Series, x: float, y: float, max_distance: float) -> int | None:
        """Index of the point closest to (x, y) in pixels, if strictly within `max_distance`.

        Ties resolve to the earliest point in sequence order.
        """
        if series.is_empty:
            return None
        xs, ys = self.map_series(series)
        distances = np.hypot(xs - float(x), ys - float(y))
        index = int(np.argmin(distances))
        if not distances[index] < max_distance:
            return None
        return index


def build_mapper(series: Series, rect: PlotRect, headroom_ratio: float = DEFAULT_HEADROOM_RATIO) -> GeometryMapper | None:
    if series.is_empty:
        return None
    return GeometryMapper(domain=compute_domain(series, headroom_ratio=headroom_ratio), rect=rect)
