from __future__ import annotations

from typing import Literal, Protocol, Sequence

import numpy as np

from timechart.raster.canvas import RGBA, TRANSPARENT, blit, clear, draw_hline, draw_vline, fill_rect, new_canvas
from timechart.raster.draw_lines import draw_polyline
from timechart.raster.draw_shapes import fill_disc, fill_polygon
from timechart.raster.draw_text import DEFAULT_FONT_FAMILY, draw_text, text_size


TextAlign = Literal["left", "center", "right"]
TextBaseline = Literal["top", "middle", "bottom"]
Point = tuple[float, float]


class DrawingContext(Protocol):
    """2D drawing calls in logical (CSS-like) pixels."""

    def clear(self) -> None:
        ...

    def stroke_line(self, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
        ...

    def stroke_polyline(self, points: Sequence[Point], color: RGBA, width: float = 1.0) -> None:
        ...

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        ...

    def fill_circle(self, cx: float, cy: float, radius: float, color: RGBA) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGBA) -> None:
        ...

    def fill_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        font_px: float,
        align: TextAlign = "left",
        baseline: TextBaseline = "top",
        bold: bool = False,
    ) -> None:
        ...


class RasterContext:
    """DrawingContext over an RGBA numpy canvas scaled by a device pixel ratio."""

    def __init__(
        self,
        width: float,
        height: float,
        *,
        pixel_ratio: float = 1.0,
        background: RGBA = TRANSPARENT,
        font_family: str = DEFAULT_FONT_FAMILY,
    ) -> None:
        if pixel_ratio <= 0:
            raise ValueError("pixel_ratio must be > 0")
        if width < 0 or height < 0:
            raise ValueError("width and height must be >= 0")
        self.width = float(width)
        self.height = float(height)
        self.pixel_ratio = float(pixel_ratio)
        self.background = background
        self.font_family = font_family
        self.rgba = new_canvas(
            int(round(self.width * self.pixel_ratio)),
            int(round(self.height * self.pixel_ratio)),
            color=background,
        )

    @property
    def device_size(self) -> tuple[int, int]:
        return (int(self.rgba.shape[1]), int(self.rgba.shape[0]))

    def snapshot(self) -> np.ndarray:
        return self.rgba.copy()

    def restore(self, frame: np.ndarray) -> None:
        if frame.shape != self.rgba.shape:
            raise ValueError("snapshot shape does not match canvas")
        blit(self.rgba, frame)

    def clear(self) -> None:
        clear(self.rgba, self.background)

    def stroke_line(self, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
        ix0, iy0 = self._device(x0, y0)
        ix1, iy1 = self._device(x1, y1)
        brush = self._brush(width)
        if brush <= 1 and iy0 == iy1:
            draw_hline(self.rgba, ix0, ix1, iy0, color)
        elif brush <= 1 and ix0 == ix1:
            draw_vline(self.rgba, ix0, iy0, iy1, color)
        else:
            self.stroke_polyline(((x0, y0), (x1, y1)), color, width)

    def stroke_polyline(self, points: Sequence[Point], color: RGBA, width: float = 1.0) -> None:
        if len(points) < 2:
            return
        xs, ys = self._device_arrays(points)
        draw_polyline(self.rgba, xs, ys, color, width=self._brush(width))

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        if len(points) < 3:
            return
        xs = np.asarray([p[0] for p in points], dtype=np.float64) * self.pixel_ratio
        ys = np.asarray([p[1] for p in points], dtype=np.float64) * self.pixel_ratio
        fill_polygon(self.rgba, xs, ys, color)

    def fill_circle(self, cx: float, cy: float, radius: float, color: RGBA) -> None:
        r = self.pixel_ratio
        fill_disc(self.rgba, cx * r, cy * r, radius * r, color)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGBA) -> None:
        if width <= 0 or height <= 0:
            return
        r = self.pixel_ratio
        x0 = int(round(x * r))
        y0 = int(round(y * r))
        x1 = max(x0 + 1, int(round((x + width) * r)))
        y1 = max(y0 + 1, int(round((y + height) * r)))
        fill_rect(self.rgba, x0, y0, x1 - 1, y1 - 1, color)

    def fill_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        font_px: float,
        align: TextAlign = "left",
        baseline: TextBaseline = "top",
        bold: bool = False,
    ) -> None:
        if not text:
            return
        size_px = font_px * self.pixel_ratio
        embolden = 2 if bold else 1
        w, h = text_size(text, font_family=self.font_family, font_size_px=size_px, embolden_px=embolden)
        px, py = self._device(x, y)
        if align == "center":
            px -= w // 2
        elif align == "right":
            px -= w
        if baseline == "middle":
            py -= h // 2
        elif baseline == "bottom":
            py -= h
        draw_text(
            self.rgba,
            px,
            py,
            text,
            color,
            font_family=self.font_family,
            font_size_px=size_px,
            embolden_px=embolden,
        )

    def _device(self, x: float, y: float) -> tuple[int, int]:
        return (int(round(x * self.pixel_ratio)), int(round(y * self.pixel_ratio)))

    def _device_arrays(self, points: Sequence[Point]) -> tuple[np.ndarray, np.ndarray]:
        arr = np.asarray(points, dtype=np.float64).reshape(-1, 2) * self.pixel_ratio
        return np.rint(arr[:, 0]).astype(np.int32), np.rint(arr[:, 1]).astype(np.int32)

    def _brush(self, width: float) -> int:
        return max(1, int(round(width * self.pixel_ratio)))
