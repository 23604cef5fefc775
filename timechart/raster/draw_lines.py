from __future__ import annotations

import numpy as np

from timechart.raster.canvas import RGBA, composite


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    if xs.size < 2:
        return
    # Each pixel is painted once per polyline so translucent strokes do not darken at joints.
    hit = np.zeros(dst.shape[:2], dtype=bool)
    for i in range(xs.size - 1):
        _rasterize_segment(hit, int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), width=width)
    if np.any(hit):
        composite(dst, color, coverage=hit.astype(np.float32))


def _rasterize_segment(hit: np.ndarray, x0: int, y0: int, x1: int, y1: int, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _stamp_square_brush(hit, x0, y0, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp_square_brush(hit: np.ndarray, x: int, y: int, width: int) -> None:
    radius = max(0, width // 2)
    ya = max(0, y - radius)
    yb = min(hit.shape[0], y + radius + 1)
    xa = max(0, x - radius)
    xb = min(hit.shape[1], x + radius + 1)
    if ya >= yb or xa >= xb:
        return
    hit[ya:yb, xa:xb] = True
