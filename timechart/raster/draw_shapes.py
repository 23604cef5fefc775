from __future__ import annotations

import math

import numpy as np

from timechart.raster.canvas import RGBA, composite


def fill_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    x0 = max(0, int(math.floor(cx - radius)))
    x1 = min(dst.shape[1], int(math.ceil(cx + radius)) + 1)
    y0 = max(0, int(math.floor(cy - radius)))
    y1 = min(dst.shape[0], int(math.ceil(cy + radius)) + 1)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    # Pixel centers sit at +0.5 so a disc at an integer center stays symmetric.
    inside = (xx + 0.5 - cx) ** 2 + (yy + 0.5 - cy) ** 2 <= radius * radius
    if not np.any(inside):
        return
    composite(dst[y0:y1, x0:x1], color, coverage=inside.astype(np.float32))


def fill_polygon(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA) -> None:
    """Scanline fill with the even-odd rule, sampling at pixel centers."""
    if xs.size < 3 or xs.size != ys.size:
        return
    x0s = xs.astype(np.float64)
    y0s = ys.astype(np.float64)
    x1s = np.roll(x0s, -1)
    y1s = np.roll(y0s, -1)

    row_start = max(0, int(math.floor(float(np.min(y0s)))))
    row_end = min(dst.shape[0] - 1, int(math.ceil(float(np.max(y0s)))))
    for row in range(row_start, row_end + 1):
        yc = row + 0.5
        crossing = ((y0s <= yc) & (y1s > yc)) | ((y1s <= yc) & (y0s > yc))
        if not np.any(crossing):
            continue
        ax, ay, bx, by = x0s[crossing], y0s[crossing], x1s[crossing], y1s[crossing]
        hits = np.sort(ax + (yc - ay) * (bx - ax) / (by - ay))
        for left, right in zip(hits[0::2].tolist(), hits[1::2].tolist(), strict=False):
            xa = max(0, int(math.ceil(left - 0.5)))
            xb = min(dst.shape[1] - 1, int(math.floor(right - 0.5)))
            if xa <= xb:
                composite(dst[row, xa : xb + 1], color)
