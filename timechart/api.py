from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from timechart.options import ChartOptions, ChartTheme
from timechart.surface import ChartSurface, HeadlessHost


def render_chart(
    data: Any,
    *,
    width: float,
    options: ChartOptions | Mapping[str, Any] | None = None,
    device_pixel_ratio: float = 1.0,
    theme: ChartTheme | None = None,
) -> np.ndarray:
    """Render one static frame offscreen and return a copy of its RGBA pixels."""
    if width <= 0:
        raise ValueError("width must be > 0")
    surface = ChartSurface(data, options, theme=theme, cache_base_layer=False)
    with surface.mounted(HeadlessHost(width, device_pixel_ratio=device_pixel_ratio)):
        frame = surface.rgba
        assert frame is not None
        return frame.copy()
