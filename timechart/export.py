from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from timechart.surface import ChartSurface


def to_image(frame_rgba: np.ndarray) -> Image.Image:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    if frame_rgba.shape[0] == 0 or frame_rgba.shape[1] == 0:
        raise ValueError("frame_rgba must be non-empty")
    return Image.fromarray(np.ascontiguousarray(frame_rgba))


def save_png(source: Union[ChartSurface, np.ndarray], path: Union[str, Path]) -> Path:
    """Write the surface's current canvas (or a raw RGBA frame) as a PNG file."""
    if isinstance(source, ChartSurface):
        frame = source.rgba
        if frame is None:
            raise ValueError("surface is not attached; nothing to export")
    else:
        frame = source
    out = Path(path)
    to_image(frame).save(out, format="PNG")
    return out
