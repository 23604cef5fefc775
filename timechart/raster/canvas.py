from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)


def new_canvas(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    if width < 0 or height < 0:
        raise ValueError("canvas width/height must be >= 0")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    clear(canvas, color)
    return canvas


def clear(dst: np.ndarray, color: RGBA = TRANSPARENT) -> None:
    dst[:, :, 0] = color[0]
    dst[:, :, 1] = color[1]
    dst[:, :, 2] = color[2]
    dst[:, :, 3] = color[3]


def composite(view: np.ndarray, color: RGBA, coverage: np.ndarray | float = 1.0) -> None:
    """Source-over blend of a flat color into `view` (shape (..., 4)) in place."""
    if view.size == 0:
        return
    src_alpha = np.broadcast_to(
        np.asarray(coverage, dtype=np.float32) * (color[3] / 255.0),
        view.shape[:-1],
    )
    if not np.any(src_alpha > 0):
        return
    dst_rgb = view[..., :3].astype(np.float32)
    dst_alpha = view[..., 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32)

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[..., None] + dst_rgb * (dst_alpha * (1.0 - src_alpha))[..., None]
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    view[..., :3] = np.clip(np.rint(out_rgb_num / safe_alpha[..., None]), 0, 255).astype(np.uint8)
    view[..., 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    composite(dst[y, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    composite(dst[ya : yb + 1, x], color)


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Fill the inclusive pixel box spanned by the two corners."""
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if right < left or bottom < top:
        return
    composite(dst[top : bottom + 1, left : right + 1], color)


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return
    dst[y0:y1, x0:x1] = src[: y1 - y0, : x1 - x0]
