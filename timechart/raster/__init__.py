from .canvas import RGBA, TRANSPARENT, blit, clear, composite, draw_hline, draw_vline, fill_rect, new_canvas
from .context import DrawingContext, RasterContext
from .draw_lines import draw_polyline
from .draw_shapes import fill_disc, fill_polygon
from .draw_text import draw_text, text_size
from .layers import LayerCache

__all__ = [
    "RGBA",
    "TRANSPARENT",
    "DrawingContext",
    "LayerCache",
    "RasterContext",
    "blit",
    "clear",
    "composite",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_disc",
    "fill_polygon",
    "fill_rect",
    "new_canvas",
    "text_size",
]
