from __future__ import annotations

import numpy as np

from timechart.formatting import Formatters
from timechart.geometry import DataDomain, GeometryMapper, PlotRect
from timechart.options import ChartTheme
from timechart.raster.context import DrawingContext
from timechart.series import Series


VALUE_TICK_COUNT = 5
TIME_TICK_LIMIT = 7
TICK_LABEL_GAP_PX = 5.0
TITLE_TOP_PX = 5.0


def value_ticks(domain: DataDomain, count: int = VALUE_TICK_COUNT) -> np.ndarray:
    if count <= 0:
        raise ValueError("count must be > 0")
    if domain.y_degenerate or count == 1:
        return np.asarray([domain.min_y], dtype=np.float64)
    return np.linspace(domain.min_y, domain.max_y, count, dtype=np.float64)


def time_tick_indices(length: int, limit: int = TIME_TICK_LIMIT) -> list[int]:
    """Evenly spaced indices into the series (not evenly spaced in time)."""
    count = min(limit, length)
    if count <= 0:
        return []
    if count == 1:
        return [0]
    return [(i * (length - 1)) // (count - 1) for i in range(count)]


def draw_grid(
    ctx: DrawingContext,
    series: Series,
    mapper: GeometryMapper,
    theme: ChartTheme,
    formatters: Formatters,
) -> None:
    rect = mapper.rect
    for value in value_ticks(mapper.domain).tolist():
        y = mapper.scale_y(value)
        ctx.stroke_line(rect.left, y, rect.right, y, theme.grid_color)
        ctx.fill_text(
            rect.left - TICK_LABEL_GAP_PX,
            y,
            formatters.currency(value),
            theme.tick_label_color,
            font_px=theme.tick_font_px,
            align="right",
            baseline="middle",
        )

    for index in time_tick_indices(len(series)):
        timestamp = series[index].timestamp
        x = mapper.scale_x(timestamp)
        ctx.stroke_line(x, rect.top, x, rect.bottom, theme.grid_color)
        ctx.fill_text(
            x,
            rect.bottom + TICK_LABEL_GAP_PX,
            formatters.short_date(timestamp),
            theme.tick_label_color,
            font_px=theme.tick_font_px,
            align="center",
            baseline="top",
        )


def draw_axes(ctx: DrawingContext, rect: PlotRect, theme: ChartTheme) -> None:
    ctx.stroke_line(rect.left, rect.bottom, rect.right, rect.bottom, theme.axis_color)
    ctx.stroke_line(rect.left, rect.top, rect.left, rect.bottom, theme.axis_color)


def draw_label(ctx: DrawingContext, label: str, canvas_width: float, theme: ChartTheme) -> None:
    if not label:
        return
    ctx.fill_text(
        canvas_width / 2.0,
        TITLE_TOP_PX,
        label,
        theme.title_color,
        font_px=theme.title_font_px,
        align="center",
        baseline="top",
        bold=True,
    )
