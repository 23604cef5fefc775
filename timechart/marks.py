from __future__ import annotations

from timechart.errors import ChartConfigError
from timechart.geometry import GeometryMapper, PlotRect
from timechart.options import ChartOptions
from timechart.raster.context import DrawingContext
from timechart.series import Series


LINE_WIDTH_PX = 2.0
MARKER_RADIUS_PX = 3.0
BAR_WIDTH_RATIO = 0.8


def bar_width(rect: PlotRect, count: int) -> float:
    if count <= 0:
        return 0.0
    return BAR_WIDTH_RATIO * rect.width / count


def draw_series(ctx: DrawingContext, series: Series, mapper: GeometryMapper, options: ChartOptions) -> None:
    if series.is_empty:
        return
    if options.kind == "line":
        _draw_line(ctx, series, mapper, options)
    elif options.kind == "bar":
        _draw_bars(ctx, series, mapper, options)
    else:
        raise ChartConfigError(f"unsupported chart kind: {options.kind!r}")


def _draw_line(ctx: DrawingContext, series: Series, mapper: GeometryMapper, options: ChartOptions) -> None:
    xs, ys = mapper.map_series(series)
    points = list(zip(xs.tolist(), ys.tolist(), strict=True))
    bottom = mapper.rect.bottom

    # Stroke, then area fill, then markers; markers must stay on top of the fill.
    ctx.stroke_polyline(points, options.stroke_color, LINE_WIDTH_PX)
    area = points + [(points[-1][0], bottom), (points[0][0], bottom)]
    ctx.fill_polygon(area, options.fill_color)
    for x, y in points:
        ctx.fill_circle(x, y, MARKER_RADIUS_PX, options.stroke_color)


def _draw_bars(ctx: DrawingContext, series: Series, mapper: GeometryMapper, options: ChartOptions) -> None:
    xs, ys = mapper.map_series(series)
    width = bar_width(mapper.rect, len(series))
    bottom = mapper.rect.bottom
    for x, y in zip(xs.tolist(), ys.tolist(), strict=True):
        ctx.fill_rect(x - width / 2.0, y, width, bottom - y, options.stroke_color)
