from timechart.api import render_chart
from timechart.errors import ChartConfigError, ChartDataError, ChartError
from timechart.formatting import Formatters, format_currency, format_date, format_short_date
from timechart.geometry import DataDomain, GeometryMapper, Padding, PlotRect, build_mapper, compute_domain
from timechart.options import ChartOptions, ChartTheme
from timechart.series import DataPoint, Series
from timechart.surface import ChartHost, ChartSurface, HeadlessHost, PointerEvent
from timechart.tooltip import HoverState, TooltipController, TooltipOverlay

__all__ = [
    "ChartConfigError",
    "ChartDataError",
    "ChartError",
    "ChartHost",
    "ChartOptions",
    "ChartSurface",
    "ChartTheme",
    "DataDomain",
    "DataPoint",
    "Formatters",
    "GeometryMapper",
    "HeadlessHost",
    "HoverState",
    "Padding",
    "PlotRect",
    "PointerEvent",
    "Series",
    "TooltipController",
    "TooltipOverlay",
    "build_mapper",
    "compute_domain",
    "format_currency",
    "format_date",
    "format_short_date",
    "render_chart",
]
