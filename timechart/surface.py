from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import Any, Callable, Iterator, Literal, Mapping, Optional, Protocol

import numpy as np

from timechart.adapters import normalize_series
from timechart.axes import draw_axes, draw_grid, draw_label
from timechart.errors import ChartConfigError, ChartError
from timechart.formatting import Formatters
from timechart.geometry import DEFAULT_PADDING, GeometryMapper, Padding, PlotRect, build_mapper
from timechart.marks import draw_series
from timechart.options import ChartOptions, ChartTheme
from timechart.raster import LayerCache, RasterContext
from timechart.raster.context import DrawingContext
from timechart.series import Series
from timechart.tooltip import HIGHLIGHT_RADIUS_PX, Highlight, HoverState, TooltipController, TooltipOverlay


LOGGER = logging.getLogger(__name__)

PointerEventType = Literal["pointer_move", "pointer_leave"]
POINTER_EVENT_TYPES: tuple[PointerEventType, ...] = ("pointer_move", "pointer_leave")


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in logical pixels relative to the canvas's top-left corner."""

    event_type: PointerEventType
    x: Optional[float] = None
    y: Optional[float] = None


PointerHandler = Callable[[PointerEvent], None]


class ChartHost(Protocol):
    def container_width(self) -> float:
        ...

    def device_pixel_ratio(self) -> float:
        ...

    def add_pointer_listener(self, event_type: PointerEventType, handler: PointerHandler) -> None:
        ...

    def remove_pointer_listener(self, event_type: PointerEventType, handler: PointerHandler) -> None:
        ...


class HeadlessHost:
    """In-process host: fixed container width, explicit event dispatch."""

    def __init__(self, width: float, device_pixel_ratio: float = 1.0) -> None:
        if width < 0:
            raise ValueError("width must be >= 0")
        self.width = float(width)
        self.pixel_ratio = float(device_pixel_ratio)
        self._listeners: dict[str, list[PointerHandler]] = {name: [] for name in POINTER_EVENT_TYPES}

    def container_width(self) -> float:
        return self.width

    def device_pixel_ratio(self) -> float:
        return self.pixel_ratio

    def add_pointer_listener(self, event_type: PointerEventType, handler: PointerHandler) -> None:
        if event_type not in self._listeners:
            raise ValueError(f"unknown pointer event type: {event_type}")
        self._listeners[event_type].append(handler)

    def remove_pointer_listener(self, event_type: PointerEventType, handler: PointerHandler) -> None:
        handlers = self._listeners.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: PointerEventType | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    def dispatch(self, event: PointerEvent) -> None:
        for handler in list(self._listeners.get(event.event_type, [])):
            handler(event)

    def move(self, x: float, y: float) -> None:
        self.dispatch(PointerEvent("pointer_move", x=x, y=y))

    def leave(self) -> None:
        self.dispatch(PointerEvent("pointer_leave"))


@dataclass(frozen=True)
class Frame:
    """Geometry for one draw pass; rebuilt every pass and never mutated."""

    series: Series
    options: ChartOptions
    canvas_width: float
    rect: PlotRect
    mapper: GeometryMapper | None

    @classmethod
    def build(cls, series: Series, options: ChartOptions, canvas_width: float, padding: Padding = DEFAULT_PADDING) -> "Frame":
        rect = PlotRect.from_canvas(canvas_width, options.height, padding)
        mapper = None if rect.is_empty else build_mapper(series, rect)
        return cls(series=series, options=options, canvas_width=float(canvas_width), rect=rect, mapper=mapper)

    @property
    def drawable(self) -> bool:
        return self.mapper is not None


def draw_frame(
    ctx: DrawingContext,
    frame: Frame,
    theme: ChartTheme,
    formatters: Formatters,
    highlight: Highlight | None = None,
) -> None:
    """Full draw pass: clear, grid, series, axes, label, then the optional highlight marker."""
    ctx.clear()
    if frame.mapper is None:
        return
    if frame.options.show_grid:
        draw_grid(ctx, frame.series, frame.mapper, theme, formatters)
    draw_series(ctx, frame.series, frame.mapper, frame.options)
    draw_axes(ctx, frame.rect, theme)
    draw_label(ctx, frame.options.label, frame.canvas_width, theme)
    if highlight is not None:
        draw_highlight(ctx, highlight, theme)


def draw_highlight(ctx: DrawingContext, highlight: Highlight, theme: ChartTheme) -> None:
    ctx.fill_circle(highlight.x, highlight.y, HIGHLIGHT_RADIUS_PX, theme.highlight_color)


def _normalize(data: Any, options: ChartOptions) -> Series:
    return normalize_series(data, x_key=options.x_key, y_key=options.y_key)


def resolve_options(options: ChartOptions | Mapping[str, Any] | None) -> ChartOptions:
    if options is None:
        return ChartOptions()
    if isinstance(options, ChartOptions):
        return options
    if isinstance(options, Mapping):
        return ChartOptions.from_mapping(options)
    raise ChartConfigError(f"unsupported options type: {type(options)!r}")


class ChartSurface:
    """Owns one chart canvas: sizing, the draw pipeline, pointer wiring and lifecycle."""

    def __init__(
        self,
        data: Any = None,
        options: ChartOptions | Mapping[str, Any] | None = None,
        *,
        theme: ChartTheme | None = None,
        formatters: Formatters | None = None,
        padding: Padding = DEFAULT_PADDING,
        cache_base_layer: bool = True,
    ) -> None:
        self._options = resolve_options(options)
        self._series = _normalize(data, self._options)
        self._theme = theme or ChartTheme()
        self._formatters = formatters or Formatters()
        self._padding = padding
        self._cache_base_layer = cache_base_layer
        self._cache = LayerCache()
        self._host: ChartHost | None = None
        self._ctx: RasterContext | None = None
        self._frame: Frame | None = None
        self._listeners: list[tuple[PointerEventType, PointerHandler]] = []
        self._tooltip = TooltipController(self._redraw, self._formatters)

    @property
    def attached(self) -> bool:
        return self._host is not None

    @property
    def series(self) -> Series:
        return self._series

    @property
    def options(self) -> ChartOptions:
        return self._options

    @property
    def frame(self) -> Frame | None:
        return self._frame

    @property
    def rgba(self) -> np.ndarray | None:
        return None if self._ctx is None else self._ctx.rgba

    @property
    def pixel_ratio(self) -> float:
        return 1.0 if self._ctx is None else self._ctx.pixel_ratio

    @property
    def hover(self) -> HoverState:
        return self._tooltip.state

    @property
    def overlay(self) -> TooltipOverlay:
        return self._tooltip.overlay

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def attach(self, host: ChartHost) -> None:
        if self._host is not None:
            raise ChartError("surface is already attached")
        self._host = host
        try:
            self._sync_canvas()
            self._sync_listeners()
            self.draw_frame()
        except Exception:
            self.detach()
            raise
        LOGGER.debug("chart attached (%d listeners)", len(self._listeners))

    def update(self, data: Any = None, options: ChartOptions | Mapping[str, Any] | None = None) -> None:
        """Replace data and/or options (None keeps the current value) and redraw."""
        # Resolve both inputs before touching state so a bad update leaves the chart intact.
        resolved = self._options if options is None else resolve_options(options)
        series = self._series if data is None else _normalize(data, resolved)
        self._series = series
        self._options = resolved
        self._tooltip.reset()
        self._cache.invalidate()
        if self._host is None:
            return
        self._sync_canvas()
        self._sync_listeners()
        self.draw_frame()

    def on_resize(self) -> None:
        if self._host is None:
            return
        self._tooltip.reset()
        self._sync_canvas()
        self.draw_frame()

    def detach(self) -> None:
        host = self._host
        try:
            while self._listeners and host is not None:
                event_type, handler = self._listeners.pop()
                host.remove_pointer_listener(event_type, handler)
        finally:
            self._listeners.clear()
            self._tooltip.reset()
            self._cache.invalidate()
            self._frame = None
            self._ctx = None
            self._host = None
        LOGGER.debug("chart detached")

    @contextmanager
    def mounted(self, host: ChartHost) -> Iterator["ChartSurface"]:
        self.attach(host)
        try:
            yield self
        finally:
            self.detach()

    def draw_frame(self, highlight: Highlight | None = None) -> None:
        """Redraw the chart; without an explicit highlight the current hover highlight is kept."""
        self._render(highlight if highlight is not None else self._tooltip.highlight)

    def _render(self, highlight: Highlight | None) -> None:
        ctx = self._ctx
        if ctx is None:
            return
        frame = Frame.build(self._series, self._options, ctx.width, self._padding)
        self._frame = frame
        if not frame.drawable:
            LOGGER.debug(
                "skipping draw: %d points, plot rect %.0fx%.0f",
                len(frame.series),
                frame.rect.width,
                frame.rect.height,
            )
            ctx.clear()
            self._cache.invalidate()
            return

        key = (frame.series, frame.options, ctx.device_size, ctx.pixel_ratio)
        cached = self._cache.lookup(key) if self._cache_base_layer else None
        if cached is not None:
            ctx.restore(cached)
        else:
            draw_frame(ctx, frame, self._theme, self._formatters)
            if self._cache_base_layer:
                self._cache.store(key, ctx.snapshot())
        if highlight is not None:
            draw_highlight(ctx, highlight, self._theme)

    def handle_pointer(self, event: PointerEvent) -> None:
        if not self._options.show_tooltip:
            return
        if event.event_type == "pointer_leave":
            self._tooltip.pointer_leave()
            return
        frame = self._frame
        if frame is None or event.x is None or event.y is None:
            return
        self._tooltip.pointer_move(event.x, event.y, frame.series, frame.mapper, frame.options.label)

    def _redraw(self, highlight: Highlight | None) -> None:
        self._render(highlight)

    def _sync_canvas(self) -> None:
        assert self._host is not None
        width = max(0.0, float(self._host.container_width()))
        ratio = float(self._host.device_pixel_ratio() or 1.0)
        if ratio <= 0:
            ratio = 1.0
        ctx = self._ctx
        if ctx is not None and ctx.width == width and ctx.height == self._options.height and ctx.pixel_ratio == ratio:
            return
        self._ctx = RasterContext(
            width,
            self._options.height,
            pixel_ratio=ratio,
            background=self._theme.background,
            font_family=self._theme.font_family,
        )
        self._cache.invalidate()
        LOGGER.debug("canvas sized to %.0fx%d logical px at ratio %.2f", width, self._options.height, ratio)

    def _sync_listeners(self) -> None:
        assert self._host is not None
        wanted = self._options.show_tooltip
        if wanted and not self._listeners:
            for event_type in POINTER_EVENT_TYPES:
                self._host.add_pointer_listener(event_type, self.handle_pointer)
                self._listeners.append((event_type, self.handle_pointer))
        elif not wanted and self._listeners:
            while self._listeners:
                event_type, handler = self._listeners.pop()
                self._host.remove_pointer_listener(event_type, handler)
