from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from timechart.formatting import Formatters
from timechart.geometry import GeometryMapper
from timechart.series import DataPoint, Series


LOGGER = logging.getLogger(__name__)

HOVER_DISTANCE_PX = 30.0
OVERLAY_OFFSET_Y_PX = 40.0
HIGHLIGHT_RADIUS_PX = 5.0


@dataclass(frozen=True)
class Highlight:
    index: int
    x: float
    y: float


@dataclass
class HoverState:
    point: DataPoint | None = None
    index: int | None = None
    pixel_x: float = 0.0
    pixel_y: float = 0.0

    @property
    def visible(self) -> bool:
        return self.point is not None


@dataclass(frozen=True)
class TooltipOverlay:
    visible: bool = False
    left: float = 0.0
    top: float = 0.0
    lines: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


HIDDEN_OVERLAY = TooltipOverlay()


class TooltipController:
    """Hidden/Shown state machine driven by pointer moves over the plotted points.

    The controller never touches the canvas; highlight frames are requested through
    the `redraw` callback (None requests a clean frame).
    """

    def __init__(
        self,
        redraw: Callable[[Highlight | None], None],
        formatters: Formatters | None = None,
        *,
        hover_distance_px: float = HOVER_DISTANCE_PX,
    ) -> None:
        if hover_distance_px <= 0:
            raise ValueError("hover_distance_px must be > 0")
        self._redraw = redraw
        self._formatters = formatters or Formatters()
        self._hover_distance_px = hover_distance_px
        self._state = HoverState()
        self._overlay = HIDDEN_OVERLAY

    @property
    def state(self) -> HoverState:
        return self._state

    @property
    def overlay(self) -> TooltipOverlay:
        return self._overlay

    @property
    def highlight(self) -> Highlight | None:
        if self._state.index is None:
            return None
        return Highlight(index=self._state.index, x=self._state.pixel_x, y=self._state.pixel_y)

    def pointer_move(self, x: float, y: float, series: Series, mapper: GeometryMapper | None, label: str = "") -> HoverState:
        index = None if mapper is None else mapper.nearest_index(series, x, y, self._hover_distance_px)
        if index is None:
            self._hide(redraw=True)
            return self._state

        if index == self._state.index:
            return self._state

        point = series[index]
        px = mapper.scale_x(point.timestamp)
        py = mapper.scale_y(point.value)
        self._state = HoverState(point=point, index=index, pixel_x=px, pixel_y=py)
        self._redraw(Highlight(index=index, x=px, y=py))
        self._overlay = TooltipOverlay(
            visible=True,
            left=px,
            top=py - OVERLAY_OFFSET_Y_PX,
            lines=(
                self._formatters.date(point.timestamp),
                f"{label}: {self._formatters.currency(point.value)}",
            ),
        )
        LOGGER.debug("tooltip shown for index %d at (%.1f, %.1f)", index, px, py)
        return self._state

    def pointer_leave(self) -> None:
        self._hide(redraw=True)

    def reset(self) -> None:
        """Drop hover state without requesting a frame (the caller is redrawing anyway)."""
        self._hide(redraw=False)

    def _hide(self, *, redraw: bool) -> None:
        was_visible = self._state.visible
        self._state = HoverState()
        self._overlay = HIDDEN_OVERLAY
        if was_visible and redraw:
            self._redraw(None)
