from __future__ import annotations

from dataclasses import dataclass, fields, replace
import math
import re
from typing import Any, Literal, Mapping, Union

from PIL import ImageColor

from timechart.adapters.normalize import DEFAULT_X_KEY, DEFAULT_Y_KEY
from timechart.errors import ChartConfigError
from timechart.raster.canvas import RGBA


ChartKind = Literal["line", "bar"]
ColorLike = Union[str, tuple[int, int, int], tuple[int, int, int, int]]

CHART_KINDS: frozenset[str] = frozenset({"line", "bar"})

_CSS_RGBA = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9]*\.?[0-9]+)\s*\)$",
    re.IGNORECASE,
)

# camelCase names used by web hosts of the chart component.
_OPTION_ALIASES = {
    "type": "kind",
    "color": "stroke_color",
    "strokeColor": "stroke_color",
    "fillColor": "fill_color",
    "showGrid": "show_grid",
    "showTooltip": "show_tooltip",
    "xKey": "x_key",
    "yKey": "y_key",
}


def coerce_color(color: ColorLike) -> RGBA:
    """Accept RGB/RGBA tuples or CSS color strings, including `rgba()` with a 0..1 alpha."""
    if isinstance(color, str):
        match = _CSS_RGBA.match(color.strip())
        if match:
            r, g, b = (int(match.group(i)) for i in (1, 2, 3))
            alpha = float(match.group(4))
            if max(r, g, b) > 255 or alpha > 1.0:
                raise ChartConfigError(f"color out of range: {color!r}")
            return (r, g, b, int(round(alpha * 255)))
        try:
            parsed = ImageColor.getrgb(color)
        except ValueError as exc:
            raise ChartConfigError(f"unrecognized color: {color!r}") from exc
        return _coerce_tuple(parsed, source=color)
    if isinstance(color, tuple):
        return _coerce_tuple(color, source=color)
    raise ChartConfigError(f"unsupported color type: {type(color)!r}")


def _coerce_tuple(color: tuple[int, ...], *, source: Any) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        a = 255
    elif len(color) == 4:
        r, g, b, a = color
    else:
        raise ChartConfigError(f"color must have 3 or 4 channels: {source!r}")
    out = (int(r), int(g), int(b), int(a))
    if any(c < 0 or c > 255 for c in out):
        raise ChartConfigError(f"color channel out of range: {source!r}")
    return out


@dataclass(frozen=True)
class ChartOptions:
    kind: ChartKind = "line"
    height: int = 200
    stroke_color: ColorLike = (52, 152, 219, 255)
    fill_color: ColorLike = (52, 152, 219, 26)
    show_grid: bool = True
    show_tooltip: bool = True
    label: str = ""
    x_key: str = DEFAULT_X_KEY
    y_key: str = DEFAULT_Y_KEY

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or self.kind not in CHART_KINDS:
            raise ChartConfigError(f"unsupported chart kind: {self.kind!r}")
        if isinstance(self.height, bool) or not isinstance(self.height, (int, float)) or not math.isfinite(self.height):
            raise ChartConfigError(f"height must be a number, got {self.height!r}")
        # Validated after rounding: the canvas is allocated in whole pixels.
        height = int(round(self.height))
        if height <= 0:
            raise ChartConfigError(f"height must be > 0 after rounding, got {self.height!r}")
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "stroke_color", coerce_color(self.stroke_color))
        object.__setattr__(self, "fill_color", coerce_color(self.fill_color))
        object.__setattr__(self, "show_grid", bool(self.show_grid))
        object.__setattr__(self, "show_tooltip", bool(self.show_tooltip))
        object.__setattr__(self, "label", "" if self.label is None else str(self.label))
        for name in ("x_key", "y_key"):
            key = getattr(self, name)
            if not isinstance(key, str) or not key:
                raise ChartConfigError(f"{name} must be a non-empty string, got {key!r}")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ChartOptions":
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in raw.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ChartConfigError(f"unknown chart option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "ChartOptions":
        return replace(self, **changes)


@dataclass(frozen=True)
class ChartTheme:
    background: RGBA = (0, 0, 0, 0)
    grid_color: RGBA = (240, 240, 240, 255)
    tick_label_color: RGBA = (102, 102, 102, 255)
    axis_color: RGBA = (204, 204, 204, 255)
    title_color: RGBA = (51, 51, 51, 255)
    highlight_color: RGBA = (255, 107, 107, 255)
    font_family: str = "Arial"
    tick_font_px: float = 10.0
    title_font_px: float = 12.0
