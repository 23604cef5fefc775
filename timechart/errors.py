from __future__ import annotations


class ChartError(Exception):
    """Base class for chart rendering errors."""


class ChartConfigError(ChartError, ValueError):
    """Raised when chart options cannot be honored (unknown kind, bad color, ...)."""


class ChartDataError(ChartError, ValueError):
    """Raised when input records cannot be normalized into a series."""
