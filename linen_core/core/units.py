from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Any, Callable, Union

from .errors import MalformedDimensionError


DimensionValue = Union[int, float, str, Callable[[Any], float]]

WIDTH_AXES = frozenset({"width", "x", "x2"})
HEIGHT_AXES = frozenset({"height", "y", "y2"})

_DIMENSION_PATTERN = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))\s*([^\d]*?)\s*$")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_dimension(
    value: DimensionValue,
    axis: str = "",
    *,
    surface_width: float,
    surface_height: float,
    dpi: float,
    owner: Any = None,
) -> float:
    """Resolve a symbolic dimension into device pixels.

    Raw numbers are device pixels and are returned unchanged; no DPI scaling is
    ever applied to them. Callables receive `owner` and their result is used
    as-is. Strings carry a magnitude and a unit token: `%` is relative to the
    surface width (x, width, x2) or height (y, height, y2), `pt` and `in`
    scale by `dpi`, anything else is a literal pixel count.
    """

    if isinstance(value, bool):
        raise MalformedDimensionError(value, axis)
    if isinstance(value, (int, float)):
        return value
    if callable(value):
        return value(owner)
    if not isinstance(value, str):
        raise MalformedDimensionError(value, axis)

    match = _DIMENSION_PATTERN.match(value)
    if match is None:
        raise MalformedDimensionError(value, axis)
    magnitude = float(match.group(1))
    unit = match.group(2).lower()

    if unit == "%":
        return round_half_up(_percentage(magnitude, axis, surface_width, surface_height))
    if unit == "pt":
        return round_half_up(magnitude * (dpi / 72.0))
    if unit == "in":
        return round_half_up(magnitude * dpi)
    return magnitude


def _percentage(magnitude: float, axis: str, surface_width: float, surface_height: float) -> float:
    if axis in WIDTH_AXES:
        reference = surface_width
    elif axis in HEIGHT_AXES:
        reference = surface_height
    else:
        return 0.0
    return (magnitude / 100.0) * reference


@dataclass(frozen=True)
class UnitResolver:
    """Unit conversion bound to one surface's pixel size and DPI."""

    dpi: float
    surface_width: float
    surface_height: float

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError("dpi must be > 0")
        if self.surface_width < 0 or self.surface_height < 0:
            raise ValueError("surface dimensions must be >= 0")

    def resolve(self, value: DimensionValue, axis: str = "", owner: Any = None) -> float:
        return resolve_dimension(
            value,
            axis,
            surface_width=self.surface_width,
            surface_height=self.surface_height,
            dpi=self.dpi,
            owner=owner,
        )
