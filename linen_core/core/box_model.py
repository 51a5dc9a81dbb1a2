from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .units import DimensionValue, UnitResolver


BOX_AXES = ("x", "y", "width", "height", "x2", "y2")


class HorizontalAnchor(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def factor(self) -> float:
        return _H_FACTORS[self]


class VerticalAnchor(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"

    @property
    def factor(self) -> float:
        return _V_FACTORS[self]


_H_FACTORS = {HorizontalAnchor.LEFT: 0.0, HorizontalAnchor.CENTER: 0.5, HorizontalAnchor.RIGHT: 1.0}
_V_FACTORS = {VerticalAnchor.TOP: 0.0, VerticalAnchor.MIDDLE: 0.5, VerticalAnchor.BOTTOM: 1.0}


@dataclass(frozen=True)
class Anchor:
    """Reference point a raw x/y coordinate refers to on the box."""

    horizontal: HorizontalAnchor = HorizontalAnchor.LEFT
    vertical: VerticalAnchor = VerticalAnchor.TOP

    @classmethod
    def parse(cls, horizontal: str = "left", vertical: str = "top") -> "Anchor":
        return cls(_parse_horizontal(horizontal), _parse_vertical(vertical))


@dataclass(frozen=True)
class ResolvedBox:
    x: float
    y: float
    width: float
    height: float
    x2: float = 0.0
    y2: float = 0.0


@dataclass
class BoxModel:
    """Symbolic position/size of a drawable plus its anchor.

    Values are kept exactly as set and resolved on every call, so percentages
    follow the surface when it is resized. Unset axes resolve to 0.
    """

    dimensions: dict[str, DimensionValue] = field(default_factory=dict)
    anchor: Anchor = field(default_factory=Anchor)

    def __post_init__(self) -> None:
        for axis in self.dimensions:
            _check_axis(axis)

    def get(self, axis: str) -> DimensionValue | None:
        _check_axis(axis)
        return self.dimensions.get(axis)

    def set(self, axis: str, value: DimensionValue) -> None:
        _check_axis(axis)
        self.dimensions[axis] = value

    def clear(self, axis: str) -> None:
        _check_axis(axis)
        self.dimensions.pop(axis, None)

    def set_x(self, value: DimensionValue) -> None:
        self.set("x", value)

    def set_y(self, value: DimensionValue) -> None:
        self.set("y", value)

    def set_width(self, value: DimensionValue) -> None:
        self.set("width", value)

    def set_height(self, value: DimensionValue) -> None:
        self.set("height", value)

    def set_xy(self, x: DimensionValue, y: DimensionValue) -> None:
        self.dimensions.update({"x": x, "y": y})

    def set_alignment(self, value: str) -> None:
        self.anchor = Anchor(_parse_horizontal(value), self.anchor.vertical)

    def set_v_alignment(self, value: str) -> None:
        self.anchor = Anchor(self.anchor.horizontal, _parse_vertical(value))

    def center(self) -> None:
        self.set_alignment("center")

    def middle(self) -> None:
        self.set_v_alignment("middle")

    def resolve_axis(self, axis: str, resolver: UnitResolver, owner: Any = None) -> float:
        value = self.get(axis)
        if value is None:
            return 0
        return resolver.resolve(value, axis, owner)

    def resolved_width(self, resolver: UnitResolver, owner: Any = None) -> float:
        return self.resolve_axis("width", resolver, owner)

    def resolved_height(self, resolver: UnitResolver, owner: Any = None) -> float:
        return self.resolve_axis("height", resolver, owner)

    def origin_x(self, resolver: UnitResolver, owner: Any = None, *, width: float | None = None) -> float:
        raw_x = self.resolve_axis("x", resolver, owner)
        if width is None:
            width = self.resolved_width(resolver, owner)
        return raw_x - width * self.anchor.horizontal.factor

    def origin_y(self, resolver: UnitResolver, owner: Any = None, *, height: float | None = None) -> float:
        raw_y = self.resolve_axis("y", resolver, owner)
        if height is None:
            height = self.resolved_height(resolver, owner)
        return raw_y - height * self.anchor.vertical.factor

    def resolve(
        self,
        resolver: UnitResolver,
        owner: Any = None,
        *,
        width: float | None = None,
        height: float | None = None,
    ) -> ResolvedBox:
        if width is None:
            width = self.resolved_width(resolver, owner)
        if height is None:
            height = self.resolved_height(resolver, owner)
        return ResolvedBox(
            x=self.origin_x(resolver, owner, width=width),
            y=self.origin_y(resolver, owner, height=height),
            width=width,
            height=height,
            x2=self.resolve_axis("x2", resolver, owner),
            y2=self.resolve_axis("y2", resolver, owner),
        )


def _check_axis(axis: str) -> None:
    if axis not in BOX_AXES:
        raise ValueError(f"unknown box axis `{axis}`; expected one of {', '.join(BOX_AXES)}")


def _parse_horizontal(value: str | HorizontalAnchor) -> HorizontalAnchor:
    try:
        return HorizontalAnchor(str(value.value if isinstance(value, Enum) else value).strip().lower())
    except ValueError:
        raise ValueError(f"horizontal alignment must be left, center or right, got `{value}`") from None


def _parse_vertical(value: str | VerticalAnchor) -> VerticalAnchor:
    try:
        return VerticalAnchor(str(value.value if isinstance(value, Enum) else value).strip().lower())
    except ValueError:
        raise ValueError(f"vertical alignment must be top, middle or bottom, got `{value}`") from None
