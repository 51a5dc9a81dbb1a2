from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import TYPE_CHECKING, ClassVar, Sequence

from linen_core.core.box_model import BoxModel, ResolvedBox
from linen_core.core.sequencer import PendingContent
from linen_core.core.style import StyleState
from linen_core.core.units import DimensionValue
from linen_core.render.context import Affine, Point

from .common import Callback, apply_style, full_box, paint_current_path, run_callback, sized_box

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


@dataclass(eq=False)
class Rectangle:
    kind: ClassVar[str] = "rectangle"

    box: BoxModel = field(default_factory=full_box)
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        return self.box.resolve(surface.resolver(), self)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        ctx = surface.context
        ctx.begin_path()
        ctx.rect(geometry.x, geometry.y, geometry.width, geometry.height)
        paint_current_path(self, ctx)
        return None

    def on_complete(self) -> None:
        run_callback(self)


@dataclass(eq=False)
class Arc:
    """Circular arc; the box is the circle's bounding square.

    With `offset_xy` the box origin is the top-left of that square, otherwise
    it is the circle's center.
    """

    kind: ClassVar[str] = "arc"

    box: BoxModel = field(default_factory=full_box)
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None
    radius: DimensionValue = 1
    start_angle: float = 0.0
    end_angle: float = 2 * math.pi
    anticlockwise: bool = False
    offset_xy: bool = True

    def set_radius(self, value: DimensionValue) -> None:
        self.radius = value

    def set_angles(self, start: float, end: float, anticlockwise: bool = False) -> None:
        self.start_angle = float(start)
        self.end_angle = float(end)
        self.anticlockwise = anticlockwise

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        resolver = surface.resolver()
        radius = resolver.resolve(self.radius, "width", self)
        if radius < 0:
            raise ValueError(f"arc radius must be >= 0, got `{radius}`")
        return self.box.resolve(resolver, self, width=2 * radius, height=2 * radius)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        radius = geometry.width / 2
        cx, cy = geometry.x, geometry.y
        if self.offset_xy:
            cx += radius
            cy += radius
        ctx = surface.context
        ctx.begin_path()
        ctx.arc(cx, cy, radius, self.start_angle, self.end_angle, self.anticlockwise)
        paint_current_path(self, ctx)
        return None

    def on_complete(self) -> None:
        run_callback(self)


@dataclass(eq=False)
class Line:
    """Straight segment from (x, y) to (x2, y2); always stroked."""

    kind: ClassVar[str] = "line"

    box: BoxModel = field(default_factory=lambda: sized_box(x2=0, y2=0))
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = True
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None

    def set_coords(self, x: DimensionValue, y: DimensionValue, x2: DimensionValue, y2: DimensionValue) -> None:
        self.box.dimensions.update({"x": x, "y": y, "x2": x2, "y2": y2})

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        return self.box.resolve(surface.resolver(), self)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        ctx = surface.context
        ctx.begin_path()
        ctx.move_to(geometry.x, geometry.y)
        ctx.line_to(geometry.x2, geometry.y2)
        ctx.stroke()
        return None

    def on_complete(self) -> None:
        run_callback(self)


@dataclass(eq=False)
class Path:
    """Closed polygons given as point lists relative to the box origin."""

    kind: ClassVar[str] = "path"

    box: BoxModel = field(default_factory=full_box)
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None
    paths: list[list[Point]] = field(default_factory=list)

    def add_path(self, points: Sequence[Sequence[float]]) -> None:
        polygon: list[Point] = []
        for point in points:
            if len(point) != 2:
                raise ValueError(f"path points must be (x, y) pairs, got `{point!r}`")
            polygon.append((float(point[0]), float(point[1])))
        if len(polygon) < 2:
            raise ValueError("a path needs at least 2 points")
        self.paths.append(polygon)

    def clear_paths(self) -> None:
        self.paths.clear()

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        return self.box.resolve(surface.resolver(), self)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        ctx = surface.context
        ctx.translate(geometry.x, geometry.y)
        for polygon in self.paths:
            if self.fill:
                ctx.fill([polygon])
            if self.stroke:
                ctx.stroke([polygon])
            if self.clip:
                ctx.clip([polygon])
        return None

    def on_complete(self) -> None:
        run_callback(self)
