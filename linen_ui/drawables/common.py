from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol

from linen_core.core.box_model import BoxModel
from linen_core.core.style import StyleState
from linen_core.core.units import DimensionValue
from linen_core.render.context import Affine, DrawingContext

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


Callback = Callable[[Any], None]


class Styled(Protocol):
    style: StyleState
    transform: Affine | None


class Painted(Protocol):
    fill: bool
    stroke: bool
    clip: bool


def full_box() -> BoxModel:
    """Box covering the whole surface from the top-left corner."""

    return BoxModel(dimensions={"x": 0, "y": 0, "width": "100%", "height": "100%"})


def sized_box(**dimensions: DimensionValue) -> BoxModel:
    return BoxModel(dimensions={"x": 0, "y": 0, **dimensions})


def apply_style(drawable: Styled, surface: "Surface") -> None:
    """Copy the drawable's style onto the shared context state and set its transform."""

    ctx = surface.context
    ctx.apply_attributes(drawable.style.resolve(surface.resolver(), drawable))
    ctx.reset_transform()
    if drawable.transform is not None:
        ctx.transform(*drawable.transform)


def paint_current_path(drawable: Painted, ctx: DrawingContext) -> None:
    if drawable.fill:
        ctx.fill()
    if drawable.stroke:
        ctx.stroke()
    if drawable.clip:
        ctx.clip()


def run_callback(drawable: Any) -> None:
    callback = getattr(drawable, "callback", None)
    if callback is not None:
        callback(drawable)
