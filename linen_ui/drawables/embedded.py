from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from linen_core.core.box_model import BoxModel, ResolvedBox
from linen_core.core.sequencer import PendingContent
from linen_core.core.style import StyleState
from linen_core.render.context import Affine

from .common import Callback, apply_style, run_callback, sized_box
from .image import natural_size, placed_box

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


@dataclass(eq=False)
class EmbeddedSurface:
    """Draws another surface (or a canvas, context or PIL image) synchronously."""

    kind: ClassVar[str] = "canvas"

    box: BoxModel = field(default_factory=lambda: sized_box(width=0, height=0))
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None
    source: Any = None

    def set_source(self, source: Any) -> None:
        self.source = source

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        if self.source is None:
            raise ValueError("embedded surface has no `source`")
        return placed_box(self.box, surface, self, natural_size(self.source))

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        surface.context.draw_image(self.source, geometry.x, geometry.y, geometry.width, geometry.height)
        return None

    def on_complete(self) -> None:
        run_callback(self)
