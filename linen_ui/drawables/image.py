from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from PIL import Image as PILImage

from linen_core.core.box_model import BoxModel, ResolvedBox
from linen_core.core.loader import ImageLoader, ImageSource, ThreadedImageLoader
from linen_core.core.sequencer import PendingContent
from linen_core.core.style import StyleState
from linen_core.render.context import Affine

from .common import Callback, apply_style, run_callback, sized_box

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


def natural_size(source: Any) -> tuple[int, int]:
    if isinstance(source, PILImage.Image):
        return source.size
    return int(source.width), int(source.height)


def placed_box(box: BoxModel, surface: "Surface", owner: Any, natural: tuple[int, int]) -> ResolvedBox:
    """Resolve `box`, using the natural size for any axis smaller than 1px.

    The box itself is left untouched so a later resize can still change it.
    """

    resolver = surface.resolver()
    width = box.resolved_width(resolver, owner)
    height = box.resolved_height(resolver, owner)
    if width < 1:
        width = natural[0]
    if height < 1:
        height = natural[1]
    return box.resolve(resolver, owner, width=width, height=height)


@dataclass(eq=False)
class Image:
    """Bitmap drawn once the loader delivers it.

    Drawing returns `PendingContent`, so the render pass waits for the load
    before moving on to the next drawable.
    """

    kind: ClassVar[str] = "image"

    box: BoxModel = field(default_factory=lambda: sized_box(width=0, height=0))
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None
    src: ImageSource | None = None
    loader: ImageLoader = field(default_factory=ThreadedImageLoader)
    last_image: PILImage.Image | None = field(default=None, init=False, repr=False)

    def set_src(self, src: ImageSource) -> None:
        self.src = src

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        return self.box.resolve(surface.resolver(), self)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        if self.src is None:
            raise ValueError("image has no `src`")
        future = self.loader.load(self.src)
        return PendingContent(future=future, finish=lambda image: self._paint(surface, image))

    def _paint(self, surface: "Surface", image: PILImage.Image) -> None:
        self.last_image = image
        placed = placed_box(self.box, surface, self, natural_size(image))
        surface.context.draw_image(image, placed.x, placed.y, placed.width, placed.height)

    def on_complete(self) -> None:
        run_callback(self)
