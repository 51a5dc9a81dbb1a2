from __future__ import annotations

import logging

from PIL import Image as PILImage

from linen_core.core.config import LinenConfig
from linen_core.core.errors import ConfigurationError
from linen_core.core.loader import ImageLoader, ThreadedImageLoader
from linen_core.core.sequencer import RenderPass, RenderSequencer
from linen_core.render.colors import parse_color
from linen_core.render.context import RasterContext
from linen_core.render.surface import Surface

from .factory import Drawable, create_drawable


LOGGER = logging.getLogger(__name__)

DEFAULT_WIDTH = 300
DEFAULT_HEIGHT = 150


class Canvas:
    """One surface plus the ordered drawables rendered onto it.

    Drawables are kept across renders; `clear()` drops them. A render pass that
    suspends on an image load finishes on the loader's thread, the returned
    `RenderPass` reports when.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        config: LinenConfig | None = None,
        dpi: float | None = None,
        loader: ImageLoader | None = None,
        sequencer: RenderSequencer | None = None,
    ) -> None:
        self.config = config or LinenConfig()
        self.surface = Surface(
            width,
            height,
            dpi=self.config.dpi if dpi is None else dpi,
            background=parse_color(self.config.background),
        )
        self.elements: list[Drawable] = []
        self._loader = loader or ThreadedImageLoader()
        self._sequencer = sequencer or RenderSequencer(image_load_timeout_s=self.config.image_load_timeout_s)
        self._last_pass: RenderPass | None = None

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    @property
    def dpi(self) -> float:
        return self.surface.dpi

    @property
    def context(self) -> RasterContext:
        return self.surface.context

    @property
    def last_pass(self) -> RenderPass | None:
        return self._last_pass

    def add_element(self, kind: str) -> Drawable | None:
        """Create a drawable by name and append it; unknown names log and return None."""

        try:
            drawable = create_drawable(kind, loader=self._loader, config=self.config)
        except ConfigurationError as exc:
            LOGGER.warning("cannot add element %r: %s", kind, exc)
            return None
        self.elements.append(drawable)
        return drawable

    def add(self, drawable: Drawable) -> Drawable:
        self.elements.append(drawable)
        return drawable

    def remove(self, drawable: Drawable) -> None:
        self.elements.remove(drawable)

    def clear(self) -> None:
        self.elements.clear()

    def resize(self, width: int, height: int) -> None:
        self._check_idle("resize")
        self.surface.resize(width, height)

    def set_width(self, width: int) -> None:
        self.resize(width, self.height)

    def set_height(self, height: int) -> None:
        self.resize(self.width, height)

    def render(self) -> RenderPass:
        """Draw every element in z-order.

        Raises `RenderSequenceError` when the pass finished without suspending,
        recorded failures and `strict_render` is on. A suspended pass is
        returned as-is; call `wait()` and `raise_for_failures()` on it.
        """

        self._check_idle("render")
        render_pass = self._sequencer.render(self.surface, list(self.elements))
        self._last_pass = render_pass
        if render_pass.done and self.config.strict_render:
            render_pass.raise_for_failures()
        return render_pass

    def to_image(self) -> PILImage.Image:
        return self.surface.to_image()

    def export(self, mime_type: str = "image/png") -> bytes:
        return self.surface.export(mime_type)

    def get_url(self, mime_type: str = "image/png") -> str:
        return self.surface.get_url(mime_type)

    def _check_idle(self, action: str) -> None:
        if self._last_pass is not None and not self._last_pass.done:
            raise RuntimeError(f"cannot {action} while a render pass is still in progress")

    def __repr__(self) -> str:
        return f"Canvas(width={self.width}, height={self.height}, dpi={self.dpi}, elements={len(self.elements)})"
