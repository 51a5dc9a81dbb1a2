from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from linen_core.core.box_model import BoxModel, ResolvedBox
from linen_core.core.sequencer import PendingContent
from linen_core.core.style import StyleState
from linen_core.render.context import Affine
from linen_ui.text.fitter import PositionedLine, TextFit, fit_text, layout_lines

from .common import Callback, apply_style, full_box, run_callback

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


@dataclass(eq=False)
class Text:
    """Multi-line text fitted to its box.

    The fitted font size is recorded on `last_fit`; `style.font_size` keeps the
    requested size, so every render starts fitting from it again.
    """

    kind: ClassVar[str] = "text"

    box: BoxModel = field(default_factory=full_box)
    style: StyleState = field(default_factory=StyleState)
    fill: bool = False
    stroke: bool = False
    clip: bool = False
    transform: Affine | None = None
    callback: Callback | None = None
    text: str = ""
    wrap: bool = False
    last_fit: TextFit | None = field(default=None, init=False, repr=False)
    last_lines: tuple[PositionedLine, ...] = field(default=(), init=False, repr=False)

    def set_text(self, text: str) -> None:
        self.text = text

    def apply_style(self, surface: "Surface") -> None:
        apply_style(self, surface)

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        return self.box.resolve(surface.resolver(), self)

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        if not isinstance(self.text, str):
            raise ValueError(f"text must be a string, got `{type(self.text).__name__}`")
        ctx = surface.context
        base = self.style.font(surface.resolver(), self)
        fit = fit_text(
            self.text,
            measure=lambda line, size: ctx.measure_text(line, base.with_size(size)).width,
            font_size_px=base.size_px,
            line_height=self.style.line_height,
            box_width=geometry.width,
            box_height=geometry.height,
            wrap=self.wrap,
        )
        ctx.apply_attributes({"font": base.with_size(fit.font_size_px)})
        lines = layout_lines(
            fit,
            origin_x=geometry.x,
            origin_y=geometry.y,
            box_width=geometry.width,
            text_align=self.style.text_align,
        )
        for line in lines:
            if self.fill:
                ctx.fill_text(line.text, line.x, line.y)
            if self.stroke:
                ctx.stroke_text(line.text, line.x, line.y)
        self.last_fit = fit
        self.last_lines = lines
        return None

    def on_complete(self) -> None:
        run_callback(self)
