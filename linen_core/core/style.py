from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from .units import DimensionValue, UnitResolver


LineCap = Literal["butt", "round", "square"]
LineJoin = Literal["bevel", "round", "miter"]
TextAlign = Literal["left", "center", "right", "start", "end"]
TextBaseline = Literal["top", "hanging", "middle", "alphabetic", "ideographic", "bottom"]

DEFAULT_Z_INDEX = 1


@dataclass(frozen=True)
class FontDescriptor:
    """Resolved font used for measuring and painting text."""

    family: str = "Arial"
    size_px: float = 16.0
    bold: bool = False
    italic: bool = False

    def __post_init__(self) -> None:
        if not self.family.strip():
            raise ValueError("FontDescriptor requires a non-empty `family`")
        if self.size_px <= 0:
            raise ValueError("FontDescriptor `size_px` must be > 0")

    def with_size(self, size_px: float) -> "FontDescriptor":
        return replace(self, size_px=size_px)

    def css(self) -> str:
        parts = []
        if self.bold:
            parts.append("bold")
        if self.italic:
            parts.append("italic")
        size = int(self.size_px) if float(self.size_px).is_integer() else self.size_px
        parts.append(f"{size}px")
        parts.append(self.family)
        return " ".join(parts)


@dataclass
class StyleState:
    """Paint attributes copied wholesale onto the drawing context before a draw.

    `line_width`, `shadow_offset_x`, `shadow_offset_y` and `font_size` hold
    dimension values and are resolved against the surface at apply time.
    `line_height` and `z_index` are layout attributes and stay on the drawable.
    """

    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: DimensionValue = 1
    line_cap: LineCap = "butt"
    line_join: LineJoin = "miter"
    miter_limit: float = 10.0
    line_dash_offset: float = 0.0
    shadow_blur: float = 0.0
    shadow_color: str = "#000000"
    shadow_offset_x: DimensionValue = 0
    shadow_offset_y: DimensionValue = 0
    global_alpha: float = 1.0
    font_family: str = "Arial"
    font_size: DimensionValue = "12pt"
    bold: bool = False
    italic: bool = False
    line_height: float = 1.2
    text_align: TextAlign = "left"
    text_baseline: TextBaseline = "top"
    z_index: int | float = DEFAULT_Z_INDEX

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.global_alpha) <= 1.0:
            raise ValueError("StyleState global_alpha must be in [0, 1]")
        if self.line_height <= 0:
            raise ValueError("StyleState line_height must be > 0")
        if isinstance(self.z_index, bool) or not isinstance(self.z_index, (int, float)):
            raise ValueError(f"StyleState z_index must be a number, got `{self.z_index!r}`")

    def font(self, resolver: UnitResolver, owner: Any = None, *, size_px: float | None = None) -> FontDescriptor:
        if size_px is None:
            size_px = self.font_size_px(resolver, owner)
        return FontDescriptor(
            family=self.font_family,
            size_px=max(1.0, float(size_px)),
            bold=self.bold,
            italic=self.italic,
        )

    def font_size_px(self, resolver: UnitResolver, owner: Any = None) -> float:
        return resolver.resolve(self.font_size, "", owner)

    def resolve(self, resolver: UnitResolver, owner: Any = None) -> dict[str, Any]:
        """Flat attribute bag for `DrawingContext.apply_attributes`."""

        return {
            "fill_style": self.fill_style,
            "stroke_style": self.stroke_style,
            "line_width": resolver.resolve(self.line_width, "", owner),
            "line_cap": self.line_cap,
            "line_join": self.line_join,
            "miter_limit": self.miter_limit,
            "line_dash_offset": self.line_dash_offset,
            "shadow_blur": self.shadow_blur,
            "shadow_color": self.shadow_color,
            "shadow_offset_x": resolver.resolve(self.shadow_offset_x, "", owner),
            "shadow_offset_y": resolver.resolve(self.shadow_offset_y, "", owner),
            "global_alpha": float(self.global_alpha),
            "font": self.font(resolver, owner),
            "text_align": self.text_align,
            "text_baseline": self.text_baseline,
        }

    def copy(self) -> "StyleState":
        return replace(self)
