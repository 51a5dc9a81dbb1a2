from __future__ import annotations

from typing import Union

from linen_core.core.config import LinenConfig
from linen_core.core.errors import ConfigurationError
from linen_core.core.loader import ImageLoader, ThreadedImageLoader
from linen_core.core.style import StyleState

from .drawables import Arc, EmbeddedSurface, Image, Line, Path, Rectangle, Text


Drawable = Union[Rectangle, Arc, Line, Image, Text, EmbeddedSurface, Path]

DRAWABLE_TYPES: dict[str, type] = {
    "rectangle": Rectangle,
    "arc": Arc,
    "line": Line,
    "image": Image,
    "text": Text,
    "canvas": EmbeddedSurface,
    "embedded": EmbeddedSurface,
    "path": Path,
}


def default_style(config: LinenConfig | None = None) -> StyleState:
    config = config or LinenConfig()
    return StyleState(
        font_family=config.default_font_family,
        font_size=config.default_font_size,
        line_height=config.line_height,
    )


def create_drawable(
    kind: str,
    *,
    loader: ImageLoader | None = None,
    config: LinenConfig | None = None,
) -> Drawable:
    """Build a drawable by case-insensitive variant name."""

    key = kind.strip().lower() if isinstance(kind, str) else ""
    cls = DRAWABLE_TYPES.get(key)
    if cls is None:
        known = ", ".join(sorted(DRAWABLE_TYPES))
        raise ConfigurationError(f"unknown drawable kind `{kind}`; expected one of: {known}")
    style = default_style(config)
    if cls is Image:
        return Image(style=style, loader=loader or ThreadedImageLoader())
    return cls(style=style)
