from __future__ import annotations

from functools import lru_cache

from PIL import ImageColor


RGBA = tuple[int, int, int, int]


@lru_cache(maxsize=256)
def parse_color(value: str) -> RGBA:
    """Parse a CSS-style color string (`#rgb`, `#rrggbbaa`, `rgb()`, names)."""

    text = str(value).strip()
    if not text:
        raise ValueError("color must be a non-empty string")
    if text.lower() == "transparent":
        return (0, 0, 0, 0)
    try:
        r, g, b, a = ImageColor.getcolor(text, "RGBA")
    except ValueError:
        raise ValueError(f"unsupported color `{value}`") from None
    return (int(r), int(g), int(b), int(a))

