"""Drawables, text fitting and the Canvas facade for Linen."""

from .canvas import Canvas
from .drawables import Arc, EmbeddedSurface, Image, Line, Path, Rectangle, Text
from .factory import DRAWABLE_TYPES, Drawable, create_drawable, default_style
from .text import PositionedLine, TextFit, fit_text, layout_lines, wrap_lines

__all__ = [
    "Arc",
    "Canvas",
    "DRAWABLE_TYPES",
    "Drawable",
    "EmbeddedSurface",
    "Image",
    "Line",
    "Path",
    "PositionedLine",
    "Rectangle",
    "Text",
    "TextFit",
    "create_drawable",
    "default_style",
    "fit_text",
    "layout_lines",
    "wrap_lines",
]
