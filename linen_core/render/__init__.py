from .colors import RGBA, parse_color
from .context import ContextState, DrawingContext, RasterContext, TextMetrics
from .fonts import load_font, resolve_font_path
from .surface import DEFAULT_DPI, Surface

__all__ = [
    "ContextState",
    "DEFAULT_DPI",
    "DrawingContext",
    "RGBA",
    "RasterContext",
    "Surface",
    "TextMetrics",
    "load_font",
    "parse_color",
    "resolve_font_path",
]
