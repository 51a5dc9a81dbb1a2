from .common import Callback, apply_style, full_box, paint_current_path, run_callback, sized_box
from .embedded import EmbeddedSurface
from .image import Image, natural_size, placed_box
from .shapes import Arc, Line, Path, Rectangle
from .text import Text

__all__ = [
    "Arc",
    "Callback",
    "EmbeddedSurface",
    "Image",
    "Line",
    "Path",
    "Rectangle",
    "Text",
    "apply_style",
    "full_box",
    "natural_size",
    "paint_current_path",
    "placed_box",
    "run_callback",
    "sized_box",
]
