"""Text fitting and line layout for Linen text drawables."""

from .fitter import (
    MIN_FONT_SIZE_PX,
    PositionedLine,
    TextFit,
    TextMeasurer,
    fit_text,
    layout_lines,
    split_lines,
    wrap_lines,
)

__all__ = [
    "MIN_FONT_SIZE_PX",
    "PositionedLine",
    "TextFit",
    "TextMeasurer",
    "fit_text",
    "layout_lines",
    "split_lines",
    "wrap_lines",
]
