from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable, Sequence

from linen_core.core.units import round_half_up


MIN_FONT_SIZE_PX = 1.0

TextMeasurer = Callable[[str, float], float]
"""`(text, font_size_px) -> width_px` for the font being fitted."""


@dataclass(frozen=True)
class TextFit:
    lines: tuple[str, ...]
    font_size_px: float
    line_height_px: float
    iterations: int = 0

    @property
    def height_px(self) -> float:
        return self.line_height_px * len(self.lines)


@dataclass(frozen=True)
class PositionedLine:
    text: str
    x: float
    y: float


class _MeasureCache:
    def __init__(self, measure: TextMeasurer) -> None:
        self._measure = measure
        self._widths: dict[tuple[str, float], float] = {}

    def __call__(self, text: str, size: float) -> float:
        key = (text, size)
        width = self._widths.get(key)
        if width is None:
            width = float(self._measure(text, size))
            self._widths[key] = width
        return width


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def wrap_lines(lines: Sequence[str], *, box_width: float, font_size_px: float, measure: TextMeasurer) -> list[str]:
    """Greedy word wrap; every emitted line keeps a trailing space after its last word.

    A word that alone is wider than the box stays on its own line, words are
    never broken.
    """

    out: list[str] = []
    for line in lines:
        current = ""
        for word in line.split(" "):
            candidate = current + word + " "
            if current and measure(candidate, font_size_px) > box_width:
                out.append(current)
                current = word + " "
            else:
                current = candidate
        out.append(current)
    return out


def fit_text(
    text: str,
    *,
    measure: TextMeasurer,
    font_size_px: float,
    line_height: float,
    box_width: float = 0.0,
    box_height: float = 0.0,
    wrap: bool = False,
) -> TextFit:
    """Break `text` into lines and shrink the font until it fits the box.

    Wrapping happens once at the starting size. Without wrapping, a positive
    `box_width` shrinks the size by 1px until every line fits; a positive
    `box_height` then shrinks it until the stacked line heights fit. The size
    never drops below 1px and giving up at the floor is not an error. The
    starting size is floored to whole pixels, so shrinking takes at most
    `font_size_px - 1` steps.
    """

    if font_size_px <= 0:
        raise ValueError("font_size_px must be > 0")
    if line_height <= 0:
        raise ValueError("line_height must be > 0")

    cached = _MeasureCache(measure)
    size = float(max(MIN_FONT_SIZE_PX, math.floor(font_size_px)))
    iterations = 0
    lines = split_lines(text)

    if wrap:
        lines = wrap_lines(lines, box_width=box_width, font_size_px=size, measure=cached)
    elif box_width > 0:
        while size > MIN_FONT_SIZE_PX and any(cached(line, size) > box_width for line in lines):
            size = max(MIN_FONT_SIZE_PX, size - 1)
            iterations += 1

    if box_height > 0:
        while size > MIN_FONT_SIZE_PX and len(lines) * size * line_height > box_height:
            size = max(MIN_FONT_SIZE_PX, size - 1)
            iterations += 1

    return TextFit(
        lines=tuple(lines),
        font_size_px=size,
        line_height_px=size * line_height,
        iterations=iterations,
    )


def layout_lines(
    fit: TextFit,
    *,
    origin_x: float,
    origin_y: float,
    box_width: float,
    text_align: str = "left",
) -> tuple[PositionedLine, ...]:
    """Position fitted lines top-down from the box origin.

    Text alignment moves the pen inside the box (center: half the box width,
    right/end: the full width) and is independent of the box anchor.
    """

    if text_align == "center":
        x = origin_x + round_half_up(box_width / 2)
    elif text_align in ("right", "end"):
        x = origin_x + box_width
    else:
        x = origin_x
    return tuple(
        PositionedLine(text=line, x=x, y=origin_y + i * fit.line_height_px)
        for i, line in enumerate(fit.lines)
    )
