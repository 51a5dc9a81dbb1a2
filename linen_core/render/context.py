from __future__ import annotations

from dataclasses import dataclass, field, fields
import math
from typing import Any, Mapping, Protocol, Sequence

import numpy as np
import torch
from PIL import Image, ImageDraw, ImageFilter

from linen_core.core.style import FontDescriptor

from .colors import RGBA, parse_color
from .fonts import load_font


Affine = tuple[float, float, float, float, float, float]
Point = tuple[float, float]
PathData = Sequence[Sequence[Point]]

IDENTITY: Affine = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
SUPERSAMPLE = 4
MAX_ARC_SEGMENTS = 720


@dataclass(frozen=True)
class TextMetrics:
    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


@dataclass
class ContextState:
    """The single shared state cell of a drawing context.

    Every draw step writes the paint attributes as one block; `transform` and
    `clip_mask` are only changed by explicit transform and clip calls, so they
    carry over from one drawable to the next.
    """

    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: float = 1.0
    line_cap: str = "butt"
    line_join: str = "miter"
    miter_limit: float = 10.0
    line_dash_offset: float = 0.0
    shadow_blur: float = 0.0
    shadow_color: str = "#000000"
    shadow_offset_x: float = 0.0
    shadow_offset_y: float = 0.0
    global_alpha: float = 1.0
    font: FontDescriptor = field(default_factory=FontDescriptor)
    text_align: str = "left"
    text_baseline: str = "top"
    transform: Affine = IDENTITY
    clip_mask: np.ndarray | None = field(default=None, repr=False)


ATTRIBUTE_NAMES = frozenset(f.name for f in fields(ContextState)) - {"transform", "clip_mask"}


class DrawingContext(Protocol):
    """Primitive 2D drawing surface the layout layer issues calls against."""

    state: ContextState

    @property
    def width(self) -> int:
        ...

    @property
    def height(self) -> int:
        ...

    def apply_attributes(self, attributes: Mapping[str, Any]) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def close_path(self) -> None:
        ...

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float, anticlockwise: bool = False) -> None:
        ...

    def fill(self, path: PathData | None = None) -> None:
        ...

    def stroke(self, path: PathData | None = None) -> None:
        ...

    def clip(self, path: PathData | None = None) -> None:
        ...

    def reset_clip(self) -> None:
        ...

    def draw_image(
        self,
        image: Any,
        dx: float,
        dy: float,
        dw: float | None = None,
        dh: float | None = None,
    ) -> None:
        ...

    def measure_text(self, text: str, font: FontDescriptor | None = None) -> TextMetrics:
        ...

    def fill_text(self, text: str, x: float, y: float) -> None:
        ...

    def stroke_text(self, text: str, x: float, y: float) -> None:
        ...

    def set_transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        ...

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        ...

    def translate(self, x: float, y: float) -> None:
        ...

    def reset_transform(self) -> None:
        ...


class RasterContext:
    """Torch-backed RGBA raster implementing the `DrawingContext` calls.

    Coverage masks are rasterized with Pillow (supersampled for paths) and
    composited onto a `(height, width, 4)` uint8 tensor with source-over.
    """

    def __init__(self, width: int, height: int, *, background: RGBA = (0, 0, 0, 0)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("context dimensions must be > 0")
        self._width = int(width)
        self._height = int(height)
        self._background = background
        self._frame = _new_frame(self._width, self._height, background)
        self.state = ContextState()
        self._subpaths: list[list[Point]] = []
        self._closed: list[bool] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frame(self) -> torch.Tensor:
        return self._frame

    def resize(self, width: int, height: int) -> None:
        """Reallocate the frame; like a canvas resize this clears pixels and state."""

        if width <= 0 or height <= 0:
            raise ValueError("context dimensions must be > 0")
        self._width = int(width)
        self._height = int(height)
        self._frame = _new_frame(self._width, self._height, self._background)
        self.state = ContextState()
        self.begin_path()

    def clear(self) -> None:
        self._frame = _new_frame(self._width, self._height, self._background)

    def snapshot(self) -> torch.Tensor:
        return self._frame.clone()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._frame.cpu().numpy(), mode="RGBA")

    # State

    def apply_attributes(self, attributes: Mapping[str, Any]) -> None:
        unknown = sorted(set(attributes) - ATTRIBUTE_NAMES)
        if unknown:
            raise ValueError(f"unknown context attribute(s): {', '.join(unknown)}")
        for name, value in attributes.items():
            setattr(self.state, name, value)

    def set_transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self.state.transform = (float(a), float(b), float(c), float(d), float(e), float(f))

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self.state.transform = _multiply(self.state.transform, (a, b, c, d, e, f))

    def translate(self, x: float, y: float) -> None:
        self.transform(1.0, 0.0, 0.0, 1.0, x, y)

    def reset_transform(self) -> None:
        self.state.transform = IDENTITY

    # Paths

    def begin_path(self) -> None:
        self._subpaths = []
        self._closed = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([_apply(self.state.transform, x, y)])
        self._closed.append(False)

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append(_apply(self.state.transform, x, y))

    def close_path(self) -> None:
        if self._closed:
            self._closed[-1] = True

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self.move_to(x, y)
        self.line_to(x + width, y)
        self.line_to(x + width, y + height)
        self.line_to(x, y + height)
        self.close_path()

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float, anticlockwise: bool = False) -> None:
        if radius < 0:
            raise ValueError("arc radius must be >= 0")
        sweep = _arc_sweep(start, end, anticlockwise)
        segments = max(8, min(MAX_ARC_SEGMENTS, int(abs(sweep) * max(radius, 1.0) / 2.0)))
        for i in range(segments + 1):
            t = start + sweep * (i / segments)
            self.line_to(cx + radius * math.cos(t), cy + radius * math.sin(t))

    # Painting

    def fill(self, path: PathData | None = None) -> None:
        polygons = self._polygons(path)
        coverage = _polygon_coverage(polygons, self._width, self._height)
        self._paint(coverage, parse_color(self.state.fill_style))

    def stroke(self, path: PathData | None = None) -> None:
        if path is None:
            strokes = list(zip(self._subpaths, self._closed))
        else:
            strokes = [(pts, True) for pts in self._polygons(path)]
        coverage = _stroke_coverage(
            strokes,
            self._width,
            self._height,
            line_width=float(self.state.line_width),
            line_cap=self.state.line_cap,
            line_join=self.state.line_join,
        )
        self._paint(coverage, parse_color(self.state.stroke_style))

    def clip(self, path: PathData | None = None) -> None:
        coverage = _polygon_coverage(self._polygons(path), self._width, self._height)
        if self.state.clip_mask is None:
            self.state.clip_mask = coverage
        else:
            self.state.clip_mask = self.state.clip_mask * coverage

    def reset_clip(self) -> None:
        self.state.clip_mask = None

    def draw_image(
        self,
        image: Any,
        dx: float,
        dy: float,
        dw: float | None = None,
        dh: float | None = None,
    ) -> None:
        src = _as_rgba_image(image)
        if dw is not None and dh is not None:
            size = (max(1, int(round(dw))), max(1, int(round(dh))))
            if size != src.size:
                src = src.resize(size, Image.Resampling.LANCZOS)
        matrix = _multiply(self.state.transform, (1.0, 0.0, 0.0, 1.0, dx, dy))
        layer = _warp(src, matrix, self._width, self._height)
        if layer is None:
            return
        rgb = layer[:, :, :3].astype(np.float32)
        alpha = layer[:, :, 3].astype(np.float32) / 255.0
        self._composite(rgb, alpha)

    def measure_text(self, text: str, font: FontDescriptor | None = None) -> TextMetrics:
        loaded = load_font(font or self.state.font)
        ascent, descent = _font_metrics(loaded, (font or self.state.font).size_px)
        if not text:
            return TextMetrics(width=0.0, ascent=ascent, descent=descent)
        return TextMetrics(width=float(loaded.getlength(text)), ascent=ascent, descent=descent)

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._draw_text(text, x, y, parse_color(self.state.fill_style), stroke=False)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        self._draw_text(text, x, y, parse_color(self.state.stroke_style), stroke=True)

    # Internals

    def _polygons(self, path: PathData | None) -> list[list[Point]]:
        if path is None:
            return [list(pts) for pts in self._subpaths]
        return [[_apply(self.state.transform, x, y) for x, y in pts] for pts in path]

    def _draw_text(self, text: str, x: float, y: float, color: RGBA, *, stroke: bool) -> None:
        if not text:
            return
        font = load_font(self.state.font)
        metrics = self.measure_text(text)
        stroke_width = max(1, int(round(float(self.state.line_width)))) if stroke else 0
        pad = stroke_width + 2
        width = int(math.ceil(metrics.width)) + pad * 2
        height = int(math.ceil(metrics.height)) + pad * 2
        mask = Image.new("L", (max(1, width), max(1, height)), 0)
        draw = ImageDraw.Draw(mask)
        if stroke:
            draw.text((pad, pad), text, fill=0, font=font, stroke_width=stroke_width, stroke_fill=255)
        else:
            draw.text((pad, pad), text, fill=255, font=font)

        offset_x = _text_align_offset(self.state.text_align, metrics.width)
        offset_y = _text_baseline_offset(self.state.text_baseline, metrics)
        matrix = _multiply(self.state.transform, (1.0, 0.0, 0.0, 1.0, x - offset_x - pad, y - offset_y - pad))
        layer = _warp(mask, matrix, self._width, self._height)
        if layer is None:
            return
        self._paint(layer.astype(np.float32) / 255.0, color)

    def _paint(self, coverage: np.ndarray, color: RGBA) -> None:
        alpha = coverage * (color[3] / 255.0)
        rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
        self._composite(rgb, alpha)

    def _composite(self, rgb: np.ndarray, alpha: np.ndarray) -> None:
        state = self.state
        shadow = parse_color(state.shadow_color)
        if shadow[3] > 0 and (state.shadow_blur > 0 or state.shadow_offset_x or state.shadow_offset_y):
            shadow_alpha = _shadow_alpha(
                alpha,
                offset_x=float(state.shadow_offset_x),
                offset_y=float(state.shadow_offset_y),
                blur=float(state.shadow_blur),
            ) * (shadow[3] / 255.0)
            shadow_rgb = np.asarray(shadow[:3], dtype=np.float32).reshape(1, 1, 3)
            self._blend(shadow_rgb, shadow_alpha)
        self._blend(rgb, alpha)

    def _blend(self, src_rgb: np.ndarray, src_alpha: np.ndarray) -> None:
        alpha = src_alpha * float(self.state.global_alpha)
        if self.state.clip_mask is not None:
            alpha = alpha * self.state.clip_mask
        bounds = _nonzero_bounds(alpha)
        if bounds is None:
            return
        y0, y1, x0, x1 = bounds
        alpha = alpha[y0:y1, x0:x1]
        if src_rgb.shape[:2] != (1, 1):
            src_rgb = src_rgb[y0:y1, x0:x1]

        patch = self._frame[y0:y1, x0:x1]
        dst_rgb = patch[:, :, :3].to(torch.float32).cpu().numpy()
        dst_alpha = patch[:, :, 3].to(torch.float32).cpu().numpy() / 255.0

        out_alpha = alpha + dst_alpha * (1.0 - alpha)
        out_rgb_num = src_rgb * alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - alpha[:, :, None])
        safe = np.where(out_alpha > 1e-6, out_alpha, 1.0)
        out_rgb = out_rgb_num / safe[:, :, None]

        patch[:, :, :3] = torch.from_numpy(np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8))
        patch[:, :, 3] = torch.from_numpy(np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8))


def _new_frame(width: int, height: int, color: RGBA) -> torch.Tensor:
    frame = torch.zeros((height, width, 4), dtype=torch.uint8)
    frame[:, :, 0] = color[0]
    frame[:, :, 1] = color[1]
    frame[:, :, 2] = color[2]
    frame[:, :, 3] = color[3]
    return frame


def _multiply(m: Affine, n: Sequence[float]) -> Affine:
    a, b, c, d, e, f = m
    a2, b2, c2, d2, e2, f2 = (float(v) for v in n)
    return (
        a * a2 + c * b2,
        b * a2 + d * b2,
        a * c2 + c * d2,
        b * c2 + d * d2,
        a * e2 + c * f2 + e,
        b * e2 + d * f2 + f,
    )


def _apply(m: Affine, x: float, y: float) -> Point:
    a, b, c, d, e, f = m
    return (a * x + c * y + e, b * x + d * y + f)


def _invert(m: Affine) -> Affine | None:
    a, b, c, d, e, f = m
    det = a * d - b * c
    if abs(det) < 1e-12:
        return None
    return (
        d / det,
        -b / det,
        -c / det,
        a / det,
        (c * f - d * e) / det,
        (b * e - a * f) / det,
    )


def _arc_sweep(start: float, end: float, anticlockwise: bool) -> float:
    tau = 2.0 * math.pi
    if not anticlockwise:
        if end - start >= tau:
            return tau
        return (end - start) % tau
    if start - end >= tau:
        return -tau
    return -((start - end) % tau)


def _polygon_coverage(polygons: Sequence[Sequence[Point]], width: int, height: int) -> np.ndarray:
    mask = Image.new("L", (width * SUPERSAMPLE, height * SUPERSAMPLE), 0)
    draw = ImageDraw.Draw(mask)
    for pts in polygons:
        if len(pts) < 3:
            continue
        draw.polygon([(x * SUPERSAMPLE, y * SUPERSAMPLE) for x, y in pts], fill=255)
    return _downsample(mask, width, height)


def _stroke_coverage(
    strokes: Sequence[tuple[Sequence[Point], bool]],
    width: int,
    height: int,
    *,
    line_width: float,
    line_cap: str,
    line_join: str,
) -> np.ndarray:
    mask = Image.new("L", (width * SUPERSAMPLE, height * SUPERSAMPLE), 0)
    draw = ImageDraw.Draw(mask)
    scaled_width = max(1, int(round(line_width * SUPERSAMPLE)))
    radius = scaled_width / 2.0
    for pts, closed in strokes:
        if len(pts) < 2:
            continue
        scaled = [(x * SUPERSAMPLE, y * SUPERSAMPLE) for x, y in pts]
        if closed:
            scaled.append(scaled[0])
        draw.line(scaled, fill=255, width=scaled_width, joint="curve" if line_join == "round" else None)
        if line_cap == "round" and not closed:
            for px, py in (scaled[0], scaled[-1]):
                draw.ellipse((px - radius, py - radius, px + radius, py + radius), fill=255)
    return _downsample(mask, width, height)


def _downsample(mask: Image.Image, width: int, height: int) -> np.ndarray:
    data = np.asarray(mask, dtype=np.float32).reshape(height, SUPERSAMPLE, width, SUPERSAMPLE)
    return data.mean(axis=(1, 3)) / 255.0


def _shadow_alpha(alpha: np.ndarray, *, offset_x: float, offset_y: float, blur: float) -> np.ndarray:
    shifted = np.zeros_like(alpha)
    dx = int(round(offset_x))
    dy = int(round(offset_y))
    h, w = alpha.shape
    src_y0, src_y1 = max(0, -dy), min(h, h - dy)
    src_x0, src_x1 = max(0, -dx), min(w, w - dx)
    if src_y1 > src_y0 and src_x1 > src_x0:
        shifted[src_y0 + dy : src_y1 + dy, src_x0 + dx : src_x1 + dx] = alpha[src_y0:src_y1, src_x0:src_x1]
    if blur <= 0:
        return shifted
    image = Image.fromarray(np.clip(shifted * 255.0, 0, 255).astype(np.uint8), mode="L")
    image = image.filter(ImageFilter.GaussianBlur(radius=blur / 2.0))
    return np.asarray(image, dtype=np.float32) / 255.0


def _nonzero_bounds(alpha: np.ndarray) -> tuple[int, int, int, int] | None:
    rows = np.flatnonzero(alpha.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(alpha.any(axis=0))
    return int(rows[0]), int(rows[-1]) + 1, int(cols[0]), int(cols[-1]) + 1


def _warp(src: Image.Image, matrix: Affine, width: int, height: int) -> np.ndarray | None:
    inverse = _invert(matrix)
    if inverse is None:
        return None
    a, b, c, d, e, f = inverse
    warped = src.transform(
        (width, height),
        Image.Transform.AFFINE,
        data=(a, c, e, b, d, f),
        resample=Image.Resampling.BILINEAR,
    )
    return np.asarray(warped)


def _as_rgba_image(image: Any) -> Image.Image:
    if isinstance(image, Image.Image):
        return image if image.mode == "RGBA" else image.convert("RGBA")
    if isinstance(image, RasterContext):
        return image.to_image()
    to_image = getattr(image, "to_image", None)
    if callable(to_image):
        return _as_rgba_image(to_image())
    if isinstance(image, torch.Tensor):
        image = image.cpu().numpy()
    if isinstance(image, np.ndarray):
        if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
            raise ValueError(f"image arrays must be (height, width, 4) uint8, got {image.shape} {image.dtype}")
        return Image.fromarray(image, mode="RGBA")
    raise TypeError(f"unsupported image source: {type(image).__name__}")


def _font_metrics(font: Any, size_px: float) -> tuple[float, float]:
    try:
        ascent, descent = font.getmetrics()
        return float(max(1, ascent)), float(max(0, descent))
    except AttributeError:
        return float(max(1.0, size_px * 0.8)), float(max(0.0, size_px * 0.2))


def _text_align_offset(text_align: str, width: float) -> float:
    if text_align == "center":
        return width / 2.0
    if text_align in ("right", "end"):
        return width
    return 0.0


def _text_baseline_offset(text_baseline: str, metrics: TextMetrics) -> float:
    if text_baseline == "middle":
        return metrics.height / 2.0
    if text_baseline == "alphabetic":
        return metrics.ascent
    if text_baseline in ("bottom", "ideographic"):
        return metrics.height
    return 0.0
