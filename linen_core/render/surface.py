from __future__ import annotations

import base64
import io

from PIL import Image

from linen_core.core.units import UnitResolver

from .colors import RGBA
from .context import RasterContext


DEFAULT_DPI = 144.0

_EXPORT_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/bmp": "BMP",
}


class Surface:
    """Pixel buffer, DPI and drawing context shared by every drawable of a canvas.

    DPI is fixed at construction:
      72  - standard screen
      144 - good preview quality (default)
      300 - standard print
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        dpi: float = DEFAULT_DPI,
        background: RGBA = (0, 0, 0, 0),
    ) -> None:
        if dpi <= 0:
            raise ValueError("dpi must be > 0")
        self._dpi = float(dpi)
        self._context = RasterContext(width, height, background=background)

    @property
    def dpi(self) -> float:
        return self._dpi

    @property
    def width(self) -> int:
        return self._context.width

    @property
    def height(self) -> int:
        return self._context.height

    @property
    def context(self) -> RasterContext:
        return self._context

    def resize(self, width: int, height: int) -> None:
        self._context.resize(width, height)

    def resolver(self) -> UnitResolver:
        return UnitResolver(dpi=self._dpi, surface_width=self.width, surface_height=self.height)

    def to_image(self) -> Image.Image:
        return self._context.to_image()

    def export(self, mime_type: str = "image/png") -> bytes:
        fmt = _EXPORT_FORMATS.get(mime_type.strip().lower())
        if fmt is None:
            raise ValueError(f"unsupported export format `{mime_type}`")
        image = self.to_image()
        if fmt in ("JPEG", "BMP"):
            image = image.convert("RGB")
        buf = io.BytesIO()
        image.save(buf, format=fmt)
        return buf.getvalue()

    def get_url(self, mime_type: str = "image/png") -> str:
        payload = base64.b64encode(self.export(mime_type)).decode("ascii")
        return f"data:{mime_type.strip().lower()};base64,{payload}"
