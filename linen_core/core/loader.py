from __future__ import annotations

import base64
from concurrent.futures import Future
import io
import logging
from pathlib import Path
import threading
from typing import Any, Protocol, Union
import urllib.parse
import urllib.request

from PIL import Image

from .errors import ImageLoadError


LOGGER = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, Image.Image]


class ImageLoader(Protocol):
    """Starts loading an image and returns a future resolved with the decoded image."""

    def load(self, source: ImageSource) -> Future:
        ...


class ThreadedImageLoader:
    """Decodes images on a background thread.

    Accepts an already decoded `PIL.Image.Image` (completed immediately), raw
    bytes, filesystem paths, `data:` URLs and `http(s)://` URLs.
    """

    def __init__(self, *, url_timeout_s: float = 30.0) -> None:
        if url_timeout_s <= 0:
            raise ValueError("url_timeout_s must be > 0")
        self._url_timeout_s = url_timeout_s

    def load(self, source: ImageSource) -> Future:
        future: Future = Future()
        future.set_running_or_notify_cancel()
        if isinstance(source, Image.Image):
            future.set_result(source)
            return future
        thread = threading.Thread(
            target=self._run,
            args=(source, future),
            name="linen-image-loader",
            daemon=True,
        )
        thread.start()
        return future

    def _run(self, source: ImageSource, future: Future) -> None:
        try:
            image = self._decode(source)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("image load failed for %s: %s", _describe(source), exc)
            future.set_exception(ImageLoadError(f"cannot load image {_describe(source)}: {exc}"))
            return
        future.set_result(image)

    def _decode(self, source: ImageSource) -> Image.Image:
        if isinstance(source, bytes):
            return _open_bytes(source)
        text = str(source)
        if text.startswith("data:"):
            return _open_bytes(_decode_data_url(text))
        if text.startswith(("http://", "https://")):
            with urllib.request.urlopen(text, timeout=self._url_timeout_s) as response:
                return _open_bytes(response.read())
        path = Path(text)
        if not path.exists():
            raise FileNotFoundError(f"image not found: {path}")
        with Image.open(path) as image:
            image.load()
            return image.convert("RGBA")


class ManualImageLoader:
    """Loader whose futures are completed by the host (event loop, tests)."""

    def __init__(self) -> None:
        self.requests: list[tuple[Any, Future]] = []

    def load(self, source: ImageSource) -> Future:
        future: Future = Future()
        future.set_running_or_notify_cancel()
        self.requests.append((source, future))
        return future

    def complete(self, index: int, image: Image.Image) -> None:
        _, future = self.requests[index]
        future.set_result(image)

    def fail(self, index: int, error: BaseException) -> None:
        _, future = self.requests[index]
        future.set_exception(error)


def _open_bytes(payload: bytes) -> Image.Image:
    with Image.open(io.BytesIO(payload)) as image:
        image.load()
        return image.convert("RGBA")


def _decode_data_url(url: str) -> bytes:
    header, sep, data = url.partition(",")
    if not sep:
        raise ValueError("data URL is missing the `,` separator")
    if header.endswith(";base64"):
        return base64.b64decode(data, validate=False)
    return urllib.parse.unquote_to_bytes(data)


def _describe(source: ImageSource) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    text = str(source)
    if text.startswith("data:"):
        return text[:32] + "..."
    return text
