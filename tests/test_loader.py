from __future__ import annotations

import base64
import io
from pathlib import Path
import tempfile
import unittest

from PIL import Image

from linen_core.core.errors import ImageLoadError
from linen_core.core.loader import ManualImageLoader, ThreadedImageLoader


def _png_bytes(color: tuple[int, int, int, int] = (255, 0, 0, 255), size: tuple[int, int] = (3, 2)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


class ThreadedImageLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.loader = ThreadedImageLoader()

    def test_decoded_image_completes_immediately(self) -> None:
        image = Image.new("RGBA", (1, 1))
        future = self.loader.load(image)
        self.assertTrue(future.done())
        self.assertIs(future.result(), image)

    def test_bytes_are_decoded_to_rgba(self) -> None:
        image = self.loader.load(_png_bytes()).result(timeout=5)
        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(image.size, (3, 2))

    def test_data_url(self) -> None:
        url = "data:image/png;base64," + base64.b64encode(_png_bytes()).decode("ascii")
        image = self.loader.load(url).result(timeout=5)
        self.assertEqual(image.getpixel((0, 0)), (255, 0, 0, 255))

    def test_file_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "red.png"
            path.write_bytes(_png_bytes())
            image = self.loader.load(path).result(timeout=5)
        self.assertEqual(image.size, (3, 2))

    def test_missing_file_fails_with_image_load_error(self) -> None:
        with self.assertLogs("linen_core.core.loader", level="WARNING"):
            future = self.loader.load("/nonexistent/picture.png")
            error = future.exception(timeout=5)
        self.assertIsInstance(error, ImageLoadError)

    def test_garbage_bytes_fail(self) -> None:
        with self.assertLogs("linen_core.core.loader", level="WARNING"):
            error = self.loader.load(b"not an image").exception(timeout=5)
        self.assertIsInstance(error, ImageLoadError)

    def test_decompression_bomb_fails_with_image_load_error(self) -> None:
        payload = _png_bytes(size=(100, 100))
        previous = Image.MAX_IMAGE_PIXELS
        self.addCleanup(setattr, Image, "MAX_IMAGE_PIXELS", previous)
        Image.MAX_IMAGE_PIXELS = 10

        with self.assertLogs("linen_core.core.loader", level="WARNING"):
            error = self.loader.load(payload).exception(timeout=5)
        self.assertIsInstance(error, ImageLoadError)

    def test_non_positive_url_timeout_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ThreadedImageLoader(url_timeout_s=0)


class ManualImageLoaderTests(unittest.TestCase):
    def test_requests_are_completed_by_caller(self) -> None:
        loader = ManualImageLoader()
        first = loader.load("a.png")
        second = loader.load("b.png")
        self.assertFalse(first.done())

        image = Image.new("RGBA", (1, 1))
        loader.complete(0, image)
        loader.fail(1, OSError("gone"))

        self.assertIs(first.result(), image)
        self.assertIsInstance(second.exception(), OSError)
        self.assertEqual([source for source, _ in loader.requests], ["a.png", "b.png"])


if __name__ == "__main__":
    unittest.main()
