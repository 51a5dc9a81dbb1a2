from __future__ import annotations

import math
from pathlib import Path
import unittest

from matplotlib import font_manager
import torch

from linen_core.core.style import FontDescriptor
from linen_core.render.colors import parse_color
from linen_core.render.context import RasterContext
from linen_core.render.fonts import load_font, resolve_font_path


class ParseColorTests(unittest.TestCase):
    def test_css_colors_resolve_to_rgba(self) -> None:
        self.assertEqual(parse_color("#ff0000"), (255, 0, 0, 255))
        self.assertEqual(parse_color("#00ff0080"), (0, 255, 0, 128))
        self.assertEqual(parse_color("blue"), (0, 0, 255, 255))
        self.assertEqual(parse_color("transparent"), (0, 0, 0, 0))

    def test_unknown_color_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_color("not-a-color")


class RasterContextTests(unittest.TestCase):
    def test_frame_is_height_width_rgba_uint8(self) -> None:
        ctx = RasterContext(8, 4, background=(1, 2, 3, 4))
        self.assertEqual(tuple(ctx.frame.shape), (4, 8, 4))
        self.assertEqual(ctx.frame.dtype, torch.uint8)
        self.assertEqual(ctx.frame[0, 0].tolist(), [1, 2, 3, 4])

    def test_later_fill_paints_over_earlier_fill(self) -> None:
        ctx = RasterContext(10, 10)
        ctx.apply_attributes({"fill_style": "#ff0000"})
        ctx.begin_path()
        ctx.rect(0, 0, 10, 10)
        ctx.fill()
        ctx.apply_attributes({"fill_style": "#0000ff"})
        ctx.begin_path()
        ctx.rect(2, 2, 4, 4)
        ctx.fill()

        self.assertEqual(ctx.frame[3, 3].tolist(), [0, 0, 255, 255])
        self.assertEqual(ctx.frame[8, 8].tolist(), [255, 0, 0, 255])

    def test_global_alpha_blends_source_over(self) -> None:
        ctx = RasterContext(4, 4, background=(0, 0, 0, 255))
        ctx.apply_attributes({"fill_style": "#ffffff", "global_alpha": 0.5})
        ctx.begin_path()
        ctx.rect(0, 0, 4, 4)
        ctx.fill()
        red, _, _, alpha = ctx.frame[1, 1].tolist()
        self.assertAlmostEqual(red, 128, delta=1)
        self.assertEqual(alpha, 255)

    def test_unknown_attribute_is_rejected(self) -> None:
        ctx = RasterContext(4, 4)
        with self.assertRaises(ValueError):
            ctx.apply_attributes({"filter": "blur(2px)"})

    def test_transforms_compose_and_reset(self) -> None:
        ctx = RasterContext(4, 4)
        ctx.translate(2, 3)
        ctx.transform(2, 0, 0, 2, 0, 0)
        self.assertEqual(ctx.state.transform, (2.0, 0.0, 0.0, 2.0, 2.0, 3.0))
        ctx.reset_transform()
        self.assertEqual(ctx.state.transform, (1.0, 0.0, 0.0, 1.0, 0.0, 0.0))

    def test_clip_limits_painting_until_reset(self) -> None:
        ctx = RasterContext(10, 10)
        ctx.begin_path()
        ctx.rect(0, 0, 5, 10)
        ctx.clip()
        ctx.apply_attributes({"fill_style": "#ff0000"})
        ctx.fill([[(0, 0), (10, 0), (10, 10), (0, 10)]])
        self.assertEqual(ctx.frame[5, 8, 3].item(), 0)

        ctx.reset_clip()
        ctx.fill([[(0, 0), (10, 0), (10, 10), (0, 10)]])
        self.assertEqual(ctx.frame[5, 8, 3].item(), 255)

    def test_full_circle_arc_covers_its_center(self) -> None:
        ctx = RasterContext(20, 20)
        ctx.apply_attributes({"fill_style": "#00ff00"})
        ctx.begin_path()
        ctx.arc(10, 10, 6, 0, 2 * math.pi)
        ctx.fill()
        self.assertEqual(ctx.frame[10, 10].tolist(), [0, 255, 0, 255])
        self.assertEqual(ctx.frame[0, 0, 3].item(), 0)

    def test_resize_clears_pixels_and_state(self) -> None:
        ctx = RasterContext(4, 4)
        ctx.apply_attributes({"fill_style": "#ff0000"})
        ctx.translate(1, 1)
        ctx.resize(6, 3)
        self.assertEqual(tuple(ctx.frame.shape), (3, 6, 4))
        self.assertEqual(ctx.state.fill_style, "#000000")
        self.assertEqual(ctx.state.transform, (1.0, 0.0, 0.0, 1.0, 0.0, 0.0))

    def test_invalid_dimensions_raise(self) -> None:
        with self.assertRaises(ValueError):
            RasterContext(0, 4)


class TextRasterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.font_path = font_manager.findfont("DejaVu Sans")

    def test_measure_text_grows_with_size(self) -> None:
        ctx = RasterContext(10, 10)
        small = ctx.measure_text("Linen", FontDescriptor(family=self.font_path, size_px=10))
        large = ctx.measure_text("Linen", FontDescriptor(family=self.font_path, size_px=30))
        self.assertGreater(small.width, 0)
        self.assertGreater(large.width, small.width)
        self.assertGreater(large.height, small.height)

    def test_fill_text_paints_pixels(self) -> None:
        ctx = RasterContext(120, 40)
        ctx.apply_attributes({"fill_style": "#000000", "font": FontDescriptor(family=self.font_path, size_px=24)})
        ctx.fill_text("Hello", 4, 4)
        self.assertGreater(int(ctx.frame[:, :, 3].sum()), 0)

    def test_font_file_path_is_accepted_as_family(self) -> None:
        self.assertEqual(resolve_font_path(self.font_path), str(Path(self.font_path).resolve()))
        font = load_font(FontDescriptor(family=self.font_path, size_px=12))
        self.assertGreater(font.getlength("abc"), 0)
        self.assertTrue(self.font_path.lower().endswith((".ttf", ".otf")))


if __name__ == "__main__":
    unittest.main()
