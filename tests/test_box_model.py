from __future__ import annotations

import unittest

from linen_core.core.box_model import Anchor, BoxModel, HorizontalAnchor, VerticalAnchor
from linen_core.core.units import UnitResolver


class BoxModelTests(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = UnitResolver(dpi=144, surface_width=300, surface_height=300)

    def test_percentage_box_on_square_surface(self) -> None:
        box = BoxModel()
        box.set_xy("10%", "10%")
        box.set_width("50%")
        box.set_height("20%")

        resolved = box.resolve(self.resolver)

        self.assertEqual((resolved.x, resolved.y), (30, 30))
        self.assertEqual((resolved.width, resolved.height), (150, 60))

    def test_anchor_moves_origin_but_never_size(self) -> None:
        box = BoxModel(dimensions={"x": 100, "y": 100, "width": 40, "height": 20})
        box.center()
        box.middle()

        resolved = box.resolve(self.resolver)

        self.assertEqual((resolved.x, resolved.y), (80, 90))
        self.assertEqual((resolved.width, resolved.height), (40, 20))

        box.set_alignment("right")
        box.set_v_alignment("bottom")
        resolved = box.resolve(self.resolver)
        self.assertEqual((resolved.x, resolved.y), (60, 80))
        self.assertEqual((resolved.width, resolved.height), (40, 20))

    def test_unset_axes_resolve_to_zero(self) -> None:
        resolved = BoxModel().resolve(self.resolver)
        self.assertEqual((resolved.x, resolved.y, resolved.width, resolved.height), (0, 0, 0, 0))

    def test_values_are_kept_symbolic_and_follow_surface_size(self) -> None:
        box = BoxModel(dimensions={"width": "50%"})
        self.assertEqual(box.resolved_width(self.resolver), 150)
        self.assertEqual(box.get("width"), "50%")
        bigger = UnitResolver(dpi=144, surface_width=600, surface_height=300)
        self.assertEqual(box.resolved_width(bigger), 300)

    def test_explicit_size_overrides_stored_size_for_origin(self) -> None:
        box = BoxModel(dimensions={"x": 50, "y": 50, "width": 0, "height": 0})
        box.center()
        box.middle()
        resolved = box.resolve(self.resolver, width=20, height=10)
        self.assertEqual((resolved.x, resolved.y, resolved.width, resolved.height), (40, 45, 20, 10))

    def test_line_endpoints_resolve(self) -> None:
        box = BoxModel(dimensions={"x": 0, "y": 0, "x2": "100%", "y2": "50%"})
        resolved = box.resolve(self.resolver)
        self.assertEqual((resolved.x2, resolved.y2), (300, 150))

    def test_unknown_axis_and_alignment_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BoxModel(dimensions={"depth": 1})
        box = BoxModel()
        with self.assertRaises(ValueError):
            box.set("z", 3)
        with self.assertRaises(ValueError):
            box.set_alignment("middle")
        with self.assertRaises(ValueError):
            box.set_v_alignment("center")

    def test_clear_removes_axis(self) -> None:
        box = BoxModel(dimensions={"width": 10})
        box.clear("width")
        self.assertIsNone(box.get("width"))

    def test_anchor_parse_is_case_insensitive(self) -> None:
        anchor = Anchor.parse(" Center ", "BOTTOM")
        self.assertIs(anchor.horizontal, HorizontalAnchor.CENTER)
        self.assertIs(anchor.vertical, VerticalAnchor.BOTTOM)


if __name__ == "__main__":
    unittest.main()
