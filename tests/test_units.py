from __future__ import annotations

import unittest

from linen_core.core.errors import MalformedDimensionError
from linen_core.core.units import UnitResolver, resolve_dimension, round_half_up


class ResolveDimensionTests(unittest.TestCase):
    def test_percentage_uses_surface_width_or_height_by_axis(self) -> None:
        for dpi in (72, 144, 300):
            resolver = UnitResolver(dpi=dpi, surface_width=400, surface_height=200)
            self.assertEqual(resolver.resolve("25%", "width"), 100)
            self.assertEqual(resolver.resolve("25%", "x"), 100)
            self.assertEqual(resolver.resolve("25%", "x2"), 100)
            self.assertEqual(resolver.resolve("25%", "height"), 50)
            self.assertEqual(resolver.resolve("25%", "y"), 50)
            self.assertEqual(resolver.resolve("25%", "y2"), 50)

    def test_percentage_without_axis_resolves_to_zero(self) -> None:
        resolver = UnitResolver(dpi=144, surface_width=400, surface_height=200)
        self.assertEqual(resolver.resolve("50%"), 0)

    def test_points_scale_with_dpi(self) -> None:
        self.assertEqual(resolve_dimension("12pt", surface_width=0, surface_height=0, dpi=72), 12)
        self.assertEqual(resolve_dimension("12pt", surface_width=0, surface_height=0, dpi=144), 24)
        self.assertEqual(resolve_dimension("12pt", surface_width=0, surface_height=0, dpi=300), 50)

    def test_inches_scale_with_dpi(self) -> None:
        self.assertEqual(resolve_dimension("1in", surface_width=0, surface_height=0, dpi=72), 72)
        self.assertEqual(resolve_dimension("1.5in", surface_width=0, surface_height=0, dpi=144), 216)
        self.assertEqual(resolve_dimension("2in", surface_width=0, surface_height=0, dpi=300), 600)

    def test_raw_numbers_are_never_dpi_scaled(self) -> None:
        self.assertEqual(resolve_dimension(10, surface_width=0, surface_height=0, dpi=300), 10)
        self.assertEqual(resolve_dimension(2.5, surface_width=0, surface_height=0, dpi=72), 2.5)

    def test_other_units_are_literal_pixels(self) -> None:
        self.assertEqual(resolve_dimension("15px", surface_width=0, surface_height=0, dpi=300), 15.0)
        self.assertEqual(resolve_dimension(" 7 ", surface_width=0, surface_height=0, dpi=300), 7.0)

    def test_callable_receives_owner(self) -> None:
        owner = object()
        seen: list[object] = []

        def dynamic(arg: object) -> float:
            seen.append(arg)
            return 42.0

        resolver = UnitResolver(dpi=144, surface_width=10, surface_height=10)
        self.assertEqual(resolver.resolve(dynamic, "width", owner), 42.0)
        self.assertEqual(seen, [owner])

    def test_percentages_round_half_up(self) -> None:
        resolver = UnitResolver(dpi=144, surface_width=301, surface_height=10)
        self.assertEqual(resolver.resolve("50%", "width"), 151)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.49), 0)

    def test_malformed_values_raise(self) -> None:
        resolver = UnitResolver(dpi=144, surface_width=10, surface_height=10)
        for bad in ("abc", "", None, True, [1]):
            with self.subTest(value=bad):
                with self.assertRaises(MalformedDimensionError):
                    resolver.resolve(bad, "width")  # type: ignore[arg-type]

    def test_malformed_dimension_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            resolve_dimension("wide", "x", surface_width=0, surface_height=0, dpi=72)
        self.assertEqual(ctx.exception.axis, "x")
        self.assertIn("wide", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
