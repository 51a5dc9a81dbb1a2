from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from linen_core.core.config import LinenConfig, config_from_mapping, load_config
from linen_core.core.errors import ConfigurationError


class LinenConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = LinenConfig()
        self.assertEqual(config.dpi, 144.0)
        self.assertIsNone(config.image_load_timeout_s)
        self.assertEqual(config.default_font_family, "Arial")
        self.assertEqual(config.default_font_size, "12pt")
        self.assertTrue(config.strict_render)

    def test_invalid_values_raise_configuration_error(self) -> None:
        for kwargs in (
            {"dpi": 0},
            {"image_load_timeout_s": -1},
            {"default_font_family": "  "},
            {"line_height": 0},
            {"default_font_size": "big"},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ConfigurationError):
                    LinenConfig(**kwargs)

    def test_mapping_rejects_unknown_keys_and_bad_types(self) -> None:
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"dpi": 72, "colour": "red"})
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"strict_render": "yes"})
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"dpi": True})
        with self.assertRaises(ConfigurationError):
            config_from_mapping(["dpi"])

    def test_zero_timeout_means_no_timeout(self) -> None:
        self.assertIsNone(config_from_mapping({"image_load_timeout_s": 0}).image_load_timeout_s)
        self.assertEqual(config_from_mapping({"image_load_timeout_s": 2.5}).image_load_timeout_s, 2.5)


class LoadConfigTests(unittest.TestCase):
    def _write(self, content: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "linen.toml"
        path.write_text(content, encoding="utf-8")
        return path

    def test_load_linen_table(self) -> None:
        path = self._write(
            """
[linen]
dpi = 300
image_load_timeout_s = 5
default_font_family = "DejaVu Sans"
default_font_size = 14
strict_render = false
background = "#ffffff"
"""
        )
        config = load_config(path)
        self.assertEqual(config.dpi, 300.0)
        self.assertEqual(config.image_load_timeout_s, 5.0)
        self.assertEqual(config.default_font_family, "DejaVu Sans")
        self.assertEqual(config.default_font_size, 14)
        self.assertFalse(config.strict_render)
        self.assertEqual(config.background, "#ffffff")

    def test_missing_table_yields_defaults(self) -> None:
        path = self._write('[other]\nname = "x"\n')
        self.assertEqual(load_config(path), LinenConfig())

    def test_invalid_toml_raises_configuration_error(self) -> None:
        path = self._write("[linen\n")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/linen.toml")


if __name__ == "__main__":
    unittest.main()
