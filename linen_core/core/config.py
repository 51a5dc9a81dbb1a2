from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any

from .errors import ConfigurationError, MalformedDimensionError
from .units import DimensionValue, resolve_dimension


CONFIG_TABLE = "linen"


@dataclass(frozen=True)
class LinenConfig:
    """Defaults shared by a canvas and the drawables its factory creates."""

    dpi: float = 144.0
    image_load_timeout_s: float | None = None
    default_font_family: str = "Arial"
    default_font_size: DimensionValue = "12pt"
    line_height: float = 1.2
    strict_render: bool = True
    background: str = "#00000000"

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ConfigurationError("dpi must be > 0")
        if self.image_load_timeout_s is not None and self.image_load_timeout_s <= 0:
            raise ConfigurationError("image_load_timeout_s must be > 0 when provided")
        if not self.default_font_family.strip():
            raise ConfigurationError("default_font_family must be non-empty")
        if self.line_height <= 0:
            raise ConfigurationError("line_height must be > 0")
        try:
            resolve_dimension(self.default_font_size, surface_width=0, surface_height=0, dpi=self.dpi)
        except MalformedDimensionError as exc:
            raise ConfigurationError(f"default_font_size is not a valid dimension: {exc}") from exc


def load_config(path: str | Path) -> LinenConfig:
    """Load a `[linen]` table from a TOML file; keys missing from it keep their defaults."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid TOML in {config_path}: {exc}") from exc
    return config_from_mapping(raw.get(CONFIG_TABLE, {}))


def config_from_mapping(raw: Any) -> LinenConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"`{CONFIG_TABLE}` must be a table")
    known = {
        "dpi",
        "image_load_timeout_s",
        "default_font_family",
        "default_font_size",
        "line_height",
        "strict_render",
        "background",
    }
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"unknown config key(s): {', '.join(unknown)}")
    defaults = LinenConfig()
    return LinenConfig(
        dpi=_coerce_positive_number(raw.get("dpi", defaults.dpi), "dpi"),
        image_load_timeout_s=_coerce_optional_timeout(raw.get("image_load_timeout_s"), "image_load_timeout_s"),
        default_font_family=_coerce_str(raw.get("default_font_family", defaults.default_font_family), "default_font_family"),
        default_font_size=_coerce_dimension(raw.get("default_font_size", defaults.default_font_size), "default_font_size"),
        line_height=_coerce_positive_number(raw.get("line_height", defaults.line_height), "line_height"),
        strict_render=_coerce_bool(raw.get("strict_render", defaults.strict_render), "strict_render"),
        background=_coerce_str(raw.get("background", defaults.background), "background"),
    )


def _coerce_positive_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field_name} must be a number")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be > 0")
    return float(value)


def _coerce_optional_timeout(value: object, field_name: str) -> float | None:
    # TOML has no null; 0 disables the timeout.
    if value is None or value == 0:
        return None
    return _coerce_positive_number(value, field_name)


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string")
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean")
    return value


def _coerce_dimension(value: object, field_name: str) -> DimensionValue:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigurationError(f"{field_name} must be a number or a unit string")
    return value
