from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

from linen_core.core.style import FontDescriptor


FALLBACK_FAMILY_PATTERNS = (
    "arial",
    "helvetica",
    "liberationsans",
    "dejavusans",
    "freesans",
)
FONT_DIRS = (
    Path.home() / "Library/Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_font(font: FontDescriptor) -> Font:
    size = max(1, int(round(font.size_px)))
    path = resolve_font_path(font.family, font.bold, font.italic)
    return _load_font(path, size)


@lru_cache(maxsize=128)
def _load_font(font_path: str, size: int) -> Font:
    if font_path:
        try:
            return ImageFont.truetype(font_path, size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=64)
def resolve_font_path(family: str, bold: bool = False, italic: bool = False) -> str:
    """Best-effort lookup of a font file for `family`; empty when none is found."""

    as_path = Path(family)
    if as_path.suffix.lower() in (".ttf", ".otf", ".ttc") and as_path.exists():
        return str(as_path.resolve())

    wanted = family.strip().lower().replace(" ", "")
    candidates = _font_candidates()
    suffixes = _style_suffixes(bold, italic)
    for pattern in (wanted,) + FALLBACK_FAMILY_PATTERNS:
        if not pattern:
            continue
        for suffix in suffixes:
            target = pattern + suffix
            for path in candidates:
                stem = path.stem.lower().replace(" ", "").replace("-", "").replace("_", "")
                if stem == target:
                    return str(path)
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if pattern in stem:
                return str(path)
    return ""


def _style_suffixes(bold: bool, italic: bool) -> tuple[str, ...]:
    if bold and italic:
        return ("bolditalic", "boldoblique", "bi", "z")
    if bold:
        return ("bold", "bd", "b")
    if italic:
        return ("italic", "oblique", "i")
    return ("", "regular", "book")


@lru_cache(maxsize=1)
def _font_candidates() -> tuple[Path, ...]:
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))
    return tuple(candidates)
