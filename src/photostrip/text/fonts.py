"""
Module: photostrip.text.fonts

Purpose:
    Resolve a font family name to a loadable font.

    Resolution is a table lookup rather than a platform font query, so the
    same family name behaves the same everywhere:

        family face for the style -> family regular face
        -> generic fallback (serif / sans-serif) -> built-in default

    The generic fallbacks list Latin faces first and CJK-capable faces
    after them. When the text to draw is known, a candidate that would
    render any of its non-ASCII characters as the missing-glyph box is
    skipped in favour of one that covers them all; if no candidate covers
    everything, the one covering the most characters wins.

    The built-in default (Pillow's scalable default font) always exists,
    so resolution never fails.

Key Functions:
    - resolve_font(): Font object for a family, size, style and fallback
    - glyph_coverage(): Number of characters a font actually has glyphs for

Key Classes:
    - FontStyle: regular / bold / italic
    - FontFaces: Candidate font files for one family

Dependencies:
    - PIL.ImageFont: TrueType loading
    - PIL.ImageDraw: Glyph coverage checks

Used By:
    - photostrip.text.renderer: Date stamp and caption
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Extra directories searched before the system font directories
FONT_DIRS_ENV = "PHOTOSTRIP_FONT_DIRS"

SERIF = "serif"
SANS_SERIF = "sans-serif"
DEFAULT_FAMILY = "__default__"

# Private-use code point no font maps; it always draws the missing-glyph box
_UNMAPPED_CODE_POINT = "\U0010FFFD"

# CJK-capable system fonts (Linux, Windows, macOS)
_CJK_SERIF = (
    "NotoSerifCJK-Regular.ttc",
    "NotoSerifSC-Regular.otf",
    "simsun.ttc",
    "Songti.ttc",
    "wqy-zenhei.ttc",
)
_CJK_SANS = (
    "NotoSansCJK-Regular.ttc",
    "NotoSansSC-Regular.otf",
    "wqy-zenhei.ttc",
    "wqy-microhei.ttc",
    "msyh.ttc",
    "PingFang.ttc",
)


class FontStyle(str, Enum):
    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"


@dataclass(frozen=True)
class FontFaces:
    """
    Candidate font files for one family, tried in order.

    Attributes:
        regular: Upright face candidates
        bold: Bold face candidates
        italic: Italic face candidates
    """

    regular: Tuple[str, ...]
    bold: Tuple[str, ...] = ()
    italic: Tuple[str, ...] = ()

    def candidates(self, style: FontStyle) -> Tuple[str, ...]:
        """Files for a style, followed by the regular face."""
        styled = {
            FontStyle.REGULAR: (),
            FontStyle.BOLD: self.bold,
            FontStyle.ITALIC: self.italic,
        }[style]
        return styled + self.regular


# Keys are lower-case family names
FONT_TABLE: Dict[str, FontFaces] = {
    "playfair display": FontFaces(
        regular=("PlayfairDisplay-Regular.ttf",),
        bold=("PlayfairDisplay-Bold.ttf",),
        italic=("PlayfairDisplay-Italic.ttf",),
    ),
    "zcool xiaowei": FontFaces(regular=("ZCOOLXiaoWei-Regular.ttf",)),
    "ma shan zheng": FontFaces(regular=("MaShanZheng-Regular.ttf",)),
    "long cang": FontFaces(regular=("LongCang-Regular.ttf",)),
    "inter": FontFaces(
        regular=("Inter-Regular.ttf",),
        bold=("Inter-Bold.ttf",),
        italic=("Inter-Italic.ttf",),
    ),
    "noto serif sc": FontFaces(
        regular=("NotoSerifSC-Regular.otf", "NotoSerifCJK-Regular.ttc"),
        bold=("NotoSerifSC-Bold.otf", "NotoSerifCJK-Bold.ttc"),
    ),
    SERIF: FontFaces(
        regular=("DejaVuSerif.ttf", "LiberationSerif-Regular.ttf", "times.ttf", "Times New Roman.ttf") + _CJK_SERIF,
        bold=("DejaVuSerif-Bold.ttf", "LiberationSerif-Bold.ttf", "timesbd.ttf", "Times New Roman Bold.ttf"),
        italic=("DejaVuSerif-Italic.ttf", "LiberationSerif-Italic.ttf", "timesi.ttf", "Times New Roman Italic.ttf"),
    ),
    SANS_SERIF: FontFaces(
        regular=("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "arial.ttf", "Arial.ttf") + _CJK_SANS,
        bold=("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "arialbd.ttf", "Arial Bold.ttf"),
        italic=("DejaVuSans-Oblique.ttf", "LiberationSans-Italic.ttf", "ariali.ttf", "Arial Italic.ttf"),
    ),
    # Always resolvable: Pillow's built-in scalable font
    DEFAULT_FAMILY: FontFaces(regular=()),
}


def _font_dirs() -> List[Path]:
    raw = os.environ.get(FONT_DIRS_ENV, "")
    return [Path(p) for p in raw.split(os.pathsep) if p.strip()]


def _try_load(name: str, size: int, dirs: Tuple[Path, ...]) -> Optional[FontType]:
    for directory in dirs:
        path = directory / name
        if path.is_file():
            try:
                return ImageFont.truetype(str(path), size)
            except OSError:
                logger.warning(f"Could not load font file {path}")
    try:
        # Pillow searches the platform font directories for bare names
        return ImageFont.truetype(name, size)
    except OSError:
        return None


def _glyph_bitmap(font: FontType, char: str) -> Tuple[Tuple[int, int], bytes]:
    left, top, right, bottom = font.getbbox(char)
    image = Image.new("L", (max(int(right - left), 1), max(int(bottom - top), 1)))
    ImageDraw.Draw(image).text((-left, -top), char, font=font, fill=255)
    return image.size, image.tobytes()


def glyph_coverage(font: FontType, text: str) -> int:
    """
    Count the characters of text the font draws with a real glyph.

    A character counts as missing when it renders exactly like a code
    point the font cannot have (the .notdef box).

    Example:
        >>> glyph_coverage(ImageFont.load_default(size=40), "AB")
        2
    """
    missing = _glyph_bitmap(font, _UNMAPPED_CODE_POINT)
    return sum(1 for char in text if _glyph_bitmap(font, char) != missing)


def _required_glyphs(text: str) -> str:
    # ASCII is covered by every candidate; only the rest needs checking
    return "".join(sorted({c for c in text if ord(c) > 127 and not c.isspace()}))


@lru_cache(maxsize=256)
def _resolve_cached(
    family: str,
    size: int,
    style: FontStyle,
    fallback: str,
    dirs: Tuple[Path, ...],
    required: str,
) -> FontType:
    chain = [family, fallback] if fallback != family else [family]
    best: Optional[FontType] = None
    best_name = ""
    best_score = -1

    for key in chain:
        faces = FONT_TABLE.get(key)
        if faces is None:
            continue
        for name in faces.candidates(style):
            font = _try_load(name, size, dirs)
            if font is None:
                continue
            if not required:
                logger.debug(f"Font {family!r}/{style.value} -> {name} @ {size}px")
                return font
            score = glyph_coverage(font, required)
            if score == len(required):
                logger.debug(f"Font {family!r}/{style.value} -> {name} @ {size}px (covers text)")
                return font
            if score > best_score:
                best, best_name, best_score = font, name, score

    if best is not None:
        logger.debug(
            f"Font {family!r}/{style.value} -> {best_name} @ {size}px "
            f"(covers {best_score}/{len(required)} characters)"
        )
        return best

    logger.debug(f"Font {family!r}/{style.value} -> built-in default @ {size}px")
    return ImageFont.load_default(size=size)


def resolve_font(
    family: str,
    size: int,
    style: FontStyle = FontStyle.REGULAR,
    fallback: str = SANS_SERIF,
    text: str = "",
) -> FontType:
    """
    Resolve a family name to a font of the given pixel size.

    Unknown families go straight to the fallback; the built-in default
    font ends every chain, so a font is always returned.

    Args:
        family: Family name such as "Playfair Display" (case-insensitive)
        size: Pixel size
        style: Regular, bold or italic face
        fallback: Generic family used when the named one is unavailable
        text: Text that will be drawn; candidates lacking its glyphs are
            passed over

    Returns:
        A Pillow font object

    Example:
        >>> font = resolve_font("Inter", 32, FontStyle.BOLD)
        >>> font.size
        32
    """
    if size <= 0:
        raise ValueError(f"Font size must be positive: {size}")
    key = family.strip().lower()
    fallback_key = fallback.strip().lower()
    return _resolve_cached(
        key,
        size,
        FontStyle(style),
        fallback_key,
        tuple(_font_dirs()),
        _required_glyphs(text),
    )


def clear_font_cache() -> None:
    """Forget resolved fonts (after changing PHOTOSTRIP_FONT_DIRS)."""
    _resolve_cached.cache_clear()
