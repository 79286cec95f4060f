"""
Module: photostrip.config

Purpose:
    Style configuration for a photo strip. One immutable StyleConfig is
    passed to every render; changes always produce a new instance.

Key Classes:
    - StyleConfig: Frame styling (colours, caption, font, date, filter)
    - PhotoFilter: Per-photo post-processing effect

Key Functions:
    - load_style(): Read a StyleConfig from a JSON file
    - save_style(): Write a StyleConfig to a JSON file

Dependencies:
    - PIL.ImageColor: Colour validation
    - dataclasses (std)

Used By:
    - photostrip.compositor: Render input
    - photostrip.controller.style_controller: Current style state
    - photostrip.cli: --style files and flags
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from PIL import ImageColor

logger = logging.getLogger(__name__)

MAX_CAPTION_CHARS = 30

# Swatches offered by the style picker
PALETTE = (
    "#000000",  # Black
    "#FFFFFF",  # White
    "#fce7f3",  # Pink 100
    "#ec4899",  # Pink 500
    "#dbeafe",  # Blue 100
    "#1e40af",  # Blue 800
    "#e0e7ff",  # Indigo 100
    "#f3f4f6",  # Gray 100
    "#374151",  # Gray 700
    "#fef3c7",  # Amber 100
    "#d97706",  # Amber 600
    "#d1fae5",  # Emerald 100
    "#059669",  # Emerald 600
    "#fae8ff",  # Fuchsia 100
    "#795548",  # Brown
    "#607d8b",  # Blue Grey
)

# Display name -> font family
FONT_CHOICES = {
    "经典宋体": "Playfair Display",
    "站酷小薇": "ZCOOL XiaoWei",
    "马善政毛笔": "Ma Shan Zheng",
    "龙苍草书": "Long Cang",
    "思源黑体": "Inter",
    "衬线雅宋": "Noto Serif SC",
}

# Original camelCase keys accepted by from_dict()
_CAMEL_CASE_KEYS = {
    "borderColor": "border_color",
    "textColor": "text_color",
    "fontFamily": "font_family",
    "showDate": "show_date",
    "borderWidth": "border_width",
}


class PhotoFilter(str, Enum):
    """Post-processing effect applied to each photo."""

    NONE = "none"
    BW = "bw"
    SEPIA = "sepia"
    VINTAGE = "vintage"

    @classmethod
    def coerce(cls, value: Union[str, "PhotoFilter"]) -> "PhotoFilter":
        """Convert a string like "bw" to a PhotoFilter."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown filter {value!r} (expected one of: {valid})") from None


@dataclass(frozen=True)
class StyleConfig:
    """
    Style configuration for one render (immutable).

    Attributes:
        border_color: Canvas background; the visible "border" around slots
        text_color: Colour for the date stamp and the caption
        font_family: Named typeface, resolved through the font table
        caption: Footer text, at most 30 characters ("" = no caption)
        show_date: Whether to draw the YYYY.MM.DD stamp in the header
        filter: Effect applied to each photo
        border_width: Stored with the style but not used by the layout
        gap: Stored with the style but not used by the layout

    Example:
        >>> style = StyleConfig(caption="hello", filter="bw")
        >>> style.filter
        <PhotoFilter.BW: 'bw'>
    """

    border_color: str = "#000000"
    text_color: str = "#FFFFFF"
    font_family: str = "Playfair Display"
    caption: str = ""
    show_date: bool = True
    filter: PhotoFilter = PhotoFilter.NONE
    border_width: int = 20
    gap: int = 15

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "filter", PhotoFilter.coerce(self.filter))

        for name in ("border_color", "text_color"):
            value = getattr(self, name)
            try:
                ImageColor.getrgb(value)
            except (ValueError, AttributeError, TypeError):
                raise ValueError(f"{name} is not a valid colour: {value!r}") from None

        if not isinstance(self.caption, str):
            raise ValueError(f"caption must be a string: {self.caption!r}")
        if len(self.caption) > MAX_CAPTION_CHARS:
            raise ValueError(
                f"caption must be at most {MAX_CAPTION_CHARS} characters: "
                f"got {len(self.caption)}"
            )
        if not isinstance(self.font_family, str) or not self.font_family.strip():
            raise ValueError(f"font_family must be a non-empty string: {self.font_family!r}")
        if not isinstance(self.show_date, bool):
            raise ValueError(f"show_date must be true or false: {self.show_date!r}")

        for name in ("border_width", "gap"):
            value = getattr(self, name)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer: {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")

    @property
    def has_caption(self) -> bool:
        """True when a caption footer should be drawn."""
        return bool(self.caption)

    def replace(self, **changes: Any) -> "StyleConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        data = dataclasses.asdict(self)
        data["filter"] = self.filter.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleConfig":
        """
        Build a StyleConfig from a dictionary.

        Accepts snake_case keys and the camelCase keys used by older
        style files. Unknown keys are ignored with a warning.

        Raises:
            ValueError: If a known field has an invalid value
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown style key: {key!r}")
                continue
            kwargs[name] = value
        return cls(**kwargs)


def load_style(path: Path) -> StyleConfig:
    """
    Load a StyleConfig from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid values
        OSError: If the file cannot be read
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Style file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Style file {path} must contain a JSON object")
    return StyleConfig.from_dict(data)


def save_style(style: StyleConfig, path: Path) -> None:
    """Write a StyleConfig to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(style.to_dict(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
