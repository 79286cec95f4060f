"""
Module: photostrip.enrichment.models

Purpose:
    Suggestion data, the fixed fallback triple and the rule for merging a
    suggestion into a StyleConfig.

Key Classes:
    - MoodSuggestion: Caption / colour / mood returned by the model

Key Functions:
    - merge_suggestion(): Apply a suggestion to a style in one step
"""

from __future__ import annotations

from dataclasses import dataclass

from photostrip.config import MAX_CAPTION_CHARS, PhotoFilter, StyleConfig

# Backgrounds light enough to need dark text
LIGHT_BACKGROUNDS = frozenset({"#ffffff", "#fdf2f8", "#fce7f3"})


@dataclass(frozen=True)
class MoodSuggestion:
    """
    A caption / background colour / mood suggestion.

    Attributes:
        caption: Short caption for the footer
        suggested_color: Background colour (hex)
        mood: One-word description of the photos
        is_fallback: True when this is the fixed fallback, not a model answer
    """

    caption: str
    suggested_color: str
    mood: str
    is_fallback: bool = False


FALLBACK_SUGGESTION = MoodSuggestion(
    caption="美好时刻 ✨",
    suggested_color="#fce7f3",
    mood="开心",
    is_fallback=True,
)


def text_color_for(background: str) -> str:
    """Black text on the light palette backgrounds, white otherwise."""
    return "#000000" if background.strip().lower() in LIGHT_BACKGROUNDS else "#FFFFFF"


def merge_suggestion(style: StyleConfig, suggestion: MoodSuggestion) -> StyleConfig:
    """
    Return a new style with the suggestion applied.

    Caption, border colour, text colour and filter change together; the
    vintage filter is part of the suggested look.
    """
    return style.replace(
        caption=suggestion.caption[:MAX_CAPTION_CHARS],
        border_color=suggestion.suggested_color,
        text_color=text_color_for(suggestion.suggested_color),
        filter=PhotoFilter.VINTAGE,
    )
