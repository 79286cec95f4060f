"""
Module: photostrip.enrichment

Purpose:
    Optional AI suggestion of caption, background colour and mood.
    Failures never reach rendering; callers get an EnrichmentError or the
    fixed fallback suggestion.

Key Classes:
    - MoodSuggester: Gemini-backed suggester
    - EnrichmentConfig: Model / key / timeout settings
    - MoodSuggestion: Result triple

Key Functions:
    - merge_suggestion(): Apply a suggestion to a StyleConfig

Dependencies:
    - google-genai: Gemini API
"""

from .models import (
    FALLBACK_SUGGESTION,
    LIGHT_BACKGROUNDS,
    MoodSuggestion,
    merge_suggestion,
    text_color_for,
)
from .suggester import EnrichmentConfig, MoodSuggester, build_prompt, parse_suggestion

__all__ = [
    "FALLBACK_SUGGESTION",
    "LIGHT_BACKGROUNDS",
    "MoodSuggestion",
    "merge_suggestion",
    "text_color_for",
    "EnrichmentConfig",
    "MoodSuggester",
    "build_prompt",
    "parse_suggestion",
]
