"""
Module: photostrip.enrichment.suggester

Purpose:
    Ask Gemini for a caption, a background colour and a mood word that
    suit the uploaded photos. Best effort: rendering never waits on it and
    never depends on it.

Key Classes:
    - EnrichmentConfig: Model, credentials and limits
    - MoodSuggester: Calls the model and validates its answer

Key Functions:
    - build_prompt(): Prompt text for n photos
    - parse_suggestion(): Validate the model's JSON answer

Dependencies:
    - google-genai: Gemini client
    - PIL: Thumbnails for upload

Used By:
    - photostrip.controller.style_controller: request_suggestion()
    - photostrip.cli: render --suggest
"""

from __future__ import annotations

import io
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types
from PIL import Image, ImageColor

from photostrip.config import MAX_CAPTION_CHARS
from photostrip.errors import DecodeFailure, EnrichmentError
from photostrip.images import ImageSource, load_images

from .models import FALLBACK_SUGGESTION, MoodSuggestion

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
THUMBNAIL_SIZE = (768, 768)

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "caption": types.Schema(type=types.Type.STRING),
        "suggestedColor": types.Schema(type=types.Type.STRING),
        "mood": types.Schema(type=types.Type.STRING),
    },
    required=["caption", "suggestedColor", "mood"],
)


@dataclass(frozen=True)
class EnrichmentConfig:
    """
    Configuration for the suggestion call (immutable).

    Attributes:
        model: Gemini model name
        api_key: API key; None reads GEMINI_API_KEY, then API_KEY
        timeout_s: Request timeout in seconds
        max_caption_chars: Captions longer than this are truncated
    """

    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    timeout_s: float = 30.0
    max_caption_chars: int = MAX_CAPTION_CHARS

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive: {self.timeout_s}")
        if not 0 < self.max_caption_chars <= MAX_CAPTION_CHARS:
            raise ValueError(
                f"max_caption_chars must be in 1..{MAX_CAPTION_CHARS}: {self.max_caption_chars}"
            )

    def resolved_api_key(self) -> Optional[str]:
        """Explicit key, else the first API key environment variable set."""
        if self.api_key:
            return self.api_key
        for name in API_KEY_ENV_VARS:
            value = os.environ.get(name, "").strip()
            if value:
                return value
        return None


def build_prompt(photo_count: int) -> str:
    """Prompt asking for caption, colour and mood for photo_count photos."""
    return (
        "你是一个韩式大头贴（人生四格）APP的美学顾问。\n"
        f"请分析这 {photo_count} 张照片。\n"
        "1. 生成一个非常简短、可爱或感性的标题（最多8个字），适合打印在照片条底部。"
        "可以使用中文，或者中文加Emoji。\n"
        "2. 建议一个与照片相配的背景HEX颜色代码（例如淡粉色、柔和的蓝色、深灰色）。\n"
        "3. 用一个词描述整体氛围（例如：“浪漫”、“开心”、“复古”）。\n"
    )


def parse_suggestion(text: Optional[str], *, max_caption_chars: int = MAX_CAPTION_CHARS) -> MoodSuggestion:
    """
    Validate the model's JSON answer.

    Raises:
        EnrichmentError: If the answer is empty, not JSON, misses a field,
            or names a colour PIL cannot parse
    """
    if not text or not text.strip():
        raise EnrichmentError("Empty response from model")

    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise EnrichmentError(f"Model response is not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise EnrichmentError("Model response is not a JSON object")

    fields = {}
    for key in ("caption", "suggestedColor", "mood"):
        value = payload.get(key)
        if not isinstance(value, str):
            raise EnrichmentError(f"Model response field {key!r} missing or not a string")
        fields[key] = value.strip()

    color = fields["suggestedColor"]
    try:
        ImageColor.getrgb(color)
    except ValueError:
        raise EnrichmentError(f"Model suggested an invalid colour: {color!r}") from None

    return MoodSuggestion(
        caption=fields["caption"][:max_caption_chars],
        suggested_color=color,
        mood=fields["mood"],
    )


def _thumbnail_part(photo: Image.Image) -> types.Part:
    thumb = photo.copy()
    thumb.thumbnail(THUMBNAIL_SIZE)
    buffer = io.BytesIO()
    thumb.convert("RGB").save(buffer, format="JPEG", quality=85)
    return types.Part.from_bytes(data=buffer.getvalue(), mime_type="image/jpeg")


class MoodSuggester:
    """
    Gemini-backed caption / colour / mood suggester.

    Available only when an API key is configured (or a client is injected).

    Example:
        >>> suggester = MoodSuggester(EnrichmentConfig(api_key="..."))
        >>> suggestion = suggester.suggest_or_fallback(["a.jpg", "b.jpg"])
        >>> suggestion.caption
        '一路生花🌸'
    """

    def __init__(
        self,
        config: Optional[EnrichmentConfig] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize suggester.

        Args:
            config: Enrichment configuration
            client: Pre-built genai.Client (or compatible object)
        """
        self._config = config or EnrichmentConfig()
        self._client = client

    @property
    def config(self) -> EnrichmentConfig:
        return self._config

    @property
    def available(self) -> bool:
        """True if a client exists or can be created."""
        return self._client is not None or self._config.resolved_api_key() is not None

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = self._config.resolved_api_key()
            if not api_key:
                raise EnrichmentError(
                    f"No Gemini API key configured (set one of: {', '.join(API_KEY_ENV_VARS)})"
                )
            try:
                self._client = genai.Client(
                    api_key=api_key,
                    http_options=types.HttpOptions(timeout=int(self._config.timeout_s * 1000)),
                )
            except Exception as e:
                raise EnrichmentError(f"Could not create Gemini client: {e}") from e
        return self._client

    def suggest(self, images: Sequence[ImageSource]) -> MoodSuggestion:
        """
        Ask the model for a suggestion.

        Args:
            images: Photos to analyse

        Returns:
            Validated MoodSuggestion

        Raises:
            EnrichmentError: On any failure (no key, no photos, request
                error or timeout, unusable answer)
        """
        if not images:
            raise EnrichmentError("No photos provided")

        client = self._get_client()

        try:
            photos = load_images(images)
        except DecodeFailure as e:
            raise EnrichmentError(f"Could not read photos for analysis: {e}") from e

        try:
            contents = [_thumbnail_part(photo) for photo in photos]
            contents.append(types.Part.from_text(text=build_prompt(len(photos))))
        except Exception as e:
            raise EnrichmentError(f"Could not prepare photos for analysis: {e}") from e

        try:
            response = client.models.generate_content(
                model=self._config.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        except Exception as e:
            # SDK raises APIError; transport timeouts surface as other types
            raise EnrichmentError(f"Gemini request failed: {e}") from e

        suggestion = parse_suggestion(
            getattr(response, "text", None),
            max_caption_chars=self._config.max_caption_chars,
        )
        logger.info(
            f"Suggestion from {self._config.model}: caption={suggestion.caption!r} "
            f"color={suggestion.suggested_color} mood={suggestion.mood!r}"
        )
        return suggestion

    def suggest_or_fallback(self, images: Sequence[ImageSource]) -> MoodSuggestion:
        """Like suggest(), but returns FALLBACK_SUGGESTION instead of raising."""
        try:
            return self.suggest(images)
        except EnrichmentError as e:
            logger.warning(f"Suggestion unavailable, using fallback: {e}")
            return FALLBACK_SUGGESTION
