"""
Tests for photostrip.enrichment

Test Coverage:
- parse_suggestion(): Valid answers, truncation, malformed answers
- MoodSuggester.suggest(): Request shape, error mapping
- API key resolution and availability
- merge_suggestion() / text_color_for()
"""
import json
from types import SimpleNamespace

import pytest

from photostrip.config import PhotoFilter, StyleConfig
from photostrip.enrichment import (
    FALLBACK_SUGGESTION,
    EnrichmentConfig,
    MoodSuggester,
    MoodSuggestion,
    build_prompt,
    merge_suggestion,
    parse_suggestion,
    text_color_for,
)
from photostrip.enrichment import suggester as suggester_module
from photostrip.errors import EnrichmentError


class FakeModels:
    """Stands in for client.models; records generate_content calls."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _client(text=None, error=None):
    return SimpleNamespace(models=FakeModels(text=text, error=error))


def _answer(**overrides):
    payload = {"caption": "一路生花🌸", "suggestedColor": "#fce7f3", "mood": "浪漫"}
    payload.update(overrides)
    return json.dumps(payload, ensure_ascii=False)


@pytest.fixture
def no_api_key(monkeypatch):
    for name in suggester_module.API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestParseSuggestion:
    def test_valid_answer(self):
        suggestion = parse_suggestion(_answer())

        assert suggestion == MoodSuggestion("一路生花🌸", "#fce7f3", "浪漫")
        assert not suggestion.is_fallback

    def test_long_caption_is_truncated(self):
        suggestion = parse_suggestion(_answer(caption="x" * 50))

        assert len(suggestion.caption) == 30

    def test_custom_truncation(self):
        suggestion = parse_suggestion(_answer(caption="abcdefghij"), max_caption_chars=8)

        assert suggestion.caption == "abcdefgh"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_answer(self, text):
        with pytest.raises(EnrichmentError, match="Empty"):
            parse_suggestion(text)

    def test_not_json(self):
        with pytest.raises(EnrichmentError, match="not JSON"):
            parse_suggestion("Sure! Here is a caption: ...")

    def test_not_an_object(self):
        with pytest.raises(EnrichmentError, match="not a JSON object"):
            parse_suggestion('["caption"]')

    @pytest.mark.parametrize("field", ["caption", "suggestedColor", "mood"])
    def test_missing_field(self, field):
        payload = json.loads(_answer())
        del payload[field]

        with pytest.raises(EnrichmentError, match=field):
            parse_suggestion(json.dumps(payload))

    def test_non_string_field(self):
        with pytest.raises(EnrichmentError, match="mood"):
            parse_suggestion(_answer(mood=3))

    def test_invalid_colour(self):
        with pytest.raises(EnrichmentError, match="invalid colour"):
            parse_suggestion(_answer(suggestedColor="pinkish"))


class TestMoodSuggester:
    def test_sends_one_thumbnail_per_photo_plus_prompt(self, make_photo):
        client = _client(text=_answer())
        suggester = MoodSuggester(EnrichmentConfig(model="gemini-test"), client=client)

        suggestion = suggester.suggest([make_photo((2000, 1500)), make_photo((600, 800), "blue")])

        assert suggestion.caption == "一路生花🌸"
        call = client.models.calls[0]
        assert call["model"] == "gemini-test"
        contents = call["contents"]
        assert len(contents) == 3
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert "2 张照片" in contents[-1].text
        assert call["config"].response_mime_type == "application/json"

    def test_request_error_becomes_enrichment_error(self, make_photo):
        client = _client(error=TimeoutError("deadline exceeded"))
        suggester = MoodSuggester(client=client)

        with pytest.raises(EnrichmentError, match="deadline exceeded"):
            suggester.suggest([make_photo()])

    def test_bad_answer_becomes_enrichment_error(self, make_photo):
        suggester = MoodSuggester(client=_client(text="no json here"))

        with pytest.raises(EnrichmentError):
            suggester.suggest([make_photo()])

    def test_unreadable_photo_becomes_enrichment_error(self):
        suggester = MoodSuggester(client=_client(text=_answer()))

        with pytest.raises(EnrichmentError, match="Could not read photos"):
            suggester.suggest([b"not an image"])

    def test_no_photos(self):
        suggester = MoodSuggester(client=_client(text=_answer()))

        with pytest.raises(EnrichmentError, match="No photos"):
            suggester.suggest([])

    def test_fallback_on_failure(self, make_photo):
        suggester = MoodSuggester(client=_client(error=RuntimeError("500")))

        assert suggester.suggest_or_fallback([make_photo()]) is FALLBACK_SUGGESTION

    def test_missing_api_key(self, no_api_key, make_photo):
        suggester = MoodSuggester()

        assert not suggester.available
        with pytest.raises(EnrichmentError, match="No Gemini API key"):
            suggester.suggest([make_photo()])

    def test_api_key_from_environment(self, no_api_key, monkeypatch):
        monkeypatch.setenv("API_KEY", "from-env")

        assert EnrichmentConfig().resolved_api_key() == "from-env"
        assert MoodSuggester().available

    def test_gemini_key_takes_precedence(self, no_api_key, monkeypatch):
        monkeypatch.setenv("API_KEY", "second")
        monkeypatch.setenv("GEMINI_API_KEY", "first")

        assert EnrichmentConfig().resolved_api_key() == "first"

    def test_client_is_built_with_key_and_timeout(self, no_api_key, monkeypatch, make_photo):
        built = {}

        def fake_client(**kwargs):
            built.update(kwargs)
            return _client(text=_answer())

        monkeypatch.setattr(suggester_module.genai, "Client", fake_client)
        suggester = MoodSuggester(EnrichmentConfig(api_key="k-123", timeout_s=12))

        suggester.suggest([make_photo()])

        assert built["api_key"] == "k-123"
        assert built["http_options"].timeout == 12000

    def test_client_construction_error_becomes_enrichment_error(self, no_api_key, monkeypatch, make_photo):
        def broken_client(**kwargs):
            raise RuntimeError("bad http options")

        monkeypatch.setattr(suggester_module.genai, "Client", broken_client)
        suggester = MoodSuggester(EnrichmentConfig(api_key="k-123"))

        with pytest.raises(EnrichmentError, match="Could not create Gemini client"):
            suggester.suggest([make_photo()])
        assert suggester.suggest_or_fallback([make_photo()]) is FALLBACK_SUGGESTION

    def test_photo_preparation_error_becomes_enrichment_error(self, monkeypatch, make_photo):
        def broken_thumbnail(photo):
            raise OSError("cannot write mode I;16 as JPEG")

        monkeypatch.setattr(suggester_module, "_thumbnail_part", broken_thumbnail)
        client = _client(text=_answer())
        suggester = MoodSuggester(client=client)

        with pytest.raises(EnrichmentError, match="Could not prepare photos"):
            suggester.suggest([make_photo()])
        assert client.models.calls == []

    def test_controller_keeps_style_when_client_cannot_be_built(self, no_api_key, monkeypatch, make_photo):
        from photostrip.controller import StyleController

        def broken_client(**kwargs):
            raise ValueError("unsupported option")

        monkeypatch.setattr(suggester_module.genai, "Client", broken_client)
        style = StyleConfig(caption="mine", border_color="#1e40af")
        controller = StyleController(
            style,
            suggester=MoodSuggester(EnrichmentConfig(api_key="k-123")),
            render=lambda images, s: None,
            delay=60,
        )
        controller.add_images([make_photo()])

        assert controller.request_suggestion() is FALLBACK_SUGGESTION
        assert controller.style == style
        controller.close()

    @pytest.mark.parametrize("kwargs", [{"timeout_s": 0}, {"max_caption_chars": 0}, {"max_caption_chars": 31}])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            EnrichmentConfig(**kwargs)


def test_prompt_mentions_photo_count():
    assert "3 张照片" in build_prompt(3)


@pytest.mark.parametrize(
    "background, expected",
    [("#FFFFFF", "#000000"), ("#fdf2f8", "#000000"), ("#FCE7F3", "#000000"), ("#1e40af", "#FFFFFF")],
)
def test_text_color_for(background, expected):
    assert text_color_for(background) == expected


def test_merge_suggestion():
    style = StyleConfig(caption="old", border_color="#000000", filter="bw", font_family="Inter")

    merged = merge_suggestion(style, MoodSuggestion("夏日", "#1e40af", "开心"))

    assert merged.caption == "夏日"
    assert merged.border_color == "#1e40af"
    assert merged.text_color == "#FFFFFF"
    assert merged.filter is PhotoFilter.VINTAGE
    assert merged.font_family == "Inter"
    assert style.caption == "old"


def test_fallback_suggestion():
    assert FALLBACK_SUGGESTION.is_fallback
    assert FALLBACK_SUGGESTION.caption == "美好时刻 ✨"
    assert FALLBACK_SUGGESTION.suggested_color == "#fce7f3"
