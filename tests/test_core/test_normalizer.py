"""Tests for ResultNormalizer: parsing, clamping and the pessimistic fallback."""

import json

import pytest

from contentintel.core.models import ContentCategory, EngineError, RawEngineOutput, ResultOrigin
from contentintel.core.normalizer import (
    MalformedOutputError,
    ResultNormalizer,
    clamp_score,
    coerce_score,
    parse_json_response,
)
from contentintel.core.schemas import SCHEMAS, get_schema

from conftest import AUDIO_RESPONSE, MEDIA_RESPONSE, NEWS_RESPONSE, TOOL_RESPONSE

VALID = {
    ContentCategory.NEWS: NEWS_RESPONSE,
    ContentCategory.TOOL: TOOL_RESPONSE,
    ContentCategory.MEDIA: MEDIA_RESPONSE,
    ContentCategory.AUDIO: AUDIO_RESPONSE,
}


def raw(category, text):
    return RawEngineOutput(category=category, text=text, engine_name="test")


def error(category, reason="transport error"):
    return EngineError(category=category, reason=reason, engine_name="test")


@pytest.fixture
def normalizer():
    return ResultNormalizer()


def assert_pessimistic(result):
    schema = get_schema(result.category)
    verdict = result.data[schema.verdict_field]
    scale = next((c.choices for c in schema.choice_fields if c.name == schema.verdict_field), None)
    if scale is not None:
        # choices run from most to least favorable
        assert scale.index(verdict) >= len(scale) // 2
    else:
        assert result.data["credibilityScore"] <= 20


class TestParseJsonResponse:
    def test_plain_object(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_prose(self):
        assert parse_json_response('Here you go: {"a": 1} hope it helps') == {"a": 1}

    @pytest.mark.parametrize("text", ["", "   ", "not json", "[1, 2]", "{broken", None])
    def test_rejects(self, text):
        with pytest.raises(MalformedOutputError):
            parse_json_response(text)


class TestScores:
    @pytest.mark.parametrize(
        "value,expected",
        [(85, 85.0), (12.5, 12.5), ("90", 90.0), (" 15% ", 15.0), ("-3", -3.0)],
    )
    def test_coerce(self, value, expected):
        assert coerce_score(value) == expected

    @pytest.mark.parametrize("value", [True, False, None, "high", [], {}, float("nan")])
    def test_coerce_rejects(self, value):
        assert coerce_score(value) is None

    def test_clamp(self):
        assert clamp_score(150, 0, 100) == 100
        assert clamp_score(-5, 0, 100) == 0
        assert clamp_score(42.0, 0, 100) == 42
        assert isinstance(clamp_score(42.0, 0, 100), int)
        assert clamp_score(42.567, 0, 100) == 42.57


class TestEngineOutput:
    @pytest.mark.parametrize("category", list(ContentCategory))
    def test_valid_output_passes_through(self, normalizer, category):
        result = normalizer.normalize(category, raw(category, VALID[category]), "content")
        assert result.result_origin is ResultOrigin.ENGINE
        assert result.fallback_reason is None
        assert result.received_at.tzinfo is not None

    def test_scores_are_clamped(self, normalizer):
        text = json.dumps({"verdict": "True", "credibilityScore": 140,
                           "motiveAnalysis": {"confidenceLevel": -20}})
        result = normalizer.normalize(ContentCategory.NEWS, raw(ContentCategory.NEWS, text))
        assert result.data["credibilityScore"] == 100
        assert result.data["motiveAnalysis"]["confidenceLevel"] == 0

    def test_numeric_strings_are_accepted(self, normalizer):
        text = json.dumps({"verdict": "LIKELY_AUTHENTIC", "forensicScore": "70",
                           "authenticityProbability": "65%"})
        result = normalizer.normalize(ContentCategory.MEDIA, raw(ContentCategory.MEDIA, text))
        assert result.result_origin is ResultOrigin.ENGINE
        assert result.data["forensicScore"] == 70
        assert result.data["authenticityProbability"] == 65

    def test_choice_case_is_canonicalized(self, normalizer):
        text = json.dumps({"safetyRating": "aaa+++", "riskLevel": "minimal"})
        result = normalizer.normalize(ContentCategory.TOOL, raw(ContentCategory.TOOL, text))
        assert result.data["safetyRating"] == "AAA+++"
        assert result.data["riskLevel"] == "Minimal"

    def test_nested_voice_verdict_is_lifted(self, normalizer):
        text = json.dumps({"audioTitle": "clip", "voiceAudit": {"verdict": "mixed", "confidence": 55}})
        result = normalizer.normalize(ContentCategory.AUDIO, raw(ContentCategory.AUDIO, text))
        assert result.result_origin is ResultOrigin.ENGINE
        assert result.data["voiceVerdict"] == "MIXED"
        assert result.data["confidence"] == 55

    def test_engine_data_is_not_mutated(self, normalizer):
        result = normalizer.normalize(ContentCategory.NEWS, raw(ContentCategory.NEWS, NEWS_RESPONSE))
        assert "resultOrigin" not in result.data


class TestFallback:
    @pytest.mark.parametrize("category", list(ContentCategory))
    @pytest.mark.parametrize(
        "text",
        ["definitely not json", "", "[]", '{"unrelated": true}', "```json\n{oops\n```"],
    )
    def test_malformed_output_is_pessimistic(self, normalizer, category, text):
        result = normalizer.normalize(category, raw(category, text), "some content")
        assert result.result_origin is ResultOrigin.FALLBACK
        assert result.fallback_reason.startswith("malformed output")
        assert_pessimistic(result)

    @pytest.mark.parametrize("category", list(ContentCategory))
    def test_engine_error_is_pessimistic(self, normalizer, category):
        result = normalizer.normalize(category, error(category, "timeout after 90.0s"), "x")
        assert result.is_fallback
        assert result.fallback_reason == "timeout after 90.0s"
        assert_pessimistic(result)

    def test_unknown_choice_value_falls_back(self, normalizer):
        text = json.dumps({"safetyRating": "SUPER SAFE", "riskLevel": "Low"})
        result = normalizer.normalize(ContentCategory.TOOL, raw(ContentCategory.TOOL, text))
        assert result.is_fallback
        assert result.data["safetyRating"] == "D"

    def test_non_numeric_required_score_falls_back(self, normalizer):
        text = json.dumps({"verdict": "True", "credibilityScore": "very high"})
        result = normalizer.normalize(ContentCategory.NEWS, raw(ContentCategory.NEWS, text))
        assert result.is_fallback

    def test_news_fallback_low_credibility(self, normalizer):
        result = normalizer.normalize(ContentCategory.NEWS, error(ContentCategory.NEWS), "claim")
        assert result.data["credibilityScore"] <= 20
        assert result.data["flaggedClaims"] == ["claim"]

    def test_media_fallback(self, normalizer):
        result = normalizer.normalize(
            ContentCategory.MEDIA, error(ContentCategory.MEDIA), "clip.mp4", hint="video"
        )
        assert result.data["verdict"] == "LIKELY_MANIPULATED"
        assert result.data["forensicScore"] == 15
        assert result.data["authenticityProbability"] == 10
        assert result.data["mediaType"] == "video"

    def test_audio_fallback(self, normalizer):
        result = normalizer.normalize(
            ContentCategory.AUDIO, error(ContentCategory.AUDIO), "https://youtu.be/x", hint="YouTube"
        )
        assert result.data["voiceVerdict"] == "AI_GENERATED"
        assert result.data["confidence"] == 20
        assert result.data["voiceAudit"]["naturalness"] == 10
        assert result.data["platform"] == "YouTube"

    @pytest.mark.parametrize("category", list(ContentCategory))
    def test_fallback_is_schema_valid(self, normalizer, category):
        result = normalizer.normalize(category, error(category), "content")
        # The fallback itself must satisfy the category schema
        validated = normalizer.validate(SCHEMAS[category], result.data)
        assert validated == result.data

    def test_fallback_is_deterministic(self, normalizer):
        first = normalizer.normalize(ContentCategory.TOOL, error(ContentCategory.TOOL), "app")
        second = normalizer.normalize(ContentCategory.TOOL, error(ContentCategory.TOOL), "app")
        assert first.data == second.data
