"""Tests for report writers."""

import json

import pytest

from contentintel.core.models import (
    AccessDenial,
    AnalysisRequest,
    AnalysisResult,
    ContentCategory,
    DenialReason,
    ResultOrigin,
)
from contentintel.core.result_writer import (
    JSONResultWriter,
    TextResultWriter,
    build_report,
    create_result_writer,
    render_text,
)

REQUEST = AnalysisRequest("https://example.com/app", caller_identity="a@b.com")
RESULT = AnalysisResult(
    ContentCategory.TOOL,
    {"safetyRating": "D", "riskLevel": "High", "flags": ["Unknown publisher"]},
    ResultOrigin.FALLBACK,
)
DENIAL = AccessDenial(
    DenialReason.INSUFFICIENT_TIER, ContentCategory.MEDIA, "Upgrade required",
    required_plan="pure", current_tier="FREE",
)


class TestBuildReport:
    def test_result(self):
        report = build_report(REQUEST, RESULT)
        assert report["caller"] == "a@b.com"
        assert report["category"] == "tool"
        assert report["result"]["resultOrigin"] == "fallback"

    def test_denial(self):
        report = build_report(REQUEST, DENIAL)
        assert report["denial"]["requiredPlan"] == "pure"
        assert "result" not in report


class TestRenderText:
    def test_result_lines(self):
        text = render_text(REQUEST, RESULT, include_timestamp=False)
        assert "Origin: fallback" in text
        assert "VERDICT: D" in text
        assert "  - Unknown publisher" in text
        assert "Generated:" not in text

    def test_denial_lines(self):
        text = render_text(REQUEST, DENIAL)
        assert "DENIED (403)" in text
        assert "Required Plan: PURE" in text


class TestWriters:
    def test_json_writer(self, tmp_path):
        path = tmp_path / "out" / "report.json"
        JSONResultWriter().write(REQUEST, RESULT, path)
        assert json.loads(path.read_text())["result"]["safetyRating"] == "D"

    def test_text_writer(self, tmp_path):
        path = tmp_path / "report.txt"
        TextResultWriter(include_timestamp=False).write(REQUEST, DENIAL, path)
        assert "DENIED" in path.read_text()

    def test_factory(self):
        assert isinstance(create_result_writer("txt"), TextResultWriter)
        assert isinstance(create_result_writer(), JSONResultWriter)
        with pytest.raises(ValueError):
            create_result_writer("xml")
