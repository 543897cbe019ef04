"""Tests for core data models."""

from datetime import date, datetime, timezone

import pytest

from contentintel.core.models import (
    AccessDenial,
    AccessTier,
    AnalysisRequest,
    AnalysisResult,
    AuditEntry,
    ContentCategory,
    DenialReason,
    ResultOrigin,
    UserAccessRecord,
)


class TestAnalysisRequest:
    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_empty_content_rejected(self, content):
        with pytest.raises(ValueError):
            AnalysisRequest(content)

    def test_content_is_trimmed(self):
        assert AnalysisRequest("  claim  ").content == "claim"


class TestAccessTier:
    def test_levels_are_ordered(self):
        levels = [tier.access_level for tier in AccessTier]
        assert levels == sorted(levels) == [0, 3, 7, 10]

    def test_unknown_name_is_free(self):
        assert AccessTier.from_name("NONE") is AccessTier.FREE
        assert AccessTier.from_name(None) is AccessTier.FREE
        assert AccessTier.from_name("pure") is AccessTier.PURE


class TestUserAccessRecord:
    def test_anonymous(self):
        record = UserAccessRecord.anonymous()
        assert record.tier is AccessTier.FREE
        assert record.access_level == 0

    @pytest.mark.parametrize(
        "plan,tier,level",
        [
            ("basic", AccessTier.FREE, 1),
            ("starter", AccessTier.STARTER, 3),
            ("PURE", AccessTier.PURE, 7),
            ("elite", AccessTier.ELITE, 10),
            ("platinum", AccessTier.STARTER, 3),
        ],
    )
    def test_for_plan(self, plan, tier, level):
        record = UserAccessRecord.for_plan(plan, joined=date(2026, 3, 1))
        assert record.tier is tier
        assert record.access_level == level
        assert record.joined_date == "2026-03-01"
        assert record.status == "PAID"

    def test_from_dict_accepts_camel_case(self):
        record = UserAccessRecord.from_dict(
            {"status": "PAID", "tier": "ELITE", "plan": "elite", "accessLevel": 10, "joinedDate": "2025-01-01"}
        )
        assert record.access_level == 10
        assert record.joined_date == "2025-01-01"


class TestAccessDenial:
    def test_offline_is_503_and_retriable(self):
        denial = AccessDenial(DenialReason.CATEGORY_OFFLINE, ContentCategory.NEWS, "offline")
        assert denial.status_code == 503
        assert denial.retriable is True
        assert "requiredPlan" not in denial.to_dict()

    def test_tier_denial_is_403_with_plan(self):
        denial = AccessDenial(
            DenialReason.INSUFFICIENT_TIER, ContentCategory.MEDIA, "upgrade",
            required_plan="pure", current_tier="FREE",
        )
        data = denial.to_dict()
        assert denial.status_code == 403
        assert denial.retriable is False
        assert data["requiredPlan"] == "pure"
        assert data["locked"] is True


class TestAnalysisResult:
    def test_to_dict_adds_origin_and_timestamp(self):
        received = datetime(2026, 1, 1, tzinfo=timezone.utc)
        result = AnalysisResult(ContentCategory.NEWS, {"verdict": "True"}, ResultOrigin.ENGINE, received)
        data = result.to_dict()
        assert data["resultOrigin"] == "engine"
        assert data["receivedAt"] == received.isoformat()
        assert "resultOrigin" not in result.data


class TestAuditEntry:
    def test_legacy_entry(self):
        entry = AuditEntry.from_dict(
            {
                "type": "forensic-scan",
                "content": "https://example.com/a.jpg",
                "result": {"verdict": "SYNTHETIC"},
                "timestamp": "2025-06-01T10:00:00.000Z",
            }
        )
        assert entry.category is ContentCategory.MEDIA
        assert entry.content_excerpt == "https://example.com/a.jpg"
        assert entry.timestamp.year == 2025
        assert entry.result_origin is ResultOrigin.ENGINE

    def test_to_dict_from_dict(self):
        entry = AuditEntry(
            category=ContentCategory.AUDIO,
            content_excerpt="memo.wav",
            result_summary={"voiceVerdict": "HUMAN"},
            timestamp=datetime(2026, 2, 2, tzinfo=timezone.utc),
            result_origin=ResultOrigin.FALLBACK,
            caller_identity="a@b.com",
        )
        assert AuditEntry.from_dict(entry.to_dict()) == entry
