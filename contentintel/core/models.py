"""
Core data models for the Content Intelligence Dispatcher.

Immutable domain models representing analysis requests, access records,
normalized results and audit entries.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class ContentCategory(str, Enum):
    """The four content kinds the dispatcher can route."""

    NEWS = "news"
    TOOL = "tool"
    MEDIA = "media"
    AUDIO = "audio"

    @classmethod
    def parse(cls, value: Any) -> Optional["ContentCategory"]:
        """Return the category for a hint, or None when it is not recognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class MediaKind(str, Enum):
    """Kind of visual media forwarded to the media engine."""

    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def parse(cls, value: Any) -> Optional["MediaKind"]:
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() in ("image", "video"):
            return cls(value.strip().lower())
        return None


class AccessTier(Enum):
    """Subscription tiers, ordered by access level."""

    FREE = 0
    STARTER = 3
    PURE = 7
    ELITE = 10

    @property
    def access_level(self) -> int:
        return self.value

    @classmethod
    def from_name(cls, name: Optional[str]) -> "AccessTier":
        """Map a stored tier name to a tier; unknown or "NONE" means FREE."""
        if not name:
            return cls.FREE
        return cls.__members__.get(name.strip().upper(), cls.FREE)


# plan -> (tier, access level granted on upgrade)
PLAN_TIERS: Dict[str, tuple] = {
    "basic": (AccessTier.FREE, 1),
    "starter": (AccessTier.STARTER, AccessTier.STARTER.access_level),
    "pure": (AccessTier.PURE, AccessTier.PURE.access_level),
    "elite": (AccessTier.ELITE, AccessTier.ELITE.access_level),
}
DEFAULT_PLAN = "starter"


@dataclass(frozen=True)
class UserAccessRecord:
    """A caller's subscription record, keyed by identity in the registry."""

    tier: AccessTier
    access_level: int
    plan: str
    joined_date: Optional[str] = None
    status: str = "PAID"

    @classmethod
    def anonymous(cls) -> "UserAccessRecord":
        """The implicit record of callers that are not in the registry."""
        return cls(
            tier=AccessTier.FREE,
            access_level=0,
            plan="free",
            joined_date=None,
            status="FREE",
        )

    @classmethod
    def for_plan(cls, plan: str, joined: Optional[date] = None) -> "UserAccessRecord":
        """Build the record an upgrade to `plan` produces (unknown plans get STARTER)."""
        plan_key = (plan or "").strip().lower()
        if plan_key not in PLAN_TIERS:
            plan_key = DEFAULT_PLAN
        tier, level = PLAN_TIERS[plan_key]
        joined = joined or datetime.now(timezone.utc).date()
        return cls(
            tier=tier,
            access_level=level,
            plan=plan_key,
            joined_date=joined.isoformat(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserAccessRecord":
        level = data.get("access_level", data.get("accessLevel", 0))
        try:
            level = int(level)
        except (TypeError, ValueError):
            level = 0
        return cls(
            tier=AccessTier.from_name(data.get("tier")),
            access_level=level,
            plan=str(data.get("plan", "free")),
            joined_date=data.get("joined_date", data.get("joinedDate")),
            status=str(data.get("status", "PAID")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "tier": self.tier.name,
            "plan": self.plan,
            "access_level": self.access_level,
            "joined_date": self.joined_date,
        }


@dataclass(frozen=True)
class CategoryRequirement:
    """Minimum access level (and the plan to advertise) for one category."""

    level: int
    plan: str


DEFAULT_CATEGORY_REQUIREMENTS: Dict[ContentCategory, CategoryRequirement] = {
    ContentCategory.NEWS: CategoryRequirement(level=1, plan="starter"),
    ContentCategory.TOOL: CategoryRequirement(level=3, plan="starter"),
    ContentCategory.MEDIA: CategoryRequirement(level=7, plan="pure"),
    ContentCategory.AUDIO: CategoryRequirement(level=1, plan="starter"),
}


@dataclass(frozen=True)
class AnalysisRequest:
    """A caller's submission. Ephemeral: lives for one analyze() call."""

    raw_content: str
    category_hint: Optional[Union[ContentCategory, str]] = None
    media_kind: Optional[Union[MediaKind, str]] = None
    caller_identity: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.raw_content, str) or not self.raw_content.strip():
            raise ValueError("raw_content must be a non-empty string")

    @property
    def content(self) -> str:
        """Content with surrounding whitespace removed."""
        return self.raw_content.strip()


class ResultOrigin(str, Enum):
    ENGINE = "engine"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AnalysisResult:
    """
    A normalized, schema-valid result for one category.

    `data` holds the category-specific report; `result_origin` and
    `received_at` are added by the normalizer.
    """

    category: ContentCategory
    data: Dict[str, Any]
    result_origin: ResultOrigin
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.result_origin is ResultOrigin.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.data)
        result["resultOrigin"] = self.result_origin.value
        result["receivedAt"] = self.received_at.isoformat()
        return result


class DenialReason(str, Enum):
    CATEGORY_OFFLINE = "category_offline"
    INSUFFICIENT_TIER = "insufficient_tier"


@dataclass(frozen=True)
class AccessDenial:
    """Explicit denial value returned instead of a result."""

    reason: DenialReason
    category: ContentCategory
    message: str
    required_plan: Optional[str] = None
    current_tier: Optional[str] = None

    @property
    def retriable(self) -> bool:
        """Offline categories may come back; tier denials need an upgrade."""
        return self.reason is DenialReason.CATEGORY_OFFLINE

    @property
    def status_code(self) -> int:
        return 503 if self.reason is DenialReason.CATEGORY_OFFLINE else 403

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "denied": True,
            "reason": self.reason.value,
            "category": self.category.value,
            "message": self.message,
            "retriable": self.retriable,
        }
        if self.reason is DenialReason.INSUFFICIENT_TIER:
            result["requiredPlan"] = self.required_plan
            result["currentTier"] = self.current_tier
            result["locked"] = True
        return result


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of the access gate: allowed, or the denial to return."""

    allowed: bool
    denial: Optional[AccessDenial] = None
    access: Optional[UserAccessRecord] = None

    @classmethod
    def allow(cls, access: UserAccessRecord) -> "AccessDecision":
        return cls(allowed=True, access=access)

    @classmethod
    def deny(cls, denial: AccessDenial, access: Optional[UserAccessRecord] = None) -> "AccessDecision":
        return cls(allowed=False, denial=denial, access=access)


@dataclass(frozen=True)
class AuditEntry:
    """One completed analysis in the bounded audit trail."""

    category: ContentCategory
    content_excerpt: str
    result_summary: Dict[str, Any]
    timestamp: datetime
    result_origin: ResultOrigin = ResultOrigin.ENGINE
    caller_identity: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "content_excerpt": self.content_excerpt,
            "result_summary": dict(self.result_summary),
            "timestamp": self.timestamp.isoformat(),
            "result_origin": self.result_origin.value,
            "caller_identity": self.caller_identity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditEntry":
        """Rebuild an entry from the persisted document (tolerates legacy keys)."""
        category = ContentCategory.parse(data.get("category")) or _legacy_category(
            data.get("type")
        )
        raw_ts = data.get("timestamp")
        try:
            timestamp = datetime.fromisoformat(str(raw_ts).replace("Z", "+00:00"))
        except ValueError:
            timestamp = datetime.fromtimestamp(0, tz=timezone.utc)
        origin = data.get("result_origin", ResultOrigin.ENGINE.value)
        summary = data.get("result_summary", data.get("result", {}))
        return cls(
            category=category,
            content_excerpt=str(data.get("content_excerpt", data.get("content", ""))),
            result_summary=summary if isinstance(summary, dict) else {"value": summary},
            timestamp=timestamp,
            result_origin=ResultOrigin(origin) if origin in ("engine", "fallback") else ResultOrigin.ENGINE,
            caller_identity=data.get("caller_identity", data.get("userEmail")),
        )


_LEGACY_TYPES = {
    "news-verification": ContentCategory.NEWS,
    "tool-audit": ContentCategory.TOOL,
    "media-audit": ContentCategory.MEDIA,
    "forensic-scan": ContentCategory.MEDIA,
    "audio-audit": ContentCategory.AUDIO,
}


def _legacy_category(entry_type: Any) -> ContentCategory:
    """Map an entry type written by the previous product to a category."""
    return _LEGACY_TYPES.get(str(entry_type), ContentCategory.NEWS)


@dataclass(frozen=True)
class RawEngineOutput:
    """Unparsed text returned by an analysis collaborator."""

    category: ContentCategory
    text: str
    engine_name: str
    elapsed: float = 0.0
    model_used: Optional[str] = None


@dataclass(frozen=True)
class EngineError:
    """A collaborator failure: transport error, timeout, or no output."""

    category: ContentCategory
    reason: str
    engine_name: str
    error: Optional[BaseException] = field(default=None, compare=False)
    elapsed: float = 0.0
