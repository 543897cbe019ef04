"""
Result schemas for each content category.

A schema names the fields an engine response must carry, the ranges of
its numeric fields, the ordered verdict scales (most favorable first),
the fallback report used when the engine output cannot be trusted, and
the subset of fields copied into the audit trail.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from contentintel.core.models import ContentCategory


@dataclass(frozen=True)
class ScoreField:
    """Bounded numeric field."""

    name: str
    low: float = 0
    high: float = 100
    required: bool = True


@dataclass(frozen=True)
class ChoiceField:
    """Ordinal field. `choices` runs from most favorable to least favorable."""

    name: str
    choices: Tuple[str, ...]
    required: bool = True

    def canonical(self, value: Any) -> Optional[str]:
        """Case-insensitive match against the scale, or None."""
        if not isinstance(value, str):
            return None
        wanted = value.strip().upper()
        for choice in self.choices:
            if choice.upper() == wanted:
                return choice
        return None


@dataclass(frozen=True)
class CategorySchema:
    category: ContentCategory
    verdict_field: str
    text_fields: Tuple[str, ...]
    choice_fields: Tuple[ChoiceField, ...]
    score_fields: Tuple[ScoreField, ...]
    summary_fields: Tuple[Tuple[str, str], ...]
    fallback: Callable[[str, Optional[str]], Dict[str, Any]]
    prepare: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None
    optional_scores: Tuple[ScoreField, ...] = field(default_factory=tuple)


def _excerpt(content: str, length: int = 50) -> str:
    return content.strip()[:length]


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------


def _news_fallback(content: str, hint: Optional[str]) -> Dict[str, Any]:
    return {
        "verdict": "Unverified - Likely False",
        "credibilityScore": 15,
        "summary": (
            "HIGH DOUBT - The verification engine could not produce a usable "
            "result. Unverifiable claims are treated as likely false."
        ),
        "sources": [],
        "claimsAnalyzed": [],
        "flaggedClaims": [_excerpt(content, 200)],
        "flags": [
            "Verification engine failure - claims could not be verified",
            "Default high-doubt policy applied",
        ],
        "recommendations": [
            "Check the claim against established fact-checking outlets",
            "Re-submit later for a full analysis",
        ],
    }


NEWS_SCHEMA = CategorySchema(
    category=ContentCategory.NEWS,
    verdict_field="verdict",
    text_fields=("verdict",),
    choice_fields=(),
    score_fields=(ScoreField("credibilityScore"),),
    optional_scores=(
        ScoreField("globalAuthorityScore", required=False),
        ScoreField("motiveAnalysis.confidenceLevel", required=False),
    ),
    summary_fields=(
        ("verdict", "verdict"),
        ("credibilityScore", "credibilityScore"),
        ("motive", "motiveAnalysis.detectedMotive"),
    ),
    fallback=_news_fallback,
)


# ---------------------------------------------------------------------------
# Tool
# ---------------------------------------------------------------------------

SAFETY_RATINGS = ChoiceField("safetyRating", ("AAA+++", "AA+", "A", "B", "D", "F"))
RISK_LEVELS = ChoiceField("riskLevel", ("Minimal", "Low", "Medium", "High", "Critical"))


def _tool_fallback(content: str, hint: Optional[str]) -> Dict[str, Any]:
    return {
        "toolName": _excerpt(content),
        "safetyRating": "D",
        "legitimacy": "Unknown Publisher",
        "userTrust": "Low",
        "riskLevel": "High",
        "details": (
            "HIGH DOUBT - The audit engine could not produce a usable result. "
            "Software that cannot be audited is treated as dangerous."
        ),
        "flags": [
            "Audit engine failure - legitimacy could not be verified",
            "Default high-doubt policy applied",
        ],
        "recommendations": [
            "Do not install or sign in until the publisher is verified",
            "Download only from the official distribution channel",
        ],
    }


TOOL_SCHEMA = CategorySchema(
    category=ContentCategory.TOOL,
    verdict_field="safetyRating",
    text_fields=(),
    choice_fields=(SAFETY_RATINGS, RISK_LEVELS),
    score_fields=(),
    optional_scores=(
        ScoreField("globalAuthorityScore", required=False),
        ScoreField("resultAccuracy", required=False),
    ),
    summary_fields=(
        ("toolName", "toolName"),
        ("safetyRating", "safetyRating"),
        ("riskLevel", "riskLevel"),
    ),
    fallback=_tool_fallback,
)


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

MEDIA_VERDICTS = ChoiceField(
    "verdict",
    (
        "AUTHENTIC",
        "LIKELY_AUTHENTIC",
        "INCONCLUSIVE",
        "LIKELY_MANIPULATED",
        "MANIPULATED",
        "SYNTHETIC",
    ),
)


def _media_fallback(content: str, hint: Optional[str]) -> Dict[str, Any]:
    return {
        "mediaName": _excerpt(content),
        "mediaType": hint or "image",
        "verdict": "LIKELY_MANIPULATED",
        "forensicScore": 15,
        "authenticityProbability": 10,
        "riskAssessment": "HIGH_RISK",
        "details": (
            "HIGH DOUBT - The forensic engine could not produce a usable result. "
            "Unverifiable media is flagged as likely manipulated."
        ),
        "flags": [
            "Forensic engine failure - authenticity could not be verified",
            "Default high-doubt policy applied",
        ],
        "recommendations": [
            "Re-submit with a higher quality source",
            "Verify through alternative forensic tools",
        ],
    }


MEDIA_SCHEMA = CategorySchema(
    category=ContentCategory.MEDIA,
    verdict_field="verdict",
    text_fields=(),
    choice_fields=(MEDIA_VERDICTS,),
    score_fields=(
        ScoreField("forensicScore"),
        ScoreField("authenticityProbability"),
    ),
    optional_scores=(
        ScoreField("aiDetection.confidence", required=False),
        ScoreField("tamperCheck.confidence", required=False),
        ScoreField("deepfakeDetection.confidence", required=False),
    ),
    summary_fields=(
        ("mediaName", "mediaName"),
        ("verdict", "verdict"),
        ("forensicScore", "forensicScore"),
        ("authenticityProbability", "authenticityProbability"),
    ),
    fallback=_media_fallback,
)


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

VOICE_VERDICTS = ChoiceField(
    "voiceVerdict", ("HUMAN", "INCONCLUSIVE", "MIXED", "AI_GENERATED")
)


def _lift_voice_audit(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept the verdict nested under voiceAudit when the flat fields are absent."""
    audit = data.get("voiceAudit")
    if isinstance(audit, dict):
        if "voiceVerdict" not in data and "verdict" in audit:
            data["voiceVerdict"] = audit["verdict"]
        if "confidence" not in data and "confidence" in audit:
            data["confidence"] = audit["confidence"]
    return data


def _audio_fallback(content: str, hint: Optional[str]) -> Dict[str, Any]:
    return {
        "audioTitle": _excerpt(content),
        "platform": hint or "Direct Upload",
        "voiceVerdict": "AI_GENERATED",
        "confidence": 20,
        "voiceAudit": {
            "verdict": "AI_GENERATED",
            "confidence": 20,
            "naturalness": 10,
            "breathingPatterns": "ABSENT",
            "pitchVariation": "MONOTONE",
            "finding": (
                "HIGH DOUBT - The voice engine could not produce a usable result. "
                "Unverifiable audio defaults to AI_GENERATED."
            ),
        },
        "riskAssessment": "HIGH_RISK",
        "flags": [
            "Voice engine failure - authenticity could not be verified",
            "Default AI-suspicion policy applied",
        ],
        "recommendations": [
            "Re-submit with a higher quality audio source",
            "Verify through alternative voice analysis tools",
        ],
    }


AUDIO_SCHEMA = CategorySchema(
    category=ContentCategory.AUDIO,
    verdict_field="voiceVerdict",
    text_fields=(),
    choice_fields=(VOICE_VERDICTS,),
    score_fields=(ScoreField("confidence"),),
    optional_scores=(
        ScoreField("voiceAudit.confidence", required=False),
        ScoreField("voiceAudit.naturalness", required=False),
        ScoreField("audioQuality.overallScore", required=False),
    ),
    summary_fields=(
        ("audioTitle", "audioTitle"),
        ("platform", "platform"),
        ("voiceVerdict", "voiceVerdict"),
        ("confidence", "confidence"),
    ),
    fallback=_audio_fallback,
    prepare=_lift_voice_audit,
)


SCHEMAS: Dict[ContentCategory, CategorySchema] = {
    ContentCategory.NEWS: NEWS_SCHEMA,
    ContentCategory.TOOL: TOOL_SCHEMA,
    ContentCategory.MEDIA: MEDIA_SCHEMA,
    ContentCategory.AUDIO: AUDIO_SCHEMA,
}


def get_schema(category: ContentCategory) -> CategorySchema:
    return SCHEMAS[category]
