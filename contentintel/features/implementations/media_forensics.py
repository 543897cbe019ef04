"""Media forensics engine - authenticity scan of images and video."""

from typing import Any, Dict, Optional

from contentintel.core.models import ContentCategory, MediaKind
from contentintel.core.schemas import MEDIA_VERDICTS
from contentintel.features.prompt_helpers import build_system_prompt, content_block
from contentintel.features.protocols import BaseAnalysisEngine


def media_structure(kind: str) -> Dict[str, Any]:
    return {
        "mediaName": "Brief descriptive title of the media",
        "mediaType": kind,
        "forensicScore": "<integer 0-100 overall forensic integrity>",
        "verdict": " | ".join(MEDIA_VERDICTS.choices),
        "authenticityProbability": "<integer 0-100, 100 = definitely authentic>",
        "aiDetection": {
            "isAiGenerated": "true or false",
            "confidence": "<integer 0-100>",
            "model": "Detected generator if applicable, else 'N/A'",
        },
        "tamperCheck": {
            "status": "CLEAN | SUSPICIOUS | TAMPERED",
            "confidence": "<integer 0-100>",
            "regions": ["Regions showing splicing, cloning or compression anomalies"],
        },
        "deepfakeDetection": {
            "status": "NOT_DETECTED | SUSPECTED | DETECTED",
            "confidence": "<integer 0-100>",
        },
        "riskAssessment": "SAFE | LOW_RISK | MEDIUM_RISK | HIGH_RISK",
        "details": "2-3 sentence explanation of the forensic findings",
        "flags": ["Red flags found"],
        "recommendations": ["Recommendations for the user"],
    }


MEDIA_GUIDELINES = (
    "Apply error level analysis, sensor noise consistency, lighting and shadow checks",
    "Only mark AUTHENTIC when the evidence is overwhelming",
    "When authenticity cannot be established with high confidence use "
    "LIKELY_MANIPULATED or SYNTHETIC instead of INCONCLUSIVE",
)

VIDEO_GUIDELINES = (
    "Scan for frame-to-frame jitter and temporal artifacts",
    "Check facial geometry consistency across frames",
)


class MediaForensicsEngine(BaseAnalysisEngine):
    """Judges whether an image or video is authentic, edited or generated."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            engine_id="media_forensics",
            display_name="Media Forensics",
            category=ContentCategory.MEDIA,
            version="1.0.0",
            client=client,
        )

    @staticmethod
    def _kind(hint: Optional[str]) -> str:
        kind = MediaKind.parse(hint)
        return (kind or MediaKind.IMAGE).value

    def _system_prompt(self, hint: Optional[str]) -> str:
        kind = self._kind(hint)
        guidelines = MEDIA_GUIDELINES
        if kind == MediaKind.VIDEO.value:
            guidelines = MEDIA_GUIDELINES + VIDEO_GUIDELINES
        return build_system_prompt(
            f"You are a media forensics engine performing a pixel-level audit of {kind} media.",
            media_structure(kind),
            guidelines,
        )

    def _user_prompt(self, content: str, hint: Optional[str]) -> str:
        return (
            f"Perform a forensic authenticity scan on this {self._kind(hint)}:\n\n"
            f"{content_block(content)}"
        )
