"""Audio intelligence engine - voice authenticity and content summary."""

from typing import Any, Dict, Optional

from contentintel.core.models import ContentCategory
from contentintel.core.schemas import VOICE_VERDICTS
from contentintel.features.prompt_helpers import build_system_prompt, content_block
from contentintel.features.protocols import BaseAnalysisEngine

DEFAULT_PLATFORM = "Direct Upload"


def audio_structure(platform: str) -> Dict[str, Any]:
    verdicts = " | ".join(VOICE_VERDICTS.choices)
    return {
        "audioTitle": "Brief descriptive title of the audio",
        "platform": platform,
        "duration": "Estimated duration (e.g. '3:45')",
        "transcription": "Speech-to-text transcription with speaker labels",
        "smartSummary": "3-5 sentence summary of the audio content",
        "voiceVerdict": verdicts,
        "confidence": "<integer 0-100 confidence in voiceVerdict>",
        "voiceAudit": {
            "verdict": verdicts,
            "confidence": "<integer 0-100>",
            "naturalness": "<integer 0-100, 100 = perfectly natural human speech>",
            "breathingPatterns": "NATURAL | ABSENT | ARTIFICIAL",
            "pitchVariation": "NATURAL | MONOTONE | ARTIFICIAL_VARIATION",
            "finding": "One sentence explaining the voice audit",
        },
        "languageAnalysis": {
            "primaryLanguage": "Detected primary language",
            "accent": "Detected accent or dialect if applicable",
        },
        "audioQuality": {
            "overallScore": "<integer 0-100>",
            "backgroundNoise": "None | Minimal | Moderate | Significant | Heavy",
        },
        "riskAssessment": "SAFE | LOW_RISK | MEDIUM_RISK | HIGH_RISK",
        "flags": ["Red flags about the audio"],
        "recommendations": ["Recommendations for the user"],
    }


AUDIO_GUIDELINES = (
    "HUMAN: natural breathing every 3-8s, organic pitch variation, emotional prosody",
    "AI_GENERATED: absent or perfectly timed breathing, flat prosody, TTS artifacts",
    "MIXED: human and synthetic segments within the same audio",
    "If voice analysis is inconclusive default to AI_GENERATED, never HUMAN",
)


class AudioIntelligenceEngine(BaseAnalysisEngine):
    """Detects synthetic voices and summarizes audio content."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            engine_id="audio_intelligence",
            display_name="Audio Intelligence",
            category=ContentCategory.AUDIO,
            version="1.0.0",
            client=client,
        )

    def _system_prompt(self, hint: Optional[str]) -> str:
        return build_system_prompt(
            "You are an audio forensics and transcription engine. You analyze "
            "audio from any source and decide whether the voice is human or synthetic.",
            audio_structure(hint or DEFAULT_PLATFORM),
            AUDIO_GUIDELINES,
        )

    def _user_prompt(self, content: str, hint: Optional[str]) -> str:
        return (
            f"Run an audio intelligence scan on this content from {hint or DEFAULT_PLATFORM}:\n\n"
            f"{content_block(content)}"
        )
