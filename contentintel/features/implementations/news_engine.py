"""News verification engine - fact-checks free text claims."""

from typing import Any, Optional

from contentintel.core.models import ContentCategory
from contentintel.features.prompt_helpers import build_system_prompt, content_block
from contentintel.features.protocols import BaseAnalysisEngine

NEWS_STRUCTURE = {
    "verdict": "A short verdict statement (e.g. 'Mostly True', 'False - Misleading Claims', 'Unverified')",
    "credibilityScore": "<integer 0-100>",
    "summary": "A detailed 2-3 sentence explanation of the analysis and findings",
    "sources": ["Relevant source references or fact-checking notes"],
    "claimsAnalyzed": ["Each individual claim identified and verified"],
    "flaggedClaims": ["Claims that appear false, misleading, or unverifiable, with what is wrong"],
    "sourceOrigin": "The original source that first reported this (e.g. Reuters, Social Media Post)",
    "yearTimestamp": "Year or approximate date when this first appeared",
    "platformReach": "Not Viral | Slightly Viral | Moderately Viral | Highly Viral | Mega Viral",
    "motiveAnalysis": {
        "detectedMotive": "Informational | Political Agenda | Financial Gain | Clickbait/Engagement | "
        "Fear-Mongering | Propaganda | Satire/Parody | Disinformation Campaign | Unknown",
        "confidenceLevel": "<integer 0-100>",
        "beneficiary": "Who benefits from this content being spread",
        "manipulationTechniques": ["Persuasion or manipulation techniques used"],
    },
    "flags": ["Red flags found"],
    "recommendations": ["What the reader should do"],
}

NEWS_GUIDELINES = (
    "Score 80-100: strong evidence supports the claims",
    "Score 60-79: partially true, some claims verified",
    "Score 40-59: questionable, mixed evidence",
    "Score 0-39: likely false or highly misleading",
    "Always identify the specific claims within the content",
    "Flag claims that cannot be verified and say why each one is problematic",
)


class NewsVerificationEngine(BaseAnalysisEngine):
    """Scores the credibility of news content and individual claims."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            engine_id="news_verification",
            display_name="News Verification",
            category=ContentCategory.NEWS,
            version="1.0.0",
            client=client,
        )

    def _system_prompt(self, hint: Optional[str]) -> str:
        return build_system_prompt(
            "You are a professional fact-checking engine. Analyze news content "
            "or claims using evidence-based research standards.",
            NEWS_STRUCTURE,
            NEWS_GUIDELINES,
        )

    def _user_prompt(self, content: str, hint: Optional[str]) -> str:
        return f"Please verify the following news content/claim:\n\n{content_block(content)}"
