"""Tool auditor - safety and legitimacy assessment of software and links."""

from typing import Any, Optional

from contentintel.core.models import ContentCategory
from contentintel.core.schemas import RISK_LEVELS, SAFETY_RATINGS
from contentintel.features.prompt_helpers import build_system_prompt, content_block
from contentintel.features.protocols import BaseAnalysisEngine

TOOL_STRUCTURE = {
    "toolName": "The name of the tool/software being audited",
    "safetyRating": "One of: " + ", ".join(SAFETY_RATINGS.choices),
    "legitimacy": "One of: Official Software, Verified Publisher, Unknown Publisher, Suspicious, Malicious",
    "userTrust": "One of: Very High, High, Moderate, Low, Very Low",
    "riskLevel": "One of: " + ", ".join(RISK_LEVELS.choices),
    "details": "A detailed 2-3 sentence analysis of safety, legitimacy and concerns",
    "recommendations": ["Security recommendations for the user"],
    "flags": ["Red flags or concerns found"],
    "historicalYear": "Year the tool was first released",
    "originalChannel": "Original distribution channel (e.g. Official Website, App Store, GitHub)",
    "privacyAudit": "Excellent | Good | Fair | Poor | Critical",
    "pricingPlans": "Free | Freemium | Paid | Enterprise, with known tiers",
    "resultAccuracy": "<integer 0-100 reliability of this assessment>",
}

TOOL_GUIDELINES = (
    "AAA+++: industry-leading, trusted globally, zero known issues",
    "AA+: well-known, verified publisher, minor concerns only",
    "A: legitimate and safe with standard precautions",
    "B: moderate concerns, use with caution",
    "D: dangerous, significant risks identified",
    "F: fake, malicious, or scam - do not use",
)


class ToolAuditor(BaseAnalysisEngine):
    """Rates the safety of a tool, app or link on the AAA+++..F scale."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            engine_id="tool_auditor",
            display_name="Tool Auditor",
            category=ContentCategory.TOOL,
            version="1.0.0",
            client=client,
        )

    def _system_prompt(self, hint: Optional[str]) -> str:
        return build_system_prompt(
            "You are a professional cybersecurity and software auditor. Analyze "
            "the given tool, app, or software and assess its safety and legitimacy.",
            TOOL_STRUCTURE,
            TOOL_GUIDELINES,
        )

    def _user_prompt(self, content: str, hint: Optional[str]) -> str:
        return (
            "Please audit the following tool/software for safety and legitimacy:\n\n"
            f"{content_block(content)}"
        )
