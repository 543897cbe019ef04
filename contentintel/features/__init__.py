"""
LLM-backed analysis features for the Content Intelligence Dispatcher.

Architecture:
    AnalysisRequest -> classify -> AccessGate -> AnalysisDispatch -> ResultNormalizer -> AuditTrail
                                       |                |
                                  ConfigStore     Engine implementations (LLMClient)
"""

from contentintel.features.gate import (
    EntitlementProvider,
    TierEntitlement,
    AccessGate,
)
from contentintel.features.client import LLMClient, create_llm_client
from contentintel.features.protocols import AnalysisEngine, BaseAnalysisEngine
from contentintel.features.dispatch import AnalysisDispatch
from contentintel.features.admin import AdminConsole
from contentintel.features.manager import ContentIntelligenceDispatcher, create_dispatcher

__all__ = [
    "EntitlementProvider",
    "TierEntitlement",
    "AccessGate",
    "LLMClient",
    "create_llm_client",
    "AnalysisEngine",
    "BaseAnalysisEngine",
    "AnalysisDispatch",
    "AdminConsole",
    "ContentIntelligenceDispatcher",
    "create_dispatcher",
]
