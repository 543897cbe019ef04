"""
Core module containing data models, classification, the configuration
store, result normalization and the audit trail.
"""

from contentintel.core.models import (
    ContentCategory,
    MediaKind,
    AccessTier,
    UserAccessRecord,
    CategoryRequirement,
    AnalysisRequest,
    AnalysisResult,
    ResultOrigin,
    AccessDenial,
    AccessDecision,
    DenialReason,
    AuditEntry,
    RawEngineOutput,
    EngineError,
)
from contentintel.core.classifier import classify
from contentintel.core.store import ConfigStore, create_config_store
from contentintel.core.normalizer import ResultNormalizer
from contentintel.core.audit import AuditTrail, create_audit_trail
from contentintel.core.registry import TierRegistry

__all__ = [
    "ContentCategory",
    "MediaKind",
    "AccessTier",
    "UserAccessRecord",
    "CategoryRequirement",
    "AnalysisRequest",
    "AnalysisResult",
    "ResultOrigin",
    "AccessDenial",
    "AccessDecision",
    "DenialReason",
    "AuditEntry",
    "RawEngineOutput",
    "EngineError",
    "classify",
    "ConfigStore",
    "create_config_store",
    "ResultNormalizer",
    "AuditTrail",
    "create_audit_trail",
    "TierRegistry",
]
