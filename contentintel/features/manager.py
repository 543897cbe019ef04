"""
Content Intelligence Dispatcher - orchestrates one analysis request.

Pipeline, strictly sequential per request:
    classify -> access gate -> dispatch -> normalize -> audit
Requests from different callers run concurrently; the configuration
store serializes their writes.
"""

import dataclasses
import logging
import uuid
from typing import Any, Dict, Iterable, Optional, Union

from contentintel.core.audit import AuditTrail, create_audit_trail
from contentintel.core.classifier import classify, engine_hint
from contentintel.core.models import AccessDenial, AnalysisRequest, AnalysisResult
from contentintel.core.normalizer import ResultNormalizer
from contentintel.core.registry import TierRegistry
from contentintel.core.store import ConfigStore, create_config_store
from contentintel.features.admin import AdminConsole
from contentintel.features.dispatch import DEFAULT_ENGINE_TIMEOUT, AnalysisDispatch
from contentintel.features.gate import AccessGate
from contentintel.features.protocols import AnalysisEngine
from contentintel.utils.errors import StoreError
from contentintel.utils.logging import create_logger_with_context


class ContentIntelligenceDispatcher:
    """
    Single entry point for content analysis.

    Responsibilities:
        - Classifies the request into a category
        - Returns a denial value when the category is offline or the
          caller's tier is too low, before any engine is called
        - Calls the category engine and normalizes whatever comes back
        - Records the outcome in the audit trail

    Usage:
        with create_dispatcher(config) as dispatcher:
            outcome = dispatcher.analyze(AnalysisRequest("Vaccines cause magnetism"))
    """

    def __init__(
        self,
        store: ConfigStore,
        gate: AccessGate,
        dispatch: AnalysisDispatch,
        normalizer: ResultNormalizer,
        audit: AuditTrail,
        registry: Optional[TierRegistry] = None,
        admin: Optional[AdminConsole] = None,
    ):
        self.store = store
        self.gate = gate
        self.dispatch = dispatch
        self.normalizer = normalizer
        self.audit = audit
        self.registry = registry or TierRegistry(store)
        self.admin = admin or AdminConsole(store, audit, self.registry)
        self.logger = logging.getLogger("dispatcher")

    def analyze(
        self,
        request: Union[AnalysisRequest, str],
        caller_identity: Optional[str] = None,
    ) -> Union[AnalysisResult, AccessDenial]:
        """
        Run one request through the pipeline.

        Args:
            request: The submission (a bare string is treated as raw content).
            caller_identity: Overrides request.caller_identity when given.

        Returns:
            AnalysisResult (engine or fallback), or AccessDenial.

        Raises:
            ValueError: If the content is empty.
        """
        if isinstance(request, str):
            request = AnalysisRequest(raw_content=request)
        if caller_identity is not None:
            request = dataclasses.replace(request, caller_identity=caller_identity)
        caller = request.caller_identity

        category = classify(request)
        log = create_logger_with_context(
            "dispatcher",
            {
                "request_id": uuid.uuid4().hex[:12],
                "category": category.value,
                "caller": caller or "anonymous",
            },
        )
        log.debug(f"Classified request as '{category.value}'")

        decision = self.gate.check_access(category, caller)
        if not decision.allowed:
            log.info(f"Request denied: {decision.denial.reason.value}")
            return decision.denial

        hint = engine_hint(category, request)
        outcome = self.dispatch.dispatch(category, request.content, hint)
        result = self.normalizer.normalize(category, outcome, request.content, hint)

        try:
            self.audit.record(category, request, result)
        except StoreError as e:
            log.error(f"Failed to record audit entry: {e}")

        log.info(f"Completed {category.value} analysis ({result.result_origin.value})")
        return result

    def status(self, caller_identity: Optional[str] = None) -> Dict[str, Any]:
        """Category availability for a caller, plus the caller's plan."""
        access = self.registry.user_status(caller_identity)
        return {
            "caller": caller_identity or "anonymous",
            "plan": access.plan,
            "tier": access.tier.name,
            "access_level": access.access_level,
            "paywall_enabled": self.store.paywall_enabled(),
            "categories": {
                category.value: {
                    "enabled": enabled,
                    "available": self.gate.is_available(category, caller_identity),
                    "required_plan": self.gate.requirement(category).plan,
                }
                for category, enabled in self.store.feature_flags().items()
            },
        }

    def shutdown(self) -> None:
        """Shutdown the engine worker pool."""
        self.logger.info("Shutting down dispatcher")
        self.dispatch.shutdown()

    def __enter__(self) -> "ContentIntelligenceDispatcher":
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Cleanup on context exit."""
        self.shutdown()


def create_dispatcher(
    config: Dict[str, Any],
    client: Optional[Any] = None,
    engines: Optional[Iterable[AnalysisEngine]] = None,
    store: Optional[ConfigStore] = None,
) -> ContentIntelligenceDispatcher:
    """
    Factory function to create a fully wired dispatcher.

    Args:
        config: Configuration dict (see config/config.yaml).
        client: LLM client shared by the engines. Created from
            config["llm"] when omitted.
        engines: Engines to use instead of the built-in four.
        store: Configuration store. Created from config["store"] when omitted.

    Returns:
        ContentIntelligenceDispatcher: Configured dispatcher
    """
    store = store or create_config_store(config.get("store", {}))

    if engines is None:
        from contentintel.features.implementations import ALL_ENGINE_CLASSES

        if client is None:
            from contentintel.features.client import create_llm_client

            client = create_llm_client(config.get("llm", {}))
        engines = [cls(client=client) for cls in ALL_ENGINE_CLASSES]

    dispatcher_config = config.get("dispatcher", {})
    dispatch = AnalysisDispatch(
        engines,
        max_workers=dispatcher_config.get("max_workers", 8),
        timeout=dispatcher_config.get("engine_timeout", DEFAULT_ENGINE_TIMEOUT),
    )

    audit = create_audit_trail(store, config.get("audit", {}))
    registry = TierRegistry(store)
    admin = AdminConsole(store, audit, registry, config.get("admin", {}))

    logging.getLogger("dispatcher").info(
        f"Dispatcher initialized with {len(dispatch.engines)} engines"
    )
    return ContentIntelligenceDispatcher(
        store=store,
        gate=AccessGate(store),
        dispatch=dispatch,
        normalizer=ResultNormalizer(),
        audit=audit,
        registry=registry,
        admin=admin,
    )
