"""
Bounded audit trail.

Appends a small record of every normalized analysis (engine or fallback)
to the configuration store. The history is a sliding window: once the
cap is reached the oldest entries are evicted before the new one is
inserted. Recording is active only while audit sync is enabled.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from contentintel.core.models import (
    AnalysisRequest,
    AnalysisResult,
    AuditEntry,
    ContentCategory,
)
from contentintel.core.schemas import get_schema
from contentintel.core.store import ConfigStore, normalize_identity

DEFAULT_MAX_ENTRIES = 200
DEFAULT_EXCERPT_LENGTH = 200


def summarize_result(result: AnalysisResult) -> Dict[str, Any]:
    """Pick the category's summary fields out of a result."""
    schema = get_schema(result.category)
    summary: Dict[str, Any] = {}
    for key, path in schema.summary_fields:
        value: Any = result.data
        for part in path.split("."):
            value = value.get(part) if isinstance(value, dict) else None
        if value is not None:
            summary[key] = value
    return summary


class AuditTrail:
    """
    Ring buffer of AuditEntry records kept inside the ConfigStore.

    Usage:
        trail = AuditTrail(store, max_entries=200)
        trail.record(category, request, result)
        entries = trail.read()
    """

    def __init__(
        self,
        store: ConfigStore,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        excerpt_length: int = DEFAULT_EXCERPT_LENGTH,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.store = store
        self.max_entries = max_entries
        self.excerpt_length = excerpt_length
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger("audit")

    @property
    def enabled(self) -> bool:
        return self.store.audit_sync_enabled()

    def record(
        self,
        category: ContentCategory,
        request: AnalysisRequest,
        result: AnalysisResult,
    ) -> Optional[AuditEntry]:
        """
        Append one entry, evicting the oldest while the cap is reached.

        Returns:
            The stored entry, or None when audit sync is disabled.
        """
        if not self.enabled:
            self.logger.debug("Audit sync disabled, skipping record")
            return None

        entry = AuditEntry(
            category=category,
            content_excerpt=request.content[: self.excerpt_length],
            result_summary=summarize_result(result),
            timestamp=self._clock(),
            result_origin=result.result_origin,
            caller_identity=normalize_identity(request.caller_identity),
        )

        evicted = 0
        with self.store.mutate() as state:
            history: List[Dict[str, Any]] = state["audit_history"]
            while len(history) >= self.max_entries:
                history.pop(0)
                evicted += 1
            history.append(entry.to_dict())

        if evicted:
            self.logger.debug(f"Evicted {evicted} audit entries (cap {self.max_entries})")
        self.logger.info(
            f"Recorded {category.value} audit entry",
            extra={"category": category.value, "result_origin": result.result_origin.value},
        )
        return entry

    def read(self) -> List[AuditEntry]:
        """All entries, oldest first (most recent last)."""
        return self.store.audit_history()

    def stats(self) -> Dict[str, Any]:
        """Entry counts per category and per result origin."""
        entries = self.read()
        by_category = Counter(entry.category.value for entry in entries)
        by_origin = Counter(entry.result_origin.value for entry in entries)
        return {
            "total": len(entries),
            "capacity": self.max_entries,
            "by_category": {category.value: by_category.get(category.value, 0) for category in ContentCategory},
            "by_origin": dict(by_origin),
            "last_timestamp": entries[-1].timestamp.isoformat() if entries else None,
        }


def create_audit_trail(store: ConfigStore, config: Optional[Dict[str, Any]] = None) -> AuditTrail:
    """Factory function to create an AuditTrail from the 'audit' config section."""
    config = config or {}
    return AuditTrail(
        store,
        max_entries=config.get("max_entries", DEFAULT_MAX_ENTRIES),
        excerpt_length=config.get("excerpt_length", DEFAULT_EXCERPT_LENGTH),
    )
