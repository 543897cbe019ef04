"""
Configuration store for the Content Intelligence Dispatcher.

Holds the runtime state shared by every request: feature flags, the
paywall toggle and tier prices, category requirements, the access
registry and the audit history. The whole document is read at startup
and rewritten on every mutation.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from contentintel.core.models import (
    DEFAULT_CATEGORY_REQUIREMENTS,
    AuditEntry,
    CategoryRequirement,
    ContentCategory,
    UserAccessRecord,
)
from contentintel.utils.errors import StoreError

# Flag names used by the previous product's state file
_LEGACY_FLAG_KEYS = {
    "news_engine": ContentCategory.NEWS,
    "tool_auditor": ContentCategory.TOOL,
    "media_intelligence": ContentCategory.MEDIA,
    "audio_intelligence": ContentCategory.AUDIO,
}


def default_state() -> Dict[str, Any]:
    """Return a fresh default state document."""
    return {
        "feature_flags": {category.value: True for category in ContentCategory},
        "paywall_enabled": False,
        "tier_prices": {
            "basic": "0",
            "starter": "10",
            "pure": "25",
            "elite": "49",
        },
        "category_requirements": {
            category.value: {"level": req.level, "plan": req.plan}
            for category, req in DEFAULT_CATEGORY_REQUIREMENTS.items()
        },
        "audit_sync_enabled": False,
        "user_registry": {},
        "audit_history": [],
    }


def normalize_identity(identity: Optional[str]) -> Optional[str]:
    """Registry keys are case-insensitive (emails)."""
    if identity is None:
        return None
    identity = identity.strip().lower()
    return identity or None


class ConfigStore:
    """
    Thread-safe holder of the persisted state document.

    Features:
    - Load with defaults merged in and the legacy layout migrated
    - Single-writer mutation through mutate()
    - Snapshot reads (deep copies, never live references)
    - Whole-document atomic persistence (temp file + replace)

    Usage:
        store = ConfigStore(Path("data/state.json"))
        with store.mutate() as state:
            state["paywall_enabled"] = True
        flags = store.feature_flags()
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the store and load the document.

        Args:
            path: JSON file backing the store. None keeps state in memory.
        """
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self.logger = logging.getLogger("store")
        self._state: Dict[str, Any] = default_state()
        self.load()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read the document from disk, merging defaults and migrating legacy keys."""
        with self._lock:
            self._state = default_state()
            if self.path is None or not self.path.exists():
                return

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load state from {self.path}, using defaults: {e}")
                return

            if not isinstance(raw, dict):
                self.logger.error(f"State file {self.path} is not a JSON object, using defaults")
                return

            self._state = self._merge(default_state(), _migrate_legacy(raw))
            self.logger.info(
                f"Loaded state: {len(self._state['user_registry'])} users, "
                f"{len(self._state['audit_history'])} audit entries"
            )

    def persist(self, state: Optional[Dict[str, Any]] = None) -> None:
        """
        Rewrite the whole document.

        Args:
            state: Document to write; the current state when None

        Raises:
            StoreError: If the file cannot be written
        """
        if self.path is None:
            return

        with self._lock:
            payload = json.dumps(self._state if state is None else state, indent=2, default=str)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        f.write(payload)
                    os.replace(tmp_name, self.path)
                except BaseException:
                    if os.path.exists(tmp_name):
                        os.unlink(tmp_name)
                    raise
            except OSError as e:
                raise StoreError(f"Failed to persist state: {e}", path=str(self.path)) from e

    @contextmanager
    def mutate(self) -> Iterator[Dict[str, Any]]:
        """
        Serialize a read-modify-write of the document, then persist it.

        The block edits a working copy that replaces the state only once it
        has been written. If the block or the write raises, the state is
        left as it was.
        """
        with self._lock:
            working = copy.deepcopy(self._state)
            yield working
            self.persist(working)
            self._state = working

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the whole document."""
        with self._lock:
            return copy.deepcopy(self._state)

    # ------------------------------------------------------------------
    # Typed reads
    # ------------------------------------------------------------------

    def feature_flags(self) -> Dict[ContentCategory, bool]:
        with self._lock:
            flags = self._state["feature_flags"]
            return {category: bool(flags.get(category.value, True)) for category in ContentCategory}

    def is_enabled(self, category: ContentCategory) -> bool:
        with self._lock:
            return bool(self._state["feature_flags"].get(category.value, True))

    def paywall_enabled(self) -> bool:
        with self._lock:
            return bool(self._state["paywall_enabled"])

    def audit_sync_enabled(self) -> bool:
        with self._lock:
            return bool(self._state["audit_sync_enabled"])

    def tier_prices(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._state["tier_prices"])

    def requirement(self, category: ContentCategory) -> CategoryRequirement:
        """Minimum level for a category; falls back to the built-in table."""
        with self._lock:
            entry = self._state["category_requirements"].get(category.value)
        default = DEFAULT_CATEGORY_REQUIREMENTS[category]
        if not isinstance(entry, dict):
            return default
        try:
            level = int(entry.get("level", default.level))
        except (TypeError, ValueError):
            level = default.level
        return CategoryRequirement(level=level, plan=str(entry.get("plan", default.plan)))

    def user_record(self, identity: Optional[str]) -> Optional[UserAccessRecord]:
        key = normalize_identity(identity)
        if key is None:
            return None
        with self._lock:
            data = self._state["user_registry"].get(key)
            return UserAccessRecord.from_dict(data) if isinstance(data, dict) else None

    def users(self) -> Dict[str, UserAccessRecord]:
        with self._lock:
            registry = copy.deepcopy(self._state["user_registry"])
        return {
            identity: UserAccessRecord.from_dict(data)
            for identity, data in registry.items()
            if isinstance(data, dict)
        }

    def audit_history(self) -> List[AuditEntry]:
        with self._lock:
            history = copy.deepcopy(self._state["audit_history"])
        return [AuditEntry.from_dict(item) for item in history if isinstance(item, dict)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge a loaded document over defaults.

        Only known keys are kept, and a value whose type differs from the
        default's is dropped in favor of the default.
        """
        for key, value in override.items():
            if key not in base:
                continue
            if isinstance(base[key], dict):
                if not isinstance(value, dict):
                    continue
                if key == "user_registry":
                    base[key] = value
                elif key == "feature_flags":
                    base[key] = cls._merge_section(
                        base[key], {k: v for k, v in value.items() if isinstance(v, bool)}
                    )
                else:
                    base[key] = cls._merge_section(base[key], value)
            elif isinstance(base[key], list):
                if isinstance(value, list):
                    base[key] = value
            elif isinstance(base[key], bool):
                if isinstance(value, bool):
                    base[key] = value
            else:
                base[key] = value
        return base

    @staticmethod
    def _merge_section(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        merged.update(override)
        return merged


def _migrate_legacy(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Translate the previous product's camelCase document to the current layout."""
    doc = {key: value for key, value in raw.items()}

    status = raw.get("systemStatus")
    if isinstance(status, dict) and "feature_flags" not in raw:
        doc["feature_flags"] = {
            category.value: status[legacy_key]
            for legacy_key, category in _LEGACY_FLAG_KEYS.items()
            if isinstance(status.get(legacy_key), bool)
        }

    money = raw.get("monetizationSettings")
    if isinstance(money, dict):
        if "paywall_enabled" not in raw and isinstance(money.get("paywallEnabled"), bool):
            doc["paywall_enabled"] = money["paywallEnabled"]
        if "tier_prices" not in raw:
            m = dict(money)
            # Old three-tier layout: basic/pro/enterprise
            if m.get("proPrice") and not m.get("purePrice"):
                m["starterPrice"] = m.get("basicPrice") or "10"
                m["purePrice"] = m["proPrice"]
                m["basicPrice"] = "0"
            if m.get("enterprisePrice") and not m.get("elitePrice"):
                m["elitePrice"] = m["enterprisePrice"]
            doc["tier_prices"] = {
                tier: str(m[f"{tier}Price"])
                for tier in ("basic", "starter", "pure", "elite")
                if m.get(f"{tier}Price") is not None
            }

    if "audit_sync_enabled" not in raw and isinstance(raw.get("googleSheetsIntegration"), bool):
        doc["audit_sync_enabled"] = raw["googleSheetsIntegration"]

    if "user_registry" not in raw and isinstance(raw.get("userRegistry"), dict):
        doc["user_registry"] = {
            normalize_identity(identity): UserAccessRecord.from_dict(record).to_dict()
            for identity, record in raw["userRegistry"].items()
            if isinstance(record, dict) and normalize_identity(identity)
        }

    if "audit_history" not in raw and isinstance(raw.get("auditHistory"), list):
        doc["audit_history"] = [
            AuditEntry.from_dict(item).to_dict()
            for item in raw["auditHistory"]
            if isinstance(item, dict)
        ]

    return doc


def create_config_store(config: Optional[Dict[str, Any]] = None) -> ConfigStore:
    """
    Factory function to create a ConfigStore from the 'store' config section.

    A null or empty path gives a memory-only store.
    """
    config = config or {}
    return ConfigStore(config.get("path"))
