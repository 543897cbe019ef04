"""
Administrative console.

Privileged operations on the configuration store: category switches,
master override, paywall and prices, audit sync, the user registry and
audit history. Callers establish admin rights first, either through
authenticate() or through their own authentication layer.
"""

import hmac
import logging
from typing import Any, Dict, List, Optional

from contentintel.core.audit import AuditTrail
from contentintel.core.models import AuditEntry, ContentCategory, UserAccessRecord
from contentintel.core.registry import TierRegistry
from contentintel.core.store import ConfigStore
from contentintel.utils.errors import AdminAuthError, ConfigurationError

PRICE_TIERS = ("basic", "starter", "pure", "elite")


def _parse_category(category: Any) -> ContentCategory:
    parsed = ContentCategory.parse(category)
    if parsed is None:
        choices = ", ".join(c.value for c in ContentCategory)
        raise ValueError(f"Unknown category '{category}'. Expected one of: {choices}")
    return parsed


class AdminConsole:
    """
    Single entry point for administrative actions.

    Usage:
        console = AdminConsole(store, audit, registry, {"username": "admin", "password": "..."})
        console.require_admin("admin", password)
        console.master_override(False)
        console.set_category("news", True)
    """

    def __init__(
        self,
        store: ConfigStore,
        audit: AuditTrail,
        registry: Optional[TierRegistry] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the console.

        Args:
            store: Configuration store to mutate.
            audit: Audit trail used for history and stats.
            registry: Tier registry. Defaults to one over `store`.
            config: The 'admin' section from config.yaml (username, password).
        """
        config = config or {}
        self.store = store
        self.audit = audit
        self.registry = registry or TierRegistry(store)
        self._username = config.get("username") or "admin"
        password = config.get("password")
        # An unresolved ${VAR} reference means no password was provided
        if isinstance(password, str) and password.startswith("${") and password.endswith("}"):
            password = None
        self._password = password
        self.logger = logging.getLogger("admin")

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, username: Optional[str], password: Optional[str]) -> bool:
        """Constant-time check of the shared admin credentials."""
        if not self._password:
            self.logger.warning("Admin login refused: no admin password configured")
            return False
        user_ok = hmac.compare_digest(
            (username or "").encode("utf-8"), self._username.encode("utf-8")
        )
        password_ok = hmac.compare_digest(
            (password or "").encode("utf-8"), str(self._password).encode("utf-8")
        )
        if not (user_ok and password_ok):
            self.logger.warning(f"Failed admin login for '{username}'")
            return False
        return True

    def require_admin(self, username: Optional[str], password: Optional[str]) -> None:
        """
        Raises:
            AdminAuthError: If the credentials are rejected.
        """
        if not self.authenticate(username, password):
            raise AdminAuthError(username)

    # ------------------------------------------------------------------
    # Feature flags
    # ------------------------------------------------------------------

    def toggle_category(self, category: Any) -> bool:
        """Flip one category's flag. Returns the new value."""
        cat = _parse_category(category)
        with self.store.mutate() as state:
            flags = state["feature_flags"]
            flags[cat.value] = not bool(flags.get(cat.value, True))
            enabled = flags[cat.value]
        self.logger.info(f"Category '{cat.value}' {'enabled' if enabled else 'disabled'}")
        return enabled

    def set_category(self, category: Any, enabled: bool) -> bool:
        cat = _parse_category(category)
        with self.store.mutate() as state:
            state["feature_flags"][cat.value] = bool(enabled)
        self.logger.info(f"Category '{cat.value}' {'enabled' if enabled else 'disabled'}")
        return bool(enabled)

    def master_override(self, enabled: bool) -> Dict[str, bool]:
        """Switch every category on or off at once."""
        with self.store.mutate() as state:
            state["feature_flags"] = {category.value: bool(enabled) for category in ContentCategory}
            flags = dict(state["feature_flags"])
        self.logger.info(f"Master override: all categories {'ON' if enabled else 'OFF'}")
        return flags

    # ------------------------------------------------------------------
    # Monetization
    # ------------------------------------------------------------------

    def set_paywall(self, enabled: bool) -> bool:
        with self.store.mutate() as state:
            state["paywall_enabled"] = bool(enabled)
        self.logger.info(f"Paywall {'enabled' if enabled else 'disabled'}")
        return bool(enabled)

    def set_prices(self, prices: Dict[str, Any]) -> Dict[str, str]:
        """
        Update tier prices. Only the four known tiers are accepted.

        Raises:
            ConfigurationError: On an unknown tier or a non-numeric price.
        """
        updates: Dict[str, str] = {}
        for tier, value in prices.items():
            if value is None:
                continue
            if tier not in PRICE_TIERS:
                raise ConfigurationError(f"Unknown price tier '{tier}'", config_key="tier_prices")
            try:
                amount = float(value)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Price for '{tier}' must be a number, got {value!r}",
                    config_key=f"tier_prices.{tier}",
                )
            if amount < 0:
                raise ConfigurationError(
                    f"Price for '{tier}' must not be negative", config_key=f"tier_prices.{tier}"
                )
            updates[tier] = str(value).strip()

        with self.store.mutate() as state:
            state["tier_prices"].update(updates)
            current = dict(state["tier_prices"])
        self.logger.info(f"Updated prices: {updates}")
        return current

    # ------------------------------------------------------------------
    # Audit sync
    # ------------------------------------------------------------------

    def toggle_sync(self) -> bool:
        with self.store.mutate() as state:
            state["audit_sync_enabled"] = not bool(state["audit_sync_enabled"])
            enabled = state["audit_sync_enabled"]
        self.logger.info(f"Audit sync {'enabled' if enabled else 'disabled'}")
        return enabled

    def set_sync(self, enabled: bool) -> bool:
        with self.store.mutate() as state:
            state["audit_sync_enabled"] = bool(enabled)
        self.logger.info(f"Audit sync {'enabled' if enabled else 'disabled'}")
        return bool(enabled)

    # ------------------------------------------------------------------
    # Users and history
    # ------------------------------------------------------------------

    def upgrade_user(self, identity: str, plan: str) -> UserAccessRecord:
        return self.registry.upgrade_user(identity, plan)

    def user_status(self, identity: Optional[str]) -> UserAccessRecord:
        return self.registry.user_status(identity)

    def list_users(self) -> Dict[str, UserAccessRecord]:
        return self.registry.list_users()

    def remove_user(self, identity: str) -> bool:
        return self.registry.remove_user(identity)

    def audit_history(self, limit: Optional[int] = None) -> List[AuditEntry]:
        """Audit entries, oldest first; `limit` keeps only the most recent ones."""
        entries = self.audit.read()
        if limit is not None and limit >= 0:
            entries = entries[len(entries) - limit:] if limit else []
        return entries

    def audit_stats(self) -> Dict[str, Any]:
        return self.audit.stats()

    def system_status(self) -> Dict[str, Any]:
        """Everything an admin dashboard shows on one screen."""
        snapshot = self.store.snapshot()
        return {
            "feature_flags": snapshot["feature_flags"],
            "paywall_enabled": snapshot["paywall_enabled"],
            "tier_prices": snapshot["tier_prices"],
            "category_requirements": snapshot["category_requirements"],
            "audit_sync_enabled": snapshot["audit_sync_enabled"],
            "user_count": len(snapshot["user_registry"]),
            "audit_entries": len(snapshot["audit_history"]),
        }
