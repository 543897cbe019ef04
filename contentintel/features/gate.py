"""
Access gating with feature flags and tier entitlement.

Provides a single checkpoint for category access control:
1. Feature flag (administrator switch per category)
2. Tier entitlement (only while the paywall is enabled)

The flag check always runs first so a category that is switched off never
reveals its tier requirement.
"""

import logging
from typing import List, Optional, Protocol, runtime_checkable

from contentintel.core.models import (
    AccessDecision,
    AccessDenial,
    CategoryRequirement,
    ContentCategory,
    DenialReason,
    UserAccessRecord,
)
from contentintel.core.store import ConfigStore
from contentintel.utils.errors import AccessDeniedError, CategoryOfflineError


@runtime_checkable
class EntitlementProvider(Protocol):
    """
    Protocol for tier lookups.

    The default TierEntitlement reads the access registry held by the
    ConfigStore. Swap in another provider to source tiers elsewhere.
    """

    def access_for(self, caller_identity: Optional[str]) -> UserAccessRecord:
        """Return the caller's access record (Free/0 when unknown)."""
        ...


class TierEntitlement:
    """Entitlement backed by the store's user registry."""

    def __init__(self, store: ConfigStore):
        self._store = store

    def access_for(self, caller_identity: Optional[str]) -> UserAccessRecord:
        record = self._store.user_record(caller_identity)
        return record if record is not None else UserAccessRecord.anonymous()


class AccessGate:
    """
    Single checkpoint for category access control.

    Usage:
        gate = AccessGate(store)
        decision = gate.check_access(ContentCategory.NEWS, "user@example.com")
        gate.check(ContentCategory.NEWS)  # Raises if blocked
    """

    def __init__(
        self,
        store: ConfigStore,
        entitlement: Optional[EntitlementProvider] = None,
    ):
        """
        Initialize access gate.

        Args:
            store: Configuration store holding flags, paywall and requirements.
            entitlement: Provider for tier lookups. Defaults to the store's
                         user registry.
        """
        self._store = store
        self._entitlement = entitlement or TierEntitlement(store)
        self.logger = logging.getLogger("gate")

    def check_access(
        self,
        category: ContentCategory,
        caller_identity: Optional[str] = None,
    ) -> AccessDecision:
        """
        Run the flag check, then the tier check.

        Returns:
            AccessDecision carrying either the caller's access record or
            the denial to hand back.
        """
        if not self._store.is_enabled(category):
            self.logger.info(f"Category '{category.value}' is offline")
            return AccessDecision.deny(
                AccessDenial(
                    reason=DenialReason.CATEGORY_OFFLINE,
                    category=category,
                    message=f"{category.value.capitalize()} analysis is temporarily offline by administrator.",
                )
            )

        access = self._entitlement.access_for(caller_identity)
        if not self._store.paywall_enabled():
            return AccessDecision.allow(access)

        requirement = self.requirement(category)
        if access.access_level >= requirement.level:
            return AccessDecision.allow(access)

        self.logger.info(
            f"Caller '{caller_identity or 'anonymous'}' at level {access.access_level} "
            f"denied '{category.value}' (requires {requirement.level})"
        )
        return AccessDecision.deny(
            AccessDenial(
                reason=DenialReason.INSUFFICIENT_TIER,
                category=category,
                message=(
                    f"{category.value.capitalize()} analysis requires the "
                    f"{requirement.plan.upper()} plan or higher."
                ),
                required_plan=requirement.plan,
                current_tier=access.tier.name,
            ),
            access,
        )

    def check(self, category: ContentCategory, caller_identity: Optional[str] = None) -> None:
        """
        Verify access. Raises on failure.

        Raises:
            CategoryOfflineError: If the category is switched off.
            AccessDeniedError: If the caller's tier is below the requirement.
        """
        decision = self.check_access(category, caller_identity)
        if decision.allowed:
            return
        denial = decision.denial
        if denial.reason is DenialReason.CATEGORY_OFFLINE:
            raise CategoryOfflineError(category.value)
        raise AccessDeniedError(
            category.value,
            required_plan=denial.required_plan or "",
            current_tier=denial.current_tier or "FREE",
            caller=caller_identity or "anonymous",
        )

    def is_available(self, category: ContentCategory, caller_identity: Optional[str] = None) -> bool:
        """Non-throwing availability check."""
        return self.check_access(category, caller_identity).allowed

    def requirement(self, category: ContentCategory) -> CategoryRequirement:
        return self._store.requirement(category)

    def list_available(self, caller_identity: Optional[str] = None) -> List[ContentCategory]:
        """Categories the caller may use right now."""
        return [
            category
            for category in ContentCategory
            if self.is_available(category, caller_identity)
        ]
