"""
Tier registry.

Records subscription upgrades in the configuration store. The dispatcher
only reads these records; upgrades arrive from the payment flow and the
admin console.
"""

import logging
from datetime import date
from typing import Dict, Optional

from contentintel.core.models import UserAccessRecord
from contentintel.core.store import ConfigStore, normalize_identity


class TierRegistry:
    """Create, read and remove UserAccessRecords keyed by caller identity."""

    def __init__(self, store: ConfigStore):
        self.store = store
        self.logger = logging.getLogger("registry")

    def upgrade_user(
        self,
        identity: str,
        plan: str,
        joined: Optional[date] = None,
    ) -> UserAccessRecord:
        """
        Record a paid plan for a caller, replacing any previous record.

        Unknown plans are recorded as the starter plan.

        Raises:
            ValueError: If identity is empty.
        """
        key = normalize_identity(identity)
        if key is None:
            raise ValueError("identity must be a non-empty string")

        record = UserAccessRecord.for_plan(plan, joined)
        with self.store.mutate() as state:
            state["user_registry"][key] = record.to_dict()

        self.logger.info(
            f"Upgraded '{key}' to {record.plan} ({record.tier.name}, level {record.access_level})"
        )
        return record

    def user_status(self, identity: Optional[str]) -> UserAccessRecord:
        """The caller's record, or the anonymous Free/0 record."""
        record = self.store.user_record(identity)
        return record if record is not None else UserAccessRecord.anonymous()

    def remove_user(self, identity: str) -> bool:
        """Delete a caller's record. Returns False when there was none."""
        key = normalize_identity(identity)
        if key is None:
            return False
        with self.store.mutate() as state:
            removed = state["user_registry"].pop(key, None) is not None
        if removed:
            self.logger.info(f"Removed '{key}' from the registry")
        return removed

    def list_users(self) -> Dict[str, UserAccessRecord]:
        return self.store.users()
