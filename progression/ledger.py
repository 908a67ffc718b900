"""
PROGRESSION App - Badge ledger

Owns every write to a user's earned-badge set and its derived BadgeBenefits.
Each award/revoke is one transaction:

1. lock the user's BadgeBenefits row (SELECT ... FOR UPDATE)
2. read the current badge set and apply the change
3. recompute tier and total, save both

A failure anywhere rolls the whole unit back and propagates to the caller.
Concurrent awards for the same user serialize on the row lock, so neither
can overwrite the other's badge.
"""

import logging
from typing import Dict, FrozenSet, Set

from django.db import transaction

from .catalog import CATALOG, BadgeCategory, find_badge_by_id
from .levels import BadgeBenefitsSnapshot
from .models import BadgeBenefits, EarnedBadge

logger = logging.getLogger(__name__)


class BadgeLedger:
    """Transactional award/revoke of catalog badges."""

    @staticmethod
    def _lock(user_id) -> BadgeBenefits:
        benefits, _ = BadgeBenefits.objects.select_for_update().get_or_create(user_id=user_id)
        return benefits

    @staticmethod
    def _owned(user_id) -> Set[str]:
        badge_ids = EarnedBadge.objects.filter(user_id=user_id).values_list('badge_id', flat=True)
        # Rows for ids no longer in the catalog do not count toward the tier
        return {badge_id for badge_id in badge_ids if badge_id in CATALOG}

    @staticmethod
    def _commit(benefits: BadgeBenefits, owned: Set[str]) -> BadgeBenefitsSnapshot:
        snapshot = BadgeBenefitsSnapshot.from_total(len(owned))
        benefits.current_tier = snapshot.current_tier
        benefits.total_badges = snapshot.total_badges
        benefits.save(update_fields=['current_tier', 'total_badges', 'updated_at'])
        return snapshot

    @classmethod
    @transaction.atomic
    def award(cls, user_id, badge_id: str) -> bool:
        """
        Add a badge to the user's set.

        Returns:
            True if the badge was added, False if the user already had it.

        Raises:
            BadgeNotFound: If badge_id is not in the catalog.
        """
        badge = find_badge_by_id(badge_id)

        benefits = cls._lock(user_id)
        owned = cls._owned(user_id)
        if badge.id in owned:
            return False

        EarnedBadge.objects.create(user_id=user_id, badge_id=badge.id)
        owned.add(badge.id)
        snapshot = cls._commit(benefits, owned)

        logger.info(
            f"[PROGRESSION] Badge awarded to {user_id}: {badge.id} | "
            f"Tier: {snapshot.current_tier} ({snapshot.total_badges})"
        )
        return True

    @classmethod
    @transaction.atomic
    def revoke(cls, user_id, badge_id: str) -> bool:
        """
        Remove a badge from the user's set.

        Returns:
            True if the badge was removed, False if the user did not have it.

        Raises:
            BadgeNotFound: If badge_id is not in the catalog.
        """
        badge = find_badge_by_id(badge_id)

        benefits = cls._lock(user_id)
        owned = cls._owned(user_id)
        if badge.id not in owned:
            return False

        EarnedBadge.objects.filter(user_id=user_id, badge_id=badge.id).delete()
        owned.discard(badge.id)
        snapshot = cls._commit(benefits, owned)

        logger.warning(
            f"[PROGRESSION] Badge revoked from {user_id}: {badge.id} | "
            f"Tier: {snapshot.current_tier} ({snapshot.total_badges})"
        )
        return True

    # ============================================
    # READS (no writes, no locks)
    # ============================================

    @classmethod
    def owned_badge_ids(cls, user_id) -> FrozenSet[str]:
        return frozenset(cls._owned(user_id))

    @classmethod
    def badges_of(cls, user_id) -> Dict[str, FrozenSet[str]]:
        """The user's badges grouped by catalog category; every category present."""
        grouped = {category.value: set() for category in BadgeCategory}
        for badge_id in cls._owned(user_id):
            grouped[find_badge_by_id(badge_id).category.value].add(badge_id)
        return {category: frozenset(ids) for category, ids in grouped.items()}

    @staticmethod
    def benefits_of(user_id) -> BadgeBenefitsSnapshot:
        benefits = BadgeBenefits.objects.filter(user_id=user_id).first()
        if benefits is None:
            return BadgeBenefitsSnapshot.from_total(0)
        return benefits.snapshot()
