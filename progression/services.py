"""
PROGRESSION App - Progression services

ProgressionFacade composes what the rest of the platform reads:
- Grade status from the last known delivery count
- Level and benefits from the active ProgressionPolicy
- Badge tier summary from the ledger

ProgressionService is the evaluation pass run by external triggers
(delivery-completion hooks, Celery tasks, management commands).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from django.db import transaction

from .catalog import CATALOG, BadgeCategory
from .eligibility import evaluate_pending
from .exceptions import NotEvaluable
from .ledger import BadgeLedger
from .levels import BadgeBenefitsSnapshot, GradeStatus
from .models import EarnedBadge, GillerStats
from .policy import LevelBenefits, ProgressionPolicy, active_policy
from .stats import UserStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressionSnapshot:
    """Everything matching and fee code need to know about one giller."""
    grade: GradeStatus
    policy: str
    level: str
    benefits: LevelBenefits
    badge_benefits: BadgeBenefitsSnapshot

    def as_dict(self) -> Dict[str, Any]:
        return {
            'grade': self.grade.as_dict(),
            'level': {'policy': self.policy, 'code': self.level},
            'benefits': self.benefits.as_dict(),
            'badgeBenefits': self.badge_benefits.as_dict(),
        }


class ProgressionFacade:
    """Read-only views over grade, policy level and badge tier."""

    @staticmethod
    def stats_of(user_id) -> UserStats:
        """Last recorded stats, or the zero snapshot if none were ever supplied."""
        record = GillerStats.objects.filter(user_id=user_id).first()
        if record is None:
            return UserStats()
        return record.to_user_stats()

    @staticmethod
    def compose(
        stats: UserStats,
        badge_benefits: BadgeBenefitsSnapshot,
        policy: Optional[ProgressionPolicy] = None,
    ) -> ProgressionSnapshot:
        policy = policy or active_policy()
        level = policy.level_for(stats)
        return ProgressionSnapshot(
            grade=GradeStatus.from_deliveries(stats.completed_deliveries),
            policy=policy.name,
            level=str(level.code),
            benefits=level.benefits,
            badge_benefits=badge_benefits,
        )

    @classmethod
    def benefits_for(cls, user_id, policy: Optional[ProgressionPolicy] = None) -> ProgressionSnapshot:
        """
        Progression snapshot for a user.

        Performs no writes; a user with no stats or badge rows reads as the
        zero state (newcomer, tier none).
        """
        return cls.compose(
            cls.stats_of(user_id),
            BadgeLedger.benefits_of(user_id),
            policy=policy,
        )

    @classmethod
    def badge_board(cls, user_id) -> Dict[str, Any]:
        """
        The full catalog grouped by category, marked with what the user owns.

        Unowned badges carry progress toward their requirement when it can be
        computed from stats, otherwise progress is None.
        """
        stats = cls.stats_of(user_id)
        earned_at = dict(
            EarnedBadge.objects.filter(user_id=user_id).values_list('badge_id', 'earned_at')
        )

        board: Dict[str, List[Dict[str, Any]]] = {category.value: [] for category in BadgeCategory}
        for badge in CATALOG:
            entry = badge.as_dict()
            owned = badge.id in earned_at
            entry['owned'] = owned
            entry['earnedAt'] = earned_at[badge.id].isoformat() if owned else None

            if owned:
                entry['progress'] = {'current': None, 'target': None, 'fraction': 1.0}
            else:
                try:
                    progress = badge.requirement.progress(stats)
                    entry['progress'] = {
                        'current': progress.current,
                        'target': progress.target,
                        'fraction': round(progress.fraction, 4),
                    }
                except NotEvaluable:
                    entry['progress'] = None

            board[badge.category.value].append(entry)

        return {
            'categories': board,
            'badgeBenefits': BadgeLedger.benefits_of(user_id).as_dict(),
        }


class ProgressionService:
    """Evaluation pass and penalty path."""

    @classmethod
    @transaction.atomic
    def process_stats(cls, user_id, stats: Union[UserStats, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Record a stats snapshot and award every newly eligible badge.

        Only badges that are unowned, evaluable from stats and eligible are
        awarded. Badges needing external data are reported, never guessed.

        Returns:
            dict with new_badges, not_evaluable, tier_before, tier_after, grade
        """
        if not isinstance(stats, UserStats):
            stats = UserStats.from_mapping(stats)

        GillerStats.record(user_id, stats)

        tier_before = BadgeLedger.benefits_of(user_id).current_tier
        report = evaluate_pending(stats, BadgeLedger.owned_badge_ids(user_id))

        new_badges = [
            badge_id for badge_id in report.eligible
            if BadgeLedger.award(user_id, badge_id)
        ]
        tier_after = BadgeLedger.benefits_of(user_id).current_tier

        if tier_after != tier_before:
            logger.info(
                f"[PROGRESSION] Tier change for {user_id}: {tier_before} → {tier_after}"
            )

        return {
            'new_badges': new_badges,
            'not_evaluable': list(report.not_evaluable),
            'tier_before': tier_before.value,
            'tier_after': tier_after.value,
            'grade': GradeStatus.from_deliveries(stats.completed_deliveries).as_dict(),
        }

    @staticmethod
    def revoke_badge(user_id, badge_id: str, reason: str = '') -> bool:
        """Take a badge back (penalty path). Returns whether anything changed."""
        revoked = BadgeLedger.revoke(user_id, badge_id)
        if revoked and reason:
            logger.warning(f"[PROGRESSION] Revocation reason for {user_id}/{badge_id}: {reason}")
        return revoked
