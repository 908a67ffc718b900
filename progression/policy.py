"""
PROGRESSION App - Progression policies

A ProgressionPolicy maps the levels of one progression axis to the benefits
matching and fee code consume. Two axes are bound to the same structure:

- 'grade'        Tenure axis (newcomer → master) from completed deliveries.
- 'giller_type'  Merit axis (regular → professional → master) gated on
                 deliveries, rating, penalties, account age and recent activity.

The active one is chosen with the GILLER_PROGRESSION_POLICY setting.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import models

from .levels import Grade, grade_of, grade_rank
from .stats import UserStats


class PriorityClass(models.TextChoices):
    NORMAL = 'normal', '일반'
    HIGH = 'high', '우선'
    HIGHEST = 'highest', '최우선'


class GillerType(models.TextChoices):
    REGULAR = 'regular', '일반 길러'
    PROFESSIONAL = 'professional', '전문 길러'
    MASTER = 'master', '마스터 길러'


@dataclass(frozen=True)
class LevelBenefits:
    rate_bonus_percent: int
    max_daily_deliveries: int
    max_routes: int
    priority_class: PriorityClass

    def as_dict(self) -> Dict:
        return {
            'rateBonusPercent': self.rate_bonus_percent,
            'maxDailyDeliveries': self.max_daily_deliveries,
            'maxRoutes': self.max_routes,
            'priorityClass': self.priority_class.value,
        }


@dataclass(frozen=True)
class PolicyLevel:
    code: str
    label: str
    benefits: LevelBenefits
    qualifies: Callable[[UserStats], bool]


class ProgressionPolicy:
    """
    Ordered levels of one progression axis, lowest first.

    The first level is the floor and always applies; a user sits at the
    highest level whose qualifies() passes.
    """

    def __init__(self, name: str, levels: Tuple[PolicyLevel, ...]):
        if not levels:
            raise ValueError("A progression policy needs at least one level")
        self.name = name
        self.levels = levels

    def __repr__(self):
        return f"<ProgressionPolicy {self.name}: {[level.code for level in self.levels]}>"

    def level_for(self, stats: UserStats) -> PolicyLevel:
        current = self.levels[0]
        for level in self.levels[1:]:
            if level.qualifies(stats):
                current = level
        return current

    def benefits_for(self, stats: UserStats) -> LevelBenefits:
        return self.level_for(stats).benefits

    def level(self, code: str) -> PolicyLevel:
        for level in self.levels:
            if level.code == code:
                return level
        raise KeyError(code)


# ============================================
# TENURE AXIS (GRADE)
# ============================================

def _grade_at_least(grade: Grade) -> Callable[[UserStats], bool]:
    return lambda stats: grade_rank(grade_of(stats.completed_deliveries)) >= grade_rank(grade)


GRADE_POLICY = ProgressionPolicy('grade', (
    PolicyLevel(
        code=Grade.NEWCOMER,
        label='신규',
        benefits=LevelBenefits(0, 10, 5, PriorityClass.NORMAL),
        qualifies=lambda stats: True,
    ),
    PolicyLevel(
        code=Grade.REGULAR,
        label='정규',
        benefits=LevelBenefits(0, 10, 5, PriorityClass.NORMAL),
        qualifies=_grade_at_least(Grade.REGULAR),
    ),
    PolicyLevel(
        code=Grade.EXPERT,
        label='전문가',
        benefits=LevelBenefits(5, 20, 10, PriorityClass.HIGH),
        qualifies=_grade_at_least(Grade.EXPERT),
    ),
    PolicyLevel(
        code=Grade.MASTER,
        label='마스터',
        benefits=LevelBenefits(10, 30, 15, PriorityClass.HIGHEST),
        qualifies=_grade_at_least(Grade.MASTER),
    ),
))


# ============================================
# MERIT AXIS (GILLER TYPE)
# ============================================

@dataclass(frozen=True)
class PromotionCriteria:
    min_completed_deliveries: int
    min_rating: float
    max_recent_penalties: int
    min_account_age_days: int
    min_recent_30_days_deliveries: int

    def failed_checks(self, stats: UserStats) -> Tuple[str, ...]:
        checks = {
            'completedDeliveries': stats.completed_deliveries >= self.min_completed_deliveries,
            'rating': stats.rating >= self.min_rating,
            'penalties': stats.recent_penalties <= self.max_recent_penalties,
            'accountAge': stats.account_age_days >= self.min_account_age_days,
            'recentActivity': stats.recent_30_days_deliveries >= self.min_recent_30_days_deliveries,
        }
        return tuple(name for name, passed in checks.items() if not passed)

    def __call__(self, stats: UserStats) -> bool:
        return not self.failed_checks(stats)


PROMOTION_REQUIREMENTS = {
    GillerType.PROFESSIONAL: PromotionCriteria(
        min_completed_deliveries=50,
        min_rating=4.7,
        max_recent_penalties=2,
        min_account_age_days=30,
        min_recent_30_days_deliveries=20,
    ),
    GillerType.MASTER: PromotionCriteria(
        min_completed_deliveries=200,
        min_rating=4.9,
        max_recent_penalties=1,
        min_account_age_days=90,
        min_recent_30_days_deliveries=50,
    ),
}

GILLER_TYPE_POLICY = ProgressionPolicy('giller_type', (
    PolicyLevel(
        code=GillerType.REGULAR,
        label='일반 길러',
        benefits=LevelBenefits(0, 10, 5, PriorityClass.NORMAL),
        qualifies=lambda stats: True,
    ),
    PolicyLevel(
        code=GillerType.PROFESSIONAL,
        label='전문 길러',
        benefits=LevelBenefits(15, 20, 10, PriorityClass.HIGH),
        qualifies=PROMOTION_REQUIREMENTS[GillerType.PROFESSIONAL],
    ),
    PolicyLevel(
        code=GillerType.MASTER,
        label='마스터 길러',
        benefits=LevelBenefits(25, 30, 15, PriorityClass.HIGHEST),
        qualifies=PROMOTION_REQUIREMENTS[GillerType.MASTER],
    ),
))


POLICIES = {
    GRADE_POLICY.name: GRADE_POLICY,
    GILLER_TYPE_POLICY.name: GILLER_TYPE_POLICY,
}


def get_policy(name: str) -> ProgressionPolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown GILLER_PROGRESSION_POLICY '{name}'. "
            f"Choose one of: {', '.join(sorted(POLICIES))}"
        ) from None


def active_policy() -> ProgressionPolicy:
    return get_policy(getattr(settings, 'GILLER_PROGRESSION_POLICY', GRADE_POLICY.name))
