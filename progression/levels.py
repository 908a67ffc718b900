"""
PROGRESSION App - Tier and Grade calculators

Two pure step functions:
- Badge tier from the total number of earned badges (none → platinum)
- Giller grade from the completed delivery count (newcomer → master)

Both are total over non-negative integers and monotonic.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import models


# ============================================
# BADGE TIER
# ============================================

class BadgeTier(models.TextChoices):
    """Tier of a catalog badge, and the derived tier/frame of a user."""
    NONE = 'none', '없음'
    BRONZE = 'bronze', '브론즈'
    SILVER = 'silver', '실버'
    GOLD = 'gold', '골드'
    PLATINUM = 'platinum', '플래티넘'


TIER_ORDER = (
    BadgeTier.NONE,
    BadgeTier.BRONZE,
    BadgeTier.SILVER,
    BadgeTier.GOLD,
    BadgeTier.PLATINUM,
)

# (minimum total badges, tier), checked highest first
TIER_THRESHOLDS = (
    (13, BadgeTier.PLATINUM),
    (9, BadgeTier.GOLD),
    (5, BadgeTier.SILVER),
    (1, BadgeTier.BRONZE),
)


def tier_of(total_badges: int) -> BadgeTier:
    """
    Map a total badge count to its tier.

    The profile frame always equals the tier, so only one value is returned.

    Raises:
        ValueError: If total_badges is negative.
    """
    if total_badges < 0:
        raise ValueError(f"total_badges must be >= 0, got {total_badges}")

    for minimum, tier in TIER_THRESHOLDS:
        if total_badges >= minimum:
            return tier
    return BadgeTier.NONE


def tier_rank(tier) -> int:
    """Position of a tier in none < bronze < silver < gold < platinum."""
    return TIER_ORDER.index(BadgeTier(tier))


@dataclass(frozen=True)
class BadgeBenefitsSnapshot:
    """Derived badge summary; always a function of the total badge count."""
    current_tier: BadgeTier
    total_badges: int

    @classmethod
    def from_total(cls, total_badges: int) -> 'BadgeBenefitsSnapshot':
        return cls(current_tier=tier_of(total_badges), total_badges=total_badges)

    @property
    def profile_frame(self) -> BadgeTier:
        return self.current_tier

    def as_dict(self) -> Dict[str, Any]:
        return {
            'profileFrame': self.profile_frame.value,
            'currentTier': self.current_tier.value,
            'totalBadges': self.total_badges,
        }


# ============================================
# GILLER GRADE
# ============================================

class Grade(models.TextChoices):
    """Tenure-based giller grade."""
    NEWCOMER = 'newcomer', '신규'
    REGULAR = 'regular', '정규'
    EXPERT = 'expert', '전문가'
    MASTER = 'master', '마스터'


@dataclass(frozen=True)
class GradeBand:
    grade: Grade
    lower: int
    upper: Optional[int]  # None = open-ended


GRADE_BANDS = (
    GradeBand(Grade.NEWCOMER, 0, 10),
    GradeBand(Grade.REGULAR, 11, 30),
    GradeBand(Grade.EXPERT, 31, 50),
    GradeBand(Grade.MASTER, 51, None),
)

GRADE_ORDER = tuple(band.grade for band in GRADE_BANDS)

GRADE_INFO: Dict[str, Dict[str, Any]] = {
    Grade.NEWCOMER: {
        'label': 'Newcomer',
        'label_ko': '신규',
        'color': '#9E9E9E',
        'icon': '🌱',
        'description': '0~10회 배송',
        'perks': ['기본 매칭', '기본 수수료율'],
    },
    Grade.REGULAR: {
        'label': 'Regular',
        'label_ko': '정규',
        'color': '#4CAF50',
        'icon': '🚴',
        'description': '11~30회 배송',
        'perks': ['기본 매칭', '기본 수수료율'],
    },
    Grade.EXPERT: {
        'label': 'Expert',
        'label_ko': '전문가',
        'color': '#2196F3',
        'icon': '⭐',
        'description': '31~50회 배송',
        'perks': ['우선 매칭', '5% 수수료 할인'],
    },
    Grade.MASTER: {
        'label': 'Master',
        'label_ko': '마스터',
        'color': '#FF9800',
        'icon': '👑',
        'description': '51회+ 배송',
        'perks': ['최우선 매칭', '10% 수수료 할인', '전용 요청 가능'],
    },
}


def _band_index(completed_deliveries: int) -> int:
    if completed_deliveries < 0:
        raise ValueError(f"completed_deliveries must be >= 0, got {completed_deliveries}")

    for index, band in enumerate(GRADE_BANDS):
        if band.upper is None or completed_deliveries <= band.upper:
            return index
    raise AssertionError("last grade band must be open-ended")


def grade_of(completed_deliveries: int) -> Grade:
    """Grade for a completed delivery count."""
    return GRADE_BANDS[_band_index(completed_deliveries)].grade


def progress_fraction(completed_deliveries: int) -> float:
    """
    Progress through the current grade band, in [0, 1].

    Computed as (n - lower) / (upper - lower); the terminal grade reports 1.0.
    """
    band = GRADE_BANDS[_band_index(completed_deliveries)]
    if band.upper is None:
        return 1.0
    return (completed_deliveries - band.lower) / (band.upper - band.lower)


def deliveries_until_next(completed_deliveries: int) -> Optional[int]:
    """Deliveries left before the next grade, or None at the terminal grade."""
    index = _band_index(completed_deliveries)
    if GRADE_BANDS[index].upper is None:
        return None
    return GRADE_BANDS[index + 1].lower - completed_deliveries


def grade_rank(grade) -> int:
    """Position of a grade in newcomer < regular < expert < master."""
    return GRADE_ORDER.index(Grade(grade))


def grade_info(grade) -> Dict[str, Any]:
    """Display metadata for a grade (a copy; GRADE_INFO stays untouched)."""
    info = GRADE_INFO[Grade(grade)]
    return {**info, 'perks': list(info['perks'])}


@dataclass(frozen=True)
class GradeStatus:
    """Grade snapshot for one completed delivery count."""
    grade: Grade
    completed_deliveries: int
    progress: float
    deliveries_until_next: Optional[int]

    @classmethod
    def from_deliveries(cls, completed_deliveries: int) -> 'GradeStatus':
        return cls(
            grade=grade_of(completed_deliveries),
            completed_deliveries=completed_deliveries,
            progress=progress_fraction(completed_deliveries),
            deliveries_until_next=deliveries_until_next(completed_deliveries),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            'grade': self.grade.value,
            'completedDeliveries': self.completed_deliveries,
            'progress': round(self.progress, 4),
            'deliveriesUntilNext': self.deliveries_until_next,
            'info': grade_info(self.grade),
        }
