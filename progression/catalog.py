"""
PROGRESSION App - Badge catalog

Static registry of the 13 giller badges, built once at import time.
Changing the catalog is a code change and a deployment, never a runtime edit.

Distribution:
- Activity (3): first delivery, weekly activity, consistency
- Quality (3): no delays, friendliness, reliability
- Expertise (3): subway lines, transfers, punctuality
- Community (4): mentoring, posts, top rating, early signup
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List

from django.db import models

from .exceptions import BadgeNotFound
from .levels import BadgeTier
from .requirements import (
    CommunityPosts,
    CompletedDeliveries,
    ConsecutiveDeliveriesWithoutDelay,
    ConsecutiveWeeks,
    DelayRate,
    EarlySignup,
    MentorCount,
    MinRating,
    MonthlyTopRating,
    NoShowCount,
    Requirement,
    TransferDeliveries,
    UniqueLinesUsed,
    WeeklyDeliveries,
)

EXPECTED_BADGE_COUNT = 13


class BadgeCategory(models.TextChoices):
    """Badge categories."""
    ACTIVITY = 'activity', '활동'
    QUALITY = 'quality', '품질'
    EXPERTISE = 'expertise', '전문성'
    COMMUNITY = 'community', '커뮤니티'


@dataclass(frozen=True)
class Badge:
    """Immutable catalog entry."""
    id: str
    category: BadgeCategory
    tier: BadgeTier
    name: str
    description: str
    icon: str
    requirement: Requirement

    def as_dict(self) -> Dict:
        return {
            'id': self.id,
            'category': self.category.value,
            'tier': self.tier.value,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'requirement': self.requirement.as_dict(),
        }


INITIAL_BADGES = (
    # ===== Activity =====
    Badge(
        id='badge_newbie',
        category=BadgeCategory.ACTIVITY,
        tier=BadgeTier.BRONZE,
        name='첫걸음',
        description='첫 배송 완료',
        icon='🎯',
        requirement=CompletedDeliveries(count=1),
    ),
    Badge(
        id='badge_active',
        category=BadgeCategory.ACTIVITY,
        tier=BadgeTier.SILVER,
        name='활동가',
        description='일주일간 10건 배송',
        icon='⚡',
        requirement=WeeklyDeliveries(count=10),
    ),
    Badge(
        id='badge_consistent',
        category=BadgeCategory.ACTIVITY,
        tier=BadgeTier.GOLD,
        name='꾸준함',
        description='4주 연속 주 5건 이상 배송',
        icon='📅',
        requirement=ConsecutiveWeeks(weeks=4, min_weekly=5),
    ),

    # ===== Quality =====
    Badge(
        id='badge_perfectionist',
        category=BadgeCategory.QUALITY,
        tier=BadgeTier.GOLD,
        name='완벽주의자',
        description='지연 0회, 30건 연속',
        icon='💎',
        requirement=ConsecutiveDeliveriesWithoutDelay(count=30),
    ),
    Badge(
        id='badge_friendly',
        category=BadgeCategory.QUALITY,
        tier=BadgeTier.SILVER,
        name='친절한 길러',
        description='이용자 평점 4.9 이상, 20건 이상',
        icon='😊',
        requirement=MinRating(rating=4.9, min_deliveries=20),
    ),
    Badge(
        id='badge_trusted',
        category=BadgeCategory.QUALITY,
        tier=BadgeTier.PLATINUM,
        name='신뢰할 수 있는 길러',
        description='노쇼 0회, 100건 완료',
        icon='🛡️',
        requirement=NoShowCount(completed_deliveries=100, max_no_shows=0),
    ),

    # ===== Expertise =====
    Badge(
        id='badge_subway_master',
        category=BadgeCategory.EXPERTISE,
        tier=BadgeTier.SILVER,
        name='지하철 마스터',
        description='5개 노선 이용 경험',
        icon='🚇',
        requirement=UniqueLinesUsed(lines=5),
    ),
    Badge(
        id='badge_transfer_expert',
        category=BadgeCategory.EXPERTISE,
        tier=BadgeTier.GOLD,
        name='환승 전문가',
        description='환승 배송 50건 완료',
        icon='🔄',
        requirement=TransferDeliveries(count=50),
    ),
    Badge(
        id='badge_time_manager',
        category=BadgeCategory.EXPERTISE,
        tier=BadgeTier.PLATINUM,
        name='시간 관리사',
        description='지연 0.1회 미만/건, 50건 이상',
        icon='⏰',
        requirement=DelayRate(rate=0.001, min_deliveries=50),
    ),

    # ===== Community =====
    Badge(
        id='badge_mentor',
        category=BadgeCategory.COMMUNITY,
        tier=BadgeTier.GOLD,
        name='멘토',
        description='신규 길러 5명 온보딩 도움',
        icon='🤝',
        requirement=MentorCount(count=5),
    ),
    Badge(
        id='badge_contributor',
        category=BadgeCategory.COMMUNITY,
        tier=BadgeTier.SILVER,
        name='기여자',
        description='커뮤니티 게시글 50개 작성',
        icon='📝',
        requirement=CommunityPosts(count=50),
    ),
    Badge(
        id='badge_top_rated',
        category=BadgeCategory.COMMUNITY,
        tier=BadgeTier.PLATINUM,
        name='최고 평점',
        description='월간 평점 1위 달성',
        icon='🏆',
        requirement=MonthlyTopRating(rank=1),
    ),
    Badge(
        id='badge_early_adopter',
        category=BadgeCategory.COMMUNITY,
        tier=BadgeTier.BRONZE,
        name='얼리어답터',
        description='서비스 출시 후 1주 내 가입',
        icon='🌟',
        requirement=EarlySignup(days_after_launch=7),
    ),
)


class BadgeCatalog:
    """
    Read-only lookup over a fixed set of badges.

    Raises:
        ValueError: At construction, on duplicate ids or a badge without a tier.
    """

    def __init__(self, badges: Iterable[Badge]):
        self._badges: Dict[str, Badge] = {}
        for badge in badges:
            if badge.id in self._badges:
                raise ValueError(f"Duplicate badge id in catalog: {badge.id}")
            if badge.tier == BadgeTier.NONE:
                raise ValueError(f"Badge {badge.id} must have a tier")
            self._badges[badge.id] = badge

    def __len__(self) -> int:
        return len(self._badges)

    def __iter__(self) -> Iterator[Badge]:
        return iter(self._badges.values())

    def __contains__(self, badge_id) -> bool:
        return badge_id in self._badges

    def all(self) -> List[Badge]:
        return list(self._badges.values())

    def find_by_id(self, badge_id: str) -> Badge:
        try:
            return self._badges[badge_id]
        except KeyError:
            raise BadgeNotFound(badge_id) from None

    def by_category(self, category) -> List[Badge]:
        category = BadgeCategory(category)
        return [badge for badge in self if badge.category == category]

    def by_tier(self, tier) -> List[Badge]:
        tier = BadgeTier(tier)
        return [badge for badge in self if badge.tier == tier]


CATALOG = BadgeCatalog(INITIAL_BADGES)


def find_badge_by_id(badge_id: str) -> Badge:
    return CATALOG.find_by_id(badge_id)


def badges_by_category(category) -> List[Badge]:
    return CATALOG.by_category(category)


def badges_by_tier(tier) -> List[Badge]:
    return CATALOG.by_tier(tier)
