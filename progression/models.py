"""
PROGRESSION App - Persisted progression state

- EarnedBadge: one row per (user, badge); the category comes from the catalog
- BadgeBenefits: derived tier summary, written only by BadgeLedger
- GillerStats: last statistics snapshot supplied by upstream subsystems
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from .catalog import CATALOG, Badge, find_badge_by_id
from .levels import BadgeBenefitsSnapshot, BadgeTier
from .stats import UserStats

BADGE_CHOICES = [(badge.id, f"{badge.name} {badge.icon}") for badge in CATALOG]


class EarnedBadge(models.Model):
    """A badge held by a user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='earned_badges',
        verbose_name="사용자"
    )
    badge_id = models.CharField(
        max_length=50,
        choices=BADGE_CHOICES,
        verbose_name="배지"
    )
    earned_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="획득 일시"
    )

    class Meta:
        verbose_name = "획득 배지"
        verbose_name_plural = "획득 배지"
        ordering = ['-earned_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'badge_id'], name='unique_earned_badge_per_user'),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.badge_id}"

    @property
    def badge(self) -> Badge:
        return find_badge_by_id(self.badge_id)

    @property
    def category(self) -> str:
        return self.badge.category


class BadgeBenefits(models.Model):
    """
    Cached tier summary of a user's badge set.

    Never edit directly: BadgeLedger recomputes it in the same transaction as
    every badge set change. The profile frame is the tier itself.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='badge_benefits',
        verbose_name="사용자"
    )
    current_tier = models.CharField(
        max_length=10,
        choices=BadgeTier.choices,
        default=BadgeTier.NONE,
        verbose_name="배지 티어"
    )
    total_badges = models.PositiveIntegerField(
        default=0,
        verbose_name="보유 배지 수"
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "배지 혜택"
        verbose_name_plural = "배지 혜택"

    def __str__(self):
        return f"{self.user_id} - {self.current_tier} ({self.total_badges})"

    @property
    def profile_frame(self) -> str:
        return self.current_tier

    def snapshot(self) -> BadgeBenefitsSnapshot:
        return BadgeBenefitsSnapshot(
            current_tier=BadgeTier(self.current_tier),
            total_badges=self.total_badges,
        )


class GillerStats(models.Model):
    """Latest UserStats snapshot received for a user."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='giller_stats',
        verbose_name="사용자"
    )
    completed_deliveries = models.PositiveIntegerField(default=0, verbose_name="완료 배송")
    total_earnings = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name="총 수익 (원)"
    )
    rating = models.FloatField(default=0.0, verbose_name="평점")
    recent_penalties = models.PositiveIntegerField(default=0, verbose_name="최근 페널티")
    account_age_days = models.PositiveIntegerField(default=0, verbose_name="가입 기간 (일)")
    recent_30_days_deliveries = models.PositiveIntegerField(default=0, verbose_name="최근 30일 배송")
    recorded_at = models.DateTimeField(auto_now=True, verbose_name="기록 일시")

    class Meta:
        verbose_name = "길러 통계"
        verbose_name_plural = "길러 통계"

    def __str__(self):
        return f"{self.user_id} - {self.completed_deliveries} 배송"

    @classmethod
    def record(cls, user_id, stats: UserStats) -> 'GillerStats':
        """Store stats as the user's latest snapshot."""
        snapshot, _ = cls.objects.update_or_create(
            user_id=user_id,
            defaults={
                'completed_deliveries': stats.completed_deliveries,
                'total_earnings': stats.total_earnings,
                'rating': stats.rating,
                'recent_penalties': stats.recent_penalties,
                'account_age_days': stats.account_age_days,
                'recent_30_days_deliveries': stats.recent_30_days_deliveries,
            }
        )
        return snapshot

    def to_user_stats(self) -> UserStats:
        return UserStats(
            completed_deliveries=self.completed_deliveries,
            total_earnings=self.total_earnings,
            rating=self.rating,
            recent_penalties=self.recent_penalties,
            account_age_days=self.account_age_days,
            recent_30_days_deliveries=self.recent_30_days_deliveries,
        )
