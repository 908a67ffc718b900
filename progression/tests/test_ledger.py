"""
Badge ledger tests: award/revoke consistency, idempotence and rollback.
"""

from unittest.mock import patch

from django.db import DatabaseError, IntegrityError, transaction
from django.test import TestCase

from core.models import User, UserRole
from progression.exceptions import BadgeNotFound
from progression.ledger import BadgeLedger
from progression.levels import BadgeTier
from progression.models import BadgeBenefits, EarnedBadge


class LedgerTestCase(TestCase):

    def setUp(self):
        self.giller = User.objects.create_user(
            phone_number='01012345678',
            full_name='Giller Test',
            role=UserRole.GILLER,
        )
        self.user_id = self.giller.pk

    def benefits(self):
        return BadgeBenefits.objects.get(user=self.giller)


class TestBadgeAward(LedgerTestCase):

    def test_signal_creates_zero_state(self):
        """A new user starts with tier none and no badges."""
        benefits = self.benefits()
        self.assertEqual(benefits.current_tier, BadgeTier.NONE)
        self.assertEqual(benefits.total_badges, 0)

    def test_first_badge_reaches_bronze(self):
        self.assertTrue(BadgeLedger.award(self.user_id, 'badge_newbie'))
        benefits = self.benefits()
        self.assertEqual(benefits.current_tier, BadgeTier.BRONZE)
        self.assertEqual(benefits.profile_frame, BadgeTier.BRONZE)
        self.assertEqual(benefits.total_badges, 1)

    def test_fifth_badge_reaches_silver(self):
        """bronze at one badge, silver once four more are earned."""
        BadgeLedger.award(self.user_id, 'badge_newbie')
        self.assertEqual(self.benefits().current_tier, BadgeTier.BRONZE)

        for badge_id in ['badge_active', 'badge_friendly', 'badge_mentor', 'badge_subway_master']:
            BadgeLedger.award(self.user_id, badge_id)

        benefits = self.benefits()
        self.assertEqual(benefits.total_badges, 5)
        self.assertEqual(benefits.current_tier, BadgeTier.SILVER)

    def test_award_is_idempotent(self):
        self.assertTrue(BadgeLedger.award(self.user_id, 'badge_newbie'))
        self.assertFalse(BadgeLedger.award(self.user_id, 'badge_newbie'))

        self.assertEqual(EarnedBadge.objects.filter(user=self.giller).count(), 1)
        self.assertEqual(self.benefits().total_badges, 1)

    def test_unknown_badge_raises_before_any_write(self):
        with self.assertRaises(BadgeNotFound):
            BadgeLedger.award(self.user_id, 'badge_unknown')
        self.assertFalse(EarnedBadge.objects.exists())

    def test_all_badges_reach_platinum(self):
        from progression.catalog import CATALOG
        for badge in CATALOG:
            BadgeLedger.award(self.user_id, badge.id)
        self.assertEqual(self.benefits().current_tier, BadgeTier.PLATINUM)
        self.assertEqual(self.benefits().total_badges, 13)

    def test_award_creates_missing_benefits_row(self):
        BadgeBenefits.objects.filter(user=self.giller).delete()
        BadgeLedger.award(self.user_id, 'badge_newbie')
        self.assertEqual(self.benefits().current_tier, BadgeTier.BRONZE)

    def test_store_failure_rolls_back_award(self):
        """A failed tier write leaves neither the badge nor the tier changed."""
        with patch.object(BadgeBenefits, 'save', side_effect=DatabaseError('disk full')):
            with self.assertRaises(DatabaseError):
                BadgeLedger.award(self.user_id, 'badge_newbie')

        self.assertFalse(EarnedBadge.objects.filter(user=self.giller).exists())
        benefits = self.benefits()
        self.assertEqual(benefits.current_tier, BadgeTier.NONE)
        self.assertEqual(benefits.total_badges, 0)

    def test_unique_constraint_guards_double_award(self):
        EarnedBadge.objects.create(user=self.giller, badge_id='badge_newbie')
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                EarnedBadge.objects.create(user=self.giller, badge_id='badge_newbie')


class TestBadgeRevoke(LedgerTestCase):

    def test_revoke_restores_previous_state(self):
        """award then revoke leaves tier and total as they were."""
        BadgeLedger.award(self.user_id, 'badge_newbie')
        BadgeLedger.award(self.user_id, 'badge_active')
        before = self.benefits().snapshot()

        BadgeLedger.award(self.user_id, 'badge_friendly')
        self.assertTrue(BadgeLedger.revoke(self.user_id, 'badge_friendly'))

        self.assertEqual(self.benefits().snapshot(), before)

    def test_revoke_drops_tier(self):
        for badge_id in ['badge_newbie', 'badge_active', 'badge_friendly', 'badge_mentor', 'badge_trusted']:
            BadgeLedger.award(self.user_id, badge_id)
        self.assertEqual(self.benefits().current_tier, BadgeTier.SILVER)

        BadgeLedger.revoke(self.user_id, 'badge_trusted')
        self.assertEqual(self.benefits().current_tier, BadgeTier.BRONZE)
        self.assertEqual(self.benefits().total_badges, 4)

    def test_revoke_is_idempotent(self):
        BadgeLedger.award(self.user_id, 'badge_newbie')
        self.assertTrue(BadgeLedger.revoke(self.user_id, 'badge_newbie'))
        self.assertFalse(BadgeLedger.revoke(self.user_id, 'badge_newbie'))
        self.assertEqual(self.benefits().total_badges, 0)
        self.assertEqual(self.benefits().current_tier, BadgeTier.NONE)

    def test_revoke_unowned_badge_is_a_noop(self):
        self.assertFalse(BadgeLedger.revoke(self.user_id, 'badge_mentor'))

    def test_revoke_unknown_badge(self):
        with self.assertRaises(BadgeNotFound):
            BadgeLedger.revoke(self.user_id, 'badge_unknown')


class TestLedgerReads(LedgerTestCase):

    def test_badges_of_groups_by_catalog_category(self):
        BadgeLedger.award(self.user_id, 'badge_newbie')
        BadgeLedger.award(self.user_id, 'badge_mentor')

        grouped = BadgeLedger.badges_of(self.user_id)
        self.assertEqual(set(grouped), {'activity', 'quality', 'expertise', 'community'})
        self.assertEqual(grouped['activity'], frozenset({'badge_newbie'}))
        self.assertEqual(grouped['community'], frozenset({'badge_mentor'}))
        self.assertEqual(grouped['quality'], frozenset())

    def test_owned_badge_ids(self):
        BadgeLedger.award(self.user_id, 'badge_newbie')
        self.assertEqual(BadgeLedger.owned_badge_ids(self.user_id), frozenset({'badge_newbie'}))

    def test_benefits_of_without_row_is_zero_state(self):
        BadgeBenefits.objects.filter(user=self.giller).delete()
        snapshot = BadgeLedger.benefits_of(self.user_id)
        self.assertEqual(snapshot.current_tier, BadgeTier.NONE)
        self.assertEqual(snapshot.total_badges, 0)
        self.assertFalse(BadgeBenefits.objects.filter(user=self.giller).exists())

    def test_total_matches_badge_rows(self):
        for badge_id in ['badge_newbie', 'badge_active', 'badge_mentor']:
            BadgeLedger.award(self.user_id, badge_id)
        BadgeLedger.revoke(self.user_id, 'badge_active')

        self.assertEqual(
            self.benefits().total_badges,
            EarnedBadge.objects.filter(user=self.giller).count()
        )


class TestConcurrentAwards(LedgerTestCase):
    """Awards for the same user never drop each other's badge."""

    def test_tier_counts_rows_written_after_the_lock(self):
        """The badge set is re-read under the lock, not taken from an earlier read."""
        original_lock = BadgeLedger._lock

        def lock_then_concurrent_award(user_id):
            benefits = original_lock(user_id)
            EarnedBadge.objects.create(user_id=user_id, badge_id='badge_mentor')
            return benefits

        with patch.object(BadgeLedger, '_lock', side_effect=lock_then_concurrent_award):
            self.assertTrue(BadgeLedger.award(self.user_id, 'badge_newbie'))

        self.assertEqual(EarnedBadge.objects.filter(user=self.giller).count(), 2)
        benefits = self.benefits()
        self.assertEqual(benefits.total_badges, 2)
        self.assertEqual(benefits.current_tier, BadgeTier.BRONZE)

    def test_back_to_back_awards_keep_both_badges(self):
        for badge_id in ['badge_newbie', 'badge_active', 'badge_friendly', 'badge_mentor']:
            BadgeLedger.award(self.user_id, badge_id)
        BadgeLedger.award(self.user_id, 'badge_trusted')

        self.assertEqual(
            BadgeLedger.owned_badge_ids(self.user_id),
            frozenset({'badge_newbie', 'badge_active', 'badge_friendly', 'badge_mentor', 'badge_trusted'})
        )
        self.assertEqual(self.benefits().total_badges, 5)
        self.assertEqual(self.benefits().current_tier, BadgeTier.SILVER)
