"""
Progression facade and evaluation pass tests.
"""

from decimal import Decimal

from django.test import TestCase, override_settings

from core.models import User, UserRole
from progression.ledger import BadgeLedger
from progression.levels import BadgeTier
from progression.models import BadgeBenefits, EarnedBadge, GillerStats
from progression.policy import GILLER_TYPE_POLICY
from progression.services import ProgressionFacade, ProgressionService
from progression.stats import UserStats

VETERAN_STATS = {
    'completedDeliveries': 100,
    'totalEarnings': '1250000',
    'rating': 4.95,
    'recentPenalties': 0,
    'accountAgeDays': 120,
    'recent30DaysDeliveries': 30,
}


class ServiceTestCase(TestCase):

    def setUp(self):
        self.giller = User.objects.create_user(
            phone_number='01098765432',
            full_name='Veteran Giller',
            role=UserRole.GILLER,
        )
        self.user_id = self.giller.pk


class TestProgressionFacade(ServiceTestCase):

    def test_new_user_reads_zero_state(self):
        snapshot = ProgressionFacade.benefits_for(self.user_id)
        self.assertEqual(snapshot.grade.grade, 'newcomer')
        self.assertEqual(snapshot.level, 'newcomer')
        self.assertEqual(snapshot.benefits.max_daily_deliveries, 10)
        self.assertEqual(snapshot.badge_benefits.current_tier, BadgeTier.NONE)

    def test_benefits_for_performs_no_writes(self):
        BadgeBenefits.objects.filter(user=self.giller).delete()

        with self.assertNumQueries(2):
            ProgressionFacade.benefits_for(self.user_id)

        self.assertFalse(BadgeBenefits.objects.exists())
        self.assertFalse(GillerStats.objects.exists())

    def test_uses_recorded_stats_and_badges(self):
        GillerStats.record(self.user_id, UserStats(completed_deliveries=35))
        BadgeLedger.award(self.user_id, 'badge_newbie')

        data = ProgressionFacade.benefits_for(self.user_id).as_dict()
        self.assertEqual(data['grade']['grade'], 'expert')
        self.assertEqual(data['level'], {'policy': 'grade', 'code': 'expert'})
        self.assertEqual(data['benefits']['rateBonusPercent'], 5)
        self.assertEqual(data['benefits']['priorityClass'], 'high')
        self.assertEqual(data['badgeBenefits'], {
            'profileFrame': 'bronze',
            'currentTier': 'bronze',
            'totalBadges': 1,
        })

    @override_settings(GILLER_PROGRESSION_POLICY='giller_type')
    def test_merit_policy_binding(self):
        GillerStats.record(self.user_id, UserStats.from_mapping(VETERAN_STATS))
        snapshot = ProgressionFacade.benefits_for(self.user_id)
        self.assertEqual(snapshot.policy, 'giller_type')
        self.assertEqual(snapshot.level, 'professional')
        self.assertEqual(snapshot.benefits.rate_bonus_percent, 15)

    def test_explicit_policy(self):
        snapshot = ProgressionFacade.benefits_for(self.user_id, policy=GILLER_TYPE_POLICY)
        self.assertEqual(snapshot.level, 'regular')

    def test_badge_board(self):
        GillerStats.record(self.user_id, UserStats(completed_deliveries=4, recent_30_days_deliveries=4))
        BadgeLedger.award(self.user_id, 'badge_newbie')

        board = ProgressionFacade.badge_board(self.user_id)
        activity = {entry['id']: entry for entry in board['categories']['activity']}
        expertise = {entry['id']: entry for entry in board['categories']['expertise']}

        self.assertTrue(activity['badge_newbie']['owned'])
        self.assertIsNotNone(activity['badge_newbie']['earnedAt'])
        self.assertFalse(activity['badge_active']['owned'])
        self.assertEqual(activity['badge_active']['progress']['fraction'], 0.4)
        self.assertIsNone(expertise['badge_subway_master']['progress'])
        self.assertEqual(board['badgeBenefits']['totalBadges'], 1)


class TestProcessStats(ServiceTestCase):

    def test_awards_only_evaluable_eligible_badges(self):
        result = ProgressionService.process_stats(self.user_id, VETERAN_STATS)

        self.assertEqual(set(result['new_badges']), {
            'badge_newbie',
            'badge_active',
            'badge_perfectionist',
            'badge_friendly',
            'badge_trusted',
            'badge_time_manager',
        })
        self.assertIn('badge_subway_master', result['not_evaluable'])
        self.assertNotIn('badge_subway_master', BadgeLedger.owned_badge_ids(self.user_id))
        self.assertEqual(result['tier_before'], 'none')
        self.assertEqual(result['tier_after'], 'silver')
        self.assertEqual(result['grade']['grade'], 'master')

    def test_records_stats_snapshot(self):
        ProgressionService.process_stats(self.user_id, VETERAN_STATS)
        record = GillerStats.objects.get(user=self.giller)
        self.assertEqual(record.completed_deliveries, 100)
        self.assertEqual(record.total_earnings, Decimal('1250000'))

    def test_second_pass_awards_nothing(self):
        ProgressionService.process_stats(self.user_id, VETERAN_STATS)
        result = ProgressionService.process_stats(self.user_id, VETERAN_STATS)
        self.assertEqual(result['new_badges'], [])
        self.assertEqual(result['tier_before'], result['tier_after'])
        self.assertEqual(EarnedBadge.objects.filter(user=self.giller).count(), 6)

    def test_accepts_user_stats_instance(self):
        result = ProgressionService.process_stats(self.user_id, UserStats(completed_deliveries=1))
        self.assertEqual(result['new_badges'], ['badge_newbie'])
        self.assertEqual(result['tier_after'], 'bronze')

    def test_invalid_stats_rejected_before_any_write(self):
        with self.assertRaises(ValueError):
            ProgressionService.process_stats(self.user_id, {'rating': 9})
        self.assertFalse(GillerStats.objects.exists())

    def test_revoke_badge(self):
        ProgressionService.process_stats(self.user_id, {'completedDeliveries': 1})
        self.assertTrue(ProgressionService.revoke_badge(self.user_id, 'badge_newbie', reason='fraud'))
        self.assertFalse(ProgressionService.revoke_badge(self.user_id, 'badge_newbie'))
        self.assertEqual(BadgeLedger.benefits_of(self.user_id).current_tier, BadgeTier.NONE)
