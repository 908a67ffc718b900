"""
Progression policy tests.
"""

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from progression.policy import (
    GILLER_TYPE_POLICY,
    GRADE_POLICY,
    PROMOTION_REQUIREMENTS,
    GillerType,
    PriorityClass,
    active_policy,
    get_policy,
)
from progression.stats import UserStats


class TestGradePolicy(SimpleTestCase):
    """Tenure axis benefits."""

    def test_newcomer_floor(self):
        level = GRADE_POLICY.level_for(UserStats())
        self.assertEqual(level.code, 'newcomer')
        self.assertEqual(level.benefits.rate_bonus_percent, 0)
        self.assertEqual(level.benefits.max_daily_deliveries, 10)
        self.assertEqual(level.benefits.priority_class, PriorityClass.NORMAL)

    def test_expert_benefits(self):
        benefits = GRADE_POLICY.benefits_for(UserStats(completed_deliveries=31))
        self.assertEqual(benefits.as_dict(), {
            'rateBonusPercent': 5,
            'maxDailyDeliveries': 20,
            'maxRoutes': 10,
            'priorityClass': 'high',
        })

    def test_master_benefits(self):
        level = GRADE_POLICY.level_for(UserStats(completed_deliveries=51))
        self.assertEqual(level.code, 'master')
        self.assertEqual(level.benefits.priority_class, PriorityClass.HIGHEST)

    def test_benefits_never_decrease_with_deliveries(self):
        previous = None
        for deliveries in range(0, 80):
            benefits = GRADE_POLICY.benefits_for(UserStats(completed_deliveries=deliveries))
            if previous is not None:
                self.assertGreaterEqual(benefits.rate_bonus_percent, previous.rate_bonus_percent)
                self.assertGreaterEqual(benefits.max_daily_deliveries, previous.max_daily_deliveries)
            previous = benefits

    def test_unknown_level_code(self):
        with self.assertRaises(KeyError):
            GRADE_POLICY.level('legend')


class TestGillerTypePolicy(SimpleTestCase):
    """Merit axis gated on several criteria."""

    def professional_stats(self, **overrides):
        values = {
            'completed_deliveries': 50,
            'rating': 4.7,
            'recent_penalties': 2,
            'account_age_days': 30,
            'recent_30_days_deliveries': 20,
        }
        values.update(overrides)
        return UserStats(**values)

    def test_professional_at_exact_thresholds(self):
        level = GILLER_TYPE_POLICY.level_for(self.professional_stats())
        self.assertEqual(level.code, GillerType.PROFESSIONAL)
        self.assertEqual(level.benefits.rate_bonus_percent, 15)

    def test_single_failed_criterion_keeps_regular(self):
        stats = self.professional_stats(recent_penalties=3)
        self.assertEqual(GILLER_TYPE_POLICY.level_for(stats).code, GillerType.REGULAR)
        self.assertEqual(
            PROMOTION_REQUIREMENTS[GillerType.PROFESSIONAL].failed_checks(stats),
            ('penalties',)
        )

    def test_master(self):
        stats = UserStats(
            completed_deliveries=200,
            rating=4.9,
            recent_penalties=1,
            account_age_days=90,
            recent_30_days_deliveries=50,
        )
        level = GILLER_TYPE_POLICY.level_for(stats)
        self.assertEqual(level.code, GillerType.MASTER)
        self.assertEqual(level.benefits.rate_bonus_percent, 25)


class TestPolicyResolution(SimpleTestCase):
    """Policy lookup from settings."""

    def test_get_policy_by_name(self):
        self.assertIs(get_policy('grade'), GRADE_POLICY)
        self.assertIs(get_policy('giller_type'), GILLER_TYPE_POLICY)

    def test_unknown_policy_is_a_configuration_error(self):
        with self.assertRaises(ImproperlyConfigured):
            get_policy('seniority')

    @override_settings(GILLER_PROGRESSION_POLICY='giller_type')
    def test_active_policy_follows_setting(self):
        self.assertIs(active_policy(), GILLER_TYPE_POLICY)

    @override_settings(GILLER_PROGRESSION_POLICY='grade')
    def test_active_policy_default(self):
        self.assertIs(active_policy(), GRADE_POLICY)
