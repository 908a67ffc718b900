"""
Giller Core Tests
=================

Tests for:
1. Custom User Model (creation, roles, giller flag)
2. Health probes (liveness, readiness)
"""

import uuid
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.test import TestCase

from core.models import User, UserRole
from progression.models import BadgeBenefits


class TestUserModel(TestCase):
    """Tests for the custom User model."""

    def setUp(self):
        """Create test users for each role."""
        self.admin = User.objects.create_user(
            phone_number='01000000001',
            password='testpass123',
            role=UserRole.ADMIN,
            full_name='Admin Test',
        )
        self.giller = User.objects.create_user(
            phone_number='01000000002',
            password='testpass123',
            role=UserRole.GILLER,
            full_name='Giller Test',
        )
        self.gller = User.objects.create_user(
            phone_number='01000000003',
            role=UserRole.GLLER,
        )
        self.both = User.objects.create_user(
            phone_number='01000000004',
            role=UserRole.BOTH,
        )

    def test_user_creation_with_phone(self):
        """User should be created with phone number as identifier."""
        self.assertEqual(self.giller.phone_number, '01000000002')
        self.assertTrue(self.giller.check_password('testpass123'))

    def test_user_uuid_primary_key(self):
        """User should have UUID as primary key."""
        self.assertIsInstance(self.giller.id, uuid.UUID)

    def test_user_without_password_cannot_log_in(self):
        self.assertFalse(self.gller.has_usable_password())

    def test_default_role_is_gller(self):
        user = User.objects.create_user(phone_number='01000000005')
        self.assertEqual(user.role, UserRole.GLLER)

    def test_is_giller_property(self):
        """is_giller should be True for GILLER and BOTH roles only."""
        self.assertTrue(self.giller.is_giller)
        self.assertTrue(self.both.is_giller)
        self.assertFalse(self.gller.is_giller)
        self.assertFalse(self.admin.is_giller)

    def test_phone_number_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(phone_number='')

    def test_phone_number_format_validated(self):
        user = User(phone_number='+237699000001')
        with self.assertRaises(ValidationError):
            user.full_clean()

    def test_superuser_flags(self):
        superuser = User.objects.create_superuser(phone_number='01000000009', password='adminpass123')
        self.assertTrue(superuser.is_staff)
        self.assertTrue(superuser.is_superuser)
        self.assertEqual(superuser.role, UserRole.ADMIN)

    def test_badge_benefits_created_for_every_user(self):
        """Each new user gets an empty badge summary."""
        self.assertEqual(BadgeBenefits.objects.count(), 4)
        self.assertEqual(self.giller.badge_benefits.total_badges, 0)


class TestHealthChecks(TestCase):
    """Tests for the liveness and readiness probes."""

    def test_liveness(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')

    def test_readiness_healthy(self):
        response = self.client.get('/health/ready/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['checks']['database']['status'], 'healthy')
        self.assertEqual(data['checks']['badge_catalog']['badges'], 13)

    def test_readiness_reports_incomplete_catalog(self):
        with patch('progression.catalog.EXPECTED_BADGE_COUNT', 14):
            response = self.client.get('/health/ready/')
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['checks']['badge_catalog']['status'], 'unhealthy')

    def test_health_rejects_post(self):
        response = self.client.post('/health/')
        self.assertEqual(response.status_code, 405)
