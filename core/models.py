"""
CORE App - Custom User Model for the Giller service

Handles: Users (Gllers, Gillers, both, Admins)
"""

import uuid
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import RegexValidator
from django.db import models


class UserRole(models.TextChoices):
    """User role enumeration."""
    ADMIN = 'admin', '관리자'
    GLLER = 'gller', '이용자'
    GILLER = 'giller', '길러'
    BOTH = 'both', '이용자 + 길러'


class UserManager(BaseUserManager):
    """Custom user manager for phone-based authentication."""

    def create_user(self, phone_number, password=None, **extra_fields):
        if not phone_number:
            raise ValueError('전화번호는 필수입니다')

        user = self.model(phone_number=phone_number, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, phone_number, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(phone_number, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using phone number as primary identifier.

    Progression state (earned badges, badge tier, stats snapshot) lives in the
    progression app and hangs off this model through one-to-one and foreign
    key relations.
    """

    # Korean mobile numbers (010-XXXX-XXXX, stored without dashes)
    phone_regex = RegexValidator(
        regex=r'^01[0-9]{8,9}$',
        message="형식: 01XXXXXXXXX"
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone_number = models.CharField(
        max_length=11,
        unique=True,
        validators=[phone_regex],
        verbose_name="전화번호"
    )

    full_name = models.CharField(max_length=150, blank=True, verbose_name="이름")
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.GLLER,
        verbose_name="역할"
    )

    # Django Auth Fields
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = 'phone_number'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "사용자"
        verbose_name_plural = "사용자"
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.full_name or self.phone_number} ({self.role})"

    @property
    def is_giller(self) -> bool:
        return self.role in (UserRole.GILLER, UserRole.BOTH)
