"""
Django Admin configuration for PROGRESSION app.

All progression rows are read-only here: badge sets change only through
BadgeLedger, so the tier summary never drifts from the badges held.
"""

from django.contrib import admin

from .ledger import BadgeLedger
from .models import BadgeBenefits, EarnedBadge, GillerStats


class ReadOnlyAdminMixin:
    """Rows are written programmatically only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(EarnedBadge)
class EarnedBadgeAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ('user', 'badge_id', 'badge_category', 'earned_at')
    list_filter = ('badge_id', 'earned_at')
    search_fields = ('user__phone_number', 'user__full_name', 'badge_id')
    date_hierarchy = 'earned_at'
    ordering = ('-earned_at',)
    actions = ['revoke_badges']

    @admin.display(description="분류")
    def badge_category(self, obj):
        return obj.category.label

    @admin.action(description="🚫 선택한 배지 회수")
    def revoke_badges(self, request, queryset):
        revoked = 0
        for earned in queryset:
            if BadgeLedger.revoke(earned.user_id, earned.badge_id):
                revoked += 1
        self.message_user(request, f"🚫 {revoked}개 배지를 회수했습니다.")


@admin.register(BadgeBenefits)
class BadgeBenefitsAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ('user', 'current_tier', 'total_badges', 'updated_at')
    list_filter = ('current_tier',)
    search_fields = ('user__phone_number', 'user__full_name')
    ordering = ('-total_badges',)


@admin.register(GillerStats)
class GillerStatsAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        'user',
        'completed_deliveries',
        'rating',
        'recent_penalties',
        'recent_30_days_deliveries',
        'recorded_at'
    )
    search_fields = ('user__phone_number', 'user__full_name')
    ordering = ('-recorded_at',)
