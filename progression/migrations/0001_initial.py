import django.db.models.deletion
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BadgeBenefits',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='badge_benefits', serialize=False, to=settings.AUTH_USER_MODEL, verbose_name='사용자')),
                ('current_tier', models.CharField(choices=[('none', '없음'), ('bronze', '브론즈'), ('silver', '실버'), ('gold', '골드'), ('platinum', '플래티넘')], default='none', max_length=10, verbose_name='배지 티어')),
                ('total_badges', models.PositiveIntegerField(default=0, verbose_name='보유 배지 수')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': '배지 혜택',
                'verbose_name_plural': '배지 혜택',
            },
        ),
        migrations.CreateModel(
            name='GillerStats',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='giller_stats', serialize=False, to=settings.AUTH_USER_MODEL, verbose_name='사용자')),
                ('completed_deliveries', models.PositiveIntegerField(default=0, verbose_name='완료 배송')),
                ('total_earnings', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, verbose_name='총 수익 (원)')),
                ('rating', models.FloatField(default=0.0, verbose_name='평점')),
                ('recent_penalties', models.PositiveIntegerField(default=0, verbose_name='최근 페널티')),
                ('account_age_days', models.PositiveIntegerField(default=0, verbose_name='가입 기간 (일)')),
                ('recent_30_days_deliveries', models.PositiveIntegerField(default=0, verbose_name='최근 30일 배송')),
                ('recorded_at', models.DateTimeField(auto_now=True, verbose_name='기록 일시')),
            ],
            options={
                'verbose_name': '길러 통계',
                'verbose_name_plural': '길러 통계',
            },
        ),
        migrations.CreateModel(
            name='EarnedBadge',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('badge_id', models.CharField(choices=[('badge_newbie', '첫걸음 🎯'), ('badge_active', '활동가 ⚡'), ('badge_consistent', '꾸준함 📅'), ('badge_perfectionist', '완벽주의자 💎'), ('badge_friendly', '친절한 길러 😊'), ('badge_trusted', '신뢰할 수 있는 길러 🛡️'), ('badge_subway_master', '지하철 마스터 🚇'), ('badge_transfer_expert', '환승 전문가 🔄'), ('badge_time_manager', '시간 관리사 ⏰'), ('badge_mentor', '멘토 🤝'), ('badge_contributor', '기여자 📝'), ('badge_top_rated', '최고 평점 🏆'), ('badge_early_adopter', '얼리어답터 🌟')], max_length=50, verbose_name='배지')),
                ('earned_at', models.DateTimeField(auto_now_add=True, verbose_name='획득 일시')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='earned_badges', to=settings.AUTH_USER_MODEL, verbose_name='사용자')),
            ],
            options={
                'verbose_name': '획득 배지',
                'verbose_name_plural': '획득 배지',
                'ordering': ['-earned_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='earnedbadge',
            constraint=models.UniqueConstraint(fields=('user', 'badge_id'), name='unique_earned_badge_per_user'),
        ),
    ]
