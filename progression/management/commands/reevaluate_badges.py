"""
Re-run badge evaluation from the stored stats snapshots.

Usage:
    python manage.py reevaluate_badges
    python manage.py reevaluate_badges --user <uuid>
"""
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from progression.models import GillerStats
from progression.services import ProgressionService


class Command(BaseCommand):
    help = 'Re-evaluate giller badges from stored stats snapshots'

    def add_arguments(self, parser):
        parser.add_argument('--user', dest='user_id', help='Only re-evaluate this user (UUID)')

    def handle(self, *args, **options):
        records = GillerStats.objects.all()
        if options.get('user_id'):
            try:
                records = records.filter(user_id=options['user_id'])
                found = records.exists()
            except ValidationError:
                raise CommandError(f"Invalid user id: {options['user_id']}")
            if not found:
                raise CommandError(f"No stats snapshot for user {options['user_id']}")

        total_awarded = 0

        for record in records:
            result = ProgressionService.process_stats(record.user_id, record.to_user_stats())
            new_badges = result['new_badges']
            total_awarded += len(new_badges)

            if new_badges:
                self.stdout.write(self.style.SUCCESS(
                    f"🏅 {record.user_id}: +{', '.join(new_badges)} "
                    f"({result['tier_before']} → {result['tier_after']})"
                ))
            else:
                self.stdout.write(f"⏭️  {record.user_id}: 변경 없음")

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS(f'📊 Total new badges: {total_awarded}'))
