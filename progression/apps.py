from django.apps import AppConfig


class ProgressionConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'progression'
    verbose_name = '길러 성장'

    def ready(self):
        # Register signals for badge benefits bootstrap
        import progression.signals  # noqa: F401
