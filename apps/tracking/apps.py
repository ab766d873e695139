"""
Tracking Application Configuration
"""
from django.apps import AppConfig


class TrackingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.tracking'
    verbose_name = 'Surveyor Tracking System'

    def ready(self):
        # Cascade point deletion when a surveyor is removed
        from . import signals  # noqa: F401
