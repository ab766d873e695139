"""
Database Router for Tracking Application
Routes read operations to analytics database and writes to default
"""
from django.conf import settings

READ_ALIAS = 'analytics'


class TrackingRouter:
    """
    A router to control database operations for tracking models
    - Write operations (INSERT/UPDATE/DELETE) use 'default' (read-write user)
    - Read operations (SELECT) use 'analytics' (read-only user) when that alias is configured
    """

    def db_for_read(self, model, **hints):
        """
        Route read operations to analytics database
        """
        if model._meta.app_label == 'tracking' and READ_ALIAS in settings.DATABASES:
            return READ_ALIAS
        return None

    def db_for_write(self, model, **hints):
        """
        Route write operations to default database
        """
        if model._meta.app_label == 'tracking':
            return 'default'
        return None

    def allow_relation(self, obj1, obj2, **hints):
        """
        Allow relations if both models are in tracking app
        """
        if obj1._meta.app_label == 'tracking' or obj2._meta.app_label == 'tracking':
            return True
        return None

    def allow_migrate(self, db, app_label, model_name=None, **hints):
        """
        Run migrations on default database only
        """
        if app_label == 'tracking':
            return db == 'default'
        return None
