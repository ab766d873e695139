"""
Surveyor Tracking Data Models
Directory entries and the per-surveyor location time series
"""
from django.db import models


class Surveyor(models.Model):
    """
    Surveyor directory entry
    The tracking pipeline only reads it and mirrors last activity into it
    """
    id = models.CharField(max_length=100, primary_key=True)
    name = models.CharField(max_length=200, blank=True, default='')
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=255, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='', db_index=True)
    project_name = models.CharField(max_length=200, blank=True, default='', db_index=True)
    last_activity_timestamp = models.DateTimeField(
        null=True, blank=True, help_text="Last ingestion or login, persisted fallback for online status"
    )

    class Meta:
        db_table = 'surveyor'
        ordering = ['id']

    def __str__(self):
        return f"{self.id} ({self.username})"

    @property
    def is_admin(self):
        """
        Administrative accounts are hidden from every surveyor listing
        """
        return 'admin' in (self.id or '').lower() or 'admin' in (self.username or '').lower()

    def as_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'username': self.username,
            'city': self.city,
            'project_name': self.project_name,
            'last_activity_timestamp': (
                self.last_activity_timestamp.isoformat() if self.last_activity_timestamp else None
            ),
        }


class LocationTrack(models.Model):
    """
    One persisted GPS position of a surveyor
    surveyor_id is a plain column so positions can arrive before the directory entry exists
    """
    id = models.BigAutoField(primary_key=True)
    surveyor_id = models.CharField(max_length=100, db_index=True)
    latitude = models.FloatField()
    longitude = models.FloatField()
    timestamp = models.DateTimeField(db_index=True)

    # Reserved, always null for now
    geometry = models.TextField(null=True, blank=True, help_text="WKT geometry (reserved)")

    class Meta:
        db_table = 'location_track'
        indexes = [
            models.Index(fields=['surveyor_id', 'timestamp'], name='location_tr_surveyo_ts_idx'),
        ]
        ordering = ['timestamp', 'id']

    def __str__(self):
        return f"Location {self.surveyor_id} @ {self.timestamp} ({self.latitude}, {self.longitude})"

    @property
    def is_interpolated(self):
        return self.pk is None

    def as_dict(self):
        return {
            'id': self.pk,
            'surveyor_id': self.surveyor_id,
            'latitude': round(self.latitude, 6),
            'longitude': round(self.longitude, 6),
            'timestamp': self.timestamp.isoformat(),
            'geometry': self.geometry,
            'interpolated': self.is_interpolated,
        }
