"""
Django Admin Configuration for Tracking Application
"""
from django.contrib import admin
from .models import Surveyor, LocationTrack


@admin.register(Surveyor)
class SurveyorAdmin(admin.ModelAdmin):
    list_display = ['id', 'username', 'name', 'city', 'project_name', 'last_activity_timestamp']
    list_filter = ['city', 'project_name']
    search_fields = ['id', 'username', 'name']
    readonly_fields = ['last_activity_timestamp']

    fieldsets = (
        ('Account', {
            'fields': ('id', 'username', 'password', 'name')
        }),
        ('Assignment', {
            'fields': ('city', 'project_name')
        }),
        ('Activity', {
            'fields': ('last_activity_timestamp',),
            'classes': ('collapse',)
        }),
    )


@admin.register(LocationTrack)
class LocationTrackAdmin(admin.ModelAdmin):
    """
    Read-only view of stored positions, points are never edited
    """
    list_display = ['id', 'timestamp', 'surveyor_id', 'latitude', 'longitude']
    list_filter = ['timestamp']
    search_fields = ['surveyor_id']
    date_hierarchy = 'timestamp'
    readonly_fields = ['surveyor_id', 'latitude', 'longitude', 'timestamp', 'geometry']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
