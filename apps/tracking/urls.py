"""
URL Configuration for Tracking Application
Mounted under /api/ by core.urls
"""
from django.urls import path
from . import views

app_name = 'tracking'

urlpatterns = [
    # Live GPS ingestion (POST, Basic auth)
    # Usage: POST /api/live/location with {"surveyorId", "latitude", "longitude", "timestamp"}
    path('live/location', views.publish_live_location, name='live_location'),
    path('live/location/final', views.publish_final_location, name='live_location_final'),
    path('live/location/batch', views.publish_location_batch, name='live_location_batch'),

    # Location history (GET)
    # Usage: GET /api/location/<id>/track?start=...&end=...&page=0&size=1000
    path('location/<str:surveyor_id>/latest', views.get_latest_location, name='latest_location'),
    path('location/<str:surveyor_id>/track', views.get_track_history, name='track_history'),
    path('location/<str:surveyor_id>/enhanced-track', views.get_enhanced_track_history, name='enhanced_track'),
    path('location/<str:surveyor_id>/distance', views.get_total_distance, name='total_distance'),

    # Surveyor status (dashboard)
    path('surveyors/status', views.get_surveyor_statuses, name='surveyor_statuses'),
    path('surveyors/filter', views.filter_surveyors, name='filter_surveyors'),
    path('surveyors/with-locations', views.get_surveyors_with_locations, name='surveyors_with_locations'),
    path('surveyors/<str:surveyor_id>/status', views.get_surveyor_status, name='surveyor_status'),
    path('surveyors/<str:surveyor_id>/activity', views.update_activity, name='surveyor_activity'),
]
