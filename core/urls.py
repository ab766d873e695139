"""
Main URL Configuration
Routes to tracking application and Django admin
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin panel
    path('admin/', admin.site.urls),

    # Tracking application routes
    # Includes all endpoints under /api/
    path('api/', include('apps.tracking.urls')),
]
