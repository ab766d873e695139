"""
Remove a surveyor's location history together with the directory entry
"""
import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import Surveyor
from .repositories import PointStore

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=Surveyor, dispatch_uid='tracking_delete_surveyor_points')
def delete_surveyor_points(sender, instance, **kwargs):
    deleted = PointStore().delete_all_for(instance.pk)
    logger.info(f"[DELETE] Surveyor {instance.pk}: removed {deleted} location points")
