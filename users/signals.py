from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import User, Profile


@receiver(post_save, sender=User)
def create_profile(sender, instance, created, **kwargs):
    """Every account gets a profile; superusers start as admins."""
    if not created:
        return
    role = 'admin' if instance.is_superuser else 'staff'
    Profile.objects.get_or_create(user=instance, defaults={'role': role})
