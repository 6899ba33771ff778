"""
LoveSync - Signals

Auto-create Profile when a User is created.
Open and close the session-bound record subscription on sign-in/sign-out.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.db.models.signals import post_save
from django.dispatch import receiver

from . import identity
from .models import Profile

User = get_user_model()


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """Create a Profile automatically when a new User is created."""
    if created:
        Profile.objects.create(user=instance)


def _session_key(request):
    session = getattr(request, 'session', None)
    return session.session_key if session is not None else None


@receiver(user_logged_in)
def open_record_subscription(sender, request, user, **kwargs):
    session_key = _session_key(request)
    if session_key:
        identity.open_session(session_key, user.pk)


@receiver(user_logged_out)
def close_record_subscription(sender, request, user, **kwargs):
    identity.close_session(_session_key(request))
