"""
LoveSync - Identity Adapter

Wraps django.contrib.auth for registration, sign-in and sign-out, and maps
every failure to an error code with a localized message.

Also owns the session-bound record subscription: one record_changed
listener per signed-in user, opened with their first session and dropped
with their last (sign-out, account switch or expiry). The listener turns
a partner-initiated disconnect into a notice the client picks up on its
next state refresh.
"""

import logging
import threading
from functools import partial
from importlib import import_module

from django.conf import settings
from django.contrib.auth import SESSION_KEY, authenticate, get_user_model
from django.contrib.auth import login as django_login
from django.contrib.auth import logout as django_logout
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, IntegrityError, transaction
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy

from . import content, records
from .models import Profile
from .results import Result

logger = logging.getLogger(__name__)

User = get_user_model()

SessionStore = import_module(settings.SESSION_ENGINE).SessionStore

MIN_PASSWORD_LENGTH = 6

ERROR_MESSAGES = {
    'email-already-in-use': gettext_lazy("This email is already in use."),
    'invalid-email': gettext_lazy("Invalid email address."),
    'weak-password': gettext_lazy("Password must be at least 6 characters."),
    'missing-fields': gettext_lazy("Please fill in all fields."),
    'operation-not-allowed': gettext_lazy("Registration is temporarily unavailable."),
    'user-not-found': gettext_lazy("No user with this email."),
    'wrong-password': gettext_lazy("Wrong password."),
    'user-disabled': gettext_lazy("This account has been disabled."),
    'profile-not-found': gettext_lazy("User data not found."),
}

REGISTER_FALLBACK = gettext_lazy("Something went wrong during registration.")
LOGIN_FALLBACK = gettext_lazy("Something went wrong while signing in.")


def error_message(code, fallback=None):
    """Localized message for an error code; unknown codes get the fallback."""
    message = ERROR_MESSAGES.get(code, fallback or gettext_lazy("Something went wrong. Please try again."))
    return str(message)


def _error(code, fallback=None):
    return Result.fail(error_message(code, fallback), code=code)


# =============================================================================
# REGISTER / LOGIN / LOGOUT
# =============================================================================

def register(email, password, name):
    """Create an account with an empty (unlinked) profile."""
    email = (email or '').strip().lower()
    name = (name or '').strip()
    if not email or not password or not name:
        return _error('missing-fields', REGISTER_FALLBACK)
    if len(password) < MIN_PASSWORD_LENGTH:
        return _error('weak-password', REGISTER_FALLBACK)
    try:
        validate_email(email)
    except ValidationError:
        return _error('invalid-email', REGISTER_FALLBACK)

    if User.objects.filter(username__iexact=email).exists():
        return _error('email-already-in-use', REGISTER_FALLBACK)

    try:
        with transaction.atomic():
            user = User.objects.create_user(username=email, email=email, password=password)
            records.update(user.pk, display_name=name)
    except IntegrityError:
        return _error('email-already-in-use', REGISTER_FALLBACK)
    except DatabaseError as exc:
        logger.error("Registration failed for %s: %s", email, exc)
        return _error('operation-not-allowed', REGISTER_FALLBACK)

    logger.info("Registered user %s", user.pk)
    return Result.ok(user=user)


def login(request, email, password):
    email = (email or '').strip().lower()
    if not email or not password:
        return _error('missing-fields', LOGIN_FALLBACK)
    try:
        validate_email(email)
    except ValidationError:
        return _error('invalid-email', LOGIN_FALLBACK)

    account = User.objects.filter(username__iexact=email).first()
    if account is None:
        return _error('user-not-found', LOGIN_FALLBACK)
    if not account.is_active:
        return _error('user-disabled', LOGIN_FALLBACK)

    user = authenticate(request, username=account.username, password=password)
    if user is None:
        return _error('wrong-password', LOGIN_FALLBACK)
    if records.get(user.pk) is None:
        return _error('profile-not-found', LOGIN_FALLBACK)

    # Account switch: the old session's listener must not outlive it.
    close_session(request.session.session_key)
    django_login(request, user)
    return Result.ok(user=user)


def logout(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        profile = records.get(user.pk)
        if profile is not None:
            content.clear_memories_cache(profile.couple_id)
    django_logout(request)
    return Result.ok()


# =============================================================================
# SESSION-BOUND SUBSCRIPTION
# =============================================================================
# One record_changed listener per signed-in user, kept while the user has at
# least one live session. Sessions that expired or were dropped without a
# sign-out are pruned whenever a new one opens.

_lock = threading.Lock()
_sessions = {}


def _listener_uid(user_id):
    return f'linkage-{user_id}'


def _session_alive(session_key, user_id):
    store = SessionStore(session_key=session_key)
    return str(store.get(SESSION_KEY)) == str(user_id)


def open_session(session_key, user_id):
    """Start watching user_id's record for this session."""
    close_session(session_key)
    prune_sessions()
    with _lock:
        _sessions[session_key] = user_id
        records.record_changed.connect(
            partial(_watch_linkage, user_id),
            sender=Profile,
            weak=False,
            dispatch_uid=_listener_uid(user_id),
        )
    logger.debug("Opened record subscription for user %s", user_id)


def close_session(session_key):
    if not session_key:
        return
    with _lock:
        user_id = _sessions.pop(session_key, None)
        if user_id is None:
            return
        if user_id not in _sessions.values():
            records.record_changed.disconnect(sender=Profile, dispatch_uid=_listener_uid(user_id))
    logger.debug("Closed record subscription for user %s", user_id)


def prune_sessions():
    """Close every tracked session that no longer authenticates its user."""
    with _lock:
        tracked = list(_sessions.items())
    for session_key, user_id in tracked:
        if not _session_alive(session_key, user_id):
            close_session(session_key)


def session_user(session_key):
    with _lock:
        return _sessions.get(session_key)


def session_keys(user_id):
    with _lock:
        return [key for key, owner in _sessions.items() if owner == user_id]


def _watch_linkage(user_id, sender, change, **kwargs):
    if str(change.user_id) != str(user_id):
        return
    if change.partner_disconnected and change.remote:
        push_notice(user_id, _("Your partner has disconnected from you."))


# =============================================================================
# NOTICES
# =============================================================================

def _notices_key(user_id):
    return f'notices_{user_id}'


def push_notice(user_id, message):
    key = _notices_key(user_id)
    notices = cache.get(key, [])
    notices.append(str(message))
    cache.set(key, notices, None)


def pop_notices(user_id):
    key = _notices_key(user_id)
    notices = cache.get(key, [])
    if notices:
        cache.delete(key)
    return notices
