"""
LoveSync - Content Services

Daily answers, wishes, calendar events, memory photos and the photo of the
day. Everything shared is scoped by couple id; personal wishes are scoped
by author. Each function returns a Result whose data is plain
JSON-serialisable dicts.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext as _

from . import records, storage
from .models import Answer, Couple, CoupleStatus, Event, Memory, PhotoOfDay, Profile, Wish
from .pairing import PAIR_SEPARATOR
from .results import Result

logger = logging.getLogger(__name__)


def _failed(action, exc):
    logger.error("%s failed: %s", action, exc)
    return Result.fail(_("Something went wrong. Please try again."))


# =============================================================================
# SERIALIZATION
# =============================================================================

def answer_dict(answer):
    return {
        'id': answer.id,
        'couple_id': answer.couple_id,
        'user_id': answer.user_id,
        'question': answer.question,
        'answer': answer.answer,
        'date': answer.date,
    }


def wish_dict(wish):
    return {
        'id': wish.id,
        'text': wish.text,
        'author_id': wish.author_id,
        'couple_id': wish.couple_id,
        'is_personal': wish.is_personal,
        'is_completed': wish.is_completed,
        'created_at': wish.created_at,
        'completed_at': wish.completed_at,
    }


def event_dict(event):
    return {
        'id': event.id,
        'title': event.title,
        'date': event.date,
        'description': event.description,
        'created_at': event.created_at,
        'created_by': event.created_by_id,
    }


def memory_dict(memory):
    return {
        'id': memory.id,
        'url': storage.public_url(memory.photo),
        'date': memory.date,
        'description': memory.description,
        'author_id': memory.author_id,
        'created_at': memory.created_at,
    }


def photo_dict(photo):
    return {
        'id': photo.id,
        'url': storage.public_url(photo.photo),
        'uploaded_by': photo.uploaded_by_id,
        'created_at': photo.created_at,
    }


# =============================================================================
# PROFILE
# =============================================================================

def update_profile(user_id, **fields):
    allowed = {k: v for k, v in fields.items() if k in ('display_name', 'relationship_start')}
    try:
        records.update(user_id, **allowed)
    except (DatabaseError, Profile.DoesNotExist) as exc:
        return _failed("Updating profile", exc)
    return Result.ok()


def set_avatar(user_id, file):
    """Upload a new avatar and point the profile at it. Size is checked by the form."""
    path = f'users/{user_id}/avatar'
    try:
        stored = storage.put(path, file)
        records.update(user_id, avatar=stored.public_id)
    except storage.StorageError as exc:
        return _failed("Uploading avatar", exc)
    except (DatabaseError, Profile.DoesNotExist) as exc:
        return _failed("Saving avatar", exc)
    return Result.ok(url=stored.url)


# =============================================================================
# DAILY ANSWERS
# =============================================================================

def _ensure_couple(couple_id):
    """Recreate a missing pair record from its id."""
    if Couple.objects.filter(id=couple_id).exists():
        return
    user1_id, _sep, user2_id = couple_id.partition(PAIR_SEPARATOR)
    Couple.objects.create(
        id=couple_id,
        user1_id=user1_id,
        user2_id=user2_id,
        status=CoupleStatus.ACTIVE,
    )
    logger.warning("Recreated missing couple %s", couple_id)


def submit_answer(couple_id, user_id, question, answer):
    try:
        with transaction.atomic():
            _ensure_couple(couple_id)
            record = Answer.objects.create(
                couple_id=couple_id,
                user_id=user_id,
                question=question,
                answer=answer,
            )
    except DatabaseError as exc:
        return _failed("Submitting answer", exc)
    return Result.ok(answer_id=record.id, answer=answer_dict(record))


def list_answers(couple_id):
    """Newest first; a couple without answers gets an empty list."""
    try:
        answers = [answer_dict(a) for a in Answer.objects.filter(couple_id=couple_id).order_by('-date')]
    except DatabaseError as exc:
        return _failed("Listing answers", exc)
    return Result.ok(answers=answers)


def delete_answer(couple_id, answer_id):
    try:
        Answer.objects.filter(couple_id=couple_id, id=answer_id).delete()
    except DatabaseError as exc:
        return _failed("Deleting answer", exc)
    return Result.ok()


# =============================================================================
# WISHES
# =============================================================================

def add_wish(user_id, couple_id, text, is_personal):
    """
    Personal wishes belong to user_id alone. Shared wishes need a couple
    and are rejected without one before anything is written.
    """
    if not is_personal and not couple_id:
        return Result.fail(_("Connect with a partner to add shared wishes."))

    try:
        wish = Wish.objects.create(
            author_id=user_id,
            couple_id=None if is_personal else couple_id,
            text=text,
            is_personal=is_personal,
        )
    except DatabaseError as exc:
        return _failed("Adding wish", exc)
    return Result.ok(wish_id=wish.id, wish=wish_dict(wish))


def _newest_first(wishes):
    return sorted((wish_dict(w) for w in wishes), key=lambda w: w['created_at'], reverse=True)


def list_wishes(user_id, couple_id=None):
    """Personal and shared lists, each sorted newest first."""
    try:
        personal = _newest_first(Wish.objects.filter(author_id=user_id, is_personal=True))
        shared = []
        if couple_id:
            shared = _newest_first(Wish.objects.filter(couple_id=couple_id, is_personal=False))
    except DatabaseError as exc:
        return _failed("Listing wishes", exc)
    return Result.ok(personal_wishes=personal, shared_wishes=shared)


def partner_wishes(partner_id):
    try:
        wishes = _newest_first(Wish.objects.filter(author_id=partner_id, is_personal=True))
    except DatabaseError as exc:
        return _failed("Listing partner wishes", exc)
    return Result.ok(wishes=wishes)


def visible_wishes(user_id, couple_id=None, partner_id=None):
    """Wishes user_id may change: their own, the couple's, the partner's personal ones."""
    scope = Q(author_id=user_id)
    if couple_id:
        scope |= Q(couple_id=couple_id, is_personal=False)
    if partner_id:
        scope |= Q(author_id=partner_id, is_personal=True)
    return Wish.objects.filter(scope)


def toggle_wish(wish_id, is_completed, queryset=None):
    queryset = Wish.objects.all() if queryset is None else queryset
    try:
        updated = queryset.filter(id=wish_id).update(
            is_completed=is_completed,
            completed_at=timezone.now() if is_completed else None,
        )
    except DatabaseError as exc:
        return _failed("Toggling wish", exc)
    if not updated:
        return Result.fail(_("Wish not found."))
    return Result.ok()


def delete_wish(wish_id, queryset=None):
    queryset = Wish.objects.all() if queryset is None else queryset
    try:
        deleted, _rows = queryset.filter(id=wish_id).delete()
    except DatabaseError as exc:
        return _failed("Deleting wish", exc)
    if not deleted:
        return Result.fail(_("Wish not found."))
    return Result.ok()


# =============================================================================
# CALENDAR
# =============================================================================

def add_event(couple_id, user_id, title, date, description=''):
    try:
        event = Event.objects.create(
            couple_id=couple_id,
            created_by_id=user_id,
            title=title,
            date=date,
            description=description or '',
        )
    except DatabaseError as exc:
        return _failed("Adding event", exc)
    return Result.ok(event_id=event.id, event=event_dict(event))


def list_events(couple_id):
    try:
        events = [event_dict(e) for e in Event.objects.filter(couple_id=couple_id).order_by('date')]
    except DatabaseError as exc:
        return _failed("Listing events", exc)
    return Result.ok(events=events)


def upcoming_events(couple_id, limit=5, now=None):
    now = now or timezone.now()
    try:
        events = [
            event_dict(e)
            for e in Event.objects.filter(couple_id=couple_id, date__gte=now).order_by('date')[:limit]
        ]
    except DatabaseError as exc:
        return _failed("Listing upcoming events", exc)
    return Result.ok(events=events)


def update_event(couple_id, event_id, **updates):
    allowed = {k: v for k, v in updates.items() if k in ('title', 'date', 'description')}
    try:
        updated = Event.objects.filter(couple_id=couple_id, id=event_id).update(**allowed)
    except DatabaseError as exc:
        return _failed("Updating event", exc)
    if not updated:
        return Result.fail(_("Event not found."))
    return Result.ok()


def delete_event(couple_id, event_id):
    try:
        Event.objects.filter(couple_id=couple_id, id=event_id).delete()
    except DatabaseError as exc:
        return _failed("Deleting event", exc)
    return Result.ok()


# =============================================================================
# MEMORIES
# =============================================================================

def memories_cache_key(couple_id):
    return f'memories_{couple_id}'


def cached_memories(couple_id):
    """Last listed memories for the couple, or None. Never authoritative."""
    return cache.get(memories_cache_key(couple_id))


def clear_memories_cache(couple_id):
    if couple_id:
        cache.delete(memories_cache_key(couple_id))


def upload_memory(couple_id, user_id, file, date=None, description=''):
    path = f'couples/{couple_id}/memories/{int(timezone.now().timestamp() * 1000)}_{storage.safe_name(getattr(file, "name", ""))}'
    try:
        stored = storage.put(path, file)
        memory = Memory.objects.create(
            couple_id=couple_id,
            author_id=user_id,
            photo=stored.public_id,
            date=date or timezone.localdate(),
            description=description or '',
        )
    except storage.StorageError as exc:
        return _failed("Uploading memory photo", exc)
    except DatabaseError as exc:
        storage.delete(stored.public_id)
        return _failed("Saving memory", exc)
    clear_memories_cache(couple_id)
    return Result.ok(memory_id=memory.id, url=stored.url)


def list_memories(couple_id):
    try:
        memories = [memory_dict(m) for m in Memory.objects.filter(couple_id=couple_id).order_by('-date', '-created_at')]
    except DatabaseError as exc:
        return _failed("Listing memories", exc)
    cache.set(memories_cache_key(couple_id), memories, settings.MEMORIES_CACHE_TIMEOUT)
    return Result.ok(memories=memories)


def update_memory(couple_id, memory_id, date=None, description=None):
    updates = {}
    if date is not None:
        updates['date'] = date
    if description is not None:
        updates['description'] = description
    memories = Memory.objects.filter(couple_id=couple_id, id=memory_id)
    try:
        updated = memories.update(**updates) if updates else memories.count()
    except DatabaseError as exc:
        return _failed("Updating memory", exc)
    if not updated:
        return Result.fail(_("Memory not found."))
    clear_memories_cache(couple_id)
    return Result.ok()


def delete_memory(couple_id, memory_id):
    memory = Memory.objects.filter(couple_id=couple_id, id=memory_id).first()
    if memory is None:
        return Result.ok()
    try:
        memory.delete()
    except DatabaseError as exc:
        return _failed("Deleting memory", exc)
    storage.delete(memory.photo)
    clear_memories_cache(couple_id)
    return Result.ok()


# =============================================================================
# PHOTO OF THE DAY
# =============================================================================

def upload_photo_of_day(couple_id, user_id, file):
    path = f'couples/{couple_id}/photos/{int(timezone.now().timestamp() * 1000)}_{storage.safe_name(getattr(file, "name", ""))}'
    try:
        stored = storage.put(path, file)
        photo = PhotoOfDay.objects.create(
            couple_id=couple_id,
            uploaded_by_id=user_id,
            photo=stored.public_id,
        )
    except storage.StorageError as exc:
        return _failed("Uploading photo of the day", exc)
    except DatabaseError as exc:
        storage.delete(stored.public_id)
        return _failed("Saving photo of the day", exc)
    return Result.ok(photo_id=photo.id, url=stored.url)


def latest_photo_of_day(couple_id):
    try:
        photo = PhotoOfDay.objects.filter(couple_id=couple_id).order_by('-created_at').first()
    except DatabaseError as exc:
        return _failed("Loading photo of the day", exc)
    return Result.ok(photo=photo_dict(photo) if photo else None)


def list_photos_of_day(couple_id):
    try:
        photos = [photo_dict(p) for p in PhotoOfDay.objects.filter(couple_id=couple_id).order_by('-created_at')]
    except DatabaseError as exc:
        return _failed("Listing photos of the day", exc)
    return Result.ok(photos=photos)


def delete_photo_of_day(couple_id, photo_id):
    photo = PhotoOfDay.objects.filter(couple_id=couple_id, id=photo_id).first()
    if photo is None:
        return Result.ok()
    try:
        photo.delete()
    except DatabaseError as exc:
        return _failed("Deleting photo of the day", exc)
    storage.delete(photo.photo)
    return Result.ok()
