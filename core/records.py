"""
LoveSync - User Record Store

Reads and writes the per-user Profile record. Every write goes through
batch_update so that:
- multi-user writes (pairing, disconnect) are all-or-nothing
- subscribers see a RecordChange for each touched user once the
  transaction has committed

Listeners connect to the record_changed signal; core.identity keeps one
per signed-in user while that user has a live session.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.dispatch import Signal

from .models import Profile

logger = logging.getLogger(__name__)

WATCHED_FIELDS = (
    'partner_id',
    'couple_id',
    'display_name',
    'relationship_start',
    'invite_code',
)

# Sent after commit, once per changed record, with `change` (a RecordChange).
record_changed = Signal()


@dataclass(frozen=True)
class RecordChange:
    user_id: int
    previous: dict
    current: dict
    actor_id: int = None

    @property
    def remote(self):
        """Made by someone other than the record's owner."""
        return self.actor_id is not None and str(self.actor_id) != str(self.user_id)

    def changed(self, field):
        return self.previous.get(field) != self.current.get(field)

    @property
    def partner_disconnected(self):
        """The partner link was cleared (by this user or remotely)."""
        return self.previous.get('partner_id') is not None and self.current.get('partner_id') is None


def get(user_id):
    """Return the Profile for user_id, or None."""
    return (
        Profile.objects
        .select_related('user', 'partner', 'couple')
        .filter(user_id=user_id)
        .first()
    )


def query(field, value):
    """Return every Profile whose `field` equals `value`."""
    return list(Profile.objects.select_related('user').filter(**{field: value}))


def update(user_id, **fields):
    batch_update([(user_id, fields)], actor_id=user_id)


def batch_update(updates, actor_id=None):
    """
    Apply [(user_id, fields), ...] atomically on behalf of actor_id.

    Raises Profile.DoesNotExist (rolling back every write) if any target
    record is missing.
    """
    user_ids = [user_id for user_id, _ in updates]
    with transaction.atomic():
        before = _snapshot(user_ids, lock=True)
        missing = set(user_ids) - set(before)
        if missing:
            raise Profile.DoesNotExist(f"No profile for user(s) {sorted(missing)}")

        for user_id, fields in updates:
            Profile.objects.filter(user_id=user_id).update(**fields)

        after = _snapshot(user_ids)
        changes = [
            RecordChange(user_id, before[user_id], after[user_id], actor_id)
            for user_id in dict.fromkeys(user_ids)
            if before[user_id] != after[user_id]
        ]
        if changes:
            transaction.on_commit(lambda: _publish(changes))


def _snapshot(user_ids, lock=False):
    qs = Profile.objects.filter(user_id__in=user_ids)
    if lock:
        qs = qs.select_for_update()
    return {
        row['user_id']: {name: row[name] for name in WATCHED_FIELDS}
        for row in qs.values('user_id', *WATCHED_FIELDS)
    }




def _publish(changes):
    for change in changes:
        responses = record_changed.send_robust(sender=Profile, change=change)
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(
                    "Record listener %r failed for user %s",
                    receiver, change.user_id, exc_info=response,
                )
