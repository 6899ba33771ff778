"""
LoveSync - Pairing Engine

Establishes and tears down the symmetric partner link between two users:

    Unlinked --create_or_get_pair--> Linked --disconnect--> Unlinked

There is no pending state: entering a valid invite code links both users
immediately.
"""

import logging
import secrets

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from . import records
from .models import Couple, CoupleStatus, Profile
from .results import Result

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = '_'
INVITE_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


class PairingError(Exception):
    def __init__(self, message, code=''):
        super().__init__(message)
        self.code = code


def derive_pair_id(user_a_id, user_b_id):
    """Same id whichever user comes first."""
    a, b = str(user_a_id), str(user_b_id)
    if a == b:
        raise ValueError("A user cannot be paired with themselves")
    return PAIR_SEPARATOR.join(sorted((a, b)))


def generate_code(length=None):
    length = length or settings.INVITE_CODE_LENGTH
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for i in range(length))


def generate_invite_code(user_id):
    """Give the user a fresh invite code, replacing any previous one."""
    code = generate_code()
    try:
        # Ensure uniqueness (simple check)
        while Profile.objects.filter(invite_code=code).exists():
            code = generate_code()
        records.update(user_id, invite_code=code, invite_code_generated_at=timezone.now())
    except (DatabaseError, Profile.DoesNotExist) as exc:
        logger.error("Invite code generation failed for user %s: %s", user_id, exc)
        return Result.fail(_("Could not create an invite code."))
    return Result.ok(code=code)


def create_or_get_pair(user_a_id, user_b_id):
    """
    Return the pair id for two users, creating the pair on first use.

    An existing pair record is returned untouched. Either way both users
    are (re)linked to each other in one batch, so a pair reconnected after
    a disconnect picks up its old history.
    """
    try:
        couple_id = derive_pair_id(user_a_id, user_b_id)
    except ValueError:
        return Result.fail(_("You can't connect with yourself."), code='self-pairing')

    try:
        with transaction.atomic():
            _link(couple_id, user_a_id, user_b_id)
    except PairingError as exc:
        return Result.fail(exc, code=exc.code)
    except (DatabaseError, Profile.DoesNotExist) as exc:
        logger.error("Pairing %s failed: %s", couple_id, exc)
        return Result.fail(_("Could not connect partners. Please try again."))

    return Result.ok(couple_id=couple_id)


def _link(couple_id, user_a_id, user_b_id):
    for user_id, other_id in ((user_a_id, user_b_id), (user_b_id, user_a_id)):
        current = Profile.objects.filter(user_id=user_id).values_list('partner_id', flat=True).first()
        if current is not None and str(current) != str(other_id):
            raise PairingError(_("One of you is already connected to someone else."), code='already-paired')

    couple, created = Couple.objects.get_or_create(
        id=couple_id,
        defaults={
            'user1_id': user_a_id,
            'user2_id': user_b_id,
            'status': CoupleStatus.ACTIVE,
        },
    )
    if created:
        logger.info("Created couple %s", couple_id)

    records.batch_update([
        (user_a_id, {'partner_id': user_b_id, 'couple_id': couple.id}),
        (user_b_id, {'partner_id': user_a_id, 'couple_id': couple.id}),
    ], actor_id=user_a_id)


def connect_by_invite_code(user_id, code):
    """
    Link user_id with whoever currently owns `code`.

    The code is consumed with a conditional update in the same transaction
    as the link, so two people racing for one code cannot both win.
    """
    code = (code or '').strip().upper()
    matches = records.query('invite_code', code) if code else []
    if not matches:
        return Result.fail(_("Invite code not found."), code='code-not-found')

    partner = matches[0]
    if str(partner.user_id) == str(user_id):
        return Result.fail(_("You can't connect with yourself."), code='self-pairing')

    try:
        with transaction.atomic():
            consumed = Profile.objects.filter(pk=partner.pk, invite_code=code).update(invite_code=None)
            if not consumed:
                raise PairingError(_("Invite code not found."), code='code-not-found')
            result = create_or_get_pair(user_id, partner.user_id)
            if not result:
                raise PairingError(result.error, code=result.code)
    except PairingError as exc:
        return Result.fail(exc, code=exc.code)
    except DatabaseError as exc:
        logger.error("Connecting user %s by invite code failed: %s", user_id, exc)
        return Result.fail(_("Could not connect partners. Please try again."))

    partner.refresh_from_db()
    logger.info("User %s connected with user %s", user_id, partner.user_id)
    return Result.ok(couple_id=result.data['couple_id'], partner=partner)


def disconnect(user_id, partner_id=None):
    """
    Clear the link on user_id and, when given, on partner_id.

    Safe to repeat and safe when the partner already points elsewhere.
    The Couple record is kept.
    """
    cleared = {'partner_id': None, 'couple_id': None}
    updates = [(user_id, dict(cleared))]
    if partner_id is not None and str(partner_id) != str(user_id):
        updates.append((partner_id, dict(cleared)))

    try:
        records.batch_update(updates, actor_id=user_id)
    except (DatabaseError, Profile.DoesNotExist) as exc:
        logger.error("Disconnect failed for user %s: %s", user_id, exc)
        return Result.fail(_("Could not disconnect. Please try again."))

    logger.info("User %s disconnected from %s", user_id, partner_id)
    return Result.ok()
