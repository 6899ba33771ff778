"""
LoveSync - Application State

AppState is built fresh for every request from the signed-in user's record
and handed to the views explicitly. Nothing here is global.
"""

import random
from dataclasses import dataclass, field

from django.utils import timezone

from . import catalog, records, storage
from .models import Memory, Prompt, Wish


@dataclass
class AppState:
    user: object
    profile: object
    partner: object = None
    notices: list = field(default_factory=list)

    @classmethod
    def for_user(cls, user):
        """Load the user's record and, when linked, the partner's."""
        profile = records.get(user.pk)
        if profile is None:
            return None
        partner = records.get(profile.partner_id) if profile.partner_id else None
        return cls(user=user, profile=profile, partner=partner)

    @property
    def couple_id(self):
        return self.profile.couple_id

    @property
    def partner_id(self):
        return self.profile.partner_id

    @property
    def is_linked(self):
        return self.profile.is_linked and self.couple_id is not None

    @property
    def players(self):
        """Names for the two-player games, signed-in user first."""
        second = self.partner.name if self.partner else 'Player 2'
        return [self.profile.name, second]

    def days_together(self, today=None):
        start = self.profile.relationship_start
        if start is None:
            return 0
        today = today or timezone.localdate()
        return max(0, (today - start).days)

    def counters(self):
        if not self.couple_id:
            return {'photos': 0, 'shared_wishes': 0, 'completed_wishes': 0}
        shared = Wish.objects.filter(couple_id=self.couple_id, is_personal=False)
        return {
            'photos': Memory.objects.filter(couple_id=self.couple_id).count(),
            'shared_wishes': shared.count(),
            'completed_wishes': shared.filter(is_completed=True).count(),
        }

    def as_dict(self):
        profile = self.profile
        data = {
            'user': {
                'id': self.user.pk,
                'email': self.user.email,
                'name': profile.name,
                'avatar': storage.public_url(profile.avatar) if profile.avatar else None,
                'relationship_start': profile.relationship_start,
                'invite_code': profile.invite_code,
            },
            'partner': None,
            'couple_id': self.couple_id,
            'is_linked': self.is_linked,
            'days_together': self.days_together(),
            'counters': self.counters(),
            'notices': list(self.notices),
        }
        if self.partner is not None:
            data['partner'] = {
                'id': self.partner.user_id,
                'name': self.partner.name,
                'avatar': storage.public_url(self.partner.avatar) if self.partner.avatar else None,
            }
        return data


def todays_question(today=None):
    prompt = Prompt.get_todays_prompt(today)
    return prompt.text if prompt else catalog.DEFAULT_QUESTION


def love_reminder(rng=random):
    return rng.choice(catalog.LOVE_REMINDERS)
