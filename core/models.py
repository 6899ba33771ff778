"""
LoveSync - Data Models
======================

The user record (Profile) carries the partner linkage; the Couple is the
shared pair record every piece of shared content hangs off.

Linkage invariant:
- Profile.partner is set if and only if Profile.couple is set
- A set partner's own Profile.partner points back at this user
- Both sides are written together by core.pairing, never one at a time
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from cloudinary.models import CloudinaryField


class Profile(models.Model):
    """
    Extends Django's User with the per-user record of the app.

    Created automatically when a User is created via signals, with every
    linkage field empty.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile'
    )

    # Display
    display_name = models.CharField(
        max_length=50,
        blank=True,
        help_text="Name shown to your partner (defaults to email)"
    )
    avatar = CloudinaryField(
        'avatar',
        blank=True,
        null=True,
        help_text="Profile photo"
    )
    relationship_start = models.DateField(
        null=True,
        blank=True,
        help_text="When did your relationship start?"
    )

    # Invite system
    invite_code = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        help_text="Share this code with your partner to connect"
    )
    invite_code_generated_at = models.DateTimeField(null=True, blank=True)

    # Partner linkage
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="The connected partner"
    )
    couple = models.ForeignKey(
        'Couple',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='profiles',
        help_text="The shared pair record"
    )

    def __str__(self):
        return f"Profile: {self.user.email or self.user.username}"

    @property
    def name(self):
        """Returns display_name if set, otherwise the email."""
        return self.display_name or self.user.email or self.user.username

    @property
    def is_linked(self):
        return self.partner_id is not None


class CoupleStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'


class Couple(models.Model):
    """
    Pairs two users together as a couple.

    The primary key is derived from the two member ids (see
    core.pairing.derive_pair_id), so the same two users always map to the
    same record no matter who initiated the pairing.

    Disconnecting never deletes the couple: reconnecting the same two users
    brings back their shared answers, events and memories.
    """
    id = models.CharField(primary_key=True, max_length=100)
    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='couple_as_user1'
    )
    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='couple_as_user2'
    )
    status = models.CharField(
        max_length=20,
        choices=CoupleStatus.choices,
        default=CoupleStatus.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Couple'
        verbose_name_plural = 'Couples'

    def __str__(self):
        return f"{self.user1} & {self.user2}"


class Prompt(models.Model):
    """
    Daily questions - one per day, cycling annually.
    """
    text = models.CharField(
        max_length=500,
        help_text="The question shown to both partners"
    )
    active_date = models.DateField(
        unique=True,
        db_index=True,
        help_text="The specific date this question is shown (MM-DD used for cycling)"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['active_date']
        verbose_name = 'Prompt'
        verbose_name_plural = 'Prompts'

    def __str__(self):
        return self.text[:50]

    @classmethod
    def get_todays_prompt(cls, today=None):
        """
        Get the prompt for today, matching by month and day.
        This allows prompts to cycle annually.
        """
        today = today or timezone.localdate()
        return cls.objects.filter(
            active_date__month=today.month,
            active_date__day=today.day
        ).first()


class Answer(models.Model):
    """A partner's answer to a daily question, shared with the couple."""
    couple = models.ForeignKey(
        Couple,
        on_delete=models.CASCADE,
        related_name='answers'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='answers'
    )
    question = models.CharField(max_length=500)
    answer = models.TextField()
    date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-date']
        indexes = [
            models.Index(fields=['couple', 'date'], name='answer_couple_date_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.question[:40]}"


class Wish(models.Model):
    """
    Wish list item.

    Personal wishes belong to their author only; shared wishes also carry
    the couple they were written for.
    """
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='wishes'
    )
    couple = models.ForeignKey(
        Couple,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='wishes'
    )
    text = models.CharField(max_length=500)
    is_personal = models.BooleanField(default=True)
    is_completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = 'Wishes'
        indexes = [
            models.Index(fields=['author', 'is_personal'], name='wish_author_personal_idx'),
            models.Index(fields=['couple', 'is_personal'], name='wish_couple_personal_idx'),
        ]

    def __str__(self):
        return self.text[:50]


class Event(models.Model):
    """Shared calendar event."""
    couple = models.ForeignKey(
        Couple,
        on_delete=models.CASCADE,
        related_name='events'
    )
    title = models.CharField(max_length=200)
    date = models.DateTimeField(db_index=True)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_events'
    )

    class Meta:
        ordering = ['date']

    def __str__(self):
        return f"{self.title} ({self.date:%Y-%m-%d %H:%M})"


class Memory(models.Model):
    """A photo in the couple's memory album."""
    couple = models.ForeignKey(
        Couple,
        on_delete=models.CASCADE,
        related_name='memories'
    )
    photo = CloudinaryField('photo')
    date = models.DateField(default=timezone.localdate)
    description = models.TextField(blank=True, default='')
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='memories'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'Memories'

    def __str__(self):
        return f"Memory {self.date}"


class PhotoOfDay(models.Model):
    """The couple's photo of the day; the latest upload is the current one."""
    couple = models.ForeignKey(
        Couple,
        on_delete=models.CASCADE,
        related_name='photos_of_day'
    )
    photo = CloudinaryField('photo')
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Photo of the day'
        verbose_name_plural = 'Photos of the day'

    def __str__(self):
        return f"Photo of the day {self.created_at:%Y-%m-%d}"
