"""
LoveSync - Forms

Request validation for the JSON endpoints. Anything a form rejects never
reaches a service, so nothing is written.
"""

from datetime import datetime, time

from django import forms
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .models import Profile


class RegisterForm(forms.Form):
    """Field presence, email format and password length are checked by core.identity."""
    email = forms.CharField(required=False, max_length=254)
    name = forms.CharField(required=False, max_length=50)
    password = forms.CharField(required=False, strip=False)
    password_confirm = forms.CharField(required=False, strip=False)

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirm = cleaned_data.get('password_confirm')
        if password and confirm != password:
            raise forms.ValidationError(_("Passwords do not match."))
        return cleaned_data


class LoginForm(forms.Form):
    email = forms.CharField(required=False, max_length=254)
    password = forms.CharField(required=False, strip=False)


class ProfileForm(forms.ModelForm):
    """Form for editing user profile settings."""

    class Meta:
        model = Profile
        fields = ['display_name', 'relationship_start']
        labels = {
            'display_name': _('Display Name'),
            'relationship_start': _('When did your relationship start?'),
        }

    def clean_relationship_start(self):
        start = self.cleaned_data.get('relationship_start')
        if start and start > timezone.localdate():
            raise forms.ValidationError(_("The start date cannot be in the future."))
        return start


class AvatarForm(forms.Form):
    avatar = forms.FileField()

    def clean_avatar(self):
        avatar = self.cleaned_data['avatar']
        if avatar.size > settings.MAX_AVATAR_BYTES:
            raise forms.ValidationError(_("The photo must be smaller than 1 MB."))
        content_type = getattr(avatar, 'content_type', '') or ''
        if not content_type.startswith('image/'):
            raise forms.ValidationError(_("Please choose an image."))
        return avatar


class InviteCodeForm(forms.Form):
    code = forms.CharField(max_length=20)

    def clean_code(self):
        return self.cleaned_data['code'].strip().upper()


class AnswerForm(forms.Form):
    question = forms.CharField(required=False, max_length=500)
    answer = forms.CharField(widget=forms.Textarea)


class WishForm(forms.Form):
    text = forms.CharField(max_length=500)
    is_personal = forms.BooleanField(required=False)
    for_partner = forms.BooleanField(required=False)


class WishToggleForm(forms.Form):
    is_completed = forms.BooleanField(required=False)


class EventForm(forms.Form):
    """An event date plus optional time; a missing time means midnight."""
    title = forms.CharField(max_length=200)
    date = forms.DateField()
    time = forms.TimeField(required=False)
    description = forms.CharField(required=False, widget=forms.Textarea)

    def clean(self):
        cleaned_data = super().clean()
        day = cleaned_data.get('date')
        if day is not None:
            moment = datetime.combine(day, cleaned_data.get('time') or time.min)
            cleaned_data['when'] = timezone.make_aware(moment)
        return cleaned_data


class MemoryForm(forms.Form):
    photo = forms.FileField()
    date = forms.DateField(required=False)
    description = forms.CharField(required=False, widget=forms.Textarea)


class MemoryUpdateForm(forms.Form):
    date = forms.DateField(required=False)
    description = forms.CharField(required=False, widget=forms.Textarea)


class PhotoForm(forms.Form):
    photo = forms.FileField()
