"""
LoveSync - Admin Configuration

Admin interface for managing daily questions and inspecting couples and
their shared content.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth import get_user_model
from .models import Answer, Couple, Event, Memory, PhotoOfDay, Profile, Prompt, Wish

User = get_user_model()


# Inline Profile in User admin
class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = 'Profile'
    fk_name = 'user'
    readonly_fields = ['partner', 'couple', 'invite_code', 'invite_code_generated_at']


# Extend the User admin to show Profile
class UserAdmin(BaseUserAdmin):
    inlines = [ProfileInline]
    list_display = ['username', 'email', 'get_display_name', 'get_partner', 'is_staff']

    def get_display_name(self, obj):
        if hasattr(obj, 'profile'):
            return obj.profile.name
        return obj.username
    get_display_name.short_description = 'Display Name'

    def get_partner(self, obj):
        if hasattr(obj, 'profile') and obj.profile.partner:
            return obj.profile.partner
        return None
    get_partner.short_description = 'Partner'


# Re-register User with our custom admin
admin.site.unregister(User)
admin.site.register(User, UserAdmin)


@admin.register(Couple)
class CoupleAdmin(admin.ModelAdmin):
    list_display = ['id', '__str__', 'status', 'is_linked', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['id', 'user1__username', 'user2__username']
    readonly_fields = ['id', 'user1', 'user2', 'created_at']

    def is_linked(self, obj):
        return obj.profiles.count() == 2
    is_linked.boolean = True
    is_linked.short_description = 'Linked'


@admin.register(Prompt)
class PromptAdmin(admin.ModelAdmin):
    list_display = ['active_date', 'text_short']
    list_filter = ['active_date']
    search_fields = ['text']
    ordering = ['active_date']
    date_hierarchy = 'active_date'

    def text_short(self, obj):
        return obj.text[:60] + '...' if len(obj.text) > 60 else obj.text
    text_short.short_description = 'Question'


@admin.register(Answer)
class AnswerAdmin(admin.ModelAdmin):
    list_display = ['user', 'couple', 'question_short', 'date']
    list_filter = ['date']
    search_fields = ['question', 'answer', 'user__username']
    ordering = ['-date']
    date_hierarchy = 'date'

    def question_short(self, obj):
        return obj.question[:60] + '...' if len(obj.question) > 60 else obj.question
    question_short.short_description = 'Question'


@admin.register(Wish)
class WishAdmin(admin.ModelAdmin):
    list_display = ['text', 'author', 'couple', 'is_personal', 'is_completed', 'created_at']
    list_filter = ['is_personal', 'is_completed', 'created_at']
    search_fields = ['text', 'author__username']
    ordering = ['-created_at']


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'couple', 'date', 'created_by']
    list_filter = ['date']
    search_fields = ['title', 'description']
    date_hierarchy = 'date'


@admin.register(Memory)
class MemoryAdmin(admin.ModelAdmin):
    list_display = ['couple', 'date', 'author', 'created_at']
    list_filter = ['date']
    search_fields = ['description']
    readonly_fields = ['created_at']


@admin.register(PhotoOfDay)
class PhotoOfDayAdmin(admin.ModelAdmin):
    list_display = ['couple', 'uploaded_by', 'created_at']
    list_filter = ['created_at']
    ordering = ['-created_at']
