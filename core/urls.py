"""
LoveSync - Core URL Configuration
"""

from django.urls import path
from . import views

urlpatterns = [
    # Page shell
    path('', views.home, name='home'),

    # Auth
    path('api/register/', views.register_view, name='register'),
    path('api/login/', views.login_view, name='login'),
    path('api/logout/', views.logout_view, name='logout'),
    path('api/state/', views.state_view, name='state'),

    # Profile
    path('api/profile/', views.profile_update, name='profile_update'),
    path('api/profile/avatar/', views.avatar_upload, name='avatar_upload'),

    # Couple pairing
    path('api/invite-code/', views.invite_code, name='invite_code'),
    path('api/connect/', views.connect, name='connect'),
    path('api/disconnect/', views.disconnect, name='disconnect'),

    # Home extras
    path('api/question/', views.question_view, name='question'),
    path('api/reminder/', views.reminder_view, name='reminder'),

    # Daily answers
    path('api/answers/', views.answers, name='answers'),
    path('api/answers/<int:answer_id>/delete/', views.answer_delete, name='answer_delete'),

    # Wishes
    path('api/wishes/', views.wishes, name='wishes'),
    path('api/wishes/partner/', views.partner_wishes, name='partner_wishes'),
    path('api/wishes/<int:wish_id>/toggle/', views.wish_toggle, name='wish_toggle'),
    path('api/wishes/<int:wish_id>/delete/', views.wish_delete, name='wish_delete'),

    # Calendar
    path('api/events/', views.events, name='events'),
    path('api/events/upcoming/', views.upcoming_events, name='upcoming_events'),
    path('api/events/<int:event_id>/', views.event_update, name='event_update'),
    path('api/events/<int:event_id>/delete/', views.event_delete, name='event_delete'),

    # Memories
    path('api/memories/', views.memories, name='memories'),
    path('api/memories/<int:memory_id>/', views.memory_update, name='memory_update'),
    path('api/memories/<int:memory_id>/delete/', views.memory_delete, name='memory_delete'),

    # Photo of the day
    path('api/photo-of-day/', views.photo_of_day, name='photo_of_day'),
    path('api/photo-of-day/all/', views.photo_of_day_list, name='photo_of_day_list'),
    path('api/photo-of-day/<int:photo_id>/delete/', views.photo_of_day_delete, name='photo_of_day_delete'),

    # Mini-games
    path('api/games/who-am-i/', views.who_am_i, name='who_am_i'),
    path('api/games/story/', views.story, name='story'),
    path('api/games/drawing/', views.drawing, name='drawing'),
]
