"""
LoveSync - Views
================

JSON endpoints behind the single-page client, plus the page shell at `/`.

Every endpoint:
1. Rejects anonymous requests (401) unless it is part of sign-in
2. Validates input with a form before any service runs (400)
3. Builds an AppState for the signed-in user and passes it explicitly
4. Returns {'success': True, ...} or {'success': False, 'error': ...}

Unexpected errors are logged and answered with a generic message.
"""

import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.utils.translation import gettext as _
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import catalog, content, identity, pairing
from .forms import (
    AnswerForm, AvatarForm, EventForm, InviteCodeForm, LoginForm, MemoryForm,
    MemoryUpdateForm, PhotoForm, ProfileForm, RegisterForm, WishForm, WishToggleForm,
)
from .games import DrawingGame, GameError, StoryGame, WhoAmIGame
from .state import AppState, love_reminder, todays_question

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def _error(message, status=400, code=''):
    payload = {'success': False, 'error': str(message)}
    if code:
        payload['code'] = code
    return JsonResponse(payload, status=status)


def _form_error(form):
    """First validation message of a bound form."""
    for errors in form.errors.values():
        return _error(errors[0])
    return _error(_("Invalid request."))


def _respond(result, status=400):
    return JsonResponse(result.as_dict(), status=200 if result else status)


def api_view(view):
    """Top-level guard: any unexpected error becomes a logged generic failure."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return _error(_("Something went wrong. Please try again."), status=500)
    return wrapper


def with_state(require_couple=False):
    """
    Require a signed-in user and pass their AppState as the second argument.

    With require_couple, users without a partner get a 400.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return _error(_("Please sign in."), status=401)
            state = AppState.for_user(request.user)
            if state is None:
                return _error(identity.error_message('profile-not-found'), status=404, code='profile-not-found')
            if require_couple and not state.is_linked:
                return _error(_("Connect with your partner first."))
            return view(request, state, *args, **kwargs)
        return api_view(wrapper)
    return decorator


# =============================================================================
# PAGE SHELL
# =============================================================================

@ensure_csrf_cookie
def home(request):
    """The single-page client. All data is loaded through /api/."""
    return render(request, 'index.html', {'languages': settings.LANGUAGES})


# =============================================================================
# AUTHENTICATION
# =============================================================================

@require_POST
@api_view
def register_view(request):
    form = RegisterForm(request.POST)
    if not form.is_valid():
        return _form_error(form)

    data = form.cleaned_data
    result = identity.register(data['email'], data['password'], data['name'])
    if not result:
        return _respond(result)

    login_result = identity.login(request, data['email'], data['password'])
    if not login_result:
        return _respond(login_result)
    return JsonResponse({'success': True, 'state': AppState.for_user(request.user).as_dict()})


@require_POST
@api_view
def login_view(request):
    form = LoginForm(request.POST)
    if not form.is_valid():
        return _form_error(form)

    result = identity.login(request, form.cleaned_data['email'], form.cleaned_data['password'])
    if not result:
        return _respond(result)
    return JsonResponse({'success': True, 'state': AppState.for_user(request.user).as_dict()})


@require_POST
@api_view
def logout_view(request):
    return _respond(identity.logout(request))


@require_GET
@with_state()
def state_view(request, state):
    """Current user, partner, counters and any queued notices."""
    state.notices = identity.pop_notices(request.user.pk)
    return JsonResponse({'success': True, 'state': state.as_dict()})


# =============================================================================
# PROFILE
# =============================================================================

@require_POST
@with_state()
def profile_update(request, state):
    form = ProfileForm(request.POST, instance=state.profile)
    if not form.is_valid():
        return _form_error(form)
    return _respond(content.update_profile(request.user.pk, **form.cleaned_data))


@require_POST
@with_state()
def avatar_upload(request, state):
    form = AvatarForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_error(form)
    return _respond(content.set_avatar(request.user.pk, form.cleaned_data['avatar']), status=502)


# =============================================================================
# COUPLE PAIRING
# =============================================================================

@require_POST
@with_state()
def invite_code(request, state):
    """Generate a fresh invite code for the user to share."""
    if state.is_linked:
        return _error(_("You are already connected with your partner."), code='already-paired')
    return _respond(pairing.generate_invite_code(request.user.pk))


@require_POST
@with_state()
def connect(request, state):
    form = InviteCodeForm(request.POST)
    if not form.is_valid():
        return _form_error(form)

    result = pairing.connect_by_invite_code(request.user.pk, form.cleaned_data['code'])
    if not result:
        return _respond(result)

    state = AppState.for_user(request.user)
    return JsonResponse({
        'success': True,
        'couple_id': result.data['couple_id'],
        'state': state.as_dict(),
    })


@require_POST
@with_state()
def disconnect(request, state):
    result = pairing.disconnect(request.user.pk, state.partner_id)
    if result:
        content.clear_memories_cache(state.couple_id)
    return _respond(result, status=500)


# =============================================================================
# HOME EXTRAS
# =============================================================================

@require_GET
@with_state()
def question_view(request, state):
    return JsonResponse({'success': True, 'question': todays_question()})


@require_GET
@with_state()
def reminder_view(request, state):
    return JsonResponse({'success': True, 'message': love_reminder()})


# =============================================================================
# DAILY ANSWERS
# =============================================================================

@require_http_methods(['GET', 'POST'])
@with_state(require_couple=True)
def answers(request, state):
    if request.method == 'GET':
        return _respond(content.list_answers(state.couple_id), status=500)

    form = AnswerForm(request.POST)
    if not form.is_valid():
        return _form_error(form)
    question = form.cleaned_data['question'] or todays_question()
    result = content.submit_answer(state.couple_id, request.user.pk, question, form.cleaned_data['answer'])
    return _respond(result, status=500)


@require_POST
@with_state(require_couple=True)
def answer_delete(request, state, answer_id):
    return _respond(content.delete_answer(state.couple_id, answer_id), status=500)


# =============================================================================
# WISHES
# =============================================================================

@require_http_methods(['GET', 'POST'])
@with_state()
def wishes(request, state):
    if request.method == 'GET':
        return _respond(content.list_wishes(request.user.pk, state.couple_id), status=500)

    form = WishForm(request.POST)
    if not form.is_valid():
        return _form_error(form)

    data = form.cleaned_data
    if data['for_partner']:
        if not state.partner_id:
            return _error(_("Connect with your partner first."))
        # Gift idea: lands on the partner's personal list.
        return _respond(content.add_wish(state.partner_id, None, data['text'], True))
    return _respond(content.add_wish(request.user.pk, state.couple_id, data['text'], data['is_personal']))


@require_GET
@with_state(require_couple=True)
def partner_wishes(request, state):
    return _respond(content.partner_wishes(state.partner_id), status=500)


@require_POST
@with_state()
def wish_toggle(request, state, wish_id):
    form = WishToggleForm(request.POST)
    if not form.is_valid():
        return _form_error(form)
    queryset = content.visible_wishes(request.user.pk, state.couple_id, state.partner_id)
    return _respond(content.toggle_wish(wish_id, form.cleaned_data['is_completed'], queryset), status=404)


@require_POST
@with_state()
def wish_delete(request, state, wish_id):
    queryset = content.visible_wishes(request.user.pk, state.couple_id, state.partner_id)
    return _respond(content.delete_wish(wish_id, queryset), status=404)


# =============================================================================
# CALENDAR
# =============================================================================

@require_http_methods(['GET', 'POST'])
@with_state(require_couple=True)
def events(request, state):
    if request.method == 'GET':
        return _respond(content.list_events(state.couple_id), status=500)

    form = EventForm(request.POST)
    if not form.is_valid():
        return _form_error(form)
    data = form.cleaned_data
    result = content.add_event(state.couple_id, request.user.pk, data['title'], data['when'], data['description'])
    return _respond(result, status=500)


@require_GET
@with_state(require_couple=True)
def upcoming_events(request, state):
    return _respond(content.upcoming_events(state.couple_id), status=500)


@require_POST
@with_state(require_couple=True)
def event_update(request, state, event_id):
    form = EventForm(request.POST)
    if not form.is_valid():
        return _form_error(form)
    data = form.cleaned_data
    result = content.update_event(
        state.couple_id, event_id,
        title=data['title'], date=data['when'], description=data['description'],
    )
    return _respond(result, status=404)


@require_POST
@with_state(require_couple=True)
def event_delete(request, state, event_id):
    return _respond(content.delete_event(state.couple_id, event_id), status=500)


# =============================================================================
# MEMORIES
# =============================================================================

@require_http_methods(['GET', 'POST'])
@with_state(require_couple=True)
def memories(request, state):
    if request.method == 'GET':
        return _respond(content.list_memories(state.couple_id), status=500)

    form = MemoryForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_error(form)
    data = form.cleaned_data
    result = content.upload_memory(
        state.couple_id, request.user.pk, data['photo'],
        date=data['date'], description=data['description'],
    )
    return _respond(result, status=502)


@require_POST
@with_state(require_couple=True)
def memory_update(request, state, memory_id):
    form = MemoryUpdateForm(request.POST)
    if not form.is_valid():
        return _form_error(form)
    description = form.cleaned_data['description'] if 'description' in request.POST else None
    result = content.update_memory(state.couple_id, memory_id, date=form.cleaned_data['date'], description=description)
    return _respond(result, status=404)


@require_POST
@with_state(require_couple=True)
def memory_delete(request, state, memory_id):
    return _respond(content.delete_memory(state.couple_id, memory_id), status=500)


# =============================================================================
# PHOTO OF THE DAY
# =============================================================================

@require_http_methods(['GET', 'POST'])
@with_state(require_couple=True)
def photo_of_day(request, state):
    if request.method == 'GET':
        return _respond(content.latest_photo_of_day(state.couple_id), status=500)

    form = PhotoForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_error(form)
    return _respond(content.upload_photo_of_day(state.couple_id, request.user.pk, form.cleaned_data['photo']), status=502)


@require_GET
@with_state(require_couple=True)
def photo_of_day_list(request, state):
    return _respond(content.list_photos_of_day(state.couple_id), status=500)


@require_POST
@with_state(require_couple=True)
def photo_of_day_delete(request, state, photo_id):
    return _respond(content.delete_photo_of_day(state.couple_id, photo_id), status=500)


# =============================================================================
# MINI-GAMES
# =============================================================================
# Games live in the session; each POST carries an `action`.

def _load_game(request, key, factory):
    data = request.session.get(key)
    return factory.from_dict(data) if data else factory()


def _save_game(request, key, game):
    request.session[key] = game.to_dict()


def _now():
    return timezone.now().timestamp()


def who_am_i_dict(game, now):
    return {
        'stage': game.stage,
        'category': game.category,
        'character': game.visible_character,
        'questions_asked': game.questions_asked,
        'time_left': game.time_left(now),
        'time_spent': game.time_spent,
        'success': game.success,
    }


@require_http_methods(['GET', 'POST'])
@with_state()
def who_am_i(request, state):
    game = _load_game(request, 'game_who_am_i', WhoAmIGame)
    now = _now()

    if request.method == 'POST':
        action = request.POST.get('action')
        try:
            if action == 'start':
                game = WhoAmIGame(duration=settings.WHO_AM_I_SECONDS)
                game.start(request.POST.get('category', ''))
            elif action == 'advance':
                game.advance(now)
            elif action == 'ask':
                game.ask_question(now)
            elif action == 'finish':
                game.finish(request.POST.get('success') in ('1', 'true', 'on'), now)
            else:
                return _error(_("Unknown action."))
        except GameError as exc:
            return _error(exc)
    else:
        game.check_timeout(now)

    _save_game(request, 'game_who_am_i', game)
    categories = {key: entry['name'] for key, entry in catalog.CHARACTER_CATEGORIES.items()}
    return JsonResponse({'success': True, 'game': who_am_i_dict(game, now), 'categories': categories})


def story_dict(game):
    return {
        'story_id': game.story_id,
        'title': game.title,
        'is_playing': game.is_playing,
        'finished': game.finished,
        'current_player': game.current_player,
        'current_sentence': game.current_sentence,
        'filled': len(game.filled_parts),
        'blanks': game.blanks,
        'story': game.compose() if game.finished else None,
    }


@require_http_methods(['GET', 'POST'])
@with_state()
def story(request, state):
    game = _load_game(request, 'game_story', StoryGame)

    if request.method == 'POST':
        action = request.POST.get('action')
        try:
            if action == 'start':
                game = StoryGame()
                game.start(int(request.POST.get('story_id') or 0), state.players)
            elif action == 'submit':
                game.submit(request.POST.get('text'))
            else:
                return _error(_("Unknown action."))
        except (GameError, ValueError) as exc:
            return _error(exc)

    _save_game(request, 'game_story', game)
    stories = [{'id': s['id'], 'title': s['title']} for s in catalog.STORY_TEMPLATES]
    return JsonResponse({'success': True, 'game': story_dict(game), 'stories': stories})


def drawing_dict(game):
    return {
        'theme': game.theme,
        'is_playing': game.is_playing,
        'current_player': game.current_player,
        'turn': game.turn,
        'timer': game.timer,
        'canvas': game.canvas,
    }


@require_http_methods(['GET', 'POST'])
@with_state()
def drawing(request, state):
    game = _load_game(request, 'game_drawing', DrawingGame)

    if request.method == 'POST':
        action = request.POST.get('action')
        canvas = request.POST.get('canvas')
        try:
            if action == 'start':
                game = DrawingGame(turn_seconds=settings.DRAWING_TURN_SECONDS, timer=settings.DRAWING_TURN_SECONDS)
                game.start(state.players, int(request.POST.get('theme_id') or 0) or None)
            elif action == 'tick':
                game.tick(int(request.POST.get('seconds') or 1))
            elif action == 'end_turn':
                game.end_turn(canvas)
            elif action == 'end':
                game.end(canvas)
            else:
                return _error(_("Unknown action."))
        except (GameError, ValueError) as exc:
            return _error(exc)

    _save_game(request, 'game_drawing', game)
    return JsonResponse({'success': True, 'game': drawing_dict(game), 'themes': catalog.DRAWING_THEMES})
