from datetime import date

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone

from core import catalog, content, records
from core.models import Prompt, Wish


def test_home_renders_shell(client, db):
    response = client.get(reverse('home'))

    assert response.status_code == 200
    assert b'LoveSync' in response.content


@pytest.mark.parametrize('name', ['state', 'answers', 'wishes', 'question', 'who_am_i'])
def test_api_requires_sign_in(client, db, name):
    response = client.get(reverse(name))

    assert response.status_code == 401
    assert response.json()['success'] is False


def test_content_requires_partner(alice_client):
    response = alice_client.get(reverse('answers'))

    assert response.status_code == 400
    assert response.json()['error'] == "Connect with your partner first."


def test_state_for_linked_user(alice_client, alice, bob, couple_id):
    records.update(alice.pk, relationship_start=date(2020, 1, 1))

    state = alice_client.get(reverse('state')).json()['state']

    assert state['is_linked'] is True
    assert state['couple_id'] == couple_id
    assert state['partner']['name'] == 'Bob'
    assert state['days_together'] > 0
    assert state['counters'] == {'photos': 0, 'shared_wishes': 0, 'completed_wishes': 0}


def test_invite_code_and_connect_flow(client, alice, bob):
    client.force_login(alice)
    code = client.post(reverse('invite_code')).json()['code']
    client.force_login(bob)

    response = client.post(reverse('connect'), {'code': code})

    data = response.json()
    assert response.status_code == 200
    assert data['couple_id'] == '_'.join(sorted([str(alice.pk), str(bob.pk)]))
    assert data['state']['partner']['id'] == alice.pk


def test_connect_with_bad_code(alice_client):
    response = alice_client.post(reverse('connect'), {'code': 'ZZZZZZZZZZ'})

    assert response.status_code == 400
    assert response.json()['code'] == 'code-not-found'


def test_connect_requires_code(alice_client):
    response = alice_client.post(reverse('connect'), {})

    assert response.status_code == 400
    assert response.json()['success'] is False


def test_disconnect_unlinks_both(alice_client, alice, bob, couple_id):
    response = alice_client.post(reverse('disconnect'))

    assert response.json() == {'success': True}
    assert records.get(alice.pk).partner_id is None
    assert records.get(bob.pk).partner_id is None


def test_answers_round_trip(alice_client, couple_id):
    response = alice_client.post(reverse('answers'), {'answer': 'You made coffee'})
    assert response.status_code == 200

    answers = alice_client.get(reverse('answers')).json()['answers']
    assert answers[0]['answer'] == 'You made coffee'
    assert answers[0]['question'] == catalog.DEFAULT_QUESTION


def test_question_uses_catalogue(alice_client):
    Prompt.objects.create(text='What made you smile?', active_date=timezone.localdate())

    response = alice_client.get(reverse('question'))

    assert response.json()['question'] == 'What made you smile?'


def test_question_defaults(alice_client):
    assert alice_client.get(reverse('question')).json()['question'] == catalog.DEFAULT_QUESTION


def test_reminder(alice_client):
    assert alice_client.get(reverse('reminder')).json()['message'] in catalog.LOVE_REMINDERS


def test_shared_wish_rejected_when_unlinked(alice_client):
    response = alice_client.post(reverse('wishes'), {'text': 'Trip to Rome'})

    assert response.status_code == 400
    assert Wish.objects.count() == 0


def test_gift_idea_goes_to_partner_list(alice_client, bob, couple_id):
    alice_client.post(reverse('wishes'), {'text': 'Watch', 'for_partner': 'on'})

    wish = Wish.objects.get()
    assert wish.author_id == bob.pk
    assert wish.is_personal


def test_wish_toggle_scope(alice_client, make_user):
    stranger = make_user('eve@example.com', 'Eve')
    wish = Wish.objects.create(author=stranger, text='Private', is_personal=True)

    response = alice_client.post(reverse('wish_toggle', args=[wish.id]), {'is_completed': 'on'})

    assert response.status_code == 404


def test_event_validation(alice_client, couple_id):
    response = alice_client.post(reverse('events'), {'title': 'Dinner'})

    assert response.status_code == 400


def test_event_with_time(alice_client, couple_id):
    response = alice_client.post(reverse('events'), {'title': 'Dinner', 'date': '2030-06-01', 'time': '19:30'})

    assert response.status_code == 200
    event = response.json()['event']
    assert event['title'] == 'Dinner'
    assert '19:30' in event['date']


def test_avatar_too_large(alice_client, settings):
    settings.MAX_AVATAR_BYTES = 10
    avatar = SimpleUploadedFile('me.jpg', b'x' * 11, content_type='image/jpeg')

    response = alice_client.post(reverse('avatar_upload'), {'avatar': avatar})

    assert response.status_code == 400
    assert response.json()['error'] == "The photo must be smaller than 1 MB."


def test_memory_upload(alice_client, couple_id, cloudinary_upload):
    upload = SimpleUploadedFile('beach.jpg', b'jpeg bytes', content_type='image/jpeg')

    response = alice_client.post(reverse('memories'), {'photo': upload, 'description': 'Beach day'})

    assert response.status_code == 200
    assert response.json()['url'].startswith('https://')


def test_unexpected_error_is_generic(alice_client, couple_id, monkeypatch):
    def explode(couple_id):
        raise RuntimeError("database on fire")
    monkeypatch.setattr('core.content.list_events', explode)

    response = alice_client.get(reverse('events'))

    assert response.status_code == 500
    assert response.json() == {'success': False, 'error': "Something went wrong. Please try again."}


def test_logout_clears_memories_cache(alice_client, couple_id, cloudinary_upload):
    alice_client.get(reverse('memories'))
    assert content.cached_memories(couple_id) == []

    alice_client.post(reverse('logout'))

    assert content.cached_memories(couple_id) is None
    assert alice_client.get(reverse('state')).status_code == 401


def test_profile_update(alice_client, alice):
    response = alice_client.post(reverse('profile_update'), {'display_name': 'Ally', 'relationship_start': '2021-03-04'})

    assert response.status_code == 200
    assert records.get(alice.pk).display_name == 'Ally'


def test_pairing_already_linked_cannot_generate_code(alice_client, couple_id):
    response = alice_client.post(reverse('invite_code'))

    assert response.status_code == 400
    assert response.json()['code'] == 'already-paired'


def test_games_who_am_i_flow(alice_client):
    url = reverse('who_am_i')
    data = alice_client.post(url, {'action': 'start', 'category': 'animals'}).json()['game']
    assert data['stage'] == 'player1_reveal'
    assert data['character'] in catalog.CHARACTER_CATEGORIES['animals']['characters']

    for _step in range(4):
        data = alice_client.post(url, {'action': 'advance'}).json()['game']
    assert data['stage'] == 'guessing'
    assert data['character'] is None

    alice_client.post(url, {'action': 'ask'})
    data = alice_client.post(url, {'action': 'finish', 'success': 'true'}).json()['game']
    assert data['stage'] == 'finished'
    assert data['success'] is True
    assert data['questions_asked'] == 1


def test_games_story_rejects_empty_part(alice_client):
    url = reverse('story')
    alice_client.post(url, {'action': 'start', 'story_id': '3'})

    response = alice_client.post(url, {'action': 'submit', 'text': '   '})

    assert response.status_code == 400


def test_games_drawing_tick(alice_client, bob, couple_id):
    url = reverse('drawing')
    game = alice_client.post(url, {'action': 'start', 'theme_id': '2'}).json()['game']
    assert game['current_player'] == 'Alice'
    assert game['theme']['id'] == 2

    game = alice_client.post(url, {'action': 'tick', 'seconds': '25'}).json()['game']
    assert game['current_player'] == 'Bob'
    assert game['timer'] == 25


def test_games_drawing_tick_cannot_rewind_clock(alice_client, bob, couple_id):
    url = reverse('drawing')
    alice_client.post(url, {'action': 'start'})

    response = alice_client.post(url, {'action': 'tick', 'seconds': '-100'})

    assert response.status_code == 400
    game = alice_client.post(url, {'action': 'tick', 'seconds': '1'}).json()['game']
    assert game['timer'] == 24


def test_unknown_game_action(alice_client):
    assert alice_client.post(reverse('drawing'), {'action': 'fly'}).status_code == 400


def test_disconnect_without_partner_succeeds(alice_client, alice):
    assert alice_client.post(reverse('disconnect')).status_code == 200
    assert records.get(alice.pk).partner_id is None
