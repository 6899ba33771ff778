from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache

from core import identity, pairing, records

User = get_user_model()

PASSWORD = 'secret123'


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def clear_subscriptions():
    # User ids are reused between tests, so listeners must not leak across them.
    yield
    for session_key in list(identity._sessions):
        identity.close_session(session_key)


@pytest.fixture
def make_user(db):
    def create_user(email='test@example.com', name=None, password=PASSWORD):
        user = User.objects.create_user(username=email, email=email, password=password)
        if name:
            records.update(user.pk, display_name=name)
        return user
    return create_user


@pytest.fixture
def alice(make_user):
    return make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(make_user):
    return make_user('bob@example.com', 'Bob')


@pytest.fixture
def couple_id(alice, bob):
    result = pairing.create_or_get_pair(alice.pk, bob.pk)
    assert result.success
    return result.data['couple_id']


@pytest.fixture
def alice_client(client, alice):
    client.force_login(alice)
    return client


def _fake_upload(file, **options):
    public_id = options['public_id']
    return {
        'public_id': public_id,
        'secure_url': f'https://res.cloudinary.com/lovesync-test/image/upload/{public_id}.jpg',
    }


@pytest.fixture
def cloudinary_upload():
    with mock.patch('cloudinary.uploader.upload', side_effect=_fake_upload) as upload:
        yield upload


@pytest.fixture
def cloudinary_destroy():
    with mock.patch('cloudinary.uploader.destroy', return_value={'result': 'ok'}) as destroy:
        yield destroy
