import pytest

from core import content, pairing, records
from core.models import Couple
from core.pairing import INVITE_CODE_ALPHABET, derive_pair_id


def test_derive_pair_id_is_symmetric():
    assert derive_pair_id(3, 12) == derive_pair_id(12, 3)
    # Ids are compared as strings
    assert derive_pair_id(3, 12) == '12_3'


def test_derive_pair_id_rejects_same_user():
    with pytest.raises(ValueError):
        derive_pair_id(7, 7)


def test_create_or_get_pair_twice_returns_same_id(alice, bob):
    first = pairing.create_or_get_pair(alice.pk, bob.pk)
    second = pairing.create_or_get_pair(bob.pk, alice.pk)

    assert first.success and second.success
    assert first.data['couple_id'] == second.data['couple_id']
    assert Couple.objects.count() == 1


def test_create_or_get_pair_links_both_users(alice, bob):
    result = pairing.create_or_get_pair(alice.pk, bob.pk)
    couple_id = result.data['couple_id']

    a, b = records.get(alice.pk), records.get(bob.pk)
    assert a.partner_id == bob.pk
    assert b.partner_id == alice.pk
    assert a.couple_id == b.couple_id == couple_id


def test_create_or_get_pair_with_self_fails(alice):
    result = pairing.create_or_get_pair(alice.pk, alice.pk)

    assert not result.success
    assert result.code == 'self-pairing'
    assert Couple.objects.count() == 0


def test_generate_invite_code(alice):
    result = pairing.generate_invite_code(alice.pk)

    assert result.success
    code = result.data['code']
    assert len(code) == 10
    assert set(code) <= set(INVITE_CODE_ALPHABET)

    profile = records.get(alice.pk)
    assert profile.invite_code == code
    assert profile.invite_code_generated_at is not None


def test_generate_invite_code_replaces_previous(alice):
    pairing.generate_invite_code(alice.pk)
    second = pairing.generate_invite_code(alice.pk).data['code']

    assert records.get(alice.pk).invite_code == second
    assert len(records.query('invite_code', second)) == 1


def test_connect_with_own_code_fails_without_mutation(alice):
    code = pairing.generate_invite_code(alice.pk).data['code']

    result = pairing.connect_by_invite_code(alice.pk, code)

    assert not result.success
    assert result.code == 'self-pairing'
    profile = records.get(alice.pk)
    assert profile.invite_code == code
    assert profile.partner_id is None
    assert Couple.objects.count() == 0


def test_connect_with_unknown_code_fails_without_mutation(alice, bob):
    result = pairing.connect_by_invite_code(alice.pk, 'NONEXISTENT')

    assert not result.success
    assert result.code == 'code-not-found'
    assert records.get(alice.pk).partner_id is None
    assert Couple.objects.count() == 0


def test_connect_with_empty_code_fails(alice):
    result = pairing.connect_by_invite_code(alice.pk, '   ')

    assert not result.success
    assert result.code == 'code-not-found'


def test_invite_code_scenario(make_user):
    u1 = make_user('u1@example.com', 'U1')
    u2 = make_user('u2@example.com', 'U2')

    code = pairing.generate_invite_code(u1.pk).data['code']
    # Codes are accepted regardless of case and surrounding whitespace
    result = pairing.connect_by_invite_code(u2.pk, f'  {code.lower()} ')

    assert result.success
    expected = '_'.join(sorted([str(u1.pk), str(u2.pk)]))
    assert result.data['couple_id'] == expected
    assert result.data['partner'].user_id == u1.pk

    p1, p2 = records.get(u1.pk), records.get(u2.pk)
    assert p1.partner_id == u2.pk
    assert p2.partner_id == u1.pk
    assert p1.couple_id == p2.couple_id == expected
    assert p1.invite_code is None


def test_code_cannot_be_used_twice(alice, bob, make_user):
    carol = make_user('carol@example.com', 'Carol')
    code = pairing.generate_invite_code(alice.pk).data['code']

    assert pairing.connect_by_invite_code(bob.pk, code).success
    result = pairing.connect_by_invite_code(carol.pk, code)

    assert not result.success
    assert result.code == 'code-not-found'
    assert records.get(carol.pk).partner_id is None


def test_connect_when_already_paired_keeps_code(alice, bob, couple_id, make_user):
    carol = make_user('carol@example.com', 'Carol')
    code = pairing.generate_invite_code(carol.pk).data['code']

    result = pairing.connect_by_invite_code(alice.pk, code)

    assert not result.success
    assert result.code == 'already-paired'
    assert records.get(carol.pk).invite_code == code
    assert records.get(alice.pk).partner_id == bob.pk


def test_disconnect_from_both_sides(alice, bob, couple_id):
    assert pairing.disconnect(alice.pk, bob.pk).success
    assert pairing.disconnect(bob.pk, None).success

    a, b = records.get(alice.pk), records.get(bob.pk)
    assert a.partner_id is None and a.couple_id is None
    assert b.partner_id is None and b.couple_id is None
    # The pair record is kept
    assert Couple.objects.filter(id=couple_id).exists()


def test_disconnect_is_repeatable(alice):
    assert pairing.disconnect(alice.pk).success
    assert pairing.disconnect(alice.pk).success


def test_reconnect_restores_history(alice, bob, couple_id):
    content.submit_answer(couple_id, alice.pk, 'Question?', 'Answer')
    pairing.disconnect(alice.pk, bob.pk)

    result = pairing.create_or_get_pair(bob.pk, alice.pk)

    assert result.data['couple_id'] == couple_id
    assert len(content.list_answers(couple_id).data['answers']) == 1
    assert records.get(alice.pk).couple_id == couple_id
