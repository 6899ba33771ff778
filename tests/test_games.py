import random

import pytest
from django.utils import translation

from core import catalog
from core.games import DrawingGame, GameError, Stage, StoryGame, WhoAmIGame


# Who am I?

def started_who_am_i(now=1000.0):
    game = WhoAmIGame(duration=300)
    game.start('movies', rng=random.Random(4))
    for _step in range(4):
        game.advance(now)
    return game


def test_who_am_i_draws_two_distinct_characters():
    for seed in range(20):
        game = WhoAmIGame()
        game.start('history', rng=random.Random(seed))
        characters = catalog.CHARACTER_CATEGORIES['history']['characters']
        assert game.player1_character != game.player2_character
        assert {game.player1_character, game.player2_character} <= set(characters)


def test_who_am_i_unknown_category():
    with pytest.raises(GameError):
        WhoAmIGame().start('dinosaurs')


def test_who_am_i_reveal_sequence():
    game = WhoAmIGame()
    game.start('cartoons', rng=random.Random(1))

    seen = [(game.stage, game.visible_character)]
    for _step in range(4):
        game.advance(50.0)
        seen.append((game.stage, game.visible_character))

    assert seen == [
        (Stage.PLAYER1_REVEAL, game.player1_character),
        (Stage.PLAYER1_HIDE, None),
        (Stage.PLAYER2_REVEAL, game.player2_character),
        (Stage.PLAYER2_HIDE, None),
        (Stage.GUESSING, None),
    ]
    assert game.started_at == 50.0


def test_who_am_i_cannot_advance_while_guessing():
    game = started_who_am_i()

    with pytest.raises(GameError):
        game.advance(1001.0)


def test_who_am_i_success_records_time_spent():
    game = started_who_am_i(now=1000.0)
    game.ask_question(1010.0)
    game.ask_question(1020.0)

    game.finish(True, 1090.0)

    assert game.stage == Stage.FINISHED
    assert game.success is True
    assert game.time_spent == 90
    assert game.questions_asked == 2


def test_who_am_i_times_out():
    game = started_who_am_i(now=1000.0)
    assert game.time_left(1100.0) == 200

    game.check_timeout(1300.0)

    assert game.stage == Stage.FINISHED
    assert game.success is False
    assert game.time_spent == 300
    with pytest.raises(GameError):
        game.ask_question(1301.0)


def test_who_am_i_late_success_counts_as_timeout():
    game = started_who_am_i(now=0.0)

    with pytest.raises(GameError):
        game.finish(True, 400.0)
    assert game.success is False


def test_who_am_i_session_round_trip():
    game = started_who_am_i()

    restored = WhoAmIGame.from_dict(game.to_dict())

    assert restored == game


# Collaborative story

def test_story_alternates_players_and_composes():
    game = StoryGame()
    game.start(3, ['Alice', 'Bob'])
    assert game.blanks == 4
    assert game.current_sentence == 'The alarm rang at [blank] but nobody moved.'

    turns = []
    for part in ['seven', 'pancakes', 'Bob', 'stay in bed']:
        turns.append(game.current_player)
        game.submit(part)

    assert turns == ['Alice', 'Bob', 'Alice', 'Bob']
    assert game.finished
    assert not game.is_playing
    assert game.current_player is None
    assert game.compose() == (
        'The alarm rang at seven but nobody moved. '
        'Breakfast was pancakes, made by Bob. '
        'By noon we had decided to stay in bed.'
    )


def test_story_current_sentence_follows_progress():
    game = StoryGame()
    game.start(3, ['Alice', 'Bob'])
    game.submit('seven')

    assert game.current_sentence == 'Breakfast was [blank], made by [blank].'
    game.submit('toast')
    assert game.current_sentence == 'Breakfast was [blank], made by [blank].'


def test_story_rejects_empty_part():
    game = StoryGame()
    game.start(1, ['Alice', 'Bob'])

    with pytest.raises(GameError):
        game.submit('   ')
    assert game.filled_parts == []


def test_story_rejects_parts_after_finish():
    game = StoryGame()
    game.start(3, ['Alice', 'Bob'])
    for part in ['a', 'b', 'c', 'd']:
        game.submit(part)

    with pytest.raises(GameError):
        game.submit('e')


def test_story_unknown_template():
    with pytest.raises(GameError):
        StoryGame().start(99, ['Alice', 'Bob'])


# Collaborative drawing

def test_drawing_defaults_to_free_theme():
    game = DrawingGame()
    game.start(['Alice', 'Bob'])

    assert game.theme['id'] == catalog.DEFAULT_DRAWING_THEME_ID
    assert game.timer == 25
    assert game.current_player == 'Alice'


def test_drawing_tick_hands_over_turn_at_zero():
    game = DrawingGame()
    game.start(['Alice', 'Bob'], theme_id=1)

    game.tick(24)
    assert game.current_player == 'Alice'
    assert game.timer == 1

    game.tick(1)
    assert game.current_player == 'Bob'
    assert game.timer == 25


@pytest.mark.parametrize("seconds", [0, -100])
def test_drawing_tick_rejects_non_positive_seconds(seconds):
    game = DrawingGame()
    game.start(['Alice', 'Bob'])

    with pytest.raises(GameError):
        game.tick(seconds)

    assert game.timer == 25
    assert game.current_player == 'Alice'


def test_game_errors_are_translated():
    game = DrawingGame()

    with translation.override('ru'), pytest.raises(GameError, match="Рисунок сейчас не создаётся"):
        game.tick(1)


def test_drawing_keeps_canvas_between_turns():
    game = DrawingGame()
    game.start(['Alice', 'Bob'])

    game.end_turn(canvas='data:image/png;base64,AAA')
    game.tick(25)

    assert game.canvas == 'data:image/png;base64,AAA'
    assert game.turn == 2


def test_drawing_end_stops_the_clock():
    game = DrawingGame()
    game.start(['Alice', 'Bob'])
    game.end()

    with pytest.raises(GameError):
        game.tick(1)


def test_drawing_unknown_theme():
    with pytest.raises(GameError):
        DrawingGame().start(['Alice', 'Bob'], theme_id=42)
