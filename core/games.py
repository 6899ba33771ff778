"""
LoveSync - Mini-games

Three small turn-based games played on one device. Each game is a plain
dataclass so the views can keep it in the session between requests
(to_dict / from_dict), and every move validates the current stage.

Who am I?
    setup -> player1_reveal -> player1_hide -> player2_reveal
          -> player2_hide -> guessing -> finished

Collaborative story
    players take turns filling the [blank] gaps of a template

Collaborative drawing
    players take turns of a fixed length on a shared canvas
"""

import random
import re
from dataclasses import asdict, dataclass, field

from django.utils.translation import gettext as _

from . import catalog


class GameError(ValueError):
    pass


class _SessionGame:
    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**data)


# =============================================================================
# WHO AM I?
# =============================================================================

class Stage:
    SETUP = 'setup'
    PLAYER1_REVEAL = 'player1_reveal'
    PLAYER1_HIDE = 'player1_hide'
    PLAYER2_REVEAL = 'player2_reveal'
    PLAYER2_HIDE = 'player2_hide'
    GUESSING = 'guessing'
    FINISHED = 'finished'


REVEAL_SEQUENCE = {
    Stage.PLAYER1_REVEAL: Stage.PLAYER1_HIDE,
    Stage.PLAYER1_HIDE: Stage.PLAYER2_REVEAL,
    Stage.PLAYER2_REVEAL: Stage.PLAYER2_HIDE,
    Stage.PLAYER2_HIDE: Stage.GUESSING,
}


@dataclass
class WhoAmIGame(_SessionGame):
    duration: int = 300
    stage: str = Stage.SETUP
    category: str = ''
    player1_character: str = ''
    player2_character: str = ''
    questions_asked: int = 0
    started_at: float = None
    time_spent: int = None
    success: bool = None

    def start(self, category, rng=random):
        entry = catalog.CHARACTER_CATEGORIES.get(category)
        if entry is None:
            raise GameError(_("Unknown category"))
        characters = entry['characters']
        if len(characters) < 2:
            raise GameError(_("Not enough characters in this category"))

        self.player1_character, self.player2_character = rng.sample(characters, 2)
        self.category = category
        self.questions_asked = 0
        self.started_at = None
        self.time_spent = None
        self.success = None
        self.stage = Stage.PLAYER1_REVEAL

    def advance(self, now):
        """Move one step through the hand-the-phone-over sequence."""
        if self.stage not in REVEAL_SEQUENCE:
            raise GameError(_("Cannot advance from %(stage)s") % {"stage": self.stage})
        self.stage = REVEAL_SEQUENCE[self.stage]
        if self.stage == Stage.GUESSING:
            self.started_at = now
            self.questions_asked = 0

    @property
    def visible_character(self):
        if self.stage == Stage.PLAYER1_REVEAL:
            return self.player1_character
        if self.stage == Stage.PLAYER2_REVEAL:
            return self.player2_character
        return None

    def time_left(self, now):
        if self.stage != Stage.GUESSING:
            return self.duration if self.stage != Stage.FINISHED else 0
        return max(0, self.duration - int(now - self.started_at))

    def ask_question(self, now):
        self.check_timeout(now)
        if self.stage != Stage.GUESSING:
            raise GameError(_("The guessing phase is over"))
        self.questions_asked += 1

    def check_timeout(self, now):
        if self.stage == Stage.GUESSING and self.time_left(now) <= 0:
            self._finish(False, now)

    def finish(self, success, now):
        self.check_timeout(now)
        if self.stage != Stage.GUESSING:
            raise GameError(_("The guessing phase is over"))
        self._finish(success, now)

    def _finish(self, success, now):
        self.time_spent = min(self.duration, int(now - self.started_at))
        self.success = success
        self.stage = Stage.FINISHED


# =============================================================================
# COLLABORATIVE STORY
# =============================================================================

_SENTENCE_END = re.compile(r'(?<=[.!?])\s+')


@dataclass
class StoryGame(_SessionGame):
    story_id: int = None
    title: str = ''
    template: str = ''
    players: list = field(default_factory=list)
    filled_parts: list = field(default_factory=list)
    is_playing: bool = False

    def start(self, story_id, players):
        story = catalog.find_story(story_id)
        if story is None:
            raise GameError(_("Unknown story"))
        self.story_id = story_id
        self.title = story['title']
        self.template = story['template']
        self.players = list(players)
        self.filled_parts = []
        self.is_playing = True

    @property
    def blanks(self):
        return self.template.count(catalog.STORY_BLANK)

    @property
    def finished(self):
        return bool(self.template) and len(self.filled_parts) >= self.blanks

    @property
    def current_player(self):
        if not self.players or self.finished:
            return None
        return self.players[len(self.filled_parts) % len(self.players)]

    @property
    def current_sentence(self):
        """The sentence holding the next gap, or None when all are filled."""
        if self.finished:
            return None
        seen = 0
        for sentence in _SENTENCE_END.split(self.template):
            count = sentence.count(catalog.STORY_BLANK)
            if seen + count > len(self.filled_parts):
                return sentence
            seen += count
        return None

    def submit(self, text):
        text = (text or '').strip()
        if not self.is_playing or self.finished:
            raise GameError(_("The story is already complete"))
        if not text:
            raise GameError(_("Please fill in the blank"))
        self.filled_parts.append(text)
        if self.finished:
            self.is_playing = False

    def compose(self):
        parts = self.template.split(catalog.STORY_BLANK)
        story = []
        for i, part in enumerate(parts):
            story.append(part)
            if i < len(self.filled_parts):
                story.append(self.filled_parts[i])
        return ''.join(story)


# =============================================================================
# COLLABORATIVE DRAWING
# =============================================================================

@dataclass
class DrawingGame(_SessionGame):
    turn_seconds: int = 25
    theme_id: int = catalog.DEFAULT_DRAWING_THEME_ID
    players: list = field(default_factory=list)
    turn: int = 0
    timer: int = 25
    canvas: str = None
    is_playing: bool = False

    def start(self, players, theme_id=None):
        theme_id = theme_id or catalog.DEFAULT_DRAWING_THEME_ID
        if catalog.find_theme(theme_id) is None:
            raise GameError(_("Unknown theme"))
        self.theme_id = theme_id
        self.players = list(players)
        self.turn = 0
        self.timer = self.turn_seconds
        self.canvas = None
        self.is_playing = True

    @property
    def theme(self):
        return catalog.find_theme(self.theme_id)

    @property
    def current_player(self):
        if not self.players:
            return None
        return self.players[self.turn % len(self.players)]

    def tick(self, seconds=1):
        """Count the turn clock down; hand over the turn when it runs out."""
        self._require_playing()
        if seconds <= 0:
            raise GameError(_("The clock only runs forward"))
        self.timer -= seconds
        if self.timer <= 0:
            self.end_turn()

    def end_turn(self, canvas=None):
        self._require_playing()
        if canvas is not None:
            self.canvas = canvas
        self.turn += 1
        self.timer = self.turn_seconds

    def end(self, canvas=None):
        if canvas is not None:
            self.canvas = canvas
        self.is_playing = False

    def _require_playing(self):
        if not self.is_playing:
            raise GameError(_("No drawing in progress"))
