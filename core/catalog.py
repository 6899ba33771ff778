"""
LoveSync - Static Content

Default daily question, love reminders and the mini-game content.
"""

DEFAULT_QUESTION = "What nice thing did your partner do for you today?"

LOVE_REMINDERS = [
    "💕 I love you so much!",
    "🌟 Every day with you makes me happy!",
    "💖 You look so cute when you fall asleep!",
    "🌈 Thank you for being in my life!",
    "💝 I love you more than words can say!",
    "🦋 You are my source of happiness!",
    "✨ With you I feel special!",
    "💐 You are a dream come true!",
    "🌹 You are the most beautiful thing that ever happened to me!",
    "🌙 Even the stars fade next to your smile.",
    "☀️ Your laugh is my favourite sound in the world.",
    "🫂 Hugging you is my greatest happiness.",
    "🌌 With you even ordinary moments become magic.",
    "🚀 You inspire me to be better every day.",
    "🕊️ You are my calm and my adventure at the same time.",
    "💌 If I had a hundred lives, I would choose you in every one.",
]

# Who am I? - characters per category
CHARACTER_CATEGORIES = {
    'movies': {
        'name': 'Movie characters',
        'characters': [
            'Harry Potter', 'Darth Vader', 'Forrest Gump', 'Jack Sparrow',
            'Shrek', 'Hermione Granger', 'James Bond', 'Mary Poppins',
        ],
    },
    'cartoons': {
        'name': 'Cartoons',
        'characters': [
            'Mickey Mouse', 'SpongeBob', 'Homer Simpson', 'Scooby-Doo',
            'Winnie the Pooh', 'Bugs Bunny', 'Elsa', 'Pikachu',
        ],
    },
    'history': {
        'name': 'Historical figures',
        'characters': [
            'Cleopatra', 'Napoleon', 'Albert Einstein', 'Leonardo da Vinci',
            'Marie Curie', 'Julius Caesar', 'Yuri Gagarin', 'Shakespeare',
        ],
    },
    'animals': {
        'name': 'Animals',
        'characters': [
            'Penguin', 'Giraffe', 'Octopus', 'Kangaroo',
            'Sloth', 'Flamingo', 'Hedgehog', 'Dolphin',
        ],
    },
}

STORY_BLANK = '[blank]'

# Collaborative story - each [blank] is filled by the players in turn
STORY_TEMPLATES = [
    {
        'id': 1,
        'title': 'Our first date',
        'template': (
            'It was a [blank] evening when we first met. '
            'You were wearing [blank] and I could not stop looking at you. '
            'We went to [blank] and ordered [blank]. '
            'At the end of the night you said [blank].'
        ),
    },
    {
        'id': 2,
        'title': 'The great vacation',
        'template': (
            'We packed our bags and flew to [blank]. '
            'On the first day we accidentally [blank]. '
            'A local [blank] offered to help us. '
            'We came home with [blank] and a story nobody believes.'
        ),
    },
    {
        'id': 3,
        'title': 'Sunday morning',
        'template': (
            'The alarm rang at [blank] but nobody moved. '
            'Breakfast was [blank], made by [blank]. '
            'By noon we had decided to [blank].'
        ),
    },
]

# Collaborative drawing themes
DRAWING_THEMES = [
    {'id': 1, 'title': 'Our dream house', 'description': 'Draw the house you would love to live in together'},
    {'id': 2, 'title': 'A fantasy creature', 'description': 'Invent an animal nobody has seen before'},
    {'id': 3, 'title': 'Our next trip', 'description': 'Where are we going and what will we see?'},
    {'id': 4, 'title': 'A portrait', 'description': 'Draw each other, one feature per turn'},
    {'id': 5, 'title': 'An underwater world', 'description': 'Fish, shipwrecks and treasure'},
    {'id': 6, 'title': 'Free drawing', 'description': 'No rules, just draw together'},
]

DEFAULT_DRAWING_THEME_ID = 6


def find_story(story_id):
    return next((s for s in STORY_TEMPLATES if s['id'] == story_id), None)


def find_theme(theme_id):
    return next((t for t in DRAWING_THEMES if t['id'] == theme_id), None)
