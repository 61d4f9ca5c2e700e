TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M'

CATEGORIES = (
    'appetizers',
    'entrees',
    'sides',
    'desserts',
    'specials',
    'snacks',
)

CATEGORY_DESCRIPTIONS = {
    'appetizers': 'Quick 1-5 minute boosts',
    'entrees': 'Main activities 15-60 minutes',
    'snacks': 'Light activities 5-15 minutes',
    'desserts': 'Easy dopamine hits',
    'sides': 'Background stimulation',
    'specials': 'Planned treats and bucket-filling activities',
}

CATEGORY_EMOJIS = {
    'appetizers': '☕',
    'entrees': '🏃',
    'snacks': '🍪',
    'desserts': '📱',
    'sides': '🎧',
    'specials': '⭐',
}

MOODS = ('low', 'neutral', 'high')

# Mood -> categories that suit it; moods not listed apply no filter
MOOD_CATEGORIES = {
    'low': ('appetizers', 'sides'),
    'high': ('entrees', 'specials'),
}

# What to do next after finishing something in a category (order matters)
CATEGORY_TRANSITIONS = {
    'appetizers': ('entrees', 'sides'),
    'entrees': ('desserts', 'sides', 'appetizers'),
    'sides': ('appetizers', 'entrees'),
    'desserts': ('appetizers', 'entrees'),
    'specials': ('appetizers', 'sides'),
}

RECENT_EXCLUSION_LIMIT = 3
SUGGESTION_LIMIT = 5
TRANSITION_SUGGESTION_LIMIT = 3
MAX_TIMER_MINUTES = 240

MAX_DAILY_GOAL = 50

# Templates offered by /setup: (name, duration in minutes)
EXAMPLE_ACTIVITIES = {
    'appetizers': [
        ('One minute of jumping jacks', 1),
        ('Listen to a favorite song', 3),
        ('Do a few stretches or yoga poses', 5),
        ('Take a warm shower', 10),
        ('Drink a cup of coffee', 2),
        ('Pet your dog or cat', 2),
        ('Work on a crossword puzzle', 5),
        ('Take 5 deep breaths', 1),
    ],
    'entrees': [
        ('Playing an instrument', 30),
        ('Going for a brisk walk', 20),
        ('Working on a hobby', 45),
        ('Exercising or HIIT class', 30),
        ('Journaling', 15),
        ('Cooking or baking', 60),
        ('Working on a jigsaw puzzle', 45),
        ('Taking a quick nap', 20),
    ],
    'snacks': [
        ('Browse inspirational quotes', 5),
        ('Organize desk or workspace', 10),
        ('Quick meditation', 7),
        ('Call a friend briefly', 8),
        ('Look at cute animal photos', 3),
    ],
    'sides': [
        ('Listening to white noise', None),
        ('Playing a podcast', None),
        ('Using a fidget tool', None),
        ('ASMR videos', None),
        ('Upbeat instrumental music', None),
        ('Body doubling (virtual or in-person)', None),
        ('Happy music playlist', None),
        ('Cozy mystery audiobook', None),
    ],
    'desserts': [
        ('Scrolling through social media', 15),
        ('Playing Candy Crush', 10),
        ('Watching TV/Reality shows', 30),
        ('NY Times game app', 10),
        ('Texting friends', 5),
        ('Playing video games', 30),
        ('Online shopping (window shopping)', 20),
    ],
    'specials': [
        ('Attending a concert', 180),
        ('Getting a massage', 60),
        ('Weekend getaway', 1440),
        ('Going out to dinner', 120),
        ('Visiting a nail salon', 60),
        ('Seeing a play or comedy show', 180),
        ('Taking a vacation', 10080),
        ('Spa day', 240),
    ],
}

ENCOURAGEMENTS = [
    'Small wins still count.',
    'You picked something off the menu. That is the hard part.',
    'Future you says thanks.',
    'Consistency beats intensity.',
    'A little dopamine, responsibly sourced.',
    'Another one for the streak.',
]
