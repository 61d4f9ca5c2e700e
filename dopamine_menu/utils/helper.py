from datetime import date, datetime
from typing import Any

from dopamine_menu.utils.constants import (
    CATEGORIES,
    CATEGORY_EMOJIS,
    MAX_DAILY_GOAL,
    MOODS,
    TIMESTAMP_FORMAT,
)
from dopamine_menu.utils.errors import ValidationError

MAX_NAME_LENGTH = 100


def parse_category(value: str | None) -> str:
    category = (value or '').strip().lower()
    if category not in CATEGORIES:
        raise ValidationError(
            f'Unknown category "{value}". Pick one of: {", ".join(CATEGORIES)}'
        )
    return category


def parse_mood(value: str | None) -> str | None:
    '''Normalize an optional mood; empty means no mood was given.'''
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'Mood must be text, got {type(value).__name__}')
    mood = value.strip().lower()
    if not mood:
        return None
    if mood not in MOODS:
        raise ValidationError(f'Unknown mood "{value}". Pick one of: {", ".join(MOODS)}')
    return mood


def parse_name(value: str | None) -> str:
    name = ' '.join((value or '').split())
    if not name:
        raise ValidationError('Activity name cannot be empty')
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f'Activity name is limited to {MAX_NAME_LENGTH} characters')
    return name


def parse_duration(value: Any) -> int | None:
    '''Whole minutes or None. The range is left to the caller.'''
    if value is None or value == '':
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f'Duration must be a whole number of minutes, got "{value}"')
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f'Duration must be a whole number of minutes, got "{value}"') from e


def parse_goal(value: Any) -> int:
    try:
        goal = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f'Daily goal must be a whole number, got "{value}"') from e
    if not 1 <= goal <= MAX_DAILY_GOAL:
        raise ValidationError(f'Daily goal must be between 1 and {MAX_DAILY_GOAL}')
    return goal


def format_duration(minutes: int | None) -> str:
    if not minutes:
        return 'open-ended'
    if minutes < 60:
        return f'{minutes} min'
    if minutes < 1440:
        hours, rest = divmod(minutes, 60)
        return f'{hours}h {rest}m' if rest else f'{hours}h'
    days, rest = divmod(minutes, 1440)
    return f'{days}d {rest // 60}h' if rest else f'{days}d'


def format_timestamp(value: datetime | date | str | None) -> str:
    if value is None:
        return 'never'
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def activity_label(activity: dict[str, Any]) -> str:
    emoji = activity.get('emoji') or CATEGORY_EMOJIS.get(activity.get('category', ''), '•')
    return f'{emoji} {activity["name"]}'
