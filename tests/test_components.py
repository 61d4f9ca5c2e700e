import discord

from dopamine_menu.components.menu import (
    FIELD_LIMIT,
    activity_line,
    history_embed,
    menu_embed,
    recent_embed,
    suggestions_embed,
)
from dopamine_menu.components.stats import celebration_lines, progress_bar, stats_embed
from dopamine_menu.components.timer import elapsed_minutes


def _activity(i, category='entrees', **extra):
    return {
        'id': i,
        'name': f'Activity {i}',
        'category': category,
        'emoji': None,
        'duration_minutes': None,
        'completion_count': 0,
        **extra,
    }


def test_celebrates_first_completion():
    lines = celebration_lines(
        _activity(1), 1, {'activities_completed': 1, 'daily_goal': 3, 'current_streak': 1}
    )
    assert lines == ['🎉 First time completing "Activity 1"! Great start!']


def test_celebrates_nth_completion_and_goal():
    lines = celebration_lines(
        _activity(1), 4, {'activities_completed': 3, 'daily_goal': 3, 'current_streak': 1}
    )
    assert 'completed "Activity 1" 4 times' in lines[0]
    assert lines[1].startswith('🎯 Goal achieved!')


def test_goal_celebrated_only_once_per_day():
    lines = celebration_lines(
        _activity(1), 5, {'activities_completed': 4, 'daily_goal': 3, 'current_streak': 1}
    )
    assert len(lines) == 1


def test_streak_mentioned_on_first_completion_of_the_day():
    lines = celebration_lines(
        _activity(1), 2, {'activities_completed': 1, 'daily_goal': 3, 'current_streak': 4}
    )
    assert '🔥 4 day streak!' in lines


def test_progress_bar():
    assert progress_bar(0, 4) == '▱' * 10
    assert progress_bar(2, 4) == '▰' * 5 + '▱' * 5
    assert progress_bar(9, 3) == '▰' * 10


def test_stats_embed_turns_gold_at_goal():
    embed = stats_embed(
        {'activities_completed': 3, 'daily_goal': 3, 'current_streak': 2, 'longest_streak': 5},
        'Sam',
    )
    assert embed.color == discord.Color.gold()
    assert '3/3' in embed.fields[0].value
    assert embed.fields[2].value == '5 days'


def test_menu_embed_groups_in_category_order():
    embed = menu_embed(
        [_activity(1, 'sides'), _activity(2, 'appetizers'), _activity(3, 'sides')], 'Sam'
    )
    names = [f.name for f in embed.fields]
    assert names[0].startswith('☕ Appetizers')
    assert names[1].startswith('🎧 Sides')
    assert 'Activity 3' in embed.fields[1].value


def test_menu_embed_empty():
    assert 'empty' in menu_embed([], 'Sam').description


def test_menu_embed_truncates_long_categories():
    many = [_activity(i, name='x' * 90) for i in range(40)]
    embed = menu_embed(many, 'Sam')
    assert len(embed.fields[0].value) <= FIELD_LIMIT
    assert 'more' in embed.fields[0].value


def test_activity_line_details():
    line = activity_line(_activity(7, duration_minutes=30, completion_count=2))
    assert line == '`#7` 🏃 Activity 7 (30 min) • done 2x'


def test_suggestions_embed_empty_text():
    assert suggestions_embed('💡', [], 'Nothing here').description == 'Nothing here'


def test_recent_and_history_embeds():
    events = [
        {
            'activity_name': 'Walk',
            'category': 'entrees',
            'emoji': None,
            'completed_at': None,
            'duration_minutes': 20,
            'mood': 'high',
        }
    ]
    assert '🏃 Walk' in recent_embed(events).description
    assert 'mood: high' in recent_embed(events).description
    assert 'No completions' in history_embed(_activity(1), []).description


def test_timer_elapsed_minutes_rounds_up():
    assert elapsed_minutes(100.0, 100.0 + 61, planned=20) == 2
    assert elapsed_minutes(100.0, 100.0 + 600, planned=20) == 10


def test_timer_elapsed_minutes_bounds():
    # pressed Done right away still counts a minute
    assert elapsed_minutes(100.0, 100.0, planned=20) == 1
    assert elapsed_minutes(100.0, 100.0 + 3600, planned=20) == 20
    assert elapsed_minutes(100.0, 50.0, planned=20) == 1
