from typing import Any

import discord


def progress_bar(done: int, goal: int, width: int = 10) -> str:
    if goal <= 0:
        return '▱' * width
    filled = min(width, round(width * done / goal))
    return '▰' * filled + '▱' * (width - filled)


def stats_embed(stats: dict[str, Any], display_name: str) -> discord.Embed:
    done = int(stats.get('activities_completed') or 0)
    goal = int(stats.get('daily_goal') or 0)
    streak = int(stats.get('current_streak') or 0)
    longest = int(stats.get('longest_streak') or 0)

    embed = discord.Embed(
        title=f"📊 {display_name}'s Progress",
        color=discord.Color.gold() if goal and done >= goal else discord.Color.blurple(),
    )
    embed.add_field(
        name='Today',
        value=f'{progress_bar(done, goal)} **{done}/{goal}**',
        inline=False,
    )
    embed.add_field(name='🔥 Current Streak', value=f'{streak} day{"s" if streak != 1 else ""}')
    embed.add_field(name='🏆 Longest Streak', value=f'{longest} day{"s" if longest != 1 else ""}')
    if streak == 0:
        embed.set_footer(text='Complete anything today to start a streak.')
    return embed


def celebration_lines(
    activity: dict[str, Any], completion_count: int, stats: dict[str, Any]
) -> list[str]:
    '''Messages to show after a completion, most important first.'''
    name = activity['name']
    if completion_count == 1:
        lines = [f'🎉 First time completing "{name}"! Great start!']
    else:
        lines = [f'💪 Awesome! You\'ve completed "{name}" {completion_count} times!']

    done = int(stats.get('activities_completed') or 0)
    goal = int(stats.get('daily_goal') or 0)
    # Only celebrate the completion that reaches the goal, not every one after it
    if goal and done == goal:
        lines.append(f'🎯 Goal achieved! {done}/{goal} activities today.')

    streak = int(stats.get('current_streak') or 0)
    if streak > 1 and done == 1:
        lines.append(f'🔥 {streak} day streak!')
    return lines
