import random
from typing import Any

import discord
from discord import Interaction

from dopamine_menu.utils.constants import (
    CATEGORIES,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_EMOJIS,
    ENCOURAGEMENTS,
)
from dopamine_menu.utils.helper import activity_label, format_duration, format_timestamp

# Discord caps an embed field value at 1024 characters
FIELD_LIMIT = 1024


def _field_value(lines: list[str]) -> str:
    value = ''
    for i, line in enumerate(lines):
        candidate = f'{value}\n{line}' if value else line
        if len(candidate) > FIELD_LIMIT - 20:
            return f'{value}\n…and {len(lines) - i} more'
        value = candidate
    return value


def activity_line(activity: dict[str, Any]) -> str:
    line = f'`#{activity["id"]}` {activity_label(activity)}'
    if activity.get('duration_minutes'):
        line += f' ({format_duration(activity["duration_minutes"])})'
    if activity.get('completion_count'):
        line += f' • done {activity["completion_count"]}x'
    return line


def menu_embed(activities: list[dict[str, Any]], display_name: str) -> discord.Embed:
    embed = discord.Embed(
        title=f"🍽️ {display_name}'s Dopamine Menu", color=discord.Color.orange()
    )
    if not activities:
        embed.description = 'Your menu is empty. Try `/setup` or `/add_activity`.'
        return embed

    by_category: dict[str, list[dict[str, Any]]] = {}
    for a in activities:
        by_category.setdefault(a['category'], []).append(a)

    for category in CATEGORIES:
        items = by_category.get(category)
        if not items:
            continue
        embed.add_field(
            name=f'{CATEGORY_EMOJIS[category]} {category.title()} '
            f'({CATEGORY_DESCRIPTIONS[category]})',
            value=_field_value([activity_line(a) for a in items]),
            inline=False,
        )
    embed.set_footer(text=random.choice(ENCOURAGEMENTS))
    return embed


def activity_embed(activity: dict[str, Any], title: str = '') -> discord.Embed:
    embed = discord.Embed(
        title=title or activity_label(activity),
        description=activity.get('description') or None,
        color=discord.Color.orange(),
    )
    if title:
        embed.add_field(name='Activity', value=activity_label(activity), inline=False)
    embed.add_field(name='Category', value=activity['category'].title())
    embed.add_field(name='Duration', value=format_duration(activity.get('duration_minutes')))
    embed.add_field(name='Completed', value=f'{activity.get("completion_count") or 0}x')
    embed.set_footer(text=f'Activity #{activity["id"]}')
    return embed


def suggestions_embed(
    title: str, activities: list[dict[str, Any]], empty_text: str
) -> discord.Embed:
    embed = discord.Embed(title=title, color=discord.Color.green())
    if not activities:
        embed.description = empty_text
        return embed
    embed.description = '\n'.join(activity_line(a) for a in activities)
    embed.set_footer(text='Use /complete when you finish one.')
    return embed


def _event_line(event: dict[str, Any]) -> str:
    parts = [format_timestamp(event.get('completed_at'))]
    if event.get('duration_minutes'):
        parts.append(format_duration(event['duration_minutes']))
    if event.get('mood'):
        parts.append(f'mood: {event["mood"]}')
    return ' • '.join(parts)


def recent_embed(events: list[dict[str, Any]]) -> discord.Embed:
    embed = discord.Embed(title='🕒 Recently Completed', color=discord.Color.blurple())
    if not events:
        embed.description = 'Nothing completed yet.'
        return embed
    lines = [
        f'{activity_label({**e, "name": e["activity_name"]})} · {_event_line(e)}'
        for e in events
    ]
    embed.description = '\n'.join(lines)
    return embed


def history_embed(activity: dict[str, Any], events: list[dict[str, Any]]) -> discord.Embed:
    embed = discord.Embed(
        title=f'📜 History: {activity_label(activity)}', color=discord.Color.blurple()
    )
    if not events:
        embed.description = 'No completions recorded for this activity yet.'
        return embed
    embed.description = '\n'.join(_event_line(e) for e in events)
    embed.set_footer(
        text=f'Completed {activity.get("completion_count") or 0}x in total • '
        f'last: {format_timestamp(activity.get("last_completed_at"))}'
    )
    return embed


class SetupView(discord.ui.View):
    '''Pick which categories to seed with example activities.'''

    def __init__(self, requestor_id: int):
        super().__init__(timeout=120)
        self.requestor_id = requestor_id
        self.selected: list[str] = []
        self.add_item(_SetupCategorySelect())

    async def interaction_check(self, interaction: Interaction) -> bool:
        if interaction.user.id != self.requestor_id:
            await interaction.response.send_message(
                'You cannot interact with this view.', ephemeral=True
            )
            return False
        return True


class _SetupCategorySelect(discord.ui.Select):
    def __init__(self):
        options = [
            discord.SelectOption(
                label=c.title(),
                value=c,
                description=CATEGORY_DESCRIPTIONS[c],
                emoji=CATEGORY_EMOJIS[c],
            )
            for c in CATEGORIES
        ]
        super().__init__(
            placeholder='Select categories to fill…',
            min_values=1,
            max_values=len(options),
            options=options,
        )

    async def callback(self, interaction: Interaction):
        view = self.view
        if not isinstance(view, SetupView):
            await interaction.response.send_message(
                'Internal error: invalid view.', ephemeral=True
            )
            return
        view.selected = list(self.values)
        await interaction.response.defer()
        view.stop()
