import asyncio
import logging
from typing import Any, Optional

from discord import Interaction, app_commands

from dopamine_menu.models.activity import Activity
from dopamine_menu.models.user import User
from dopamine_menu.utils.constants import CATEGORIES, CATEGORY_EMOJIS, MOODS

logger = logging.getLogger(__name__)

CATEGORY_CHOICES = [
    app_commands.Choice(name=f'{CATEGORY_EMOJIS[c]} {c.title()}', value=c)
    for c in CATEGORIES
]
MOOD_CHOICES = [app_commands.Choice(name=m.title(), value=m) for m in MOODS]


async def ensure_user(interaction: Interaction) -> int:
    '''Sync the Discord user into the users table and return their id.'''
    user_id = interaction.user.id
    await asyncio.to_thread(User.upsert_user, user_id, interaction.user.display_name)
    return user_id


async def activity_autocomplete(
    interaction: Interaction, current: str
) -> list[app_commands.Choice[int]]:
    '''Autocomplete the caller's own activities; the value is the activity id.'''
    rows = await asyncio.to_thread(
        Activity.search_for_owner, interaction.user.id, current or '', 25
    )
    return [
        app_commands.Choice(name=f'{r["name"]} ({r["category"]})'[:100], value=int(r['id']))
        for r in rows
    ]


async def fetch_owned(interaction: Interaction, activity_id: int) -> Optional[dict[str, Any]]:
    '''Owned activity, or None after telling the user it wasn't found.'''
    activity = await asyncio.to_thread(Activity.get_owned, activity_id, interaction.user.id)
    if activity is None:
        await reply(interaction, f'❌ Activity #{activity_id} not found on your menu.')
    return activity


async def reply(interaction: Interaction, content: str = '', **kwargs: Any) -> None:
    '''Ephemeral reply that works whether or not the interaction was deferred.'''
    kwargs.setdefault('ephemeral', True)
    if interaction.response.is_done():
        await interaction.followup.send(content or None, **kwargs)
    else:
        await interaction.response.send_message(content or None, **kwargs)
