import asyncio
import logging
from typing import Any

import discord
from discord import Interaction, app_commands
from discord.ext import commands

from dopamine_menu.cogs.common import (
    MOOD_CHOICES,
    activity_autocomplete,
    ensure_user,
    fetch_owned,
    reply,
)
from dopamine_menu.components.menu import history_embed, recent_embed, suggestions_embed
from dopamine_menu.components.stats import celebration_lines
from dopamine_menu.components.timer import TimerView
from dopamine_menu.models.activity_log import ActivityLog
from dopamine_menu.services.stats_engine import engine
from dopamine_menu.utils.constants import MAX_TIMER_MINUTES
from dopamine_menu.utils.helper import format_duration

logger = logging.getLogger(__name__)


class CompletionCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # Command: /complete
    @app_commands.command(name='complete', description='Mark an activity as done')
    @app_commands.describe(
        activity='The activity you finished',
        duration='How many minutes you spent (optional)',
        mood='How you feel right now (optional)',
    )
    @app_commands.choices(mood=MOOD_CHOICES)
    @app_commands.autocomplete(activity=activity_autocomplete)
    async def complete(
        self,
        interaction: Interaction,
        activity: int,
        duration: app_commands.Range[int, 0, 10080] | None = None,
        mood: app_commands.Choice[str] | None = None,
    ):
        await interaction.response.defer(ephemeral=True)
        user_id = await ensure_user(interaction)

        row = await fetch_owned(interaction, activity)
        if row is None:
            return

        ok = await asyncio.to_thread(
            engine.complete_activity,
            user_id,
            activity,
            duration,
            mood.value if mood else None,
        )
        if not ok:
            await reply(interaction, '❌ Could not record that completion. Please try again.')
            return

        await reply(interaction, **await self._completion_reply(user_id, row))

    # Command: /timer
    @app_commands.command(
        name='timer', description='Start a countdown and complete the activity when it ends'
    )
    @app_commands.describe(
        activity='The activity to time',
        minutes='Length of the timer (defaults to the activity duration)',
        mood='How you feel right now (optional)',
    )
    @app_commands.choices(mood=MOOD_CHOICES)
    @app_commands.autocomplete(activity=activity_autocomplete)
    async def timer(
        self,
        interaction: Interaction,
        activity: int,
        minutes: app_commands.Range[int, 1, MAX_TIMER_MINUTES] | None = None,
        mood: app_commands.Choice[str] | None = None,
    ):
        await interaction.response.defer(ephemeral=True)
        user_id = await ensure_user(interaction)

        row = await fetch_owned(interaction, activity)
        if row is None:
            return

        length = minutes or row.get('duration_minutes')
        if not length or length > MAX_TIMER_MINUTES:
            await reply(
                interaction,
                f'⏱️ "{row["name"]}" has no usable duration. '
                f'Pass `minutes` (1-{MAX_TIMER_MINUTES}).',
            )
            return

        view = TimerView(user_id, length)
        await reply(
            interaction,
            f'⏱️ Timer started for **{row["name"]}** ({format_duration(length)}). '
            f'Ends <t:{view.ends_at}:R>.',
            view=view,
        )
        await view.wait()

        if view.cancelled:
            logger.info(f'User {user_id} cancelled the timer for activity {activity}')
            await reply(
                view.finished_by or interaction, f'🛑 Timer for "{row["name"]}" cancelled.'
            )
            return

        spent = view.spent_minutes()
        ok = await asyncio.to_thread(
            engine.complete_activity,
            user_id,
            activity,
            spent,
            mood.value if mood else None,
        )
        if not ok:
            message = '❌ Could not record that completion. Please try again.'
            kwargs: dict[str, Any] = {}
        else:
            kwargs = await self._completion_reply(user_id, row)
            message = kwargs.pop('content')
            if view.finished_by is None:
                message = f'⏰ Time is up for "{row["name"]}"!\n{message}'

        await self._announce_timer(interaction, view, message, **kwargs)

    async def _completion_reply(self, user_id: int, row: dict[str, Any]) -> dict[str, Any]:
        '''Celebration text plus an "up next" embed when there is one.'''
        stats, next_up = await asyncio.gather(
            asyncio.to_thread(engine.get_user_stats, user_id),
            asyncio.to_thread(engine.get_activity_suggestions, row),
        )
        count = int(row.get('completion_count') or 0) + 1
        result: dict[str, Any] = {'content': '\n'.join(celebration_lines(row, count, stats))}
        if next_up:
            result['embed'] = suggestions_embed('🍽️ Up next?', next_up, empty_text='')
        return result

    async def _announce_timer(
        self, interaction: Interaction, view: TimerView, message: str, **kwargs: Any
    ) -> None:
        # Interaction tokens expire after 15 minutes, so a timer that ran out
        # reports by DM instead of a followup.
        if view.finished_by is not None:
            await reply(view.finished_by, message, **kwargs)
            return
        try:
            await interaction.user.send(message, **kwargs)
        except discord.HTTPException as e:
            logger.warning(
                f'Could not notify user {interaction.user.id} about a finished timer: {e}'
            )

    # Command: /recent
    @app_commands.command(name='recent', description='Your most recent completions')
    @app_commands.describe(limit='How many to show (default 5, max 20)')
    async def recent(
        self, interaction: Interaction, limit: app_commands.Range[int, 1, 20] = 5
    ):
        events = await asyncio.to_thread(
            ActivityLog.recent_for_user, interaction.user.id, limit
        )
        await reply(interaction, embed=recent_embed(events))

    # Command: /history
    @app_commands.command(
        name='history', description='Every completion of one activity'
    )
    @app_commands.describe(activity='The activity to look up')
    @app_commands.autocomplete(activity=activity_autocomplete)
    async def history(self, interaction: Interaction, activity: int):
        row = await fetch_owned(interaction, activity)
        if row is None:
            return
        events = await asyncio.to_thread(ActivityLog.for_activity, activity, 25)
        await reply(interaction, embed=history_embed(row, events))


async def setup(bot: commands.Bot):
    await bot.add_cog(CompletionCog(bot))
