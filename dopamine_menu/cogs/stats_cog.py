import asyncio

from discord import Interaction, app_commands
from discord.ext import commands

from dopamine_menu.cogs.common import MOOD_CHOICES, ensure_user, reply
from dopamine_menu.components.menu import suggestions_embed
from dopamine_menu.components.stats import stats_embed
from dopamine_menu.services.stats_engine import engine
from dopamine_menu.utils.constants import MAX_DAILY_GOAL
from dopamine_menu.utils.errors import ValidationError


class StatsCog(commands.Cog):
    '''Streaks, daily goal and suggestions.'''

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name='stats', description='Your streak and progress toward today\'s goal')
    async def stats(self, interaction: Interaction):
        await interaction.response.defer(ephemeral=True)
        stats = await asyncio.to_thread(engine.get_user_stats, interaction.user.id)
        await interaction.followup.send(
            embed=stats_embed(stats, interaction.user.display_name), ephemeral=True
        )

    @app_commands.command(name='suggest', description='Suggest activities for your mood')
    @app_commands.describe(
        mood='Low energy favors quick boosts, high energy favors main courses',
        include_recent='Also suggest what you did most recently',
    )
    @app_commands.choices(mood=MOOD_CHOICES)
    async def suggest(
        self,
        interaction: Interaction,
        mood: app_commands.Choice[str] | None = None,
        include_recent: bool = False,
    ):
        await interaction.response.defer(ephemeral=True)
        picks = await asyncio.to_thread(
            engine.get_suggested_activities,
            interaction.user.id,
            mood.value if mood else None,
            not include_recent,
        )
        title = f'💡 Suggestions for a {mood.value} mood' if mood else '💡 Suggestions'
        await interaction.followup.send(
            embed=suggestions_embed(
                title,
                picks,
                empty_text='Nothing fits right now. Add more with `/add_activity`.',
            ),
            ephemeral=True,
        )

    @app_commands.command(name='goal', description='Set how many activities you aim for each day')
    @app_commands.describe(goal=f'Activities per day (1-{MAX_DAILY_GOAL})')
    async def goal(
        self, interaction: Interaction, goal: app_commands.Range[int, 1, MAX_DAILY_GOAL]
    ):
        user_id = await ensure_user(interaction)
        try:
            new_goal = await asyncio.to_thread(engine.set_daily_goal, user_id, goal)
        except ValidationError as e:
            await reply(interaction, f'❌ {e}')
            return
        await reply(interaction, f'🎯 Daily goal set to **{new_goal}** activities.')


async def setup(bot: commands.Bot):
    await bot.add_cog(StatsCog(bot))
