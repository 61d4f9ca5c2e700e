import asyncio
import logging

from discord import Interaction, app_commands
from discord.ext import commands
from psycopg import errors as pg_errors

from dopamine_menu.cogs.common import (
    CATEGORY_CHOICES,
    activity_autocomplete,
    ensure_user,
    fetch_owned,
    reply,
)
from dopamine_menu.components.confirm import ConfirmView
from dopamine_menu.components.menu import SetupView, activity_embed, menu_embed
from dopamine_menu.models.activity import Activity
from dopamine_menu.services.stats_engine import engine
from dopamine_menu.utils.constants import CATEGORY_EMOJIS, EXAMPLE_ACTIVITIES
from dopamine_menu.utils.errors import ValidationError
from dopamine_menu.utils.helper import (
    activity_label,
    parse_category,
    parse_duration,
    parse_name,
)

logger = logging.getLogger(__name__)


class ActivityCog(commands.Cog):
    '''Building and curating your own menu of activities.'''

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # Command: /setup
    @app_commands.command(
        name='setup', description='Fill your menu with example activities'
    )
    async def setup_menu(self, interaction: Interaction):
        user_id = await ensure_user(interaction)
        view = SetupView(requestor_id=user_id)
        await interaction.response.send_message(
            'Which categories should I fill with examples? '
            'Activities you already have are kept.',
            view=view,
            ephemeral=True,
        )
        await view.wait()
        if not view.selected:
            await interaction.followup.send('Setup timed out.', ephemeral=True)
            return

        items = [
            {'name': name, 'category': category, 'duration_minutes': minutes}
            for category in view.selected
            for name, minutes in EXAMPLE_ACTIVITIES[category]
        ]
        created = await asyncio.to_thread(Activity.create_many_for_owner, user_id, items)
        logger.info(f'Seeded {len(created)} activities for user {user_id}')
        await interaction.followup.send(
            f'✅ Added **{len(created)}** activities to your menu '
            f'({", ".join(CATEGORY_EMOJIS[c] + " " + c for c in view.selected)}). '
            'See them with `/menu`.',
            ephemeral=True,
        )

    # Command: /add_activity
    @app_commands.command(name='add_activity', description='Add an activity to your menu')
    @app_commands.describe(
        name='What you will do, e.g. "Take a short walk"',
        category='Which course of the menu it belongs to',
        duration='Typical length in minutes (optional)',
        description='Optional note',
        emoji='Optional emoji shown next to the name',
    )
    @app_commands.choices(category=CATEGORY_CHOICES)
    async def add_activity(
        self,
        interaction: Interaction,
        name: str,
        category: app_commands.Choice[str],
        duration: app_commands.Range[int, 0, 10080] | None = None,
        description: str | None = None,
        emoji: str | None = None,
    ):
        try:
            clean_name = parse_name(name)
            clean_category = parse_category(category.value)
        except ValidationError as e:
            await reply(interaction, f'❌ {e}')
            return

        user_id = await ensure_user(interaction)
        try:
            activity = await asyncio.to_thread(
                Activity.create_for_owner,
                user_id,
                clean_name,
                clean_category,
                (description or '').strip() or None,
                duration,
                (emoji or '').strip() or None,
            )
        except pg_errors.UniqueViolation:
            await reply(interaction, f'⚠️ You already have **{clean_name}** on your menu.')
            return

        await reply(
            interaction, embed=activity_embed(activity, title='✅ Added to your menu')
        )

    # Command: /edit_activity
    @app_commands.command(name='edit_activity', description='Change one of your activities')
    @app_commands.describe(
        activity='The activity to edit',
        name='New name',
        category='New category',
        duration='New duration in minutes (0 clears it)',
        description='New description',
        emoji='New emoji',
    )
    @app_commands.choices(category=CATEGORY_CHOICES)
    @app_commands.autocomplete(activity=activity_autocomplete)
    async def edit_activity(
        self,
        interaction: Interaction,
        activity: int,
        name: str | None = None,
        category: app_commands.Choice[str] | None = None,
        duration: app_commands.Range[int, 0, 10080] | None = None,
        description: str | None = None,
        emoji: str | None = None,
    ):
        values: dict = {}
        try:
            if name is not None:
                values['name'] = parse_name(name)
            if category is not None:
                values['category'] = parse_category(category.value)
            if duration is not None:
                values['duration_minutes'] = parse_duration(duration) or None
        except ValidationError as e:
            await reply(interaction, f'❌ {e}')
            return
        if description is not None:
            values['description'] = description.strip() or None
        if emoji is not None:
            values['emoji'] = emoji.strip() or None

        if not values:
            await reply(interaction, 'Nothing to change. Pass at least one field.')
            return

        if await fetch_owned(interaction, activity) is None:
            return

        try:
            updated = await asyncio.to_thread(Activity.update_fields, activity, values)
        except pg_errors.UniqueViolation:
            await reply(interaction, '⚠️ Another activity on your menu already has that name.')
            return

        if updated is None:
            await reply(interaction, f'❌ Activity #{activity} no longer exists.')
            return
        await reply(interaction, embed=activity_embed(updated, title='✏️ Activity updated'))

    # Command: /delete_activity
    @app_commands.command(
        name='delete_activity', description='Remove an activity and its history'
    )
    @app_commands.autocomplete(activity=activity_autocomplete)
    async def delete_activity(self, interaction: Interaction, activity: int):
        row = await fetch_owned(interaction, activity)
        if row is None:
            return

        view = ConfirmView(requestor_id=interaction.user.id, confirm_label='Delete')
        await interaction.response.send_message(
            f'⚠️ Delete **{activity_label(row)}** and its '
            f'{row["completion_count"]} completion(s)?',
            view=view,
            ephemeral=True,
        )
        await view.wait()
        if not view.value:
            await interaction.followup.send('❌ Delete canceled.', ephemeral=True)
            return

        await asyncio.to_thread(Activity.delete, activity)
        await interaction.followup.send(f'🗑️ Deleted **{row["name"]}**.', ephemeral=True)

    # Command: /menu
    @app_commands.command(name='menu', description='Show your dopamine menu')
    @app_commands.describe(category='Only show one category')
    @app_commands.choices(category=CATEGORY_CHOICES)
    async def menu(
        self, interaction: Interaction, category: app_commands.Choice[str] | None = None
    ):
        await interaction.response.defer(ephemeral=True)
        activities = await asyncio.to_thread(
            Activity.list_for_owner,
            interaction.user.id,
            category.value if category else None,
        )
        await interaction.followup.send(
            embed=menu_embed(activities, interaction.user.display_name), ephemeral=True
        )

    # Command: /random_activity
    @app_commands.command(
        name='random_activity', description='Let the menu pick something for you'
    )
    @app_commands.describe(category='Only pick from one category')
    @app_commands.choices(category=CATEGORY_CHOICES)
    async def random_activity(
        self, interaction: Interaction, category: app_commands.Choice[str] | None = None
    ):
        row = await asyncio.to_thread(
            Activity.get_random,
            interaction.user.id,
            category.value if category else None,
        )
        if row is None:
            await reply(interaction, 'No activities to pick from. Try `/setup` first.')
            return
        await reply(interaction, embed=activity_embed(row, title='🎲 How about this?'))

    # Command: /clear_menu
    @app_commands.command(
        name='clear_menu', description='Delete every activity on your menu'
    )
    @app_commands.describe(reset_stats='Also wipe your streak and daily stats history')
    async def clear_menu(self, interaction: Interaction, reset_stats: bool = False):
        view = ConfirmView(requestor_id=interaction.user.id, confirm_label='Clear menu')
        warning = '⚠️ This deletes all your activities and their history.'
        if reset_stats:
            warning += ' Your streaks and daily stats will be reset too.'
        await interaction.response.send_message(
            f'{warning} This cannot be undone.', view=view, ephemeral=True
        )
        await view.wait()
        if not view.value:
            await interaction.followup.send('❌ Clear canceled.', ephemeral=True)
            return

        deleted = await asyncio.to_thread(
            engine.clear_all_activities, interaction.user.id, reset_stats
        )
        await interaction.followup.send(
            f'🧹 Removed **{deleted}** activities from your menu.', ephemeral=True
        )


async def setup(bot: commands.Bot):
    await bot.add_cog(ActivityCog(bot))
