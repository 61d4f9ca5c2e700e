import logging
import os
import pathlib

import discord
from discord import Interaction, app_commands
from discord.ext import commands

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.utils.env import load_env

logger = logging.getLogger(__name__)


def get_intents() -> discord.Intents:
    # Slash commands only, no message content needed
    return discord.Intents.default()


class DopamineMenuBot(commands.Bot):
    def __init__(self):
        super().__init__(command_prefix='/', intents=get_intents())
        self.tree.on_error = self.on_app_command_error

    async def setup_hook(self):
        cogs_path = pathlib.Path(__file__).parent / 'cogs'
        for file in sorted(cogs_path.glob('*_cog.py')):
            module = f'dopamine_menu.cogs.{file.stem}'
            try:
                await self.load_extension(module)
                logger.info(f'Loaded {module}')
            except commands.ExtensionError:
                logger.error(f'Failed to load {module}', exc_info=True)

    async def on_ready(self):
        guild_id = os.getenv('GUILD_ID')
        if guild_id:
            guild = discord.Object(id=int(guild_id))
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f'Bot ready! Synced commands to guild {guild_id}')
        else:
            # Global sync can take up to an hour to show up in clients
            await self.tree.sync()
            logger.info('Bot ready! Synced commands globally')

    async def on_app_command_error(
        self, interaction: Interaction, error: app_commands.AppCommandError
    ):
        command = interaction.command.name if interaction.command else '?'
        logger.error(f'/{command} failed for user {interaction.user.id}', exc_info=error)
        message = '❌ Something went wrong. Please try again later.'
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)


async def main():
    load_env()
    token = os.getenv('DISCORD_TOKEN')
    if not token:
        raise RuntimeError('DISCORD_TOKEN not set in environment or .env')

    # Initialize the Postgres connection pool once for the process
    DBManager.init_pool()

    bot = DopamineMenuBot()
    try:
        async with bot:
            await bot.start(token)
    except discord.DiscordException:
        logger.error('Bot failed due to an exception', exc_info=True)
        raise
    finally:
        # Ensure DB connections are cleaned up on shutdown
        DBManager.close_pool()
