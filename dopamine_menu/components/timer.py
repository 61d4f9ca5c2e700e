import math
import time

import discord
from discord import Interaction


def elapsed_minutes(started: float, now: float, planned: int) -> int:
    '''Whole minutes spent, rounded up and capped at the planned length.'''
    spent = max(0.0, now - started) / 60
    return min(planned, max(1, math.ceil(spent)))


class TimerView(discord.ui.View):
    '''Countdown for one activity.

    The view times out when the planned minutes are up. Either button stores
    its interaction in `finished_by` so the caller can answer on a fresh token.
    `cancelled` tells the two apart.
    '''

    def __init__(self, requestor_id: int, minutes: int):
        super().__init__(timeout=minutes * 60)
        self.requestor_id = requestor_id
        self.minutes = minutes
        self.started = time.monotonic()
        self.ends_at = int(time.time()) + minutes * 60
        self.cancelled = False
        self.finished_by: Interaction | None = None

    def spent_minutes(self) -> int:
        if self.finished_by is None:
            return self.minutes
        return elapsed_minutes(self.started, time.monotonic(), self.minutes)

    async def interaction_check(self, interaction: Interaction) -> bool:
        if interaction.user.id != self.requestor_id:
            await interaction.response.send_message(
                'You cannot interact with this view.', ephemeral=True
            )
            return False
        return True

    @discord.ui.button(label='Done', style=discord.ButtonStyle.success)
    async def done_button(self, interaction: Interaction, button: discord.ui.Button):
        self.finished_by = interaction
        await interaction.response.defer(ephemeral=True)
        self.stop()

    @discord.ui.button(label='Cancel', style=discord.ButtonStyle.secondary)
    async def cancel_button(self, interaction: Interaction, button: discord.ui.Button):
        self.cancelled = True
        self.finished_by = interaction
        await interaction.response.defer()
        self.stop()
