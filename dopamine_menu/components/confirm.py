import discord
from discord import Interaction


class ConfirmView(discord.ui.View):
    '''Yes/no prompt for destructive commands. `value` stays None on timeout.'''

    def __init__(self, requestor_id: int, confirm_label: str = 'Confirm'):
        super().__init__(timeout=60)
        self.requestor_id = requestor_id
        self.value: bool | None = None
        self.confirm_button.label = confirm_label

    async def interaction_check(self, interaction: Interaction) -> bool:
        if interaction.user.id != self.requestor_id:
            await interaction.response.send_message(
                'You cannot interact with this view.', ephemeral=True
            )
            return False
        return True

    @discord.ui.button(label='Confirm', style=discord.ButtonStyle.danger)
    async def confirm_button(self, interaction: Interaction, button: discord.ui.Button):
        self.value = True
        await interaction.response.defer()
        self.stop()

    @discord.ui.button(label='Cancel', style=discord.ButtonStyle.secondary)
    async def cancel_button(self, interaction: Interaction, button: discord.ui.Button):
        self.value = False
        await interaction.response.defer()
        self.stop()
