import logging

import discord
from discord.ext import commands

from sweeper.cogs.checks import AccessDenied
from sweeper.ui.formatting import permission_denied_message

logger = logging.getLogger(__name__)


class ErrorHandlerCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: Exception):
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, AccessDenied):
            return await ctx.reply(permission_denied_message(error.required, error.actual))

        if isinstance(error, commands.NoPrivateMessage):
            return await ctx.reply("This command only works inside the server.")

        if isinstance(error, commands.MissingRequiredArgument):
            return await ctx.reply(
                f"Missing argument: `{error.param.name}`\n"
                f"Try: `{ctx.clean_prefix}{ctx.command} {ctx.command.signature}`"
            )

        if isinstance(error, commands.BadArgument):
            return await ctx.reply("Bad argument. Mention a valid member or role.")

        if isinstance(error, commands.CheckFailure):
            return await ctx.reply("You can’t use that command here.")

        if isinstance(error, discord.Forbidden):
            return await ctx.reply("I’m missing permissions (Send Messages / Embed Links) in this channel.")

        logger.error("[Sweeper] command %s failed", ctx.command, exc_info=error)
        await ctx.reply(f"Command error: `{type(error).__name__}`")
