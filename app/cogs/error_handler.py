from typing import TYPE_CHECKING

from discord.ext import commands

from app.lib.extension_context import TespaContext as Context
from app.logger import logger
from app.overwatch_tracker.errors import TrackerError

if TYPE_CHECKING:
    from app.bot import TespaBot

EXPECTED_ERRORS = (TrackerError, commands.UserInputError)


def error_message(error: commands.CommandError) -> str:
    """Text shown to the user for a failed command."""
    error = getattr(error, "original", error)
    if isinstance(error, commands.NotOwner):
        return "Error: Insufficient permission"
    if isinstance(error, EXPECTED_ERRORS):
        return f"Error: {error}"
    return "Error: something went wrong, please try again later"


class ErrorHandler(commands.Cog):
    def __init__(self, bot: "TespaBot"):
        self.bot = bot

    @commands.Cog.listener()
    async def on_command_error(self, ctx: Context, error: commands.CommandError):
        if hasattr(ctx.command, "on_error"):
            return
        # anything else starting with the prefix is just chat
        if isinstance(error, commands.CommandNotFound):
            return

        original = getattr(error, "original", error)
        if isinstance(original, EXPECTED_ERRORS):
            logger.info(f"Command {ctx.message.content!r} failed: {original}")
        else:
            logger.error(f"Unhandled error in command {ctx.command}: {original}",
                         exc_info=original, stack_info=True)
        await ctx.reply(error_message(error))


def setup(bot: "TespaBot"):
    bot.add_cog(ErrorHandler(bot))
    logger.debug("ErrorHandler loaded successfully.")
