import os
from pathlib import Path
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from app.lib.extension_context import TespaContext as Context, split_message
from app.lib.report import format_player, format_team
from app.lib.timing import min_delay
from app.logger import logger
from app.overwatch_tracker import resolve_player
from app.tespa import summarize_team

if TYPE_CHECKING:
    from app.bot import TespaBot

MIN_REPLY_DELAY = float(os.getenv("MIN_REPLY_DELAY", "2.5"))
README_PATH = Path(__file__).resolve().parents[2] / "README.md"


class Summarizer(commands.Cog):
    """
    Roster and player summaries.
    Every command answers with text built by ``app.lib.report``; failures are
    reported by the error handler cog.
    """

    def __init__(self, bot: "TespaBot"):
        self.bot = bot

    @commands.command(name="summarize", description="Summarize a TESPA Compete team page.")
    async def summarize(self, ctx: Context, *, team_page: str):
        async with ctx.typing():
            summary = await min_delay(summarize_team(team_page), MIN_REPLY_DELAY)
        await ctx.reply_chunks(format_team(summary))

    @commands.command(name="stat", description="Summarize a BattleTag.")
    async def stat(self, ctx: Context, *, battletag: str):
        async with ctx.typing():
            summary = await min_delay(resolve_player(battletag), MIN_REPLY_DELAY)
        await ctx.reply_chunks(format_player(summary))

    @commands.command(name="help", description="Send the bot's README in a direct message.")
    async def help(self, ctx: Context):
        content = README_PATH.read_text(encoding="utf-8")
        for chunk in split_message(content):
            await ctx.author.send(chunk)
        try:
            await ctx.message.delete()
        except (discord.Forbidden, discord.NotFound) as e:
            logger.debug(f"Could not delete help request {ctx.message.id}: {e}")


def setup(bot: "TespaBot"):
    bot.add_cog(Summarizer(bot))
    logger.debug("Summarizer loaded successfully.")
