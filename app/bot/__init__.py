import os
import sys
import traceback
from pathlib import Path

from discord import Intents, NoEntryPointError, ExtensionFailed, Activity, ActivityType
from discord.ext.commands import Bot

from app.lib.extension_context import TespaContext as Context
from app.logger import logger
from app.overwatch_tracker.http_session import close_session

COGS_PATH = Path(__file__).resolve().parent.parent / "cogs"

prefix = os.getenv("COMMAND_PREFIX", ".bb ")
OWNER_IDS = [int(x) for x in os.getenv("OWNER_IDS", "").split(",") if x]
COGS = [p.stem for p in COGS_PATH.glob("*.py") if not p.stem.startswith("_")]


class Ready:
    """Keeps track of which cogs finished loading."""

    def __init__(self):
        if not COGS:
            logger.warning("No cogs found to load")
        for cog in COGS:
            setattr(self, cog, False)

    def ready_up(self, cog: str):
        setattr(self, cog, True)
        logger.info(f"{cog} is ready")

    def all_ready(self) -> bool:
        if not COGS:
            return True
        return all(getattr(self, cog) for cog in COGS)


class TespaBot(Bot):
    def __init__(self):
        intents = Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=prefix,
            owner_ids=set(OWNER_IDS),
            intents=intents,
            help_command=None
        )
        self.version = None
        self.token = os.getenv("DISCORD_TOKEN")
        if not self.token:
            raise RuntimeError("DISCORD_TOKEN not found in environment variables. Please set it in your .env file.")
        self.cogs_ready = Ready()

    def run(self, version: str):
        self.version = version
        logger.info("Starting TESPA bot version %s", self.version)
        logger.info("Running setup . . .")
        self.setup_cogs()
        logger.info("Setup complete. Running bot . . .")
        super().run(self.token, reconnect=True)

    def setup_cogs(self):
        for cog in COGS:
            try:
                logger.debug("Loading cog: %s", cog)
                self.load_extension(f"app.cogs.{cog}")
            except (NoEntryPointError, ExtensionFailed) as e:
                logger.error("Ignoring %s (load failed): %s", cog, e, exc_info=True)
                traceback.print_exception(type(e), e, e.__traceback__, file=sys.stderr)
            else:
                logger.debug("Cog %s loaded successfully", cog)
                self.cogs_ready.ready_up(cog)

    async def on_ready(self):
        if not self.cogs_ready.all_ready():
            logger.warning("Some cogs failed to load, continuing with the loaded ones.")
        logger.info(f"Bot {self.user} is ready!")
        await self.change_presence(activity=Activity(type=ActivityType.listening,
                                                     name=f"{prefix.strip()} help"))

    async def get_context(self, message, *, cls=Context):
        return await super().get_context(message, cls=cls)

    async def close(self):
        await close_session()
        logger.info("HTTP session closed.")
        await super().close()
