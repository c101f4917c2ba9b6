# sweeper/main.py
import asyncio
import logging
import sys

import discord
from discord.ext import commands

from sweeper.config import Settings, load_settings
from sweeper.core.errors import ConfigError
from sweeper.core.sweep import VoiceSweeper
from sweeper.loader import load_all
from sweeper.services.db import Database
from sweeper.services.repos import WhitelistRepo

logger = logging.getLogger("sweeper")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_bot(settings: Settings) -> commands.Bot:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.voice_states = True
    intents.members = True
    intents.message_content = True

    return commands.Bot(command_prefix=settings.command_prefix, intents=intents)


async def on_ready(bot: commands.Bot, settings: Settings) -> None:
    logger.info("[Sweeper] ✅ ONLINE as %s (ID: %s)", bot.user, bot.user.id if bot.user else "?")
    logger.info(
        "[Sweeper] Config: Guild=%s | Channel=%s | Log=%s",
        settings.guild_id,
        settings.channel_id,
        settings.log_channel_id or "none",
    )


async def on_shutdown(bot: commands.Bot, db: Database) -> None:
    logger.info("[Sweeper] Disconnecting bot...")
    if not bot.is_closed():
        await bot.close()
    await db.close()


async def run(settings: Settings) -> None:
    db = Database(settings.db_path)
    await db.connect()
    whitelist = WhitelistRepo(db)

    bot = build_bot(settings)
    sweeper = VoiceSweeper.from_settings(bot, settings)

    @bot.event
    async def setup_hook():
        await load_all(bot, settings, sweeper, whitelist)

    async def _ready():
        await on_ready(bot, settings)

    bot.add_listener(_ready, "on_ready")

    try:
        await bot.start(settings.token)
    finally:
        await on_shutdown(bot, db)


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("[Sweeper] %s", e)
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("[Sweeper] Interrupted, bye")


if __name__ == "__main__":
    main()
