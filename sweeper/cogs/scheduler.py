# sweeper/cogs/scheduler.py
from __future__ import annotations

import logging

from discord.ext import commands, tasks

logger = logging.getLogger(__name__)


class SweepSchedulerCog(commands.Cog):
    """
    Runs the voice sweep on a fixed interval, or at fixed UTC times of day
    when SWEEP_SCHEDULE is set.

    tasks.loop awaits each run before scheduling the next, and the sweeper's
    own guard covers manual sweeps started from commands.
    """

    def __init__(self, bot: commands.Bot, settings, sweeper):
        self.bot = bot
        self.settings = settings
        self.sweeper = sweeper
        self.last_report = None

        if settings.sweep_times:
            self.tick.change_interval(time=list(settings.sweep_times))
        else:
            self.tick.change_interval(seconds=settings.sweep_interval_seconds)

    async def cog_load(self):
        self.tick.start()

    async def cog_unload(self):
        self.tick.cancel()

    # ---------------- tick loop ----------------

    @tasks.loop(seconds=60)
    async def tick(self):
        logger.info("[Sweeper] starting check...")
        try:
            self.last_report = await self.sweeper.run()
        except Exception:
            # keep the loop alive for the next trigger
            logger.exception("[Sweeper] unexpected error during sweep")
        logger.info("[Sweeper] check finished")

    @tick.before_loop
    async def before_tick(self):
        await self.bot.wait_until_ready()
