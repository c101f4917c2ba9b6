# sweeper/loader.py
from __future__ import annotations

import logging

from sweeper.cogs.control import ControlCog
from sweeper.cogs.errors import ErrorHandlerCog
from sweeper.cogs.scheduler import SweepSchedulerCog
from sweeper.ui.formatting import schedule_text

logger = logging.getLogger(__name__)


async def load_all(bot, settings, sweeper, whitelist):
    logger.info("[Sweeper] Starting loader...")

    # attach shared deps (checks read bot.whitelist)
    bot.settings = settings
    bot.sweeper = sweeper
    bot.whitelist = whitelist

    scheduler_cog = None

    # ---------------- SCHEDULER ----------------
    try:
        scheduler_cog = SweepSchedulerCog(bot, settings, sweeper)
        await bot.add_cog(scheduler_cog)
        logger.info("[Sweeper] ✅ SweepSchedulerCog loaded (%s)", schedule_text(settings))
    except Exception:
        logger.exception("[Sweeper] ❌ SweepSchedulerCog FAILED")
        scheduler_cog = None

    # ---------------- CONTROL ----------------
    try:
        await bot.add_cog(
            ControlCog(
                bot=bot,
                settings=settings,
                sweeper=sweeper,
                whitelist=whitelist,
                scheduler_cog=scheduler_cog,
            )
        )
        logger.info("[Sweeper] ✅ ControlCog loaded")
    except Exception:
        logger.exception("[Sweeper] ❌ ControlCog FAILED")

    # ---------------- ERROR HANDLER ----------------
    try:
        await bot.add_cog(ErrorHandlerCog(bot))
        logger.info("[Sweeper] ✅ ErrorHandlerCog loaded")
    except Exception:
        logger.exception("[Sweeper] ❌ ErrorHandlerCog FAILED")

    logger.info("[Sweeper] Loaded cogs: %s", ", ".join(bot.cogs.keys()))
