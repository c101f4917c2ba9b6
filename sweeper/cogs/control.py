# sweeper/cogs/control.py
from __future__ import annotations

import logging

import discord
from discord.ext import commands

from sweeper.cogs.checks import effective_level, require_level
from sweeper.core.permissions import PermissionLevel
from sweeper.ui.formatting import report_summary, status_embed

logger = logging.getLogger(__name__)


def _short_err(e: Exception) -> str:
    return f"{type(e).__name__}: {e}"


class ControlCog(commands.Cog):
    """
    Operator commands:
    - status: what is watched and how the loop is doing
    - kick: sweep right now
    - perms: manage the whitelist
    """

    def __init__(self, bot: commands.Bot, settings, sweeper, whitelist, scheduler_cog=None):
        self.bot = bot
        self.settings = settings
        self.sweeper = sweeper
        self.whitelist = whitelist
        self.scheduler_cog = scheduler_cog

    async def _fail(self, ctx: commands.Context, e: Exception):
        logger.exception("[Sweeper][ControlCog] command error: %s", _short_err(e))
        try:
            await ctx.reply(f"❌ `{_short_err(e)}`")
        except discord.HTTPException:
            logger.warning("[Sweeper][ControlCog] could not reply in channel %s", ctx.channel.id)

    # ---------- STATUS ----------

    @commands.command(name="status")
    @commands.guild_only()
    @require_level(PermissionLevel.USER)
    async def status(self, ctx: commands.Context):
        try:
            loop = getattr(self.scheduler_cog, "tick", None)
            embed = status_embed(
                settings=self.settings,
                loop_running=bool(loop and loop.is_running()),
                busy=self.sweeper.busy,
                last_report=getattr(self.scheduler_cog, "last_report", None),
            )
            await ctx.reply(embed=embed)
        except Exception as e:
            await self._fail(ctx, e)

    # ---------- MANUAL SWEEP ----------

    @commands.command(name="kick")
    @commands.guild_only()
    @require_level(PermissionLevel.MODERATOR)
    async def kick(self, ctx: commands.Context):
        try:
            logger.info("[Sweeper] manual sweep requested by %s (%s)", ctx.author, ctx.author.id)
            msg = await ctx.reply("⏳ **Sweeping...**\nLooking for connected members...")

            report = await self.sweeper.run()
            if self.scheduler_cog is not None and not report.skipped:
                self.scheduler_cog.last_report = report

            await msg.edit(content=report_summary(report, self.settings.channel_id))
        except Exception as e:
            await self._fail(ctx, e)

    # ---------- WHITELIST ----------

    @commands.group(name="perms", invoke_without_command=True)
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms(self, ctx: commands.Context):
        await self.perms_list(ctx)

    @perms.command(name="list")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_list(self, ctx: commands.Context):
        try:
            users, roles = await self.whitelist.list_all()

            lines = ["**Whitelist**", "", "__Users__"]
            lines += [f"- <@{uid}>: {lvl.label}" for uid, lvl in users.items()] or ["- none"]
            lines += ["", "__Roles__"]
            lines += [f"- <@&{rid}>: {lvl.label}" for rid, lvl in roles.items()] or ["- none"]
            lines += ["", "Server administrators always count as 👑 Admin."]

            await ctx.reply(
                "\n".join(lines)[:1900],
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)

    @perms.command(name="add_user")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_add_user(self, ctx: commands.Context, member: discord.Member, level: str):
        """
        !perms add_user @someone moderator
        """
        try:
            lvl = PermissionLevel.parse(level)
        except ValueError:
            return await ctx.reply("Level must be one of: `user`, `moderator`, `admin`.")

        try:
            await self.whitelist.set_user_level(member.id, lvl, updated_by=str(ctx.author))
            logger.info("[Sweeper] whitelist: user %s set to %s by %s", member.id, lvl.name, ctx.author.id)
            await ctx.reply(
                f"✅ {member.mention} is now {lvl.label}",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)

    @perms.command(name="add_role")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_add_role(self, ctx: commands.Context, role: discord.Role, level: str):
        try:
            lvl = PermissionLevel.parse(level)
        except ValueError:
            return await ctx.reply("Level must be one of: `user`, `moderator`, `admin`.")

        try:
            await self.whitelist.set_role_level(role.id, lvl, updated_by=str(ctx.author))
            logger.info("[Sweeper] whitelist: role %s set to %s by %s", role.id, lvl.name, ctx.author.id)
            await ctx.reply(
                f"✅ Role {role.mention} is now {lvl.label}",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)

    @perms.command(name="remove_user")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_remove_user(self, ctx: commands.Context, user: discord.User):
        try:
            removed = await self.whitelist.remove_user(user.id)
            if removed:
                logger.info("[Sweeper] whitelist: user %s removed by %s", user.id, ctx.author.id)
            await ctx.reply(
                f"✅ {user.mention} removed from the whitelist" if removed else f"{user.mention} was not whitelisted",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)

    @perms.command(name="remove_role")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_remove_role(self, ctx: commands.Context, role: discord.Role):
        try:
            removed = await self.whitelist.remove_role(role.id)
            if removed:
                logger.info("[Sweeper] whitelist: role %s removed by %s", role.id, ctx.author.id)
            await ctx.reply(
                f"✅ Role {role.mention} removed from the whitelist" if removed else f"Role {role.mention} was not whitelisted",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)

    @perms.command(name="check")
    @commands.guild_only()
    @require_level(PermissionLevel.ADMIN)
    async def perms_check(self, ctx: commands.Context, member: discord.Member):
        try:
            level = await effective_level(self.whitelist, member)
            text = level.label if level is not None else "❌ not whitelisted"
            await ctx.reply(
                f"{member.mention}: {text}",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            await self._fail(ctx, e)
