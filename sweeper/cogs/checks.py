# sweeper/cogs/checks.py
from __future__ import annotations

import discord
from discord.ext import commands

from sweeper.core.permissions import PermissionLevel, resolve_level


class AccessDenied(commands.CheckFailure):
    def __init__(self, required: PermissionLevel, actual: PermissionLevel | None):
        self.required = required
        self.actual = actual
        super().__init__(f"requires {required.name}, has {actual.name if actual is not None else 'nothing'}")


async def effective_level(whitelist, member: discord.abc.User) -> PermissionLevel | None:
    is_admin = isinstance(member, discord.Member) and member.guild_permissions.administrator
    user_level = await whitelist.get_user_level(member.id)
    role_levels = await whitelist.get_role_levels(r.id for r in getattr(member, "roles", []))
    return resolve_level(user_level, role_levels, is_guild_admin=is_admin)


def require_level(required: PermissionLevel):
    """Command check against the whitelist attached to the bot by the loader."""

    async def predicate(ctx: commands.Context) -> bool:
        whitelist = getattr(ctx.bot, "whitelist", None)
        if whitelist is None:
            raise commands.CheckFailure("whitelist not loaded")

        level = await effective_level(whitelist, ctx.author)
        if level is None or level < required:
            raise AccessDenied(required, level)
        return True

    return commands.check(predicate)
