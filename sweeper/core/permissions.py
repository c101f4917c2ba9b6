# sweeper/core/permissions.py
from __future__ import annotations

from enum import IntEnum
from typing import Iterable


class PermissionLevel(IntEnum):
    USER = 0        # read-only: status
    MODERATOR = 1   # can trigger a sweep
    ADMIN = 2       # can manage the whitelist

    @property
    def label(self) -> str:
        return {
            PermissionLevel.USER: "👤 User",
            PermissionLevel.MODERATOR: "🛡️ Moderator",
            PermissionLevel.ADMIN: "👑 Admin",
        }[self]

    @classmethod
    def parse(cls, text: str) -> "PermissionLevel":
        s = (text or "").strip().lower()
        aliases = {
            "user": cls.USER,
            "mod": cls.MODERATOR,
            "moderator": cls.MODERATOR,
            "admin": cls.ADMIN,
        }
        if s not in aliases:
            raise ValueError(f"unknown permission level: {text!r}")
        return aliases[s]


def resolve_level(
    user_level: PermissionLevel | None,
    role_levels: Iterable[PermissionLevel],
    is_guild_admin: bool = False,
) -> PermissionLevel | None:
    """
    Highest of the user's own entry and their roles' entries.
    Server administrators are always ADMIN. None means not whitelisted.
    """
    if is_guild_admin:
        return PermissionLevel.ADMIN

    candidates = [lvl for lvl in role_levels if lvl is not None]
    if user_level is not None:
        candidates.append(user_level)
    if not candidates:
        return None
    return max(candidates)
