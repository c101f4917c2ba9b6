# sweeper/services/repos.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from sweeper.core.permissions import PermissionLevel


def now_utc_ts() -> int:
    return int(datetime.now(timezone.utc).timestamp())


class WhitelistRepo:
    def __init__(self, db):
        self.db = db

    # ---------- INTERNAL ----------

    def _conn(self):
        if not self.db.conn:
            raise RuntimeError("Database not connected")
        return self.db.conn

    async def _upsert(self, table: str, key_col: str, key: int, level: PermissionLevel, updated_by: str | None) -> None:
        conn = self._conn()
        await conn.execute(
            f"""
            INSERT INTO {table}({key_col}, level, updated_at, updated_by)
            VALUES(?, ?, ?, ?)
            ON CONFLICT({key_col})
            DO UPDATE SET level=excluded.level, updated_at=excluded.updated_at, updated_by=excluded.updated_by
            """,
            (int(key), int(level), now_utc_ts(), updated_by),
        )
        await conn.commit()

    async def _delete(self, table: str, key_col: str, key: int) -> bool:
        conn = self._conn()
        cur = await conn.execute(f"DELETE FROM {table} WHERE {key_col}=?", (int(key),))
        await conn.commit()
        return cur.rowcount > 0

    # ---------- USERS ----------

    async def set_user_level(self, user_id: int, level: PermissionLevel, updated_by: str | None = None) -> None:
        await self._upsert("whitelist_users", "user_id", user_id, level, updated_by)

    async def remove_user(self, user_id: int) -> bool:
        return await self._delete("whitelist_users", "user_id", user_id)

    async def get_user_level(self, user_id: int) -> PermissionLevel | None:
        conn = self._conn()
        cur = await conn.execute("SELECT level FROM whitelist_users WHERE user_id=?", (int(user_id),))
        row = await cur.fetchone()
        return PermissionLevel(int(row[0])) if row else None

    # ---------- ROLES ----------

    async def set_role_level(self, role_id: int, level: PermissionLevel, updated_by: str | None = None) -> None:
        await self._upsert("whitelist_roles", "role_id", role_id, level, updated_by)

    async def remove_role(self, role_id: int) -> bool:
        return await self._delete("whitelist_roles", "role_id", role_id)

    async def get_role_levels(self, role_ids: Iterable[int]) -> list[PermissionLevel]:
        ids = [int(r) for r in role_ids]
        if not ids:
            return []

        conn = self._conn()
        placeholders = ",".join("?" for _ in ids)
        cur = await conn.execute(
            f"SELECT level FROM whitelist_roles WHERE role_id IN ({placeholders})",
            ids,
        )
        rows = await cur.fetchall()
        return [PermissionLevel(int(r[0])) for r in rows]

    # ---------- LISTING ----------

    async def list_all(self) -> tuple[dict[int, PermissionLevel], dict[int, PermissionLevel]]:
        """
        Returns (users, roles), each id -> level.
        """
        conn = self._conn()

        cur = await conn.execute("SELECT user_id, level FROM whitelist_users ORDER BY level DESC, user_id")
        users = {int(uid): PermissionLevel(int(lvl)) for (uid, lvl) in await cur.fetchall()}

        cur = await conn.execute("SELECT role_id, level FROM whitelist_roles ORDER BY level DESC, role_id")
        roles = {int(rid): PermissionLevel(int(lvl)) for (rid, lvl) in await cur.fetchall()}

        return users, roles
