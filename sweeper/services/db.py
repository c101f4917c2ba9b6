# sweeper/services/db.py
from __future__ import annotations

import aiosqlite
from pathlib import Path

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

-- Whitelisted users and the level they were granted
-- level: 0 = user, 1 = moderator, 2 = admin
CREATE TABLE IF NOT EXISTS whitelist_users(
  user_id INTEGER PRIMARY KEY,
  level INTEGER NOT NULL,
  updated_at INTEGER NOT NULL,
  updated_by TEXT
);

-- Whitelisted roles; members inherit the role's level
CREATE TABLE IF NOT EXISTS whitelist_roles(
  role_id INTEGER PRIMARY KEY,
  level INTEGER NOT NULL,
  updated_at INTEGER NOT NULL,
  updated_by TEXT
);
"""


class Database:
    def __init__(self, db_path: str):
        self.db_path = db_path
        self.conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = await aiosqlite.connect(self.db_path)

        await self.conn.executescript(SCHEMA_SQL)
        await self.conn.commit()

    async def close(self) -> None:
        if self.conn:
            await self.conn.close()
            self.conn = None
