from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time as dt_time, timezone
import os
from typing import Mapping

from dotenv import load_dotenv

from sweeper.core.errors import StartupConfigInvalid, StartupConfigMissing

REQUIRED_ENV_VARS = ("DISCORD_TOKEN", "GUILD_ID", "CHANNEL_ID")

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class Settings:
    token: str
    guild_id: int
    channel_id: int

    # ---------------- Audit ----------------
    log_channel_id: int | None = None

    # ---------------- Warning phase ----------------
    warning_channel_id: int | None = None
    warning_delay_seconds: int = 60
    warning_only: bool = False

    # ---------------- Scheduler ----------------
    sweep_interval_seconds: int = 60
    # daily UTC times; when set they replace the interval
    sweep_times: tuple[dt_time, ...] = ()
    ignore_bots: bool = False

    # ---------------- Bot / Commands ----------------
    command_prefix: str = "!"
    db_path: str = "data/sweeper.sqlite3"
    log_level: str = "INFO"


def _get(env: Mapping[str, str], name: str) -> str:
    return (env.get(name) or "").strip()


def _parse_id(env: Mapping[str, str], name: str) -> int | None:
    raw = _get(env, name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise StartupConfigInvalid(name, raw, "a numeric Discord id") from None
    if value <= 0:
        raise StartupConfigInvalid(name, raw, "a numeric Discord id")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = _get(env, name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise StartupConfigInvalid(name, raw) from None
    if value < minimum:
        raise StartupConfigInvalid(name, raw, f"an integer >= {minimum}")
    return value


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _get(env, name).lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise StartupConfigInvalid(name, raw, "true or false")


def _parse_times(env: Mapping[str, str], name: str) -> tuple[dt_time, ...]:
    """`22:00` or `06:30:15,22:00` -> sorted UTC times of day."""
    raw = _get(env, name)
    if not raw:
        return ()

    times = set()
    for part in raw.split(","):
        part = part.strip()
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                parsed = datetime.strptime(part, fmt).time()
                break
            except ValueError:
                continue
        else:
            raise StartupConfigInvalid(name, raw, "comma-separated HH:MM[:SS] times")
        times.add(parsed.replace(tzinfo=timezone.utc))
    return tuple(sorted(times))


def load_settings(environ: Mapping[str, str] | None = None, env_file: str | None = ".env") -> Settings:
    """
    Build Settings from the environment.

    When `environ` is None the process environment is used, after loading
    `env_file` without overriding variables that are already set.
    Every missing required variable is reported in one StartupConfigMissing.
    """
    if environ is None:
        if env_file:
            load_dotenv(env_file, override=False)
        environ = os.environ

    missing = [name for name in REQUIRED_ENV_VARS if not _get(environ, name)]
    if missing:
        raise StartupConfigMissing(missing)

    return Settings(
        token=_get(environ, "DISCORD_TOKEN"),
        guild_id=_parse_id(environ, "GUILD_ID"),
        channel_id=_parse_id(environ, "CHANNEL_ID"),
        log_channel_id=_parse_id(environ, "LOG_CHANNEL_ID"),
        warning_channel_id=_parse_id(environ, "WARNING_CHANNEL_ID"),
        warning_delay_seconds=_parse_int(environ, "WARNING_DELAY_SECONDS", 60, minimum=0),
        warning_only=_parse_bool(environ, "WARNING_ONLY", False),
        sweep_interval_seconds=_parse_int(environ, "SWEEP_INTERVAL_SECONDS", 60, minimum=1),
        sweep_times=_parse_times(environ, "SWEEP_SCHEDULE"),
        ignore_bots=_parse_bool(environ, "SWEEP_IGNORE_BOTS", False),
        command_prefix=_get(environ, "COMMAND_PREFIX") or "!",
        db_path=_get(environ, "DB_PATH") or "data/sweeper.sqlite3",
        log_level=(_get(environ, "LOG_LEVEL") or "INFO").upper(),
    )
