"""
Shared fixtures for the voice sweeper tests.

Discord objects are spec'd mocks so isinstance checks in the sweep behave
like they do against real discord.py models.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from sweeper.config import Settings
from sweeper.core.sweep import SweepTarget, VoiceSweeper

GUILD_ID = 111
CHANNEL_ID = 222
LOG_CHANNEL_ID = 333
WARNING_CHANNEL_ID = 444


def http_error(cls, code: int, message: str = "error", status: int = 404):
    """Build a discord.HTTPException subclass carrying a JSON error code."""
    response = MagicMock()
    response.status = status
    response.reason = "Error"
    return cls(response, {"code": code, "message": message})


def make_member(member_id: int, name: str, bot: bool = False):
    member = MagicMock(spec=discord.Member)
    member.id = member_id
    member.name = name
    member.bot = bot
    member.mention = f"<@{member_id}>"
    member.move_to = AsyncMock()
    return member


@pytest.fixture
def settings():
    return Settings(
        token="token",
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        log_channel_id=LOG_CHANNEL_ID,
    )


@pytest.fixture
def log_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = LOG_CHANNEL_ID
    channel.name = "sweep-log"
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def warning_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = WARNING_CHANNEL_ID
    channel.name = "general"
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def voice_channel():
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = CHANNEL_ID
    channel.name = "Late Night"
    channel.members = []
    return channel


@pytest.fixture
def guild(voice_channel, log_channel, warning_channel):
    guild = MagicMock(spec=discord.Guild)
    guild.id = GUILD_ID
    guild.name = "Test Guild"

    channels = {
        CHANNEL_ID: voice_channel,
        LOG_CHANNEL_ID: log_channel,
        WARNING_CHANNEL_ID: warning_channel,
    }
    guild.get_channel = MagicMock(side_effect=channels.get)
    guild.fetch_channel = AsyncMock(side_effect=http_error(discord.NotFound, 10003, "Unknown Channel"))
    return guild


@pytest.fixture
def client(guild):
    client = MagicMock(spec=discord.Client)
    client.user = MagicMock()
    client.user.id = 424242
    client.get_guild = MagicMock(side_effect=lambda gid: guild if gid == GUILD_ID else None)
    client.fetch_guild = AsyncMock(side_effect=http_error(discord.NotFound, 10004, "Unknown Guild"))
    return client


@pytest.fixture
def no_sleep():
    return AsyncMock()


@pytest.fixture
def make_sweeper(client, no_sleep):
    def _make(
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        log_channel_id=LOG_CHANNEL_ID,
        **kwargs,
    ) -> VoiceSweeper:
        kwargs.setdefault("sleep", no_sleep)
        return VoiceSweeper(client, SweepTarget(guild_id, channel_id, log_channel_id), **kwargs)

    return _make
