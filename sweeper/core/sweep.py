# sweeper/core/sweep.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import discord

from sweeper.core.classifier import Advisory, classify, describe_error
from sweeper.core.errors import ChannelNotFound, NotAVoiceChannel, ServerNotFound, SweepError
from sweeper.ui.formatting import audit_line, warning_message

logger = logging.getLogger(__name__)

AUDIT_REASON = "Automatic disconnect"

VOICE_CHANNEL_TYPES = (discord.VoiceChannel, discord.StageChannel)


@dataclass(frozen=True)
class SweepTarget:
    guild_id: int
    channel_id: int
    log_channel_id: int | None = None

    @classmethod
    def from_settings(cls, settings) -> "SweepTarget":
        return cls(settings.guild_id, settings.channel_id, settings.log_channel_id)


@dataclass(frozen=True)
class MemberOutcome:
    member_id: int
    member_name: str
    ok: bool
    error: str | None = None


@dataclass
class SweepReport:
    channel_name: str | None = None
    outcomes: list[MemberOutcome] = field(default_factory=list)
    warned: int = 0
    skipped: bool = False
    advisory: Advisory | None = None

    @property
    def succeeded(self) -> list[MemberOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[MemberOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def aborted(self) -> bool:
        return self.advisory is not None


class VoiceSweeper:
    """
    Disconnects everyone from one voice channel.

    - The bot session is injected; nothing here touches module-level state
    - One member failing never stops the others
    - Only one sweep runs at a time; a second caller is skipped, not queued
    """

    def __init__(
        self,
        client: discord.Client,
        target: SweepTarget,
        *,
        warning_channel_id: int | None = None,
        warning_delay_seconds: int = 60,
        warning_only: bool = False,
        ignore_bots: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.target = target
        self.warning_channel_id = warning_channel_id
        self.warning_delay_seconds = warning_delay_seconds
        self.warning_only = warning_only
        self.ignore_bots = ignore_bots
        self._sleep = sleep
        self._guard = asyncio.Lock()

    @classmethod
    def from_settings(cls, client: discord.Client, settings) -> "VoiceSweeper":
        return cls(
            client,
            SweepTarget.from_settings(settings),
            warning_channel_id=settings.warning_channel_id,
            warning_delay_seconds=settings.warning_delay_seconds,
            warning_only=settings.warning_only,
            ignore_bots=settings.ignore_bots,
        )

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    def _client_id(self) -> int | None:
        user = getattr(self.client, "user", None)
        return user.id if user is not None else None

    # ---------------- entry point ----------------

    async def run(self) -> SweepReport:
        """
        Guarded sweep for schedulers and commands.
        Failures are classified and logged here, never raised.
        """
        if self._guard.locked():
            logger.warning("[Sweeper] previous sweep still running, skipping this one")
            return SweepReport(skipped=True)

        async with self._guard:
            try:
                return await self.sweep()
            except (SweepError, discord.HTTPException) as err:
                return self._abort(err)
            except Exception as err:
                # transport failures and anything else the library lets through
                logger.exception("[Sweeper] sweep aborted by an unexpected error")
                return self._abort(err)

    def _abort(self, err: BaseException) -> SweepReport:
        advisory = classify(err, client_id=self._client_id())
        logger.warning("[Sweeper] ERROR (%s): %s", advisory.kind, advisory.message)
        if advisory.hint:
            logger.warning("[Sweeper] %s", advisory.hint)
        return SweepReport(advisory=advisory)

    # ---------------- procedure ----------------

    async def sweep(self) -> SweepReport:
        guild = await self._resolve_guild()
        channel = await self._resolve_channel(guild)

        report = SweepReport(channel_name=channel.name)
        members = self._snapshot(channel)

        if not members:
            logger.info("[Sweeper] no members in %s", channel.name)
            return report

        logger.info("[Sweeper] members to disconnect in %s: %d", channel.name, len(members))

        if self.warning_channel_id is not None:
            if await self._warn(guild, members):
                report.warned = len(members)

            if self.warning_only:
                logger.info("[Sweeper] warning-only mode, nobody disconnected")
                return report

            if self.warning_delay_seconds > 0:
                logger.info("[Sweeper] waiting %ds before disconnecting", self.warning_delay_seconds)
                await self._sleep(self.warning_delay_seconds)

        for member in members:
            outcome = await self._disconnect(member)
            report.outcomes.append(outcome)
            if outcome.ok:
                await self._audit(guild, audit_line(outcome.member_name, channel.name))

        logger.info(
            "[Sweeper] sweep done: %d/%d disconnected",
            len(report.succeeded),
            len(report.outcomes),
        )
        return report

    async def _resolve_guild(self) -> discord.Guild:
        gid = self.target.guild_id
        guild = self.client.get_guild(gid)
        if guild is not None:
            return guild
        try:
            return await self.client.fetch_guild(gid)
        except discord.NotFound as err:
            raise ServerNotFound(gid) from err
        except discord.Forbidden as err:
            # guilds the bot has not joined answer 403 instead of 404
            raise ServerNotFound(gid, code=err.code or None) from err

    async def _resolve_channel(self, guild: discord.Guild):
        cid = self.target.channel_id
        channel = guild.get_channel(cid)
        if channel is None:
            try:
                channel = await guild.fetch_channel(cid)
            except discord.NotFound as err:
                raise ChannelNotFound(cid) from err
            except discord.InvalidData as err:
                # the id exists but belongs to another guild
                raise ChannelNotFound(cid) from err

        if not isinstance(channel, VOICE_CHANNEL_TYPES):
            raise NotAVoiceChannel(getattr(channel, "name", None) or str(cid), cid)
        return channel

    def _snapshot(self, channel) -> list[discord.Member]:
        members = list(channel.members)
        if self.ignore_bots:
            members = [m for m in members if not m.bot]
        return members

    async def _disconnect(self, member: discord.Member) -> MemberOutcome:
        try:
            await member.move_to(None, reason=AUDIT_REASON)
        except Exception as err:
            reason = describe_error(err)
            logger.warning("[Sweeper] failed to disconnect %s (%s): %s", member.name, member.id, reason)
            return MemberOutcome(member.id, member.name, ok=False, error=reason)

        logger.info("[Sweeper] %s (%s) disconnected", member.name, member.id)
        return MemberOutcome(member.id, member.name, ok=True)

    # ---------------- best-effort messages ----------------

    async def _text_channel(self, guild: discord.Guild, channel_id: int):
        channel = guild.get_channel(channel_id)
        if channel is None:
            channel = await guild.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise TypeError(f"channel {channel_id} cannot receive messages")
        return channel

    async def _post(self, guild: discord.Guild, channel_id: int, content: str, what: str) -> bool:
        try:
            channel = await self._text_channel(guild, channel_id)
            await channel.send(content)
            return True
        except Exception as err:
            logger.warning("[Sweeper] could not send %s to %s: %s", what, channel_id, describe_error(err))
            return False

    async def _audit(self, guild: discord.Guild, content: str) -> bool:
        if self.target.log_channel_id is None:
            return False
        return await self._post(guild, self.target.log_channel_id, content, "audit message")

    async def _warn(self, guild: discord.Guild, members: list[discord.Member]) -> bool:
        content = warning_message(members, self.warning_delay_seconds, self.warning_only)
        sent = await self._post(guild, self.warning_channel_id, content, "warning")
        if sent:
            logger.info("[Sweeper] warning sent to %d member(s)", len(members))
        return sent
