# sweeper/core/classifier.py
from __future__ import annotations

from dataclasses import dataclass

import discord

from sweeper.core.errors import NotAVoiceChannel, ServerNotFound, SweepError

UNKNOWN_GUILD = 10004
UNKNOWN_CHANNEL = 10003
NOT_CONNECTED_TO_VOICE = 40032
MISSING_ACCESS = 50001
MISSING_PERMISSIONS = 50013

KNOWN_ERRORS: dict[int, str] = {
    UNKNOWN_GUILD: "The bot is not on the server. An invite is required.",
    UNKNOWN_CHANNEL: "Voice channel not found. Check the channel id.",
    NOT_CONNECTED_TO_VOICE: "The member already left the voice channel.",
    MISSING_ACCESS: "The bot cannot see the channel. Grant it View Channel.",
    MISSING_PERMISSIONS: "The bot lacks permissions. Grant it Move Members.",
}

# What the bot needs to see the channel and disconnect people from it
INVITE_PERMISSIONS = discord.Permissions(view_channel=True, connect=True, move_members=True)


@dataclass(frozen=True)
class Advisory:
    kind: str
    code: int | None
    message: str
    hint: str | None = None


def invite_link(client_id: int | None) -> str | None:
    if not client_id:
        return None
    return discord.utils.oauth_url(client_id, permissions=INVITE_PERMISSIONS, scopes=("bot",))


def error_code(err: BaseException) -> int | None:
    code = getattr(err, "code", None)
    return code if isinstance(code, int) and code else None


def describe_error(err: BaseException) -> str:
    """Short human text for one failure: known advice, else the raw message."""
    code = error_code(err)
    if code in KNOWN_ERRORS:
        return KNOWN_ERRORS[code]
    if isinstance(err, discord.HTTPException) and err.text:
        return err.text
    return str(err) or type(err).__name__


def classify(err: BaseException, client_id: int | None = None) -> Advisory:
    """
    Map a failed sweep to advisory text.
    Purely informational: callers log the result and carry on.
    """
    code = error_code(err)

    if isinstance(err, NotAVoiceChannel):
        return Advisory(
            kind=err.kind,
            code=None,
            message=str(err),
            hint="Point CHANNEL_ID at a voice or stage channel.",
        )

    kind = err.kind if isinstance(err, SweepError) else type(err).__name__
    not_joined = isinstance(err, ServerNotFound) or code == UNKNOWN_GUILD

    if not_joined:
        message = KNOWN_ERRORS[UNKNOWN_GUILD]
    else:
        message = KNOWN_ERRORS.get(code) if code is not None else None
    if message is None:
        message = describe_error(err)

    hint = None
    if not_joined:
        link = invite_link(client_id)
        if link:
            hint = f"Invite the bot with this link: {link}"

    return Advisory(kind=kind, code=code, message=message, hint=hint)
