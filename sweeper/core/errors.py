# sweeper/core/errors.py
from __future__ import annotations


class SweeperError(Exception):
    """Base exception for everything the sweeper raises itself."""


# ---------------- startup ----------------

class ConfigError(SweeperError):
    """Configuration problem detected before connecting. Always fatal."""


class StartupConfigMissing(ConfigError):
    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required environment variables: {', '.join(self.missing)}")


class StartupConfigInvalid(ConfigError):
    def __init__(self, name: str, value: str, expected: str = "a positive integer"):
        self.name = name
        self.value = value
        super().__init__(f"{name} must be {expected} (got {value!r})")


# ---------------- sweep ----------------

class SweepError(SweeperError):
    """
    Aborts the current sweep only.
    `code` is the Discord JSON error code when the failure came from the API.
    """

    kind = "SweepError"

    def __init__(self, message: str, code: int | None = None):
        self.code = code
        super().__init__(message)


class ServerNotFound(SweepError):
    kind = "ServerNotFound"

    def __init__(self, guild_id: int, code: int | None = 10004):
        self.guild_id = guild_id
        super().__init__(f"Server not found (ID: {guild_id})", code)


class ChannelNotFound(SweepError):
    kind = "ChannelNotFound"

    def __init__(self, channel_id: int, code: int | None = 10003):
        self.channel_id = channel_id
        super().__init__(f"Channel not found (ID: {channel_id})", code)


class NotAVoiceChannel(SweepError):
    kind = "NotAVoiceChannel"

    def __init__(self, channel_name: str, channel_id: int):
        self.channel_name = channel_name
        self.channel_id = channel_id
        super().__init__(f"Channel {channel_name} is not a voice channel")
