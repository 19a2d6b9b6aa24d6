# ambience/core/errors.py
"""
Error types raised by the mixer.

Out-of-range numbers are never errors (they are clamped); only unknown
channel names and failing players are surfaced.
"""

from __future__ import annotations
from typing import Optional


class AmbienceError(Exception):
    """Base class for all ambience errors."""


class UnknownChannel(AmbienceError, KeyError):
    """A channel name that was not established when the mixer was set up."""

    def __init__(self, channel: str):
        super().__init__(channel)
        self.channel = channel

    def __str__(self) -> str:
        return f"Unknown channel: {self.channel!r}"


class PlaybackFailure(AmbienceError):
    """
    A ChannelPlayer call failed.

    The mixer's own bookkeeping has already been committed when this is
    raised; re-applying the channel is the way to retry.
    """

    def __init__(self, channel: str, action: str, cause: Optional[BaseException] = None):
        self.channel = channel
        self.action = action
        self.cause = cause
        message = f"Playback {action} failed on channel {channel!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
