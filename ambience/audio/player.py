# ambience/audio/player.py
"""
ChannelPlayer - The playback capability a ChannelMixer drives.
"""

from abc import ABC, abstractmethod


class ChannelPlayer(ABC):
    """
    Sound production for a single looping channel.

    The mixer owns every player it is given; nothing else should call
    these methods while the mixer is alive.
    """

    @abstractmethod
    def is_audible(self) -> bool:
        """
        Check whether the channel is currently producing sound.

        Returns:
            True while playback is running
        """
        raise NotImplementedError()

    @abstractmethod
    def set_gain(self, gain: float) -> None:
        """
        Change the gain of running playback without restarting it.

        Args:
            gain: Linear gain (0.0-1.0)
        """
        raise NotImplementedError()

    @abstractmethod
    def start_at_gain(self, gain: float) -> None:
        """
        Start looping playback at the given gain.

        Args:
            gain: Linear gain (0.0 exclusive to 1.0)
        """
        raise NotImplementedError()

    @abstractmethod
    def stop(self) -> None:
        """Stop playback."""
        raise NotImplementedError()
