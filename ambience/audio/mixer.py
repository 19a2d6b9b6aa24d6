# ambience/audio/mixer.py
"""
ChannelMixer - Volume, master and mute control for looping ambient channels.

Handles:
- Per-channel volume (0-100) and master volume (0-100)
- Mute with a pre-mute snapshot that is restored on unmute
- Start / stop / adjust-in-place decisions for each ChannelPlayer
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple
import logging
import threading

from .channels import (
    Channel, MixerState, MixerSnapshot, clamp_volume, GAIN_SCALE,
)
from .player import ChannelPlayer
from ..core.errors import UnknownChannel, PlaybackFailure
from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_MASTER_VOLUME_CHANGED, SIGNAL_CHANNEL_VOLUME_CHANGED,
    SIGNAL_MUTE_CHANGED, SIGNAL_CHANNEL_STARTED, SIGNAL_CHANNEL_STOPPED,
    SIGNAL_CHANNEL_GAIN_CHANGED, SIGNAL_PLAYBACK_FAILED,
)

logger = logging.getLogger(__name__)


class ChannelMixer(SignalEmitter):
    """
    Translates volume and mute intents into gains for each channel.

    Usage:
        mixer = ChannelMixer({"Wind": wind_player, "Rain": rain_player})
        mixer.set_channel_volume("Wind", 60)   # starts Wind at 0.3
        mixer.set_master_volume(100)           # Wind adjusted to 0.6
        mixer.toggle_mute()                    # everything stops
        mixer.toggle_mute()                    # Wind back at 60
    """

    def __init__(
        self,
        players: Optional[Mapping[str, ChannelPlayer]] = None,
        master_volume: int = 50,
        bridge: Optional[SignalBridge] = None,
    ):
        self._state = MixerState(master_volume=clamp_volume(master_volume))
        self._players: Dict[str, ChannelPlayer] = {}
        self._lock = threading.RLock()  # timer completion may arrive from the tick thread

        for name, player in (players or {}).items():
            self.add_channel(name, player)

        if bridge is not None:
            self.bind_bridge(bridge)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def add_channel(self, name: str, player: ChannelPlayer) -> None:
        """
        Register a channel with its player. Channels start silent.

        Args:
            name: Channel identity
            player: Player that produces this channel's sound

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._players:
            raise ValueError(f"Channel {name!r} already registered")

        self._players[name] = player
        self._state.channels[name] = Channel(name=name)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def master_volume(self) -> int:
        return self._state.master_volume

    @property
    def muted(self) -> bool:
        return self._state.muted

    @property
    def channel_names(self) -> Tuple[str, ...]:
        return tuple(self._state.channels)

    def channel_volume(self, name: str) -> int:
        return self._channel(name).volume

    def previous_volume(self, name: str) -> int:
        return self._channel(name).previous_volume

    def player(self, name: str) -> ChannelPlayer:
        self._channel(name)
        return self._players[name]

    def compute_effective_gain(self, name: str) -> float:
        """
        Final linear gain for a channel.

        Returns:
            channel volume * master volume / 10000, or 0.0 while muted
        """
        channel = self._channel(name)
        volume = 0 if self._state.muted else channel.volume
        return (volume * self._state.master_volume) / GAIN_SCALE

    effective_gain = compute_effective_gain

    def snapshot(self) -> MixerSnapshot:
        channels = self._state.channels.values()
        return MixerSnapshot(
            master_volume=self._state.master_volume,
            muted=self._state.muted,
            volumes=tuple((c.name, c.volume) for c in channels),
            previous_volumes=tuple((c.name, c.previous_volume) for c in channels),
        )

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def set_master_volume(self, volume: float) -> int:
        """
        Set master volume and re-apply every channel.

        Returns:
            The stored (clamped) volume
        """
        volume = clamp_volume(volume)
        with self._lock:
            self._state.master_volume = volume
            logger.debug(f"Master volume -> {volume}")
            self.emit(SIGNAL_MASTER_VOLUME_CHANGED, volume)

            self.apply_all()
        return volume

    def set_channel_volume(self, name: str, volume: float) -> int:
        """
        Set a channel's volume.

        Raising any channel above zero while muted releases the mute: the
        channel keeps the new volume and every other channel with a
        nonzero pre-mute snapshot is restored to it.

        Returns:
            The stored (clamped) volume
        """
        channel = self._channel(name)
        volume = clamp_volume(volume)
        with self._lock:
            channel.volume = volume
            logger.debug(f"Channel {name} volume -> {volume}")

            touched: List[str] = [name]
            if self._state.muted and volume > 0:
                touched.extend(self._release_mute(keep=name))

            self.emit(SIGNAL_CHANNEL_VOLUME_CHANGED, name, volume)
            self._apply_channels(touched)
        return volume

    def toggle_mute(self) -> bool:
        """
        Mute (snapshot volumes, zero them) or unmute (restore the snapshot).

        Returns:
            The new muted state
        """
        with self._lock:
            channels = self._state.channels.values()

            if self._state.muted:
                for channel in channels:
                    channel.volume = channel.previous_volume
                self._state.muted = False
            else:
                for channel in channels:
                    channel.previous_volume = channel.volume
                    channel.volume = 0
                self._state.muted = True

            muted = self._state.muted
            logger.debug(f"Muted -> {muted}")
            self.emit(SIGNAL_MUTE_CHANGED, muted)

            self.apply_all()
        return muted

    # -------------------------------------------------------------------------
    # Player control
    # -------------------------------------------------------------------------

    def apply_channel(self, name: str) -> float:
        """
        Push a channel's effective gain to its player.

        gain > 0 and silent  -> start_at_gain
        gain == 0            -> stop
        gain > 0 and playing -> set_gain (never restarts)

        Returns:
            The effective gain that was applied

        Raises:
            UnknownChannel: If the channel does not exist
            PlaybackFailure: If the player raised
        """
        with self._lock:
            gain = self.compute_effective_gain(name)
            player = self._players[name]
            action = "query"

            try:
                was_audible = player.is_audible()

                if gain > 0 and not was_audible:
                    action = "start"
                    player.start_at_gain(gain)
                    logger.debug(f"Channel {name} started at {gain:.4f}")
                    self.emit(SIGNAL_CHANNEL_STARTED, name, gain)
                elif gain == 0:
                    action = "stop"
                    player.stop()
                    if was_audible:
                        logger.debug(f"Channel {name} stopped")
                        self.emit(SIGNAL_CHANNEL_STOPPED, name)
                else:
                    action = "set_gain"
                    player.set_gain(gain)
                    self.emit(SIGNAL_CHANNEL_GAIN_CHANGED, name, gain)
            except Exception as e:
                logger.error(f"Channel {name} {action} failed: {e}")
                self.emit(SIGNAL_PLAYBACK_FAILED, name, e)
                raise PlaybackFailure(name, action, e) from e

        return gain

    def apply_all(self) -> None:
        """Apply every channel; the first failure is raised after all were tried."""
        self._apply_channels(self.channel_names)

    def stop_all(self) -> None:
        """Stop every player without touching stored volumes."""
        with self._lock:
            self._for_each(self.channel_names, self._stop_channel)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _channel(self, name: str) -> Channel:
        try:
            return self._state.channels[name]
        except KeyError:
            raise UnknownChannel(name) from None

    def _release_mute(self, keep: str) -> List[str]:
        self._state.muted = False
        restored = []

        for channel in self._state.channels.values():
            if channel.name != keep and channel.previous_volume != 0:
                channel.volume = channel.previous_volume
                restored.append(channel.name)

        logger.debug(f"Mute released by {keep}, restored {restored}")
        self.emit(SIGNAL_MUTE_CHANGED, False)
        for other in restored:
            self.emit(SIGNAL_CHANNEL_VOLUME_CHANGED, other, self._state.channels[other].volume)

        return restored

    def _stop_channel(self, name: str) -> None:
        try:
            self._players[name].stop()
        except Exception as e:
            logger.error(f"Channel {name} stop failed: {e}")
            self.emit(SIGNAL_PLAYBACK_FAILED, name, e)
            raise PlaybackFailure(name, "stop", e) from e

    def _apply_channels(self, names: Iterable[str]) -> None:
        self._for_each(names, self.apply_channel)

    def _for_each(self, names: Iterable[str], action: Callable[[str], object]) -> None:
        failures: List[PlaybackFailure] = []
        for name in names:
            try:
                action(name)
            except PlaybackFailure as e:
                failures.append(e)

        if failures:
            raise failures[0]
