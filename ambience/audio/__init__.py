# ambience/audio/__init__.py
"""
Ambience Audio System
=====================

Channel volumes, master volume, mute, and looping playback.

Quick Start:
    from ambience.audio import ChannelMixer, LoopPlayer

    mixer = ChannelMixer({
        "Wind": LoopPlayer("sounds/wind.mp3"),
        "Rain": LoopPlayer("sounds/rain.mp3"),
    })
    mixer.set_channel_volume("Rain", 70)
    mixer.toggle_mute()
"""

from .channels import (
    Channel,
    ChannelName,
    MixerState,
    MixerSnapshot,
    DEFAULT_CHANNELS,
    clamp_volume,
)
from .player import ChannelPlayer
from .mixer import ChannelMixer
from .loop_player import LoopPlayer, SOUNDDEVICE_AVAILABLE

__all__ = [
    'Channel',
    'ChannelName',
    'MixerState',
    'MixerSnapshot',
    'DEFAULT_CHANNELS',
    'clamp_volume',
    'ChannelPlayer',
    'ChannelMixer',
    'LoopPlayer',
    'SOUNDDEVICE_AVAILABLE',
]
