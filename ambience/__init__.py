# ambience/__init__.py
"""
Ambience Engine - Looping ambient channels with a master mix and a sleep timer.

Core components:
- AmbienceManager: Top-level coordinator
- ChannelMixer: Per-channel volume, master volume and mute
- LoopPlayer: Looping file playback for one channel
- CountdownTimer: Sleep timer with a single completion callback
- TickLoop: Periodic driver for the timer
- SignalBridge: Event routing system
"""

from .core import (
    SignalBridge,
    SignalDebugger,
    SignalEmitter,
    AmbienceError,
    UnknownChannel,
    PlaybackFailure,
)

from .audio import (
    ChannelMixer,
    ChannelPlayer,
    ChannelName,
    LoopPlayer,
    MixerSnapshot,
    DEFAULT_CHANNELS,
)

from .time import (
    CountdownTimer,
    TimerSnapshot,
    TickLoop,
)

from .core.manager import AmbienceManager, AmbienceManagerConfig

__version__ = '0.1.0'

__all__ = [
    # Core
    'AmbienceManager',
    'AmbienceManagerConfig',
    'SignalBridge',
    'SignalDebugger',
    'SignalEmitter',
    'AmbienceError',
    'UnknownChannel',
    'PlaybackFailure',

    # Audio
    'ChannelMixer',
    'ChannelPlayer',
    'ChannelName',
    'LoopPlayer',
    'MixerSnapshot',
    'DEFAULT_CHANNELS',

    # Time
    'CountdownTimer',
    'TimerSnapshot',
    'TickLoop',
]
