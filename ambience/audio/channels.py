# ambience/audio/channels.py
"""
Channel - Per-channel volume bookkeeping and mixer state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple
import math

MIN_VOLUME = 0
MAX_VOLUME = 100

# master * channel, both on a 0-100 scale
GAIN_SCALE = MAX_VOLUME * MAX_VOLUME


class ChannelName:
    WIND = "Wind"
    FIRE = "Fire"
    RAIN = "Rain"
    WAVES = "Waves"


DEFAULT_CHANNELS = (
    ChannelName.WIND,
    ChannelName.FIRE,
    ChannelName.RAIN,
    ChannelName.WAVES,
)


def clamp_volume(value: float) -> int:
    """Clamp into [0, 100] and round to a whole volume step. NaN is silence."""
    if math.isnan(value):
        return MIN_VOLUME
    return int(round(max(MIN_VOLUME, min(MAX_VOLUME, value))))


@dataclass
class Channel:
    """One looping ambient source."""
    name: str
    volume: int = 0
    previous_volume: int = 0  # pre-mute snapshot


@dataclass
class MixerState:
    """Mutable state owned by a ChannelMixer."""
    master_volume: int = 50
    muted: bool = False
    channels: Dict[str, Channel] = field(default_factory=dict)


@dataclass(frozen=True)
class MixerSnapshot:
    """Immutable snapshot of mixer state."""
    master_volume: int
    muted: bool
    volumes: Tuple[Tuple[str, int], ...]
    previous_volumes: Tuple[Tuple[str, int], ...]

    def volume(self, name: str) -> int:
        return dict(self.volumes)[name]

    def previous_volume(self, name: str) -> int:
        return dict(self.previous_volumes)[name]

    @property
    def audible_channels(self) -> Tuple[str, ...]:
        if self.muted or self.master_volume == 0:
            return ()
        return tuple(name for name, volume in self.volumes if volume > 0)
