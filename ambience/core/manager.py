# ambience/core/manager.py
"""
AmbienceManager - Top-level coordinator.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
import logging
import os

from .signal import SignalBridge, SIGNAL_TIMER_COMPLETED
from ..audio.channels import ChannelName
from ..audio.loop_player import LoopPlayer
from ..audio.mixer import ChannelMixer
from ..audio.player import ChannelPlayer
from ..time.countdown import CountdownTimer, Clock, DEFAULT_DURATION_SECONDS
from ..time.ticker import TickLoop, DEFAULT_TICK_INTERVAL

logger = logging.getLogger(__name__)

PlayerFactory = Callable[[str, str], ChannelPlayer]


def _default_channels() -> Dict[str, str]:
    return {
        ChannelName.WIND: "sounds/wind.mp3",
        ChannelName.FIRE: "sounds/fire.mp3",
        ChannelName.RAIN: "sounds/rain.mp3",
        ChannelName.WAVES: "sounds/wave.mp3",
    }


@dataclass
class AmbienceManagerConfig:
    channels: Dict[str, str] = field(default_factory=_default_channels)
    sounds_root: str = ""
    master_volume: int = 50
    timer_duration_seconds: int = DEFAULT_DURATION_SECONDS
    tick_interval: float = DEFAULT_TICK_INTERVAL
    mute_on_complete: bool = True


def loop_player_factory(name: str, locator: str) -> ChannelPlayer:
    return LoopPlayer(locator)


class AmbienceManager:
    """Owns one mixer, one timer, its tick loop and the signal bridge."""

    def __init__(
        self,
        config: AmbienceManagerConfig = None,
        player_factory: Optional[PlayerFactory] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or AmbienceManagerConfig()
        factory = player_factory or loop_player_factory

        self.bridge = SignalBridge()

        players = {
            name: factory(name, self._resolve(locator))
            for name, locator in self.config.channels.items()
        }
        self.mixer = ChannelMixer(players, master_volume=self.config.master_volume,
                                  bridge=self.bridge)
        self.timer = CountdownTimer(self.config.timer_duration_seconds, clock=clock,
                                    bridge=self.bridge)
        self.ticker = TickLoop(self.timer, interval=self.config.tick_interval, clock=clock)

        self._connect_signals()

    def _resolve(self, locator: str) -> str:
        if self.config.sounds_root and not os.path.isabs(locator):
            return os.path.join(self.config.sounds_root, locator)
        return locator

    def _connect_signals(self):
        self.bridge.connect(SIGNAL_TIMER_COMPLETED, self._on_timer_completed)

    def _on_timer_completed(self):
        if self.config.mute_on_complete and not self.mixer.muted:
            logger.info("Timer completed, muting")
            self.mixer.toggle_mute()

    def start(self):
        self.ticker.start()

    def shutdown(self):
        self.ticker.stop()
        self.mixer.stop_all()

    def __enter__(self) -> 'AmbienceManager':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
