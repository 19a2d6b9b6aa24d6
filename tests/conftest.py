"""
Shared pytest fixtures.

Tests use test doubles (a recording player, a manual clock) so no audio
device or sound files are needed.
"""

import pytest

from ambience.audio import ChannelMixer, ChannelPlayer, DEFAULT_CHANNELS
from ambience.core.signal import SignalBridge
from ambience.time import CountdownTimer

T0_MS = 1_700_000_000_000.0


class RecordingPlayer(ChannelPlayer):
    """ChannelPlayer that records calls instead of producing sound."""

    def __init__(self):
        self.playing = False
        self.gain = 0.0
        self.calls = []
        self.fail_on = set()

    def _check(self, action):
        if action in self.fail_on:
            raise RuntimeError(f"{action} refused")

    def is_audible(self):
        return self.playing

    def set_gain(self, gain):
        self._check("set_gain")
        self.gain = gain
        self.calls.append(("set_gain", gain))

    def start_at_gain(self, gain):
        self._check("start")
        self.playing = True
        self.gain = gain
        self.calls.append(("start", gain))

    def stop(self):
        self._check("stop")
        self.playing = False
        self.calls.append(("stop",))

    def count(self, action):
        return sum(1 for call in self.calls if call[0] == action)


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=T0_MS):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class SignalRecorder:
    """Collects (signal, args) pairs from a bridge."""

    def __init__(self, bridge, *signals):
        self.events = []
        for signal in signals:
            bridge.connect(signal, self._handler(signal))

    def _handler(self, signal):
        def record(*args):
            self.events.append((signal, args))
        return record

    def of(self, signal):
        return [args for sig, args in self.events if sig == signal]


@pytest.fixture
def players():
    """One recording player per default channel."""
    return {name: RecordingPlayer() for name in DEFAULT_CHANNELS}


@pytest.fixture
def bridge():
    return SignalBridge()


@pytest.fixture
def mixer(players, bridge):
    return ChannelMixer(players, bridge=bridge)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timer(clock, bridge):
    return CountdownTimer(clock=clock, bridge=bridge)


@pytest.fixture
def recorder_factory(bridge):
    def make(*signals):
        return SignalRecorder(bridge, *signals)
    return make


@pytest.fixture
def player_factory():
    return RecordingPlayer
