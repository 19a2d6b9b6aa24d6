# ambience/core/signal.py
"""
SignalBridge - Routes mixer and timer events to listeners.

Emitters live on different threads: the TickLoop thread emits timer
signals while the caller's thread emits mixer signals. Handlers run on
the emitting thread.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import itertools
import logging
import threading

logger = logging.getLogger(__name__)

# =============================================================================
# Signal Names
# =============================================================================

# Mixer
SIGNAL_MASTER_VOLUME_CHANGED = 'master_volume_changed'    # (volume,)
SIGNAL_CHANNEL_VOLUME_CHANGED = 'channel_volume_changed'  # (name, volume)
SIGNAL_MUTE_CHANGED = 'mute_changed'                      # (muted,)
SIGNAL_CHANNEL_STARTED = 'channel_started'                # (name, gain)
SIGNAL_CHANNEL_STOPPED = 'channel_stopped'                # (name,)
SIGNAL_CHANNEL_GAIN_CHANGED = 'channel_gain_changed'      # (name, gain)
SIGNAL_PLAYBACK_FAILED = 'playback_failed'                # (name, error)

# Timer
SIGNAL_TIMER_STARTED = 'timer_started'      # (duration_seconds,)
SIGNAL_TIMER_PAUSED = 'timer_paused'        # (remaining_seconds,)
SIGNAL_TIMER_RESUMED = 'timer_resumed'      # (remaining_seconds,)
SIGNAL_TIMER_STOPPED = 'timer_stopped'      # (remaining_seconds,)
SIGNAL_TIMER_RESET = 'timer_reset'          # (duration_seconds,)
SIGNAL_TIMER_TICK = 'timer_tick'            # (remaining_seconds,)
SIGNAL_TIMER_COMPLETED = 'timer_completed'  # ()

Handler = Callable[..., None]


@dataclass
class Connection:
    """Returned by SignalBridge.connect; disconnecting twice is harmless."""
    signal: str
    handler_id: int
    bridge: Optional[SignalBridge] = None

    @property
    def connected(self) -> bool:
        return self.bridge is not None

    def disconnect(self) -> None:
        bridge, self.bridge = self.bridge, None
        if bridge is not None:
            bridge.disconnect(self)


class SignalBridge:
    """
    Thread-safe signal hub.

    emit() copies the handler list under the lock and calls the handlers
    outside it, so a handler may connect, disconnect or emit again. A
    handler removed while an emit is in flight still receives that emit,
    but no later ones.

    Usage:
        bridge = SignalBridge()
        conn = bridge.connect(SIGNAL_MUTE_CHANGED, lambda muted: print(muted))
        bridge.emit(SIGNAL_MUTE_CHANGED, True)
        conn.disconnect()
    """

    def __init__(self):
        self._handlers: Dict[str, Dict[int, Handler]] = {}
        self._ids = itertools.count()
        self._lock = threading.Lock()

    def connect(self, signal: str, handler: Handler) -> Connection:
        with self._lock:
            handler_id = next(self._ids)
            self._handlers.setdefault(signal, {})[handler_id] = handler
        return Connection(signal, handler_id, self)

    def disconnect(self, connection: Connection) -> None:
        with self._lock:
            handlers = self._handlers.get(connection.signal)
            if handlers is None:
                return
            handlers.pop(connection.handler_id, None)
            if not handlers:
                del self._handlers[connection.signal]

    def handler_count(self, signal: str) -> int:
        with self._lock:
            return len(self._handlers.get(signal, ()))

    def emit(self, signal: str, *args) -> None:
        with self._lock:
            handlers = list(self._handlers.get(signal, {}).values())

        for handler in handlers:
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Signal handler error [{signal}]")


class SignalDebugger:
    """Logs chosen signals at DEBUG level until detached."""

    def __init__(self, bridge: SignalBridge):
        self.bridge = bridge
        self._connections: Dict[str, Connection] = {}

    def watch(self, signal: str) -> None:
        if signal in self._connections:
            return

        def log(*args):
            logger.debug(f"SIGNAL: {signal}({', '.join(repr(a) for a in args)})")

        self._connections[signal] = self.bridge.connect(signal, log)

    def unwatch(self, signal: str) -> None:
        conn = self._connections.pop(signal, None)
        if conn is not None:
            conn.disconnect()

    def detach(self) -> None:
        for signal in list(self._connections):
            self.unwatch(signal)


class SignalEmitter:
    """Mixin for state machines that report changes on an optional bridge."""

    _bridge: Optional[SignalBridge] = None

    def bind_bridge(self, bridge: SignalBridge) -> None:
        self._bridge = bridge

    def emit(self, signal: str, *args) -> None:
        if self._bridge is not None:
            self._bridge.emit(signal, *args)
