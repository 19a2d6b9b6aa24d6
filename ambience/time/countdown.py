# ambience/time/countdown.py
"""
CountdownTimer - Sleep-timer state and control.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import math
import threading
import time

from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_TIMER_STARTED, SIGNAL_TIMER_PAUSED, SIGNAL_TIMER_RESUMED,
    SIGNAL_TIMER_STOPPED, SIGNAL_TIMER_RESET, SIGNAL_TIMER_TICK,
    SIGNAL_TIMER_COMPLETED,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 3000
MS_PER_SECOND = 1000
MAX_DURATION_SECONDS = 7 * 24 * 60 * 60

Clock = Callable[[], float]
CompleteCallback = Callable[[], None]


def wall_clock_ms() -> float:
    """Wall-clock time in milliseconds."""
    return time.time() * MS_PER_SECOND


def normalize_duration(seconds: float) -> int:
    """Whole seconds in [0, one week]. Zero means already expired; NaN counts as zero."""
    if math.isnan(seconds):
        return 0
    return int(max(0, min(MAX_DURATION_SECONDS, seconds)))


@dataclass
class TimerState:
    """Mutable state owned by a CountdownTimer."""
    duration_seconds: int = DEFAULT_DURATION_SECONDS
    start_timestamp: Optional[float] = None  # ms; None once stopped
    running: bool = False
    remaining_seconds: int = DEFAULT_DURATION_SECONDS


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable snapshot of timer state."""
    duration_seconds: int
    remaining_seconds: int
    running: bool
    start_timestamp: Optional[float]

    @property
    def elapsed_seconds(self) -> int:
        return self.duration_seconds - self.remaining_seconds

    @property
    def progress(self) -> float:
        if self.duration_seconds == 0:
            return 1.0
        return self.elapsed_seconds / self.duration_seconds

    @property
    def is_paused(self) -> bool:
        return (not self.running and self.start_timestamp is not None
                and self.remaining_seconds > 0)

    @property
    def is_expired(self) -> bool:
        return not self.running and self.remaining_seconds == 0


class CountdownTimer(SignalEmitter):
    """
    Counts a duration down against a millisecond clock.

    tick() is meant to be driven by a periodic scheduler (see TickLoop).
    The registered completion callback fires once per expiry.

    Usage:
        timer = CountdownTimer()
        timer.register_on_complete(lambda: print("done"))
        timer.start(600)
        ...
        timer.tick()   # from the scheduler, every ~100ms
    """

    def __init__(
        self,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        clock: Optional[Clock] = None,
        bridge: Optional[SignalBridge] = None,
    ):
        self.default_duration = normalize_duration(duration_seconds)
        self._state = TimerState(
            duration_seconds=self.default_duration,
            remaining_seconds=self.default_duration,
        )
        self._clock: Clock = clock or wall_clock_ms
        self._on_complete: Optional[CompleteCallback] = None
        self._lock = threading.RLock()

        if bridge is not None:
            self.bind_bridge(bridge)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def duration_seconds(self) -> int:
        return self._state.duration_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def start_timestamp(self) -> Optional[float]:
        return self._state.start_timestamp

    @property
    def is_paused(self) -> bool:
        return self.snapshot().is_paused

    @property
    def is_expired(self) -> bool:
        return self.snapshot().is_expired

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            return TimerSnapshot(
                duration_seconds=self._state.duration_seconds,
                remaining_seconds=self._state.remaining_seconds,
                running=self._state.running,
                start_timestamp=self._state.start_timestamp,
            )

    def format_remaining(self) -> str:
        minutes, secs = divmod(self._state.remaining_seconds, 60)
        return f"{minutes:02d}:{secs:02d}"

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def start(self, duration_seconds: Optional[float] = None, now: Optional[float] = None) -> None:
        """
        Start a new run, replacing any previous one.

        Args:
            duration_seconds: Length of the run; defaults to the current duration
            now: Clock value in ms; defaults to the timer's clock
        """
        with self._lock:
            if duration_seconds is None:
                duration_seconds = self._state.duration_seconds
            duration = normalize_duration(duration_seconds)

            self._state.duration_seconds = duration
            self._state.start_timestamp = self._now(now)
            self._state.remaining_seconds = duration
            self._state.running = True

        logger.debug(f"Timer started: {duration}s")
        self.emit(SIGNAL_TIMER_STARTED, duration)

    def pause(self) -> None:
        """Freeze remaining time. The start reference is kept."""
        with self._lock:
            if not self._state.running:
                return
            self._state.running = False
            remaining = self._state.remaining_seconds

        logger.debug(f"Timer paused at {remaining}s")
        self.emit(SIGNAL_TIMER_PAUSED, remaining)

    def resume(self, now: Optional[float] = None) -> None:
        """
        Continue from the frozen remaining time.

        The start reference is rebuilt as now - elapsed, so elapsed time is
        neither lost nor counted twice.
        """
        with self._lock:
            if self._state.running:
                return
            if self._state.remaining_seconds <= 0:
                logger.warning("Timer resume ignored: no time remaining")
                return

            elapsed = self._state.duration_seconds - self._state.remaining_seconds
            self._state.start_timestamp = self._now(now) - elapsed * MS_PER_SECOND
            self._state.running = True
            remaining = self._state.remaining_seconds

        logger.debug(f"Timer resumed at {remaining}s")
        self.emit(SIGNAL_TIMER_RESUMED, remaining)

    def stop(self) -> None:
        """Stop and drop the start reference."""
        with self._lock:
            self._state.running = False
            self._state.start_timestamp = None
            remaining = self._state.remaining_seconds

        logger.debug(f"Timer stopped at {remaining}s")
        self.emit(SIGNAL_TIMER_STOPPED, remaining)

    def reset(self, new_duration: Optional[float] = None) -> None:
        """Return to idle with a full duration (default: the configured one)."""
        with self._lock:
            if new_duration is None:
                new_duration = self.default_duration
            duration = normalize_duration(new_duration)

            self._state.running = False
            self._state.start_timestamp = None
            self._state.duration_seconds = duration
            self._state.remaining_seconds = duration

        logger.debug(f"Timer reset to {duration}s")
        self.emit(SIGNAL_TIMER_RESET, duration)

    def register_on_complete(self, callback: Optional[CompleteCallback]) -> None:
        """Set the single completion callback. None clears it."""
        with self._lock:
            self._on_complete = callback

    # -------------------------------------------------------------------------
    # Advance
    # -------------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> int:
        """
        Recompute remaining time; fire completion on reaching zero.

        Args:
            now: Clock value in ms; defaults to the timer's clock

        Returns:
            Remaining whole seconds
        """
        with self._lock:
            state = self._state
            if not state.running or state.start_timestamp is None:
                return state.remaining_seconds

            elapsed = max(0, math.floor((self._now(now) - state.start_timestamp) / MS_PER_SECOND))
            remaining = max(0, state.duration_seconds - elapsed)
            changed = remaining != state.remaining_seconds
            state.remaining_seconds = remaining

            completed = remaining <= 0
            if completed:
                state.running = False
            callback = self._on_complete

        if changed:
            self.emit(SIGNAL_TIMER_TICK, remaining)

        if completed:
            logger.info("Timer completed")
            try:
                if callback is not None:
                    callback()
            finally:
                self.emit(SIGNAL_TIMER_COMPLETED)

        return remaining

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now
