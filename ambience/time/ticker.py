# ambience/time/ticker.py
"""
Tick loop: background thread that drives a CountdownTimer.

One thread means at most one tick in flight, so completion cannot double-fire.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional

from .countdown import CountdownTimer, Clock

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.1


class TickLoop:
    """
    Calls timer.tick() every `interval` seconds while started.
    Ticks on an idle timer are no-ops, so the loop can run for the whole session.
    """

    def __init__(self, timer: CountdownTimer, interval: float = DEFAULT_TICK_INTERVAL,
                 clock: Optional[Clock] = None):
        self.timer = timer
        self.interval = interval
        self._clock = clock
        self._thread: Optional[threading.Thread] = None
        self._wake = threading.Event()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start background tick thread."""
        if self._running:
            return
        self._running = True
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="ambience-tick", daemon=True)
        self._thread.start()
        logger.info(f"Tick loop started ({self.interval * 1000:.0f}ms)")

    def stop(self) -> None:
        """Stop background thread."""
        if not self._running:
            return
        self._running = False
        self._wake.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self._thread = None
        logger.info("Tick loop stopped")

    def tick_once(self) -> int:
        """One synchronous tick."""
        now = self._clock() if self._clock else None
        return self.timer.tick(now)

    def _run(self) -> None:
        while self._running:
            try:
                self.tick_once()
            except Exception:
                logger.exception("Timer tick failed")
            self._wake.wait(self.interval)
