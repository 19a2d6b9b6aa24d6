# ambience/time/__init__.py
"""
Ambience Time System
====================

Countdown (sleep) timer and the tick loop that drives it.

Quick Start:
    from ambience.time import CountdownTimer, TickLoop

    timer = CountdownTimer()
    timer.register_on_complete(lambda: print("time's up"))
    timer.start(15 * 60)

    loop = TickLoop(timer)
    loop.start()
"""

from .countdown import (
    CountdownTimer,
    TimerState,
    TimerSnapshot,
    DEFAULT_DURATION_SECONDS,
    MAX_DURATION_SECONDS,
    normalize_duration,
    wall_clock_ms,
)
from .ticker import TickLoop, DEFAULT_TICK_INTERVAL

__all__ = [
    'CountdownTimer',
    'TimerState',
    'TimerSnapshot',
    'DEFAULT_DURATION_SECONDS',
    'MAX_DURATION_SECONDS',
    'normalize_duration',
    'wall_clock_ms',
    'TickLoop',
    'DEFAULT_TICK_INTERVAL',
]
