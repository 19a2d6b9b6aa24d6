# ambience/core/__init__.py
"""
Core signal routing and error types.

AmbienceManager lives in ambience.core.manager and is re-exported from the
top-level package; it is not imported here because it depends on the audio
and time packages, which depend on this one.
"""

from .signal import (
    SignalBridge,
    SignalDebugger,
    SignalEmitter,
    Connection,
)
from .errors import AmbienceError, UnknownChannel, PlaybackFailure

__all__ = [
    'SignalBridge',
    'SignalDebugger',
    'SignalEmitter',
    'Connection',
    'AmbienceError',
    'UnknownChannel',
    'PlaybackFailure',
]
