# ambience/audio/loop_player.py
"""
LoopPlayer - Endlessly looping file playback, one output stream per channel.
"""

from __future__ import annotations
from typing import Any, Callable, Optional
import logging
import os
import threading

import numpy as np
import soundfile as sf

from .player import ChannelPlayer

logger = logging.getLogger(__name__)

try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    # OSError: PortAudio library missing
    SOUNDDEVICE_AVAILABLE = False
    logger.warning("sounddevice not available. LoopPlayer needs a stream_factory.")

OUTPUT_CHANNELS = 2


class LoopPlayer(ChannelPlayer):
    """
    Looping ChannelPlayer backed by soundfile + sounddevice.

    The source is decoded lazily on the first start, so players can be
    created for every channel up front without touching the disk.

    Usage:
        player = LoopPlayer("sounds/rain.mp3")
        player.start_at_gain(0.25)
        player.set_gain(0.5)
        player.stop()
    """

    def __init__(
        self,
        source: Optional[str] = None,
        sample_rate: int = 44100,
        block_size: int = 512,
        stream_factory: Optional[Callable[..., Any]] = None,
    ):
        self.source = source
        self.sample_rate = sample_rate
        self.block_size = block_size
        self._stream_factory = stream_factory

        self._data: Optional[np.ndarray] = None  # (frames, 2) float32
        self._position = 0
        self._gain = 0.0
        self._stream = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    @property
    def gain(self) -> float:
        return self._gain

    @property
    def duration(self) -> float:
        if self._data is None:
            return 0.0
        return len(self._data) / self.sample_rate

    def load(self) -> None:
        """
        Decode the source file into memory.

        Raises:
            ValueError: If the player has no source
            FileNotFoundError: If the source does not exist
        """
        if not self.source:
            raise ValueError("LoopPlayer has no source to load")
        if not os.path.exists(self.source):
            raise FileNotFoundError(self.source)

        data, sr = sf.read(self.source, dtype='float32', always_2d=True)
        self.load_from_array(data, sr)
        logger.info(f"LoopPlayer: Loaded '{self.source}' ({self.duration:.2f}s)")

    def load_from_array(self, data: np.ndarray, sample_rate: int = None) -> None:
        """Use an in-memory buffer as the loop."""
        sr = sample_rate or self.sample_rate
        data = np.asarray(data)
        if data.dtype != np.float32:
            data = data.astype(np.float32)

        data = _to_stereo(data)
        if sr != self.sample_rate:
            data = _resample(data, sr, self.sample_rate)

        with self._lock:
            self._data = data
            self._position = 0

    # -------------------------------------------------------------------------
    # ChannelPlayer
    # -------------------------------------------------------------------------

    def is_audible(self) -> bool:
        stream = self._stream
        if stream is None:
            return False
        return bool(getattr(stream, 'active', True))

    def set_gain(self, gain: float) -> None:
        with self._lock:
            self._gain = max(0.0, min(1.0, float(gain)))

    def start_at_gain(self, gain: float) -> None:
        if self._data is None:
            self.load()

        self.set_gain(gain)

        if self._stream is not None:
            if self.is_audible():
                return
            # stream died underneath us (device lost, PortAudio abort)
            logger.warning(f"LoopPlayer[{self.source}]: stream inactive, reopening")
            self._close_stream()

        stream = self._open_stream()
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream

    def stop(self) -> None:
        self._close_stream()

        with self._lock:
            self._position = 0

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, num_frames: int) -> np.ndarray:
        """
        Produce the next block of the loop at the current gain.

        Returns:
            Stereo float32 array of shape (num_frames, 2)
        """
        output = np.zeros((num_frames, OUTPUT_CHANNELS), dtype=np.float32)

        with self._lock:
            data = self._data
            if data is None or len(data) == 0:
                return output

            total = len(data)
            written = 0
            while written < num_frames:
                to_copy = min(total - self._position, num_frames - written)
                output[written:written + to_copy] = data[self._position:self._position + to_copy]
                written += to_copy
                self._position = (self._position + to_copy) % total

            output *= self._gain

        return output

    def _audio_callback(self, outdata: np.ndarray, frames: int, time_info, status):
        """Audio callback - runs on the audio thread."""
        if status:
            logger.debug(f"LoopPlayer[{self.source}]: {status}")
        outdata[:] = self.render(frames)

    def _open_stream(self):
        factory = self._stream_factory
        if factory is None:
            if not SOUNDDEVICE_AVAILABLE:
                raise RuntimeError("sounddevice not available")
            factory = sd.OutputStream

        return factory(
            samplerate=self.sample_rate,
            blocksize=self.block_size,
            channels=OUTPUT_CHANNELS,
            dtype='float32',
            callback=self._audio_callback,
        )


def _to_stereo(data: np.ndarray) -> np.ndarray:
    if data.ndim == 1:
        return np.column_stack([data, data])
    if data.shape[1] == 1:
        return np.repeat(data, OUTPUT_CHANNELS, axis=1)
    return np.ascontiguousarray(data[:, :OUTPUT_CHANNELS])


def _resample(data: np.ndarray, src_rate: int, dst_rate: int) -> np.ndarray:
    """Simple linear resampling."""
    if src_rate == dst_rate or len(data) == 0:
        return data

    new_length = max(1, int(len(data) * dst_rate / src_rate))
    indices = np.linspace(0, len(data) - 1, new_length)
    result = np.zeros((new_length, data.shape[1]), dtype=np.float32)
    for ch in range(data.shape[1]):
        result[:, ch] = np.interp(indices, np.arange(len(data)), data[:, ch])
    return result
