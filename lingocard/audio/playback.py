"""
Audio playback - decode raw PCM from speech synthesis and play it.

The output device is a process-wide singleton created on first use.
sounddevice is imported lazily so that decoding works on machines without
PortAudio.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from lingocard.config import TTS_CHANNELS, TTS_SAMPLE_RATE

logger = logging.getLogger(__name__)


@dataclass
class AudioBuffer:
    """Playable float32 samples shaped (frames, channels)."""
    samples: np.ndarray
    sample_rate: int

    @property
    def channels(self) -> int:
        return self.samples.shape[1]

    @property
    def frame_count(self) -> int:
        return self.samples.shape[0]

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frame_count / self.sample_rate


def decode_pcm16(
    pcm: bytes,
    sample_rate: int = TTS_SAMPLE_RATE,
    channels: int = TTS_CHANNELS,
) -> AudioBuffer:
    """
    Decode little-endian signed 16-bit PCM into an AudioBuffer.

    Interleaved samples are split per channel and scaled to [-1.0, 1.0).
    Bytes that do not complete a frame are dropped.

    Args:
        pcm: Raw PCM bytes
        sample_rate: Samples per second
        channels: Number of interleaved channels

    Returns:
        AudioBuffer with float32 samples

    Raises:
        ValueError: If sample_rate or channels is not positive
    """
    if channels < 1 or sample_rate < 1:
        raise ValueError("sample_rate and channels must be positive")

    frame_bytes = 2 * channels
    usable = len(pcm) - len(pcm) % frame_bytes
    data = np.frombuffer(pcm[:usable], dtype="<i2")
    samples = (data.astype(np.float32) / 32768.0).reshape(-1, channels)
    return AudioBuffer(samples=samples, sample_rate=sample_rate)


class AudioOutput:
    """Device output handle backed by sounddevice."""

    def __init__(self, sample_rate: int = TTS_SAMPLE_RATE):
        import sounddevice as sd

        self._sd = sd
        self.sample_rate = sample_rate
        logger.debug(f"Audio output ready ({sample_rate} Hz)")

    def play(self, buffer: AudioBuffer) -> None:
        """Start playback without blocking; a running clip is replaced."""
        self._sd.play(buffer.samples, samplerate=buffer.sample_rate, blocking=False)


_output_device: Optional[AudioOutput] = None
_output_lock = threading.Lock()


def get_output_device(sample_rate: int = TTS_SAMPLE_RATE) -> AudioOutput:
    """Return the shared AudioOutput, creating it on first call."""
    global _output_device
    with _output_lock:
        if _output_device is None:
            _output_device = AudioOutput(sample_rate)
        return _output_device


def play_pcm16(pcm: bytes, sample_rate: int = TTS_SAMPLE_RATE, channels: int = TTS_CHANNELS) -> AudioBuffer:
    """Decode PCM and play it on the shared output device."""
    buffer = decode_pcm16(pcm, sample_rate, channels)
    get_output_device(sample_rate).play(buffer)
    return buffer
