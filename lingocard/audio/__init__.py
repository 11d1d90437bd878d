"""LingoCard audio - PCM decoding and playback."""

from .playback import (
    AudioBuffer,
    AudioOutput,
    decode_pcm16,
    get_output_device,
    play_pcm16,
)

__all__ = [
    "AudioBuffer",
    "AudioOutput",
    "decode_pcm16",
    "get_output_device",
    "play_pcm16",
]
