"""
Protocol adapters - normalize SDK responses into payload kinds.

One adapter per backend protocol:
- adapt_json: structured text generation
- adapt_generated_images: list-of-generated-images protocol (Imagen)
- adapt_inline_content: inline parts protocol (Gemini image models)
- adapt_speech: inline PCM audio
"""

import re
from typing import Optional, Union

from google.genai import types as genai_types

from lingocard.config import TTS_CHANNELS, TTS_SAMPLE_RATE
from lingocard.schemas import AudioPayload, ImagePayload, JsonPayload, TextPayload


def _first_parts(response: genai_types.GenerateContentResponse) -> list[genai_types.Part]:
    if response.candidates and len(response.candidates) > 0:
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            return list(candidate.content.parts)
    return []


def response_text(response: genai_types.GenerateContentResponse) -> Optional[str]:
    """Concatenated text parts of the first candidate."""
    texts = [part.text for part in _first_parts(response) if part.text]
    return "".join(texts) if texts else None


def adapt_json(response: genai_types.GenerateContentResponse) -> Optional[JsonPayload]:
    text = response_text(response)
    if not text:
        return None
    return JsonPayload(text=text)


def adapt_generated_images(
    response: genai_types.GenerateImagesResponse,
) -> Optional[ImagePayload]:
    """Decode the first generated image, if any."""
    if not response.generated_images:
        return None
    image = response.generated_images[0].image
    if image is None or not image.image_bytes:
        return None
    return ImagePayload(data=image.image_bytes, mime_type=image.mime_type or "image/png")


def adapt_inline_content(
    response: genai_types.GenerateContentResponse,
) -> Optional[Union[ImagePayload, TextPayload]]:
    """
    Scan response parts for an embedded image.

    Returns a TextPayload when the model answered with text only, and None
    when there was no candidate content at all.
    """
    parts = _first_parts(response)
    for part in parts:
        if part.inline_data and part.inline_data.data:
            return ImagePayload(
                data=part.inline_data.data,
                mime_type=part.inline_data.mime_type or "image/png",
            )
    for part in parts:
        if part.text:
            return TextPayload(text=part.text)
    return None


def sample_rate_from_mime(mime_type: Optional[str]) -> int:
    """Read "rate=" from e.g. "audio/L16;codec=pcm;rate=24000"."""
    match = re.search(r"rate=(\d+)", mime_type or "")
    return int(match.group(1)) if match else TTS_SAMPLE_RATE


def adapt_speech(response: genai_types.GenerateContentResponse) -> Optional[AudioPayload]:
    parts = _first_parts(response)
    if not parts or not parts[0].inline_data or not parts[0].inline_data.data:
        return None
    return AudioPayload(
        pcm=parts[0].inline_data.data,
        sample_rate=sample_rate_from_mime(parts[0].inline_data.mime_type),
        channels=TTS_CHANNELS,
    )
