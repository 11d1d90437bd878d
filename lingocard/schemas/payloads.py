"""
Response payload schemas.

Each backend protocol is normalized into one of these payload kinds
(discriminated by ``kind``) before the client maps it onto a domain result.
"""

import base64
import binascii
import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


class JsonPayload(BaseModel):
    kind: Literal["json"] = "json"
    text: str


class TextPayload(BaseModel):
    """Descriptive text returned where binary data was expected."""
    kind: Literal["text"] = "text"
    text: str


class ImagePayload(BaseModel):
    kind: Literal["image"] = "image"
    data: bytes
    mime_type: str = "image/png"
    prompt: str = ""  # effective prompt that produced the image

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_uri(cls, uri: str) -> "ImagePayload":
        """
        Parse a ``data:<mime>;base64,<data>`` URI.

        Raises:
            ValueError: If the URI is malformed or the data is not base64
        """
        match = DATA_URI_PATTERN.match(uri.strip())
        if not match:
            raise ValueError("Not a base64 data URI")
        try:
            data = base64.b64decode(match.group("data"), validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 image data: {e}")
        return cls(data=data, mime_type=match.group("mime"))


class AudioPayload(BaseModel):
    """Raw little-endian 16-bit PCM."""
    kind: Literal["audio"] = "audio"
    pcm: bytes
    sample_rate: int = 24000
    channels: int = 1


ResponsePayload = Annotated[
    Union[JsonPayload, TextPayload, ImagePayload, AudioPayload],
    Field(discriminator="kind"),
]
