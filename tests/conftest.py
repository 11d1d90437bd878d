"""Shared fixtures: sample lessons and fake Gemini responses."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types as genai_types

from lingocard.generation import GeminiClient, get_backend_profile
from lingocard.schemas import LessonContent, Sentence, Vocabulary


KITCHEN_WORDS = [
    ("pot", "pɒt", "锅"),
    ("kettle", "ˈketl", "水壶"),
    ("spoon", "spuːn", "勺子"),
    ("fridge", "frɪdʒ", "冰箱"),
]


@pytest.fixture
def vocabulary():
    return [Vocabulary(word=w, phonetic=p, translation=t) for w, p, t in KITCHEN_WORDS]


@pytest.fixture
def lesson(vocabulary):
    return LessonContent(
        topic="Kitchen",
        vocabulary=vocabulary,
        sentences=[
            Sentence(english="The pot is on the stove.", chinese="锅在炉子上。"),
            Sentence(english="Put the spoon in the fridge.", chinese="把勺子放进冰箱。"),
        ],
        image_prompt="A bright kitchen with a stove, a counter and a fridge.",
        full_prompt="LESSON PROMPT",
    )


@pytest.fixture
def lesson_json():
    return json.dumps({
        "vocabulary": [
            {"word": w, "phonetic": p, "translation": t} for w, p, t in KITCHEN_WORDS
        ],
        "sentences": [
            {"english": "The pot is on the stove.", "chinese": "锅在炉子上。"},
            {"english": "Put the spoon in the fridge.", "chinese": "把勺子放进冰箱。"},
        ],
        "imagePrompt": "A bright kitchen with a stove, a counter and a fridge.",
    }, ensure_ascii=False)


# -----------------------------------------------------------------------------
# Fake SDK responses (real google.genai types)
# -----------------------------------------------------------------------------

def _response(*parts: genai_types.Part) -> genai_types.GenerateContentResponse:
    return genai_types.GenerateContentResponse(
        candidates=[
            genai_types.Candidate(content=genai_types.Content(role="model", parts=list(parts)))
        ]
    )


@pytest.fixture
def text_response():
    def build(text: str) -> genai_types.GenerateContentResponse:
        return _response(genai_types.Part(text=text))
    return build


@pytest.fixture
def inline_response():
    def build(data: bytes, mime_type: str, text: str | None = None) -> genai_types.GenerateContentResponse:
        parts = []
        if text:
            parts.append(genai_types.Part(text=text))
        parts.append(genai_types.Part(inline_data=genai_types.Blob(data=data, mime_type=mime_type)))
        return _response(*parts)
    return build


@pytest.fixture
def images_response():
    def build(*images: bytes) -> genai_types.GenerateImagesResponse:
        return genai_types.GenerateImagesResponse(
            generated_images=[
                genai_types.GeneratedImage(image=genai_types.Image(image_bytes=data, mime_type="image/png"))
                for data in images
            ]
        )
    return build


@pytest.fixture
def empty_response():
    return genai_types.GenerateContentResponse(candidates=[])


# -----------------------------------------------------------------------------
# Clients
# -----------------------------------------------------------------------------

@pytest.fixture
def genai_client():
    """Stand-in for genai.Client exposing the async models API."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_images = AsyncMock()
    return client


@pytest.fixture
def gemini(genai_client):
    """GeminiClient on the google profile backed by the fake SDK client."""
    return GeminiClient(get_backend_profile("google"), client=genai_client)


@pytest.fixture
def proxy_gemini(genai_client):
    return GeminiClient(get_backend_profile("proxy"), client=genai_client)
