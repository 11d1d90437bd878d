"""
Lesson content schemas for LingoCard.

Defines Pydantic models for:
- Vocabulary items with optional detected coordinates
- Example sentences
- Lesson content produced by the text step
- Generation requests (topic, difficulty, word count, model tier)
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lingocard.config import DEFAULT_WORD_COUNT, MAX_WORD_COUNT, MIN_WORD_COUNT


class DifficultyLevel(str, Enum):
    PRESCHOOL = "Preschool"
    K12 = "K12"
    CET4 = "CET-4"
    CET6 = "CET-6"
    TOEFL = "TOEFL"
    IELTS = "IELTS"
    PROFESSIONAL = "Professional"


class ModelTier(str, Enum):
    FAST = "fast"
    BEST = "best"


# -----------------------------------------------------------------------------
# Vocabulary and sentences
# -----------------------------------------------------------------------------

class Coordinates(BaseModel):
    """Object center as percentages of image width/height, origin top-left."""
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)


class Vocabulary(BaseModel):
    word: str
    phonetic: str            # IPA transcription
    translation: str
    coordinates: Optional[Coordinates] = None  # only set by object detection


class Sentence(BaseModel):
    model_config = ConfigDict(frozen=True)

    english: str
    chinese: str


# -----------------------------------------------------------------------------
# Lesson content
# -----------------------------------------------------------------------------

class LessonContent(BaseModel):
    """
    One generated lesson.

    Created from the text step response; later enriched with the image
    prompt (full_prompt) and, optionally, detected coordinates.
    """
    topic: str
    vocabulary: list[Vocabulary]   # display order
    sentences: list[Sentence]
    image_prompt: str
    full_prompt: Optional[str] = None  # exact prompts issued, for copying/debugging


class LessonPayload(BaseModel):
    """Structured response of the lesson text step (JSON keys as requested)."""
    model_config = ConfigDict(populate_by_name=True)

    vocabulary: list[Vocabulary]
    sentences: list[Sentence]
    image_prompt: str = Field(..., alias="imagePrompt")


# -----------------------------------------------------------------------------
# Generation request
# -----------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    topic: str
    difficulty: DifficultyLevel = DifficultyLevel.PRESCHOOL
    word_count: int = Field(default=DEFAULT_WORD_COUNT, ge=MIN_WORD_COUNT, le=MAX_WORD_COUNT)
    model_tier: ModelTier = ModelTier.FAST

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Topic must not be empty")
        return v
