"""
Pipeline state schema.

PipelineState is the single view state read by the presentation layer.
Snapshots are replaced, never mutated in place (see lingocard.pipeline.store).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .lesson import DifficultyLevel, LessonContent, ModelTier


class LoadingPhase(str, Enum):
    GENERATING_TEXT = "generating_text"
    DRAWING_IMAGE = "drawing_image"
    LOCATING_OBJECTS = "locating_objects"


class PipelineState(BaseModel):
    topic: str = ""
    difficulty: DifficultyLevel = DifficultyLevel.PRESCHOOL
    model_tier: ModelTier = ModelTier.FAST
    is_loading: bool = False
    loading_phase: Optional[LoadingPhase] = None
    content: Optional[LessonContent] = None
    image_data_uri: Optional[str] = None
    error: Optional[str] = None  # not exclusive with content
