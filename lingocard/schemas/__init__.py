"""
LingoCard Schemas - Pydantic models for lesson generation.

This module exports all schema classes for:
- Lesson: vocabulary, sentences, lesson content, generation requests
- State: pipeline view state and loading phases
- Payloads: normalized backend response kinds
"""

# Lesson schemas
from .lesson import (
    DifficultyLevel,
    ModelTier,
    Coordinates,
    Vocabulary,
    Sentence,
    LessonContent,
    LessonPayload,
    GenerationRequest,
)

# State schemas
from .state import (
    LoadingPhase,
    PipelineState,
)

# Payload schemas
from .payloads import (
    JsonPayload,
    TextPayload,
    ImagePayload,
    AudioPayload,
    ResponsePayload,
)

__all__ = [
    # Lesson
    'DifficultyLevel',
    'ModelTier',
    'Coordinates',
    'Vocabulary',
    'Sentence',
    'LessonContent',
    'LessonPayload',
    'GenerationRequest',
    # State
    'LoadingPhase',
    'PipelineState',
    # Payloads
    'JsonPayload',
    'TextPayload',
    'ImagePayload',
    'AudioPayload',
    'ResponsePayload',
]
