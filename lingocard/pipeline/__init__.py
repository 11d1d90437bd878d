"""
LingoCard pipeline - view state and generation orchestration.

This module provides:
- StateStore: owner of the PipelineState snapshot and its transitions
- LessonPipeline: the multi-phase generation run
"""

from .store import StateStore, StateListener
from .orchestrator import (
    LessonPipeline,
    merge_image_prompt,
    GENERATION_FAILED_MESSAGE,
)

__all__ = [
    "StateStore",
    "StateListener",
    "LessonPipeline",
    "merge_image_prompt",
    "GENERATION_FAILED_MESSAGE",
]
