"""
LingoCard Viewer - Rendering components for the lesson card.

This module provides:
- Label layout (detected coordinates or fallback grid)
- Lesson card HTML with labels over the scene image
- Loading captions per pipeline phase
"""

from .layout import (
    LabelPosition,
    fallback_position,
    has_detected_position,
    compute_label_positions,
)

from .card import (
    get_card_css,
    get_loading_caption,
    render_label,
    render_labels,
    render_scene,
    render_sentence,
    render_sentences,
    render_lesson_card,
    LOADING_CAPTIONS,
    IMAGE_UNAVAILABLE_TEXT,
)

__all__ = [
    # Layout
    "LabelPosition",
    "fallback_position",
    "has_detected_position",
    "compute_label_positions",
    # Card
    "get_card_css",
    "get_loading_caption",
    "render_label",
    "render_labels",
    "render_scene",
    "render_sentence",
    "render_sentences",
    "render_lesson_card",
    "LOADING_CAPTIONS",
    "IMAGE_UNAVAILABLE_TEXT",
]
