"""
LingoCard generation - Gemini client and response handling.

This module provides:
- GeminiClient for lesson text, scene images, object positions and speech
- Backend profiles (credentials, endpoints, model tables)
- Protocol adapters and JSON parsing helpers
- The generation error taxonomy
"""

from .errors import (
    GenerationError,
    FatalGenerationError,
    DegradedGenerationError,
)

from .profiles import (
    ModelTable,
    BackendProfile,
    BACKEND_PROFILES,
    get_backend_profile,
    uses_generated_images,
)

from .parsing import (
    extract_json_from_response,
    parse_lesson_payload,
    find_position,
    merge_positions,
)

from .adapters import (
    response_text,
    adapt_json,
    adapt_generated_images,
    adapt_inline_content,
    adapt_speech,
)

from .client import (
    GeminiClient,
    build_lesson_prompt,
    build_scene_prompt,
    build_locate_prompt,
    lesson_response_schema,
)

__all__ = [
    # Errors
    "GenerationError",
    "FatalGenerationError",
    "DegradedGenerationError",
    # Profiles
    "ModelTable",
    "BackendProfile",
    "BACKEND_PROFILES",
    "get_backend_profile",
    "uses_generated_images",
    # Parsing
    "extract_json_from_response",
    "parse_lesson_payload",
    "find_position",
    "merge_positions",
    # Adapters
    "response_text",
    "adapt_json",
    "adapt_generated_images",
    "adapt_inline_content",
    "adapt_speech",
    # Client
    "GeminiClient",
    "build_lesson_prompt",
    "build_scene_prompt",
    "build_locate_prompt",
    "lesson_response_schema",
]
