"""
LLM response parsing and validation.

Handles JSON that arrives bare or wrapped in markdown code blocks, validates
the lesson structure, and merges detected object positions into vocabulary.
"""

import json
import logging
import re
from numbers import Real
from typing import Any, Optional

from pydantic import ValidationError

from lingocard.schemas import Coordinates, LessonPayload, Vocabulary

from .errors import FatalGenerationError

logger = logging.getLogger(__name__)

CODE_BLOCK_PATTERN = r'```(?:json)?\s*([\s\S]*?)```'


def extract_json_from_response(text: str) -> Any:
    """
    Extract JSON from an LLM response, handling markdown code blocks.

    Args:
        text: Raw LLM response

    Returns:
        Parsed JSON value

    Raises:
        ValueError: If no JSON can be extracted
    """
    text = text.strip()

    # Structured output usually comes back as bare JSON
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for match in re.findall(CODE_BLOCK_PATTERN, text):
        try:
            return json.loads(match.strip())
        except json.JSONDecodeError:
            continue

    # First balanced {...} object
    start = text.find('{')
    if start >= 0:
        brace_count = 0
        for i, char in enumerate(text[start:], start):
            if char == '{':
                brace_count += 1
            elif char == '}':
                brace_count -= 1
                if brace_count == 0:
                    try:
                        return json.loads(text[start:i + 1])
                    except json.JSONDecodeError:
                        break

    raise ValueError(f"Could not extract JSON from response: {text[:500]}...")


def parse_lesson_payload(text: Optional[str]) -> LessonPayload:
    """
    Parse the lesson text response.

    Raises:
        FatalGenerationError: If the response is empty, not JSON, or misses
            any of vocabulary / sentences / imagePrompt
    """
    if not text or not text.strip():
        raise FatalGenerationError("No response from AI")

    try:
        data = extract_json_from_response(text)
    except ValueError as e:
        raise FatalGenerationError(str(e)) from e

    if not isinstance(data, dict):
        raise FatalGenerationError(f"Expected a JSON object, got {type(data).__name__}")

    for field in ("vocabulary", "sentences", "imagePrompt"):
        if field not in data:
            raise FatalGenerationError(f"Response missing '{field}' field")

    try:
        return LessonPayload.model_validate(data)
    except ValidationError as e:
        raise FatalGenerationError(f"Invalid lesson structure: {e}") from e


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _coordinates_from(raw: Any) -> Optional[Coordinates]:
    if not isinstance(raw, dict):
        return None
    x, y = raw.get("x"), raw.get("y")
    if not (_is_number(x) and _is_number(y)):
        return None
    if not (0 <= x <= 100 and 0 <= y <= 100):
        return None
    return Coordinates(x=float(x), y=float(y))


def find_position(positions: dict[str, Any], word: str) -> Any:
    """Exact key first, then the first case-insensitive match."""
    value = positions.get(word)
    if value is not None:
        return value
    lowered = word.lower()
    for key, value in positions.items():
        if value is not None and key.lower() == lowered:
            return value
    return None


def merge_positions(vocabulary: list[Vocabulary], positions: Any) -> list[Vocabulary]:
    """
    Merge detected center points into vocabulary items.

    Items without a match, or whose match is not a pair of numbers within
    0-100, are returned unchanged.
    """
    if not isinstance(positions, dict):
        logger.warning(f"Position response is not an object: {type(positions).__name__}")
        return list(vocabulary)

    merged = []
    for vocab in vocabulary:
        coords = _coordinates_from(find_position(positions, vocab.word))
        if coords is None:
            merged.append(vocab)
        else:
            merged.append(vocab.model_copy(update={"coordinates": coords}))
    return merged
