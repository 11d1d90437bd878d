"""Exceptions raised by the Gemini generation client."""

from typing import Optional


class GenerationError(Exception):
    """Raised when a generation step fails."""

    pass


class FatalGenerationError(GenerationError):
    """Raised when lesson text cannot be generated; no lesson without text."""

    pass


class DegradedGenerationError(GenerationError):
    """Raised when the scene image fails; the lesson continues text-only."""

    def __init__(self, message: str, prompt: Optional[str] = None):
        super().__init__(message)
        self.prompt = prompt
