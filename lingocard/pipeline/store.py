"""
StateStore - the single owner of PipelineState.

Every transition replaces the snapshot with a copy, so readers never see a
half-updated state. Each run gets a token from begin(); transitions carrying
a token from a superseded run are discarded.
"""

import logging
from typing import Callable, Optional

from lingocard.schemas import (
    GenerationRequest,
    LessonContent,
    LoadingPhase,
    PipelineState,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[PipelineState], None]


class StateStore:
    """Holds the current PipelineState and applies phase transitions."""

    def __init__(self, state: Optional[PipelineState] = None):
        self._state = state or PipelineState()
        self._generation = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def generation(self) -> int:
        """Token of the most recent run."""
        return self._generation

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def _publish(self, state: PipelineState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}", exc_info=True)

    def _apply(self, token: int, **update) -> bool:
        if not self.is_current(token):
            logger.info(f"Discarding update from superseded run {token} (current: {self._generation})")
            return False
        self._publish(self._state.model_copy(update=update))
        return True

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def begin(self, request: GenerationRequest) -> int:
        """Reset state for a new run and return its token."""
        self._generation += 1
        self._publish(PipelineState(
            topic=request.topic,
            difficulty=request.difficulty,
            model_tier=request.model_tier,
            is_loading=True,
            loading_phase=LoadingPhase.GENERATING_TEXT,
        ))
        return self._generation

    def enter_phase(self, token: int, phase: LoadingPhase) -> bool:
        return self._apply(token, loading_phase=phase)

    def content_ready(self, token: int, content: LessonContent) -> bool:
        """Store lesson text and move on to drawing the image."""
        return self._apply(token, content=content, loading_phase=LoadingPhase.DRAWING_IMAGE)

    def succeed(self, token: int, content: LessonContent, image_data_uri: Optional[str]) -> bool:
        return self._apply(
            token,
            is_loading=False,
            loading_phase=None,
            content=content,
            image_data_uri=image_data_uri,
            error=None,
        )

    def fail(self, token: int, message: str) -> bool:
        return self._apply(
            token,
            is_loading=False,
            loading_phase=None,
            content=None,
            image_data_uri=None,
            error=message,
        )
