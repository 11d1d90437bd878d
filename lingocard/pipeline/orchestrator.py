"""
LessonPipeline - runs one lesson generation end to end.

Phases:
1. generating_text   - lesson text; failure ends the run with an error
2. drawing_image     - scene image; failure is absorbed (text-only lesson)
3. locating_objects  - optional; detected coordinates for the labels

The image prompt is appended to content.full_prompt whenever it was built,
whether or not an image came back.
"""

import logging
from typing import Optional

from lingocard.config import DEFAULT_WORD_COUNT, IMAGE_PROMPT_BANNER
from lingocard.generation import DegradedGenerationError, GeminiClient
from lingocard.schemas import (
    DifficultyLevel,
    GenerationRequest,
    ImagePayload,
    LessonContent,
    LoadingPhase,
    ModelTier,
    PipelineState,
)

from .store import StateStore

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate content. Please try again."


def merge_image_prompt(content: LessonContent, image_prompt: Optional[str]) -> LessonContent:
    """Append the image prompt to full_prompt under the IMAGE PROMPT banner."""
    if not image_prompt:
        return content
    full_prompt = f"{content.full_prompt or ''}{IMAGE_PROMPT_BANNER}{image_prompt}"
    return content.model_copy(update={"full_prompt": full_prompt})


class LessonPipeline:
    """
    Drive the generation phases and publish state through a StateStore.

    A second run started while one is in flight supersedes it: the older
    run's remaining results are discarded.
    """

    def __init__(
        self,
        client: GeminiClient,
        store: Optional[StateStore] = None,
        locate_objects: bool = False,
    ):
        """
        Initialize the pipeline.

        Args:
            client: GeminiClient used for every phase
            store: StateStore to publish to (a new one by default)
            locate_objects: Run object-position detection after the image
        """
        self.client = client
        self.store = store or StateStore()
        self.locate_objects = locate_objects

    @property
    def state(self) -> PipelineState:
        return self.store.state

    async def run_generation(
        self,
        topic: str,
        difficulty: DifficultyLevel = DifficultyLevel.PRESCHOOL,
        word_count: int = DEFAULT_WORD_COUNT,
        model_tier: ModelTier = ModelTier.FAST,
    ) -> PipelineState:
        """
        Generate one lesson.

        Returns:
            The terminal PipelineState (or the current state if this run was
            superseded by a newer one)

        Raises:
            pydantic.ValidationError: If the request is invalid (blank topic,
                word count outside 4-15); state is left untouched
        """
        request = GenerationRequest(
            topic=topic,
            difficulty=difficulty,
            word_count=word_count,
            model_tier=model_tier,
        )
        token = self.store.begin(request)
        logger.info(
            f"Run {token}: '{request.topic}' ({request.difficulty.value}, "
            f"{request.word_count} words, {request.model_tier.value})"
        )

        # Phase 1: lesson text
        try:
            content = await self.client.generate_lesson(
                request.topic,
                request.difficulty,
                request.word_count,
                request.model_tier,
            )
        except Exception as e:
            logger.error(f"Run {token}: generation failed: {e}", exc_info=True)
            self.store.fail(token, GENERATION_FAILED_MESSAGE)
            return self.store.state

        if not self.store.content_ready(token, content):
            return self.store.state

        # Phase 2: scene image
        image: Optional[ImagePayload] = None
        image_prompt: Optional[str] = None
        try:
            image = await self.client.generate_scene_image(
                content.topic,
                content.image_prompt,
                content.vocabulary,
                request.model_tier,
            )
            image_prompt = image.prompt
        except DegradedGenerationError as e:
            logger.warning(f"Run {token}: image generation failed, proceeding with text only: {e}")
            image_prompt = e.prompt
        except Exception as e:
            logger.warning(f"Run {token}: image step error, proceeding with text only: {e}", exc_info=True)

        # Phase 3 (optional): object positions
        vocabulary = content.vocabulary
        if self.locate_objects and image is not None:
            if not self.store.enter_phase(token, LoadingPhase.LOCATING_OBJECTS):
                return self.store.state
            vocabulary = await self.client.detect_positions(image, vocabulary, request.model_tier)

        final = merge_image_prompt(content, image_prompt).model_copy(update={"vocabulary": vocabulary})
        image_data_uri = image.to_data_uri() if image is not None else None

        if self.store.succeed(token, final, image_data_uri):
            logger.info(
                f"Run {token}: done ({len(final.vocabulary)} words, "
                f"image: {'yes' if image_data_uri else 'no'})"
            )
        return self.store.state
