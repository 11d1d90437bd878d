"""
Tests for the generation pipeline and its state store.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from lingocard.config import IMAGE_PROMPT_BANNER
from lingocard.generation import DegradedGenerationError, FatalGenerationError, GeminiClient
from lingocard.pipeline import (
    GENERATION_FAILED_MESSAGE,
    LessonPipeline,
    StateStore,
    merge_image_prompt,
)
from lingocard.schemas import (
    Coordinates,
    DifficultyLevel,
    GenerationRequest,
    ImagePayload,
    LoadingPhase,
    ModelTier,
    PipelineState,
)


@pytest.fixture
def client(lesson):
    """GeminiClient double: text and image both succeed."""
    fake = MagicMock(spec=GeminiClient)
    fake.generate_lesson = AsyncMock(return_value=lesson)
    fake.generate_scene_image = AsyncMock(
        return_value=ImagePayload(data=b"PNG", mime_type="image/png", prompt="SCENE PROMPT")
    )
    fake.detect_positions = AsyncMock(side_effect=lambda image, vocabulary, tier: vocabulary)
    return fake


@pytest.fixture
def recorded():
    """A store plus the list of every state it published."""
    store = StateStore()
    states: list[PipelineState] = []
    store.add_listener(states.append)
    return store, states


class TestStateStore:

    def test_initial_state(self):
        state = StateStore().state
        assert state.is_loading is False
        assert state.content is None
        assert state.error is None
        assert state.image_data_uri is None

    def test_begin_resets_and_returns_token(self, lesson):
        store = StateStore(PipelineState(content=lesson, error="old", image_data_uri="data:x"))
        token = store.begin(GenerationRequest(topic="Zoo", difficulty=DifficultyLevel.K12))

        assert token == store.generation == 1
        assert store.state.topic == "Zoo"
        assert store.state.difficulty == DifficultyLevel.K12
        assert store.state.is_loading is True
        assert store.state.loading_phase == LoadingPhase.GENERATING_TEXT
        assert store.state.content is None
        assert store.state.error is None
        assert store.state.image_data_uri is None

    def test_transitions_replace_snapshot(self, lesson):
        store = StateStore()
        token = store.begin(GenerationRequest(topic="Kitchen"))
        before = store.state

        assert store.content_ready(token, lesson) is True

        assert store.state is not before
        assert before.content is None
        assert store.state.content == lesson
        assert store.state.loading_phase == LoadingPhase.DRAWING_IMAGE

    def test_succeed(self, lesson):
        store = StateStore()
        token = store.begin(GenerationRequest(topic="Kitchen"))
        store.succeed(token, lesson, "data:image/png;base64,AAAA")

        assert store.state.is_loading is False
        assert store.state.loading_phase is None
        assert store.state.image_data_uri == "data:image/png;base64,AAAA"

    def test_fail_clears_content(self, lesson):
        store = StateStore()
        token = store.begin(GenerationRequest(topic="Kitchen"))
        store.content_ready(token, lesson)
        store.fail(token, "boom")

        assert store.state.is_loading is False
        assert store.state.content is None
        assert store.state.error == "boom"

    def test_stale_token_is_discarded(self, lesson):
        store = StateStore()
        old = store.begin(GenerationRequest(topic="Kitchen"))
        new = store.begin(GenerationRequest(topic="Zoo"))

        assert store.is_current(new)
        assert not store.is_current(old)
        assert store.content_ready(old, lesson) is False
        assert store.fail(old, "late") is False
        assert store.state.topic == "Zoo"
        assert store.state.content is None
        assert store.state.error is None

    def test_listeners(self):
        store = StateStore()
        seen = []
        store.add_listener(seen.append)
        token = store.begin(GenerationRequest(topic="Kitchen"))
        store.enter_phase(token, LoadingPhase.DRAWING_IMAGE)
        store.remove_listener(seen.append)
        store.fail(token, "x")

        assert [s.loading_phase for s in seen] == [LoadingPhase.GENERATING_TEXT, LoadingPhase.DRAWING_IMAGE]

    def test_remove_unknown_listener(self):
        StateStore().remove_listener(print)

    def test_failing_listener_does_not_block_transition(self, lesson):
        store = StateStore()
        seen = []

        def broken(state):
            raise RuntimeError("widget gone")

        store.add_listener(broken)
        store.add_listener(seen.append)
        token = store.begin(GenerationRequest(topic="Kitchen"))

        assert store.content_ready(token, lesson) is True
        assert store.state.loading_phase == LoadingPhase.DRAWING_IMAGE
        assert len(seen) == 2


class TestMergeImagePrompt:

    def test_appends_banner(self, lesson):
        merged = merge_image_prompt(lesson, "SCENE")
        assert merged.full_prompt == "LESSON PROMPT\n\n--- IMAGE PROMPT ---\nSCENE"
        assert IMAGE_PROMPT_BANNER in merged.full_prompt
        assert lesson.full_prompt == "LESSON PROMPT"

    @pytest.mark.parametrize("prompt", [None, ""])
    def test_no_prompt(self, lesson, prompt):
        assert merge_image_prompt(lesson, prompt) is lesson

    def test_missing_full_prompt(self, lesson):
        bare = lesson.model_copy(update={"full_prompt": None})
        assert merge_image_prompt(bare, "SCENE").full_prompt == "\n\n--- IMAGE PROMPT ---\nSCENE"


class TestRunGeneration:

    @pytest.mark.asyncio
    async def test_full_success(self, client, recorded, lesson):
        store, states = recorded
        pipeline = LessonPipeline(client, store=store)

        state = await pipeline.run_generation("Kitchen", DifficultyLevel.PRESCHOOL, 4, ModelTier.FAST)

        assert state is pipeline.state
        assert state.is_loading is False
        assert state.error is None
        assert state.content.vocabulary == lesson.vocabulary
        assert state.content.full_prompt == f"LESSON PROMPT{IMAGE_PROMPT_BANNER}SCENE PROMPT"
        assert state.image_data_uri == "data:image/png;base64,UE5H"
        assert [s.loading_phase for s in states] == [
            LoadingPhase.GENERATING_TEXT,
            LoadingPhase.DRAWING_IMAGE,
            None,
        ]
        client.generate_lesson.assert_awaited_once_with("Kitchen", DifficultyLevel.PRESCHOOL, 4, ModelTier.FAST)
        client.detect_positions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failing_listener_still_finishes_run(self, client, lesson):
        store = StateStore()

        def broken(state):
            if state.loading_phase == LoadingPhase.DRAWING_IMAGE:
                raise RuntimeError("widget gone")

        store.add_listener(broken)

        state = await LessonPipeline(client, store=store).run_generation("Kitchen", word_count=4)

        assert state.is_loading is False
        assert state.loading_phase is None
        assert state.content.vocabulary == lesson.vocabulary
        assert state.image_data_uri is not None

    @pytest.mark.asyncio
    async def test_image_failure_keeps_text(self, client, recorded):
        store, states = recorded
        client.generate_scene_image.side_effect = DegradedGenerationError(
            "Model returned text: sorry...", prompt="SCENE PROMPT"
        )

        state = await LessonPipeline(client, store=store).run_generation("Kitchen", word_count=4)

        assert state.is_loading is False
        assert state.error is None
        assert state.image_data_uri is None
        assert len(state.content.vocabulary) == 4
        assert state.content.full_prompt.endswith("--- IMAGE PROMPT ---\nSCENE PROMPT")

    @pytest.mark.asyncio
    async def test_unexpected_image_error_keeps_text(self, client):
        client.generate_scene_image.side_effect = RuntimeError("quota")

        state = await LessonPipeline(client).run_generation("Kitchen", word_count=4)

        assert state.error is None
        assert state.image_data_uri is None
        assert state.content.full_prompt == "LESSON PROMPT"

    @pytest.mark.asyncio
    async def test_text_failure(self, client, recorded):
        store, states = recorded
        client.generate_lesson.side_effect = FatalGenerationError("No response from AI")

        state = await LessonPipeline(client, store=store).run_generation("Kitchen")

        assert state.is_loading is False
        assert state.content is None
        assert state.image_data_uri is None
        assert state.error == GENERATION_FAILED_MESSAGE
        client.generate_scene_image.assert_not_awaited()
        assert LoadingPhase.DRAWING_IMAGE not in [s.loading_phase for s in states]

    @pytest.mark.asyncio
    async def test_new_run_clears_previous_error(self, client):
        pipeline = LessonPipeline(client)
        client.generate_lesson.side_effect = FatalGenerationError("down")
        await pipeline.run_generation("Kitchen")
        assert pipeline.state.error == GENERATION_FAILED_MESSAGE

        client.generate_lesson.side_effect = None
        state = await pipeline.run_generation("Kitchen")
        assert state.error is None
        assert state.content is not None

    @pytest.mark.asyncio
    async def test_locate_phase(self, client, recorded, lesson):
        store, states = recorded
        located = [v.model_copy(update={"coordinates": Coordinates(x=30, y=60)}) for v in lesson.vocabulary]
        client.detect_positions.side_effect = None
        client.detect_positions.return_value = located

        state = await LessonPipeline(client, store=store, locate_objects=True).run_generation("Kitchen", word_count=4)

        assert state.content.vocabulary == located
        assert LoadingPhase.LOCATING_OBJECTS in [s.loading_phase for s in states]
        image = client.detect_positions.await_args.args[0]
        assert image.data == b"PNG"

    @pytest.mark.asyncio
    async def test_locate_skipped_without_image(self, client):
        client.generate_scene_image.side_effect = DegradedGenerationError("No image generated.", prompt="P")

        await LessonPipeline(client, locate_objects=True).run_generation("Kitchen")

        client.detect_positions.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("topic,word_count", [("   ", 10), ("Kitchen", 3), ("Kitchen", 16)])
    async def test_invalid_request_leaves_state(self, client, recorded, topic, word_count):
        store, states = recorded

        with pytest.raises(ValidationError):
            await LessonPipeline(client, store=store).run_generation(topic, word_count=word_count)

        assert states == []
        assert store.generation == 0
        client.generate_lesson.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_superseded_run_is_discarded(self, client, lesson):
        release = asyncio.Event()
        zoo = lesson.model_copy(update={"topic": "Zoo"})

        async def generate_lesson(topic, difficulty, word_count, model_tier):
            if topic == "Kitchen":
                await release.wait()
                return lesson
            return zoo

        client.generate_lesson.side_effect = generate_lesson
        pipeline = LessonPipeline(client)

        first = asyncio.create_task(pipeline.run_generation("Kitchen"))
        await asyncio.sleep(0)
        await pipeline.run_generation("Zoo")
        release.set()
        await first

        assert pipeline.state.topic == "Zoo"
        assert pipeline.state.content.topic == "Zoo"
        assert pipeline.state.is_loading is False
        assert client.generate_scene_image.await_count == 1
