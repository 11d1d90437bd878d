"""
Gemini client - lesson text, scene image, object positions and speech.

One client serves every backend profile; the profile decides credentials,
endpoint, model identifiers per tier and the scene prompt variant.

Failure policy per capability:
- generate_lesson: raises FatalGenerationError
- generate_scene_image: raises DegradedGenerationError (carries the prompt)
- detect_positions: never raises, returns the vocabulary unchanged
- play_speech: never raises, returns False
"""

import logging
from typing import Optional, Union

from google import genai
from google.genai import types as genai_types

from lingocard.audio import play_pcm16
from lingocard.config import (
    IMAGE_ASPECT_RATIO,
    SENTENCE_COUNT,
    TARGET_LANGUAGE,
    TEXT_EXCERPT_LENGTH,
    TTS_VOICE,
)
from lingocard.schemas import (
    AudioPayload,
    DifficultyLevel,
    ImagePayload,
    LessonContent,
    ModelTier,
    TextPayload,
    Vocabulary,
)
from lingocard.utils import format_prompt, get_template, load_prompt, prompt_variants

from .adapters import (
    adapt_generated_images,
    adapt_inline_content,
    adapt_json,
    adapt_speech,
)
from .errors import DegradedGenerationError, FatalGenerationError, GenerationError
from .parsing import extract_json_from_response, merge_positions, parse_lesson_payload
from .profiles import BackendProfile, uses_generated_images

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Prompt construction
# -----------------------------------------------------------------------------

def build_lesson_prompt(topic: str, difficulty: DifficultyLevel, word_count: int) -> str:
    prompt = load_prompt("lesson")
    return format_prompt(
        prompt["user_template"],
        topic=topic,
        difficulty=DifficultyLevel(difficulty).value,
        word_count=word_count,
        sentence_count=SENTENCE_COUNT,
        target_language=TARGET_LANGUAGE,
    ).strip()


def lesson_system_instruction() -> str:
    return load_prompt("lesson")["system"].strip()


def lesson_response_schema(word_count: int) -> genai_types.Schema:
    """Response schema for the lesson text step."""
    string = genai_types.Type.STRING
    return genai_types.Schema(
        type=genai_types.Type.OBJECT,
        properties={
            "vocabulary": genai_types.Schema(
                type=genai_types.Type.ARRAY,
                description=f"A list of exactly {word_count} key vocabulary words related to the topic.",
                items=genai_types.Schema(
                    type=genai_types.Type.OBJECT,
                    properties={
                        "word": genai_types.Schema(type=string, description="The English word."),
                        "phonetic": genai_types.Schema(type=string, description="IPA phonetic transcription."),
                        "translation": genai_types.Schema(
                            type=string,
                            description=f"{TARGET_LANGUAGE} translation of the word.",
                        ),
                    },
                    required=["word", "phonetic", "translation"],
                ),
            ),
            "sentences": genai_types.Schema(
                type=genai_types.Type.ARRAY,
                description=f"{SENTENCE_COUNT} example sentences using the vocabulary.",
                items=genai_types.Schema(
                    type=genai_types.Type.OBJECT,
                    properties={
                        "english": genai_types.Schema(type=string),
                        "chinese": genai_types.Schema(type=string),
                    },
                    required=["english", "chinese"],
                ),
            ),
            "imagePrompt": genai_types.Schema(
                type=string,
                description="A simple visual description of one scene where all of these items would be found. Keep it brief.",
            ),
        },
        required=["vocabulary", "sentences", "imagePrompt"],
    )


def build_scene_prompt(
    topic: str,
    scene: str,
    vocabulary: list[Vocabulary],
    variant: str = "baked_labels",
) -> str:
    prompt = load_prompt("scene_image")
    word_list = "\n".join(f"- {v.word}" for v in vocabulary)
    object_list = ", ".join(f"include a '{v.word}' object" for v in vocabulary)
    return format_prompt(
        get_template(prompt, variant),
        topic=topic,
        scene=scene,
        word_list=word_list,
        object_list=object_list,
    ).strip()


def build_locate_prompt(vocabulary: list[Vocabulary]) -> str:
    prompt = load_prompt("locate_objects")
    return format_prompt(
        prompt["user_template"],
        count=len(vocabulary),
        words=", ".join(v.word for v in vocabulary),
    ).strip()


# -----------------------------------------------------------------------------
# Gemini API Client
# -----------------------------------------------------------------------------

class GeminiClient:
    """Async wrapper for the Gemini API bound to one backend profile."""

    def __init__(self, profile: BackendProfile, client: Optional[genai.Client] = None):
        """
        Initialize the client.

        Args:
            profile: Backend profile (credentials, endpoint, model table)
            client: Optional pre-built genai.Client (tests inject a fake)

        Raises:
            ValueError: If the profile's API key or base URL is not configured,
                or its scene prompt variant is not defined
        """
        variants = prompt_variants(load_prompt("scene_image"))
        if profile.prompt_variant not in variants:
            raise ValueError(
                f"Profile '{profile.name}' uses unknown scene prompt variant "
                f"'{profile.prompt_variant}' (available: {', '.join(variants)})"
            )

        self.profile = profile
        if client is None:
            client = self._build_client(profile)
        self.client = client

    @staticmethod
    def _build_client(profile: BackendProfile) -> genai.Client:
        api_key = profile.resolve_api_key()
        base_url = profile.resolve_base_url()
        if base_url is None and profile.api_version is None:
            return genai.Client(api_key=api_key)
        return genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(
                base_url=base_url,
                api_version=profile.api_version,
            ),
        )

    # -------------------------------------------------------------------------
    # Lesson text
    # -------------------------------------------------------------------------

    async def generate_lesson(
        self,
        topic: str,
        difficulty: DifficultyLevel,
        word_count: int,
        model_tier: ModelTier = ModelTier.FAST,
    ) -> LessonContent:
        """
        Generate vocabulary, example sentences and a scene description.

        Returns:
            LessonContent with full_prompt set to the exact instruction text

        Raises:
            FatalGenerationError: On transport errors, empty responses or
                responses that do not match the lesson structure
        """
        models = self.profile.models_for(model_tier)
        prompt = build_lesson_prompt(topic, difficulty, word_count)

        try:
            response = await self.client.aio.models.generate_content(
                model=models.text,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=lesson_response_schema(word_count),
                    system_instruction=lesson_system_instruction(),
                ),
            )
        except Exception as e:
            logger.error(f"Error generating lesson text: {e}")
            raise FatalGenerationError(f"Lesson text request failed: {e}") from e

        payload = adapt_json(response)
        lesson = parse_lesson_payload(payload.text if payload else None)

        if len(lesson.vocabulary) != word_count:
            logger.warning(
                f"Requested {word_count} words for '{topic}', got {len(lesson.vocabulary)}"
            )

        return LessonContent(
            topic=topic,
            vocabulary=lesson.vocabulary,
            sentences=lesson.sentences,
            image_prompt=lesson.image_prompt,
            full_prompt=prompt,
        )

    # -------------------------------------------------------------------------
    # Scene image
    # -------------------------------------------------------------------------

    async def generate_scene_image(
        self,
        topic: str,
        image_prompt: str,
        vocabulary: list[Vocabulary],
        model_tier: ModelTier = ModelTier.FAST,
    ) -> ImagePayload:
        """
        Draw the lesson scene.

        Imagen models use the generated-images protocol, Gemini image models
        the inline-content protocol. Either way the result is one
        ImagePayload whose ``prompt`` is the literal prompt sent.

        Raises:
            DegradedGenerationError: When no image comes back, when the model
                answers with text, or on transport errors. ``prompt`` is set.
        """
        models = self.profile.models_for(model_tier)
        prompt = build_scene_prompt(topic, image_prompt, vocabulary, self.profile.prompt_variant)

        try:
            if uses_generated_images(models.image):
                response = await self.client.aio.models.generate_images(
                    model=models.image,
                    prompt=prompt,
                    config=genai_types.GenerateImagesConfig(
                        number_of_images=1,
                        aspect_ratio=IMAGE_ASPECT_RATIO,
                    ),
                )
                result = adapt_generated_images(response)
            else:
                response = await self.client.aio.models.generate_content(
                    model=models.image,
                    contents=prompt,
                    config=genai_types.GenerateContentConfig(
                        response_modalities=["TEXT", "IMAGE"],
                        image_config=genai_types.ImageConfig(aspect_ratio=IMAGE_ASPECT_RATIO),
                    ),
                )
                result = adapt_inline_content(response)
        except Exception as e:
            raise DegradedGenerationError(f"Image request failed: {e}", prompt=prompt) from e

        if isinstance(result, ImagePayload):
            return result.model_copy(update={"prompt": prompt})

        if isinstance(result, TextPayload):
            logger.warning(f"Image generation returned text instead of image: {result.text}")
            raise DegradedGenerationError(
                f"Model returned text: {result.text[:TEXT_EXCERPT_LENGTH]}...",
                prompt=prompt,
            )

        raise DegradedGenerationError("No image generated.", prompt=prompt)

    # -------------------------------------------------------------------------
    # Object positions
    # -------------------------------------------------------------------------

    async def detect_positions(
        self,
        image: Union[ImagePayload, str],
        vocabulary: list[Vocabulary],
        model_tier: ModelTier = ModelTier.FAST,
    ) -> list[Vocabulary]:
        """
        Locate each vocabulary object in the image.

        Args:
            image: ImagePayload or base64 data URI
            vocabulary: Items to locate
            model_tier: Selects the vision model

        Returns:
            Vocabulary with coordinates merged in where found; the input
            unchanged on any error
        """
        if not vocabulary:
            return []

        models = self.profile.models_for(model_tier)
        try:
            if isinstance(image, str):
                image = ImagePayload.from_data_uri(image)

            response = await self.client.aio.models.generate_content(
                model=models.vision,
                contents=[
                    genai_types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    build_locate_prompt(vocabulary),
                ],
                config=genai_types.GenerateContentConfig(
                    response_mime_type="application/json",
                ),
            )

            payload = adapt_json(response)
            if payload is None:
                return list(vocabulary)
            positions = extract_json_from_response(payload.text)
        except Exception as e:
            logger.error(f"Error detecting object positions: {e}")
            return list(vocabulary)

        return merge_positions(vocabulary, positions)

    # -------------------------------------------------------------------------
    # Speech
    # -------------------------------------------------------------------------

    async def synthesize_speech(self, text: str) -> AudioPayload:
        """
        Request raw PCM speech for text.

        Raises:
            GenerationError: If the response carries no audio data
        """
        response = await self.client.aio.models.generate_content(
            model=self.profile.tts_model,
            contents=text.strip(),
            config=genai_types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=genai_types.SpeechConfig(
                    voice_config=genai_types.VoiceConfig(
                        prebuilt_voice_config=genai_types.PrebuiltVoiceConfig(voice_name=TTS_VOICE),
                    ),
                ),
            ),
        )

        audio = adapt_speech(response)
        if audio is None:
            raise GenerationError("No audio generated")
        return audio

    async def play_speech(self, text: str) -> bool:
        """
        Speak text through the shared output device.

        Returns:
            True if playback started, False for blank text or any failure
        """
        if not text or not text.strip():
            logger.debug("Skipping speech for empty text")
            return False

        try:
            audio = await self.synthesize_speech(text)
            play_pcm16(audio.pcm, audio.sample_rate, audio.channels)
        except Exception as e:
            logger.error(f"TTS Error: {e}")
            return False

        return True
