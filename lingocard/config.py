"""Configuration settings for LingoCard."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent
PROMPTS_DIR = Path(__file__).parent / "prompts"

load_dotenv(PROJECT_ROOT / ".env")

# Lesson request bounds
MIN_WORD_COUNT = 4
MAX_WORD_COUNT = 15
DEFAULT_WORD_COUNT = 10
SENTENCE_COUNT = 2
TARGET_LANGUAGE = "Simplified Chinese (简体中文)"

# Scene image
IMAGE_ASPECT_RATIO = "4:3"
IMAGE_PROMPT_BANNER = "\n\n--- IMAGE PROMPT ---\n"
TEXT_EXCERPT_LENGTH = 100

# Speech synthesis (raw PCM: 16-bit signed, mono, 24 kHz)
TTS_VOICE = "Kore"
TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1

# Logging
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

DEFAULT_BACKEND = "google"


class Settings(BaseModel):
    """Runtime settings read from the environment."""

    backend: str = DEFAULT_BACKEND
    locate_objects: bool = False
    log_level: str = "INFO"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Reads:
        LINGOCARD_BACKEND: backend profile name ("google" or "proxy")
        LINGOCARD_LOCATE_OBJECTS: enable the object-position phase
        LINGOCARD_LOG_LEVEL: logging level name
    """
    return Settings(
        backend=os.environ.get("LINGOCARD_BACKEND") or DEFAULT_BACKEND,
        locate_objects=_env_flag("LINGOCARD_LOCATE_OBJECTS"),
        log_level=(os.environ.get("LINGOCARD_LOG_LEVEL") or "INFO").upper(),
    )
