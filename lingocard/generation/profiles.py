"""
Backend profiles - credentials, endpoints and model tables.

Both profiles speak the same Gemini contract; they differ only in where the
requests go, which key is used, which models serve each tier and which
scene-image prompt variant is sent.
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel

from lingocard.schemas import ModelTier


class ModelTable(BaseModel):
    text: str
    image: str
    vision: str


class BackendProfile(BaseModel):
    name: str
    api_key_env: str
    base_url_env: Optional[str] = None
    api_version: Optional[str] = None
    models: dict[ModelTier, ModelTable]
    tts_model: str
    prompt_variant: Literal["baked_labels", "digital_labels"] = "baked_labels"

    def models_for(self, tier: ModelTier) -> ModelTable:
        return self.models[ModelTier(tier)]

    def resolve_api_key(self) -> str:
        api_key = os.environ.get(self.api_key_env)
        if not api_key:
            raise ValueError(f"{self.api_key_env} not set. Check your .env file.")
        return api_key

    def resolve_base_url(self) -> Optional[str]:
        if not self.base_url_env:
            return None
        base_url = os.environ.get(self.base_url_env)
        if not base_url:
            raise ValueError(f"{self.base_url_env} not set. Check your .env file.")
        return base_url


BACKEND_PROFILES: dict[str, BackendProfile] = {
    "google": BackendProfile(
        name="google",
        api_key_env="GEMINI_API_KEY",
        models={
            ModelTier.FAST: ModelTable(
                text="gemini-2.5-flash",
                image="gemini-2.5-flash-image",
                vision="gemini-2.5-flash",
            ),
            ModelTier.BEST: ModelTable(
                text="gemini-2.5-pro",
                image="imagen-4.0-generate-001",
                vision="gemini-2.5-pro",
            ),
        },
        tts_model="gemini-2.5-flash-preview-tts",
        prompt_variant="baked_labels",
    ),
    "proxy": BackendProfile(
        name="proxy",
        api_key_env="LINGOCARD_PROXY_API_KEY",
        base_url_env="LINGOCARD_PROXY_BASE_URL",
        api_version="v1beta",
        models={
            ModelTier.FAST: ModelTable(
                text="gemini-3-flash-preview",
                image="gemini-2.5-flash-image",
                vision="gemini-3-flash-preview",
            ),
            ModelTier.BEST: ModelTable(
                text="gemini-3-flash-preview",
                image="gemini-3-pro-image-preview",
                vision="gemini-3-flash-preview",
            ),
        },
        tts_model="gemini-2.5-flash-preview-tts",
        prompt_variant="digital_labels",
    ),
}


def get_backend_profile(name: str) -> BackendProfile:
    """
    Look up a backend profile by name.

    Raises:
        ValueError: If no profile has that name
    """
    try:
        return BACKEND_PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(BACKEND_PROFILES))
        raise ValueError(f"Unknown backend profile: {name!r} (expected one of: {known})")


def uses_generated_images(model: str) -> bool:
    """Imagen models answer with a list of generated images, Gemini models inline."""
    return model.startswith("imagen")
