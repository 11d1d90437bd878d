"""
YAML prompt templates for LingoCard.

Each file under lingocard/prompts/ holds a ``meta`` block, an optional
``system`` instruction and either one ``user_template`` or a ``variants``
mapping of named templates. Files are parsed once per process.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from lingocard.config import PROMPTS_DIR


@lru_cache(maxsize=None)
def _read_prompt(file_path: Path) -> dict[str, Any]:
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_prompt(name: str, prompts_dir: Path | None = None) -> dict[str, Any]:
    """
    Load a prompt template by name (file stem, e.g. "lesson").

    Raises:
        FileNotFoundError: If the prompt file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = (prompts_dir or PROMPTS_DIR) / f"{name}.yaml"
    if not file_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {file_path}")
    return _read_prompt(file_path)


def format_prompt(template: str, **kwargs) -> str:
    """Fill {placeholders}; literal braces in templates are doubled."""
    return template.format(**kwargs)


def prompt_variants(prompt: dict[str, Any]) -> list[str]:
    return sorted(prompt.get("variants") or {})


def get_template(prompt: dict[str, Any], variant: str | None = None) -> str:
    """
    Pick the user template of a loaded prompt.

    Args:
        prompt: Parsed prompt dict from load_prompt()
        variant: Optional key into prompt["variants"]

    Raises:
        KeyError: If the variant is not defined
    """
    if variant is None:
        return prompt["user_template"]
    if variant not in prompt_variants(prompt):
        raise KeyError(f"Unknown prompt variant: {variant}")
    return prompt["variants"][variant]
