"""LingoCard utilities."""

from .prompt_loader import load_prompt, format_prompt, get_template, prompt_variants

__all__ = ["load_prompt", "format_prompt", "get_template", "prompt_variants"]
