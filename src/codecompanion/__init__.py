"""Prompt discovery and editor-integration helpers for CodeCompanion."""

from .prompts import PromptBundle, get_prompt_content, resolve_prompts
from .utils.filenames import desanitize_filename, sanitize_filename

__all__ = [
    "PromptBundle",
    "get_prompt_content",
    "resolve_prompts",
    "sanitize_filename",
    "desanitize_filename",
]

__version__ = "0.1.0"
