"""Prompt override discovery."""

from .resolver import (
    FileSystem,
    LocalFileSystem,
    PromptBundle,
    get_prompt_content,
    resolve_prompts,
)

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "PromptBundle",
    "get_prompt_content",
    "resolve_prompts",
]
