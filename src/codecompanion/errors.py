"""Exception types raised by CodeCompanion helpers."""

from __future__ import annotations

__all__ = ["CompanionError", "MissingVariableError", "SettingsError"]


class CompanionError(Exception):
    """Base class for errors raised by this package."""


class MissingVariableError(CompanionError, KeyError):
    """Raised when a message references a variable absent from its mapping."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Variable '{self.name}' not found in the mapping."


class SettingsError(CompanionError, ValueError):
    """Raised when a settings override cannot be applied."""
