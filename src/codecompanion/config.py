"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import SettingsError

__all__ = [
    "Settings",
    "SettingsStore",
    "DEFAULT_CONFIG_DIR_NAME",
    "DEFAULT_PROMPT_SUFFIX",
    "DEFAULT_PROJECT_MARKERS",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".codecompanion"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
DEFAULT_CONFIG_DIR_NAME = ".codecompanion"
DEFAULT_PROMPT_SUFFIX = ".prompt"
DEFAULT_PROJECT_MARKERS: tuple[str, ...] = (".git", ".svn", ".hg", "package.json", "Cargo.toml")
_ENV_OVERRIDES: Mapping[str, str] = {
    "CODECOMPANION_CONFIG_DIR": "config_dir_name",
    "CODECOMPANION_PROMPT_SUFFIX": "prompt_suffix",
    "CODECOMPANION_LOG_LEVEL": "log_level",
    "CODECOMPANION_NOTIFICATION_TITLE": "notification_title",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "CODECOMPANION_DEBUG_LOGGING": "debug_logging",
}
_LIST_ENV_OVERRIDES: Mapping[str, str] = {
    "CODECOMPANION_PROJECT_MARKERS": "project_markers",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    config_dir_name: str = DEFAULT_CONFIG_DIR_NAME
    prompt_suffix: str = DEFAULT_PROMPT_SUFFIX
    project_markers: tuple[str, ...] = DEFAULT_PROJECT_MARKERS
    notification_title: str = "CodeCompanion"
    log_level: str = "INFO"
    debug_logging: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.prompt_suffix:
            raise SettingsError("prompt_suffix must not be empty")
        if not self.config_dir_name or "/" in self.config_dir_name:
            raise SettingsError(f"Invalid config directory name: {self.config_dir_name!r}")
        self.project_markers = tuple(self.project_markers)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_logging else self.log_level


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except (TypeError, SettingsError) as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = self._serialize(settings)
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _serialize(self, settings: Settings) -> Dict[str, Any]:
        data = asdict(settings)
        data["project_markers"] = list(settings.project_markers)
        data["version"] = _SETTINGS_VERSION
        return data

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _LIST_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            items = tuple(part.strip() for part in value.split(",") if part.strip())
            if not items:
                LOGGER.warning("Environment override %s is empty; ignoring", env_name)
                continue
            overrides[field_name] = items
        if overrides:
            try:
                settings = self._apply_overrides(settings, overrides, source="environment")
            except SettingsError as exc:
                LOGGER.warning("Ignoring invalid environment overrides: %s", exc)
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}
