"""Resolve prompt overrides from a ``.codecompanion`` folder.

A project can steer the assistant by dropping files into ``.codecompanion``::

    .codecompanion/
        .prompt                 # default prompt for every adapter
        .deepseek-r1.prompt     # prompt for the "deepseek-r1" adapter
        _ollama_llama3.prompt   # prompt for "ollama/llama3"

The part between the first character and the ``.prompt`` suffix is an adapter
name encoded with :func:`~codecompanion.utils.filenames.sanitize_filename`.
The folder next to the working directory wins over the one at the project
root; only one of them is ever read.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from ..config import DEFAULT_CONFIG_DIR_NAME, DEFAULT_PROMPT_SUFFIX, Settings
from ..project import find_project_root
from ..utils.file_io import read_text
from ..utils.filenames import desanitize_filename

__all__ = [
    "PromptBundle",
    "FileSystem",
    "LocalFileSystem",
    "resolve_prompts",
    "get_prompt_content",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PromptBundle:
    """Prompt text discovered for one resolution call.

    Attributes:
        default_prompt: Contents of the bare ``.prompt`` file, or ``""``.
        adapter_prompts: Read-only mapping of adapter name to prompt text.
        source: The directory that was scanned, ``None`` when none existed.
        warnings: Human-readable descriptions of entries that could not be read.
    """

    default_prompt: str = ""
    adapter_prompts: Mapping[str, str] = field(default_factory=dict)
    source: Path | None = None
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "adapter_prompts", MappingProxyType(dict(self.adapter_prompts)))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @classmethod
    def empty(cls) -> PromptBundle:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.default_prompt and not self.adapter_prompts

    def prompt_for(self, adapter: str | None) -> str:
        """Return the adapter-specific prompt, falling back to the default one."""

        if adapter is not None and adapter in self.adapter_prompts:
            return self.adapter_prompts[adapter]
        return self.default_prompt

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_prompt": self.default_prompt,
            "adapter_prompts": dict(self.adapter_prompts),
            "source": str(self.source) if self.source is not None else None,
            "warnings": list(self.warnings),
        }


@runtime_checkable
class FileSystem(Protocol):
    """Filesystem operations the resolver depends on.

    ``list_direct_children`` and ``read_file`` signal failure by raising
    :class:`OSError` (or :class:`UnicodeDecodeError` for undecodable files).
    """

    def path_exists(self, path: Path) -> bool:
        ...

    def list_direct_children(self, path: Path) -> Sequence[str]:
        ...

    def read_file(self, path: Path) -> str:
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the local disk.

    Listings are sorted by name so duplicate keys resolve the same way on
    every platform; callers should still not depend on that order.
    """

    def path_exists(self, path: Path) -> bool:
        return os.path.exists(path)

    def list_direct_children(self, path: Path) -> Sequence[str]:
        return sorted(os.listdir(path))

    def read_file(self, path: Path) -> str:
        return read_text(path)


def resolve_prompts(
    cwd: Path | str,
    project_root: Path | str | None,
    fs: FileSystem | None = None,
    *,
    config_dir_name: str = DEFAULT_CONFIG_DIR_NAME,
    suffix: str = DEFAULT_PROMPT_SUFFIX,
) -> PromptBundle:
    """Build a :class:`PromptBundle` from the first existing config directory.

    ``<cwd>/<config_dir_name>`` is tried first, then
    ``<project_root>/<config_dir_name>``. When neither exists the empty bundle
    is returned. This function does not raise for I/O problems; unreadable
    entries contribute ``""`` and a message in :attr:`PromptBundle.warnings`.
    """

    filesystem = fs or LocalFileSystem()
    for directory in _candidate_dirs(cwd, project_root, config_dir_name):
        try:
            exists = filesystem.path_exists(directory)
        except OSError as exc:
            LOGGER.warning("Could not stat %s: %s", directory, exc)
            continue
        if exists:
            return _scan_directory(directory, filesystem, suffix)
    LOGGER.debug("No %s directory found for cwd=%s root=%s", config_dir_name, cwd, project_root)
    return PromptBundle.empty()


def get_prompt_content(
    cwd: Path | str | None = None,
    *,
    settings: Settings | None = None,
    fs: FileSystem | None = None,
) -> PromptBundle:
    """Resolve prompts for ``cwd`` (default: the process working directory)."""

    config = settings or Settings()
    working_dir = Path(cwd) if cwd is not None else Path(os.getcwd())
    try:
        project_root = find_project_root(working_dir, config.project_markers)
    except OSError as exc:
        LOGGER.warning("Project root lookup failed from %s: %s", working_dir, exc)
        project_root = None
    return resolve_prompts(
        working_dir,
        project_root,
        fs,
        config_dir_name=config.config_dir_name,
        suffix=config.prompt_suffix,
    )


def _candidate_dirs(
    cwd: Path | str, project_root: Path | str | None, config_dir_name: str
) -> list[Path]:
    candidates = [Path(cwd) / config_dir_name]
    if project_root is not None:
        root_dir = Path(project_root) / config_dir_name
        if root_dir != candidates[0]:
            candidates.append(root_dir)
    return candidates


def _scan_directory(directory: Path, fs: FileSystem, suffix: str) -> PromptBundle:
    warnings: list[str] = []
    try:
        entries = fs.list_direct_children(directory)
    except OSError as exc:
        LOGGER.warning("Could not list %s: %s", directory, exc)
        return PromptBundle(source=directory, warnings=(f"{directory}: {exc}",))

    default_prompt = ""
    adapter_prompts: dict[str, str] = {}
    for name in entries:
        if not name.endswith(suffix):
            continue
        content = _read_entry(directory / name, fs, warnings)
        if name == suffix:
            default_prompt = content
            continue
        # first character is the leading separator ("." or an encoded "/")
        adapter = desanitize_filename(name[: -len(suffix)][1:])
        adapter_prompts[adapter] = content

    LOGGER.debug(
        "Resolved prompts from %s: default=%s adapters=%s",
        directory,
        bool(default_prompt),
        sorted(adapter_prompts),
    )
    return PromptBundle(
        default_prompt=default_prompt,
        adapter_prompts=adapter_prompts,
        source=directory,
        warnings=tuple(warnings),
    )


def _read_entry(path: Path, fs: FileSystem, warnings: list[str]) -> str:
    try:
        return fs.read_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Could not read prompt file %s: %s", path, exc)
        warnings.append(f"{path}: {exc}")
        return ""
