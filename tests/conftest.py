"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def prompt_dir(tmp_path: Path) -> Path:
    """Return an empty ``.codecompanion`` folder inside ``tmp_path``."""

    target = tmp_path / ".codecompanion"
    target.mkdir()
    return target
