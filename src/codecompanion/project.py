"""Project root discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .config import DEFAULT_PROJECT_MARKERS

__all__ = ["find_project_root", "DEFAULT_PROJECT_MARKERS"]

LOGGER = logging.getLogger(__name__)


def find_project_root(
    start: Path | str,
    markers: Iterable[str] = DEFAULT_PROJECT_MARKERS,
) -> Path | None:
    """Walk upward from ``start`` and return the first directory holding a marker.

    ``start`` may be a file, in which case the search begins at its parent.
    Markers match files and directories alike. Returns ``None`` when the
    filesystem root is reached without a match.
    """

    marker_names = tuple(markers)
    origin = Path(start).expanduser().resolve()
    if origin.is_file():
        origin = origin.parent
    for candidate in (origin, *origin.parents):
        for marker in marker_names:
            if (candidate / marker).exists():
                LOGGER.debug("Project root %s found via %s", candidate, marker)
                return candidate
    return None
