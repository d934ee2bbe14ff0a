"""Logging setup for the ``codecompanion`` package.

Only the package logger is configured; the host application's root logger
is left alone. Modules log through ``logging.getLogger(__name__)`` as usual.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..config import Settings

__all__ = ["PACKAGE_LOGGER", "setup_logging", "configure_from_settings", "get_log_path", "coerce_level"]

PACKAGE_LOGGER = "codecompanion"
_DEFAULT_LOG_DIR = Path.home() / ".codecompanion" / "logs"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOG_PATH: Path | None = None


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    force: bool = False,
) -> Path:
    """Attach a rotating ``codecompanion.log`` handler to the package logger.

    Repeated calls return the existing log path unless ``force`` is set, in
    which case the previous handler is closed and replaced.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_codecompanion", False):
            package_logger.removeHandler(handler)
            handler.close()

    target_dir = Path(log_dir or os.environ.get("CODECOMPANION_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / "codecompanion.log"

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._codecompanion = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(coerce_level(level))

    _LOG_PATH = log_path
    return log_path


def configure_from_settings(settings: Settings, *, log_dir: Path | str | None = None) -> Path:
    """Set up file logging at the level the settings ask for."""

    return setup_logging(settings.effective_log_level, log_dir=log_dir, force=True)


def get_log_path() -> Path | None:
    """Return the currently configured log file if available."""

    return _LOG_PATH


def coerce_level(level: int | str) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO
