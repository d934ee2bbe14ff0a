"""Tests for logging setup helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from codecompanion.config import Settings
from codecompanion.utils import logging as log_utils


@pytest.fixture
def package_logger():
    logger = logging.getLogger(log_utils.PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
    log_utils._LOG_PATH = None


def test_setup_logging_writes_to_log_dir(tmp_path: Path, package_logger: logging.Logger) -> None:
    path = log_utils.setup_logging("debug", log_dir=tmp_path, force=True)

    logging.getLogger("codecompanion.test").debug("hello log")

    assert path == tmp_path / "codecompanion.log"
    assert log_utils.get_log_path() == path
    assert "hello log" in path.read_text(encoding="utf-8")


def test_setup_logging_is_idempotent(tmp_path: Path, package_logger: logging.Logger) -> None:
    first = log_utils.setup_logging(log_dir=tmp_path / "a", force=True)
    second = log_utils.setup_logging(log_dir=tmp_path / "b")

    assert first == second
    assert not (tmp_path / "b").exists()


def test_forced_setup_replaces_previous_handler(tmp_path: Path, package_logger: logging.Logger) -> None:
    log_utils.setup_logging(log_dir=tmp_path / "a", force=True)
    log_utils.setup_logging(log_dir=tmp_path / "b", force=True)

    ours = [handler for handler in package_logger.handlers if getattr(handler, "_codecompanion", False)]
    assert len(ours) == 1
    assert Path(ours[0].baseFilename) == tmp_path / "b" / "codecompanion.log"


def test_env_override_for_log_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, package_logger: logging.Logger
) -> None:
    monkeypatch.setenv("CODECOMPANION_LOG_DIR", str(tmp_path / "env"))

    path = log_utils.setup_logging(force=True)

    assert path.parent == tmp_path / "env"


def test_root_logger_is_left_alone(tmp_path: Path, package_logger: logging.Logger) -> None:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    log_utils.setup_logging("debug", log_dir=tmp_path, force=True)

    assert root.handlers == handlers
    assert root.level == level


def test_configure_from_settings_uses_effective_level(tmp_path: Path, package_logger: logging.Logger) -> None:
    log_utils.configure_from_settings(Settings(debug_logging=True), log_dir=tmp_path)

    assert package_logger.level == logging.DEBUG

    log_utils.configure_from_settings(Settings(log_level="ERROR"), log_dir=tmp_path)

    assert package_logger.level == logging.ERROR


@pytest.mark.parametrize(("value", "expected"), [("warning", logging.WARNING), (10, 10), ("bogus", logging.INFO)])
def test_coerce_level(value, expected: int) -> None:
    assert log_utils.coerce_level(value) == expected
