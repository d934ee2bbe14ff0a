"""Tests for text file reading helpers."""

from __future__ import annotations

import codecs
from pathlib import Path

import pytest

from codecompanion.utils.file_io import detect_encoding, read_text


def test_read_text_keeps_newlines_by_default(tmp_path: Path) -> None:
    target = tmp_path / "crlf.prompt"
    target.write_bytes(b"line one\r\nline two")

    assert read_text(target) == "line one\r\nline two"
    assert read_text(target, normalize_newlines=True) == "line one\nline two"


def test_read_text_decodes_utf16_with_bom(tmp_path: Path) -> None:
    target = tmp_path / "wide.prompt"
    target.write_bytes(codecs.BOM_UTF16_LE + "Grüß".encode("utf-16-le"))

    assert read_text(target) == "Grüß"


def test_detect_encoding_falls_back_for_latin1() -> None:
    assert detect_encoding("café".encode("utf-8")) == "utf-8"
    assert detect_encoding(b"caf\xe9") in {"latin-1", "cp1252", "iso8859-1", "ISO-8859-1"}


def test_read_text_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_text(tmp_path / "absent.prompt")
