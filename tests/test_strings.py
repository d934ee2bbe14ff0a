"""Tests for string helpers and placeholder substitution."""

from __future__ import annotations

import pytest

from codecompanion.errors import MissingVariableError
from codecompanion.utils.strings import (
    Node,
    Text,
    capitalize,
    contains,
    is_array,
    replace_placeholders,
    replace_placeholders_in,
    replace_vars,
    safe_filetype,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [("hello world", "Hello world"), ("Hello", "Hello"), ("", ""), ("1st", "1st"), ("éclair", "éclair")],
)
def test_capitalize(text: str, expected: str) -> None:
    assert capitalize(text) == expected


def test_is_array_requires_nested_first_item() -> None:
    assert is_array([{"role": "user"}])
    assert is_array([["a"], "b"])
    assert not is_array(["a", "b"])
    assert not is_array([])
    assert not is_array({"role": "user"})
    assert not is_array("text")


def test_contains_checks_sequence_items_and_mapping_values() -> None:
    assert contains(["chat", "inline"], "inline")
    assert not contains(["chat"], "cmd")
    assert contains({"a": "openai"}, "openai")
    assert not contains({"openai": 1}, "openai")


def test_safe_filetype_maps_cpp() -> None:
    assert safe_filetype("C++") == "cpp"
    assert safe_filetype("python") == "python"


def test_replace_placeholders_in_text() -> None:
    result = replace_placeholders(Text("Use ${lang} with ${tool}"), {"lang": "python", "tool": "pytest"})

    assert result == Text("Use python with pytest")


def test_replace_placeholders_walks_nested_nodes() -> None:
    template = Node(
        {
            "system": Text("You write ${lang}."),
            "examples": Node({"one": Text("${lang} ${missing}")}),
        }
    )

    result = replace_placeholders(template, {"lang": "lua"})

    assert result == Node(
        {
            "system": Text("You write lua."),
            "examples": Node({"one": Text("lua ${missing}")}),
        }
    )
    # the input tree is left as it was
    assert template.children["system"] == Text("You write ${lang}.")


def test_replace_placeholders_rejects_plain_values() -> None:
    with pytest.raises(TypeError):
        replace_placeholders("plain", {})  # type: ignore[arg-type]


def test_replace_placeholders_in_plain_data() -> None:
    data = {"prompt": "Hi ${name}", "nested": {"items": ["${name}!", 3]}, "count": 2}

    result = replace_placeholders_in(data, {"name": "Ada"})

    assert result == {"prompt": "Hi Ada", "nested": {"items": ["Ada!", 3]}, "count": 2}
    assert data["prompt"] == "Hi ${name}"


def test_replacement_values_are_not_regex_templates() -> None:
    assert replace_placeholders_in("${path}", {"path": r"C:\new\1"}) == r"C:\new\1"


def test_replace_vars_fills_in_order() -> None:
    message = replace_vars("Explain %s in %s", ["selection", "lang"], {"lang": "go", "selection": "main()"})

    assert message == "Explain main() in go"


def test_replace_vars_missing_variable() -> None:
    with pytest.raises(MissingVariableError) as excinfo:
        replace_vars("%s", ["nope"], {})

    assert str(excinfo.value) == "Variable 'nope' not found in the mapping."
    assert isinstance(excinfo.value, KeyError)
