"""String helpers and placeholder substitution."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from ..errors import MissingVariableError

__all__ = [
    "Text",
    "Node",
    "Template",
    "capitalize",
    "is_array",
    "contains",
    "safe_filetype",
    "replace_placeholders",
    "replace_placeholders_in",
    "replace_vars",
]

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]*)\}")
_FILETYPE_ALIASES: Mapping[str, str] = {"C++": "cpp"}


@dataclass(frozen=True, slots=True)
class Text:
    """Leaf of a template tree."""

    value: str


@dataclass(frozen=True, slots=True)
class Node:
    """Keyed branch of a template tree."""

    children: Mapping[str, "Template"]


Template = Text | Node


def capitalize(text: str) -> str:
    """Upper-case the first character when it is an ASCII lowercase letter."""

    if text and "a" <= text[0] <= "z":
        return text[0].upper() + text[1:]
    return text


def is_array(value: Any) -> bool:
    """Return ``True`` for a list whose first item is itself a container."""

    if not isinstance(value, (list, tuple)) or not value:
        return False
    return isinstance(value[0], (Mapping, list, tuple))


def contains(collection: Mapping[Any, Any] | Iterable[Any], value: Any) -> bool:
    """Return ``True`` when ``value`` is one of the collection's values."""

    values = collection.values() if isinstance(collection, Mapping) else collection
    return any(item == value for item in values)


def safe_filetype(filetype: str) -> str:
    """Map display filetypes such as ``C++`` to their editor identifiers."""

    return _FILETYPE_ALIASES.get(filetype, filetype)


def replace_placeholders(template: Template, replacements: Mapping[str, Any]) -> Template:
    """Substitute ``${name}`` placeholders throughout a :class:`Text`/:class:`Node` tree.

    A new tree is returned; ``template`` is left untouched. Placeholders
    without a matching key are kept verbatim.
    """

    if isinstance(template, Text):
        return Text(_substitute(template.value, replacements))
    if isinstance(template, Node):
        return Node(
            {key: replace_placeholders(child, replacements) for key, child in template.children.items()}
        )
    raise TypeError(f"Unsupported template node: {type(template).__name__}")


def replace_placeholders_in(obj: Any, replacements: Mapping[str, Any]) -> Any:
    """Apply placeholder substitution to plain ``str``/``dict``/``list`` data.

    Values of any other type are returned unchanged.
    """

    if isinstance(obj, str):
        return _substitute(obj, replacements)
    if isinstance(obj, Mapping):
        return {key: replace_placeholders_in(value, replacements) for key, value in obj.items()}
    if isinstance(obj, list):
        return [replace_placeholders_in(item, replacements) for item in obj]
    return obj


def replace_vars(message: str, names: Sequence[str], mapping: Mapping[str, Any]) -> str:
    """Fill the ``%s`` slots of ``message`` with ``mapping[name]`` for each name in order."""

    values = []
    for name in names:
        if name not in mapping:
            raise MissingVariableError(name)
        values.append(mapping[name])
    return message % tuple(values)


def _substitute(text: str, replacements: Mapping[str, Any]) -> str:
    def _lookup(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in replacements:
            return str(replacements[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_lookup, text)
