"""Flat filename encoding for path-like names.

Adapter names may contain ``/`` (for example ``ollama/llama3``), which cannot
appear in a single filename. :func:`sanitize_filename` flattens them by
doubling every underscore and then turning each ``/`` into a single
underscore. :func:`desanitize_filename` reverses the two passes in the
opposite order.

The scheme is kept exactly as existing ``.codecompanion`` folders were written
with it. It is not injective: a ``/`` next to an ``_`` produces a run of three
underscores, so ``"a/_b"`` and ``"a_/b"`` both encode to ``"a___b"`` and decode
back to ``"a_/b"``. Names without a ``/`` adjacent to an ``_`` round-trip.
"""

from __future__ import annotations

__all__ = ["sanitize_filename", "desanitize_filename"]

SEPARATOR = "/"
ESCAPE = "_"


def sanitize_filename(filename: str) -> str:
    """Return ``filename`` flattened for storage in a single directory.

    >>> sanitize_filename("a/b_c.txt")
    'a_b__c.txt'
    """

    escaped = filename.replace(ESCAPE, ESCAPE * 2)
    return escaped.replace(SEPARATOR, ESCAPE)


def desanitize_filename(sanitized_name: str) -> str:
    """Recover the path-like name produced by :func:`sanitize_filename`.

    >>> desanitize_filename("a_b__c.txt")
    'a/b_c.txt'
    """

    with_slashes = sanitized_name.replace(ESCAPE, SEPARATOR)
    return with_slashes.replace(SEPARATOR * 2, ESCAPE)
