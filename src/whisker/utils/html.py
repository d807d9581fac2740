"""HTML escaping for Whisker.

Escapes the five characters that are significant in HTML text and
attribute values. Uses a single ``str.translate()`` pass.
"""

from __future__ import annotations

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "'": "&#39;",
    }
)


def html_escape(value: str) -> str:
    """Escape ``&``, ``<``, ``>``, ``"`` and ``'`` in *value*.

    Example:
        >>> html_escape("5 > 2")
        '5 &gt; 2'
    """
    return value.translate(_ESCAPE_TABLE)
