"""Escaping helpers and the SpanBuilder accumulator for highlighter output.

Every piece of source text that reaches the output goes through
``escape_text``; only the wrapper markup built here is emitted unescaped.

Thread Safety:
The helpers are pure. SpanBuilder instances are local to each highlight call.

"""

from __future__ import annotations

import re
from html import escape as html_escape

_WHITESPACE_RUN = re.compile(r"( +|\t+)")


def escape_text(text: str, *, mark_whitespace: bool = False, prefix: str = "cp-token") -> str:
    """Escape ``text`` for markup, optionally wrapping space and tab runs.

    ``&``, ``<``, ``>``, ``"`` and ``'`` are always escaped, including inside
    whitespace markers.

    Example:
        >>> escape_text("a <b>\\t", mark_whitespace=True)
        'a<span class="cp-token-space"> </span>&lt;b&gt;<span class="cp-token-tab">\\t</span>'
    """
    if not mark_whitespace or (" " not in text and "\t" not in text):
        return html_escape(text, quote=True)
    parts: list[str] = []
    for index, piece in enumerate(_WHITESPACE_RUN.split(text)):
        if not piece:
            continue
        if index % 2:
            kind = "tab" if piece[0] == "\t" else "space"
            marker = html_escape(f"{prefix}-{kind}", quote=True)
            parts.append(f'<span class="{marker}">{piece}</span>')
        else:
            parts.append(html_escape(piece, quote=True))
    return "".join(parts)


def span_class(style_class: str, prefix: str = "cp-token") -> str:
    """Class attribute value for a token with ``style_class``."""
    return html_escape(f"{prefix} {prefix}-{style_class}", quote=True)


class SpanBuilder:
    """Accumulates highlighter markup.

    Appends to a list and joins once at the end. Tracks whether a span is
    open so line-mode output can close it at a line break and reopen it on
    the next line.

    Usage:
            >>> sb = SpanBuilder()
            >>> sb.open_span("cp-token cp-token-keyword")
            >>> sb.append("let")
            >>> sb.close_span()
            >>> sb.build()
            '<span class="cp-token cp-token-keyword">let</span>'

    """

    __slots__ = ("_parts", "_open")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._open: str | None = None

    def append(self, s: str) -> SpanBuilder:
        """Append already-escaped markup (empty strings are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def open_span(self, css_class: str) -> SpanBuilder:
        if self._open is not None:
            self.close_span()
        self._parts.append(f'<span class="{css_class}">')
        self._open = css_class
        return self

    def close_span(self) -> SpanBuilder:
        if self._open is not None:
            self._parts.append("</span>")
            self._open = None
        return self

    def build(self) -> str:
        """Join all parts into the final string, closing an open span."""
        self.close_span()
        return "".join(self._parts)

    def clear(self) -> SpanBuilder:
        self._parts.clear()
        self._open = None
        return self

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)


__all__ = ["SpanBuilder", "escape_text", "span_class"]
