"""Token stream to escaped, class-annotated markup.

The highlighter walks tokens in order. Text between two tokens (skipped by
the lexer) is escaped verbatim; each token's text is escaped and wrapped in
a span carrying its style class. Whitespace and line-break tokens are
rendered like inter-token text, without a wrapper.

Two output shapes:

- ``highlight`` returns one string for the whole document.
- ``highlight_lines`` returns one string per source line. A token that
  crosses a line break is closed at the end of the line and reopened at the
  start of the next, so every line is well-formed on its own. Empty lines
  render as the configured placeholder.

Example:
    >>> tokens = CssLexer("a{}").run()
    >>> Highlighter(AnalysisConfig(mark_whitespace=False)).highlight("a{}", tokens)
    '<span class="cp-token cp-token-selector-tag">a</span><span ...'

Thread Safety:
Highlighter holds only its immutable config; one instance may be shared.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from plegar.config import AnalysisConfig, get_analysis_config
from plegar.markup import SpanBuilder, escape_text, span_class
from plegar.tokens import Token, TokenType, flatten

_PLAIN_TYPES = frozenset({TokenType.WHITESPACE, TokenType.NEWLINE})


class Highlighter:
    """Renders a token stream over its source as markup.

    Usage:
        >>> highlighter = Highlighter()
        >>> lines = highlighter.highlight_lines(source, tokens)
        >>> len(lines) == source.count("\\n") + 1
        True

    """

    __slots__ = ("_config",)

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config if config is not None else get_analysis_config()

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def highlight(self, source: str, tokens: Iterable[Token]) -> str:
        """Render the whole document as one string."""
        sb = SpanBuilder()
        for text, style in self._segments(source, tokens):
            if style:
                sb.open_span(self._class_for(style))
                sb.append(self._escape(text))
                sb.close_span()
            else:
                sb.append(self._escape(text))
        return sb.build()

    def highlight_lines(self, source: str, tokens: Iterable[Token]) -> list[str]:
        """Render one string per line.

        Returns:
            Exactly ``source.count("\\n") + 1`` entries
        """
        lines: list[str] = []
        sb = SpanBuilder()
        for text, style in self._segments(source, tokens):
            pieces = text.split("\n")
            for index, piece in enumerate(pieces):
                if index:
                    lines.append(self._finish_line(sb))
                if not piece:
                    continue
                if style:
                    sb.open_span(self._class_for(style))
                    sb.append(self._escape(piece))
                    sb.close_span()
                else:
                    sb.append(self._escape(piece))
        lines.append(self._finish_line(sb))
        return lines

    # =========================================================================
    # Internals
    # =========================================================================

    def _segments(
        self, source: str, tokens: Iterable[Token]
    ) -> Iterator[tuple[str, str]]:
        """Yield ``(text, style_class)`` covering ``source`` exactly once."""
        pos = 0
        for token in flatten(tokens):
            if token.start < pos:
                continue
            if token.start > pos:
                yield source[pos : token.start], ""
            style = "" if token.type in _PLAIN_TYPES else token.style_class
            yield source[token.start : token.end], style
            pos = token.end
        if pos < len(source):
            yield source[pos:], ""

    def _finish_line(self, sb: SpanBuilder) -> str:
        line = sb.build()
        sb.clear()
        return line if line else self._config.empty_line

    def _class_for(self, style: str) -> str:
        return span_class(style, self._config.class_prefix)

    def _escape(self, text: str) -> str:
        return escape_text(
            text,
            mark_whitespace=self._config.mark_whitespace,
            prefix=self._config.class_prefix,
        )


__all__ = ["Highlighter"]
