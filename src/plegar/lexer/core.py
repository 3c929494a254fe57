"""Shared single-pass lexer machinery.

Every language lexer subclasses BaseLexer and implements ``_scan()``, which
must consume at least one character when it can. The ``run()`` loop
guarantees forward progress: if a scan rule consumed nothing, one character
is emitted as an UNKNOWN fallback token (rich detail) or skipped
(structural detail). That is what makes the rich stream gapless.

Scanning is left to right with local lookahead only. There is no
character-level backtracking and no regex in the hot path.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from typing import ClassVar

from plegar.errors import LexError
from plegar.lexer.modes import DetailLevel
from plegar.location import LineIndex
from plegar.tokens import STRUCTURAL_TYPES, Token, TokenType

SPACE_CHARS = frozenset(" \t\f\v\u00a0\ufeff")
LINE_BREAK_CHARS = frozenset("\r\n")
WHITESPACE_CHARS = SPACE_CHARS | LINE_BREAK_CHARS
DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class BaseLexer:
    """Cursor helpers and the scan loop shared by the language lexers.

    A lexer may be bounded to ``source[start:end]``; offsets in the emitted
    tokens are always absolute. The markup lexer uses this to delegate the
    body of a ``<script>`` or ``<style>`` element to a sibling lexer without
    copying the text.

    Usage:
        >>> lexer = CssLexer("a { color: red }")
        >>> tokens = lexer.run()
        >>> lexer.errors
        []

    """

    language: ClassVar[str] = ""

    __slots__ = (
        "_source",
        "_pos",
        "_end",
        "_detail",
        "_structural",
        "_tokens",
        "_errors",
        "_lines",
        "_done",
    )

    def __init__(
        self,
        source: str,
        detail: DetailLevel = DetailLevel.RICH,
        *,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: Full source text
            detail: STRUCTURAL for boundary tokens only, RICH for everything
            start: Offset at which to begin scanning
            end: Offset at which to stop (defaults to end of source)
        """
        self._source = source
        self._pos = start
        self._end = len(source) if end is None else min(end, len(source))
        self._detail = detail
        self._structural = detail is DetailLevel.STRUCTURAL
        self._tokens: list[Token] = []
        self._errors: list[LexError] = []
        self._lines: LineIndex | None = None
        self._done = False

    @property
    def detail(self) -> DetailLevel:
        return self._detail

    @property
    def errors(self) -> list[LexError]:
        """Lexical anomalies recorded during ``run()``."""
        return self._errors

    def run(self) -> list[Token]:
        """Tokenize the source.

        Returns:
            Tokens in strictly increasing, non-overlapping offset order.

        Complexity: O(n) where n = len(source)
        """
        if self._done:
            return self._tokens
        end = self._end
        while self._pos < end:
            before = self._pos
            self._scan()
            if self._pos == before:
                self._emit(TokenType.UNKNOWN, before, before + 1, "unknown")
        self._finish()
        self._done = True
        return self._tokens

    # =========================================================================
    # Subclass hooks
    # =========================================================================

    def _scan(self) -> None:
        """Consume one construct starting at ``self._pos``."""
        raise NotImplementedError

    def _finish(self) -> None:
        """Called once at end of input (report unclosed state)."""

    # =========================================================================
    # Cursor helpers
    # =========================================================================

    def _peek(self, offset: int = 0) -> str:
        """Character at ``pos + offset``, or "" past the end."""
        index = self._pos + offset
        if index < self._end:
            return self._source[index]
        return ""

    def _starts_with(self, text: str, pos: int | None = None) -> bool:
        return self._source.startswith(text, self._pos if pos is None else pos, self._end)

    def _find(self, needle: str, pos: int) -> int:
        """Offset of ``needle`` at or after ``pos`` within bounds, else -1."""
        return self._source.find(needle, pos, self._end)

    def _skip_chars(self, pos: int, chars: frozenset[str]) -> int:
        """Offset of the first character at or after ``pos`` not in ``chars``."""
        source = self._source
        end = self._end
        while pos < end and source[pos] in chars:
            pos += 1
        return pos

    def _skip_until(self, pos: int, stops: frozenset[str]) -> int:
        """Offset of the first character at or after ``pos`` that is in ``stops``."""
        source = self._source
        end = self._end
        while pos < end and source[pos] not in stops:
            pos += 1
        return pos

    # =========================================================================
    # Emission
    # =========================================================================

    def _emit(self, type: TokenType, start: int, end: int, style_class: str = "") -> None:
        """Record a token and move the cursor to ``end``.

        At structural detail, non-boundary tokens are consumed but dropped.
        """
        self._pos = end
        if self._structural and type not in STRUCTURAL_TYPES:
            return
        self._tokens.append(Token(type, self._source[start:end], start, end, style_class))

    def _append(self, token: Token) -> None:
        """Record a prebuilt token (used for raw regions with embedded tokens)."""
        self._pos = token.end
        self._tokens.append(token)

    def _lex_error(self, message: str, start: int, end: int | None = None) -> None:
        if self._lines is None:
            self._lines = LineIndex(self._source)
        self._errors.append(
            LexError(
                message,
                start,
                end,
                lineno=self._lines.line_of(start),
                col_offset=self._lines.column_of(start),
            )
        )

    # =========================================================================
    # Shared scan rules
    # =========================================================================

    def _scan_whitespace(self) -> bool:
        """Consume a run of spaces/tabs or one line break.

        Returns:
            True if anything was consumed.
        """
        pos = self._pos
        char = self._source[pos]
        if char in SPACE_CHARS:
            self._emit(TokenType.WHITESPACE, pos, self._skip_chars(pos + 1, SPACE_CHARS), "space")
            return True
        if char == "\n":
            self._emit(TokenType.NEWLINE, pos, pos + 1)
            return True
        if char == "\r":
            end = pos + 2 if self._peek(1) == "\n" else pos + 1
            self._emit(TokenType.NEWLINE, pos, end)
            return True
        return False

    def _scan_delimited(
        self,
        type: TokenType,
        opener: str,
        closer: str,
        style_class: str,
        what: str,
    ) -> None:
        """Consume ``opener ... closer`` as one token.

        A missing closer consumes to end of input and records a LexError.
        """
        start = self._pos
        close = self._find(closer, start + len(opener))
        if close == -1:
            end = self._end
            self._emit(type, start, end, style_class)
            self._lex_error(f"Unclosed {what}: expected '{closer}'", start, end)
            return
        self._emit(type, start, close + len(closer), style_class)

    def _scan_quoted(
        self,
        quote: str,
        *,
        type: TokenType = TokenType.STRING,
        style_class: str = "string",
        what: str = "string",
        multiline: bool = False,
    ) -> None:
        """Consume a quoted literal with backslash escapes.

        An unescaped line break (unless ``multiline``) or end of input before
        the closing quote produces an ERROR token up to that point.
        """
        source = self._source
        start = self._pos
        end = self._end
        index = start + 1
        while index < end:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                self._emit(type, start, index + 1, style_class)
                return
            if not multiline and char in LINE_BREAK_CHARS:
                break
            index += 1
        index = min(index, end)
        self._emit(TokenType.ERROR, start, index, "error")
        self._lex_error(f"Unclosed {what}: expected {quote}", start, index)
