"""Exception classes for Plegar.

Two kinds of errors live here:

- Advisory records (``ParseError``, ``LexError``). The pipeline never raises
  these; lexers and parsers instantiate them and collect them in an
  ``errors`` list returned next to the normal output. They subclass
  ``Exception`` so callers that *want* to fail on bad input can simply
  ``raise result.errors[0]``.
- Fatal errors (``UnsupportedLanguageError``, ``GrammarError``,
  ``SerializationError``). These indicate wiring defects, not bad user
  input, and are raised immediately.
"""

from __future__ import annotations

from typing import Literal

ErrorCategory = Literal["lexical", "structural"]


class PlegarError(Exception):
    """Base exception for all Plegar errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(PlegarError):
    """Structural anomaly found while parsing a token stream.

    Missing closing delimiters, mismatched closing tags and closers with no
    matching opener all produce a ParseError. The parser recovers locally and
    keeps going, so these are collected rather than raised.
    """

    category: ErrorCategory = "structural"

    def __init__(
        self,
        message: str,
        start: int = 0,
        end: int | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            start: Offset of the offending text (0-indexed)
            end: End offset of the offending text (defaults to start)
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
        """
        self.message = message
        self.start = start
        self.end = start if end is None else end
        self.lineno = lineno
        self.col_offset = col_offset

        location = ""
        if lineno is not None:
            location = f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.start == other.start
            and self.end == other.end
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.message, self.start, self.end))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, start={self.start}, end={self.end})"


class LexError(ParseError):
    """Lexical anomaly: unterminated comment, string, tag or template.

    The lexer consumes to end of input (or the next safe boundary), emits a
    best-effort token and records one of these.
    """

    category: ErrorCategory = "lexical"


class UnsupportedLanguageError(PlegarError, ValueError):
    """Requested a pipeline for a language kind that is not registered.

    This is the one fatal condition of the analysis pipeline.
    """

    def __init__(self, language: object) -> None:
        self.language = language
        super().__init__(f"Unsupported language: {language!r}")


class GrammarError(PlegarError):
    """A grammar references an unknown rule or has no start rule."""

    pass


class SerializationError(PlegarError, ValueError):
    """Serialized data names an unknown type or is malformed."""

    pass


__all__ = [
    "ErrorCategory",
    "GrammarError",
    "LexError",
    "ParseError",
    "PlegarError",
    "SerializationError",
    "UnsupportedLanguageError",
]
