"""Grammar-driven parser producing a Document tree from a token sequence.

The parser itself is tiny: it creates a Cursor over the tokens, applies the
grammar's start rule and hands back the Document plus the advisory errors
recorded on the way. All language knowledge lives in the grammar.

Thread Safety:
Parser instances are single-use. Create one per token sequence.

"""

from __future__ import annotations

from collections.abc import Sequence

from plegar.config import AnalysisConfig
from plegar.errors import ParseError
from plegar.lexer.modes import DetailLevel
from plegar.location import LineIndex
from plegar.nodes import Document
from plegar.parsing.cursor import Cursor
from plegar.parsing.grammar import Grammar
from plegar.tokens import Token
from plegar.utils.logger import get_logger

logger = get_logger(__name__)


class Parser:
    """Recursive-descent parser with backtracking over one grammar.

    Usage:
        >>> tokens = CssLexer("a { color: red }").run()
        >>> parser = Parser(tokens, CSS_GRAMMAR, source="a { color: red }")
        >>> document = parser.run()
        >>> parser.errors
        []

    """

    __slots__ = ("_cursor", "_grammar", "_document")

    def __init__(
        self,
        tokens: Sequence[Token],
        grammar: Grammar,
        *,
        source: str,
        detail: DetailLevel = DetailLevel.RICH,
        config: AnalysisConfig | None = None,
        start: int = 0,
        end: int | None = None,
        lines: LineIndex | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            tokens: Output of the lexer for ``grammar``'s language
            grammar: Rule table; its start rule must return a Document
            source: Full source text
            detail: STRUCTURAL for nesting only, RICH for declaration nodes
            config: Analysis configuration (defaults to the context's)
            start: Offset where the parsed range begins
            end: Offset where the parsed range ends
            lines: Shared line index for error locations
        """
        self._grammar = grammar
        self._cursor = Cursor(
            tokens,
            grammar,
            source=source,
            detail=detail,
            config=config,
            start=start,
            end=end,
            lines=lines,
        )
        self._document: Document | None = None

    @property
    def errors(self) -> list[ParseError]:
        """Structural anomalies recorded during ``run()``."""
        return self._cursor.errors

    def run(self) -> Document:
        """Parse the tokens.

        Never raises for malformed input: every anomaly is recovered locally
        and recorded in ``errors``.

        Raises:
            GrammarError: If the grammar references an unknown rule
        """
        if self._document is not None:
            return self._document
        node = self._cursor.apply(self._grammar.start)
        cursor = self._cursor
        if not isinstance(node, Document):
            node = Document(cursor.start, cursor.end)
        self._document = node
        if cursor.errors:
            logger.debug(
                "%s parse recorded %d error(s)", self._grammar.name, len(cursor.errors)
            )
        return node


__all__ = ["Parser"]
