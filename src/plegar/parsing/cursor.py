"""Backtracking token cursor shared by every grammar.

The cursor is an index into an immutable token sequence plus the advisory
error list of one parser run. Grammar rules receive the cursor, inspect and
consume tokens, and return a node or None.

Backtracking is automatic: ``apply``, ``one_of``, ``sequence`` and
``optional`` snapshot the position *and* the length of the error list before
invoking a rule and restore both when the rule fails, so a rule that
partially advanced before giving up never leaks consumed tokens or errors
into the next alternative. A rule may fail by returning None or by raising
``Backtrack`` from any depth.

The cursor also tracks which closing delimiters are currently expected (the
open-delimiter stack). Container rules push their closer with ``opened()``;
the cross-cutting recovery policy asks ``expects()`` whether a closer that
does not match the innermost container belongs to an ancestor (close the
current node implicitly) or to nothing at all (report and skip).

Thread Safety:
Cursor instances are single-use and hold per-run state. Create one per
parser run.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

from plegar.config import AnalysisConfig, get_analysis_config
from plegar.errors import ParseError
from plegar.lexer.modes import DetailLevel
from plegar.location import LineIndex
from plegar.tokens import TRIVIA_TYPES, Token, TokenType

if TYPE_CHECKING:
    from plegar.nodes import Node
    from plegar.parsing.grammar import Grammar

# Maximum number of simultaneously open containers. Deeper input is skipped
# as a flat balanced run so recursion stays bounded.
MAX_NESTING_DEPTH = 64


class Backtrack(Exception):
    """Raised inside a rule to fail it and restore the cursor."""


class Snapshot(NamedTuple):
    """Restorable cursor state."""

    pos: int
    errors: int


@dataclass(frozen=True, slots=True)
class OpenDelimiter:
    """An entry on the open-delimiter stack.

    Attributes:
        closer: Token type that closes the container
        name: Element name for markup containers, None otherwise
        start: Offset of the opener

    """

    closer: TokenType
    name: str | None
    start: int


def describe_closer(token: Token, name: str | None = None) -> str:
    """Human-readable form of a closing token for error messages."""
    if token.type is TokenType.TAG_CLOSE:
        return f"tag </{token.value[2:] if name is None else name}>"
    return f"'{token.value}'"


class Cursor:
    """Position, backtracking and error bookkeeping for one parse.

    Usage:
        >>> cursor = Cursor(tokens, grammar, source=source)
        >>> node = cursor.one_of(("comment", "block"))
        >>> cursor.errors
        []

    """

    __slots__ = (
        "_tokens",
        "_count",
        "_pos",
        "_grammar",
        "_source",
        "_detail",
        "_config",
        "_start",
        "_end",
        "_lines",
        "_errors",
        "_open",
        "_tables",
    )

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
        """Initialize cursor.

        Args:
            tokens: Token sequence produced by the matching lexer
            grammar: Rule table to resolve rule names against
            source: Full source text the token offsets refer to
            detail: Depth of the parse (mirrors the lexer detail)
            config: Analysis configuration (defaults to the context's)
            start: Offset where the parsed range begins
            end: Offset where the parsed range ends (end of input for
                unclosed containers)
            lines: Shared line index for error locations (built lazily)
        """
        self._tokens = tokens
        self._count = len(tokens)
        self._pos = 0
        self._grammar = grammar
        self._source = source
        self._detail = detail
        self._config = config if config is not None else get_analysis_config()
        self._start = start
        self._end = len(source) if end is None else end
        self._lines = lines
        self._errors: list[ParseError] = []
        self._open: list[OpenDelimiter] = []
        self._tables: dict[str, Any] = {}

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def pos(self) -> int:
        """Index of the next unconsumed token."""
        return self._pos

    @property
    def source(self) -> str:
        return self._source

    @property
    def detail(self) -> DetailLevel:
        return self._detail

    @property
    def rich(self) -> bool:
        """True when the parse should build declaration-level nodes."""
        return self._detail is DetailLevel.RICH

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        """End-of-input offset; unclosed containers extend to here."""
        return self._end

    @property
    def lines(self) -> LineIndex:
        if self._lines is None:
            self._lines = LineIndex(self._source)
        return self._lines

    @property
    def errors(self) -> list[ParseError]:
        return self._errors

    @property
    def depth(self) -> int:
        """Number of currently open containers."""
        return len(self._open)

    def memo[T](self, key: str, build: Callable[[Sequence[Token]], T]) -> T:
        """Return the per-run table stored under ``key``, building it once.

        Grammars use this for lookahead answers that would cost a scan per
        call, such as whether a ``{`` follows the current position.
        """
        table = self._tables.get(key)
        if table is None:
            table = build(self._tokens)
            self._tables[key] = table
        return table

    # =========================================================================
    # Inspection and advance
    # =========================================================================

    def peek(self, offset: int = 0) -> Token | None:
        """Token at ``pos + offset`` without consuming it, or None past the end."""
        index = self._pos + offset
        if 0 <= index < self._count:
            return self._tokens[index]
        return None

    def next(self) -> Token | None:
        """Consume and return the current token (None at end of input)."""
        if self._pos >= self._count:
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def eof(self) -> bool:
        return self._pos >= self._count

    def match_type(
        self,
        type: TokenType,
        value: str | frozenset[str] | Sequence[str] | None = None,
    ) -> Token | None:
        """Consume the current token if it has ``type`` (and ``value``).

        Args:
            type: Required token type
            value: Required token text, or a collection of allowed texts

        Returns:
            The consumed token, or None (cursor unchanged) on mismatch
        """
        if self._pos >= self._count:
            return None
        token = self._tokens[self._pos]
        if token.type is not type:
            return None
        if value is not None:
            if isinstance(value, str):
                if token.value != value:
                    return None
            elif token.value not in value:
                return None
        self._pos += 1
        return token

    def skip_trivia(self) -> bool:
        """Consume whitespace and line breaks.

        Returns:
            True if a line break was skipped.
        """
        crossed = False
        tokens = self._tokens
        while self._pos < self._count and tokens[self._pos].type in TRIVIA_TYPES:
            if tokens[self._pos].type is TokenType.NEWLINE:
                crossed = True
            self._pos += 1
        return crossed

    def previous_end(self) -> int:
        """End offset of the last consumed token (range start if none)."""
        if self._pos == 0:
            return self._start
        return self._tokens[self._pos - 1].end

    def tokens_between(self, start: int, end: int) -> Sequence[Token]:
        """Tokens at sequence indices ``[start, end)``, as returned by ``pos``."""
        return self._tokens[start:end]

    def text(self, start: int, end: int) -> str:
        return self._source[start:end]

    # =========================================================================
    # Backtracking
    # =========================================================================

    def snapshot(self) -> Snapshot:
        return Snapshot(self._pos, len(self._errors))

    def restore(self, snapshot: Snapshot) -> None:
        self._pos = snapshot.pos
        del self._errors[snapshot.errors :]

    def apply(self, name: str) -> Node | None:
        """Invoke rule ``name``; restore the cursor if it fails.

        Raises:
            GrammarError: If the grammar has no rule named ``name``
        """
        rule = self._grammar.get(name)
        snapshot = self.snapshot()
        try:
            node = rule(self)
        except Backtrack:
            node = None
        if node is None:
            self.restore(snapshot)
        return node

    def one_of(self, names: Sequence[str]) -> Node | None:
        """Try rules in order and return the first node produced.

        Each failed alternative is fully rolled back before the next one runs.
        """
        for name in names:
            node = self.apply(name)
            if node is not None:
                return node
        return None

    def optional(self, name: str) -> Node | None:
        """Apply ``name`` if it matches; absence is not a failure."""
        return self.apply(name)

    def sequence(self, names: Sequence[str]) -> tuple[Node | None, ...] | None:
        """Apply rules one after another, all or nothing.

        A name ending in ``?`` is optional and contributes None when absent.
        Trivia between the parts is skipped.

        Returns:
            One entry per name, or None (cursor restored) if a required part
            did not match
        """
        snapshot = self.snapshot()
        nodes: list[Node | None] = []
        for name in names:
            self.skip_trivia()
            optional = name.endswith("?")
            node = self.apply(name[:-1] if optional else name)
            if node is None and not optional:
                self.restore(snapshot)
                return None
            nodes.append(node)
        return tuple(nodes)

    @contextmanager
    def attempt(self) -> Iterator[Snapshot]:
        """Run a block speculatively.

        Raising ``Backtrack`` inside the block restores the cursor and leaves
        the block; any other outcome keeps what was consumed.

        Example:
            >>> with cursor.attempt():
            ...     if cursor.match_type(TokenType.TAG_END) is None:
            ...         raise Backtrack
        """
        snapshot = self.snapshot()
        try:
            yield snapshot
        except Backtrack:
            self.restore(snapshot)

    # =========================================================================
    # Errors
    # =========================================================================

    def error(self, message: str, start: int, end: int | None = None) -> None:
        """Record an advisory structural error."""
        lines = self.lines
        self._errors.append(
            ParseError(
                message,
                start,
                end,
                lineno=lines.line_of(start),
                col_offset=lines.column_of(start),
            )
        )

    def extend_errors(self, errors: Sequence[ParseError]) -> None:
        self._errors.extend(errors)

    # =========================================================================
    # Open-delimiter stack
    # =========================================================================

    @contextmanager
    def opened(self, closer: TokenType, start: int, name: str | None = None) -> Iterator[None]:
        """Mark a container as open for the duration of the block."""
        self._open.append(OpenDelimiter(closer, name, start))
        try:
            yield
        finally:
            self._open.pop()

    def expects(self, token: Token, name: str | None = None) -> bool:
        """True if an open container would be closed by ``token``.

        For closing tags, ``name`` is the normalized element name to look for.
        """
        for entry in reversed(self._open):
            if entry.closer is token.type and (name is None or entry.name == name):
                return True
        return False

    def too_deep(self) -> bool:
        return len(self._open) >= MAX_NESTING_DEPTH


__all__ = [
    "Backtrack",
    "Cursor",
    "MAX_NESTING_DEPTH",
    "OpenDelimiter",
    "Snapshot",
    "describe_closer",
]
