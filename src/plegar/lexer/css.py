"""Stylesheet (CSS) lexer.

Braces are dedicated structural token kinds, distinct from other
punctuation, because the structural pass only needs brace balance. At rich
detail the lexer also classifies selectors, pseudo-classes and elements,
properties, values, hex colors, dimensions, functions and custom properties.

Whether an identifier is a selector, a property or a value depends on where
it appears. The lexer tracks that with a stack of block contexts (a rule
block holds declarations, ``@media`` holds rules) and a flag for the value
side of a declaration. Nested rules inside a declaration block (``&:hover {``)
are detected by looking ahead for a ``{`` before the next ``;`` or ``}``.

Thread Safety:
Lexer instances are single-use. Create one per source string.

"""

from __future__ import annotations

from plegar.lexer.core import DIGITS, HEX_DIGITS, SPACE_CHARS, WHITESPACE_CHARS, BaseLexer
from plegar.lexer.modes import DetailLevel
from plegar.tokens import TokenType
from plegar.vocab.css import (
    COLOR_KEYWORDS,
    MEDIA_FEATURES,
    MEDIA_KEYWORDS,
    NESTING_AT_RULES,
    PSEUDO_CLASSES,
    UNITS,
    VALUE_KEYWORDS,
    is_known_property,
)

_DELIMITERS: dict[str, TokenType] = {
    "{": TokenType.BLOCK_OPEN,
    "}": TokenType.BLOCK_CLOSE,
    "(": TokenType.PAREN_OPEN,
    ")": TokenType.PAREN_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
}

_STRUCTURAL_STOPS = frozenset("/{}()[]\"'")
_STATEMENT_ENDS = frozenset("{;}")
_OPERATOR_CHARS = frozenset(">+~*&|/=%<^$")
_URL_STOPS = frozenset(")") | WHITESPACE_CHARS


def is_name_start(char: str) -> bool:
    return char.isalpha() or char == "_" or (char > "\x7f" and char.isidentifier())


def is_name_char(char: str) -> bool:
    if not char:
        return False
    return char.isalnum() or char in "-_" or (char > "\x7f" and char.isidentifier())


class CssLexer(BaseLexer):
    """Stylesheet lexer.

    Usage:
        >>> tokens = CssLexer("a { color: red }").run()
        >>> [t.type.name for t in tokens if not t.is_trivia]
        ['SELECTOR', 'BLOCK_OPEN', 'PROPERTY', 'COLON', 'COLOR', 'BLOCK_CLOSE']

    """

    language = "css"

    __slots__ = ("_contexts", "_in_value", "_at_rule", "_nested_selector", "_statement_start")

    def __init__(
        self,
        source: str,
        detail: DetailLevel = DetailLevel.RICH,
        *,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        super().__init__(source, detail, start=start, end=end)
        # One entry per open block: True when it holds declarations.
        self._contexts: list[bool] = []
        self._in_value = False
        self._at_rule: str | None = None
        self._nested_selector = False
        self._statement_start = True

    @property
    def _in_declarations(self) -> bool:
        return bool(self._contexts) and self._contexts[-1]

    @property
    def _in_selector(self) -> bool:
        return self._at_rule is None and (not self._in_declarations or self._nested_selector)

    def _scan(self) -> None:
        char = self._source[self._pos]
        if self._structural:
            self._scan_structural(char)
            return
        if self._scan_whitespace():
            return
        if char == "/" and self._peek(1) == "*":
            self._scan_delimited(TokenType.COMMENT, "/*", "*/", "comment", "comment")
            return
        if char == "{":
            self._open_block()
            return
        if char == "}":
            self._close_block()
            return
        if char == ";":
            self._emit(TokenType.SEMICOLON, self._pos, self._pos + 1, "punctuation")
            self._end_statement()
            return
        if char in _DELIMITERS:
            self._emit(_DELIMITERS[char], self._pos, self._pos + 1, "punctuation")
            return

        if self._statement_start:
            self._statement_start = False
            self._nested_selector = self._in_declarations and self._looks_like_nested_rule()

        if char in "\"'":
            self._scan_quoted(char)
        elif char == ",":
            self._emit(TokenType.COMMA, self._pos, self._pos + 1, "punctuation")
        elif char == "@":
            self._scan_at_rule()
        elif char == ":":
            self._scan_colon()
        elif char == "#":
            self._scan_hash()
        elif char == "!":
            self._scan_bang()
        elif self._starts_number():
            self._scan_number()
        elif char == "-" and self._peek(1) == "-":
            self._scan_custom_property()
        elif char == "." and self._in_selector and is_name_start(self._peek(1)):
            end = self._scan_name(self._pos + 1)
            self._emit(TokenType.SELECTOR, self._pos, end, "selector-class")
        elif is_name_start(char) or (char == "-" and is_name_start(self._peek(1))):
            self._scan_ident()
        elif char in _OPERATOR_CHARS:
            style = "combinator" if self._in_selector else "operator"
            self._emit(TokenType.OPERATOR, self._pos, self._pos + 1, style)

    def _scan_structural(self, char: str) -> None:
        if char == "/" and self._peek(1) == "*":
            self._scan_delimited(TokenType.COMMENT, "/*", "*/", "comment", "comment")
        elif char in _DELIMITERS:
            self._emit(_DELIMITERS[char], self._pos, self._pos + 1)
        elif char in "\"'":
            self._scan_quoted(char)
        else:
            self._pos = self._skip_until(self._pos + 1, _STRUCTURAL_STOPS)

    # =========================================================================
    # Context tracking
    # =========================================================================

    def _open_block(self) -> None:
        if self._at_rule is not None:
            holds_declarations = self._at_rule not in NESTING_AT_RULES
        else:
            holds_declarations = True
        self._contexts.append(holds_declarations)
        self._emit(TokenType.BLOCK_OPEN, self._pos, self._pos + 1, "punctuation")
        self._end_statement()

    def _close_block(self) -> None:
        if self._contexts:
            self._contexts.pop()
        self._emit(TokenType.BLOCK_CLOSE, self._pos, self._pos + 1, "punctuation")
        self._end_statement()

    def _end_statement(self) -> None:
        self._in_value = False
        self._at_rule = None
        self._nested_selector = False
        self._statement_start = True

    def _looks_like_nested_rule(self) -> bool:
        """True if a ``{`` comes before the next ``;`` or ``}``."""
        stop = self._skip_until(self._pos, _STATEMENT_ENDS)
        return stop < self._end and self._source[stop] == "{"

    # =========================================================================
    # Scan rules
    # =========================================================================

    def _scan_name(self, pos: int) -> int:
        source = self._source
        end = self._end
        while pos < end and is_name_char(source[pos]):
            pos += 1
        return pos

    def _scan_at_rule(self) -> None:
        start = self._pos
        end = self._scan_name(start + 1)
        if end == start + 1:
            self._emit(TokenType.UNKNOWN, start, end, "unknown")
            return
        self._emit(TokenType.AT_RULE, start, end, "at-rule")
        self._at_rule = self._source[start + 1 : end].lower()

    def _scan_colon(self) -> None:
        start = self._pos
        if self._in_selector:
            name_start = start + 2 if self._peek(1) == ":" else start + 1
            end = self._scan_name(name_start)
            if end > name_start:
                name = self._source[name_start:end].lower()
                style = "pseudo" if name in PSEUDO_CLASSES else "pseudo-unknown"
                self._emit(TokenType.PSEUDO, start, end, style)
                return
        self._emit(TokenType.COLON, start, start + 1, "punctuation")
        if self._in_declarations and self._at_rule is None and not self._nested_selector:
            self._in_value = True

    def _scan_hash(self) -> None:
        start = self._pos
        if self._in_selector:
            end = self._scan_name(start + 1)
            if end > start + 1:
                self._emit(TokenType.SELECTOR, start, end, "selector-id")
                return
        else:
            end = self._skip_chars(start + 1, HEX_DIGITS)
            digits = end - start - 1
            if digits in (3, 4, 6, 8) and not (end < self._end and is_name_char(self._source[end])):
                self._emit(TokenType.HEX_COLOR, start, end, "color")
                return
        self._emit(TokenType.UNKNOWN, start, start + 1, "unknown")

    def _scan_bang(self) -> None:
        start = self._pos
        end = self._scan_name(start + 1)
        if self._source[start + 1 : end].lower() == "important":
            self._emit(TokenType.KEYWORD, start, end, "important")
        else:
            self._emit(TokenType.OPERATOR, start, start + 1, "operator")

    def _starts_number(self) -> bool:
        char = self._peek()
        if char in DIGITS:
            return True
        if char == "." and self._peek(1) in DIGITS:
            return True
        if char in "+-" and not self._in_selector:
            following = self._peek(1)
            return following in DIGITS or (following == "." and self._peek(2) in DIGITS)
        return False

    def _scan_number(self) -> None:
        source = self._source
        start = self._pos
        index = start + 1 if source[start] in "+-" else start
        index = self._skip_chars(index, DIGITS)
        if index < self._end and source[index] == "." and self._peek(index - start + 1) in DIGITS:
            index = self._skip_chars(index + 1, DIGITS)
        if index < self._end and source[index] in "eE":
            exponent = index + 1
            if exponent < self._end and source[exponent] in "+-":
                exponent += 1
            if exponent < self._end and source[exponent] in DIGITS:
                index = self._skip_chars(exponent, DIGITS)

        if index < self._end and source[index] == "%":
            self._emit(TokenType.DIMENSION, start, index + 1, "number")
            return
        unit_end = index
        while unit_end < self._end and source[unit_end].isalpha():
            unit_end += 1
        if unit_end > index:
            style = "number" if source[index:unit_end].lower() in UNITS else "number-unknown-unit"
            self._emit(TokenType.DIMENSION, start, unit_end, style)
            return
        self._emit(TokenType.NUMBER, start, index, "number")

    def _scan_custom_property(self) -> None:
        start = self._pos
        end = self._scan_name(start + 2)
        self._emit(TokenType.CUSTOM_PROPERTY, start, end, "variable")

    def _scan_ident(self) -> None:
        source = self._source
        start = self._pos
        end = self._scan_name(start + 1)
        word = source[start:end]
        lowered = word.lower()

        if end < self._end and source[end] == "(":
            self._emit(TokenType.FUNCTION, start, end, "function")
            self._emit(TokenType.PAREN_OPEN, end, end + 1, "punctuation")
            if lowered == "url":
                self._scan_url_body()
            return

        if self._at_rule is not None:
            if lowered in MEDIA_KEYWORDS:
                self._emit(TokenType.KEYWORD, start, end, "keyword")
            elif lowered in MEDIA_FEATURES:
                self._emit(TokenType.PROPERTY, start, end, "property")
            else:
                self._emit(TokenType.IDENTIFIER, start, end, "value")
        elif self._in_selector:
            self._emit(TokenType.SELECTOR, start, end, "selector-tag")
        elif not self._in_value:
            style = "property" if is_known_property(word) else "property-unknown"
            self._emit(TokenType.PROPERTY, start, end, style)
        elif lowered in COLOR_KEYWORDS:
            self._emit(TokenType.COLOR, start, end, "color")
        elif lowered in VALUE_KEYWORDS:
            self._emit(TokenType.VALUE_KEYWORD, start, end, "value")
        else:
            self._emit(TokenType.IDENTIFIER, start, end, "value")

    def _scan_url_body(self) -> None:
        """Consume an unquoted ``url(...)`` argument as one string token."""
        start = self._skip_chars(self._pos, SPACE_CHARS)
        if start >= self._end or self._source[start] in "\"')":
            return
        end = self._skip_until(start, _URL_STOPS)
        if start > self._pos:
            self._emit(TokenType.WHITESPACE, self._pos, start, "space")
        self._emit(TokenType.STRING, start, end, "string")
