"""Script (JavaScript) lexer.

Handles the constructs that decide where braces really are:

- block and line comments
- quoted strings with escapes (an unescaped line break ends them as ERROR)
- template literals, with a stack of interpolation frames so ``${`` nests
  arbitrarily and braces inside an interpolation are balanced
- regex literals vs. division, decided by the previous significant token
- best-effort embedded markup (JSX-like) regions that balance open and close
  tags and re-enter script mode for ``{...}`` expression containers

Markup regions reuse the markup token kinds (TAG_OPEN, TAG_CLOSE, TAG_END,
TAG_SELF_CLOSE_END, ATTRIBUTE_NAME...) so the script grammar can share the
element rule with the markup grammar.

Thread Safety:
Lexer instances are single-use. Create one per source string.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from plegar.lexer.core import DIGITS, HEX_DIGITS, LINE_BREAK_CHARS, WHITESPACE_CHARS, BaseLexer
from plegar.lexer.modes import DetailLevel, ScriptState
from plegar.tokens import TokenType
from plegar.vocab.js import (
    BUILT_INS,
    EXPRESSION_START_CHARS,
    KEYWORDS,
    LITERALS,
    OPERATORS_BY_FIRST,
    REGEX_KEYWORDS,
)

_DELIMITERS: dict[str, TokenType] = {
    "(": TokenType.PAREN_OPEN,
    ")": TokenType.PAREN_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
}

# Tokens that do not change what the previous significant character was.
_INSIGNIFICANT = frozenset(
    {TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.COMMENT, TokenType.LINE_COMMENT}
)
_WORD_TYPES = frozenset(
    {TokenType.IDENTIFIER, TokenType.KEYWORD, TokenType.LITERAL, TokenType.BUILT_IN}
)
_MEMBER_ACCESS = frozenset({".", "?."})

_NUMBER_CHARS = DIGITS | frozenset("_")
_RADIX_CHARS = HEX_DIGITS | frozenset("_oObBxX")
_MARKUP_NAME_STOPS = frozenset("=>/{<\"'") | WHITESPACE_CHARS
_MARKUP_TEXT_STOPS = frozenset("{<") | WHITESPACE_CHARS
_RADIX_MARKERS = frozenset("xXbBoO")


def is_ident_start(char: str) -> bool:
    if not char:
        return False
    return char.isalpha() or char in "_$" or (char > "\x7f" and char.isidentifier())


def is_ident_char(char: str) -> bool:
    if not char:
        return False
    return char.isalnum() or char in "_$" or (char > "\x7f" and ("_" + char).isidentifier())


def is_markup_name_char(char: str) -> bool:
    return char.isalnum() or char in "-_:."


class _MarkupStep(Enum):
    FINISHED = auto()  # tag list or region done
    SUSPENDED = auto()  # entered script code, or ran out of input
    TAG_OPENED = auto()  # a nested start tag began; scan its attributes next


@dataclass(slots=True)
class _MarkupRegion:
    """Open-element bookkeeping for one embedded markup region."""

    start: int
    tags: list[str] = field(default_factory=list)
    tag: str = ""  # element whose attribute list is being scanned


@dataclass(slots=True)
class _Frame:
    """Where to resume when the ``}`` at ``depth`` closes script code."""

    state: ScriptState
    depth: int
    start: int
    region: _MarkupRegion | None = None


class JsLexer(BaseLexer):
    """Script lexer.

    Usage:
        >>> tokens = JsLexer("const re = /a{2}/g;").run()
        >>> [t.type.name for t in tokens if not t.is_trivia]
        ['KEYWORD', 'IDENTIFIER', 'OPERATOR', 'REGEX', 'PUNCTUATION']

    """

    language = "js"

    __slots__ = ("_after_member", "_depth", "_frames", "_last_char", "_last_word")

    def __init__(
        self,
        source: str,
        detail: DetailLevel = DetailLevel.RICH,
        *,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        super().__init__(source, detail, start=start, end=end)
        self._depth = 0
        self._frames: list[_Frame] = []
        self._last_char = ""
        self._last_word = ""
        self._after_member = False

    def _emit(self, type: TokenType, start: int, end: int, style_class: str = "") -> None:
        if type not in _INSIGNIFICANT and end > start:
            self._last_char = self._source[end - 1]
            self._last_word = self._source[start:end] if type in _WORD_TYPES else ""
            self._after_member = self._source[start:end] in _MEMBER_ACCESS
        super()._emit(type, start, end, style_class)

    def _expression_allowed(self) -> bool:
        """True if the next token starts an expression (regex, markup) here.

        Decided by the previous significant token only: after an operator,
        an opening delimiter, a separator or a keyword like ``return`` an
        expression starts; after an identifier, a literal or a closing
        ``)``/``]`` the code is continuing one.
        """
        if self._last_word:
            return self._last_word in REGEX_KEYWORDS
        return not self._last_char or self._last_char in EXPRESSION_START_CHARS

    def _finish(self) -> None:
        # Unclosed expression containers are blocks; the parser reports those.
        for frame in self._frames:
            if frame.state is ScriptState.TEMPLATE:
                self._lex_error("Unclosed template literal: expected '`'", frame.start, self._end)

    def _scan(self) -> None:
        pos = self._pos
        char = self._source[pos]
        if self._scan_whitespace():
            return
        if char == "/":
            following = self._peek(1)
            if following == "/":
                self._emit(TokenType.LINE_COMMENT, pos, self._skip_until(pos, LINE_BREAK_CHARS), "comment")
            elif following == "*":
                self._scan_delimited(TokenType.COMMENT, "/*", "*/", "comment", "comment")
            elif not (self._expression_allowed() and self._scan_regex()):
                self._scan_operator()
            return
        if char in "\"'":
            self._scan_quoted(char, what="string literal")
        elif char == "`":
            self._emit(TokenType.TEMPLATE_START, pos, pos + 1, "string")
            self._scan_template_body(pos)
        elif char == "{":
            self._depth += 1
            self._emit(TokenType.BLOCK_OPEN, pos, pos + 1, "punctuation")
        elif char == "}":
            self._close_brace()
        elif char in _DELIMITERS:
            self._emit(_DELIMITERS[char], pos, pos + 1, "punctuation")
        elif char == "<" and self._starts_markup():
            region = _MarkupRegion(start=pos)
            self._scan_markup_tag_open(region)
            self._run_markup(region, in_attributes=True)
        elif char in DIGITS or (char == "." and self._peek(1) in DIGITS):
            self._scan_number()
        elif is_ident_start(char):
            self._scan_identifier(pos)
        elif char == "#" and is_ident_start(self._peek(1)):
            self._scan_identifier(pos + 1, start=pos)
        elif char in ";,":
            self._emit(TokenType.PUNCTUATION, pos, pos + 1, "punctuation")
        elif char == "." and not self._starts_with("..."):
            self._emit(TokenType.PUNCTUATION, pos, pos + 1, "punctuation")
        else:
            self._scan_operator()

    # =========================================================================
    # Literals
    # =========================================================================

    def _scan_regex(self) -> bool:
        """Consume ``/body/flags`` if the line holds a closing slash."""
        source = self._source
        start = self._pos
        end = self._end
        index = start + 1
        in_class = False
        while index < end:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char in LINE_BREAK_CHARS:
                return False
            if in_class:
                if char == "]":
                    in_class = False
            elif char == "[":
                in_class = True
            elif char == "/":
                break
            index += 1
        else:
            return False
        index += 1
        while index < end and source[index].isascii() and source[index].isalpha():
            index += 1
        self._emit(TokenType.REGEX, start, index, "regex")
        return True

    def _scan_template_body(self, opened_at: int) -> None:
        """Scan template text up to the closing backtick or the next ``${``."""
        source = self._source
        start = index = self._pos
        end = self._end
        while index < end:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char == "`":
                if index > start:
                    self._emit(TokenType.TEMPLATE_CONTENT, start, index, "string")
                self._emit(TokenType.TEMPLATE_END, index, index + 1, "string")
                return
            if char == "$" and index + 1 < end and source[index + 1] == "{":
                if index > start:
                    self._emit(TokenType.TEMPLATE_CONTENT, start, index, "string")
                self._emit(TokenType.TEMPLATE_EXPR_OPEN, index, index + 2, "template-expression")
                self._frames.append(_Frame(ScriptState.TEMPLATE, self._depth, opened_at))
                return
            index += 1
        index = min(index, end)
        if index > start:
            self._emit(TokenType.TEMPLATE_CONTENT, start, index, "string")
        self._pos = index
        self._lex_error("Unclosed template literal: expected '`'", opened_at, index)

    def _scan_number(self) -> None:
        source = self._source
        start = self._pos
        end = self._end
        if source[start] == "0" and self._peek(1) in _RADIX_MARKERS:
            index = self._skip_chars(start + 2, _RADIX_CHARS)
        else:
            index = self._skip_chars(start, _NUMBER_CHARS)
            if index < end and source[index] == ".":
                index = self._skip_chars(index + 1, _NUMBER_CHARS)
            if index < end and source[index] in "eE":
                exponent = index + 1
                if exponent < end and source[exponent] in "+-":
                    exponent += 1
                if exponent < end and source[exponent] in DIGITS:
                    index = self._skip_chars(exponent, _NUMBER_CHARS)
        if index < end and source[index] == "n":
            index += 1
        self._emit(TokenType.NUMBER, start, index, "number")

    def _scan_identifier(self, name_start: int, *, start: int | None = None) -> None:
        source = self._source
        if start is None:
            start = name_start
        index = name_start + 1
        end = self._end
        while index < end and is_ident_char(source[index]):
            index += 1

        if self._structural:
            self._emit(TokenType.IDENTIFIER, start, index)
            return

        word = source[start:index]
        if self._after_member:
            self._emit(TokenType.IDENTIFIER, start, index, "property")
        elif word in KEYWORDS:
            self._emit(TokenType.KEYWORD, start, index, "keyword")
        elif word in LITERALS:
            self._emit(TokenType.LITERAL, start, index, "literal")
        elif word in BUILT_INS:
            self._emit(TokenType.BUILT_IN, start, index, "builtin")
        else:
            following = self._skip_chars(index, WHITESPACE_CHARS)
            is_call = following < end and source[following] == "("
            self._emit(TokenType.IDENTIFIER, start, index, "function" if is_call else "variable")

    def _scan_operator(self) -> None:
        pos = self._pos
        for operator in OPERATORS_BY_FIRST.get(self._source[pos], ()):
            if self._starts_with(operator):
                self._emit(TokenType.OPERATOR, pos, pos + len(operator), "operator")
                return
        self._emit(TokenType.UNKNOWN, pos, pos + 1, "unknown")

    def _close_brace(self) -> None:
        pos = self._pos
        if self._frames and self._frames[-1].depth == self._depth:
            frame = self._frames.pop()
            if frame.state is ScriptState.TEMPLATE:
                self._emit(TokenType.TEMPLATE_EXPR_CLOSE, pos, pos + 1, "template-expression")
                self._scan_template_body(frame.start)
                return
            self._emit(TokenType.BLOCK_CLOSE, pos, pos + 1, "punctuation")
            if frame.region is not None:
                in_attributes = frame.state is ScriptState.MARKUP_ATTRIBUTES
                self._run_markup(frame.region, in_attributes=in_attributes)
            return
        self._depth = max(0, self._depth - 1)
        self._emit(TokenType.BLOCK_CLOSE, pos, pos + 1, "punctuation")

    # =========================================================================
    # Embedded markup regions
    # =========================================================================

    def _starts_markup(self) -> bool:
        following = self._peek(1)
        return self._expression_allowed() and (
            (following.isascii() and following.isalpha()) or following == ">"
        )

    def _scan_markup_tag_open(self, region: _MarkupRegion) -> None:
        start = self._pos
        index = start + 1
        while index < self._end and is_markup_name_char(self._source[index]):
            index += 1
        region.tag = self._source[start + 1 : index]
        self._emit(TokenType.TAG_OPEN, start, index, "tag")

    def _run_markup(self, region: _MarkupRegion, *, in_attributes: bool) -> None:
        """Drive a markup region until it closes or suspends into script."""
        while True:
            if in_attributes:
                step = self._scan_markup_attributes(region)
                if step is _MarkupStep.SUSPENDED or not region.tags:
                    return
            step = self._scan_markup_children(region)
            if step is not _MarkupStep.TAG_OPENED:
                return
            in_attributes = True

    def _scan_markup_attributes(self, region: _MarkupRegion) -> _MarkupStep:
        source = self._source
        while self._pos < self._end:
            pos = self._pos
            char = source[pos]
            if char in WHITESPACE_CHARS:
                self._scan_whitespace()
            elif char == ">":
                self._emit(TokenType.TAG_END, pos, pos + 1, "tag")
                region.tags.append(region.tag)
                region.tag = ""
                return _MarkupStep.FINISHED
            elif char == "/" and self._peek(1) == ">":
                self._emit(TokenType.TAG_SELF_CLOSE_END, pos, pos + 2, "tag")
                region.tag = ""
                return _MarkupStep.FINISHED
            elif char == "{":
                self._emit(TokenType.BLOCK_OPEN, pos, pos + 1, "punctuation")
                self._frames.append(_Frame(ScriptState.MARKUP_ATTRIBUTES, self._depth, pos, region))
                return _MarkupStep.SUSPENDED
            elif char in "\"'":
                self._scan_quoted(
                    char,
                    type=TokenType.ATTRIBUTE_VALUE,
                    style_class="attribute-value",
                    what="attribute value",
                    multiline=True,
                )
            elif char == "=":
                self._emit(TokenType.EQUALS, pos, pos + 1, "punctuation")
            else:
                end = self._skip_until(pos + 1, _MARKUP_NAME_STOPS)
                self._emit(TokenType.ATTRIBUTE_NAME, pos, end, "attribute")
        self._lex_error(f"Unclosed tag <{region.tag}>: expected '>'", region.start, self._end)
        return _MarkupStep.SUSPENDED

    def _scan_markup_children(self, region: _MarkupRegion) -> _MarkupStep:
        source = self._source
        while self._pos < self._end:
            pos = self._pos
            char = source[pos]
            if char == "{":
                self._emit(TokenType.BLOCK_OPEN, pos, pos + 1, "punctuation")
                self._frames.append(_Frame(ScriptState.MARKUP_CHILDREN, self._depth, pos, region))
                return _MarkupStep.SUSPENDED
            if char == "<":
                following = self._peek(1)
                if following == "/":
                    self._scan_markup_close_tag(region)
                    if not region.tags:
                        return _MarkupStep.FINISHED
                    continue
                if (following.isascii() and following.isalpha()) or following == ">":
                    self._scan_markup_tag_open(region)
                    return _MarkupStep.TAG_OPENED
            if char in WHITESPACE_CHARS:
                self._scan_whitespace()
                continue
            end = self._skip_until(pos + 1, _MARKUP_TEXT_STOPS)
            self._emit(TokenType.TEXT, pos, end, "text")
        return _MarkupStep.SUSPENDED

    def _scan_markup_close_tag(self, region: _MarkupRegion) -> None:
        source = self._source
        start = self._pos
        index = start + 2
        while index < self._end and is_markup_name_char(source[index]):
            index += 1
        name = source[start + 2 : index]
        self._emit(TokenType.TAG_CLOSE, start, index, "tag")

        # Pop to the matching element; a stray name closes the innermost one
        # so the region can still end.
        if name in region.tags:
            del region.tags[len(region.tags) - 1 - region.tags[::-1].index(name) :]
        elif region.tags:
            region.tags.pop()

        while self._pos < self._end:
            pos = self._pos
            if source[pos] == ">":
                self._emit(TokenType.TAG_END, pos, pos + 1, "tag")
                return
            if not self._scan_whitespace():
                break
        self._lex_error(f"Unclosed tag </{name}>: expected '>'", start, self._pos)
