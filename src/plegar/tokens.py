"""Token and TokenType definitions shared by every language lexer.

A lexer produces an ordered list of Token objects: strictly increasing,
non-overlapping ``[start, end)`` offsets into the source. At rich detail the
list is gapless; at structural detail only boundary tokens are kept and the
text between them is simply skipped. In both cases re-inserting the
inter-token slices reconstructs the source exactly.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token kinds produced by the lexers.

    Organized by category:
    - Shared (text, whitespace, comments, literals)
    - Delimiters (braces, parentheses, brackets)
    - Markup (tags, attributes, entities, raw text)
    - Stylesheet (selectors, properties, values)
    - Script (keywords, operators, templates)

    """

    # Shared
    WHITESPACE = auto()  # run of spaces/tabs
    NEWLINE = auto()  # \n, \r\n or \r
    TEXT = auto()
    UNKNOWN = auto()  # single-character fallback
    ERROR = auto()  # best-effort token for an unterminated literal
    COMMENT = auto()  # /* */ or <!-- -->
    LINE_COMMENT = auto()  # // to end of line
    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    KEYWORD = auto()
    PUNCTUATION = auto()
    OPERATOR = auto()

    # Delimiters
    BLOCK_OPEN = auto()  # {
    BLOCK_CLOSE = auto()  # }
    PAREN_OPEN = auto()  # (
    PAREN_CLOSE = auto()  # )
    BRACKET_OPEN = auto()  # [
    BRACKET_CLOSE = auto()  # ]

    # Markup
    TAG_OPEN = auto()  # <name
    TAG_CLOSE = auto()  # </name
    TAG_END = auto()  # >
    TAG_SELF_CLOSE_END = auto()  # />
    ATTRIBUTE_NAME = auto()
    ATTRIBUTE_VALUE = auto()
    EQUALS = auto()
    ENTITY = auto()  # &amp; &#160;
    DOCTYPE = auto()  # <!DOCTYPE ...> and other <! declarations
    PROCESSING_INSTRUCTION = auto()  # <? ... ?>
    CDATA = auto()  # <![CDATA[ ... ]]>
    RAW_TEXT = auto()  # interior of <script>, <style>, <textarea>, <title>

    # Stylesheet
    AT_RULE = auto()  # @media
    SELECTOR = auto()  # .class #id tag
    PSEUDO = auto()  # :hover ::before
    PROPERTY = auto()
    CUSTOM_PROPERTY = auto()  # --name
    VALUE_KEYWORD = auto()  # auto none inherit
    COLOR = auto()  # named color keyword
    HEX_COLOR = auto()  # #fff
    DIMENSION = auto()  # 12px 50%
    FUNCTION = auto()  # calc( url( var(
    COLON = auto()
    SEMICOLON = auto()
    COMMA = auto()

    # Script
    BUILT_IN = auto()  # console Math Promise
    LITERAL = auto()  # true false null undefined
    REGEX = auto()  # /ab+c/gi
    TEMPLATE_START = auto()  # opening backtick
    TEMPLATE_CONTENT = auto()
    TEMPLATE_END = auto()  # closing backtick
    TEMPLATE_EXPR_OPEN = auto()  # ${
    TEMPLATE_EXPR_CLOSE = auto()  # } closing an interpolation


# Boundary tokens kept at structural detail. Everything else is consumed
# (so a brace inside a string never counts) but not emitted.
STRUCTURAL_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.COMMENT,
        TokenType.BLOCK_OPEN,
        TokenType.BLOCK_CLOSE,
        TokenType.PAREN_OPEN,
        TokenType.PAREN_CLOSE,
        TokenType.BRACKET_OPEN,
        TokenType.BRACKET_CLOSE,
        TokenType.TAG_OPEN,
        TokenType.TAG_CLOSE,
        TokenType.TAG_END,
        TokenType.TAG_SELF_CLOSE_END,
        TokenType.RAW_TEXT,
        TokenType.TEMPLATE_START,
        TokenType.TEMPLATE_END,
        TokenType.TEMPLATE_EXPR_OPEN,
        TokenType.TEMPLATE_EXPR_CLOSE,
    }
)

# Tokens that never carry meaning for the grammar.
TRIVIA_TYPES: frozenset[TokenType] = frozenset({TokenType.WHITESPACE, TokenType.NEWLINE})

# Closing delimiter -> the opening delimiter it pairs with.
CLOSER_PAIRS: dict[TokenType, TokenType] = {
    TokenType.BLOCK_CLOSE: TokenType.BLOCK_OPEN,
    TokenType.PAREN_CLOSE: TokenType.PAREN_OPEN,
    TokenType.BRACKET_CLOSE: TokenType.BRACKET_OPEN,
    TokenType.TEMPLATE_EXPR_CLOSE: TokenType.TEMPLATE_EXPR_OPEN,
    TokenType.TEMPLATE_END: TokenType.TEMPLATE_START,
    TokenType.TAG_CLOSE: TokenType.TAG_OPEN,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A classified slice of source text.

    Attributes:
        type: The token kind
        value: Raw source slice, ``source[start:end]``
        start: Start offset (0-indexed, inclusive)
        end: End offset (exclusive)
        style_class: Presentation hint for the highlighter ("" for none)
        language: For RAW_TEXT regions, the embedded language ("js", "css" or "")
        embedded: For RAW_TEXT regions, the sibling lexer's tokens with
            absolute offsets

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    type: TokenType
    value: str
    start: int
    end: int
    style_class: str = ""
    language: str = ""
    embedded: tuple[Token, ...] = ()

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_structural(self) -> bool:
        """True for boundary tokens kept by the structural pass."""
        return self.type in STRUCTURAL_TYPES

    @property
    def is_trivia(self) -> bool:
        return self.type in TRIVIA_TYPES

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        return f"Token({self.type.name}, {self.value!r}, {self.start}:{self.end})"


def flatten(tokens: Iterable[Token]) -> Iterator[Token]:
    """Yield tokens with every embedded region expanded in place.

    A RAW_TEXT token carrying sibling-lexer tokens is replaced by those
    tokens, so a markup document highlights its ``<script>`` and ``<style>``
    bodies with script and stylesheet classes. Order and non-overlap are
    preserved because embedded offsets lie inside the raw region.
    """
    for token in tokens:
        if token.embedded:
            yield from flatten(token.embedded)
        else:
            yield token


def reconstruct(source: str, tokens: Iterable[Token]) -> str:
    """Rebuild ``source`` from tokens plus the skipped inter-token text.

    Mostly useful for verifying the gapless invariant.
    """
    parts: list[str] = []
    pos = 0
    for token in tokens:
        if token.start > pos:
            parts.append(source[pos : token.start])
        parts.append(token.value)
        pos = token.end
    parts.append(source[pos:])
    return "".join(parts)


__all__ = [
    "CLOSER_PAIRS",
    "STRUCTURAL_TYPES",
    "TRIVIA_TYPES",
    "Token",
    "TokenType",
    "flatten",
    "reconstruct",
]
