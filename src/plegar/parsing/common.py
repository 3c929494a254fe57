"""Rule building blocks shared by the markup, stylesheet and script grammars.

Every grammar follows the same structural rule shape: an opening token
establishes a node, the rule loops trying nested structural children and
otherwise consumes one token as filler, and it stops at the matching closer
(closed normally) or at end of input (closed at end of input, with an
"Unclosed ..." error).

Closing delimiters get one cross-cutting policy, implemented by
``recover_closer``:

- a closer that an enclosing container is waiting for ends the current
  container implicitly (the caller reports it as unclosed)
- a closer that no open container is waiting for is reported as
  "Unexpected closing ..." and skipped

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from plegar.nodes import Comment, Document, Node
from plegar.parsing.cursor import Backtrack, Cursor, describe_closer
from plegar.tokens import CLOSER_PAIRS, Token, TokenType

if TYPE_CHECKING:
    from plegar.nodes import Container

# Token types that close some container.
CLOSER_TYPES: frozenset[TokenType] = frozenset(CLOSER_PAIRS)

_COMMENT_TYPES = frozenset({TokenType.COMMENT, TokenType.LINE_COMMENT})
_CLOSE_TAG_JUNK = frozenset({TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.TEXT})

_CLOSER_TEXT: dict[TokenType, str] = {
    TokenType.BLOCK_CLOSE: "}",
    TokenType.PAREN_CLOSE: ")",
    TokenType.BRACKET_CLOSE: "]",
    TokenType.TEMPLATE_EXPR_CLOSE: "}",
    TokenType.TEMPLATE_END: "`",
}

type ContainerFactory = Callable[[int, int, tuple[Node, ...], bool], Container]


def tag_name(token: Token) -> str:
    """Element name written in a TAG_OPEN (``<name``) or TAG_CLOSE (``</name``)."""
    if token.type is TokenType.TAG_CLOSE:
        return token.value[2:]
    return token.value[1:]


def normalize_space(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return " ".join(text.split())


# =============================================================================
# Closers
# =============================================================================


def consume_close_tag(c: Cursor) -> int:
    """Consume ``</name`` plus its ``>`` and return the end offset.

    Junk between the name and ``>`` is swallowed only when a ``>`` follows;
    otherwise just the ``</name`` token is consumed.
    """
    token = c.next()
    if token is None:
        return c.previous_end()
    end = token.end
    with c.attempt():
        while True:
            following = c.next()
            if following is None:
                raise Backtrack
            if following.type is TokenType.TAG_END:
                end = following.end
                break
            if following.type not in _CLOSE_TAG_JUNK:
                raise Backtrack
    return end


def recover_closer(c: Cursor, token: Token) -> bool:
    """Apply the closing-delimiter recovery policy to ``token``.

    Returns:
        True if an enclosing container is waiting for this closer (the caller
        should stop and let it close), False if the closer was reported as
        unexpected and skipped.
    """
    name = tag_name(token).lower() if token.type is TokenType.TAG_CLOSE else None
    if c.expects(token, name):
        return True
    c.error(f"Unexpected closing {describe_closer(token)}", token.start, token.end)
    if token.type is TokenType.TAG_CLOSE:
        consume_close_tag(c)
    else:
        c.next()
    return False


# =============================================================================
# Loops
# =============================================================================


def parse_items(
    c: Cursor,
    rules: Sequence[str],
    closer: TokenType | None = None,
) -> tuple[list[Node], Token | None]:
    """Parse children until ``closer``, an enclosing container's closer, or EOF.

    Args:
        c: Cursor positioned after the opener
        rules: Rule names tried (in order) for each child
        closer: Token type that closes this container (None at top level)

    Returns:
        (children, closing_token) where closing_token is None when the loop
        stopped without finding ``closer``.
    """
    children: list[Node] = []
    while True:
        c.skip_trivia()
        token = c.peek()
        if token is None:
            return children, None
        if token.type is closer:
            c.next()
            return children, token
        if token.type in CLOSER_TYPES:
            if recover_closer(c, token):
                return children, None
            continue
        node = c.one_of(rules)
        if node is not None:
            children.append(node)
        else:
            c.next()


def parse_document(c: Cursor, rules: Sequence[str]) -> Document:
    """Start-rule body shared by the grammars: items until end of input."""
    children, _ = parse_items(c, rules)
    return Document(c.start, c.end, tuple(children))


def unclosed_end(c: Cursor) -> int:
    """Where an unclosed container ends: the next closer, or end of input."""
    token = c.peek()
    return c.end if token is None else token.start


def parse_body(
    c: Cursor,
    opener: Token,
    closer: TokenType,
    rules: Sequence[str],
    expected: str,
    what: str,
) -> tuple[tuple[Node, ...], int, bool]:
    """Parse a delimited body whose opener has just been consumed.

    Returns:
        (children, end, closed)
    """
    with c.opened(closer, opener.start):
        children, close = parse_items(c, rules, closer)
    if close is not None:
        return tuple(children), close.end, True
    c.error(f"Unclosed {what}: expected '{expected}'", opener.start, opener.end)
    return tuple(children), unclosed_end(c), False


def skip_balanced(c: Cursor, opener: Token, closer: TokenType) -> int:
    """Consume tokens up to the closer matching ``opener`` without recursing.

    Used past the nesting limit: the nested run becomes one flat leaf.
    """
    c.error("Nesting too deep: contents not analyzed", opener.start, opener.end)
    depth = 1
    while True:
        token = c.next()
        if token is None:
            return c.end
        if token.type is opener.type:
            depth += 1
        elif token.type is closer:
            depth -= 1
            if depth == 0:
                return token.end


def parse_group(
    c: Cursor,
    factory: ContainerFactory,
    opener_type: TokenType,
    closer_type: TokenType,
    rules: Sequence[str],
    what: str,
) -> Node | None:
    """Parse an opener-delimited group (block, parentheses, brackets)."""
    opener = c.match_type(opener_type)
    if opener is None:
        return None
    if c.too_deep():
        end = skip_balanced(c, opener, closer_type)
        return factory(opener.start, end, (), True)
    expected = _CLOSER_TEXT[closer_type]
    children, end, closed = parse_body(c, opener, closer_type, rules, expected, what)
    return factory(opener.start, end, children, closed)


# =============================================================================
# Leaf rules
# =============================================================================


def parse_comment(c: Cursor) -> Node | None:
    token = c.peek()
    if token is None or token.type not in _COMMENT_TYPES:
        return None
    c.next()
    return Comment(token.start, token.end)


__all__ = [
    "CLOSER_TYPES",
    "ContainerFactory",
    "consume_close_tag",
    "normalize_space",
    "parse_body",
    "parse_comment",
    "parse_document",
    "parse_group",
    "parse_items",
    "recover_closer",
    "skip_balanced",
    "tag_name",
    "unclosed_end",
]
