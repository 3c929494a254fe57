"""Element rule shared by the markup grammar and embedded script markup.

Both dialects use the same token kinds (TAG_OPEN, TAG_END, TAG_CLOSE,
TAG_SELF_CLOSE_END, ATTRIBUTE_NAME, ATTRIBUTE_VALUE, EQUALS, TEXT), so one
rule parses both. The dialect decides case folding, void elements, which
rules may appear inside a start tag (script expression containers), and
whether the implied-end-tag recovery policy applies.

Mismatch recovery for closing tags:

1. ``</x>`` matching the current element closes it.
2. ``</x>`` matching an open ancestor closes the current element
   implicitly. That is reported as a mismatch unless the current element's
   end tag is optional (``li``, ``p``, ``td``...) and implied end tags are
   enabled.
3. Any other ``</x>`` is reported as unexpected and skipped.

A start tag that implicitly ends the current element (``<li>`` while an
``li`` is open, a block element while a ``p`` is open) closes it silently.

"""

from __future__ import annotations

from dataclasses import dataclass

from plegar.nodes import Attribute, Element, Node, Text
from plegar.parsing.common import (
    CLOSER_TYPES,
    consume_close_tag,
    recover_closer,
    tag_name,
)
from plegar.parsing.cursor import Cursor
from plegar.tokens import Token, TokenType
from plegar.vocab.html import OPTIONAL_END_TAGS, VOID_ELEMENTS, implied_end

_START_TAG_ENDS = frozenset({TokenType.TAG_END, TokenType.TAG_SELF_CLOSE_END})
_TEXT_TYPES = frozenset({TokenType.TEXT, TokenType.ENTITY})
_VALUE_TYPES = frozenset({TokenType.ATTRIBUTE_VALUE, TokenType.ERROR})


@dataclass(frozen=True, slots=True)
class ElementDialect:
    """How the element rule behaves for one host language.

    Attributes:
        fold_case: Report element names lowercased
        void_elements: Names that never take children
        implied_end: Apply optional-end-tag recovery
        child_rules: Rules tried for each child of an element
        attribute_rules: Rules tried for non-attribute tokens inside a start
            tag (expression containers)

    """

    fold_case: bool
    void_elements: frozenset[str]
    implied_end: bool
    child_rules: tuple[str, ...]
    attribute_rules: tuple[str, ...] = ()


MARKUP_DIALECT = ElementDialect(
    fold_case=True,
    void_elements=VOID_ELEMENTS,
    implied_end=True,
    child_rules=("comment", "element", "raw_text", "text"),
)

SCRIPT_MARKUP_DIALECT = ElementDialect(
    fold_case=False,
    void_elements=frozenset(),
    implied_end=False,
    child_rules=("element", "block", "text"),
    attribute_rules=("block",),
)


def parse_element(c: Cursor, dialect: ElementDialect) -> Node | None:
    """Parse ``<name ...>children</name>`` (or a self-closing/void element)."""
    opener = c.match_type(TokenType.TAG_OPEN)
    if opener is None:
        return None
    written = tag_name(opener)
    key = written.lower()
    name = key if dialect.fold_case else written

    attributes: list[Attribute] = []
    children: list[Node] = []
    terminator = _parse_start_tag(c, dialect, attributes, children)
    if terminator is TokenType.TAG_SELF_CLOSE_END or (
        terminator is TokenType.TAG_END and key in dialect.void_elements
    ):
        return Element(
            opener.start,
            c.previous_end(),
            tuple(children),
            name=name,
            attributes=tuple(attributes),
            self_closing=True,
        )

    if c.too_deep():
        c.error("Nesting too deep: contents not analyzed", opener.start, opener.end)
        return Element(
            opener.start,
            c.previous_end(),
            tuple(children),
            name=name,
            attributes=tuple(attributes),
            closed=False,
        )

    with c.opened(TokenType.TAG_CLOSE, opener.start, key):
        closed, end = _parse_children(c, dialect, opener, key, children)
    return Element(
        opener.start,
        end,
        tuple(children),
        name=name,
        attributes=tuple(attributes),
        closed=closed,
    )


def _parse_start_tag(
    c: Cursor,
    dialect: ElementDialect,
    attributes: list[Attribute],
    children: list[Node],
) -> TokenType | None:
    """Consume the attribute list.

    Returns:
        The terminating token type, or None if the start tag was cut short
        (the lexer has already reported that).
    """
    while True:
        c.skip_trivia()
        token = c.peek()
        if token is None:
            return None
        if token.type in _START_TAG_ENDS:
            c.next()
            return token.type
        if token.type is TokenType.ATTRIBUTE_NAME:
            c.next()
            attributes.append(_parse_attribute(c, token, dialect, children))
            continue
        if token.type is TokenType.TAG_OPEN or token.type in CLOSER_TYPES:
            return None
        node = c.one_of(dialect.attribute_rules)
        if node is not None:
            children.append(node)
        else:
            c.next()


def _parse_attribute(
    c: Cursor,
    name_token: Token,
    dialect: ElementDialect,
    children: list[Node],
) -> Attribute:
    """Parse ``=value`` after an attribute name that was just consumed."""
    name = name_token.value.lower() if dialect.fold_case else name_token.value
    end = name_token.end

    snapshot = c.snapshot()
    c.skip_trivia()
    if c.match_type(TokenType.EQUALS) is None:
        c.restore(snapshot)
        return Attribute(name_token.start, end, name=name)

    end = c.previous_end()
    c.skip_trivia()
    token = c.peek()
    value: str | None = ""
    if token is not None and token.type in _VALUE_TYPES:
        c.next()
        value = _unquote(token.value)
        end = token.end
    else:
        node = c.one_of(dialect.attribute_rules)
        if node is not None:
            children.append(node)
            value = c.text(node.start, node.end)
            end = node.end
    return Attribute(name_token.start, end, name=name, value=value)


def _unquote(text: str) -> str:
    if text[:1] in ("'", '"'):
        text = text[1:]
        if text[-1:] in ("'", '"'):
            text = text[:-1]
    return text


def _parse_children(
    c: Cursor,
    dialect: ElementDialect,
    opener: Token,
    key: str,
    children: list[Node],
) -> tuple[bool, int]:
    """Parse element content up to its end tag.

    Returns:
        (closed, end)
    """
    display = tag_name(opener)
    optional = (
        dialect.implied_end and c.config.implied_end_tags and key in OPTIONAL_END_TAGS
    )
    while True:
        c.skip_trivia()
        token = c.peek()
        if token is None:
            if not optional:
                c.error(
                    f"Unclosed element <{display}>: expected </{display}>",
                    opener.start,
                    opener.end,
                )
            return False, c.end

        if token.type is TokenType.TAG_CLOSE and tag_name(token).lower() == key:
            return True, consume_close_tag(c)

        if token.type in CLOSER_TYPES:
            if not recover_closer(c, token):
                continue
            # The closer belongs to an enclosing container.
            if not optional:
                if token.type is TokenType.TAG_CLOSE:
                    message = (
                        f"Mismatched closing tag: expected </{display}> "
                        f"but found </{tag_name(token)}>"
                    )
                else:
                    message = f"Unclosed element <{display}>: expected </{display}>"
                c.error(message, token.start, token.end)
            return False, token.start

        if (
            token.type is TokenType.TAG_OPEN
            and dialect.implied_end
            and c.config.implied_end_tags
            and implied_end(key, tag_name(token).lower())
        ):
            return False, token.start

        node = c.one_of(dialect.child_rules)
        if node is not None:
            children.append(node)
        else:
            c.next()


def parse_text(c: Cursor) -> Node | None:
    """A run of character data (full parse only; trivia inside is kept)."""
    if not c.rich:
        return None
    first = c.peek()
    if first is None or first.type not in _TEXT_TYPES:
        return None
    c.next()
    end = first.end
    while True:
        snapshot = c.snapshot()
        c.skip_trivia()
        token = c.peek()
        if token is None or token.type not in _TEXT_TYPES:
            c.restore(snapshot)
            return Text(first.start, end)
        c.next()
        end = token.end


__all__ = [
    "ElementDialect",
    "MARKUP_DIALECT",
    "SCRIPT_MARKUP_DIALECT",
    "parse_element",
    "parse_text",
]
