"""Stylesheet grammar.

Structural depth only needs brace balance: blocks, parenthesized and
bracketed groups, and comments. Full depth resolves what the braces belong
to:

- ``selector { ... }`` becomes a Rule
- ``@name prelude { ... }`` and ``@name prelude;`` become AtRules
- ``property: value;`` becomes a Declaration

A Rule is tried before a Declaration at every statement start. A lookahead
checks for a ``{`` before the next ``;`` or ``}``; without one the rule
alternative fails at once and the declaration is tried. That is how
``a:hover { }`` nested in a block and ``color: red;`` are told apart. The
lookahead answers come from one table per parse.

Rules and block at-rules keep their braces as a trailing Block child, which
is what folds.
"""

from __future__ import annotations

from collections.abc import Sequence

from plegar.nodes import AtRule, Block, Brackets, Declaration, Node, Parentheses, Rule
from plegar.parsing.common import (
    CLOSER_TYPES,
    normalize_space,
    parse_comment,
    parse_document,
    parse_group,
)
from plegar.parsing.cursor import Backtrack, Cursor
from plegar.parsing.grammar import GrammarBuilder
from plegar.tokens import Token, TokenType

_STRUCTURE_RULES = ("comment", "block", "parentheses", "brackets")
_STATEMENT_RULES = ("comment", "at_rule", "rule", "declaration", "block", "parentheses", "brackets")

_PROPERTY_TYPES = frozenset(
    {TokenType.PROPERTY, TokenType.CUSTOM_PROPERTY, TokenType.IDENTIFIER}
)
_STATEMENT_ENDS = frozenset({TokenType.SEMICOLON, TokenType.BLOCK_CLOSE})
_GROUP_OPENERS = frozenset({TokenType.PAREN_OPEN, TokenType.BRACKET_OPEN})

builder = GrammarBuilder("css")


def _statement_rules(c: Cursor) -> tuple[str, ...]:
    return _STATEMENT_RULES if c.rich else _STRUCTURE_RULES


@builder.rule("document")
def document(c: Cursor) -> Node | None:
    return parse_document(c, _statement_rules(c))


@builder.rule("comment")
def comment(c: Cursor) -> Node | None:
    return parse_comment(c)


@builder.rule("block")
def block(c: Cursor) -> Node | None:
    return parse_group(
        c, Block, TokenType.BLOCK_OPEN, TokenType.BLOCK_CLOSE, _statement_rules(c), "block"
    )


@builder.rule("parentheses")
def parentheses(c: Cursor) -> Node | None:
    return parse_group(
        c,
        Parentheses,
        TokenType.PAREN_OPEN,
        TokenType.PAREN_CLOSE,
        _STRUCTURE_RULES,
        "parentheses",
    )


@builder.rule("brackets")
def brackets(c: Cursor) -> Node | None:
    return parse_group(
        c,
        Brackets,
        TokenType.BRACKET_OPEN,
        TokenType.BRACKET_CLOSE,
        _STRUCTURE_RULES,
        "brackets",
    )


# =============================================================================
# Full-depth rules
# =============================================================================


def _rule_starts(tokens: Sequence[Token]) -> list[bool]:
    """For every token index, whether a ``{`` follows before any ``;``, ``}``
    or unbalanced closer.

    A forward pass pairs group openers with their closers; a backward pass
    then answers every index at once. Entry ``len(tokens)`` stands for end of
    input.
    """
    # Opener index -> index just past its closer. Openers cut off by a
    # statement end, a ``{`` or end of input never get an entry.
    after_group: dict[int, int] = {}
    pending: list[int] = []
    for index, token in enumerate(tokens):
        kind = token.type
        if kind in _STATEMENT_ENDS or kind is TokenType.BLOCK_OPEN:
            pending.clear()
        elif kind in _GROUP_OPENERS:
            pending.append(index)
        elif kind in CLOSER_TYPES and pending:
            after_group[pending.pop()] = index + 1

    starts = [False] * (len(tokens) + 1)
    for index in range(len(tokens) - 1, -1, -1):
        kind = tokens[index].type
        if kind is TokenType.BLOCK_OPEN:
            starts[index] = True
        elif kind in _STATEMENT_ENDS or kind in CLOSER_TYPES:
            starts[index] = False
        elif kind in _GROUP_OPENERS:
            after = after_group.get(index)
            starts[index] = after is not None and starts[after]
        else:
            starts[index] = starts[index + 1]
    return starts


def _looks_like_rule(c: Cursor) -> bool:
    """True if a ``{`` follows before any ``;``, ``}`` or unbalanced closer.

    Answered from a table built once per parse, so trying the rule
    alternative at every statement start stays linear overall.
    """
    return c.memo("css.rule_starts", _rule_starts)[c.pos]


def _parse_prelude(c: Cursor, children: list[Node]) -> int | None:
    """Consume prelude tokens up to (not including) ``{``, ``;`` or ``}``.

    Groups and comments inside the prelude become ``children``.

    Returns:
        End offset of the last prelude token, or None if the prelude is empty
    """
    end: int | None = None
    while True:
        c.skip_trivia()
        token = c.peek()
        if token is None or token.type is TokenType.BLOCK_OPEN:
            return end
        if token.type in _STATEMENT_ENDS or token.type in CLOSER_TYPES:
            return end
        if token.type in _GROUP_OPENERS or token.type is TokenType.COMMENT:
            node = c.one_of(_STRUCTURE_RULES)
            if node is not None:
                children.append(node)
                end = node.end
                continue
        c.next()
        end = token.end


@builder.rule("rule")
def rule(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    first = c.peek()
    if first is None or first.type is TokenType.AT_RULE or not _looks_like_rule(c):
        return None
    children: list[Node] = []
    prelude_end = _parse_prelude(c, children)
    if prelude_end is None:
        return None
    c.skip_trivia()
    body = c.apply("block")
    if not isinstance(body, Block):
        return None
    children.append(body)
    return Rule(
        first.start,
        body.end,
        tuple(children),
        selector=normalize_space(c.text(first.start, prelude_end)),
        closed=body.closed,
    )


@builder.rule("at_rule")
def at_rule(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    keyword = c.match_type(TokenType.AT_RULE)
    if keyword is None:
        return None
    name = keyword.value[1:].lower()
    children: list[Node] = []
    prelude_end = _parse_prelude(c, children)
    prelude = "" if prelude_end is None else normalize_space(c.text(keyword.end, prelude_end))
    end = keyword.end if prelude_end is None else prelude_end

    c.skip_trivia()
    semicolon = c.match_type(TokenType.SEMICOLON)
    if semicolon is not None:
        return AtRule(keyword.start, semicolon.end, tuple(children), name=name, prelude=prelude)

    body = c.apply("block")
    if not isinstance(body, Block):
        return AtRule(keyword.start, end, tuple(children), name=name, prelude=prelude)
    children.append(body)
    return AtRule(
        keyword.start,
        body.end,
        tuple(children),
        name=name,
        prelude=prelude,
        has_block=True,
        closed=body.closed,
    )


@builder.rule("declaration")
def declaration(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    prop = c.peek()
    if prop is None or prop.type not in _PROPERTY_TYPES:
        return None
    c.next()
    c.skip_trivia()
    if c.match_type(TokenType.COLON) is None:
        return None

    value_start: int | None = None
    value_end: int | None = None
    important = False
    end = c.previous_end()
    while True:
        c.skip_trivia()
        token = c.peek()
        if token is None or token.type is TokenType.BLOCK_CLOSE:
            break
        if token.type is TokenType.BLOCK_OPEN:
            raise Backtrack
        if token.type is TokenType.SEMICOLON:
            c.next()
            end = token.end
            break
        if token.type in CLOSER_TYPES:
            break
        if token.type is TokenType.KEYWORD and token.value[1:].strip().lower() == "important":
            c.next()
            important = True
            end = token.end
            continue
        if token.type in _GROUP_OPENERS:
            group = c.one_of(_STRUCTURE_RULES)
            if group is not None:
                token_start, token_end = group.start, group.end
            else:
                c.next()
                token_start, token_end = token.start, token.end
        else:
            c.next()
            token_start, token_end = token.start, token.end
        if value_start is None:
            value_start = token_start
        value_end = token_end
        end = token_end

    value = ""
    if value_start is not None and value_end is not None:
        value = normalize_space(c.text(value_start, value_end))
    return Declaration(prop.start, end, property=prop.value, value=value, important=important)


CSS_GRAMMAR = builder.build()

__all__ = ["CSS_GRAMMAR"]
