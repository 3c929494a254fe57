"""Script grammar.

Structural depth recognizes the nesting that matters for folding: blocks,
parentheses, brackets, template literals (with their interpolations),
embedded markup elements and comments.

Full depth additionally groups tokens into statements:

- ``[async] function [*] [name] (params) { body }`` -> FunctionDeclaration
- ``const|let|var name ...`` -> VariableDeclaration
- anything else -> Statement

A statement ends at ``;``, before a closer, at end of input, or at a line
break when the previous token completes an expression and the next one does
not continue it (a simplified form of automatic semicolon insertion).
"""

from __future__ import annotations

from collections.abc import Sequence

from plegar.nodes import (
    Block,
    Brackets,
    Comment,
    FunctionDeclaration,
    Node,
    Parentheses,
    Statement,
    TemplateLiteral,
    VariableDeclaration,
)
from plegar.parsing.common import (
    CLOSER_TYPES,
    parse_comment,
    parse_document,
    parse_group,
    parse_items,
    skip_balanced,
    unclosed_end,
)
from plegar.parsing.cursor import Cursor
from plegar.parsing.elements import SCRIPT_MARKUP_DIALECT, parse_element, parse_text
from plegar.parsing.grammar import GrammarBuilder
from plegar.tokens import Token, TokenType
from plegar.vocab.js import DECLARATION_KEYWORDS

_STRUCTURE_RULES = ("comment", "block", "parentheses", "brackets", "template", "element")
_STATEMENT_RULES = ("comment", "function_declaration", "variable_declaration", "statement")

# Tokens after which a line break may end the statement.
_VALUE_END_TYPES = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.LITERAL,
        TokenType.BUILT_IN,
        TokenType.NUMBER,
        TokenType.STRING,
        TokenType.REGEX,
        TokenType.ERROR,
    }
)
_VALUE_END_KEYWORDS = frozenset({"break", "continue", "return", "debugger", "this", "super"})
_CONTROL_KEYWORDS = frozenset({"if", "for", "while", "with", "switch"})
_CONTINUE_KEYWORDS = frozenset({"else", "catch", "finally"})
_POSTFIX_OPERATORS = frozenset({"++", "--"})

builder = GrammarBuilder("js")


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


@builder.rule("template")
def template(c: Cursor) -> Node | None:
    """Template literal. Unterminated templates are reported by the lexer."""
    opener = c.match_type(TokenType.TEMPLATE_START)
    if opener is None:
        return None
    if c.too_deep():
        end = skip_balanced(c, opener, TokenType.TEMPLATE_END)
        return TemplateLiteral(opener.start, end)

    children: list[Node] = []
    with c.opened(TokenType.TEMPLATE_END, opener.start):
        while True:
            token = c.peek()
            if token is None or (
                token.type in CLOSER_TYPES and token.type is not TokenType.TEMPLATE_END
            ):
                return TemplateLiteral(
                    opener.start, unclosed_end(c), tuple(children), closed=False
                )
            c.next()
            if token.type is TokenType.TEMPLATE_END:
                return TemplateLiteral(opener.start, token.end, tuple(children))
            if token.type is TokenType.TEMPLATE_EXPR_OPEN:
                with c.opened(TokenType.TEMPLATE_EXPR_CLOSE, token.start):
                    items, close = parse_items(c, _STRUCTURE_RULES, TokenType.TEMPLATE_EXPR_CLOSE)
                children.extend(items)
                if close is None:
                    return TemplateLiteral(
                        opener.start, unclosed_end(c), tuple(children), closed=False
                    )


@builder.rule("element")
def element(c: Cursor) -> Node | None:
    return parse_element(c, SCRIPT_MARKUP_DIALECT)


@builder.rule("text")
def text(c: Cursor) -> Node | None:
    return parse_text(c)


# =============================================================================
# Statements (full depth)
# =============================================================================


def _completes(token: Token) -> bool:
    """True if ``token`` can end an expression."""
    if token.type in _VALUE_END_TYPES:
        return True
    if token.type is TokenType.KEYWORD:
        return token.value in _VALUE_END_KEYWORDS
    if token.type is TokenType.OPERATOR:
        return token.value in _POSTFIX_OPERATORS
    return False


def _continues(token: Token) -> bool:
    """True if ``token`` at the start of a line continues the statement."""
    if token.type is TokenType.OPERATOR:
        return token.value not in _POSTFIX_OPERATORS
    if token.type is TokenType.PUNCTUATION:
        return token.value in (".", ",")
    if token.type is TokenType.KEYWORD:
        return token.value in _CONTINUE_KEYWORDS
    return token.type is TokenType.BLOCK_OPEN


def _parse_statement(
    c: Cursor,
    children: list[Node],
    *,
    complete: bool = False,
    control: bool = False,
) -> int:
    """Consume the rest of a statement and return its end offset.

    Args:
        children: Receives the nested structures found
        complete: Whether what was consumed so far already completes an
            expression
        control: The statement starts with ``if``/``for``/``while``...; its
            parenthesized head does not complete it
    """
    end = c.previous_end()
    while True:
        crossed = c.skip_trivia()
        token = c.peek()
        if token is None or token.type in CLOSER_TYPES:
            return end
        if crossed and complete and not _continues(token):
            return end
        if token.type is TokenType.PUNCTUATION and token.value == ";":
            c.next()
            return token.end

        node = c.one_of(_STRUCTURE_RULES)
        if node is not None:
            children.append(node)
            end = node.end
            if isinstance(node, Parentheses) and control:
                control = False
                complete = False
            elif not isinstance(node, Comment):
                complete = True
            continue

        c.next()
        end = token.end
        complete = _completes(token)


def _param_names(tokens: Sequence[Token]) -> tuple[str, ...]:
    """Plain parameter names from the tokens of a parameter list."""
    names: list[str] = []
    depth = 0
    expecting = False
    for token in tokens:
        kind = token.type
        if kind in (TokenType.PAREN_OPEN, TokenType.BRACKET_OPEN, TokenType.BLOCK_OPEN):
            depth += 1
            expecting = depth == 1
            if kind is TokenType.PAREN_OPEN and depth == 1:
                continue
        elif kind in (TokenType.PAREN_CLOSE, TokenType.BRACKET_CLOSE, TokenType.BLOCK_CLOSE):
            depth -= 1
            if depth == 0:
                break
        if depth != 1 or kind in (TokenType.WHITESPACE, TokenType.NEWLINE):
            continue
        if kind is TokenType.PUNCTUATION and token.value == ",":
            expecting = True
        elif kind is TokenType.OPERATOR and token.value == "...":
            continue
        elif kind is TokenType.IDENTIFIER and expecting:
            names.append(token.value)
            expecting = False
        else:
            expecting = False
    return tuple(names)


@builder.rule("function_declaration")
def function_declaration(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    first = c.match_type(TokenType.KEYWORD, "async")
    if first is not None:
        c.skip_trivia()
    keyword = c.match_type(TokenType.KEYWORD, "function")
    if keyword is None:
        return None
    start = keyword.start if first is None else first.start

    c.skip_trivia()
    c.match_type(TokenType.OPERATOR, "*")
    c.skip_trivia()
    name = c.match_type(TokenType.IDENTIFIER)

    params_at = c.pos
    parts = c.sequence(("parentheses", "block"))
    if parts is None:
        return None
    children = tuple(part for part in parts if part is not None)
    params = _param_names(c.tokens_between(params_at, c.pos))
    return FunctionDeclaration(
        start,
        children[-1].end,
        children,
        name="" if name is None else name.value,
        params=params,
    )


@builder.rule("variable_declaration")
def variable_declaration(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    keyword = c.match_type(TokenType.KEYWORD, DECLARATION_KEYWORDS)
    if keyword is None:
        return None
    c.skip_trivia()
    name = c.match_type(TokenType.IDENTIFIER)
    children: list[Node] = []
    end = _parse_statement(c, children, complete=name is not None)
    return VariableDeclaration(
        keyword.start,
        end,
        tuple(children),
        kind=keyword.value,
        name="" if name is None else name.value,
    )


@builder.rule("statement")
def statement(c: Cursor) -> Node | None:
    if not c.rich:
        return None
    first = c.peek()
    if first is None or first.type in CLOSER_TYPES:
        return None
    control = first.type is TokenType.KEYWORD and first.value in _CONTROL_KEYWORDS
    children: list[Node] = []
    end = _parse_statement(c, children, control=control)
    return Statement(first.start, end, tuple(children))


JS_GRAMMAR = builder.build()

__all__ = ["JS_GRAMMAR"]
