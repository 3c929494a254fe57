"""Markup grammar.

Elements, comments and character data. The body of a ``<script>`` or
``<style>`` element arrives as one RAW_TEXT token whose ``embedded`` field
carries the sibling lexer's tokens; the ``raw_text`` rule parses those with
the script or stylesheet grammar so blocks inside embedded code still fold.
"""

from __future__ import annotations

from types import MappingProxyType

from plegar.nodes import Node, RawText
from plegar.parsing.common import parse_comment, parse_document
from plegar.parsing.css import CSS_GRAMMAR
from plegar.parsing.cursor import Cursor
from plegar.parsing.elements import MARKUP_DIALECT, parse_element, parse_text
from plegar.parsing.grammar import Grammar, GrammarBuilder
from plegar.parsing.js import JS_GRAMMAR
from plegar.parsing.parser import Parser
from plegar.tokens import TokenType

EMBEDDED_GRAMMARS: MappingProxyType[str, Grammar] = MappingProxyType(
    {"css": CSS_GRAMMAR, "js": JS_GRAMMAR}
)

_DOCUMENT_RULES = ("comment", "element", "text")

builder = GrammarBuilder("html")


@builder.rule("document")
def document(c: Cursor) -> Node | None:
    return parse_document(c, _DOCUMENT_RULES)


@builder.rule("comment")
def comment(c: Cursor) -> Node | None:
    return parse_comment(c)


@builder.rule("element")
def element(c: Cursor) -> Node | None:
    return parse_element(c, MARKUP_DIALECT)


@builder.rule("text")
def text(c: Cursor) -> Node | None:
    return parse_text(c)


@builder.rule("raw_text")
def raw_text(c: Cursor) -> Node | None:
    token = c.match_type(TokenType.RAW_TEXT)
    if token is None:
        return None
    grammar = EMBEDDED_GRAMMARS.get(token.language)
    if grammar is None or not token.embedded:
        return RawText(token.start, token.end, language=token.language)

    parser = Parser(
        token.embedded,
        grammar,
        source=c.source,
        detail=c.detail,
        config=c.config,
        start=token.start,
        end=token.end,
        lines=c.lines,
    )
    embedded = parser.run()
    c.extend_errors(parser.errors)
    return RawText(token.start, token.end, embedded.children, language=token.language)


HTML_GRAMMAR = builder.build()

__all__ = ["EMBEDDED_GRAMMARS", "HTML_GRAMMAR"]
