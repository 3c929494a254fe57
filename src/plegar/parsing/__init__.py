"""Parsing subsystem for Plegar.

Each language is a Grammar: an immutable table of named rules. Rules take a
Cursor and return a node or None; the Cursor supplies the backtracking
primitives (``apply``, ``one_of``, ``sequence``, ``optional``, ``attempt``)
and the error list. The Parser applies a grammar's start rule.

One grammar serves both depths. At ``DetailLevel.STRUCTURAL`` the token
stream only holds boundary tokens and the full-depth rules (rules,
declarations, statements, attributes) bow out, leaving blocks, elements,
groups and comments.

Example:
    >>> from plegar.lexer import CssLexer
    >>> from plegar.parsing import CSS_GRAMMAR, Parser
    >>> source = "a {\\n  color: red;\\n}"
    >>> document = Parser(CssLexer(source).run(), CSS_GRAMMAR, source=source).run()
    >>> type(document.children[0]).__name__
    'Rule'

Public API:
Cursor: Backtracking token cursor
Grammar / GrammarBuilder: Rule tables
Parser: Applies a grammar to a token sequence
CSS_GRAMMAR / HTML_GRAMMAR / JS_GRAMMAR: The three language grammars

"""

from plegar.parsing.css import CSS_GRAMMAR
from plegar.parsing.cursor import Backtrack, Cursor, Snapshot
from plegar.parsing.grammar import Grammar, GrammarBuilder, Rule
from plegar.parsing.html import EMBEDDED_GRAMMARS, HTML_GRAMMAR
from plegar.parsing.js import JS_GRAMMAR
from plegar.parsing.parser import Parser

__all__ = [
    "Backtrack",
    "CSS_GRAMMAR",
    "Cursor",
    "EMBEDDED_GRAMMARS",
    "Grammar",
    "GrammarBuilder",
    "HTML_GRAMMAR",
    "JS_GRAMMAR",
    "Parser",
    "Rule",
    "Snapshot",
]
