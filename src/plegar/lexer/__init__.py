"""Lexers for the three supported languages.

One implementation per language, parameterized by DetailLevel: STRUCTURAL
emits only brace/tag/comment boundaries for fast fold updates, RICH emits a
gapless, fully classified stream for highlighting.

Example:
    >>> from plegar.lexer import CssLexer, DetailLevel
    >>> tokens = CssLexer("a {\\n}", DetailLevel.STRUCTURAL).run()
    >>> [t.type.name for t in tokens]
    ['BLOCK_OPEN', 'BLOCK_CLOSE']
"""

from plegar.lexer.core import BaseLexer
from plegar.lexer.css import CssLexer
from plegar.lexer.html import HtmlLexer
from plegar.lexer.js import JsLexer
from plegar.lexer.modes import DetailLevel

__all__ = [
    "BaseLexer",
    "CssLexer",
    "DetailLevel",
    "HtmlLexer",
    "JsLexer",
]
