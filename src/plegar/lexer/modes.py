"""Lexer detail levels and scanning states."""

from __future__ import annotations

from enum import Enum, auto


class DetailLevel(Enum):
    """How much classification a lexer performs.

    - STRUCTURAL: emit only brace/tag/comment boundary tokens. Strings,
      regexes and other literals are still *consumed* so delimiters inside
      them never count, but fine classification is skipped entirely.
    - RICH: emit a gapless stream with every token classified.

    """

    STRUCTURAL = auto()
    RICH = auto()


class ScriptState(Enum):
    """Frame kinds on the script lexer's nesting stack.

    A frame is pushed when script code is entered from inside another
    construct and popped when the matching ``}`` comes back:
    - TEMPLATE: ``${`` inside a template literal
    - MARKUP_ATTRIBUTES: ``{`` inside a markup tag's attribute list
    - MARKUP_CHILDREN: ``{`` between a markup element's children

    """

    TEMPLATE = auto()
    MARKUP_ATTRIBUTES = auto()
    MARKUP_CHILDREN = auto()
