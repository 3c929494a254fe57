"""Typed syntax tree nodes for Plegar.

All nodes are frozen dataclasses with slots. Every node carries the
half-open ``[start, end)`` character span it covers; container nodes carry
an ordered tuple of children. A parent's span contains every child's span
and children appear in source order.

Node Hierarchy:
Node (base)
├── Container
│   ├── Document
│   ├── Element          markup element (also embedded markup in script)
│   ├── Block            { ... }
│   ├── Parentheses      ( ... )
│   ├── Brackets         [ ... ]
│   ├── TemplateLiteral  `...${...}...`
│   ├── RawText          body of <script>/<style>, parsed by the sibling grammar
│   ├── Rule             selector { declarations }
│   ├── AtRule           @media ... { ... } / @import ...;
│   ├── FunctionDeclaration
│   ├── VariableDeclaration
│   └── Statement
├── Comment
├── Attribute
├── Declaration
└── Text

Each class declares a ``fold_kind``. Nodes with a fold kind are fold
candidates; the kind decides which candidate wins when several open on the
same line (lower value wins).

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar


class FoldKind(IntEnum):
    """Fold priority classes, highest priority first."""

    BLOCK = 0
    ELEMENT = 1
    BRACKET = 2
    COMMENT = 3


# =============================================================================
# Base Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all syntax tree nodes."""

    fold_kind: ClassVar[FoldKind | None] = None

    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    @property
    def foldable(self) -> bool:
        """True if the node may become a fold region."""
        return self.fold_kind is not None

    def iter_children(self) -> Iterator[Node]:
        """Yield child nodes in source order (none for leaves)."""
        return iter(())


@dataclass(frozen=True, slots=True)
class Container(Node):
    """Node with an ordered tuple of child nodes."""

    children: tuple[Node, ...] = ()

    def iter_children(self) -> Iterator[Node]:
        return iter(self.children)


# =============================================================================
# Shared structure
# =============================================================================


@dataclass(frozen=True, slots=True)
class Document(Container):
    """Root of every parse. Spans the whole parsed range."""


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Block comment (``/* */``, ``<!-- -->``) or line comment (``//``)."""

    fold_kind: ClassVar[FoldKind | None] = FoldKind.COMMENT


@dataclass(frozen=True, slots=True)
class Block(Container):
    """Brace-delimited block. ``closed`` is False when input ended first."""

    fold_kind: ClassVar[FoldKind | None] = FoldKind.BLOCK

    closed: bool = True


@dataclass(frozen=True, slots=True)
class Parentheses(Container):
    fold_kind: ClassVar[FoldKind | None] = FoldKind.BRACKET

    closed: bool = True


@dataclass(frozen=True, slots=True)
class Brackets(Container):
    fold_kind: ClassVar[FoldKind | None] = FoldKind.BRACKET

    closed: bool = True


@dataclass(frozen=True, slots=True)
class TemplateLiteral(Container):
    """Template literal; children are the nodes inside ``${...}`` parts."""

    fold_kind: ClassVar[FoldKind | None] = FoldKind.BRACKET

    closed: bool = True


# =============================================================================
# Markup
# =============================================================================


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """Markup attribute. ``value`` is None for a bare attribute (``disabled``)."""

    name: str = ""
    value: str | None = None


@dataclass(frozen=True, slots=True)
class Element(Container):
    """Markup element.

    Attributes:
        name: Tag name, lowercased for markup, as written for embedded markup
        attributes: Parsed attributes (full parse only)
        self_closing: Written as ``<x/>`` or a void element
        closed: False when the end tag was missing or mismatched

    """

    fold_kind: ClassVar[FoldKind | None] = FoldKind.ELEMENT

    name: str = ""
    attributes: tuple[Attribute, ...] = ()
    self_closing: bool = False
    closed: bool = True


@dataclass(frozen=True, slots=True)
class RawText(Container):
    """Body of a raw-text element.

    For ``<script>`` and ``<style>`` the children come from the sibling
    script/stylesheet grammar, so folds inside embedded code still work.
    """

    language: str = ""


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Run of character data between markup tags."""


# =============================================================================
# Stylesheet
# =============================================================================


@dataclass(frozen=True, slots=True)
class Rule(Container):
    """Style rule: ``selector { declarations }``.

    The last child is the Block; it carries the fold, so the marker sits on
    the ``{`` line in both the full and the structure-only run.
    """

    selector: str = ""
    closed: bool = True


@dataclass(frozen=True, slots=True)
class AtRule(Container):
    """At-rule, with or without a block (``@media x {}`` / ``@import x;``).

    With a block, the last child is the Block that carries the fold.
    """

    name: str = ""
    prelude: str = ""
    has_block: bool = False
    closed: bool = True


@dataclass(frozen=True, slots=True)
class Declaration(Node):
    """``property: value`` inside a rule block."""

    property: str = ""
    value: str = ""
    important: bool = False


# =============================================================================
# Script
# =============================================================================


@dataclass(frozen=True, slots=True)
class FunctionDeclaration(Container):
    """``function name(params) { body }``; children hold the params and body."""

    name: str = ""
    params: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class VariableDeclaration(Container):
    """``const|let|var name = init``; children are nested structures of init."""

    kind: str = ""
    name: str = ""


@dataclass(frozen=True, slots=True)
class Statement(Container):
    """Any other statement; children are its nested structures."""


NODE_TYPES: tuple[type[Node], ...] = (
    Document,
    Comment,
    Block,
    Parentheses,
    Brackets,
    TemplateLiteral,
    Attribute,
    Element,
    RawText,
    Text,
    Rule,
    AtRule,
    Declaration,
    FunctionDeclaration,
    VariableDeclaration,
    Statement,
)


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield ``root`` and every descendant, depth first, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        children = list(node.iter_children())
        stack.extend(reversed(children))


def count_nodes(root: Node) -> int:
    return sum(1 for _ in iter_nodes(root))


__all__ = [
    "AtRule",
    "Attribute",
    "Block",
    "Brackets",
    "Comment",
    "Container",
    "Declaration",
    "Document",
    "Element",
    "FoldKind",
    "FunctionDeclaration",
    "NODE_TYPES",
    "Node",
    "Parentheses",
    "RawText",
    "Rule",
    "Statement",
    "TemplateLiteral",
    "Text",
    "VariableDeclaration",
    "count_nodes",
    "iter_nodes",
]
