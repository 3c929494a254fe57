"""Syntax tree visitor and transformer for Plegar.

Provides a base visitor class with match-based dispatch, a flat ``walk``
generator and an immutable transform function for rewriting frozen trees.

Example: collect every element name:

    class ElementNames(BaseVisitor[None]):
        def __init__(self) -> None:
            self.names: list[str] = []

        def visit_element(self, node: Element) -> None:
            self.names.append(node.name)

    collector = ElementNames()
    collector.visit(document)

Example: drop comments from a tree:

    def strip_comments(node: Node) -> Node | None:
        return None if isinstance(node, Comment) else node

    new_document = transform(document, strip_comments)

Thread Safety:
    Visitors are NOT shared across threads by default (they may accumulate
    mutable state). Create a new visitor per thread. ``walk`` and
    ``transform`` are pure and safe to call from any thread.

"""

import dataclasses
from collections.abc import Callable, Iterator

from plegar.nodes import (
    AtRule,
    Attribute,
    Block,
    Brackets,
    Comment,
    Container,
    Declaration,
    Document,
    Element,
    FunctionDeclaration,
    Node,
    Parentheses,
    RawText,
    Rule,
    Statement,
    TemplateLiteral,
    Text,
    VariableDeclaration,
    iter_nodes,
)


class BaseVisitor[T]:
    """Base syntax tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children (and an
    element's attributes) are walked automatically after the ``visit_*``
    call.

    Type parameter ``T`` is the return type of visit methods (use ``None``
    for side-effect-only visitors).

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method.

        Walks children automatically after the visit method returns.

        """
        result = self._dispatch(node)
        self._walk_children(node)
        return result

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method.

        Override this for catch-all behavior. Default returns None
        (suitable for ``BaseVisitor[None]``).

        """
        return None  # type: ignore[return-value]

    # -- Shared structure ------------------------------------------------------

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_comment(self, node: Comment) -> T:
        return self.visit_default(node)

    def visit_block(self, node: Block) -> T:
        return self.visit_default(node)

    def visit_parentheses(self, node: Parentheses) -> T:
        return self.visit_default(node)

    def visit_brackets(self, node: Brackets) -> T:
        return self.visit_default(node)

    def visit_template_literal(self, node: TemplateLiteral) -> T:
        return self.visit_default(node)

    # -- Markup ----------------------------------------------------------------

    def visit_element(self, node: Element) -> T:
        return self.visit_default(node)

    def visit_attribute(self, node: Attribute) -> T:
        return self.visit_default(node)

    def visit_raw_text(self, node: RawText) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    # -- Stylesheet ------------------------------------------------------------

    def visit_rule(self, node: Rule) -> T:
        return self.visit_default(node)

    def visit_at_rule(self, node: AtRule) -> T:
        return self.visit_default(node)

    def visit_declaration(self, node: Declaration) -> T:
        return self.visit_default(node)

    # -- Script ----------------------------------------------------------------

    def visit_function_declaration(self, node: FunctionDeclaration) -> T:
        return self.visit_default(node)

    def visit_variable_declaration(self, node: VariableDeclaration) -> T:
        return self.visit_default(node)

    def visit_statement(self, node: Statement) -> T:
        return self.visit_default(node)

    # -- Internal dispatch -----------------------------------------------------

    def _dispatch(self, node: Node) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Document():
                return self.visit_document(node)
            case Comment():
                return self.visit_comment(node)
            case Block():
                return self.visit_block(node)
            case Parentheses():
                return self.visit_parentheses(node)
            case Brackets():
                return self.visit_brackets(node)
            case TemplateLiteral():
                return self.visit_template_literal(node)
            case Element():
                return self.visit_element(node)
            case Attribute():
                return self.visit_attribute(node)
            case RawText():
                return self.visit_raw_text(node)
            case Text():
                return self.visit_text(node)
            case Rule():
                return self.visit_rule(node)
            case AtRule():
                return self.visit_at_rule(node)
            case Declaration():
                return self.visit_declaration(node)
            case FunctionDeclaration():
                return self.visit_function_declaration(node)
            case VariableDeclaration():
                return self.visit_variable_declaration(node)
            case Statement():
                return self.visit_statement(node)
            case _:
                return self.visit_default(node)

    def _walk_children(self, node: Node) -> None:
        """Recursively visit child nodes."""
        match node:
            case Element(attributes=attributes, children=children):
                for attribute in attributes:
                    self.visit(attribute)
                for child in children:
                    self.visit(child)
            case Container(children=children):
                for child in children:
                    self.visit(child)
            case _:
                pass  # Leaf nodes: no children


def walk(root: Node) -> Iterator[Node]:
    """Yield ``root`` and every descendant in source order.

    Iterative, so arbitrarily deep trees do not hit the recursion limit.
    Attributes are not yielded; visit them through ``Element.attributes``.
    """
    return iter_nodes(root)


def transform(document: Document, fn: Callable[[Node], Node | None]) -> Document:
    """Apply a function to every node in the tree, returning a new tree.

    The function ``fn`` is called bottom-up: children are transformed first,
    then the parent is transformed with its new children. This ensures ``fn``
    always receives nodes with already-transformed children.

    Return ``None`` from ``fn`` to remove a node from the tree. The root
    Document cannot be removed; returning None for it raises TypeError.

    Since all nodes are frozen dataclasses, this produces a new immutable tree.
    The original tree is untouched. Spans are not recomputed.

    Args:
        document: The document to transform.
        fn: Function that receives a node and returns a (possibly new) node,
            or None to remove the node from the tree.

    Returns:
        A new Document with the transformation applied.

    """
    result = _transform_node(document, fn)
    if result is None or not isinstance(result, Document):
        msg = "transform fn must return a Document for the root (cannot remove root)"
        raise TypeError(msg)
    return result


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    transformed = _transform_children(node, fn)
    return fn(transformed)


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Produce a new node with children transformed; filter out None (removed) nodes."""

    def _filtered[N: Node](children: tuple[N, ...]) -> tuple[N, ...]:
        return tuple(
            result for c in children
            if (result := _transform_node(c, fn)) is not None
        )  # type: ignore[misc]

    match node:
        case Element(attributes=attributes, children=children):
            new_attributes = _filtered(attributes)
            new_children = _filtered(children)
            if new_attributes != attributes or new_children != children:
                return dataclasses.replace(
                    node, attributes=new_attributes, children=new_children
                )
        case Container(children=children):
            new_children = _filtered(children)
            if new_children != children:
                return dataclasses.replace(node, children=new_children)
        case _:
            pass  # Leaf nodes: return as-is

    return node


__all__ = ["BaseVisitor", "transform", "walk"]
