"""Tests for the token and node data types."""

from dataclasses import FrozenInstanceError

import pytest

from plegar.nodes import (
    NODE_TYPES,
    AtRule,
    Block,
    Comment,
    Declaration,
    Document,
    Element,
    FoldKind,
    Rule,
    Statement,
    Text,
    count_nodes,
    iter_nodes,
)
from plegar.tokens import (
    CLOSER_PAIRS,
    STRUCTURAL_TYPES,
    Token,
    TokenType,
    flatten,
    reconstruct,
)


class TestToken:
    def test_len_and_flags(self) -> None:
        token = Token(TokenType.BLOCK_OPEN, "{", 4, 5)
        assert len(token) == 1
        assert token.is_structural
        assert not token.is_trivia
        assert Token(TokenType.NEWLINE, "\n", 0, 1).is_trivia

    def test_frozen(self) -> None:
        token = Token(TokenType.TEXT, "x", 0, 1)
        with pytest.raises(FrozenInstanceError):
            token.value = "y"  # type: ignore[misc]

    def test_repr(self) -> None:
        assert repr(Token(TokenType.KEYWORD, "let", 0, 3)) == "Token(KEYWORD, 'let', 0:3)"

    def test_closers_pair_with_structural_openers(self) -> None:
        for closer, opener in CLOSER_PAIRS.items():
            assert closer in STRUCTURAL_TYPES
            assert opener in STRUCTURAL_TYPES


class TestFlatten:
    def test_expands_embedded_tokens(self) -> None:
        inner = (
            Token(TokenType.KEYWORD, "let", 8, 11, "keyword"),
            Token(TokenType.WHITESPACE, " ", 11, 12),
            Token(TokenType.IDENTIFIER, "x", 12, 13),
        )
        raw = Token(TokenType.RAW_TEXT, "let x", 8, 13, language="js", embedded=inner)
        tokens = [Token(TokenType.TAG_END, ">", 7, 8), raw, Token(TokenType.TAG_CLOSE, "</", 13, 15)]
        flat = list(flatten(tokens))
        assert [t.type for t in flat] == [
            TokenType.TAG_END,
            TokenType.KEYWORD,
            TokenType.WHITESPACE,
            TokenType.IDENTIFIER,
            TokenType.TAG_CLOSE,
        ]

    def test_raw_text_without_embedding_is_kept(self) -> None:
        raw = Token(TokenType.RAW_TEXT, "abc", 0, 3)
        assert list(flatten([raw])) == [raw]


class TestReconstruct:
    def test_fills_gaps(self) -> None:
        source = "a { b }"
        tokens = [Token(TokenType.BLOCK_OPEN, "{", 2, 3), Token(TokenType.BLOCK_CLOSE, "}", 6, 7)]
        assert reconstruct(source, tokens) == source

    def test_no_tokens(self) -> None:
        assert reconstruct("plain", []) == "plain"


class TestNodes:
    def test_fold_kinds(self) -> None:
        assert Block(0, 1).fold_kind is FoldKind.BLOCK
        assert Element(0, 1).fold_kind is FoldKind.ELEMENT
        assert Comment(0, 1).fold_kind is FoldKind.COMMENT
        assert Statement(0, 1).fold_kind is None
        assert not Text(0, 1).foldable
        assert not Declaration(0, 1).foldable

    def test_fold_kind_order(self) -> None:
        assert FoldKind.BLOCK < FoldKind.ELEMENT < FoldKind.BRACKET < FoldKind.COMMENT

    def test_rules_leave_folding_to_their_block(self) -> None:
        assert not AtRule(0, 10, name="import").foldable
        assert not AtRule(0, 10, name="media", has_block=True).foldable
        assert not Rule(0, 10, selector="a").foldable

    def test_span(self) -> None:
        assert Rule(3, 9, selector="a").span == (3, 9)

    def test_equality_is_structural(self) -> None:
        assert Block(0, 4, (Comment(1, 3),)) == Block(0, 4, (Comment(1, 3),))
        assert Block(0, 4) != Block(0, 4, closed=False)

    def test_iter_nodes_depth_first(self) -> None:
        leaf = Comment(2, 3)
        inner = Block(1, 4, (leaf,))
        document = Document(0, 6, (inner, Text(4, 6)))
        assert [type(n) for n in iter_nodes(document)] == [Document, Block, Comment, Text]
        assert count_nodes(document) == 4

    def test_node_types_are_unique(self) -> None:
        names = [cls.__name__ for cls in NODE_TYPES]
        assert len(names) == len(set(names))
