"""Tests for the stylesheet lexer."""

from plegar.lexer import CssLexer, DetailLevel
from plegar.tokens import Token, TokenType


def _significant(tokens: list[Token]) -> list[Token]:
    return [t for t in tokens if not t.is_trivia]


def _types(source: str) -> list[TokenType]:
    return [t.type for t in _significant(CssLexer(source).run())]


class TestStructuralTokens:
    """Braces, parens and brackets get dedicated kinds."""

    def test_single_line_rule_has_braces(self) -> None:
        """``a{color:red}`` yields an open and a close brace."""
        types = _types("a{color:red}")
        assert TokenType.BLOCK_OPEN in types
        assert TokenType.BLOCK_CLOSE in types

    def test_parens_and_brackets(self) -> None:
        types = _types("a[href] { width: calc(1px + 2px); }")
        assert TokenType.BRACKET_OPEN in types
        assert TokenType.BRACKET_CLOSE in types
        assert TokenType.PAREN_OPEN in types
        assert TokenType.PAREN_CLOSE in types

    def test_comment_is_one_token(self) -> None:
        tokens = CssLexer("/* { not a brace } */").run()
        assert [t.type for t in tokens] == [TokenType.COMMENT]

    def test_unclosed_comment_records_error(self) -> None:
        """An unterminated comment runs to end of input and is reported."""
        lexer = CssLexer("a { } /* open")
        tokens = lexer.run()
        assert tokens[-1].type is TokenType.COMMENT
        assert tokens[-1].end == len("a { } /* open")
        assert len(lexer.errors) == 1
        assert lexer.errors[0].category == "lexical"


class TestRichClassification:
    """Selector vs declaration context decides classification."""

    def test_selector_property_and_value(self) -> None:
        tokens = _significant(CssLexer("a { color: red }").run())
        assert [t.type for t in tokens] == [
            TokenType.SELECTOR,
            TokenType.BLOCK_OPEN,
            TokenType.PROPERTY,
            TokenType.COLON,
            TokenType.COLOR,
            TokenType.BLOCK_CLOSE,
        ]

    def test_pseudo_class_in_selector(self) -> None:
        """``a:hover`` is a selector followed by a pseudo-class."""
        tokens = _significant(CssLexer("a:hover { }").run())
        assert tokens[0].type is TokenType.SELECTOR
        assert tokens[1].type is TokenType.PSEUDO
        assert tokens[1].value == ":hover"

    def test_colon_in_declaration_is_punctuation(self) -> None:
        """``color:red`` inside a block is property, colon, value."""
        tokens = _significant(CssLexer("a{color:red}").run())
        values = [(t.type, t.value) for t in tokens]
        assert (TokenType.PROPERTY, "color") in values
        assert (TokenType.COLON, ":") in values
        assert (TokenType.COLOR, "red") in values

    def test_class_and_id_selectors(self) -> None:
        tokens = _significant(CssLexer(".card #main { }").run())
        assert tokens[0].style_class == "selector-class"
        assert tokens[1].style_class == "selector-id"

    def test_hex_color_in_value(self) -> None:
        tokens = _significant(CssLexer("a { color: #fff; }").run())
        assert any(t.type is TokenType.HEX_COLOR and t.value == "#fff" for t in tokens)

    def test_dimension(self) -> None:
        tokens = _significant(CssLexer("a { width: 10px; }").run())
        assert any(t.type is TokenType.DIMENSION and t.value == "10px" for t in tokens)

    def test_percentage(self) -> None:
        tokens = _significant(CssLexer("a { width: 50%; }").run())
        assert any(t.type is TokenType.DIMENSION and t.value == "50%" for t in tokens)

    def test_function(self) -> None:
        tokens = _significant(CssLexer("a { width: calc(1px); }").run())
        assert any(t.type is TokenType.FUNCTION and t.value == "calc" for t in tokens)

    def test_custom_property(self) -> None:
        tokens = _significant(CssLexer(":root { --gap: 4px; }").run())
        assert any(t.type is TokenType.CUSTOM_PROPERTY and t.value == "--gap" for t in tokens)

    def test_at_rule(self) -> None:
        tokens = _significant(CssLexer("@media screen { a { } }").run())
        assert tokens[0].type is TokenType.AT_RULE
        assert tokens[0].value == "@media"

    def test_important(self) -> None:
        tokens = _significant(CssLexer("a { color: red !important; }").run())
        assert any(t.value == "!important" and t.style_class == "important" for t in tokens)

    def test_unquoted_url_is_string(self) -> None:
        tokens = _significant(CssLexer("a { background: url(img/a.png); }").run())
        assert any(t.type is TokenType.STRING and t.value == "img/a.png" for t in tokens)

    def test_unterminated_string_is_error_token(self) -> None:
        lexer = CssLexer('a { content: "open\n}')
        tokens = lexer.run()
        assert any(t.type is TokenType.ERROR for t in tokens)
        assert lexer.errors


class TestStructuralDetail:
    """STRUCTURAL emits boundary tokens only."""

    def test_only_boundaries(self) -> None:
        tokens = CssLexer("a { color: red; }", DetailLevel.STRUCTURAL).run()
        assert [t.type for t in tokens] == [TokenType.BLOCK_OPEN, TokenType.BLOCK_CLOSE]

    def test_braces_inside_strings_are_ignored(self) -> None:
        """Strings are consumed so their braces never count."""
        tokens = CssLexer('a { content: "}"; }', DetailLevel.STRUCTURAL).run()
        assert [t.type for t in tokens] == [TokenType.BLOCK_OPEN, TokenType.BLOCK_CLOSE]

    def test_comment_is_kept(self) -> None:
        tokens = CssLexer("/* x */ a { }", DetailLevel.STRUCTURAL).run()
        assert tokens[0].type is TokenType.COMMENT

    def test_run_is_idempotent(self) -> None:
        lexer = CssLexer("a { }", DetailLevel.STRUCTURAL)
        assert lexer.run() is lexer.run()
