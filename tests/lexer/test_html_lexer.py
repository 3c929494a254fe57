"""Tests for the markup lexer."""

import pytest

from plegar.config import AnalysisConfig, analysis_config_context
from plegar.lexer import DetailLevel, HtmlLexer
from plegar.tokens import Token, TokenType


def _significant(tokens: list[Token]) -> list[Token]:
    return [t for t in tokens if not t.is_trivia]


class TestTags:
    """Open tags, close tags and attributes."""

    def test_element_with_attribute(self) -> None:
        tokens = _significant(HtmlLexer('<div class="a">x</div>').run())
        assert [t.type for t in tokens] == [
            TokenType.TAG_OPEN,
            TokenType.ATTRIBUTE_NAME,
            TokenType.EQUALS,
            TokenType.ATTRIBUTE_VALUE,
            TokenType.TAG_END,
            TokenType.TEXT,
            TokenType.TAG_CLOSE,
            TokenType.TAG_END,
        ]
        assert tokens[0].value == "<div"
        assert tokens[6].value == "</div"

    def test_gt_inside_quoted_value_does_not_end_tag(self) -> None:
        """A ``>`` inside a quoted attribute value stays in the value."""
        tokens = _significant(HtmlLexer('<a title="x > y">').run())
        assert tokens[-1].type is TokenType.TAG_END
        values = [t for t in tokens if t.type is TokenType.ATTRIBUTE_VALUE]
        assert values[0].value == '"x > y"'

    def test_self_closing(self) -> None:
        tokens = _significant(HtmlLexer("<br/>").run())
        assert tokens[-1].type is TokenType.TAG_SELF_CLOSE_END

    def test_unknown_tag_is_still_a_tag(self) -> None:
        """Unknown names are tags too, classed as unknown."""
        tokens = HtmlLexer("<blorp></blorp>").run()
        assert tokens[0].type is TokenType.TAG_OPEN
        assert tokens[0].style_class == "tag-unknown"

    def test_custom_element_counts_as_known(self) -> None:
        tokens = HtmlLexer("<my-widget>").run()
        assert tokens[0].style_class == "tag"

    def test_lone_less_than_is_text(self) -> None:
        tokens = HtmlLexer("a < b").run()
        assert all(t.type is not TokenType.TAG_OPEN for t in tokens)

    def test_unclosed_tag_records_error(self) -> None:
        lexer = HtmlLexer("<div class='a'")
        lexer.run()
        assert len(lexer.errors) == 1
        assert "Unclosed tag <div>" in lexer.errors[0].message


class TestDeclarations:
    """Comments, doctype, processing instructions, CDATA."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("<!-- a > b -->", TokenType.COMMENT),
            ("<!DOCTYPE html>", TokenType.DOCTYPE),
            ("<?xml version='1.0'?>", TokenType.PROCESSING_INSTRUCTION),
            ("<![CDATA[ <x> ]]>", TokenType.CDATA),
        ],
    )
    def test_consumed_whole(self, source: str, expected: TokenType) -> None:
        tokens = HtmlLexer(source).run()
        assert [t.type for t in tokens] == [expected]

    def test_unclosed_comment(self) -> None:
        lexer = HtmlLexer("<div><!-- open")
        tokens = lexer.run()
        assert tokens[-1].type is TokenType.COMMENT
        assert tokens[-1].end == len("<div><!-- open")
        assert lexer.errors[0].message == "Unclosed comment: expected '-->'"


class TestEntities:
    """Named and numeric character references."""

    @pytest.mark.parametrize("entity", ["&amp;", "&lt;", "&#123;", "&#x1F600;"])
    def test_valid_entities(self, entity: str) -> None:
        tokens = HtmlLexer(f"a {entity} b").run()
        assert any(t.type is TokenType.ENTITY and t.value == entity for t in tokens)

    def test_unknown_entity_is_text(self) -> None:
        tokens = HtmlLexer("&notanentity;").run()
        assert all(t.type is not TokenType.ENTITY for t in tokens)


class TestRawText:
    """``<script>``/``<style>`` bodies are delegated to the sibling lexer."""

    def test_script_body_is_raw_text_with_embedded_tokens(self) -> None:
        source = "<script>if (a) { b(); }</script>"
        tokens = HtmlLexer(source).run()
        raw = [t for t in tokens if t.type is TokenType.RAW_TEXT]
        assert len(raw) == 1
        assert raw[0].language == "js"
        assert raw[0].value == "if (a) { b(); }"
        embedded_types = {t.type for t in raw[0].embedded}
        assert TokenType.BLOCK_OPEN in embedded_types
        assert TokenType.KEYWORD in embedded_types

    def test_embedded_offsets_are_absolute(self) -> None:
        source = "<style>a { }</style>"
        raw = next(t for t in HtmlLexer(source).run() if t.type is TokenType.RAW_TEXT)
        for token in raw.embedded:
            assert source[token.start : token.end] == token.value

    def test_tag_inside_script_is_not_markup(self) -> None:
        """``</div>`` inside a script body belongs to the script."""
        source = "<script>x = '</div>';</script>"
        tokens = HtmlLexer(source).run()
        closes = [t for t in tokens if t.type is TokenType.TAG_CLOSE]
        assert [t.value for t in closes] == ["</script"]

    def test_textarea_is_raw_without_language(self) -> None:
        tokens = HtmlLexer("<textarea><b>x</b></textarea>").run()
        raw = next(t for t in tokens if t.type is TokenType.RAW_TEXT)
        assert raw.language == ""
        assert raw.embedded == ()

    def test_non_script_type_is_not_embedded(self) -> None:
        tokens = HtmlLexer('<script type="text/template">{</script>').run()
        raw = next(t for t in tokens if t.type is TokenType.RAW_TEXT)
        assert raw.language == ""

    def test_embedding_can_be_disabled(self) -> None:
        with analysis_config_context(AnalysisConfig(embedded_languages=False)):
            tokens = HtmlLexer("<style>a { }</style>").run()
        raw = next(t for t in tokens if t.type is TokenType.RAW_TEXT)
        assert raw.language == "css"
        assert raw.embedded == ()

    def test_sibling_errors_are_collected(self) -> None:
        lexer = HtmlLexer("<style>/* open</style>")
        lexer.run()
        assert any("comment" in e.message for e in lexer.errors)


class TestStructuralDetail:
    """STRUCTURAL drops text, attributes and whitespace."""

    def test_only_tags(self) -> None:
        tokens = HtmlLexer('<p class="x">hello <b>world</b></p>', DetailLevel.STRUCTURAL).run()
        assert {t.type for t in tokens} <= {
            TokenType.TAG_OPEN,
            TokenType.TAG_END,
            TokenType.TAG_CLOSE,
        }
        assert [t.value for t in tokens if t.type is TokenType.TAG_OPEN] == ["<p", "<b"]
