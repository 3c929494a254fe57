"""Tests for Grammar and GrammarBuilder."""

import pytest

from plegar.errors import GrammarError
from plegar.nodes import Document, Node
from plegar.parsing import CSS_GRAMMAR, HTML_GRAMMAR, JS_GRAMMAR, Cursor, Grammar, GrammarBuilder


def _document(c: Cursor) -> Node | None:
    return Document(c.start, c.end)


class TestGrammarBuilder:
    def test_build_with_start_rule(self) -> None:
        grammar = GrammarBuilder("toy").add("document", _document).build()
        assert isinstance(grammar, Grammar)
        assert grammar.name == "toy"
        assert grammar.start == "document"
        assert len(grammar) == 1

    def test_decorator_returns_function(self) -> None:
        builder = GrammarBuilder("toy")

        @builder.rule("document")
        def document(c: Cursor) -> Node | None:
            return None

        assert callable(document)
        assert builder.build().get("document") is document

    def test_duplicate_rule_raises(self) -> None:
        builder = GrammarBuilder("toy").add("document", _document)
        with pytest.raises(GrammarError, match="already registered"):
            builder.add("document", _document)

    def test_missing_start_rule_raises(self) -> None:
        with pytest.raises(GrammarError, match="no start rule 'document'"):
            GrammarBuilder("toy").add("other", _document).build()

    def test_custom_start_rule(self) -> None:
        grammar = GrammarBuilder("toy", start="root").add("root", _document).build()
        assert grammar.start == "root"

    def test_builder_len(self) -> None:
        builder = GrammarBuilder("toy")
        builder.add("a", _document).add("b", _document)
        assert len(builder) == 2


class TestGrammar:
    def test_get_unknown_rule(self) -> None:
        grammar = GrammarBuilder("toy").add("document", _document).build()
        with pytest.raises(GrammarError):
            grammar.get("nope")

    def test_contains(self) -> None:
        grammar = GrammarBuilder("toy").add("document", _document).build()
        assert "document" in grammar
        assert "nope" not in grammar

    def test_grammar_is_isolated_from_builder(self) -> None:
        """Rules added after build() do not leak into the grammar."""
        builder = GrammarBuilder("toy").add("document", _document)
        grammar = builder.build()
        builder.add("late", _document)
        assert "late" not in grammar

    def test_repr(self) -> None:
        grammar = GrammarBuilder("toy").add("document", _document).build()
        assert repr(grammar) == "Grammar('toy', rules=1)"


class TestLanguageGrammars:
    """The shipped grammars register the rules they refer to."""

    @pytest.mark.parametrize(
        ("grammar", "expected"),
        [
            (CSS_GRAMMAR, {"document", "comment", "block", "rule", "at_rule", "declaration"}),
            (HTML_GRAMMAR, {"document", "comment", "element", "text", "raw_text"}),
            (
                JS_GRAMMAR,
                {
                    "document",
                    "block",
                    "template",
                    "element",
                    "function_declaration",
                    "variable_declaration",
                    "statement",
                },
            ),
        ],
        ids=["css", "html", "js"],
    )
    def test_rule_names(self, grammar: Grammar, expected: set[str]) -> None:
        assert expected <= grammar.names
