"""Tests for the script grammar."""

import pytest

from plegar.errors import ParseError
from plegar.lexer import DetailLevel, JsLexer
from plegar.nodes import (
    Block,
    Brackets,
    Comment,
    Document,
    Element,
    FunctionDeclaration,
    Parentheses,
    Statement,
    TemplateLiteral,
    VariableDeclaration,
)
from plegar.parsing import JS_GRAMMAR, Parser


def _parse(
    source: str, detail: DetailLevel = DetailLevel.RICH
) -> tuple[Document, list[ParseError]]:
    parser = Parser(JsLexer(source, detail).run(), JS_GRAMMAR, source=source, detail=detail)
    return parser.run(), parser.errors


class TestFunctions:
    def test_function_declaration(self) -> None:
        source = "function add(a, b = 1, ...rest) {\n  return a + b;\n}"
        document, errors = _parse(source)
        assert errors == []
        fn = document.children[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.name == "add"
        assert fn.params == ("a", "b", "rest")
        assert [type(child) for child in fn.children] == [Parentheses, Block]
        assert fn.span == (0, len(source))

    def test_async_generator(self) -> None:
        document, _ = _parse("async function* gen() {}")
        fn = document.children[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.name == "gen"
        assert fn.start == 0

    def test_destructured_params_are_skipped(self) -> None:
        document, _ = _parse("function f({a, b}, c) {}")
        fn = document.children[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.params == ("c",)

    def test_function_expression_is_a_statement(self) -> None:
        """Without a parameter list the declaration alternative backtracks."""
        document, _ = _parse("function;")
        assert isinstance(document.children[0], Statement)


class TestStatements:
    def test_variable_declaration(self) -> None:
        document, _ = _parse("const config = {\n  debug: true\n};")
        declaration = document.children[0]
        assert isinstance(declaration, VariableDeclaration)
        assert declaration.kind == "const"
        assert declaration.name == "config"
        assert isinstance(declaration.children[0], Block)

    def test_line_break_ends_statement(self) -> None:
        document, _ = _parse("let a = 1\nlet b = 2")
        assert [n.name for n in document.children] == ["a", "b"]  # type: ignore[attr-defined]

    @pytest.mark.parametrize(
        "source",
        [
            "x = a\n  + b;",
            "promise\n  .then(f)\n  .catch(g)",
            "if (a) {\n}\nelse {\n}",
            "if (a)\n  b();",
        ],
        ids=["operator", "member", "else", "control-head"],
    )
    def test_continuation_keeps_one_statement(self, source: str) -> None:
        document, _ = _parse(source)
        assert len(document.children) == 1
        assert document.children[0].end == len(source)

    def test_statement_children_are_structures(self) -> None:
        document, _ = _parse("if (ready) {\n  go();\n}")
        statement = document.children[0]
        assert isinstance(statement, Statement)
        assert [type(child) for child in statement.children] == [Parentheses, Block]

    def test_comments(self) -> None:
        document, _ = _parse("// one\n/* two\n */\nx;")
        assert [type(n) for n in document.children] == [Comment, Comment, Statement]


class TestTemplates:
    def test_interpolation_children(self) -> None:
        document, errors = _parse("const s = `a ${ {b: 1} } c`;")
        assert errors == []
        template = document.children[0].children[0]  # type: ignore[attr-defined]
        assert isinstance(template, TemplateLiteral)
        assert template.closed
        assert isinstance(template.children[0], Block)

    def test_nested_templates(self) -> None:
        document, _ = _parse("x = `a ${`b ${c}`} d`;")
        outer = document.children[0].children[0]  # type: ignore[attr-defined]
        assert isinstance(outer, TemplateLiteral)
        assert isinstance(outer.children[0], TemplateLiteral)

    def test_unclosed_template_is_reported_once(self) -> None:
        """The lexer reports the unterminated template; the parser does not."""
        source = "x = `abc\ndef"
        lexer = JsLexer(source)
        parser = Parser(lexer.run(), JS_GRAMMAR, source=source)
        document = parser.run()
        assert parser.errors == []
        assert len(lexer.errors) == 1
        template = document.children[0].children[0]  # type: ignore[attr-defined]
        assert isinstance(template, TemplateLiteral)
        assert not template.closed
        assert template.end == len(source)


class TestEmbeddedMarkup:
    def test_element_in_expression(self) -> None:
        source = "const el = <div>\n  <p>{x}</p>\n</div>;"
        document, errors = _parse(source)
        assert errors == []
        div = document.children[0].children[0]  # type: ignore[attr-defined]
        assert isinstance(div, Element)
        assert div.name == "div"
        p = next(child for child in div.children if isinstance(child, Element))
        assert isinstance(p.children[0], Block)

    def test_component_name_keeps_case(self) -> None:
        document, _ = _parse("x = <MyComp value={1} />;")
        element = document.children[0].children[0]  # type: ignore[attr-defined]
        assert element.name == "MyComp"
        assert element.self_closing
        assert [a.name for a in element.attributes] == ["value"]


class TestRecovery:
    def test_unclosed_function_body(self) -> None:
        source = "function f() {\n  if (a) {\n  }\n"
        document, errors = _parse(source)
        assert [e.message for e in errors] == ["Unclosed block: expected '}'"]
        assert errors[0].start == source.index("{")
        fn = document.children[0]
        assert fn.end == len(source)

    def test_missing_paren_closed_by_enclosing_block(self) -> None:
        document, errors = _parse("function f() {\n  g(1;\n}")
        assert [e.message for e in errors] == ["Unclosed parentheses: expected ')'"]
        fn = document.children[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.children[-1].closed  # type: ignore[attr-defined]

    def test_unexpected_closer(self) -> None:
        _, errors = _parse("a);\nb();")
        assert [e.message for e in errors] == ["Unexpected closing ')'"]
        assert errors[0].lineno == 1


class TestStructural:
    def test_groups_only(self) -> None:
        document, errors = _parse("function f(a) {\n  return [a];\n}", DetailLevel.STRUCTURAL)
        assert errors == []
        assert [type(n) for n in document.children] == [Parentheses, Block]
        block = document.children[1]
        assert isinstance(block, Block)
        assert [type(n) for n in block.children] == [Brackets]

    def test_regex_braces_do_not_nest(self) -> None:
        document, errors = _parse("x = /a{2}/;\n{ }", DetailLevel.STRUCTURAL)
        assert errors == []
        assert [type(n) for n in document.children] == [Block]
