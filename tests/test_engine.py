"""Tests for the language engine and the module-level entry points."""

import logging

import pytest

from plegar import (
    PIPELINES,
    AnalysisConfig,
    AnalysisResult,
    DictAnalysisCache,
    Document,
    Element,
    FoldRegion,
    LanguageEngine,
    LanguageKind,
    StructureResult,
    TokenType,
    UnsupportedLanguageError,
    analyze,
    analyze_structure,
    get_pipeline,
    highlight,
)
from plegar.config import analysis_config_context
from plegar.errors import LexError


class TestLanguageKind:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("html", LanguageKind.MARKUP),
            ("HTM", LanguageKind.MARKUP),
            ("css", LanguageKind.STYLESHEET),
            (" stylesheet ", LanguageKind.STYLESHEET),
            ("javascript", LanguageKind.SCRIPT),
            ("jsx", LanguageKind.SCRIPT),
            (LanguageKind.SCRIPT, LanguageKind.SCRIPT),
        ],
    )
    def test_aliases(self, name: str, expected: LanguageKind) -> None:
        assert LanguageKind.parse(name) is expected

    @pytest.mark.parametrize("name", ["python", "", "c++", None, 3])
    def test_unknown_language_is_fatal(self, name: object) -> None:
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            LanguageKind.parse(name)  # type: ignore[arg-type]
        assert exc_info.value.language == name

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unsupported language: 'ruby'"):
            analyze("x", "ruby")

    def test_engine_fails_fast(self) -> None:
        with pytest.raises(UnsupportedLanguageError):
            LanguageEngine("markdown")

    def test_string_values(self) -> None:
        assert LanguageKind.MARKUP == "html"
        assert [kind.value for kind in LanguageKind] == ["html", "css", "js"]


class TestPipelines:
    def test_one_pipeline_per_kind(self) -> None:
        assert set(PIPELINES) == set(LanguageKind)
        for kind, pipeline in PIPELINES.items():
            assert pipeline.kind is kind
            assert pipeline.grammar.name == kind.value

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            PIPELINES[LanguageKind.SCRIPT] = PIPELINES[LanguageKind.MARKUP]  # type: ignore[index]

    def test_get_pipeline_accepts_alias(self) -> None:
        assert get_pipeline("javascript") is PIPELINES[LanguageKind.SCRIPT]


class TestScenarios:
    def test_single_line_stylesheet(self) -> None:
        result = analyze("a{color:red}", "css")
        types = [t.type for t in result.tokens]
        assert TokenType.BLOCK_OPEN in types
        assert TokenType.BLOCK_CLOSE in types
        assert result.fold_regions == ()

    def test_multiline_stylesheet(self) -> None:
        result = analyze("a{\n  color:red;\n}", "css")
        assert result.fold_regions == (FoldRegion(1, 2),)

    def test_single_line_markup_has_no_folds(self) -> None:
        assert analyze("<div><!-- x --></div>", "html").fold_regions == ()

    def test_nested_comment_adds_no_region(self) -> None:
        result = analyze("<div>\n<!-- x -->\n</div>", "html")
        assert result.fold_regions == (FoldRegion(1, 2),)

    def test_script_function(self) -> None:
        result = analyze("function f() {\n  return 1;\n}", "js")
        assert result.fold_regions == (FoldRegion(1, 2),)

    def test_malformed_markup_does_not_raise(self) -> None:
        result = analyze("<div><span></div>", "html")
        assert len(result.errors) == 1
        assert result.errors[0].category == "structural"
        assert isinstance(result.tree, Document)
        div = result.tree.children[0]
        assert isinstance(div, Element)
        assert div.name == "div"
        span = div.children[0]
        assert isinstance(span, Element)
        assert span.name == "span"
        assert not span.closed

    def test_edit_keeps_earlier_regions(self) -> None:
        source = "a {\n  color: red;\n}\nb {\n  c: d;\n}\nc {\n  e: f;\n}"
        edited = source.replace("c: d;", "c: d;\n  x: y;")
        before = analyze_structure(source, "css").fold_regions
        after = analyze_structure(edited, "css").fold_regions
        assert after[0] == before[0]
        assert after[0].lines == before[0].lines
        assert after[1] != before[1]
        assert after[2].start_line == before[2].start_line + 1


class TestRun:
    def test_full_result_shape(self) -> None:
        source = "a {\n  color: red;\n}"
        result = LanguageEngine("css").run(source)
        assert isinstance(result, AnalysisResult)
        assert result.language is LanguageKind.STYLESHEET
        assert "".join(t.value for t in result.tokens) == source
        assert len(result.highlighted_lines) == 3
        assert result.highlighted == "\n".join(result.highlighted_lines)
        assert result.errors == ()

    def test_structure_result_shape(self) -> None:
        result = LanguageEngine("html").run_structure("<div>\n<p>\n</p>\n</div>")
        assert isinstance(result, StructureResult)
        assert result.language is LanguageKind.MARKUP
        assert result.fold_regions == (FoldRegion(1, 3),)

    def test_errors_merged_by_offset(self) -> None:
        """Lexical and structural errors come back as one list, by position."""
        source = "<div>\n<span>\n</div>\n<!-- open"
        result = analyze(source, "html")
        assert [e.category for e in result.errors] == ["structural", "lexical"]
        assert isinstance(result.errors[-1], LexError)
        starts = [e.start for e in result.errors]
        assert starts == sorted(starts)

    def test_tokens_flatten_embedded_regions(self) -> None:
        result = analyze("<script>let x;</script>", "html")
        types = [t.type for t in result.tokens]
        assert TokenType.RAW_TEXT not in types
        assert TokenType.KEYWORD in types

    def test_idempotent(self) -> None:
        source = "<ul>\n<li>a\n<li>b\n</ul>"
        engine = LanguageEngine("html")
        assert engine.run(source) == engine.run(source)

    def test_empty_source(self) -> None:
        for kind in LanguageKind:
            result = analyze("", kind)
            assert result.tokens == ()
            assert result.tree == Document(0, 0)
            assert result.highlighted_lines == ("<br>",)
            assert result.fold_regions == ()


class TestConfig:
    def test_engine_config_overrides_context(self) -> None:
        config = AnalysisConfig(fold_comments=False)
        engine = LanguageEngine("css", config=config)
        assert engine.config is config
        assert engine.run("/*\n\n*/").fold_regions == ()

    def test_engine_captures_context_config(self) -> None:
        config = AnalysisConfig(class_prefix="hl")
        with analysis_config_context(config):
            engine = LanguageEngine("js")
        assert engine.config is config
        assert 'class="hl hl-keyword"' in engine.run("let x").highlighted

    def test_embedding_disabled(self) -> None:
        config = AnalysisConfig(embedded_languages=False)
        result = analyze("<style>\na {\n  b: c;\n}\n</style>", "html", config=config)
        assert TokenType.RAW_TEXT in [t.type for t in result.tokens]
        assert result.fold_regions == (FoldRegion(1, 4),)


class TestCache:
    def test_cache_hit_returns_same_result(self) -> None:
        cache = DictAnalysisCache()
        engine = LanguageEngine("css", cache=cache)
        first = engine.run("a { }")
        second = engine.run("a { }")
        assert first is second
        assert cache.hits == 1

    def test_detail_levels_cached_separately(self) -> None:
        cache = DictAnalysisCache()
        engine = LanguageEngine("css", cache=cache)
        engine.run("a { }")
        structure = engine.run_structure("a { }")
        assert isinstance(structure, StructureResult)
        assert len(cache) == 2

    def test_config_is_part_of_key(self) -> None:
        cache = DictAnalysisCache()
        analyze("a { }", "css", cache=cache)
        analyze("a { }", "css", cache=cache, config=AnalysisConfig(mark_whitespace=False))
        assert len(cache) == 2
        assert cache.hits == 0

    def test_languages_cached_separately(self) -> None:
        cache = DictAnalysisCache()
        analyze("x", "css", cache=cache)
        result = analyze("x", "js", cache=cache)
        assert result.language is LanguageKind.SCRIPT


class TestHighlightEntryPoint:
    def test_document_mode(self) -> None:
        result = highlight("a { }", "css")
        assert isinstance(result, str)
        assert "\n" not in result

    def test_line_mode(self) -> None:
        result = highlight("a {\n}", "css", lines=True)
        assert isinstance(result, list)
        assert len(result) == 2


class TestLogging:
    def test_run_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="plegar"):
            analyze("<div>\n<span>\n</div>", "html")
        messages = [r.getMessage() for r in caplog.records if r.name == "plegar.engine"]
        assert any(m.startswith("html rich run:") for m in messages)
        assert any("Mismatched closing tag" in m for m in messages)

    def test_cache_hit_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        engine = LanguageEngine("js", cache=DictAnalysisCache())
        engine.run_structure("f()")
        with caplog.at_level(logging.DEBUG, logger="plegar"):
            engine.run_structure("f()")
        assert any("answered from cache" in r.getMessage() for r in caplog.records)
