"""Property tests over the whole pipeline.

Random markup, stylesheet and script fragments, checked for invariants that
hold for any input: child spans nest inside their parents, fold regions are
valid and unique per line, runs are repeatable, and highlighted output
never leaks markup-special characters.
"""

import html
import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from plegar import LanguageKind, analyze, analyze_structure
from plegar.config import AnalysisConfig
from plegar.nodes import Node, iter_nodes

_FRAGMENTS = {
    LanguageKind.MARKUP: [
        "<div>", "</div>", "<li>", "<p>", "</span>", "<br/>", "<!-- c -->", "<!--",
        "<script>", "</script>", "<style>", "</style>", 'a="x"', "&amp;", "text",
        "{", "}", "\n", "  ", "<", ">",
    ],
    LanguageKind.STYLESHEET: [
        "a", ".x", "#id", "{", "}", "(", ")", "color", ":", "red", ";", "@media",
        "/* c */", "/*", "'s'", '"', "--v", "12px", "&", ",", "\n", "  ",
    ],
    LanguageKind.SCRIPT: [
        "function", "f", "(", ")", "{", "}", "[", "]", "let", "x", "=", "1", ";",
        "`", "${", "'s'", "/", "/re/", "//c", "/* c */", "<div>", "</div>", "<",
        ">", "if", "else", ".", "\n", "  ",
    ],
}

_SPAN_TAG = re.compile(r"</?span[^>]*>")
_BARE_AMPERSAND = re.compile(r"&(?!(?:amp|lt|gt|quot|#x27);)")

_INPUTS = st.sampled_from(list(LanguageKind)).flatmap(
    lambda kind: st.tuples(
        st.just(kind),
        st.lists(st.sampled_from(_FRAGMENTS[kind]), max_size=40).map("".join),
    )
)


def _children(node: Node) -> list[Node]:
    return list(node.iter_children())


class TestSpanContainment:
    @given(_INPUTS)
    @settings(max_examples=150)
    def test_children_nest_inside_parent(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        for result in (analyze(source, kind), analyze_structure(source, kind)):
            assert result.tree.start == 0
            assert result.tree.end == len(source)
            for node in iter_nodes(result.tree):
                for child in _children(node):
                    assert node.start <= child.start <= child.end <= node.end

    @given(_INPUTS)
    @settings(max_examples=150)
    def test_siblings_do_not_overlap(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        for node in iter_nodes(analyze(source, kind).tree):
            children = _children(node)
            for left, right in zip(children, children[1:], strict=False):
                assert left.end <= right.start


class TestFoldValidity:
    @given(_INPUTS)
    @settings(max_examples=150)
    def test_regions_are_valid(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        line_count = source.count("\n") + 1
        for result in (analyze(source, kind), analyze_structure(source, kind)):
            regions = result.fold_regions
            starts = [r.start_line for r in regions]
            assert starts == sorted(set(starts))
            for region in regions:
                assert 1 <= region.start_line < region.end_line < line_count


class TestIdempotence:
    @given(_INPUTS)
    @settings(max_examples=100)
    def test_full_run_is_repeatable(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        assert analyze(source, kind) == analyze(source, kind)

    @given(_INPUTS)
    @settings(max_examples=100)
    def test_structure_run_is_repeatable(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        assert analyze_structure(source, kind) == analyze_structure(source, kind)


class TestEscapingSafety:
    @given(_INPUTS)
    @settings(max_examples=150)
    def test_no_raw_markup_outside_wrappers(self, case: tuple[LanguageKind, str]) -> None:
        kind, source = case
        config = AnalysisConfig()
        lines = analyze(source, kind, config=config).highlighted_lines
        for line, text in zip(lines, source.split("\n"), strict=True):
            if line == config.empty_line:
                assert text == ""
                continue
            bare = _SPAN_TAG.sub("", line)
            assert "<" not in bare
            assert ">" not in bare
            assert '"' not in bare
            assert _BARE_AMPERSAND.search(bare) is None
            assert html.unescape(bare) == text


class TestEditStability:
    """Regions that close on a line before an edit survive it unchanged."""

    @given(
        st.lists(st.sampled_from(_FRAGMENTS[LanguageKind.STYLESHEET]), max_size=40).map("".join),
        st.data(),
    )
    @settings(max_examples=150)
    def test_single_character_insert(self, source: str, data: st.DataObject) -> None:
        position = data.draw(st.integers(min_value=0, max_value=len(source)))
        char = data.draw(st.sampled_from(["{", "}", "a", "\n", "/", "*", ";"]))
        edited = source[:position] + char + source[position:]
        edit_line = source.count("\n", 0, position) + 1

        before = analyze_structure(source, "css").fold_regions
        after = analyze_structure(edited, "css").fold_regions
        for region in before:
            if region.end_line + 1 < edit_line:
                assert region in after


@pytest.mark.parametrize("kind", list(LanguageKind))
def test_empty_source(kind: LanguageKind) -> None:
    result = analyze("", kind)
    assert result.fold_regions == ()
    assert result.errors == ()
