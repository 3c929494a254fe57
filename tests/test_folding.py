"""Tests for fold analysis."""

import pytest

from plegar import analyze, analyze_structure
from plegar.config import AnalysisConfig
from plegar.folding import FoldAnalyzer, FoldDiff, FoldRegion, diff_fold_regions
from plegar.location import LineIndex
from plegar.nodes import Block, Comment, Document, Element, FoldKind, Rule


def _lines(result_regions: list[FoldRegion] | tuple[FoldRegion, ...]) -> list[tuple[int, int]]:
    return [region.lines for region in result_regions]


class TestFoldRegion:
    def test_properties(self) -> None:
        region = FoldRegion(2, 5)
        assert region.hidden_line_count == 3
        assert region.lines == (2, 5)

    def test_kind_does_not_affect_equality(self) -> None:
        assert FoldRegion(1, 3, FoldKind.BLOCK) == FoldRegion(1, 3, FoldKind.ELEMENT)
        assert hash(FoldRegion(1, 3, FoldKind.BLOCK)) == hash(FoldRegion(1, 3, FoldKind.COMMENT))

    def test_ordering(self) -> None:
        regions = [FoldRegion(4, 6), FoldRegion(1, 9), FoldRegion(1, 3)]
        assert sorted(regions) == [FoldRegion(1, 3), FoldRegion(1, 9), FoldRegion(4, 6)]


class TestFoldAnalyzer:
    def test_hand_built_tree(self) -> None:
        source = "a {\n  b;\n}\n"
        block = Block(2, 10)
        document = Document(0, len(source), (Rule(0, 10, (block,), selector="a"),))
        regions = FoldAnalyzer(LineIndex(source)).get_fold_regions(document)
        assert regions == [FoldRegion(1, 2)]
        assert regions[0].kind is FoldKind.BLOCK

    def test_closer_line_stays_visible(self) -> None:
        """A node ending on line L hides lines up to L - 1."""
        source = "{\n\n\n}"
        document = Document(0, len(source), (Block(0, len(source)),))
        regions = FoldAnalyzer(LineIndex(source)).get_fold_regions(document)
        assert _lines(regions) == [(1, 3)]

    def test_two_line_node_does_not_fold(self) -> None:
        source = "{\n}"
        document = Document(0, len(source), (Block(0, len(source)),))
        assert FoldAnalyzer(LineIndex(source)).get_fold_regions(document) == []

    def test_lower_kind_wins_on_same_line(self) -> None:
        """Block beats element when both open on one line."""
        source = "<div>{\n\n\n}\n</div>"
        block = Block(5, 10)
        element = Element(0, len(source), (block,), name="div")
        document = Document(0, len(source), (element,))
        regions = FoldAnalyzer(LineIndex(source)).get_fold_regions(document)
        assert len(regions) == 1
        assert regions[0].kind is FoldKind.BLOCK
        assert regions[0].lines == (1, 3)

    def test_longest_span_wins_within_kind(self) -> None:
        source = "{ {\n\n}\n\n}"
        inner = Block(2, 6)
        outer = Block(0, len(source), (inner,))
        document = Document(0, len(source), (outer,))
        regions = FoldAnalyzer(LineIndex(source)).get_fold_regions(document)
        assert _lines(regions) == [(1, 4)]

    def test_comment_folding_can_be_disabled(self) -> None:
        source = "/*\n\n\n*/"
        document = Document(0, len(source), (Comment(0, len(source)),))
        lines = LineIndex(source)
        assert FoldAnalyzer(lines).get_fold_regions(document) == [FoldRegion(1, 3)]
        config = AnalysisConfig(fold_comments=False)
        assert FoldAnalyzer(lines, config).get_fold_regions(document) == []

    def test_reusable(self) -> None:
        source = "{\n\n}"
        document = Document(0, len(source), (Block(0, len(source)),))
        analyzer = FoldAnalyzer(LineIndex(source))
        assert analyzer.get_fold_regions(document) == analyzer.get_fold_regions(document)


class TestLanguageFolds:
    """Fold regions through the full pipeline."""

    def test_css_rule(self) -> None:
        result = analyze("a {\n  color: red;\n}", "css")
        assert _lines(result.fold_regions) == [(1, 2)]

    def test_single_line_rule_does_not_fold(self) -> None:
        assert analyze("a{color:red}", "css").fold_regions == ()

    def test_nested_css(self) -> None:
        source = "@media print {\n  a {\n    color: red;\n  }\n}"
        assert _lines(analyze(source, "css").fold_regions) == [(1, 4), (2, 3)]

    def test_multiline_selector_folds_from_brace(self) -> None:
        source = "a,\nb {\n  color: red;\n}"
        full = analyze(source, "css").fold_regions
        assert _lines(full) == [(2, 3)]
        assert full == analyze_structure(source, "css").fold_regions

    def test_multiline_selector_in_style_element(self) -> None:
        source = "<style>\na,\nb {\n  color: red;\n}\n</style>"
        full = analyze(source, "html").fold_regions
        assert (3, 4) in _lines(full)
        assert all(region.start_line != 2 for region in full)
        assert full == analyze_structure(source, "html").fold_regions

    def test_html_elements(self) -> None:
        source = "<ul>\n  <li>\n    one\n  </li>\n</ul>"
        result = analyze(source, "html")
        assert _lines(result.fold_regions) == [(1, 4), (2, 3)]
        assert all(r.kind is FoldKind.ELEMENT for r in result.fold_regions)

    def test_embedded_style_folds(self) -> None:
        source = "<style>\na {\n  color: red;\n}\n</style>"
        regions = _lines(analyze(source, "html").fold_regions)
        assert (2, 3) in regions

    def test_js_function(self) -> None:
        source = "function f() {\n  return 1;\n}"
        assert _lines(analyze(source, "js").fold_regions) == [(1, 2)]

    def test_js_multiline_call_arguments(self) -> None:
        source = "f(\n  a,\n  b\n)"
        result = analyze(source, "js")
        assert _lines(result.fold_regions) == [(1, 3)]
        assert result.fold_regions[0].kind is FoldKind.BRACKET

    def test_one_region_per_start_line(self) -> None:
        source = "function f() { if (a) {\n  b();\n}\n}"
        regions = analyze(source, "js").fold_regions
        starts = [r.start_line for r in regions]
        assert len(starts) == len(set(starts))

    @pytest.mark.parametrize(
        ("source", "language"),
        [
            ("a {\n  color: red;\n}\nb {\n  c: d;\n}", "css"),
            ("<div>\n<p>\nx\n</p>\n</div>", "html"),
            ("function f(a) {\n  return [\n    a,\n  ];\n}", "js"),
        ],
        ids=["css", "html", "js"],
    )
    def test_structural_and_full_runs_agree(self, source: str, language: str) -> None:
        assert (
            analyze(source, language).fold_regions
            == analyze_structure(source, language).fold_regions
        )


class TestDiff:
    def test_identical(self) -> None:
        regions = [FoldRegion(1, 3), FoldRegion(5, 8)]
        diff = diff_fold_regions(regions, regions)
        assert diff.kept == tuple(regions)
        assert not diff.changed

    def test_added_and_removed(self) -> None:
        before = [FoldRegion(1, 3), FoldRegion(5, 8)]
        after = [FoldRegion(1, 3), FoldRegion(5, 9)]
        diff = diff_fold_regions(before, after)
        assert diff == FoldDiff(
            kept=(FoldRegion(1, 3),),
            added=(FoldRegion(5, 9),),
            removed=(FoldRegion(5, 8),),
        )
        assert diff.changed

    def test_edit_shifts_following_regions(self) -> None:
        source = "a {\n  color: red;\n}\nb {\n  c: d;\n}"
        edited = "a {\n  color: red;\n  margin: 0;\n}\nb {\n  c: d;\n}"
        diff = diff_fold_regions(
            analyze_structure(source, "css").fold_regions,
            analyze_structure(edited, "css").fold_regions,
        )
        assert diff.removed == (FoldRegion(1, 2), FoldRegion(4, 5))
        assert diff.added == (FoldRegion(1, 3), FoldRegion(5, 6))
