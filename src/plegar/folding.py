"""Fold analysis: syntax tree to foldable line ranges.

The analyzer walks the whole tree and turns every multi-line fold candidate
into a line range. A candidate whose last character sits on line ``L`` hides
lines up to ``L - 1``, so the line holding the closer stays visible next to
the marker. Several candidates often open on the same line (a rule and its
block, an element and its first child); one winner is kept per start line.

Example:
    >>> lines = LineIndex(source)
    >>> regions = FoldAnalyzer(lines).get_fold_regions(document)
    >>> [(r.start_line, r.end_line) for r in regions]
    [(1, 2)]

Between runs the editor keeps collapse state per region. ``diff_fold_regions``
reports which regions survived an edit unchanged so that state can be carried
over.

Thread Safety:
FoldRegion and FoldDiff are immutable. A FoldAnalyzer accumulates state while
visiting; create one per analysis.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from plegar.config import AnalysisConfig, get_analysis_config
from plegar.location import LineIndex
from plegar.nodes import Comment, FoldKind, Node
from plegar.visitor import BaseVisitor


@dataclass(frozen=True, slots=True, order=True)
class FoldRegion:
    """Foldable line range, 1-based and inclusive.

    Lines ``start_line + 1`` through ``end_line`` hide under a marker on
    ``start_line``. Regions compare and hash by their lines only.

    Attributes:
        start_line: Line holding the marker
        end_line: Last hidden line (always greater than start_line)
        kind: Fold kind of the node that won this start line

    """

    start_line: int
    end_line: int
    kind: FoldKind = field(default=FoldKind.BLOCK, compare=False)

    @property
    def hidden_line_count(self) -> int:
        return self.end_line - self.start_line

    @property
    def lines(self) -> tuple[int, int]:
        return (self.start_line, self.end_line)


@dataclass(frozen=True, slots=True)
class _Candidate:
    start_line: int
    end_line: int
    span: int
    kind: FoldKind


class FoldAnalyzer(BaseVisitor[None]):
    """Collects fold regions from a syntax tree.

    Usage:
        >>> analyzer = FoldAnalyzer(LineIndex("a {\\n  b: c;\\n}"))
        >>> analyzer.get_fold_regions(document)
        [FoldRegion(start_line=1, end_line=2, kind=<FoldKind.BLOCK: 0>)]

    """

    def __init__(self, lines: LineIndex, config: AnalysisConfig | None = None) -> None:
        self._lines = lines
        self._config = config if config is not None else get_analysis_config()
        self._candidates: list[_Candidate] = []

    def get_fold_regions(self, root: Node) -> list[FoldRegion]:
        """Return the deduplicated fold regions of ``root``, by start line.

        Complexity: O(n log n) in the number of candidates.
        """
        self._candidates = []
        self.visit(root)
        return _resolve_candidates(self._candidates)

    def visit_default(self, node: Node) -> None:
        kind = node.fold_kind
        if kind is None or not node.foldable:
            return
        if isinstance(node, Comment) and not self._config.fold_comments:
            return
        line_of = self._lines.line_of
        start_line = line_of(node.start)
        close_line = line_of(max(node.start, node.end - 1))
        if close_line - 1 > start_line:
            self._candidates.append(
                _Candidate(start_line, close_line - 1, node.end - node.start, kind)
            )


def _resolve_candidates(candidates: Iterable[_Candidate]) -> list[FoldRegion]:
    """Keep one candidate per start line: lowest fold kind, then longest span."""
    ordered = sorted(candidates, key=lambda c: (c.start_line, -c.span))
    winners: dict[int, _Candidate] = {}
    for candidate in ordered:
        current = winners.get(candidate.start_line)
        # Strictly lower kind only, so ties keep the first (longest).
        if current is None or candidate.kind < current.kind:
            winners[candidate.start_line] = candidate
    return [
        FoldRegion(c.start_line, c.end_line, c.kind)
        for c in sorted(winners.values(), key=lambda c: c.start_line)
    ]


# =============================================================================
# Diffing
# =============================================================================


@dataclass(frozen=True, slots=True)
class FoldDiff:
    """Result of comparing two fold region lists.

    Attributes:
        kept: Regions present in both lists (same start and end line)
        added: Regions only in the current list
        removed: Regions only in the previous list

    """

    kept: tuple[FoldRegion, ...] = ()
    added: tuple[FoldRegion, ...] = ()
    removed: tuple[FoldRegion, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def diff_fold_regions(
    previous: Sequence[FoldRegion],
    current: Sequence[FoldRegion],
) -> FoldDiff:
    """Compare two fold region lists by their line ranges.

    Args:
        previous: Regions from the earlier run
        current: Regions from the latest run

    Returns:
        FoldDiff whose tuples are ordered by start line
    """
    before = {region.lines for region in previous}
    after = {region.lines for region in current}
    return FoldDiff(
        kept=tuple(r for r in current if r.lines in before),
        added=tuple(r for r in current if r.lines not in before),
        removed=tuple(r for r in previous if r.lines not in after),
    )


__all__ = [
    "FoldAnalyzer",
    "FoldDiff",
    "FoldRegion",
    "diff_fold_regions",
]
