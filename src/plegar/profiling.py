"""Plegar AnalysisAccumulator: opt-in profiling for analysis runs.

This module provides accumulated metrics across engine runs:
- Total profiling time and time spent inside runs
- Source length, token, node and fold counts
- Advisory error count and cache hits

Zero overhead when disabled (get_analysis_accumulator() returns None).

Example:
    from plegar import analyze
    from plegar.profiling import profiled_analysis

    # Normal run (no overhead)
    result = analyze("a { }", "css")

    # Profiled run (opt-in)
    with profiled_analysis() as metrics:
        result = analyze("a {\\n  color: red;\\n}", "css")

    print(metrics.summary())
    # {"total_ms": 0.4, "runs": 1, "source_length": 20, "token_count": 11, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class AnalysisAccumulator:
    """Accumulated metrics across analysis runs.

    Attributes:
        start_time: Profiling start timestamp.
        runs: Number of full runs recorded.
        structure_runs: Number of structure-only runs recorded.
        cache_hits: Runs answered from the cache.
        source_length: Total length of sources analyzed.
        token_count: Tokens produced (full runs only).
        node_count: Syntax tree nodes produced.
        fold_count: Fold regions produced.
        error_count: Advisory errors recorded.
        run_seconds: Wall time spent inside runs.

    """

    start_time: float = field(default_factory=perf_counter)
    runs: int = 0
    structure_runs: int = 0
    cache_hits: int = 0
    source_length: int = 0
    token_count: int = 0
    node_count: int = 0
    fold_count: int = 0
    error_count: int = 0
    run_seconds: float = 0.0

    def record_run(
        self,
        *,
        structural: bool,
        source_length: int,
        token_count: int,
        node_count: int,
        fold_count: int,
        error_count: int,
        seconds: float,
    ) -> None:
        """Record one engine run."""
        if structural:
            self.structure_runs += 1
        else:
            self.runs += 1
        self.source_length += source_length
        self.token_count += token_count
        self.node_count += node_count
        self.fold_count += fold_count
        self.error_count += error_count
        self.run_seconds += seconds

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of analysis metrics.

        Returns:
            Dict with total_ms, run_ms and every counter.

        """
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "run_ms": round(self.run_seconds * 1000, 2),
            "runs": self.runs,
            "structure_runs": self.structure_runs,
            "cache_hits": self.cache_hits,
            "source_length": self.source_length,
            "token_count": self.token_count,
            "node_count": self.node_count,
            "fold_count": self.fold_count,
            "error_count": self.error_count,
        }


# Module-level ContextVar
_accumulator: ContextVar[AnalysisAccumulator | None] = ContextVar(
    "analysis_accumulator",
    default=None,
)


def get_analysis_accumulator() -> AnalysisAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_analysis() -> Iterator[AnalysisAccumulator]:
    """Context manager for profiled analysis.

    Creates an AnalysisAccumulator and makes it available via
    get_analysis_accumulator() for the duration of the with block.

    Yields:
        AnalysisAccumulator that will be populated during engine runs.

    """
    acc = AnalysisAccumulator()
    token: Token[AnalysisAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = [
    "AnalysisAccumulator",
    "get_analysis_accumulator",
    "profiled_analysis",
]
