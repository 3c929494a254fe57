"""Source location tracking: offsets, line numbers and columns.

Offsets are 0-based character indices into the source string. Line and
column numbers are 1-based. Those conventions are the wire format that the
editor relies on for caret restoration, so every component converts through
``LineIndex`` instead of counting newlines on its own.

Thread Safety:
SourceLocation and LineIndex are immutable after construction and safe to
share across threads.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Resolved position of a span in source text.

    All line and column values are 1-indexed.

    Attributes:
        lineno: Starting line number
        col_offset: Starting column
        offset: Absolute start offset in the source
        end_offset: Absolute end offset in the source (exclusive)
        end_lineno: Line holding the last character of the span
        end_col_offset: Column just past the last character

    Examples:
        >>> loc = SourceLocation(lineno=3, col_offset=5)
        >>> str(loc)
        '3:5'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None

    def __str__(self) -> str:
        return f"{self.lineno}:{self.col_offset}"


class LineIndex:
    """Sorted table of the offsets at which each line begins.

    Built once per analysis run from the raw text; lookups are a binary
    search over the table. A line break is ``\\n`` only, so a ``\\r\\n`` pair
    belongs to the line it terminates.

    Usage:
        >>> lines = LineIndex("a{\\n  b\\n}")
        >>> lines.line_starts
        (0, 3, 7)
        >>> lines.line_of(4)
        2
        >>> lines.column_of(4)
        2

    Thread Safety:
        Immutable after construction.

    """

    __slots__ = ("_starts", "_length")

    def __init__(self, source: str) -> None:
        starts = [0]
        find = source.find
        pos = find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = find("\n", pos + 1)
        self._starts: tuple[int, ...] = tuple(starts)
        self._length = len(source)

    @property
    def line_starts(self) -> tuple[int, ...]:
        """Offsets where each line begins."""
        return self._starts

    @property
    def line_count(self) -> int:
        """Number of lines (a trailing newline opens one more, empty, line)."""
        return len(self._starts)

    @property
    def source_length(self) -> int:
        return self._length

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing ``offset``.

        Offsets past the end of the source clamp to the last line; negative
        offsets clamp to the first.
        """
        if offset <= 0:
            return 1
        return bisect_right(self._starts, offset)

    def column_of(self, offset: int) -> int:
        """Return the 1-based column of ``offset`` within its line."""
        offset = max(0, min(offset, self._length))
        return offset - self._starts[self.line_of(offset) - 1] + 1

    def line_start(self, lineno: int) -> int:
        """Return the offset at which 1-based line ``lineno`` begins."""
        if lineno < 1 or lineno > len(self._starts):
            raise IndexError(f"line {lineno} out of range 1..{len(self._starts)}")
        return self._starts[lineno - 1]

    def location(self, start: int, end: int | None = None) -> SourceLocation:
        """Resolve a half-open ``[start, end)`` span into a SourceLocation."""
        if end is None:
            end = start
        last = max(start, end - 1)
        return SourceLocation(
            lineno=self.line_of(start),
            col_offset=self.column_of(start),
            offset=start,
            end_offset=end,
            end_lineno=self.line_of(last),
            end_col_offset=self.column_of(end),
        )

    def __len__(self) -> int:
        return len(self._starts)

    def __repr__(self) -> str:
        return f"LineIndex(lines={len(self._starts)}, length={self._length})"
