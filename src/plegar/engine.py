"""Language engine: the lexer, parser, fold analyzer and highlighter per language.

Two entry points, at two cost levels:

- ``LanguageEngine.run`` lexes at full detail and returns tokens, tree,
  highlighted lines, fold regions and advisory errors. Editors call it on a
  trailing debounce after a burst of edits.
- ``LanguageEngine.run_structure`` lexes boundary tokens only and returns
  tree, fold regions and errors. Editors call it after every keystroke to
  keep fold markers current.

Language selection is a closed enum mapped to a fixed pipeline table. An
unknown language is the one fatal error: ``UnsupportedLanguageError`` is
raised at once. Malformed source never raises; every anomaly is recorded
in the result's ``errors``.

Example:
    >>> result = analyze("a {\\n  color: red;\\n}", "css")
    >>> [(r.start_line, r.end_line) for r in result.fold_regions]
    [(1, 2)]
    >>> analyze_structure("<div>\\n</div>", "html").fold_regions
    ()

Thread Safety:
Engines hold only immutable state (kind, pipeline, config) plus an optional
cache. Results are frozen. See ``plegar.cache`` for the cache caveat.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from time import perf_counter
from types import MappingProxyType
from typing import TYPE_CHECKING

from plegar.cache import hash_config, hash_content
from plegar.config import AnalysisConfig, analysis_config_context, get_analysis_config
from plegar.errors import ParseError, UnsupportedLanguageError
from plegar.folding import FoldAnalyzer, FoldRegion
from plegar.highlighter import Highlighter
from plegar.lexer import BaseLexer, CssLexer, DetailLevel, HtmlLexer, JsLexer
from plegar.location import LineIndex
from plegar.nodes import Document, count_nodes
from plegar.parsing import CSS_GRAMMAR, HTML_GRAMMAR, JS_GRAMMAR, Grammar, Parser
from plegar.profiling import get_analysis_accumulator
from plegar.tokens import Token, flatten
from plegar.utils.logger import get_logger

if TYPE_CHECKING:
    from plegar.cache import AnalysisCache

logger = get_logger(__name__)


class LanguageKind(StrEnum):
    """The closed set of supported languages."""

    MARKUP = "html"
    STYLESHEET = "css"
    SCRIPT = "js"

    @classmethod
    def parse(cls, name: LanguageKind | str) -> LanguageKind:
        """Resolve a language name or alias.

        Raises:
            UnsupportedLanguageError: If ``name`` names no supported language
        """
        if isinstance(name, LanguageKind):
            return name
        if isinstance(name, str):
            kind = _ALIASES.get(name.strip().lower())
            if kind is not None:
                return kind
        raise UnsupportedLanguageError(name)


_ALIASES: dict[str, LanguageKind] = {
    "html": LanguageKind.MARKUP,
    "htm": LanguageKind.MARKUP,
    "xhtml": LanguageKind.MARKUP,
    "markup": LanguageKind.MARKUP,
    "css": LanguageKind.STYLESHEET,
    "stylesheet": LanguageKind.STYLESHEET,
    "js": LanguageKind.SCRIPT,
    "javascript": LanguageKind.SCRIPT,
    "jsx": LanguageKind.SCRIPT,
    "mjs": LanguageKind.SCRIPT,
    "cjs": LanguageKind.SCRIPT,
    "script": LanguageKind.SCRIPT,
}


@dataclass(frozen=True, slots=True)
class LanguagePipeline:
    """Lexer class and grammar for one language.

    The same pair serves both detail levels.
    """

    kind: LanguageKind
    lexer: type[BaseLexer]
    grammar: Grammar

    def tokenize(self, source: str, detail: DetailLevel) -> tuple[list[Token], list[ParseError]]:
        lexer = self.lexer(source, detail)
        tokens = lexer.run()
        return tokens, list(lexer.errors)

    def parse(
        self,
        source: str,
        tokens: list[Token],
        detail: DetailLevel,
        config: AnalysisConfig,
        lines: LineIndex,
    ) -> tuple[Document, list[ParseError]]:
        parser = Parser(
            tokens, self.grammar, source=source, detail=detail, config=config, lines=lines
        )
        document = parser.run()
        return document, list(parser.errors)


PIPELINES: Mapping[LanguageKind, LanguagePipeline] = MappingProxyType(
    {
        LanguageKind.MARKUP: LanguagePipeline(LanguageKind.MARKUP, HtmlLexer, HTML_GRAMMAR),
        LanguageKind.STYLESHEET: LanguagePipeline(
            LanguageKind.STYLESHEET, CssLexer, CSS_GRAMMAR
        ),
        LanguageKind.SCRIPT: LanguagePipeline(LanguageKind.SCRIPT, JsLexer, JS_GRAMMAR),
    }
)


def get_pipeline(kind: LanguageKind | str) -> LanguagePipeline:
    """Look up the pipeline for ``kind``.

    Raises:
        UnsupportedLanguageError: If no pipeline is registered for ``kind``
    """
    resolved = LanguageKind.parse(kind)
    pipeline = PIPELINES.get(resolved)
    if pipeline is None:
        raise UnsupportedLanguageError(kind)
    return pipeline


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class StructureResult:
    """Output of a structure-only run.

    Attributes:
        language: Language analyzed
        tree: Root node
        fold_regions: Deduplicated fold regions by start line
        errors: Lexical and structural anomalies, by offset

    """

    language: LanguageKind
    tree: Document
    fold_regions: tuple[FoldRegion, ...] = ()
    errors: tuple[ParseError, ...] = ()


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Output of a full run.

    Attributes:
        language: Language analyzed
        tokens: Gapless token stream, embedded regions flattened
        tree: Root node
        highlighted_lines: One markup string per source line
        fold_regions: Deduplicated fold regions by start line
        errors: Lexical and structural anomalies, by offset

    """

    language: LanguageKind
    tokens: tuple[Token, ...]
    tree: Document
    highlighted_lines: tuple[str, ...] = ()
    fold_regions: tuple[FoldRegion, ...] = ()
    errors: tuple[ParseError, ...] = ()

    @property
    def highlighted(self) -> str:
        """Highlighted lines joined with line breaks."""
        return "\n".join(self.highlighted_lines)


# =============================================================================
# Engine
# =============================================================================


class LanguageEngine:
    """Runs the analysis pipeline for one language.

    Usage:
        >>> engine = LanguageEngine("js")
        >>> result = engine.run("function f() {\\n  return 1;\\n}")
        >>> result.fold_regions[0].lines
        (1, 2)

    Thread Safety:
        Safe to share when no cache is attached, or the cache is thread-safe.

    """

    __slots__ = ("_kind", "_pipeline", "_config", "_cache")

    def __init__(
        self,
        kind: LanguageKind | str,
        *,
        config: AnalysisConfig | None = None,
        cache: AnalysisCache | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            kind: Language kind or alias
            config: Analysis configuration (defaults to the context's at
                construction time)
            cache: Optional content-addressed result cache

        Raises:
            UnsupportedLanguageError: If ``kind`` is not supported
        """
        self._pipeline = get_pipeline(kind)
        self._kind = self._pipeline.kind
        self._config = config if config is not None else get_analysis_config()
        self._cache = cache

    @property
    def kind(self) -> LanguageKind:
        return self._kind

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def run(self, source: str) -> AnalysisResult:
        """Full run: tokens, tree, highlighted lines, fold regions, errors."""
        cached = self._cached(source, DetailLevel.RICH)
        if isinstance(cached, AnalysisResult):
            return cached

        started = perf_counter()
        with analysis_config_context(self._config):
            lines = LineIndex(source)
            tokens, lex_errors = self._pipeline.tokenize(source, DetailLevel.RICH)
            tree, parse_errors = self._pipeline.parse(
                source, tokens, DetailLevel.RICH, self._config, lines
            )
            regions = FoldAnalyzer(lines, self._config).get_fold_regions(tree)
            flat = tuple(flatten(tokens))
            highlighted = Highlighter(self._config).highlight_lines(source, flat)

        result = AnalysisResult(
            language=self._kind,
            tokens=flat,
            tree=tree,
            highlighted_lines=tuple(highlighted),
            fold_regions=tuple(regions),
            errors=_merge_errors(lex_errors, parse_errors),
        )
        self._finish(source, DetailLevel.RICH, result, len(flat), perf_counter() - started)
        return result

    def run_structure(self, source: str) -> StructureResult:
        """Structure-only run: tree, fold regions, errors. No highlighting."""
        cached = self._cached(source, DetailLevel.STRUCTURAL)
        if isinstance(cached, StructureResult):
            return cached

        started = perf_counter()
        with analysis_config_context(self._config):
            lines = LineIndex(source)
            tokens, lex_errors = self._pipeline.tokenize(source, DetailLevel.STRUCTURAL)
            tree, parse_errors = self._pipeline.parse(
                source, tokens, DetailLevel.STRUCTURAL, self._config, lines
            )
            regions = FoldAnalyzer(lines, self._config).get_fold_regions(tree)

        result = StructureResult(
            language=self._kind,
            tree=tree,
            fold_regions=tuple(regions),
            errors=_merge_errors(lex_errors, parse_errors),
        )
        self._finish(
            source, DetailLevel.STRUCTURAL, result, len(tokens), perf_counter() - started
        )
        return result

    def highlight(self, source: str) -> str:
        """Lex at full detail and render the whole document as one string."""
        with analysis_config_context(self._config):
            tokens, _ = self._pipeline.tokenize(source, DetailLevel.RICH)
        return Highlighter(self._config).highlight(source, tokens)

    def highlight_lines(self, source: str) -> list[str]:
        """Lex at full detail and render one string per line."""
        with analysis_config_context(self._config):
            tokens, _ = self._pipeline.tokenize(source, DetailLevel.RICH)
        return Highlighter(self._config).highlight_lines(source, tokens)

    # =========================================================================
    # Internals
    # =========================================================================

    def _cache_key(self, detail: DetailLevel) -> str:
        return f"{self._kind.value}:{detail.name.lower()}:{hash_config(self._config)}"

    def _cached(self, source: str, detail: DetailLevel) -> AnalysisResult | StructureResult | None:
        if self._cache is None:
            return None
        result = self._cache.get(hash_content(source), self._cache_key(detail))
        if result is not None:
            logger.debug("%s %s run answered from cache", self._kind.value, detail.name.lower())
            acc = get_analysis_accumulator()
            if acc is not None:
                acc.record_cache_hit()
        return result

    def _finish(
        self,
        source: str,
        detail: DetailLevel,
        result: AnalysisResult | StructureResult,
        token_count: int,
        seconds: float,
    ) -> None:
        if self._cache is not None:
            self._cache.put(hash_content(source), self._cache_key(detail), result)

        logger.debug(
            "%s %s run: %d chars, %d tokens, %d folds, %d errors",
            self._kind.value,
            detail.name.lower(),
            len(source),
            token_count,
            len(result.fold_regions),
            len(result.errors),
        )
        for error in result.errors:
            logger.debug("%s: %s", self._kind.value, error)

        acc = get_analysis_accumulator()
        if acc is not None:
            acc.record_run(
                structural=detail is DetailLevel.STRUCTURAL,
                source_length=len(source),
                token_count=token_count,
                node_count=count_nodes(result.tree),
                fold_count=len(result.fold_regions),
                error_count=len(result.errors),
                seconds=seconds,
            )


def _merge_errors(
    lex_errors: list[ParseError], parse_errors: list[ParseError]
) -> tuple[ParseError, ...]:
    return tuple(sorted([*lex_errors, *parse_errors], key=lambda e: e.start))


# =============================================================================
# Convenience functions
# =============================================================================


def analyze(
    source: str,
    language: LanguageKind | str,
    *,
    config: AnalysisConfig | None = None,
    cache: AnalysisCache | None = None,
) -> AnalysisResult:
    """Run the full pipeline over ``source``.

    Raises:
        UnsupportedLanguageError: If ``language`` is not supported
    """
    return LanguageEngine(language, config=config, cache=cache).run(source)


def analyze_structure(
    source: str,
    language: LanguageKind | str,
    *,
    config: AnalysisConfig | None = None,
    cache: AnalysisCache | None = None,
) -> StructureResult:
    """Run the structure-only pipeline over ``source``.

    Raises:
        UnsupportedLanguageError: If ``language`` is not supported
    """
    return LanguageEngine(language, config=config, cache=cache).run_structure(source)


def highlight(
    source: str,
    language: LanguageKind | str,
    *,
    lines: bool = False,
    config: AnalysisConfig | None = None,
) -> str | list[str]:
    """Highlight ``source`` without parsing or folding.

    Returns:
        One string, or one string per line when ``lines`` is set
    """
    engine = LanguageEngine(language, config=config)
    if lines:
        return engine.highlight_lines(source)
    return engine.highlight(source)


__all__ = [
    "PIPELINES",
    "AnalysisResult",
    "LanguageEngine",
    "LanguageKind",
    "LanguagePipeline",
    "StructureResult",
    "analyze",
    "analyze_structure",
    "get_pipeline",
    "highlight",
]
