"""ContextVar-based analysis configuration for Plegar.

Provides thread-local configuration using Python's ContextVars (PEP 567).
An editor sets the config once per widget; every lexer, parser, fold
analyzer and highlighter created in that context reads it.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from plegar.config import AnalysisConfig, analysis_config_context

    with analysis_config_context(AnalysisConfig(fold_comments=False)):
        result = analyze(source, "html")

    # Or pass a config to an engine explicitly
    engine = LanguageEngine("css", config=AnalysisConfig(mark_whitespace=False))

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Immutable analysis configuration.

    Attributes:
        class_prefix: Prefix for every highlighter class ("cp-token" renders
            ``class="cp-token cp-token-keyword"``)
        mark_whitespace: Wrap spaces and tabs in marker spans so whitespace
            stays visually distinguishable
        empty_line: Placeholder markup for an empty line in per-line output
        fold_comments: Offer multi-line comments as fold regions
        embedded_languages: Lex and parse ``<script>``/``<style>`` bodies with
            the sibling script/stylesheet pipeline
        implied_end_tags: Apply HTML implied-end-tag recovery (``<li>``,
            ``<p>``, ``<td>``...) instead of reporting every unclosed element

    """

    class_prefix: str = "cp-token"
    mark_whitespace: bool = True
    empty_line: str = "<br>"
    fold_comments: bool = True
    embedded_languages: bool = True
    implied_end_tags: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "AnalysisConfig":
        """Create AnalysisConfig from dictionary.

        Only includes keys that are valid AnalysisConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = AnalysisConfig.from_dict({
            ...     "fold_comments": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.fold_comments
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """Return config as a plain dict (inverse of from_dict)."""
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: AnalysisConfig = AnalysisConfig()

_analysis_config: ContextVar[AnalysisConfig] = ContextVar(
    "analysis_config",
    default=_DEFAULT_CONFIG,
)


def get_analysis_config() -> AnalysisConfig:
    """Get current analysis configuration (thread-local).

    Thread Safety:
        ContextVars are thread-local. Safe to call from any thread.

    """
    return _analysis_config.get()


def set_analysis_config(config: AnalysisConfig) -> None:
    """Set analysis configuration for current context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _analysis_config.set(config)


def reset_analysis_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _analysis_config.set(_DEFAULT_CONFIG)


@contextmanager
def analysis_config_context(config: AnalysisConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Properly restores the previous config even if an exception is raised.

    Example:
        >>> with analysis_config_context(AnalysisConfig(mark_whitespace=False)):
        ...     lines = highlight("a { }", "css", lines=True)

    """
    previous = _analysis_config.get()
    _analysis_config.set(config)
    try:
        yield
    finally:
        _analysis_config.set(previous)


__all__ = [
    "AnalysisConfig",
    "analysis_config_context",
    "get_analysis_config",
    "reset_analysis_config",
    "set_analysis_config",
]
