"""
Plegar: source analysis for live code editors.

Lexing, structural parsing, fold analysis and syntax highlighting for HTML,
CSS and JavaScript, with a cheap structure-only pass for per-keystroke fold
updates and a full pass for highlighting. Malformed input never raises;
anomalies come back as advisory errors next to best-effort results.

Quick Start:
    >>> from plegar import analyze, analyze_structure
    >>> result = analyze("a {\\n  color: red;\\n}", "css")
    >>> result.fold_regions
    (FoldRegion(start_line=1, end_line=2, kind=<FoldKind.BLOCK: 0>),)
    >>> result.highlighted_lines[0]
    '<span class="cp-token cp-token-selector-tag">a</span>...'

    >>> # Structure only: no highlighting, boundary tokens only
    >>> analyze_structure("<ul>\\n<li>one\\n<li>two\\n</ul>", "html").errors
    ()

Engines:
    >>> from plegar import LanguageEngine, DictAnalysisCache
    >>> engine = LanguageEngine("js", cache=DictAnalysisCache())
    >>> engine.run_structure("function f() {\\n  return 1;\\n}").fold_regions

Installation:
    pip install plegar               # Zero runtime dependencies
"""

from plegar.cache import AnalysisCache, DictAnalysisCache, hash_config, hash_content
from plegar.config import (
    AnalysisConfig,
    analysis_config_context,
    get_analysis_config,
    reset_analysis_config,
    set_analysis_config,
)
from plegar.engine import (
    PIPELINES,
    AnalysisResult,
    LanguageEngine,
    LanguageKind,
    LanguagePipeline,
    StructureResult,
    analyze,
    analyze_structure,
    get_pipeline,
    highlight,
)
from plegar.errors import (
    GrammarError,
    LexError,
    ParseError,
    PlegarError,
    SerializationError,
    UnsupportedLanguageError,
)
from plegar.folding import FoldAnalyzer, FoldDiff, FoldRegion, diff_fold_regions
from plegar.highlighter import Highlighter
from plegar.lexer import CssLexer, DetailLevel, HtmlLexer, JsLexer
from plegar.location import LineIndex, SourceLocation
from plegar.nodes import (
    AtRule,
    Attribute,
    Block,
    Brackets,
    Comment,
    Container,
    Declaration,
    Document,
    Element,
    FoldKind,
    FunctionDeclaration,
    Node,
    Parentheses,
    RawText,
    Rule,
    Statement,
    TemplateLiteral,
    Text,
    VariableDeclaration,
)
from plegar.parsing import Cursor, Grammar, GrammarBuilder, Parser
from plegar.profiling import AnalysisAccumulator, get_analysis_accumulator, profiled_analysis
from plegar.serialization import from_dict, from_json, to_dict, to_json
from plegar.tokens import Token, TokenType
from plegar.visitor import BaseVisitor, transform, walk

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "analyze",
    "analyze_structure",
    "highlight",
    # Engine
    "PIPELINES",
    "AnalysisResult",
    "LanguageEngine",
    "LanguageKind",
    "LanguagePipeline",
    "StructureResult",
    "get_pipeline",
    # Tokens and lexers
    "Token",
    "TokenType",
    "DetailLevel",
    "CssLexer",
    "HtmlLexer",
    "JsLexer",
    # Nodes
    "Node",
    "Container",
    "FoldKind",
    "Document",
    "Comment",
    "Block",
    "Parentheses",
    "Brackets",
    "TemplateLiteral",
    "Element",
    "Attribute",
    "RawText",
    "Text",
    "Rule",
    "AtRule",
    "Declaration",
    "FunctionDeclaration",
    "VariableDeclaration",
    "Statement",
    # Parser components
    "Cursor",
    "Grammar",
    "GrammarBuilder",
    "Parser",
    # Folding
    "FoldAnalyzer",
    "FoldDiff",
    "FoldRegion",
    "diff_fold_regions",
    # Locations
    "LineIndex",
    "SourceLocation",
    # Highlighting
    "Highlighter",
    # Visitor + Transform
    "BaseVisitor",
    "transform",
    "walk",
    # Cache
    "AnalysisCache",
    "DictAnalysisCache",
    "hash_config",
    "hash_content",
    # Profiling
    "AnalysisAccumulator",
    "get_analysis_accumulator",
    "profiled_analysis",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "AnalysisConfig",
    "get_analysis_config",
    "set_analysis_config",
    "reset_analysis_config",
    "analysis_config_context",
    # Errors
    "PlegarError",
    "ParseError",
    "LexError",
    "GrammarError",
    "SerializationError",
    "UnsupportedLanguageError",
]
