"""Script vocabulary: keywords, literals, built-ins and operators."""

from __future__ import annotations

KEYWORDS: frozenset[str] = frozenset(
    {
        "as", "async", "await", "break", "case", "catch", "class", "const",
        "continue", "debugger", "default", "delete", "do", "else", "enum",
        "export", "extends", "finally", "for", "from", "function", "get", "if",
        "implements", "import", "in", "instanceof", "interface", "let", "new",
        "of", "package", "private", "protected", "public", "return", "set",
        "static", "super", "switch", "this", "throw", "try", "typeof", "var",
        "void", "while", "with", "yield",
    }
)

LITERALS: frozenset[str] = frozenset(
    {"true", "false", "null", "undefined", "NaN", "Infinity"}
)

BUILT_INS: frozenset[str] = frozenset(
    {
        # Types and constructors
        "Array", "ArrayBuffer", "BigInt", "Boolean", "DataView", "Date",
        "Error", "EvalError", "Float32Array", "Float64Array", "Function",
        "Int8Array", "Int16Array", "Int32Array", "Intl", "JSON", "Map", "Math",
        "Number", "Object", "Promise", "Proxy", "RangeError", "ReferenceError",
        "Reflect", "RegExp", "Set", "String", "Symbol", "SyntaxError",
        "TypeError", "Uint8Array", "Uint16Array", "Uint32Array", "URIError",
        "WeakMap", "WeakRef", "WeakSet",
        # Global functions
        "decodeURI", "decodeURIComponent", "encodeURI", "encodeURIComponent",
        "eval", "globalThis", "isFinite", "isNaN", "parseFloat", "parseInt",
        "queueMicrotask", "structuredClone",
        # Host environment
        "alert", "cancelAnimationFrame", "clearInterval", "clearTimeout",
        "console", "customElements", "document", "fetch", "history",
        "localStorage", "location", "navigator", "performance",
        "requestAnimationFrame", "sessionStorage", "setInterval", "setTimeout",
        "window",
    }
)

# Keywords after which a "/" starts a regex literal rather than a division.
REGEX_KEYWORDS: frozenset[str] = frozenset(
    {
        "await", "case", "delete", "do", "else", "in", "instanceof", "new",
        "of", "return", "throw", "typeof", "void", "yield",
    }
)

# Last significant character after which a "/" (or "<" for markup) starts an
# expression rather than continuing one.
EXPRESSION_START_CHARS: frozenset[str] = frozenset("(,=:[!&|?{};+-*%<>~^")

DECLARATION_KEYWORDS: frozenset[str] = frozenset({"var", "let", "const"})

OPERATORS: tuple[str, ...] = (
    ">>>=", "**=", "===", "!==", ">>>", "<<=", ">>=", "&&=", "||=", "??=",
    "...", "++", "--", "+=", "-=", "*=", "/=", "%=", "==", "!=", ">=", "<=",
    "&&", "||", "&=", "|=", "^=", "<<", ">>", "=>", "??", "?.", "**", "+",
    "-", "*", "/", "%", "<", ">", "=", "!", "&", "|", "^", "~", "?", ":",
)

# First character -> candidate operators, longest first.
OPERATORS_BY_FIRST: dict[str, tuple[str, ...]] = {}
for _op in sorted(OPERATORS, key=len, reverse=True):
    OPERATORS_BY_FIRST.setdefault(_op[0], ())
    OPERATORS_BY_FIRST[_op[0]] += (_op,)
del _op
