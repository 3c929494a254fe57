"""Markup vocabulary: tags, attributes, entities and tree-building tables.

Unknown names are still tokenized (custom elements fold like any other);
the vocabulary only decides presentation classes and recovery behavior.
"""

from __future__ import annotations

KNOWN_TAGS: frozenset[str] = frozenset(
    {
        "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base",
        "bdi", "bdo", "blockquote", "body", "br", "button", "canvas", "caption",
        "cite", "code", "col", "colgroup", "data", "datalist", "dd", "del",
        "details", "dfn", "dialog", "div", "dl", "dt", "em", "embed", "fieldset",
        "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
        "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
        "input", "ins", "kbd", "label", "legend", "li", "link", "main", "map",
        "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
        "optgroup", "option", "output", "p", "param", "picture", "pre",
        "progress", "q", "rp", "rt", "ruby", "s", "samp", "script", "search",
        "section", "select", "slot", "small", "source", "span", "strong",
        "style", "sub", "summary", "sup", "svg", "table", "tbody", "td",
        "template", "textarea", "tfoot", "th", "thead", "time", "title", "tr",
        "track", "u", "ul", "var", "video", "wbr",
        # Common SVG and MathML children
        "circle", "clippath", "defs", "ellipse", "g", "line", "lineargradient",
        "mask", "math", "path", "pattern", "polygon", "polyline",
        "radialgradient", "rect", "stop", "symbol", "text", "tspan", "use",
    }
)

# Elements that never have content or an end tag.
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
        "meta", "param", "source", "track", "wbr",
    }
)

# Elements whose content is raw text: no tags or comments are recognized
# inside, the region runs to the matching end tag.
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style", "textarea", "title"})

# Language of the raw region, for delegation to a sibling lexer.
EMBEDDED_LANGUAGES: dict[str, str] = {"script": "js", "style": "css"}

# <script type="..."> values whose body is still script.
SCRIPT_TYPES: frozenset[str] = frozenset(
    {
        "", "module", "text/javascript", "application/javascript",
        "application/ecmascript", "text/ecmascript", "text/babel", "text/jsx",
    }
)

GLOBAL_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "accept", "accept-charset", "accesskey", "action", "align", "allow",
        "alt", "as", "async", "autocapitalize", "autocomplete", "autofocus",
        "autoplay", "background", "bgcolor", "border", "capture", "charset",
        "checked", "cite", "class", "cols", "colspan", "content",
        "contenteditable", "controls", "coords", "crossorigin", "d", "data",
        "datetime", "decoding", "default", "defer", "dir", "dirname",
        "disabled", "download", "draggable", "enctype", "enterkeyhint", "fill",
        "for", "form", "formaction", "formenctype", "formmethod",
        "formnovalidate", "formtarget", "headers", "height", "hidden", "high",
        "href", "hreflang", "http-equiv", "id", "inert", "integrity",
        "inputmode", "is", "ismap", "itemid", "itemprop", "itemref",
        "itemscope", "itemtype", "kind", "label", "lang", "list", "loading",
        "loop", "low", "manifest", "max", "maxlength", "media", "method", "min",
        "minlength", "multiple", "muted", "name", "nomodule", "nonce",
        "novalidate", "open", "optimum", "pattern", "ping", "placeholder",
        "playsinline", "popover", "popovertarget", "poster", "preload",
        "readonly", "referrerpolicy", "rel", "required", "reversed", "role",
        "rows", "rowspan", "sandbox", "scope", "selected", "shape", "size",
        "sizes", "slot", "span", "spellcheck", "src", "srcdoc", "srclang",
        "srcset", "start", "step", "stroke", "style", "tabindex", "target",
        "title", "translate", "type", "usemap", "value", "viewbox", "width",
        "wrap", "xmlns",
    }
)

# Attribute name prefixes that are always valid.
ATTRIBUTE_PREFIXES: tuple[str, ...] = ("data-", "aria-", "on", "xml:", "xlink:")

# Named character references recognized by the markup lexer (without & ;).
NAMED_ENTITIES: frozenset[str] = frozenset(
    {
        # Core
        "amp", "lt", "gt", "quot", "apos",
        # Whitespace and basic symbols
        "nbsp", "ensp", "emsp", "thinsp", "zwnj", "zwj", "shy", "copy", "reg",
        "trade", "bull", "euro", "sect", "para", "cent", "pound", "yen", "deg",
        "prime", "Prime", "frasl", "middot", "iexcl", "iquest", "curren",
        "brvbar", "uml", "ordf", "ordm", "not", "macr", "acute", "micro",
        "cedil", "sup1", "sup2", "sup3", "frac14", "frac12", "frac34", "dagger",
        "Dagger", "permil", "larr", "rarr", "uarr", "darr", "harr", "lArr",
        "rArr", "uArr", "dArr", "hArr", "check", "star",
        # Math
        "plus", "minus", "times", "divide", "plusmn", "ne", "le", "ge", "sum",
        "prod", "infin", "part", "nabla", "isin", "notin", "cong", "asymp",
        "equiv", "forall", "exist", "sub", "sup", "cap", "cup", "and", "or",
        "oplus", "otimes", "radic", "prop", "ang", "int", "there4", "sim",
        "lowast", "sdot", "empty", "lceil", "rceil", "lfloor", "rfloor",
        # Greek
        "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
        "iota", "kappa", "lambda", "mu", "nu", "xi", "omicron", "pi", "rho",
        "sigmaf", "sigma", "tau", "upsilon", "phi", "chi", "psi", "omega",
        "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta",
        "Iota", "Kappa", "Lambda", "Mu", "Nu", "Xi", "Omicron", "Pi", "Rho",
        "Sigma", "Tau", "Upsilon", "Phi", "Chi", "Psi", "Omega",
        # Punctuation and typography
        "ndash", "mdash", "hellip", "lsquo", "rsquo", "ldquo", "rdquo",
        "sbquo", "bdquo", "lsaquo", "rsaquo", "laquo", "raquo", "loz",
        "spades", "clubs", "hearts", "diams",
        # Latin-1 letters
        "Aacute", "aacute", "Acirc", "acirc", "Agrave", "agrave", "Aring",
        "aring", "Atilde", "atilde", "Auml", "auml", "AElig", "aelig",
        "Ccedil", "ccedil", "Eacute", "eacute", "Ecirc", "ecirc", "Egrave",
        "egrave", "Euml", "euml", "Iacute", "iacute", "Icirc", "icirc",
        "Igrave", "igrave", "Iuml", "iuml", "Ntilde", "ntilde", "Oacute",
        "oacute", "Ocirc", "ocirc", "Ograve", "ograve", "Oslash", "oslash",
        "Otilde", "otilde", "Ouml", "ouml", "OElig", "oelig", "Scaron",
        "scaron", "szlig", "Uacute", "uacute", "Ucirc", "ucirc", "Ugrave",
        "ugrave", "Uuml", "uuml", "Yacute", "yacute", "Yuml", "yuml", "THORN",
        "thorn", "ETH", "eth",
    }
)

# Elements whose end tag may be omitted. An ancestor's closing tag (or end of
# input) closes them silently.
OPTIONAL_END_TAGS: frozenset[str] = frozenset(
    {
        "html", "head", "body", "li", "dt", "dd", "p", "rt", "rp", "optgroup",
        "option", "colgroup", "caption", "thead", "tbody", "tfoot", "tr", "td",
        "th",
    }
)

_P_CLOSERS = frozenset(
    {
        "address", "article", "aside", "blockquote", "details", "dialog", "div",
        "dl", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2",
        "h3", "h4", "h5", "h6", "header", "hgroup", "hr", "main", "menu", "nav",
        "ol", "p", "pre", "search", "section", "table", "ul",
    }
)

# open element -> start tags that implicitly end it.
IMPLIED_END_BY_START: dict[str, frozenset[str]] = {
    "p": _P_CLOSERS,
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "rt": frozenset({"rt", "rp"}),
    "rp": frozenset({"rt", "rp"}),
    "option": frozenset({"option", "optgroup"}),
    "optgroup": frozenset({"optgroup"}),
    "thead": frozenset({"tbody", "tfoot"}),
    "tbody": frozenset({"tbody", "tfoot"}),
    "tr": frozenset({"tr", "tbody", "tfoot"}),
    "td": frozenset({"td", "th", "tr", "tbody", "tfoot"}),
    "th": frozenset({"td", "th", "tr", "tbody", "tfoot"}),
    "head": frozenset({"body"}),
}


def is_known_attribute(name: str) -> bool:
    """True for standard attributes and data-/aria-/event-handler names."""
    lowered = name.lower()
    return lowered in GLOBAL_ATTRIBUTES or lowered.startswith(ATTRIBUTE_PREFIXES)


def implied_end(open_name: str, start_name: str) -> bool:
    """True if a ``<start_name>`` start tag implicitly ends ``<open_name>``."""
    closers = IMPLIED_END_BY_START.get(open_name)
    return closers is not None and start_name in closers
