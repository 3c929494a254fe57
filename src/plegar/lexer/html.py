"""Markup (HTML) lexer.

Recognizes comments, doctype/processing-instruction/CDATA blocks (consumed
whole), opening and closing tags with their attribute lists, character
entities, and raw-text regions. The body of ``<script>`` and ``<style>`` is
delegated to the sibling script/stylesheet lexer; the markup parser sees it
as one RAW_TEXT token whose ``embedded`` field carries the sibling tokens.

Thread Safety:
Lexer instances are single-use. Create one per source string.

"""

from __future__ import annotations

from plegar.config import get_analysis_config
from plegar.lexer.core import DIGITS, HEX_DIGITS, LINE_BREAK_CHARS, WHITESPACE_CHARS, BaseLexer
from plegar.lexer.css import CssLexer
from plegar.lexer.js import JsLexer
from plegar.lexer.modes import DetailLevel
from plegar.tokens import Token, TokenType
from plegar.vocab.html import (
    EMBEDDED_LANGUAGES,
    KNOWN_TAGS,
    NAMED_ENTITIES,
    RAW_TEXT_ELEMENTS,
    SCRIPT_TYPES,
    is_known_attribute,
)

_SIBLING_LEXERS: dict[str, type[BaseLexer]] = {"css": CssLexer, "js": JsLexer}

_TEXT_STOPS = frozenset("<&") | WHITESPACE_CHARS
_ATTRIBUTE_NAME_STOPS = frozenset("=>/<\"'`") | WHITESPACE_CHARS
_UNQUOTED_VALUE_STOPS = frozenset(">") | WHITESPACE_CHARS
_CLOSE_TAG_JUNK_STOPS = frozenset("<>") | WHITESPACE_CHARS
_RAW_CLOSE_BOUNDARY = frozenset("/>") | WHITESPACE_CHARS


def is_tag_name_start(char: str) -> bool:
    return char.isascii() and char.isalpha()


def is_tag_name_char(char: str) -> bool:
    return char.isalnum() or char in "-_:."


def tag_style(name: str) -> str:
    """Presentation class for a tag name (custom elements count as known)."""
    lowered = name.lower()
    return "tag" if lowered in KNOWN_TAGS or "-" in lowered else "tag-unknown"


class HtmlLexer(BaseLexer):
    """Markup lexer.

    Usage:
        >>> tokens = HtmlLexer('<div class="a">x</div>').run()
        >>> [t.type.name for t in tokens][:3]
        ['TAG_OPEN', 'WHITESPACE', 'ATTRIBUTE_NAME']

    """

    language = "html"

    __slots__ = ("_embed", "_lowered")

    def __init__(
        self,
        source: str,
        detail: DetailLevel = DetailLevel.RICH,
        *,
        start: int = 0,
        end: int | None = None,
        embed: bool | None = None,
    ) -> None:
        """Initialize markup lexer.

        Args:
            source: Full source text
            detail: Structural or rich classification
            start: Offset at which to begin scanning
            end: Offset at which to stop
            embed: Delegate script/style bodies to sibling lexers (defaults to
                the active AnalysisConfig)
        """
        super().__init__(source, detail, start=start, end=end)
        self._embed = get_analysis_config().embedded_languages if embed is None else embed
        self._lowered: str | None = None

    def _scan(self) -> None:
        char = self._source[self._pos]
        if char == "<":
            self._scan_angle()
            return
        if self._structural:
            # Only "<" starts a boundary; jump straight to the next one.
            next_tag = self._find("<", self._pos)
            self._pos = self._end if next_tag == -1 else next_tag
            return
        if char == "&":
            self._scan_entity()
            return
        if self._scan_whitespace():
            return
        self._emit(TokenType.TEXT, self._pos, self._skip_until(self._pos + 1, _TEXT_STOPS), "text")

    def _scan_angle(self) -> None:
        pos = self._pos
        if self._starts_with("<!--"):
            self._scan_delimited(TokenType.COMMENT, "<!--", "-->", "comment", "comment")
        elif self._starts_with("<![CDATA["):
            self._scan_delimited(TokenType.CDATA, "<![CDATA[", "]]>", "cdata", "CDATA section")
        elif self._starts_with("<!"):
            self._scan_delimited(TokenType.DOCTYPE, "<!", ">", "doctype", "declaration")
        elif self._starts_with("<?"):
            self._scan_delimited(
                TokenType.PROCESSING_INSTRUCTION, "<?", ">", "doctype", "processing instruction"
            )
        elif self._peek(1) == "/" and is_tag_name_start(self._peek(2)):
            self._scan_close_tag()
        elif is_tag_name_start(self._peek(1)):
            self._scan_open_tag()
        else:
            self._emit(TokenType.TEXT, pos, pos + 1, "text")

    def _scan_tag_name(self, pos: int) -> int:
        source = self._source
        end = self._end
        while pos < end and is_tag_name_char(source[pos]):
            pos += 1
        return pos

    # =========================================================================
    # Tags
    # =========================================================================

    def _scan_open_tag(self) -> None:
        start = self._pos
        name_end = self._scan_tag_name(start + 1)
        name = self._source[start + 1 : name_end]
        self._emit(TokenType.TAG_OPEN, start, name_end, tag_style(name))

        finished, self_closing, attributes = self._scan_attributes(name, start)
        lowered = name.lower()
        if finished and not self_closing and lowered in RAW_TEXT_ELEMENTS:
            self._scan_raw_text(lowered, attributes)

    def _scan_attributes(self, name: str, tag_start: int) -> tuple[bool, bool, dict[str, str]]:
        """Scan an opening tag's attribute list up to ``>`` or ``/>``.

        Quoted values are consumed whole, so a ``>`` inside one does not end
        the tag.

        Returns:
            (finished, self_closing, attributes) where ``finished`` is False
            when the tag ran into another ``<`` or end of input.
        """
        source = self._source
        attributes: dict[str, str] = {}
        pending: str | None = None
        after_equals = False

        while self._pos < self._end:
            pos = self._pos
            char = source[pos]
            if char in WHITESPACE_CHARS:
                self._scan_whitespace()
                continue
            if char == ">":
                self._emit(TokenType.TAG_END, pos, pos + 1, "tag")
                return True, False, attributes
            if char == "/" and self._peek(1) == ">":
                self._emit(TokenType.TAG_SELF_CLOSE_END, pos, pos + 2, "tag")
                return True, True, attributes
            if char == "<":
                break
            if char == "=":
                self._emit(TokenType.EQUALS, pos, pos + 1, "punctuation")
                after_equals = pending is not None
                continue
            if char in "\"'":
                value = self._scan_quoted_value(char)
                if after_equals and pending is not None:
                    attributes[pending] = value
                pending, after_equals = None, False
                continue
            if after_equals:
                end = self._skip_until(pos + 1, _UNQUOTED_VALUE_STOPS)
                self._emit(TokenType.ATTRIBUTE_VALUE, pos, end, "attribute-value")
                if pending is not None:
                    attributes[pending] = source[pos:end]
                pending, after_equals = None, False
                continue
            if char == "/":
                self._emit(TokenType.PUNCTUATION, pos, pos + 1, "punctuation")
                continue
            end = self._skip_until(pos + 1, _ATTRIBUTE_NAME_STOPS)
            attribute = source[pos:end]
            style = "attribute" if is_known_attribute(attribute) else "attribute-unknown"
            self._emit(TokenType.ATTRIBUTE_NAME, pos, end, style)
            pending = attribute.lower()
            attributes[pending] = ""

        self._lex_error(f"Unclosed tag <{name}>: expected '>'", tag_start, self._pos)
        return False, False, attributes

    def _scan_quoted_value(self, quote: str) -> str:
        """Consume a quoted attribute value and return its unquoted text.

        Values may span lines. With no closing quote anywhere ahead, the
        value stops at the end of the line and is reported.
        """
        start = self._pos
        close = self._find(quote, start + 1)
        if close != -1:
            self._emit(TokenType.ATTRIBUTE_VALUE, start, close + 1, "attribute-value")
            return self._source[start + 1 : close]
        end = self._skip_until(start + 1, LINE_BREAK_CHARS)
        self._emit(TokenType.ERROR, start, end, "error")
        self._lex_error(f"Unclosed attribute value: expected {quote}", start, end)
        return self._source[start + 1 : end]

    def _scan_close_tag(self) -> None:
        start = self._pos
        name_end = self._scan_tag_name(start + 2)
        name = self._source[start + 2 : name_end]
        self._emit(TokenType.TAG_CLOSE, start, name_end, tag_style(name))

        while self._pos < self._end:
            pos = self._pos
            char = self._source[pos]
            if char == ">":
                self._emit(TokenType.TAG_END, pos, pos + 1, "tag")
                return
            if char == "<":
                break
            if not self._scan_whitespace():
                self._emit(TokenType.TEXT, pos, self._skip_until(pos + 1, _CLOSE_TAG_JUNK_STOPS), "text")
        self._lex_error(f"Unclosed tag </{name}>: expected '>'", start, self._pos)

    # =========================================================================
    # Raw text regions
    # =========================================================================

    def _find_raw_close(self, name: str, pos: int) -> int:
        """Offset of the ``</name`` that ends a raw-text element, else -1."""
        if self._lowered is None:
            self._lowered = self._source.lower()
        needle = "</" + name
        while True:
            found = self._lowered.find(needle, pos, self._end)
            if found == -1:
                return -1
            after = found + len(needle)
            if after >= self._end or self._lowered[after] in _RAW_CLOSE_BOUNDARY:
                return found
            pos = after

    def _scan_raw_text(self, name: str, attributes: dict[str, str]) -> None:
        start = self._pos
        close = self._find_raw_close(name, start)
        end = self._end if close == -1 else close
        if end <= start:
            return

        language = EMBEDDED_LANGUAGES.get(name, "")
        if name == "script" and attributes.get("type", "").strip().lower() not in SCRIPT_TYPES:
            language = ""

        embedded: tuple[Token, ...] = ()
        if language and self._embed:
            sibling = _SIBLING_LEXERS[language](self._source, self._detail, start=start, end=end)
            embedded = tuple(sibling.run())
            self._errors.extend(sibling.errors)

        self._append(
            Token(
                TokenType.RAW_TEXT,
                self._source[start:end],
                start,
                end,
                "raw-text",
                language,
                embedded,
            )
        )

    # =========================================================================
    # Entities
    # =========================================================================

    def _scan_entity(self) -> None:
        """Consume ``&name;`` / ``&#123;`` / ``&#x1F;`` or a lone ``&``."""
        source = self._source
        start = self._pos
        end = self._end
        index = start + 1
        valid = False
        if index < end and source[index] == "#":
            index += 1
            digits = DIGITS
            if index < end and source[index] in "xX":
                index += 1
                digits = HEX_DIGITS
            digits_start = index
            index = self._skip_chars(index, digits)
            valid = index > digits_start and index < end and source[index] == ";"
        else:
            while index < end and source[index].isalnum():
                index += 1
            valid = index < end and source[index] == ";" and source[start + 1 : index] in NAMED_ENTITIES

        if valid:
            self._emit(TokenType.ENTITY, start, index + 1, "entity")
        else:
            self._emit(TokenType.TEXT, start, start + 1, "text")
