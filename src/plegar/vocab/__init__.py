"""Fixed vocabulary sets for the markup, stylesheet and script lexers."""

from plegar.vocab import css, html, js

__all__ = ["css", "html", "js"]
