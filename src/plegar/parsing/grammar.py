"""Grammar registry: a named table of parse rules.

A grammar maps rule names to functions that take a Cursor and return a node
or None. Rules refer to each other by name through ``cursor.apply`` and
``cursor.one_of``, so a grammar is data, and a language is defined by
registering rules on a builder.

Thread Safety:
Grammar is immutable after creation. Safe to share.
Use GrammarBuilder for mutable construction.

Example:
    >>> builder = GrammarBuilder("css")
    >>> @builder.rule("comment")
    ... def comment(c: Cursor) -> Node | None:
    ...     token = c.match_type(TokenType.COMMENT)
    ...     return None if token is None else Comment(token.start, token.end)
    >>> grammar = builder.build()
    >>> grammar.get("comment")
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import TYPE_CHECKING

from plegar.errors import GrammarError

if TYPE_CHECKING:
    from plegar.nodes import Node
    from plegar.parsing.cursor import Cursor

type Rule = Callable[[Cursor], Node | None]


class Grammar:
    """Immutable table of named parse rules.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_name", "_rules", "_start")

    def __init__(self, name: str, rules: dict[str, Rule], start: str) -> None:
        """Initialize grammar with a pre-built rule table.

        Use GrammarBuilder to create instances.
        """
        self._name = name
        self._rules = MappingProxyType(dict(rules))
        self._start = start

    @property
    def name(self) -> str:
        """Language this grammar parses (e.g., "css")."""
        return self._name

    @property
    def start(self) -> str:
        """Name of the rule that parses a whole document."""
        return self._start

    @property
    def names(self) -> frozenset[str]:
        """Get all registered rule names."""
        return frozenset(self._rules)

    def get(self, name: str) -> Rule:
        """Get the rule registered as ``name``.

        Raises:
            GrammarError: If no such rule exists
        """
        try:
            return self._rules[name]
        except KeyError:
            msg = f"Grammar {self._name!r} has no rule {name!r}"
            raise GrammarError(msg) from None

    def has(self, name: str) -> bool:
        return name in self._rules

    def __contains__(self, name: str) -> bool:
        """Support 'name in grammar' syntax."""
        return self.has(name)

    def __len__(self) -> int:
        """Number of registered rules."""
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Grammar({self._name!r}, rules={len(self._rules)})"


class GrammarBuilder:
    """Mutable builder for Grammar.

    Register rules with ``add`` or the ``@rule(name)`` decorator, then call
    ``build()`` to create an immutable grammar.
    """

    __slots__ = ("_name", "_rules", "_start")

    def __init__(self, name: str, *, start: str = "document") -> None:
        self._name = name
        self._rules: dict[str, Rule] = {}
        self._start = start

    def add(self, name: str, rule: Rule) -> GrammarBuilder:
        """Register ``rule`` under ``name``.

        Returns:
            Self for chaining

        Raises:
            GrammarError: If the name is already registered
        """
        if name in self._rules:
            msg = f"Rule {name!r} already registered in grammar {self._name!r}"
            raise GrammarError(msg)
        self._rules[name] = rule
        return self

    def rule(self, name: str) -> Callable[[Rule], Rule]:
        """Decorator form of ``add``; returns the function unchanged."""

        def decorator(func: Rule) -> Rule:
            self.add(name, func)
            return func

        return decorator

    def build(self) -> Grammar:
        """Build immutable grammar from registered rules.

        Raises:
            GrammarError: If the start rule was never registered
        """
        if self._start not in self._rules:
            msg = f"Grammar {self._name!r} has no start rule {self._start!r}"
            raise GrammarError(msg)
        return Grammar(self._name, self._rules, self._start)

    def __len__(self) -> int:
        """Number of registered rules."""
        return len(self._rules)


__all__ = ["Grammar", "GrammarBuilder", "Rule"]
