# gatedfsm/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections import abc
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Iterator, List, Mapping, Sequence, Tuple, Union


def _succeed(*args: Any, **kwargs: Any) -> None:
    return None


@dataclass(frozen=True)
class TransitionRule:
    """
    A declared edge ``source -> target`` guarded by an action. The edge is
    only taken once the action has completed successfully.
    """

    source: Hashable
    target: Hashable
    action: Callable[..., Any] = field(default=_succeed, compare=False)

    @property
    def edge(self) -> Tuple[Hashable, Hashable]:
        """The ``(source, target)`` pair of this rule."""
        return (self.source, self.target)

    @classmethod
    def coerce(cls, entry: Union["TransitionRule", Sequence[Any]]) -> "TransitionRule":
        """
        Build a rule from a ``TransitionRule`` or a ``(source, target)`` /
        ``(source, target, action)`` tuple.

        :raises TypeError: If the entry has any other shape.
        """
        if isinstance(entry, TransitionRule):
            return entry
        if isinstance(entry, (tuple, list)) and len(entry) in (2, 3):
            return cls(*entry)
        raise TypeError(f"Cannot build a transition rule from {entry!r}")


RuleSpec = Union[TransitionRule, Sequence[Any]]


class TransitionTable(abc.Mapping):
    """
    Immutable mapping of symbol to the ordered rules triggered by it. Several
    rules may share a symbol as long as they start from different states.
    """

    def __init__(self, transitions: Mapping[Hashable, Sequence[RuleSpec]]) -> None:
        """
        :param transitions: Mapping of symbol to a sequence of rules or rule tuples.
        """
        rules: Dict[Hashable, Tuple[TransitionRule, ...]] = {}
        for symbol, entries in transitions.items():
            rules[symbol] = tuple(TransitionRule.coerce(entry) for entry in entries)
        self._rules = MappingProxyType(rules)

    def __getitem__(self, symbol: Hashable) -> Tuple[TransitionRule, ...]:
        return self._rules[symbol]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"TransitionTable({dict(self._rules)!r})"

    def symbols(self) -> frozenset:
        """Return every symbol that has at least one table entry."""
        return frozenset(self._rules)

    def rules_for(self, symbol: Hashable) -> Tuple[TransitionRule, ...]:
        """Return the rules declared for ``symbol``, or an empty tuple."""
        return self._rules.get(symbol, ())

    def find(self, symbol: Hashable, state: Hashable) -> List[TransitionRule]:
        """
        Return all rules for ``symbol`` starting at ``state``, in declaration order.
        """
        return [rule for rule in self.rules_for(symbol) if rule.source == state]

    def all_rules(self) -> Iterator[Tuple[Hashable, TransitionRule]]:
        """Yield ``(symbol, rule)`` pairs for the whole table."""
        for symbol, rules in self._rules.items():
            for rule in rules:
                yield symbol, rule
