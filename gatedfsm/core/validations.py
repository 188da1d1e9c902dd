# gatedfsm/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, FrozenSet, Hashable, List

from gatedfsm.core.errors import ConfigurationError
from gatedfsm.core.transitions import TransitionTable

logger = logging.getLogger(__name__)


class Validator:
    """
    Performs construction-time validation of a machine's states, alphabet and
    transition table. Subclass and override ``validate_configuration`` to add
    project-specific rules.
    """

    def validate_configuration(
        self,
        states: FrozenSet[Hashable],
        alphabet: FrozenSet[Hashable],
        table: TransitionTable,
    ) -> None:
        """
        Check the configuration and report every problem at once.

        :param states: The declared state set.
        :param alphabet: The declared alphabet.
        :param table: The transition table.
        :raises ConfigurationError: If any rule fails.
        """
        errors = _DefaultValidationRules.collect(states, alphabet, table)
        if errors:
            summary = "; ".join(f"{kind}: {items!r}" for kind, items in errors.items())
            logger.debug("Rejected state machine configuration: %s", summary)
            raise ConfigurationError(f"Invalid state machine configuration ({summary})", "TransitionTable", errors)


def _declared(state: Any, states: FrozenSet[Hashable]) -> bool:
    # Unhashable values can never be declared states.
    try:
        return state in states
    except TypeError:
        return False


class _DefaultValidationRules:
    """
    Built-in rules: declared universe is non-empty, table only references
    declared states and symbols, actions are callable and no two rules share
    a ``(symbol, source)`` pair.
    """

    @staticmethod
    def collect(
        states: FrozenSet[Hashable],
        alphabet: FrozenSet[Hashable],
        table: TransitionTable,
    ) -> Dict[str, List[Any]]:
        errors: Dict[str, List[Any]] = {}

        def report(kind: str, item: Any) -> None:
            errors.setdefault(kind, []).append(item)

        if not states:
            report("empty_states", "at least one state must be declared")

        for symbol in table:
            if symbol not in alphabet:
                report("unknown_symbols", symbol)

        for symbol, rule in table.all_rules():
            if not _declared(rule.source, states):
                report("unknown_states", (symbol, rule.source))
            if not _declared(rule.target, states):
                report("unknown_states", (symbol, rule.target))
            if not callable(rule.action):
                report("invalid_actions", (symbol, rule.edge))

        for symbol in table:
            sources = Counter(rule.source for rule in table[symbol] if _declared(rule.source, states))
            for source, count in sources.items():
                if count > 1:
                    report("ambiguous_rules", (symbol, source))

        return errors
