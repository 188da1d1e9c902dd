# gatedfsm/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, FrozenSet, Hashable, Iterable, List, Mapping, Optional, Sequence, Union

from gatedfsm.core.errors import (
    ConfigurationError,
    InitializationError,
    InvalidSymbolError,
    NoApplicableTransitionError,
    ObserverError,
    TransitionActionError,
    UndefinedTransitionError,
)
from gatedfsm.core.hooks import HookManager
from gatedfsm.core.transitions import RuleSpec, TransitionRule, TransitionTable
from gatedfsm.core.validations import Validator

logger = logging.getLogger(__name__)


class StateMachine:
    """
    A table-driven finite state machine whose transitions are gated by
    actions. The current state only moves to a rule's target once the rule's
    action has completed successfully; a failed action leaves it untouched.

    Transition requests are serialized per instance: at most one action is in
    flight at a time and each request sees the state left by the previous one.
    An action must therefore not await a transition on its own machine.
    """

    def __init__(
        self,
        states: Iterable[Hashable],
        alphabet: Iterable[Hashable],
        transitions: Union[TransitionTable, Mapping[Hashable, Sequence[RuleSpec]]],
        entry_state_initializer: Callable[[], Hashable],
        on_state_changed: Callable[[Hashable], Any],
        *,
        hooks: Optional[List[Any]] = None,
        validator: Optional[Validator] = None,
    ) -> None:
        """
        :param states: The finite set of valid states.
        :param alphabet: The symbols that may trigger transitions.
        :param transitions: Mapping of symbol to rules, or a prepared TransitionTable.
        :param entry_state_initializer: Zero-argument callable returning the initial state.
        :param on_state_changed: Called with the initial state, then with each committed state.
        :param hooks: Optional hook objects implementing on_enter, on_transition, on_error.
        :param validator: Optional validator for configuration checks.
        :raises ConfigurationError: If the configuration is malformed.
        :raises InitializationError: If the initializer fails or returns an undeclared state.
        :raises ObserverError: If the observer fails on the initial state.
        """
        try:
            self._states: FrozenSet[Hashable] = frozenset(states)
            self._alphabet: FrozenSet[Hashable] = frozenset(alphabet)
            self._table = transitions if isinstance(transitions, TransitionTable) else TransitionTable(transitions)
        except (TypeError, AttributeError) as e:
            raise ConfigurationError(
                f"Invalid state machine configuration: {e}", "StateMachine", {"malformed": [str(e)]}
            ) from e
        if not callable(on_state_changed):
            raise ConfigurationError(
                "on_state_changed must be callable", "StateMachine", {"malformed": ["on_state_changed"]}
            )

        self._validator = validator or Validator()
        self._validator.validate_configuration(self._states, self._alphabet, self._table)

        self._on_state_changed = on_state_changed
        self._hook_manager = HookManager(hooks)
        self._lock = asyncio.Lock()

        self._current_state = self._resolve_entry_state(entry_state_initializer)
        logger.info("State machine initialized in state %r", self._current_state)
        self._notify_state_changed(self._current_state)
        self._hook_manager.execute_on_enter_sync(self._current_state)

    @property
    def current_state(self) -> Hashable:
        """Get the current committed state."""
        return self._current_state

    @property
    def states(self) -> FrozenSet[Hashable]:
        return self._states

    @property
    def alphabet(self) -> FrozenSet[Hashable]:
        return self._alphabet

    @property
    def transitions(self) -> TransitionTable:
        return self._table

    @property
    def is_transitioning(self) -> bool:
        """True while a transition action is in flight."""
        return self._lock.locked()

    def can_transition(self, symbol: Hashable) -> bool:
        """
        Return True if ``symbol`` has a rule starting at the current state.
        A pending transition may still move the state before a request runs.
        """
        try:
            return symbol in self._alphabet and bool(self._table.find(symbol, self._current_state))
        except TypeError:
            return False

    def available_symbols(self) -> FrozenSet[Hashable]:
        """Return every symbol that has a rule starting at the current state."""
        return frozenset(symbol for symbol in self._table if self.can_transition(symbol))

    async def request_transition(self, symbol: Hashable, *args: Any, **kwargs: Any) -> Any:
        """
        Run the action of the rule matching ``symbol`` and the current state,
        then commit the rule's target state.

        :param symbol: A member of the alphabet.
        :param args: Positional arguments forwarded to the action.
        :param kwargs: Keyword arguments forwarded to the action.
        :return: The action's result.
        :raises InvalidSymbolError: If ``symbol`` is not in the alphabet.
        :raises UndefinedTransitionError: If ``symbol`` has no table entry.
        :raises NoApplicableTransitionError: If no rule starts at the current state.
        :raises TransitionActionError: If the action fails; the state is unchanged.
        :raises ObserverError: If the observer fails; the state is already committed.
        """
        self._check_symbol(symbol)
        async with self._lock:
            rule = self._select_rule(symbol)
            return await self._execute_transition(symbol, rule, args, kwargs)

    def _resolve_entry_state(self, initializer: Callable[[], Hashable]) -> Hashable:
        try:
            state = initializer()
        except Exception as e:
            logger.error("State machine initialization failed: %s", e)
            raise InitializationError(f"State machine initialization failed: {e}", None, e) from e
        try:
            declared = state in self._states
        except TypeError:
            declared = False
        if not declared:
            logger.error("Entry state %r is not a declared state", state)
            raise InitializationError(
                f"State machine initialization on state {state!r} failed: not a declared state", state
            )
        return state

    def _check_symbol(self, symbol: Hashable) -> None:
        try:
            known = symbol in self._alphabet
        except TypeError:
            known = False
        if not known:
            raise InvalidSymbolError(f"Symbol {symbol!r} doesn't belong to the state machine's alphabet", symbol)
        if symbol not in self._table:
            raise UndefinedTransitionError(f"Symbol {symbol!r} has no transitions in the state machine", symbol)

    def _select_rule(self, symbol: Hashable) -> TransitionRule:
        matches = self._table.find(symbol, self._current_state)
        if not matches:
            raise NoApplicableTransitionError(
                f"No transition for symbol {symbol!r} from state {self._current_state!r}", symbol, self._current_state
            )
        rule = matches[0]
        logger.debug("Symbol %r selected transition %r -> %r", symbol, rule.source, rule.target)
        return rule

    async def _execute_transition(self, symbol: Hashable, rule: TransitionRule, args: tuple, kwargs: dict) -> Any:
        source = self._current_state
        try:
            result = rule.action(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception as error:
            logger.warning("Action for transition %r -> %r failed: %s", source, rule.target, error)
            await self._hook_manager.execute_on_error(error)
            raise TransitionActionError(
                f"Unable to perform the action before changing to state {rule.target!r}: {error}",
                symbol,
                source,
                rule.target,
                error,
            ) from error

        self._current_state = rule.target
        logger.debug("Committed transition %r -> %r on %r", source, rule.target, symbol)
        self._notify_state_changed(rule.target)
        await self._hook_manager.execute_on_transition(source, rule.target)
        await self._hook_manager.execute_on_enter(rule.target)
        return result

    def _notify_state_changed(self, state: Hashable) -> None:
        try:
            self._on_state_changed(state)
        except Exception as e:
            raise ObserverError(f"State-changed observer failed for state {state!r}: {e}", state, e) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(current_state={self._current_state!r})"
