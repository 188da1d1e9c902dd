# gatedfsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Dict, List, Optional


class FSMError(Exception):
    """
    Base exception class for errors raised by the transition engine.

    :param message: Human readable description of the failure.
    :param details: Optional dictionary of extra context.
    """

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}


class ConfigurationError(FSMError):
    """
    Raised when the states, alphabet or transition table are malformed.
    Construction does not complete.
    """

    def __init__(
        self,
        message: str,
        component: str = "StateMachine",
        validation_errors: Optional[Dict[str, List[Any]]] = None,
    ) -> None:
        self.component = component
        self.validation_errors = validation_errors if validation_errors is not None else {}
        super().__init__(message, {"component": component, "validation_errors": self.validation_errors})


class InitializationError(FSMError):
    """
    Raised when the entry-state initializer fails or returns an undeclared
    state. No partially-built machine is returned.
    """

    def __init__(
        self,
        message: str,
        attempted_state: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.attempted_state = attempted_state
        self.cause = cause
        super().__init__(message, {"attempted_state": attempted_state})


class TransitionRequestError(FSMError):
    """
    Base class for synchronous rejections of a transition request. The
    current state is never changed when one of these is raised.
    """

    def __init__(self, message: str, symbol: Any, details: Optional[Dict[str, Any]] = None) -> None:
        self.symbol = symbol
        merged = {"symbol": symbol}
        merged.update(details or {})
        super().__init__(message, merged)


class InvalidSymbolError(TransitionRequestError):
    """Raised when the requested symbol is not part of the alphabet."""


class UndefinedTransitionError(TransitionRequestError):
    """Raised when the symbol is in the alphabet but has no table entry."""


class NoApplicableTransitionError(TransitionRequestError):
    """Raised when none of the symbol's rules starts at the current state."""

    def __init__(self, message: str, symbol: Any, state: Any) -> None:
        self.state = state
        super().__init__(message, symbol, {"state": state})


class TransitionActionError(FSMError):
    """
    Raised when the action guarding a transition fails. The state stays at
    ``source`` and the original exception is available as ``cause``.
    """

    def __init__(
        self,
        message: str,
        symbol: Any,
        source: Any,
        target: Any,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.symbol = symbol
        self.source = source
        self.target = target
        self.cause = cause
        super().__init__(message, {"symbol": symbol, "source": source, "target": target})


class ObserverError(FSMError):
    """
    Raised when the state-changed observer fails. The state it was notified
    about has already been committed.
    """

    def __init__(self, message: str, state: Any, cause: Optional[BaseException] = None) -> None:
        self.state = state
        self.cause = cause
        super().__init__(message, {"state": state})
