"""gatedfsm: table-driven finite state machine with action-gated transitions

A transition to a new state is committed only after the asynchronous action
attached to it completes successfully. Until then, and whenever the action
fails, the machine's visible state stays where it was.

Responsibilities:
    - Transition table definition and validation
    - Current state tracking
    - Serialized, action-gated commits

Interactions:
    - Caller-supplied entry state initializer, actions and observer
    - asyncio event loop for action execution
    - Logging system for diagnostics
"""

from gatedfsm.core.errors import (
    ConfigurationError,
    FSMError,
    InitializationError,
    InvalidSymbolError,
    NoApplicableTransitionError,
    ObserverError,
    TransitionActionError,
    TransitionRequestError,
    UndefinedTransitionError,
)
from gatedfsm.core.hooks import HookManager, HookProtocol
from gatedfsm.core.state_machine import StateMachine
from gatedfsm.core.transitions import TransitionRule, TransitionTable
from gatedfsm.core.validations import Validator

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "FSMError",
    "HookManager",
    "HookProtocol",
    "InitializationError",
    "InvalidSymbolError",
    "NoApplicableTransitionError",
    "ObserverError",
    "StateMachine",
    "TransitionActionError",
    "TransitionRequestError",
    "TransitionRule",
    "TransitionTable",
    "UndefinedTransitionError",
    "Validator",
]
