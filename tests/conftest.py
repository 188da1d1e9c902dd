# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
from typing import Any, List
from unittest.mock import MagicMock

import pytest

from gatedfsm.core.transitions import TransitionRule


class StateRecorder:
    """Observer that records every state it is notified about."""

    def __init__(self):
        self.states: List[Any] = []

    def __call__(self, state: Any) -> None:
        self.states.append(state)


class RecordingHook:
    """Hook that tracks lifecycle calls."""

    def __init__(self):
        self.entered_states: List[Any] = []
        self.transitions: List[tuple] = []
        self.errors: List[Exception] = []

    def on_enter(self, state: Any) -> None:
        self.entered_states.append(state)

    async def on_transition(self, source: Any, target: Any) -> None:
        self.transitions.append((source, target))

    async def on_error(self, error: Exception) -> None:
        self.errors.append(error)


async def succeed(*args, **kwargs):
    await asyncio.sleep(0)
    return "done"


async def fail(*args, **kwargs):
    await asyncio.sleep(0)
    raise RuntimeError("action failed")


@pytest.fixture
def recorder():
    """An observer recording notified states."""
    return StateRecorder()


@pytest.fixture
def recording_hook():
    return RecordingHook()


@pytest.fixture
def states():
    return {"idle", "loading", "ready"}


@pytest.fixture
def alphabet():
    return {"load", "ready", "reset"}


@pytest.fixture
def loader_table():
    """The idle -> loading -> ready table with always-succeeding actions."""
    return {
        "load": [TransitionRule("idle", "loading", succeed)],
        "ready": [TransitionRule("loading", "ready", succeed)],
    }


@pytest.fixture
def machine_factory(states, alphabet, loader_table, recorder):
    """Returns a factory building a machine that starts in 'idle'."""
    from gatedfsm.core.state_machine import StateMachine

    def _factory(transitions=None, entry="idle", **kwargs):
        return StateMachine(
            states,
            alphabet,
            loader_table if transitions is None else transitions,
            lambda: entry,
            recorder,
            **kwargs,
        )

    return _factory


@pytest.fixture
def mock_action():
    """A synchronous action mock that succeeds with a sentinel value."""
    return MagicMock(return_value="sentinel")


@pytest.fixture
def succeed_action():
    return succeed


@pytest.fixture
def failing_action():
    return fail
