# gatedfsm/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
import logging
from typing import Any, Hashable, List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class HookProtocol(Protocol):
    """
    Lifecycle listener. Every method is optional and may be a plain function
    or a coroutine function.
    """

    def on_enter(self, state: Hashable) -> Any:
        ...

    def on_transition(self, source: Hashable, target: Hashable) -> Any:
        ...

    def on_error(self, error: Exception) -> Any:
        ...


class HookManager:
    """
    Dispatches commit and failure notifications to registered hooks. After a
    committed transition each hook sees ``on_transition(source, target)``
    followed by ``on_enter(target)``; after a failed action it sees
    ``on_error(error)`` while the state is still the source.
    """

    def __init__(self, hooks: Optional[List[Any]] = None) -> None:
        self._hooks: List[Any] = []
        for hook in hooks or []:
            self.register_hook(hook)

    @property
    def hooks(self) -> List[Any]:
        return list(self._hooks)

    def register_hook(self, hook: Any) -> None:
        """
        Append ``hook`` to the dispatch order. Methods it lacks are skipped.
        """
        self._hooks.append(hook)

    def execute_on_enter_sync(self, state: Hashable) -> None:
        """
        Report the entry state while the machine is being built. No event
        loop is assumed here, so coroutine ``on_enter`` hooks are not called.
        """
        for method in self._methods("on_enter"):
            if inspect.iscoroutinefunction(method):
                logger.warning(
                    "Async on_enter hook %r cannot run during construction; entry state %r not reported", method, state
                )
                continue
            method(state)

    async def execute_on_enter(self, state: Hashable) -> None:
        """Report a committed target state."""
        await self._invoke("on_enter", state)

    async def execute_on_transition(self, source: Hashable, target: Hashable) -> None:
        await self._invoke("on_transition", source, target)

    async def execute_on_error(self, error: Exception) -> None:
        """Report the exception raised by a failed transition action."""
        await self._invoke("on_error", error)

    def _methods(self, name: str) -> List[Any]:
        return [getattr(hook, name) for hook in self._hooks if callable(getattr(hook, name, None))]

    async def _invoke(self, name: str, *args: Any) -> None:
        for method in self._methods(name):
            result = method(*args)
            if inspect.isawaitable(result):
                await result
