"""Readiness check registry."""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Union


class Checker(ABC):
    """Abstract readiness check.

    ``check`` returns normally when the dependency is healthy and raises
    otherwise; the exception text becomes the reported message. It may be a
    plain method or a coroutine.
    """

    @abstractmethod
    def check(self) -> None | Awaitable[None]: ...


Check = Union[Checker, Callable[[], Any]]


class Checks(dict[str, Check]):
    """Name to check mapping evaluated by the readiness endpoint."""

    def add_check(self, name: str, check: Check) -> None:
        """Register a check, replacing any check with the same name."""
        self[name] = check


async def run_check(check: Check) -> None:
    """Run a single check once.

    Coroutine functions run on the event loop. Synchronous callables run in a
    worker thread so that a blocking check does not stall other requests.
    """
    func = check.check if isinstance(check, Checker) else check
    if inspect.iscoroutinefunction(func):
        await func()
        return
    outcome = await asyncio.to_thread(func)
    if inspect.isawaitable(outcome):
        await outcome
