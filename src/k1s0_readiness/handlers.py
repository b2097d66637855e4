"""HTTP handlers and middlewares for the readiness server."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping

from aiohttp import web
from aiohttp.typedefs import Handler

from .checks import Check
from .config import HttpServerConfig, seconds
from .report import evaluate

Middleware = Callable[[web.Request, Handler], Awaitable[web.StreamResponse]]


async def liveness_handler(request: web.Request) -> web.Response:
    """Always 200 with an empty body."""
    return web.Response(status=200)


def readiness_handler(checks: Mapping[str, Check]) -> Handler:
    """Build a handler that evaluates ``checks`` on every request."""

    async def handle(request: web.Request) -> web.Response:
        report = await evaluate(checks)
        try:
            body = report.to_json()
        except (TypeError, ValueError) as e:
            return web.Response(status=500, text=str(e), content_type="text/plain")
        return web.Response(
            status=200 if report.ready else 500,
            text=body,
            content_type="application/json",
        )

    return handle


class InFlightTracker:
    """Counts requests being handled so shutdown can wait for them."""

    def __init__(self) -> None:
        self._count = 0
        self._tasks: set[asyncio.Task[object]] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def count(self) -> int:
        return self._count

    @property
    def idle(self) -> bool:
        return self._count == 0

    async def wait_idle(self) -> None:
        await self._idle.wait()

    def cancel_all(self) -> None:
        """Cancel every request still being handled."""
        for task in list(self._tasks):
            task.cancel()

    @web.middleware
    async def middleware(self, request: web.Request, handler: Handler) -> web.StreamResponse:
        task = asyncio.current_task()
        if task is not None:
            self._tasks.add(task)
        self._count += 1
        self._idle.clear()
        try:
            return await handler(request)
        finally:
            self._tasks.discard(task)
            self._count -= 1
            if self._count == 0:
                self._idle.set()


async def _send(request: web.Request, response: web.StreamResponse) -> None:
    await response.prepare(request)
    await response.write_eof()


def timeout_middleware(config: HttpServerConfig) -> Middleware:
    """Apply the read and write deadlines of ``config`` to each request.

    The request body must arrive within ``read_timeout`` (408 otherwise).
    ``write_timeout`` bounds transmitting the response only: the handler
    always runs to completion, and a response that cannot be written in time
    is abandoned by closing the connection.

    Responses are written here, inside the in-flight count, so that shutdown
    never truncates a finished response.
    """
    read_timeout = seconds(config.read_timeout)
    write_timeout = seconds(config.write_timeout)

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        try:
            await asyncio.wait_for(request.read(), timeout=read_timeout)
        except asyncio.TimeoutError:
            response: web.StreamResponse = web.Response(status=408, text="request timeout")
        else:
            response = await handler(request)
        try:
            await asyncio.wait_for(_send(request, response), timeout=write_timeout)
        except asyncio.TimeoutError:
            response.force_close()
            if request.transport is not None:
                request.transport.close()
        return response

    return middleware
