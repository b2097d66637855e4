"""Readiness and liveness HTTP server."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

from aiohttp import web

from .checks import Check, Checks
from .config import HttpServerConfig, ServerConfig, parse_address
from .exceptions import BindError, ReadinessErrorCodes, ServerStateError, ShutdownTimeoutError
from .handlers import InFlightTracker, liveness_handler, readiness_handler, timeout_middleware
from .logger import Logger, new_logger


class ReadyServer:
    """Serves liveness and readiness endpoints for orchestration probes.

    Construction never fails: any option left as ``None`` (or ``""``) falls
    back to its environment variable and then to the built-in default.
    """

    def __init__(
        self,
        checks: Mapping[str, Check] | None = None,
        *,
        address: str | None = None,
        readiness_path: str | None = None,
        liveness_path: str | None = None,
        logger: Logger | None = None,
        http_server: HttpServerConfig | None = None,
    ) -> None:
        self.config = ServerConfig.resolve(
            address=address,
            readiness_path=readiness_path,
            liveness_path=liveness_path,
            http_server=http_server,
        )
        self.checks = Checks(checks or {})
        self._logger: Logger = logger if logger is not None else new_logger()
        self._tracker = InFlightTracker()
        self._app = self._build_app()
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._stopped = asyncio.Event()
        self._closed = False

    def _build_app(self) -> web.Application:
        app = web.Application(
            middlewares=[
                self._tracker.middleware,
                timeout_middleware(self.config.http_server),
            ]
        )
        app.router.add_get(self.config.readiness_path, readiness_handler(self.checks))
        if self.config.liveness_path == self.config.readiness_path:
            self._logger.warning(
                "liveness path collides with readiness path, serving readiness only",
                path=self.config.readiness_path,
            )
        else:
            app.router.add_get(self.config.liveness_path, liveness_handler)
        return app

    @property
    def app(self) -> web.Application:
        return self._app

    @property
    def bound_address(self) -> tuple[str, int] | None:
        """Actual (host, port) of the listener, or None when not serving."""
        if self._runner is None or not self._runner.addresses:
            return None
        host, port = self._runner.addresses[0][:2]
        return host, port

    @property
    def in_flight(self) -> int:
        return self._tracker.count

    def _url(self, path: str) -> str:
        bound = self.bound_address
        if bound is None:
            return f"http://{self.config.address}{path}"
        host, port = bound
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{port}{path}"

    async def start(self) -> None:
        """Bind the listener and serve until :meth:`stop` completes.

        If :meth:`stop` is called while the listener is still being bound,
        the listener is released and this returns without serving.

        Raises:
            BindError: the listener could not be bound
            ServerStateError: the server is already running or was stopped
        """
        if self._closed:
            raise ServerStateError(ReadinessErrorCodes.SERVER_CLOSED)
        if self._runner is not None:
            raise ServerStateError(ReadinessErrorCodes.ALREADY_STARTED)

        try:
            host, port = parse_address(self.config.address)
        except ValueError as e:
            raise BindError(self.config.address, e) from e

        runner_options: dict[str, object] = {}
        keepalive = self.config.http_server.keepalive_timeout
        if keepalive is not None:
            runner_options["keepalive_timeout"] = keepalive
        runner = web.AppRunner(
            self._app, handle_signals=False, access_log=None, **runner_options
        )
        self._runner = runner
        try:
            await runner.setup()
            site = web.TCPSite(runner, host, port)
            await site.start()
        except OSError as e:
            await runner.cleanup()
            self._runner = None
            raise BindError(self.config.address, e) from e

        if self._closed:
            await runner.cleanup()
            self._runner = None
            return

        self._site = site
        self._logger.info(
            "serving readiness checks server over http",
            readiness_url=self._url(self.config.readiness_path),
            liveness_url=self._url(self.config.liveness_path),
        )
        await self._stopped.wait()

    async def stop(self, timeout: float | None = None) -> None:
        """Gracefully shut the server down.

        Stops accepting connections, waits up to ``timeout`` seconds for
        in-flight requests (``None`` waits indefinitely), then releases the
        listener. The server is closed afterwards: a pending or later
        :meth:`start` does not serve.

        Raises:
            ShutdownTimeoutError: requests were still in flight when the
                deadline expired; they are cancelled before this is raised
        """
        self._closed = True
        if self._site is None:
            self._stopped.set()
            return
        runner, site = self._runner, self._site
        self._logger.info(
            "stopping readiness checks server over http",
            address=self.config.address,
        )
        try:
            await site.stop()
            if not self._tracker.idle:
                await asyncio.wait_for(self._tracker.wait_idle(), timeout=timeout)
        except asyncio.TimeoutError as e:
            pending = self._tracker.count
            self._tracker.cancel_all()
            raise ShutdownTimeoutError(pending, timeout) from e
        finally:
            await runner.cleanup()
            self._runner = None
            self._site = None
            self._stopped.set()
