"""Readiness server exceptions."""

from __future__ import annotations


class ReadinessErrorCodes:
    """ReadinessError のエラーコード定数。"""

    BIND_ERROR: str = "BIND_ERROR"
    ALREADY_STARTED: str = "ALREADY_STARTED"
    SERVER_CLOSED: str = "SERVER_CLOSED"
    SHUTDOWN_TIMEOUT: str = "SHUTDOWN_TIMEOUT"


class ReadinessError(Exception):
    """Base readiness server error. ``str()`` is ``"<code>: <message>"``."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(f"{code}: {message}")


class BindError(ReadinessError):
    """The listener could not be bound to the configured address."""

    def __init__(self, address: str, reason: object) -> None:
        self.address = address
        super().__init__(
            ReadinessErrorCodes.BIND_ERROR, f"Failed to listen on {address}: {reason}"
        )


class ServerStateError(ReadinessError):
    """start() was called on a running or stopped server."""

    def __init__(self, code: str) -> None:
        state = "already running" if code == ReadinessErrorCodes.ALREADY_STARTED else "stopped"
        super().__init__(code, f"readiness server is {state}")


class ShutdownTimeoutError(ReadinessError):
    """Requests were still in flight when the shutdown deadline expired."""

    def __init__(self, pending: int, timeout: float | None) -> None:
        self.pending = pending
        self.timeout = timeout
        super().__init__(
            ReadinessErrorCodes.SHUTDOWN_TIMEOUT,
            f"{pending} request(s) still in flight after {timeout}s",
        )
