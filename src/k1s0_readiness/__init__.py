"""k1s0 readiness library."""

from .checks import Check, Checker, Checks, run_check
from .config import (
    DEFAULT_ADDRESS,
    DEFAULT_LIVENESS_PATH,
    DEFAULT_READINESS_PATH,
    ENV_ADDRESS,
    ENV_LIVENESS_PATH,
    ENV_READINESS_PATH,
    HttpServerConfig,
    ServerConfig,
)
from .exceptions import (
    BindError,
    ReadinessError,
    ReadinessErrorCodes,
    ServerStateError,
    ShutdownTimeoutError,
)
from .logger import Logger, new_logger
from .report import CheckResult, ReadinessReport, evaluate
from .server import ReadyServer

__all__ = [
    "Check",
    "Checker",
    "Checks",
    "run_check",
    "CheckResult",
    "ReadinessReport",
    "evaluate",
    "DEFAULT_ADDRESS",
    "DEFAULT_READINESS_PATH",
    "DEFAULT_LIVENESS_PATH",
    "ENV_ADDRESS",
    "ENV_READINESS_PATH",
    "ENV_LIVENESS_PATH",
    "HttpServerConfig",
    "ServerConfig",
    "ReadyServer",
    "Logger",
    "new_logger",
    "ReadinessError",
    "ReadinessErrorCodes",
    "BindError",
    "ServerStateError",
    "ShutdownTimeoutError",
]
