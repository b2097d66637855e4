"""structlog ベースのロガー設定"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog


class Logger(Protocol):
    """サーバーが起動・停止時に使うロガーのインターフェース。"""

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...


def new_logger(level: str = "INFO", format: str = "json") -> structlog.stdlib.BoundLogger:
    """k1s0_readiness 用の structlog ロガーを返す。

    structlog のグローバル設定は変更せず、stdlib の
    ``logging.getLogger("k1s0_readiness")`` をラップした独立インスタンスを作る。
    アプリケーション側でログ出力先が未設定の場合は stdout に出力する。

    Args:
        level: ログレベル ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: 出力形式 ("json" or "text")
    """
    std_logger = logging.getLogger("k1s0_readiness")
    std_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not std_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        std_logger.addHandler(handler)

    processors: list[structlog.types.Processor]
    if format == "json":
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    return structlog.wrap_logger(
        std_logger,
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
