"""readiness サーバー設定"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_ADDRESS = "0.0.0.0:3674"
DEFAULT_READINESS_PATH = "/ready"
DEFAULT_LIVENESS_PATH = "/live"

ENV_ADDRESS = "FLEX_READYSRV_ADDR"
ENV_READINESS_PATH = "FLEX_READYSRV_READINESS_PATH"
ENV_LIVENESS_PATH = "FLEX_READYSRV_LIVENESS_PATH"


@dataclass(frozen=True)
class HttpServerConfig:
    """HTTP トランスポート設定。

    0 または None のタイムアウトは無効 (期限なし) として扱う。
    """

    read_timeout: timedelta | None = field(default_factory=lambda: timedelta(seconds=5))
    read_header_timeout: timedelta | None = field(
        default_factory=lambda: timedelta(seconds=1)
    )
    idle_timeout: timedelta | None = field(default_factory=lambda: timedelta(seconds=1))
    write_timeout: timedelta | None = field(default_factory=lambda: timedelta(seconds=15))

    @property
    def keepalive_timeout(self) -> float | None:
        """aiohttp の keep-alive タイマー (秒)。idle と read-header の短い方。

        両方とも無効なら None (aiohttp のデフォルトを使う)。
        """
        values = [
            seconds(t) for t in (self.idle_timeout, self.read_header_timeout)
        ]
        enabled = [v for v in values if v is not None]
        return min(enabled) if enabled else None


@dataclass(frozen=True)
class ServerConfig:
    """readiness サーバーの解決済み設定。"""

    address: str = DEFAULT_ADDRESS
    readiness_path: str = DEFAULT_READINESS_PATH
    liveness_path: str = DEFAULT_LIVENESS_PATH
    http_server: HttpServerConfig = field(default_factory=HttpServerConfig)

    @classmethod
    def resolve(
        cls,
        *,
        address: str | None = None,
        readiness_path: str | None = None,
        liveness_path: str | None = None,
        http_server: HttpServerConfig | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ServerConfig:
        """明示オプション > 環境変数 > デフォルト の優先順位で設定を解決する。

        空文字列は未指定として扱う。
        """
        env = os.environ if environ is None else environ
        return cls(
            address=address or env.get(ENV_ADDRESS) or DEFAULT_ADDRESS,
            readiness_path=normalize_path(
                readiness_path
                or env.get(ENV_READINESS_PATH)
                or DEFAULT_READINESS_PATH
            ),
            liveness_path=normalize_path(
                liveness_path or env.get(ENV_LIVENESS_PATH) or DEFAULT_LIVENESS_PATH
            ),
            http_server=http_server or HttpServerConfig(),
        )


def normalize_path(path: str) -> str:
    """パスを "/" 始まりの正規化済み形式にする ("ready/" -> "/ready")。"""
    cleaned = posixpath.normpath("/" + path).lstrip("/")
    return "/" + cleaned


def parse_address(address: str) -> tuple[str | None, int]:
    """"host:port" を (host, port) に分解する。

    host が空 (":3674") の場合は None を返し、全インターフェースで待ち受ける。

    Raises:
        ValueError: アドレスの形式が不正な場合
    """
    host, sep, port_text = address.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError(f"invalid address {address!r}: missing port")
    port = int(port_text)
    if port > 65535:
        raise ValueError(f"invalid address {address!r}: port out of range")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"invalid address {address!r}: IPv6 host must be bracketed")
    return (host or None), port


def seconds(value: timedelta | None) -> float | None:
    """timedelta を秒に変換する。0 以下と None は None (期限なし)。"""
    if value is None:
        return None
    total = value.total_seconds()
    return total if total > 0 else None
