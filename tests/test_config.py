"""設定解決のユニットテスト"""

from datetime import timedelta

import pytest

from k1s0_readiness import (
    ENV_ADDRESS,
    ENV_LIVENESS_PATH,
    ENV_READINESS_PATH,
    HttpServerConfig,
    ServerConfig,
)
from k1s0_readiness.config import normalize_path, parse_address


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (ENV_ADDRESS, ENV_READINESS_PATH, ENV_LIVENESS_PATH):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    """オプション・環境変数なしでデフォルト値になること。"""
    config = ServerConfig.resolve()
    assert config.address == "0.0.0.0:3674"
    assert config.readiness_path == "/ready"
    assert config.liveness_path == "/live"
    assert config.http_server.read_timeout == timedelta(seconds=5)
    assert config.http_server.read_header_timeout == timedelta(seconds=1)
    assert config.http_server.idle_timeout == timedelta(seconds=1)
    assert config.http_server.write_timeout == timedelta(seconds=15)


def test_env_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """環境変数がデフォルトより優先されること。"""
    monkeypatch.setenv(ENV_ADDRESS, "127.0.0.1:9000")
    monkeypatch.setenv(ENV_READINESS_PATH, "/readyz")
    monkeypatch.setenv(ENV_LIVENESS_PATH, "/healthz")
    config = ServerConfig.resolve()
    assert config.address == "127.0.0.1:9000"
    assert config.readiness_path == "/readyz"
    assert config.liveness_path == "/healthz"


def test_options_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """明示オプションが環境変数より優先されること。"""
    monkeypatch.setenv(ENV_ADDRESS, "127.0.0.1:9000")
    monkeypatch.setenv(ENV_READINESS_PATH, "/readyz")
    monkeypatch.setenv(ENV_LIVENESS_PATH, "/healthz")
    config = ServerConfig.resolve(
        address=":9999", readiness_path="/r", liveness_path="/l"
    )
    assert config.address == ":9999"
    assert config.readiness_path == "/r"
    assert config.liveness_path == "/l"


def test_fields_resolve_independently(monkeypatch: pytest.MonkeyPatch) -> None:
    """フィールドごとに独立して優先順位が適用されること。"""
    monkeypatch.setenv(ENV_READINESS_PATH, "/readyz")
    config = ServerConfig.resolve(liveness_path="/alive")
    assert config.address == "0.0.0.0:3674"
    assert config.readiness_path == "/readyz"
    assert config.liveness_path == "/alive"


def test_empty_values_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_ADDRESS, "")
    config = ServerConfig.resolve(address="", readiness_path="")
    assert config.address == "0.0.0.0:3674"
    assert config.readiness_path == "/ready"


def test_explicit_environ_mapping() -> None:
    config = ServerConfig.resolve(environ={ENV_LIVENESS_PATH: "/up"})
    assert config.liveness_path == "/up"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("ready", "/ready"), ("/ready/", "/ready"), ("//a/./b", "/a/b"), ("/", "/")],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0.0.0.0:3674", ("0.0.0.0", 3674)),
        (":9999", (None, 9999)),
        ("localhost:0", ("localhost", 0)),
        ("[::1]:8080", ("::1", 8080)),
    ],
)
def test_parse_address(raw: str, expected: tuple) -> None:
    assert parse_address(raw) == expected


@pytest.mark.parametrize("raw", ["localhost", "host:port", "::1:80", "x:70000"])
def test_parse_address_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_address(raw)


def test_keepalive_timeout_uses_shorter_timer() -> None:
    config = HttpServerConfig(
        idle_timeout=timedelta(seconds=3), read_header_timeout=timedelta(seconds=2)
    )
    assert config.keepalive_timeout == 2.0
    disabled = HttpServerConfig(idle_timeout=None, read_header_timeout=timedelta(0))
    assert disabled.keepalive_timeout is None


def test_config_is_frozen() -> None:
    config = ServerConfig.resolve()
    with pytest.raises(AttributeError):
        config.address = "x"  # type: ignore[misc]
