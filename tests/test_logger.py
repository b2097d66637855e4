"""ロガー設定のユニットテスト"""

import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from k1s0_readiness import new_logger


def test_new_logger_json_format(caplog: pytest.LogCaptureFixture) -> None:
    """JSON フォーマットで出力されること。"""
    logger = new_logger(level="INFO", format="json")
    with caplog.at_level(logging.INFO, logger="k1s0_readiness"):
        logger.info("serving", readiness_url="http://127.0.0.1:3674/ready")
    record = json.loads(caplog.records[-1].getMessage())
    assert record["event"] == "serving"
    assert record["level"] == "info"
    assert record["readiness_url"] == "http://127.0.0.1:3674/ready"


def test_new_logger_text_format() -> None:
    """テキストフォーマットのロガーが作成できること。"""
    logger = new_logger(level="DEBUG", format="text")
    assert logger is not None


def test_new_logger_returns_bound_logger() -> None:
    """bind できるロガーが返ること。"""
    bound = new_logger().bind(key="value")
    assert bound is not None


_SERVE_ONCE = """
import asyncio

from k1s0_readiness import ReadyServer


async def main() -> None:
    srv = ReadyServer(address="127.0.0.1:0")
    task = asyncio.create_task(srv.start())
    while srv.bound_address is None:
        await asyncio.sleep(0.01)
    await srv.stop(timeout=5)
    await task


asyncio.run(main())
"""


def _child_env() -> dict[str, str]:
    src = str(Path(__file__).resolve().parents[1] / "src")
    paths = [src, os.environ.get("PYTHONPATH", "")]
    return {**os.environ, "PYTHONPATH": os.pathsep.join(p for p in paths if p)}


def test_default_logger_writes_to_stdout_without_logging_config() -> None:
    """ログ設定のないプロセスでも起動時の URL が stdout に出力されること。"""
    result = subprocess.run(
        [sys.executable, "-c", _SERVE_ONCE],
        env=_child_env(),
        capture_output=True,
        text=True,
        timeout=30,
        check=True,
    )
    lines = [json.loads(line) for line in result.stdout.splitlines() if line]
    assert lines[0]["event"] == "serving readiness checks server over http"
    assert lines[0]["readiness_url"].startswith("http://127.0.0.1:")
    assert lines[0]["readiness_url"].endswith("/ready")
    assert lines[0]["liveness_url"].endswith("/live")
    assert lines[1]["event"] == "stopping readiness checks server over http"
