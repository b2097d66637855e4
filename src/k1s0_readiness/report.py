"""Readiness report aggregation."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field

from .checks import Check, run_check


@dataclass
class CheckResult:
    """Result of a single readiness check."""

    ok: bool
    message: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"ok": self.ok, "messages": self.message}


@dataclass
class ReadinessReport:
    """Aggregated readiness check results for one request."""

    checks: dict[str, CheckResult] = field(default_factory=dict)

    @property
    def ready(self) -> bool:
        """True when every check passed. An empty report is ready."""
        return all(r.ok for r in self.checks.values())

    def to_json(self) -> str:
        """Serialize as ``{name: {"ok": bool, "messages": str}}``.

        Raises:
            TypeError: a check name cannot be used as a JSON object key
        """
        return json.dumps(
            {name: r.to_dict() for name, r in self.checks.items()},
            separators=(",", ":"),
        )


def _failure_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


async def evaluate(checks: Mapping[str, Check] | None) -> ReadinessReport:
    """Run every check exactly once, sequentially, and collect the results."""
    report = ReadinessReport()
    for name, check in (checks or {}).items():
        try:
            await run_check(check)
        except Exception as e:
            report.checks[name] = CheckResult(ok=False, message=_failure_message(e))
        else:
            report.checks[name] = CheckResult(ok=True)
    return report
