"""
Navigation run logging — per-step accounting for one page load.

Provides:
  - StepReport: lightweight dataclass that captures what a step did
    (records processed, elapsed time, metrics) and whether it failed.
  - RunLogger: times each step of a run, logs a one-line summary per step
    through the standard ``logging`` module, and exposes the whole run as a
    dict.  Nothing is written to disk.

Usage inside pipeline/navigation.py::

    run = RunLogger()
    report = run.start_step("fetch_reports")
    reports = fetcher.fetch_reports()
    report.items_processed = len(reports)
    run.finish_step("fetch_reports", report)
    run.summary()

Steps, in order: fetch_reports, fetch_programs, fetch_customers, reconcile,
present.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass
class StepReport:
    """Structured summary of what one run step accomplished."""

    step_name: str
    status: str = "not_started"               # started | completed | failed
    elapsed_seconds: float = 0.0
    items_processed: int = 0
    errors: list[str] = field(default_factory=list)
    metrics: dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def console_summary(self) -> str:
        """One-line summary suitable for the log."""
        parts: list[str] = [f"{self.items_processed:,} processed"]
        if self.errors:
            parts.append(f"{len(self.errors):,} errors")
        for key, val in self.metrics.items():
            if isinstance(val, bool):
                continue
            if isinstance(val, (int, float)):
                parts.append(f"{key}: {val:,}" if isinstance(val, int) else f"{key}: {val:.1f}")
        parts.append(f"{self.elapsed_seconds:.2f}s")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d = {
            "step_name": self.step_name,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "items_processed": self.items_processed,
            "metrics": self.metrics,
        }
        if self.errors:
            d["errors"] = self.errors
        return d


# ── RunLogger ─────────────────────────────────────────────────────────────────


class RunLogger:
    """Tracks the steps of one navigation run."""

    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id or uuid.uuid4().hex[:8]
        self.started_at = datetime.now(timezone.utc)
        self._step_start_times: dict[str, float] = {}
        self._reports: dict[str, StepReport] = {}
        self.run_start = time.monotonic()

    # ── step lifecycle ────────────────────────────────────────────────────

    def start_step(self, step_name: str) -> StepReport:
        """Start timing *step_name* and return its report."""
        self._step_start_times[step_name] = time.monotonic()
        report = StepReport(step_name=step_name, status="started")
        self._reports[step_name] = report
        logger.debug("run=%s step=%s started", self.run_id, step_name)
        return report

    def finish_step(self, step_name: str, report: StepReport | None = None) -> StepReport:
        """Stop timing *step_name*, mark it completed and log its summary."""
        t0 = self._step_start_times.pop(step_name, self.run_start)
        if report is None:
            report = self._reports.get(step_name, StepReport(step_name=step_name))
        report.elapsed_seconds = time.monotonic() - t0
        if report.status == "started":
            report.status = "completed"
        self._reports[step_name] = report
        logger.info("run=%s step=%s %s", self.run_id, step_name,
                    report.console_summary())
        return report

    def fail_step(self, step_name: str, exc: BaseException) -> StepReport:
        """Record that *step_name* raised; the caller re-raises."""
        report = self._reports.get(step_name, StepReport(step_name=step_name))
        report.status = "failed"
        report.add_error(str(exc))
        t0 = self._step_start_times.pop(step_name, self.run_start)
        report.elapsed_seconds = time.monotonic() - t0
        self._reports[step_name] = report
        logger.error("run=%s step=%s failed: %s", self.run_id, step_name, exc)
        return report

    # ── summary output ────────────────────────────────────────────────────

    def summary(self) -> dict[str, Any]:
        """Summary of the entire run as a JSON-serialisable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "total_elapsed_seconds": round(time.monotonic() - self.run_start, 3),
            "steps": {name: rpt.to_dict() for name, rpt in self._reports.items()},
        }

    def get_reports(self) -> dict[str, StepReport]:
        return dict(self._reports)
