"""
Metrics collection for patch application runs.

This module tracks:
- Application start/end time and duration
- Patch counts per phase
- Time spent in each phase
- Final status and error message
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from treepatch.utils.logging import get_logger

logger = get_logger(__name__)


class PatchMetrics:
    """
    Collects metrics during one patch application.

    Tracks:
    - Execution start/end time
    - Number of patches applied per phase
    - Phase durations
    - Errors
    """

    def __init__(self, revision_pair: Optional[str] = None):
        self.revision_pair = revision_pair

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        # Phase metrics
        self.applied: Dict[str, int] = {"delete": 0, "update": 0, "insert": 0}
        self.phase_durations_ms: Dict[str, float] = {}

        # Status
        self.status: str = "pending"
        self.failed_phase: Optional[str] = None
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark the start of an application."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"

    def complete(
        self,
        status: str = "completed",
        error_message: Optional[str] = None,
        failed_phase: Optional[str] = None,
    ) -> None:
        """
        Mark the end of an application.

        Args:
            status: Final status ('completed' or 'failed')
            error_message: Error message if failed
            failed_phase: Phase that raised, if any
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message
        self.failed_phase = failed_phase

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            f"Patch application {status}",
            extra={
                "revision_pair": self.revision_pair,
                "status": self.status,
                "duration_ms": self.duration_ms,
                "applied": dict(self.applied),
            }
        )

    def record_applied(self, phase: str, count: int = 1) -> None:
        self.applied[phase] = self.applied.get(phase, 0) + count

    def record_phase_duration(self, phase: str, duration_ms: float) -> None:
        self.phase_durations_ms[phase] = round(duration_ms, 3)

    @property
    def total_applied(self) -> int:
        return sum(self.applied.values())

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary: Dict[str, Any] = {
            "revision_pair": self.revision_pair,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "applied": dict(self.applied),
            "total_applied": self.total_applied,
            "phase_durations_ms": dict(self.phase_durations_ms),
        }

        if self.error_message:
            summary["failed_phase"] = self.failed_phase
            summary["error_message"] = self.error_message

        return summary


@contextmanager
def track_phase(metrics_collector: Optional[PatchMetrics], phase: str) -> Iterator[None]:
    """
    Context manager timing one patch phase.

    Usage:
        with track_phase(metrics, "delete"):
            for patch in deletes:
                ...
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        if metrics_collector:
            duration_ms = (time.perf_counter() - start_time) * 1000
            metrics_collector.record_phase_duration(phase, duration_ms)
