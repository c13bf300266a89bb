"""
Stage accounting for the load → draw pipeline.

``StageReport`` captures what one stage did: status, timing, how many data
points it handled and any error messages.  ``ChartPipeline`` keeps one per
stage and the web app exposes them on ``/api/v1/status``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass
class StageReport:
    """Structured summary of what one pipeline stage accomplished."""

    stage_name: str
    status: str = "not_started"               # started | completed | failed
    elapsed_seconds: float = 0.0
    items_processed: int = 0
    errors: list[str] = field(default_factory=list)
    _started_at: float | None = field(default=None, repr=False)

    def start(self) -> StageReport:
        self.status = "started"
        self._started_at = time.monotonic()
        return self

    def finish(self, items: int = 0) -> None:
        self.items_processed = items
        self._stop("completed")

    def fail(self, message: str) -> None:
        self.errors.append(message)
        self._stop("failed")

    def _stop(self, status: str) -> None:
        if self._started_at is not None:
            self.elapsed_seconds = time.monotonic() - self._started_at
        self.status = status

    def console_summary(self) -> str:
        """One-line summary suitable for the terminal."""
        parts = [f"{self.stage_name}: {self.status}"]
        if self.items_processed:
            parts.append(f"{self.items_processed:,} points")
        if self.errors:
            parts.append(f"{len(self.errors)} error(s): {self.errors[-1]}")
        parts.append(f"{self.elapsed_seconds:.2f}s")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "stage_name": self.stage_name,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "items_processed": self.items_processed,
        }
        if self.errors:
            d["errors"] = list(self.errors)
        return d
