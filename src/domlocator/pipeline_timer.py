# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Stage timer for the locator resolution pipeline.

Lives outside the stages it measures so a failing stage still leaves a
usable ``failure_report``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

_STAGE_HINTS = {
    "navigation": "Page may be slow to load or unreachable.",
    "reduction": "Page body could not be captured or reduced.",
    "inference": "Inference service failed. Check OPENAI_API_KEY, OPENAI_BASE_URL and the model name.",
    "verification": "Selector could not be evaluated on the live page.",
}


@dataclass(slots=True)
class StageRecord:
    name: str
    start_ns: int
    end_ns: int = 0


class PipelineTimer:
    """Track pipeline stage transitions for latency reporting."""

    __slots__ = ("_stages", "_current", "_start_ns")

    def __init__(self) -> None:
        self._stages: list[StageRecord] = []
        self._current: StageRecord | None = None
        self._start_ns: int = time.monotonic_ns()

    def stage(self, name: str) -> None:
        """End previous stage + start new stage."""
        now = time.monotonic_ns()
        if self._current is not None:
            self._current.end_ns = now
            self._stages.append(self._current)
        self._current = StageRecord(name=name, start_ns=now)

    def finalize(self) -> None:
        """End current stage. Call on success or error."""
        if self._current is not None:
            self._current.end_ns = time.monotonic_ns()
            self._stages.append(self._current)
            self._current = None

    @property
    def current_stage(self) -> str | None:
        return self._current.name if self._current else None

    def elapsed_per_stage(self) -> dict[str, float]:
        """Return {stage_name: elapsed_ms} for all stages (including current)."""
        now = time.monotonic_ns()
        result: dict[str, float] = {}
        for s in self._stages:
            result[s.name] = round((s.end_ns - s.start_ns) / 1e6, 1)
        if self._current is not None:
            result[self._current.name] = round((now - self._current.start_ns) / 1e6, 1)
        return result

    def total_ms(self) -> float:
        return round((time.monotonic_ns() - self._start_ns) / 1e6, 1)

    def failure_report(self) -> dict:
        """Structured diagnostic for a pipeline that stopped in ``current_stage``."""
        now = time.monotonic_ns()
        completed = [{"stage": s.name, "ms": round((s.end_ns - s.start_ns) / 1e6, 1)} for s in self._stages]
        current = self.current_stage or "unknown"
        current_ms = round((now - self._current.start_ns) / 1e6, 1) if self._current else 0
        return {
            "completed_stages": completed,
            "failed_at": current,
            "failed_stage_ms": current_ms,
            "total_ms": round((now - self._start_ns) / 1e6, 1),
            "hint": self.hint_for_stage(current),
        }

    @staticmethod
    def hint_for_stage(stage: str) -> str:
        return _STAGE_HINTS.get(stage, f"Failed during '{stage}' stage.")
