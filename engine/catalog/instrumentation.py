"""
CodeAtlas Scan Instrumentation.

Explicit timing and counter context for one scan. Each phase receives
the ScanMetrics it should record into; nothing is kept globally, so
independent scans never share measurements.
Requires Python 3.11+.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(slots=True)
class PhaseMetrics:
    """Timing and counters of one pipeline phase."""

    name: str
    elapsed_ms: float = 0.0
    counters: dict[str, int] = field(default_factory=dict)

    def count(self, counter: str, amount: int = 1) -> None:
        self.counters[counter] = self.counters.get(counter, 0) + amount

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "elapsed_ms": round(self.elapsed_ms, 2),
            "counters": dict(self.counters),
        }


@dataclass(slots=True)
class ScanMetrics:
    """Per-scan instrumentation context."""

    phases: list[PhaseMetrics] = field(default_factory=list)

    @contextmanager
    def phase(self, name: str) -> Iterator[PhaseMetrics]:
        """
        Time a phase.

        Usage:
            with metrics.phase("heuristic_scan") as phase:
                phase.count("references", 3)
        """
        record = PhaseMetrics(name=name)
        start_time = time.perf_counter()
        try:
            yield record
        finally:
            record.elapsed_ms = (time.perf_counter() - start_time) * 1000
            self.phases.append(record)

    def get(self, name: str) -> PhaseMetrics | None:
        """Most recent record of a phase."""
        for record in reversed(self.phases):
            if record.name == name:
                return record
        return None

    @property
    def total_ms(self) -> float:
        return sum(p.elapsed_ms for p in self.phases)

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_ms": round(self.total_ms, 2),
            "phases": [p.as_dict for p in self.phases],
        }
