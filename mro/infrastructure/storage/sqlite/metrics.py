"""
Per-process store operation metrics.

A StoreMetrics instance is handed to each store at construction; stores wrap
their queries in `track()`. Counters are kept per company so the health
endpoint can report a tenant's read/write load.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from mro.core.entities.stock import utcnow

OperationKind = Literal["read", "write"]


@dataclass
class CompanyMetrics:
    reads: int = 0
    writes: int = 0
    failures: int = 0
    total_duration_ms: float = 0.0
    operations: dict[str, int] = field(default_factory=dict)
    last_reset: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "reads": self.reads,
            "writes": self.writes,
            "failures": self.failures,
            "totalDurationMs": round(self.total_duration_ms, 2),
            "operations": dict(self.operations),
            "lastReset": self.last_reset.isoformat(),
        }


class StoreMetrics:
    """Read/write counters for store operations, keyed by company."""

    def __init__(self) -> None:
        self._companies: dict[str, CompanyMetrics] = {}

    def _for(self, company_id: str) -> CompanyMetrics:
        return self._companies.setdefault(company_id, CompanyMetrics())

    def record(
        self,
        company_id: str,
        operation: str,
        kind: OperationKind,
        duration_ms: float = 0.0,
        failed: bool = False,
    ) -> None:
        """Record one completed store operation."""
        metrics = self._for(company_id)
        if kind == "read":
            metrics.reads += 1
        else:
            metrics.writes += 1
        if failed:
            metrics.failures += 1
        metrics.total_duration_ms += duration_ms
        metrics.operations[operation] = metrics.operations.get(operation, 0) + 1

    @contextmanager
    def track(self, company_id: str, operation: str, kind: OperationKind) -> Iterator[None]:
        """Time the enclosed block and record it, marking it failed on error."""
        start = time.perf_counter()
        failed = False
        try:
            yield
        except BaseException:
            failed = True
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.record(company_id, operation, kind, duration_ms, failed)

    def get(self, company_id: str) -> CompanyMetrics:
        """Metrics for one company (zeroed if it has none yet)."""
        return self._companies.get(company_id) or CompanyMetrics()

    def reset(self, company_id: str | None = None) -> None:
        """Reset one company's counters, or all of them."""
        if company_id is None:
            self._companies.clear()
        else:
            self._companies[company_id] = CompanyMetrics()

    def snapshot(self) -> dict:
        """Totals plus a per-company breakdown."""
        companies = {cid: m.to_dict() for cid, m in self._companies.items()}
        return {
            "totalReads": sum(m.reads for m in self._companies.values()),
            "totalWrites": sum(m.writes for m in self._companies.values()),
            "totalFailures": sum(m.failures for m in self._companies.values()),
            "companies": companies,
        }
