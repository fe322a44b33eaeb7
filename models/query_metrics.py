"""
Query observers.

DBStorage times every statement through SQLAlchemy engine events and hands a
QueryMetric to each registered observer. Observers are plain objects with an
`on_query(metric)` method; the application decides which ones exist and for
how long (see api.create_app).
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryMetric:
    statement: str
    duration_ms: float
    timestamp: datetime
    success: bool

    @property
    def operation(self) -> str:
        """First SQL keyword, e.g. SELECT / INSERT."""
        head = self.statement.lstrip().split(None, 1)
        return head[0].upper() if head else ""


class QueryObserver(Protocol):
    def on_query(self, metric: QueryMetric) -> None:
        ...


class QueryMetricsCollector:
    """Keeps the most recent `max_entries` metrics in memory."""

    def __init__(self, max_entries: int = 1000):
        self._entries: deque[QueryMetric] = deque(maxlen=max_entries)

    def on_query(self, metric: QueryMetric) -> None:
        self._entries.append(metric)

    def snapshot(self) -> list[QueryMetric]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def average_ms(self, operation: Optional[str] = None) -> float:
        """Average duration of successful queries, optionally for one operation."""
        durations = [
            m.duration_ms
            for m in self._entries
            if m.success and (operation is None or m.operation == operation.upper())
        ]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    def summary(self) -> dict:
        entries = self.snapshot()
        return {
            "count": len(entries),
            "failed": sum(1 for m in entries if not m.success),
            "avgMs": round(self.average_ms(), 3),
            "maxMs": round(max((m.duration_ms for m in entries), default=0.0), 3),
        }


class SlowQueryLogger:
    """Warns about statements slower than `threshold_ms`."""

    def __init__(self, threshold_ms: float = 1000, log_all: bool = False):
        self.threshold_ms = threshold_ms
        self.log_all = log_all

    def on_query(self, metric: QueryMetric) -> None:
        if not metric.success:
            logger.error("Query failed after %.1fms: %s", metric.duration_ms, metric.statement)
        elif metric.duration_ms > self.threshold_ms:
            logger.warning("Slow query (%.1fms): %s", metric.duration_ms, metric.statement)
        elif self.log_all:
            logger.debug("[Query] %s [Duration: %.1fms]", metric.statement, metric.duration_ms)
