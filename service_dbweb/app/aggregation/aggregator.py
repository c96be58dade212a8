"""
Concurrent fan-out over the store probes.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..probes.models import AggregateReport, CacheResult, ProbeResult, RelationalResult, Unhealthy


class Probe(Protocol):
    store: str
    deadline: float

    async def probe(self) -> ProbeResult:
        ...


def merge_results(
    relational: RelationalResult,
    cache: CacheResult,
    timestamp: Optional[datetime] = None,
) -> AggregateReport:
    """Combine both probe outcomes into one report.

    Each result lands in its own slot, so the order in which the probes
    finished has no effect on the report.
    """
    return AggregateReport(
        relational=relational,
        cache=cache,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


class StatusAggregator:
    """Runs the relational and cache probes concurrently and merges their results."""

    def __init__(
        self,
        relational_probe: Probe,
        cache_probe: Probe,
        *,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.relational_probe = relational_probe
        self.cache_probe = cache_probe
        self.metrics = metrics
        self.clock = clock
        self.logger = get_logger("dbweb.aggregator")

    async def aggregate(self) -> AggregateReport:
        """Probe both stores; completes once both have settled."""
        relational, cache = await asyncio.gather(
            self._guarded(self.relational_probe),
            self._guarded(self.cache_probe),
        )
        report = merge_results(relational, cache, self.clock())
        self.logger.debug(
            "Aggregated store status",
            postgres_healthy=report.relational.healthy,
            redis_healthy=report.cache.healthy,
        )
        return report

    async def _guarded(self, probe: Probe) -> ProbeResult:
        # Probes bound themselves; the deadline here only catches one that does not.
        try:
            result = await asyncio.wait_for(probe.probe(), timeout=probe.deadline)
        except asyncio.TimeoutError:
            result = Unhealthy(f"{probe.store} probe timed out after {probe.deadline:g}s")
        except Exception as e:
            result = Unhealthy(str(e) or type(e).__name__)

        if not result.healthy:
            self.logger.warning("Store unhealthy", store=probe.store, reason=result.reason)
        if self.metrics:
            self.metrics.increment_counter(
                "probe_results_total",
                store=probe.store,
                outcome="healthy" if result.healthy else "unhealthy",
            )
        return result
