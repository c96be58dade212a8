"""
Result types produced by the store probes.

Every probe returns exactly one of two variants:

- ``Healthy``: the store answered; ``metrics`` holds the store specific payload
- ``Unhealthy``: the store could not be queried; ``reason`` says why

``AggregateReport`` always carries both results, so consumers never have to
deal with a partially constructed report.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, TypeVar, Union


@dataclass(frozen=True)
class DatabaseRecord:
    """One logical database on the PostgreSQL server."""
    name: str
    size: str
    connections: int

    def to_dict(self) -> dict:
        return {"name": self.name, "size": self.size, "connections": self.connections}


@dataclass(frozen=True)
class RelationalMetrics:
    """Payload of a healthy relational probe."""
    databases: List[DatabaseRecord] = field(default_factory=list)
    version: str = ""


@dataclass(frozen=True)
class CacheMetrics:
    """Payload of a healthy cache probe."""
    used_memory: str = "N/A"
    version: str = "N/A"


M = TypeVar("M")


@dataclass(frozen=True)
class Healthy(Generic[M]):
    metrics: M

    @property
    def healthy(self) -> bool:
        return True


@dataclass(frozen=True)
class Unhealthy:
    reason: str

    @property
    def healthy(self) -> bool:
        return False


RelationalResult = Union[Healthy[RelationalMetrics], Unhealthy]
CacheResult = Union[Healthy[CacheMetrics], Unhealthy]
ProbeResult = Union[Healthy, Unhealthy]


@dataclass(frozen=True)
class AggregateReport:
    """Merged outcome of both store probes."""
    relational: RelationalResult
    cache: CacheResult
    timestamp: datetime

    @property
    def healthy(self) -> bool:
        """True only when both stores are healthy."""
        return self.relational.healthy and self.cache.healthy

    def timestamp_iso(self) -> str:
        return self.timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def postgres_payload(self) -> dict:
        if isinstance(self.relational, Healthy):
            metrics = self.relational.metrics
            return {
                "healthy": True,
                "databases": [record.to_dict() for record in metrics.databases],
                "version": metrics.version,
            }
        return {"healthy": False, "error": self.relational.reason, "databases": []}

    def redis_payload(self) -> dict:
        if isinstance(self.cache, Healthy):
            metrics = self.cache.metrics
            return {"healthy": True, "usedMemory": metrics.used_memory, "version": metrics.version}
        return {"healthy": False, "error": self.cache.reason}

    def to_stats_payload(self) -> dict:
        """Body of the gated ``/api/stats`` response."""
        return {
            "success": True,
            "postgres": self.postgres_payload(),
            "redis": self.redis_payload(),
            "timestamp": self.timestamp_iso(),
        }

    def to_health_payload(self) -> dict:
        """Body of the public ``/api/health`` response."""
        database_count = 0
        if isinstance(self.relational, Healthy):
            database_count = len(self.relational.metrics.databases)
        return {
            "success": self.healthy,
            "postgres": {"healthy": self.relational.healthy, "databaseCount": database_count},
            "redis": {"healthy": self.cache.healthy},
            "timestamp": self.timestamp_iso(),
        }
