"""
Store probes for the Database Server Web gateway.

Each probe opens one short-lived connection to its backend, runs a fixed
read-only diagnostic and returns a ``ProbeResult``. Probes never raise past
``probe()``; failures come back as ``Unhealthy``.
"""

from .models import (
    AggregateReport,
    CacheMetrics,
    DatabaseRecord,
    Healthy,
    ProbeResult,
    RelationalMetrics,
    Unhealthy,
)
from .relational import RelationalProbe
from .cache import CacheProbe, extract_info_field
from .sizes import format_size, parse_size_bytes

__all__ = [
    "AggregateReport",
    "CacheMetrics",
    "CacheProbe",
    "DatabaseRecord",
    "Healthy",
    "ProbeResult",
    "RelationalMetrics",
    "RelationalProbe",
    "Unhealthy",
    "extract_info_field",
    "format_size",
    "parse_size_bytes",
]
