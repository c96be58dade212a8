"""
Presentation layer for the admin dashboard.

- session: explicit client-side session context
- sorting: sort state and magnitude-correct comparators
- renderer: Jinja2 (autoescaped) dashboard rendering
- console_client: login / stats loading against the gateway
"""

from .console_client import AdminConsoleClient, ConsoleError, LoadOutcome, StatsView
from .renderer import DashboardRenderer
from .session import SessionContext
from .sorting import SortColumn, SortDirection, SortState, sort_records

__all__ = [
    "AdminConsoleClient",
    "ConsoleError",
    "DashboardRenderer",
    "LoadOutcome",
    "SessionContext",
    "SortColumn",
    "SortDirection",
    "SortState",
    "StatsView",
    "sort_records",
]
