"""
HTML rendering of the ``/api/stats`` payload.

Database names, versions and error texts come from the backends and are
untrusted; the Jinja2 environment autoescapes everything it renders.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from .session import SessionContext
from .sorting import SortColumn, SortState, sort_records

PLACEHOLDER = "—"


@dataclass(frozen=True)
class Badge:
    text: str
    css: str


def status_badge(section: Mapping[str, Any]) -> Badge:
    if section.get("healthy"):
        return Badge("OK", "ok")
    return Badge(section.get("error") or "Error", "error")


def _cell(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


class DashboardRenderer:
    """Renders the admin dashboard from a stats payload."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or Environment(
            loader=PackageLoader("service_dbweb.app.presentation", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.template = self.env.get_template("dashboard.html")

    def table_rows(self, databases: List[Mapping[str, Any]], state: SortState) -> List[Dict[str, str]]:
        return [
            {
                "name": _cell(record.get("name")),
                "size": _cell(record.get("size")),
                "connections": _cell(record.get("connections")),
            }
            for record in sort_records(databases, state)
        ]

    @staticmethod
    def arrows(state: SortState) -> Dict[str, str]:
        arrows = {column.value: "" for column in SortColumn}
        arrows[state.column.value] = f" {state.direction.arrow}"
        return arrows

    def render(
        self,
        payload: Mapping[str, Any],
        session: SessionContext,
        state: Optional[SortState] = None,
    ) -> str:
        """Render a successful stats payload."""
        state = state or SortState()
        pg = payload.get("postgres") or {}
        redis = payload.get("redis") or {}
        databases = pg.get("databases") or []

        cards = []
        if redis.get("healthy"):
            cards = [
                {"label": "Memory", "value": redis.get("usedMemory") or "N/A"},
                {"label": "Version", "value": redis.get("version") or "N/A"},
            ]

        return self.template.render(
            user=session.display_name,
            pg_badge=status_badge(pg),
            redis_badge=status_badge(redis),
            rows=self.table_rows(databases, state),
            arrows=self.arrows(state),
            empty_message=pg.get("error") or "No databases found.",
            cards=cards,
        )

    def render_error(self, message: Optional[str], session: SessionContext) -> str:
        """Render the dashboard when the gateway answered with an error."""
        error = Badge("Error", "error")
        return self.template.render(
            user=session.display_name,
            pg_badge=error,
            redis_badge=error,
            rows=[],
            arrows=self.arrows(SortState()),
            empty_message=message or "Failed to load stats",
            cards=[],
        )
