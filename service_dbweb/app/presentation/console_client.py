"""
Operator client for the gateway: log in through ``/auth/login``, load
``/api/stats`` and hand the result to the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from shared.logging import get_logger
from .session import SessionContext


class ConsoleError(RuntimeError):
    """Raised when the console cannot log in."""


class LoadOutcome(str, Enum):
    LOADED = "loaded"
    LOGGED_OUT = "logged_out"
    FAILED = "failed"


@dataclass
class StatsView:
    outcome: LoadOutcome
    payload: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class AdminConsoleClient:
    """Async client holding an explicit ``SessionContext``."""

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionContext()
        self.logger = get_logger("dbweb.console")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AdminConsoleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def login(self, email: str, password: str) -> SessionContext:
        """Log in through the gateway's auth pass-through."""
        try:
            response = await self._client.post("/auth/login", json={"email": email, "password": password})
        except httpx.TransportError as e:
            raise ConsoleError("Network error. Check auth-microservice is reachable.") from e

        data = _json_or_empty(response)
        if not response.is_success:
            raise ConsoleError(data.get("message") or "Login failed")

        user = data.get("user") or {}
        self.session.store(data.get("accessToken"), data.get("refreshToken"), user.get("email") or email)
        self.logger.info("Logged in", email=self.session.email)
        return self.session

    def logout(self) -> None:
        self.session.invalidate()

    async def load_stats(self) -> StatsView:
        """Fetch ``/api/stats``; a 401 ends the session."""
        if not self.session.logged_in:
            return StatsView(LoadOutcome.LOGGED_OUT)

        try:
            response = await self._client.get("/api/stats", headers=self.session.authorization_header())
        except httpx.TransportError as e:
            self.logger.warning("Stats request failed", error=str(e))
            return StatsView(LoadOutcome.FAILED, message="Failed to load stats")

        data = _json_or_empty(response)
        if response.status_code == 401:
            self.session.invalidate()
            return StatsView(LoadOutcome.LOGGED_OUT, message=data.get("message"))
        if not response.is_success:
            return StatsView(LoadOutcome.FAILED, message=data.get("message") or "Failed to load stats")
        return StatsView(LoadOutcome.LOADED, payload=data)
