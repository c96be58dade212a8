"""
PostgreSQL status probe.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import asyncpg

from shared.errors import BackendUnreachableError, ConfigurationMissingError
from shared.logging import get_logger
from .models import DatabaseRecord, Healthy, RelationalMetrics, RelationalResult, Unhealthy
from .sizes import format_size

DATABASES_QUERY = """
    SELECT
        d.datname AS name,
        pg_database_size(d.datname) AS size_bytes,
        (SELECT count(*) FROM pg_stat_activity a WHERE a.datname = d.datname) AS connections
    FROM pg_database d
    WHERE d.datistemplate = false
    ORDER BY pg_database_size(d.datname) DESC
"""

VERSION_QUERY = "SELECT version()"


class RelationalProbe:
    """Lists the databases of a PostgreSQL server over a single short-lived connection."""

    store = "postgres"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str = "postgres",
        *,
        connect_timeout: float = 5.0,
        command_timeout: float = 5.0,
        connect: Optional[Callable[..., Awaitable[Any]]] = None,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout
        self._connect = connect or asyncpg.connect
        self.logger = get_logger("dbweb.probes.postgres")

    @property
    def deadline(self) -> float:
        """Upper bound on how long one ``probe()`` call may take."""
        return self.connect_timeout + 2 * self.command_timeout

    async def probe(self) -> RelationalResult:
        """Return ``Healthy`` with the database list, or ``Unhealthy`` with the failure reason."""
        try:
            return Healthy(await self._collect())
        except Exception as e:
            reason = str(e) or type(e).__name__
            self.logger.warning("PostgreSQL probe failed", host=self.host, port=self.port, reason=reason)
            return Unhealthy(reason)

    async def _collect(self) -> RelationalMetrics:
        if not self.password:
            raise ConfigurationMissingError("DB_SERVER_ADMIN_PASSWORD")

        try:
            conn = await self._connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                timeout=self.connect_timeout,
                command_timeout=self.command_timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise BackendUnreachableError(self.store, str(e) or type(e).__name__) from e

        try:
            rows = await conn.fetch(DATABASES_QUERY)
            version = await conn.fetchval(VERSION_QUERY)
        finally:
            await conn.close()

        databases = [
            DatabaseRecord(
                name=row["name"],
                size=format_size(row["size_bytes"] or 0),
                connections=int(row["connections"] or 0),
            )
            for row in rows
        ]
        return RelationalMetrics(databases=databases, version=version or "")
