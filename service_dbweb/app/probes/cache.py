"""
Redis status probe.
"""

import re
from typing import Callable, Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError, TimeoutError as RedisTimeoutError

from shared.errors import BackendUnreachableError
from shared.logging import get_logger
from .models import CacheMetrics, CacheResult, Healthy, Unhealthy

NOT_AVAILABLE = "N/A"


def extract_info_field(info_text: str, field: str) -> str:
    """Pull ``field`` out of a raw ``INFO`` reply.

    The reply is a ``key:value`` line protocol meant for humans; it is not a
    stable format, so a missing or malformed line yields ``"N/A"``.
    """
    if not isinstance(info_text, str):
        return NOT_AVAILABLE
    match = re.search(rf"^{re.escape(field)}:([^\r\n]+)", info_text, re.MULTILINE)
    if not match:
        return NOT_AVAILABLE
    value = match.group(1).strip()
    return value or NOT_AVAILABLE


def _raw_reply(response, **options):
    return response


class CacheProbe:
    """Reads version and memory usage from a Redis server."""

    store = "redis"

    def __init__(
        self,
        host: str,
        port: int,
        *,
        connect_timeout: float = 5.0,
        command_timeout: float = 5.0,
        client_factory: Optional[Callable[..., redis.Redis]] = None,
    ):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout
        self._client_factory = client_factory or redis.Redis
        self.logger = get_logger("dbweb.probes.redis")

    @property
    def deadline(self) -> float:
        """Upper bound on how long one ``probe()`` call may take."""
        return self.connect_timeout + 2 * self.command_timeout

    async def probe(self) -> CacheResult:
        """Return ``Healthy`` with memory/version, or ``Unhealthy`` with the failure reason."""
        try:
            return Healthy(await self._collect())
        except Exception as e:
            reason = str(e) or type(e).__name__
            self.logger.warning("Redis probe failed", host=self.host, port=self.port, reason=reason)
            return Unhealthy(reason)

    async def _collect(self) -> CacheMetrics:
        client = self._client_factory(
            host=self.host,
            port=self.port,
            decode_responses=True,
            socket_connect_timeout=self.connect_timeout,
            socket_timeout=self.command_timeout,
        )
        try:
            # Keep INFO replies as the raw text blob instead of redis-py's parsed dict
            client.set_response_callback("INFO", _raw_reply)
            server_info = await client.info("server")
            memory_info = await client.info("memory")
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise BackendUnreachableError(self.store, str(e) or type(e).__name__) from e
        finally:
            await client.aclose()

        return CacheMetrics(
            used_memory=extract_info_field(memory_info, "used_memory_human"),
            version=extract_info_field(server_info, "redis_version"),
        )
