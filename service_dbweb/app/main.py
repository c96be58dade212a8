"""
Database Server Web gateway.

Serves database statistics behind bearer-token authentication delegated to
the auth service, a public health summary, and a pass-through of ``/auth/*``
to the auth service.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from .adapters.authority_client import AuthorityClient
from .aggregation.aggregator import StatusAggregator
from .domain.stats_gate import StatsGate
from .probes.cache import CacheProbe
from .probes.relational import RelationalProbe
from .proxy.pipeline import AuthProxy

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class DatabaseWebService(BaseService):
    """Gateway service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("database-server-web", config)
        cfg = self.config

        self.authority_client = AuthorityClient(
            cfg.auth_service_url,
            timeout=cfg.authority_timeout_seconds,
            metrics=self.metrics,
        )
        self.stats_gate = StatsGate(self.authority_client)
        self.auth_proxy = AuthProxy(
            cfg.auth_service_url,
            timeout=cfg.proxy_timeout_seconds,
            metrics=self.metrics,
        )
        self.aggregator = StatusAggregator(
            RelationalProbe(
                cfg.postgres_host,
                cfg.postgres_port,
                cfg.postgres_user,
                cfg.postgres_password,
                cfg.postgres_database,
                connect_timeout=cfg.probe_connect_timeout_seconds,
                command_timeout=cfg.probe_command_timeout_seconds,
            ),
            CacheProbe(
                cfg.redis_host,
                cfg.redis_port,
                connect_timeout=cfg.probe_connect_timeout_seconds,
                command_timeout=cfg.probe_command_timeout_seconds,
            ),
            metrics=self.metrics,
        )

        self._setup_gateway_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    async def startup(self):
        self.logger.info(
            "database-server-web starting",
            port=self.config.port,
            auth_service_url=self.config.auth_service_url,
            postgres_configured=bool(self.config.postgres_password),
        )

    async def shutdown(self):
        await self.auth_proxy.close()

    def _setup_gateway_routes(self):
        """Set up gateway-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "Database Server Web - statistics gateway",
                "version": "1.0.0"
            }

        @self.app.get("/api/health")
        async def api_health():
            """Public summary; 200 only when both stores are healthy."""
            report = await self.aggregator.aggregate()
            return JSONResponse(
                status_code=200 if report.healthy else 503,
                content=report.to_health_payload(),
            )

        @self.app.get("/api/stats")
        async def api_stats(request: Request):
            """Database and cache statistics for authenticated operators."""
            await self.stats_gate.authorize(request)
            report = await self.aggregator.aggregate()
            return report.to_stats_payload()

        @self.app.api_route("/auth", methods=PROXY_METHODS, include_in_schema=False)
        @self.app.api_route("/auth/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
        async def auth_proxy(request: Request):
            """Pass-through to the auth service (login, validate, refresh)."""
            return await self.auth_proxy.forward(request)


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = DatabaseWebService(config)
    return service.app


def main():
    """Console entry point."""
    DatabaseWebService().run()


if __name__ == "__main__":
    main()
