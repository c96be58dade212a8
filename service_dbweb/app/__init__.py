"""
Database Server Web gateway package.

The gateway fronts operator requests, enforcing:
- Authentication: delegated to the auth service on every stats request
- Partial-failure reporting: PostgreSQL and Redis probed concurrently
- Pass-through of /auth/* to the auth service

Structure:
- app.main: FastAPI app, routes, and wiring.
- app.adapters: HTTP client for the auth service.
- app.domain: Request gating for the statistics endpoint.
- app.probes: PostgreSQL and Redis probes and their result types.
- app.aggregation: Concurrent fan-out and merge of probe results.
- app.proxy: Reverse proxy pipeline for /auth/*.
- app.presentation: Session, sorting and dashboard rendering.
"""
