"""
Reverse proxy from ``/auth/*`` to the auth service.

The proxy is split in two steps:

- ``build_upstream_request``: a pure function from the inbound request to
  the request that will be sent upstream (same method, path, query, headers
  and body; ``Host`` rewritten to the target)
- ``relay_upstream_response``: streams the upstream status, headers and body
  back to the caller unchanged

``AuthProxy`` wires both to a shared ``httpx.AsyncClient`` and turns a
connection failure into a 502 the caller can act on.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.responses import Response

from shared.logging import get_logger
from shared.metrics import MetricsCollector

HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
})

Headers = List[Tuple[str, str]]


@dataclass(frozen=True)
class InboundRequest:
    method: str
    path: str
    query: str = ""
    headers: Headers = field(default_factory=list)
    body: bytes = b""

    @classmethod
    async def from_request(cls, request: Request) -> "InboundRequest":
        raw_path = request.scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else request.url.path
        return cls(
            method=request.method,
            path=path,
            query=request.url.query,
            headers=list(request.headers.items()),
            body=await request.body(),
        )


@dataclass(frozen=True)
class UpstreamRequest:
    method: str
    url: str
    headers: Headers
    body: bytes


def _end_to_end(headers: Headers) -> Headers:
    return [(name, value) for name, value in headers if name.lower() not in HOP_BY_HOP_HEADERS]


def build_upstream_request(inbound: InboundRequest, target_base: str) -> UpstreamRequest:
    """Describe the upstream request for ``inbound`` against ``target_base``."""
    target = urlsplit(target_base)
    base = target_base.rstrip("/")
    url = f"{base}{inbound.path}"
    if inbound.query:
        url = f"{url}?{inbound.query}"

    headers = [(name, value) for name, value in _end_to_end(inbound.headers) if name.lower() != "host"]
    headers.append(("host", target.netloc))
    return UpstreamRequest(method=inbound.method, url=url, headers=headers, body=inbound.body)


def relay_upstream_response(upstream: httpx.Response) -> StreamingResponse:
    """Stream ``upstream`` back verbatim; the upstream response is closed once sent."""
    response = StreamingResponse(
        upstream.aiter_raw(),
        status_code=upstream.status_code,
        background=BackgroundTask(upstream.aclose),
    )
    # Set raw headers directly so repeated ones (Set-Cookie) survive
    response.raw_headers = [
        (name.encode("latin-1"), value.encode("latin-1"))
        for name, value in _end_to_end(upstream.headers.multi_items())
    ]
    return response


class AuthProxy:
    """Transparent reverse proxy to the auth service."""

    def __init__(
        self,
        auth_service_url: str,
        *,
        timeout: float = 30.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.auth_service_url = auth_service_url.rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger("dbweb.auth_proxy")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def forward(self, request: Request) -> Response:
        inbound = await InboundRequest.from_request(request)
        outbound = build_upstream_request(inbound, self.auth_service_url)
        upstream_request = self.client.build_request(
            outbound.method,
            outbound.url,
            headers=outbound.headers,
            content=outbound.body or None,
        )

        try:
            upstream = await self.client.send(upstream_request, stream=True)
        except httpx.TransportError as e:
            self.logger.error(
                "Auth service unreachable",
                method=outbound.method,
                url=outbound.url,
                error=str(e),
            )
            self._record("unreachable")
            return JSONResponse(
                status_code=502,
                content={
                    "statusCode": 502,
                    "message": (
                        f"Auth service unreachable at {self.auth_service_url}. "
                        "Check that the auth service is running and AUTH_SERVICE_URL is correct."
                    ),
                },
            )

        self._record("relayed")
        self.logger.debug("Relayed auth request", method=outbound.method, path=inbound.path, status_code=upstream.status_code)
        return relay_upstream_response(upstream)

    def _record(self, outcome: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("auth_proxy_requests_total", outcome=outcome)
