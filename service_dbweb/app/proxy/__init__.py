from .pipeline import (
    AuthProxy,
    InboundRequest,
    UpstreamRequest,
    build_upstream_request,
    relay_upstream_response,
)

__all__ = [
    "AuthProxy",
    "InboundRequest",
    "UpstreamRequest",
    "build_upstream_request",
    "relay_upstream_response",
]
