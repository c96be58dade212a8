"""
Unit tests for the /auth reverse proxy.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from service_dbweb.app.main import DatabaseWebService
from service_dbweb.app.proxy import AuthProxy, InboundRequest, build_upstream_request
from shared.config import ServiceConfig

AUTH_URL = "http://auth.test:3370"


class TestBuildUpstreamRequest:
    """The request builder is pure; no I/O involved."""

    def test_forwards_request_unchanged(self):
        inbound = InboundRequest(
            method="POST",
            path="/auth/login",
            query="next=%2Fadmin",
            headers=[
                ("host", "dbweb.example.com"),
                ("content-type", "application/json"),
                ("x-custom", "1"),
                ("cookie", "a=1"),
            ],
            body=b'{"email": "ops@example.com"}',
        )

        upstream = build_upstream_request(inbound, AUTH_URL + "/")

        assert upstream.method == "POST"
        assert upstream.url == "http://auth.test:3370/auth/login?next=%2Fadmin"
        assert upstream.body == b'{"email": "ops@example.com"}'
        assert ("content-type", "application/json") in upstream.headers
        assert ("x-custom", "1") in upstream.headers
        assert ("cookie", "a=1") in upstream.headers

    def test_host_rewritten_to_target(self):
        inbound = InboundRequest("GET", "/auth/me", headers=[("Host", "dbweb.example.com")])

        upstream = build_upstream_request(inbound, AUTH_URL)

        hosts = [value for name, value in upstream.headers if name.lower() == "host"]
        assert hosts == ["auth.test:3370"]

    def test_hop_by_hop_headers_dropped(self):
        inbound = InboundRequest(
            "POST",
            "/auth/refresh",
            headers=[("connection", "keep-alive"), ("transfer-encoding", "chunked"), ("authorization", "Bearer x")],
        )

        upstream = build_upstream_request(inbound, AUTH_URL)

        names = {name.lower() for name, _ in upstream.headers}
        assert "connection" not in names
        assert "transfer-encoding" not in names
        assert "authorization" in names


class TestAuthProxyRoute:
    """End-to-end through the FastAPI route with a mocked upstream."""

    @pytest.fixture
    def captured(self):
        return []

    @pytest.fixture
    def service(self):
        return DatabaseWebService(ServiceConfig(auth_service_url=AUTH_URL, env="test"))

    def _install(self, service, handler):
        service.auth_proxy = AuthProxy(AUTH_URL, transport=httpx.MockTransport(handler))
        return TestClient(service.app)

    def test_login_relayed_verbatim(self, service, captured):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                201,
                headers=[("set-cookie", "a=1"), ("set-cookie", "b=2"), ("x-upstream", "auth")],
                json={"accessToken": "access", "refreshToken": "refresh"},
            )

        client = self._install(service, handler)
        response = client.post(
            "/auth/login?next=%2Fadmin",
            json={"email": "ops@example.com", "password": "pw"},
            headers={"X-Custom": "1"},
        )

        assert response.status_code == 201
        assert response.json() == {"accessToken": "access", "refreshToken": "refresh"}
        assert response.headers["x-upstream"] == "auth"
        assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]

        upstream = captured[0]
        assert upstream.method == "POST"
        assert str(upstream.url) == "http://auth.test:3370/auth/login?next=%2Fadmin"
        assert upstream.headers["host"] == "auth.test:3370"
        assert upstream.headers["x-custom"] == "1"
        assert json.loads(upstream.content) == {"email": "ops@example.com", "password": "pw"}

    def test_upstream_errors_are_not_rewritten(self, service):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"statusCode": 401, "message": "Invalid credentials"})

        client = self._install(service, handler)
        response = client.post("/auth/login", json={"email": "ops@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_get_without_body(self, service, captured):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"ok": True})

        client = self._install(service, handler)
        response = client.get("/auth/me")

        assert response.status_code == 200
        assert captured[0].method == "GET"
        assert captured[0].content == b""

    def test_request_metrics_use_route_template(self, service):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": True})

        client = self._install(service, handler)
        client.get("/auth/me")
        client.get("/auth/sessions/42")

        assert service.metrics.registry.get_sample_value(
            "http_requests_total", {"method": "GET", "endpoint": "/auth/{path:path}", "status_code": "200"}
        ) == 2

    def test_unreachable_auth_service(self, service):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = self._install(service, handler)
        response = client.post("/auth/login", json={"email": "ops@example.com", "password": "pw"})

        assert response.status_code == 502
        body = response.json()
        assert body["statusCode"] == 502
        assert AUTH_URL in body["message"]
