"""
Unit tests for StatsGate.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi import Request

from service_dbweb.app.adapters.authority_client import ValidationOutcome
from service_dbweb.app.domain.stats_gate import GateState, StatsGate, extract_bearer
from shared.errors import AuthenticationError, AuthorityUnreachableError

TOKEN = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.test.signature"


class TestStatsGate:
    """Test cases for StatsGate."""

    @pytest.fixture
    def stats_gate(self):
        """Create StatsGate with a mocked authority client."""
        return StatsGate(AsyncMock())

    @pytest.fixture
    def mock_request(self):
        """Create mock request."""
        request = MagicMock(spec=Request)
        request.headers = {}
        return request

    def test_extract_bearer(self):
        assert extract_bearer(f"Bearer {TOKEN}") == TOKEN
        assert extract_bearer("Basic dXNlcjpwYXNz") is None
        assert extract_bearer("bearer lowercase-scheme") is None
        assert extract_bearer(None) is None
        assert extract_bearer("Bearer ") == ""

    def test_classify(self, stats_gate):
        assert stats_gate.classify(None) is GateState.NO_CREDENTIAL
        assert stats_gate.classify("Token abc") is GateState.NO_CREDENTIAL
        assert stats_gate.classify("Bearer ") is GateState.MALFORMED_CREDENTIAL
        assert stats_gate.classify("Bearer abc") is GateState.MALFORMED_CREDENTIAL
        assert stats_gate.classify(f"Bearer {TOKEN}") is GateState.PENDING_VALIDATION

    @pytest.mark.asyncio
    async def test_missing_header(self, stats_gate, mock_request):
        """No header: 401 without asking the auth service."""
        with pytest.raises(AuthenticationError) as exc_info:
            await stats_gate.authorize(mock_request)

        assert exc_info.value.message == "Valid token required"
        assert exc_info.value.status_code == 401
        stats_gate.authority_client.validate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_short_credential(self, stats_gate, mock_request):
        """A three character token never reaches the auth service."""
        mock_request.headers = {"Authorization": "Bearer abc"}

        with pytest.raises(AuthenticationError):
            await stats_gate.authorize(mock_request)

        stats_gate.authority_client.validate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_credential(self, stats_gate, mock_request):
        """valid=false from the auth service is a 401."""
        mock_request.headers = {"Authorization": f"Bearer {TOKEN}"}
        stats_gate.authority_client.validate = AsyncMock(return_value=ValidationOutcome(valid=False, status_code=200))

        with pytest.raises(AuthenticationError) as exc_info:
            await stats_gate.authorize(mock_request)

        assert exc_info.value.message == "Invalid token"
        stats_gate.authority_client.validate.assert_awaited_once_with(TOKEN)

    @pytest.mark.asyncio
    async def test_unreachable_authority_propagates(self, stats_gate, mock_request):
        """Unreachable auth service is not turned into a 401."""
        mock_request.headers = {"Authorization": f"Bearer {TOKEN}"}
        stats_gate.authority_client.validate = AsyncMock(
            side_effect=AuthorityUnreachableError("http://auth.test:3370", "Connection refused")
        )

        with pytest.raises(AuthorityUnreachableError) as exc_info:
            await stats_gate.authorize(mock_request)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_authorized(self, stats_gate, mock_request):
        """valid=true authorizes the request."""
        mock_request.headers = {"Authorization": f"Bearer {TOKEN}"}
        stats_gate.authority_client.validate = AsyncMock(return_value=ValidationOutcome(valid=True, status_code=200))

        assert await stats_gate.authorize(mock_request) is GateState.AUTHORIZED
