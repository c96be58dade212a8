"""
Unit tests for the auth service client.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch
import json

from service_dbweb.app.adapters.authority_client import AuthorityClient, ValidationOutcome, is_well_formed
from shared.errors import AuthorityUnreachableError

AUTH_URL = "http://auth.test:3370"
VALIDATE_URL = f"{AUTH_URL}/auth/validate"


def _response(status_code: int, body) -> httpx.Response:
    content = body if isinstance(body, (bytes, str)) else json.dumps(body)
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("POST", VALIDATE_URL)
    )


class TestAuthorityClient:
    """Test cases for AuthorityClient."""

    @pytest.fixture
    def authority_client(self):
        """Create AuthorityClient instance."""
        return AuthorityClient(AUTH_URL + "/")

    @pytest.fixture
    def mock_token(self):
        """Mock JWT token."""
        return "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.test.signature"

    @pytest.mark.asyncio
    async def test_validate_success(self, authority_client, mock_token):
        """A 200 with valid=true is a valid credential."""
        with patch('httpx.AsyncClient') as mock_client:
            post = AsyncMock(return_value=_response(200, {"valid": True, "user": {"email": "a@b.c"}}))
            mock_client.return_value.__aenter__.return_value.post = post

            outcome = await authority_client.validate(mock_token)

            assert outcome == ValidationOutcome(valid=True, status_code=200)
            post.assert_awaited_once_with(VALIDATE_URL, json={"token": mock_token})
            mock_client.assert_called_once_with(timeout=5.0)

    @pytest.mark.asyncio
    async def test_validate_rejected(self, authority_client, mock_token):
        """valid=false is an invalid credential."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=_response(200, {"valid": False, "error": "Token expired"})
            )

            outcome = await authority_client.validate(mock_token)

            assert outcome.valid is False
            assert outcome.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code,body", [
        (200, {"valid": "yes"}),
        (200, {"user": "someone"}),
        (200, ["valid"]),
        (200, b"<html>ok</html>"),
        (401, {"valid": True}),
        (500, {"valid": True}),
    ])
    async def test_anything_but_explicit_valid_is_invalid(self, authority_client, mock_token, status_code, body):
        """Only an explicit boolean valid=true on a 200 counts."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=_response(status_code, body)
            )

            outcome = await authority_client.validate(mock_token)

            assert outcome.valid is False
            assert outcome.status_code == status_code

    @pytest.mark.asyncio
    async def test_connection_failure_is_unreachable(self, authority_client, mock_token):
        """Connection errors are not reported as an invalid token."""
        with patch('httpx.AsyncClient') as mock_client:
            post = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
            mock_client.return_value.__aenter__.return_value.post = post

            with pytest.raises(AuthorityUnreachableError) as exc_info:
                await authority_client.validate(mock_token)

            assert AUTH_URL in exc_info.value.message
            assert exc_info.value.to_response().reason == "unreachable"
            # no automatic retry
            assert post.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self, authority_client, mock_token):
        """Timeouts are classified as unreachable."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ReadTimeout("Request timeout")
            )

            with pytest.raises(AuthorityUnreachableError):
                await authority_client.validate(mock_token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("credential", ["", "abc", "   ", "short token", None])
    async def test_malformed_credential_skips_network(self, authority_client, credential):
        """Short or malformed credentials are rejected locally."""
        with patch('httpx.AsyncClient') as mock_client:
            outcome = await authority_client.validate(credential)

            assert outcome.valid is False
            assert outcome.status_code is None
            mock_client.assert_not_called()

    def test_is_well_formed(self, mock_token):
        """Local precondition on credential shape."""
        assert is_well_formed(mock_token)
        assert not is_well_formed("abc")
        assert not is_well_formed(f" {mock_token}")
        assert not is_well_formed(mock_token[:10] + " " + mock_token[10:])
