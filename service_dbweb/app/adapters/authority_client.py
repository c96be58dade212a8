"""
Auth service client for the gateway.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from shared.logging import get_logger
from shared.errors import AuthorityUnreachableError
from shared.metrics import MetricsCollector

MIN_CREDENTIAL_LENGTH = 16


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of asking the auth service about one credential. Never cached."""
    valid: bool
    status_code: Optional[int] = None


def is_well_formed(credential: Optional[str]) -> bool:
    """Cheap local precondition checked before any network call."""
    if not credential or not isinstance(credential, str):
        return False
    if credential != credential.strip() or any(ch.isspace() for ch in credential):
        return False
    return len(credential) >= MIN_CREDENTIAL_LENGTH


class AuthorityClient:
    """Validates bearer credentials against the auth service.

    One outbound call per ``validate()``; no retries and no caching, so every
    gated request costs exactly one validation.
    """

    def __init__(
        self,
        auth_service_url: str,
        *,
        timeout: float = 5.0,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.auth_service_url = auth_service_url.rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger("dbweb.authority_client")

    @property
    def validate_url(self) -> str:
        return f"{self.auth_service_url}/auth/validate"

    async def validate(self, credential: str) -> ValidationOutcome:
        """Ask the auth service whether ``credential`` is valid.

        Raises ``AuthorityUnreachableError`` on timeout or connection failure;
        that is distinct from an invalid credential.
        """
        if not is_well_formed(credential):
            self._record("malformed")
            return ValidationOutcome(valid=False)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.validate_url, json={"token": credential})
        except httpx.TransportError as e:
            self.logger.error("Auth service unreachable", url=self.validate_url, error=str(e))
            self._record("unreachable")
            raise AuthorityUnreachableError(self.auth_service_url, str(e) or type(e).__name__) from e

        outcome = ValidationOutcome(valid=self._is_valid(response), status_code=response.status_code)
        if not outcome.valid:
            self.logger.info("Token rejected by auth service", status_code=response.status_code)
        self._record("valid" if outcome.valid else "invalid")
        return outcome

    @staticmethod
    def _is_valid(response: httpx.Response) -> bool:
        if response.status_code != 200:
            return False
        try:
            body = response.json()
        except ValueError:
            return False
        return isinstance(body, dict) and body.get("valid") is True

    def _record(self, outcome: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("authority_validations_total", outcome=outcome)
