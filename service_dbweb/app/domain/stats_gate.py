"""
Bearer credential gate for the statistics endpoint.
"""

from enum import Enum
from typing import Optional

from fastapi import Request

from shared.logging import get_logger
from shared.errors import AuthenticationError
from ..adapters.authority_client import AuthorityClient, is_well_formed


class GateState(str, Enum):
    """States a gated request moves through."""
    NO_CREDENTIAL = "no_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    PENDING_VALIDATION = "pending_validation"
    AUTHORIZED = "authorized"


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the credential from an ``Authorization: Bearer`` header, if any."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):]


class StatsGate:
    """Decides whether a request may see statistics, by asking the auth service.

    Only the validation outcome is consulted; the decision is made before
    any store is touched.
    """

    def __init__(self, authority_client: AuthorityClient):
        self.authority_client = authority_client
        self.logger = get_logger("dbweb.stats_gate")

    def classify(self, authorization: Optional[str]) -> GateState:
        """Local part of the state machine; no network involved."""
        credential = extract_bearer(authorization)
        if credential is None:
            return GateState.NO_CREDENTIAL
        if not is_well_formed(credential):
            return GateState.MALFORMED_CREDENTIAL
        return GateState.PENDING_VALIDATION

    async def authorize(self, request: Request) -> GateState:
        """Return ``AUTHORIZED`` or raise.

        Raises ``AuthenticationError`` (401) for a missing, malformed or
        rejected credential and lets ``AuthorityUnreachableError`` (502)
        propagate when the auth service cannot be asked.
        """
        authorization = request.headers.get("Authorization")
        state = self.classify(authorization)

        if state is GateState.NO_CREDENTIAL:
            self.logger.info("Stats request without bearer token")
            raise AuthenticationError("Valid token required")
        if state is GateState.MALFORMED_CREDENTIAL:
            self.logger.info("Stats request with malformed bearer token")
            raise AuthenticationError("Valid token required")

        outcome = await self.authority_client.validate(extract_bearer(authorization))
        if not outcome.valid:
            raise AuthenticationError("Invalid token")
        return GateState.AUTHORIZED
