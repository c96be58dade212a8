"""
Adapters package for the gateway.

Contains the HTTP client wrapper for the auth service. The adapter
encapsulates:

- Base URL and request shape of the validation call
- Timeout and failure classification (unreachable vs. invalid)

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .authority_client import AuthorityClient, ValidationOutcome, is_well_formed, MIN_CREDENTIAL_LENGTH

__all__ = [
    "AuthorityClient",
    "ValidationOutcome",
    "is_well_formed",
    "MIN_CREDENTIAL_LENGTH",
]
