"""
Operator session held by the client, never by the gateway.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionContext:
    """Access/refresh credentials and the e-mail shown in the header."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    email: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return bool(self.access_token)

    @property
    def display_name(self) -> str:
        return self.email or "User"

    def store(self, access_token: Optional[str], refresh_token: Optional[str], email: Optional[str] = None) -> None:
        """Remember credentials from a login response; missing values keep the old ones."""
        if access_token:
            self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token
        if email:
            self.email = email

    def invalidate(self) -> None:
        """Forget everything; used on logout and on a 401 from the gateway."""
        self.access_token = None
        self.refresh_token = None
        self.email = None

    def authorization_header(self) -> dict:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}
