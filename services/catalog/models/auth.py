"""
Pydantic models related to authentication.
"""

from datetime import datetime

from pydantic import BaseModel


class Identity(BaseModel):
    """Authenticated identity decoded from a verified session token."""

    username: str
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    """Signed session token together with its claims."""

    token: str
    identity: Identity


class LoginResponse(BaseModel):
    """Login response body."""

    token: str
