"""
Authentication and security module.

Generates and verifies JWT session tokens. The server keeps no session
records: a token is valid only if its HS256 signature verifies under the
process signing key and the current time is strictly before its expiry.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol, Union

import jwt

from ..models import Identity, IssuedToken, Rejected, RejectionKind, Verified, VerifyResult

logger = logging.getLogger("catalog.security")

# JWT algorithm.
ALGORITHM = "HS256"
BEARER_SCHEME = "bearer"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    username: str, secret_key: str, expires_delta: int = 3600, now: Optional[datetime] = None
) -> str:
    """
    Generate a JWT token.

    Args:
        username: user name (set as token subject)
        secret_key: JWT signing secret key
        expires_delta: token validity in seconds
        now: issuance time (defaults to the current UTC time)

    Returns:
        Encoded JWT token
    """
    issued_at = now or _utcnow()
    expire = issued_at + timedelta(seconds=expires_delta)
    to_encode = {"sub": username, "exp": expire, "iat": issued_at}
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token part of a "Bearer <token>" header value.

    Returns None when the header is absent or does not use the Bearer scheme.
    """
    if not authorization:
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    token = parts[1].strip()
    return token or None


def verify_token(token: str, secret_key: str, leeway: int = 0) -> Optional[Identity]:
    """
    Verify a JWT token and return the identity it carries.

    Args:
        token: raw token (without scheme)
        secret_key: JWT signing secret key
        leeway: tolerated clock skew in seconds

    Returns:
        Identity (None on verification failure)

    Note:
        This function provides pure verification logic only.
        Mapping to HTTP responses happens in the caller.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            leeway=leeway,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.exceptions.PyJWTError:
        return None

    username = payload.get("sub")
    if not isinstance(username, str) or not username:
        return None

    return Identity(
        username=username,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


class CredentialStore(Protocol):
    async def check(self, username: str, password: str) -> bool: ...


class StaticCredentialStore:
    """Single username/password pair taken from configuration."""

    def __init__(self, username: str, password: str):
        self._username = username
        self._password = password

    async def check(self, username: str, password: str) -> bool:
        user_ok = hmac.compare_digest(username.encode("utf-8"), self._username.encode("utf-8"))
        pass_ok = hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))
        return user_ok and pass_ok


class CredentialIssuer:
    """Mints signed session tokens from a username/password pair."""

    def __init__(
        self,
        credentials: CredentialStore,
        secret_key: str,
        expires_delta: int = 3600,
        clock: Clock = _utcnow,
    ):
        self.credentials = credentials
        self._secret_key = secret_key
        self.expires_delta = expires_delta
        self._clock = clock

    async def issue(self, username: object, password: object) -> Union[IssuedToken, Rejected]:
        if not isinstance(username, str) or not isinstance(password, str):
            return Rejected(RejectionKind.INVALID_CREDENTIALS)

        if not await self.credentials.check(username, password):
            logger.info("Login rejected for user '%s'", username)
            return Rejected(RejectionKind.INVALID_CREDENTIALS)

        issued_at = self._clock().replace(microsecond=0)
        token = create_access_token(
            username=username,
            secret_key=self._secret_key,
            expires_delta=self.expires_delta,
            now=issued_at,
        )
        return IssuedToken(
            token=token,
            identity=Identity(
                username=username,
                issued_at=issued_at,
                expires_at=issued_at + timedelta(seconds=self.expires_delta),
            ),
        )


class TokenVerifier:
    """
    Validates a presented Authorization header value.

    Absent or non-Bearer header -> MISSING_TOKEN (403).
    Bad signature, malformed token or expired token -> INVALID_TOKEN (401).

    Expiry is strict (now < exp) unless a leeway is configured.
    """

    def __init__(self, secret_key: str, leeway: int = 0):
        self._secret_key = secret_key
        self.leeway = leeway

    def verify(self, raw_header_value: Optional[str]) -> VerifyResult:
        token = extract_bearer_token(raw_header_value)
        if token is None:
            return Rejected(RejectionKind.MISSING_TOKEN)

        identity = verify_token(token, self._secret_key, leeway=self.leeway)
        if identity is None:
            return Rejected(RejectionKind.INVALID_TOKEN)

        return Verified(identity)
