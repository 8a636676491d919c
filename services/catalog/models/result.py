"""
Outcome models.

Standardizes what each pipeline stage and check returns, so rejections are
values rather than exceptions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from fastapi.responses import JSONResponse
from starlette.responses import Response

from .auth import Identity
from .context import RequestContext


class RejectionKind(Enum):
    """Client- and server-facing failure taxonomy: (status code, default message)."""

    MISSING_TOKEN = (403, "missing token")
    INVALID_TOKEN = (401, "invalid token")
    INVALID_CREDENTIALS = (401, "invalid credentials")
    VALIDATION_FAILED = (400, "validation failed")
    NOT_FOUND = (404, "not found")
    SERVER_ERROR = (500, "server error")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def default_message(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Rejected:
    kind: RejectionKind
    message: Optional[str] = None

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def detail(self) -> str:
        return self.message or self.kind.default_message

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content={"message": self.detail})


@dataclass(frozen=True)
class Verified:
    identity: Identity


@dataclass(frozen=True)
class Validated:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class Allow:
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Deny:
    reason: str


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Terminate:
    response: Response


VerifyResult = Union[Verified, Rejected]
ValidationResult = Union[Validated, Rejected]
PolicyDecision = Union[Allow, Deny]
Outcome = Union[Continue, Terminate]
