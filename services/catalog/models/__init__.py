"""
Data model definitions package.

Aggregates the request context, outcome values and Pydantic models used by
other modules.
"""

from .auth import Identity, IssuedToken, LoginResponse
from .context import RequestContext
from .product import Product
from .result import (
    Allow,
    Continue,
    Deny,
    Outcome,
    PolicyDecision,
    Rejected,
    RejectionKind,
    Terminate,
    Validated,
    ValidationResult,
    Verified,
    VerifyResult,
)

__all__ = [
    "Allow",
    "Continue",
    "Deny",
    "Identity",
    "IssuedToken",
    "LoginResponse",
    "Outcome",
    "PolicyDecision",
    "Product",
    "Rejected",
    "RejectionKind",
    "RequestContext",
    "Terminate",
    "Validated",
    "ValidationResult",
    "Verified",
    "VerifyResult",
]
