"""
Cross-origin policy evaluation.

Decides whether a request's origin/method/header combination is permitted.
A denial is expressed only as the absence of Access-Control-* headers on the
response; the client enforces the block.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Sequence

from ..models import Allow, Deny, PolicyDecision

ALL_METHODS = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS")


@dataclass(frozen=True)
class OriginPolicy:
    name: str
    allowed_origins: FrozenSet[str] = field(default_factory=frozenset)
    allowed_methods: FrozenSet[str] = field(default_factory=frozenset)
    allowed_headers: FrozenSet[str] = field(default_factory=frozenset)
    allow_any_origin: bool = False
    allow_any_header: bool = False

    @classmethod
    def permissive(cls) -> "OriginPolicy":
        """Reflect any origin, allow every method and header."""
        return cls(
            name="permissive",
            allowed_methods=frozenset(ALL_METHODS),
            allow_any_origin=True,
            allow_any_header=True,
        )

    @classmethod
    def restricted(
        cls,
        name: str,
        origins: Iterable[str],
        methods: Iterable[str],
        headers: Iterable[str],
    ) -> "OriginPolicy":
        return cls(
            name=name,
            allowed_origins=frozenset(origins),
            allowed_methods=frozenset(m.upper() for m in methods),
            allowed_headers=frozenset(h.lower() for h in headers),
        )


def parse_header_list(value: Optional[str]) -> list:
    """Split an Access-Control-Request-Headers value into lowercase names."""
    if not value:
        return []
    return [h.strip().lower() for h in value.split(",") if h.strip()]


def evaluate(
    origin: Optional[str],
    method: str,
    headers: Sequence[str],
    policy: OriginPolicy,
) -> PolicyDecision:
    """
    Evaluate one request against one policy.

    Args:
        origin: Origin header value (None for same-origin/non-browser requests)
        method: request method, or the preflight's requested method
        headers: requested header names (preflight), empty for actual requests
        policy: policy to apply

    Returns:
        Allow with the response headers to emit, or Deny with a reason
    """
    if not origin:
        return Deny("no origin")

    if not policy.allow_any_origin and origin not in policy.allowed_origins:
        return Deny(f"origin '{origin}' not allowed by {policy.name}")

    method = method.upper()
    if method not in policy.allowed_methods:
        return Deny(f"method '{method}' not allowed by {policy.name}")

    requested = [h.lower() for h in headers]
    if not policy.allow_any_header:
        for header in requested:
            if header not in policy.allowed_headers:
                return Deny(f"header '{header}' not allowed by {policy.name}")

    if policy.allow_any_header:
        allow_headers = ", ".join(requested)
    else:
        allow_headers = ", ".join(sorted(policy.allowed_headers))

    result = {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ", ".join(sorted(policy.allowed_methods)),
        "Vary": "Origin",
    }
    if allow_headers:
        result["Access-Control-Allow-Headers"] = allow_headers
    return Allow(result)


def evaluate_all(
    origin: Optional[str],
    method: str,
    headers: Sequence[str],
    policies: Sequence[OriginPolicy],
) -> PolicyDecision:
    """
    Apply stacked policies (global first, route group last).

    Every policy must allow the request; the last, most specific one supplies
    the response headers.
    """
    decision: PolicyDecision = Deny("no policy")
    for policy in policies:
        decision = evaluate(origin, method, headers, policy)
        if isinstance(decision, Deny):
            return decision
    return decision
