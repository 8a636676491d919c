"""
Where: services/catalog/core/interceptors.py
What: Pipeline stages wrapping the origin, access log, token and schema checks.
Why: Adapt each check's outcome value to Continue/Terminate for the composer.
"""

import time
from typing import Sequence

from starlette.responses import Response

from ..models import Allow, Continue, Outcome, Rejected, RequestContext, Terminate
from .access_log import AccessLogger
from .origin_policy import OriginPolicy, evaluate_all, parse_header_list
from .pipeline import Interceptor
from .security import TokenVerifier
from .validation import FieldRule, validate

PREFLIGHT_MAX_AGE = "600"


class OriginPolicyInterceptor(Interceptor):
    """
    Applies stacked origin policies.

    Requests always continue; permission headers are added on the way out
    only when allowed. Preflights are judged on the requested method and
    headers and the route's preflight handler answers them with 204.
    """

    name = "origin_policy"

    def __init__(self, policies: Sequence[OriginPolicy]):
        self.policies = tuple(policies)

    def with_policy(self, policy: OriginPolicy) -> "OriginPolicyInterceptor":
        return OriginPolicyInterceptor(self.policies + (policy,))

    async def process(self, context: RequestContext) -> Outcome:
        origin = context.headers.get("origin")
        requested_method = context.headers.get("access-control-request-method")

        if context.method == "OPTIONS" and requested_method:
            decision = evaluate_all(
                origin,
                requested_method,
                parse_header_list(context.headers.get("access-control-request-headers")),
                self.policies,
            )
            headers = dict(decision.headers) if isinstance(decision, Allow) else {}
            if headers:
                headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
            return Continue(context.attach(cors_headers=headers))

        decision = evaluate_all(origin, context.method, (), self.policies)
        headers = decision.headers if isinstance(decision, Allow) else {}
        return Continue(context.attach(cors_headers=headers))

    async def complete(self, context: RequestContext, response: Response) -> Response:
        response.headers.update(context.get("cors_headers") or {})
        return response


class AccessLogInterceptor(Interceptor):
    name = "access_log"

    def __init__(self, access_logger: AccessLogger):
        self.access_logger = access_logger

    async def process(self, context: RequestContext) -> Outcome:
        self.access_logger.record_entry(context)
        return Continue(context.attach(started_at=time.perf_counter()))

    async def complete(self, context: RequestContext, response: Response) -> Response:
        started_at = context.get("started_at") or time.perf_counter()
        self.access_logger.record_exit(context, response, time.perf_counter() - started_at)
        return response


class TokenInterceptor(Interceptor):
    """Requires a verified Bearer token and attaches the identity."""

    name = "token_verifier"

    def __init__(self, verifier: TokenVerifier):
        self.verifier = verifier

    async def process(self, context: RequestContext) -> Outcome:
        result = self.verifier.verify(context.headers.get("authorization"))
        if isinstance(result, Rejected):
            return Terminate(result.to_response())
        return Continue(context.attach(identity=result.identity))


class SchemaInterceptor(Interceptor):
    """Validates the request body and attaches the validated fields."""

    name = "schema_validator"

    def __init__(self, rules: Sequence[FieldRule]):
        self.rules = tuple(rules)

    async def process(self, context: RequestContext) -> Outcome:
        result = validate(context.body, self.rules)
        if isinstance(result, Rejected):
            return Terminate(result.to_response())
        return Continue(context.attach(fields=result.fields))
