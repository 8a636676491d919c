"""
Core logic package.

Provides the request pipeline and the checks its stages apply:
authentication, validation, origin policy, access logging and error interception.
"""

from .access_log import AccessLogger
from .exceptions import ErrorInterceptor
from .interceptors import (
    AccessLogInterceptor,
    OriginPolicyInterceptor,
    SchemaInterceptor,
    TokenInterceptor,
)
from .origin_policy import OriginPolicy, evaluate, evaluate_all
from .pipeline import Interceptor, Pipeline
from .security import (
    CredentialIssuer,
    StaticCredentialStore,
    TokenVerifier,
    create_access_token,
    verify_token,
)
from .validation import PRODUCT_RULES, FieldRule, ValueKind, validate

__all__ = [
    "AccessLogger",
    "AccessLogInterceptor",
    "CredentialIssuer",
    "ErrorInterceptor",
    "FieldRule",
    "Interceptor",
    "OriginPolicy",
    "OriginPolicyInterceptor",
    "PRODUCT_RULES",
    "Pipeline",
    "SchemaInterceptor",
    "StaticCredentialStore",
    "TokenInterceptor",
    "TokenVerifier",
    "ValueKind",
    "create_access_token",
    "evaluate",
    "evaluate_all",
    "validate",
    "verify_token",
]
