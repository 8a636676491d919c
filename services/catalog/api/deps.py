"""
Dependency Injection for Catalog API.

Manage request handler dependencies using FastAPI Depends.
"""

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Mapping, Optional, Tuple

from fastapi import Depends, Request

from ..core.pipeline import Pipeline
from ..core.security import CredentialIssuer
from ..models import RequestContext
from ..services.product_store import ProductStore

logger = logging.getLogger("catalog.api")

_BODY_METHODS = {"POST", "PUT", "PATCH"}


@dataclass(frozen=True)
class RoutePipelines:
    """Interceptor chains per route group, fixed at app assembly."""

    public: Pipeline
    create: Pipeline
    secure: Pipeline
    secure_preflight: Pipeline
    secure_paths: Tuple[str, ...] = ()

    def preflight_for(self, path: str) -> Pipeline:
        """Origin and access stages of the group serving path, without its checks."""
        return self.secure_preflight if path in self.secure_paths else self.public


# ==========================================
# 1. Service Accessors
# ==========================================


def get_product_store(request: Request) -> ProductStore:
    return request.app.state.product_store


def get_credential_issuer(request: Request) -> CredentialIssuer:
    return request.app.state.credential_issuer


def get_pipelines(request: Request) -> RoutePipelines:
    return request.app.state.pipelines


# Service Dependency Type Aliases
ProductStoreDep = Annotated[ProductStore, Depends(get_product_store)]
CredentialIssuerDep = Annotated[CredentialIssuer, Depends(get_credential_issuer)]
PipelinesDep = Annotated[RoutePipelines, Depends(get_pipelines)]


# ==========================================
# 2. Request Context
# ==========================================


def parse_json_object(body: bytes) -> Optional[Mapping[str, Any]]:
    """
    Decode a request body into a JSON object.

    Returns None for empty bodies, invalid JSON and non-object documents;
    the schema validator reports those.
    """
    if not body:
        return None
    try:
        document = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Ignoring undecodable request body: %s", e)
        return None
    return document if isinstance(document, dict) else None


async def build_request_context(request: Request) -> RequestContext:
    body = None
    if request.method in _BODY_METHODS:
        body = parse_json_object(await request.body())

    return RequestContext.build(
        method=request.method,
        path=request.url.path,
        headers=request.headers,
        body=body,
        path_params=request.path_params,
    )


RequestContextDep = Annotated[RequestContext, Depends(build_request_context)]
