"""
Product Catalog - HTTP service

Serves the product catalog behind a request pipeline: origin policy, access
logging, token verification and schema validation, wrapped by a central
error interceptor.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from services.common.core.logging_config import setup_logging

from .api.deps import RoutePipelines
from .api.routes import router
from .config import CatalogConfig, load_config
from .core.access_log import AccessLogger
from .core.exceptions import ErrorInterceptor
from .core.interceptors import (
    AccessLogInterceptor,
    OriginPolicyInterceptor,
    SchemaInterceptor,
    TokenInterceptor,
)
from .core.origin_policy import OriginPolicy
from .core.pipeline import Pipeline
from .core.security import CredentialIssuer, StaticCredentialStore, TokenVerifier
from .core.validation import PRODUCT_RULES
from .exceptions import register_exception_handlers
from .middleware import request_id_middleware
from .services.product_store import InMemoryProductStore, ProductStore

logger = logging.getLogger("catalog.main")

SECURE_PATHS = ("/api/products/secure",)


def build_pipelines(catalog_config: CatalogConfig) -> RoutePipelines:
    """Assemble the interceptor chain of each route group."""
    error_interceptor = ErrorInterceptor()
    origin = OriginPolicyInterceptor([OriginPolicy.permissive()])
    access = AccessLogInterceptor(AccessLogger())

    restricted = OriginPolicy.restricted(
        name="secure",
        origins=[catalog_config.CORS_RESTRICTED_ORIGIN],
        methods=catalog_config.CORS_RESTRICTED_METHODS,
        headers=catalog_config.CORS_RESTRICTED_HEADERS,
    )
    verifier = TokenVerifier(
        catalog_config.JWT_SECRET_KEY, leeway=catalog_config.JWT_LEEWAY_SECONDS
    )

    public = Pipeline([origin, access], error_interceptor)
    secure_preflight = Pipeline([origin.with_policy(restricted), access], error_interceptor)
    return RoutePipelines(
        public=public,
        create=public.extend(SchemaInterceptor(PRODUCT_RULES)),
        secure=secure_preflight.extend(TokenInterceptor(verifier)),
        secure_preflight=secure_preflight,
        secure_paths=SECURE_PATHS,
    )


def create_app(
    catalog_config: CatalogConfig, product_store: Optional[ProductStore] = None
) -> FastAPI:
    """Build the ASGI app around explicit configuration and collaborators."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Catalog service starting on port %s", catalog_config.PORT)
        yield
        logger.info("Catalog service shutting down.")

    app = FastAPI(
        title="Product Catalog",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.product_store = product_store or InMemoryProductStore()
    app.state.credential_issuer = CredentialIssuer(
        StaticCredentialStore(catalog_config.AUTH_USER, catalog_config.AUTH_PASS),
        secret_key=catalog_config.JWT_SECRET_KEY,
        expires_delta=catalog_config.JWT_EXPIRES_DELTA,
    )
    app.state.pipelines = build_pipelines(catalog_config)

    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(router)
    return app


config = load_config()
setup_logging(config.LOG_CONFIG_PATH)

app = create_app(config)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)
