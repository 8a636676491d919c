"""
Catalog configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import List

from pydantic import Field
from services.common.core.config import BaseAppConfig


class CatalogConfig(BaseAppConfig):
    """
    Configuration management for the Catalog service.
    """

    # Server settings
    HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=3000, description="Listen port")

    # Authentication/security (signing key required from env)
    JWT_SECRET_KEY: str = Field(..., min_length=32, description="JWT signing secret key")
    JWT_EXPIRES_DELTA: int = Field(default=3600, description="Token expiry (seconds)")
    JWT_LEEWAY_SECONDS: int = Field(
        default=0, ge=0, description="Tolerated clock skew on token expiry (seconds)"
    )

    # Credential source for the login endpoint
    AUTH_USER: str = Field(default="admin", description="Auth username")
    AUTH_PASS: str = Field(default="password", description="Auth password")

    # Restricted origin policy applied to the secure route group
    CORS_RESTRICTED_ORIGIN: str = Field(
        default="http://localhost:8080", description="Only origin allowed on secure routes"
    )
    CORS_RESTRICTED_METHODS: List[str] = Field(
        default=["GET"], description="Methods allowed on secure routes"
    )
    CORS_RESTRICTED_HEADERS: List[str] = Field(
        default=["Authorization", "Content-Type"],
        description="Request headers allowed on secure routes",
    )

    # model_config is inherited


def load_config() -> CatalogConfig:
    """
    Load config from the environment, failing fast on missing settings.
    """
    try:
        return CatalogConfig()
    except Exception as e:
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise
