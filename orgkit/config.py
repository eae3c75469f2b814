"""
Application configuration.

Loads settings from environment variables with sensible defaults.
Nested groups use "__" as delimiter, e.g.
REPOSITORY_TIMEOUTS__FIND_BY_ID=5
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TIMEOUT_SECONDS = 15.0


class RepositoryTimeouts(BaseModel):
    """Per-operation document store deadlines, in seconds."""

    create: float = DEFAULT_TIMEOUT_SECONDS
    find_by_id: float = DEFAULT_TIMEOUT_SECONDS
    find_by_ids: float = DEFAULT_TIMEOUT_SECONDS
    find_by_user_id: float = DEFAULT_TIMEOUT_SECONDS
    get_admin_role: float = DEFAULT_TIMEOUT_SECONDS
    set_permissions: float = DEFAULT_TIMEOUT_SECONDS
    set_roles: float = DEFAULT_TIMEOUT_SECONDS


class IdentityProviderTimeouts(BaseModel):
    """Per-call identity provider deadlines, in seconds."""

    sign_up: float = DEFAULT_TIMEOUT_SECONDS
    login: float = DEFAULT_TIMEOUT_SECONDS
    forgot_password: float = DEFAULT_TIMEOUT_SECONDS
    refresh_token: float = DEFAULT_TIMEOUT_SECONDS


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Header whose value names the caller's active organization claim
    active_organization_header: str = "ActiveOrganization"

    # ==========================================================================
    # Identity Provider (Auth0)
    # ==========================================================================

    # Must end with "/"
    identity_provider_authority: str = "https://example.eu.auth0.com/"
    identity_provider_audience: str = ""

    auth0_client_id: str = ""
    auth0_client_secret: str = ""
    auth0_database: str = "Username-Password-Authentication"
    auth0_user_id_prefix: str = "auth0|"

    identity_provider_timeouts: IdentityProviderTimeouts = IdentityProviderTimeouts()

    # ==========================================================================
    # Token verification
    # ==========================================================================

    # When set, bearer tokens are verified with this shared secret (HS256).
    # Otherwise keys are fetched from the authority's JWKS endpoint (RS256).
    jwt_secret_key: str = ""
    jwt_algorithm: str = "RS256"

    # ==========================================================================
    # Storage
    # ==========================================================================

    repository_timeouts: RepositoryTimeouts = RepositoryTimeouts()

    # Create the default admin role at startup if it is missing
    seed_admin_role: bool = True

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_dev_environment(self) -> bool:
        """Whether development-only routes are exposed."""
        return self.environment.lower() in ("development", "actions")

    @property
    def jwks_url(self) -> str:
        return f"{self.identity_provider_authority}.well-known/jwks.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
