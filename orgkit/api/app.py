"""
FastAPI application for orgkit.

Run with:
    uvicorn orgkit.api.app:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgkit.api.dependencies import state
from orgkit.api.members import router as members_router
from orgkit.api.organizations import router as organizations_router
from orgkit.api.roles import router as roles_router
from orgkit.auth.routes import router as auth_router
from orgkit.auth.tokens import TokenVerifier
from orgkit.config import get_settings
from orgkit.identity.auth0 import Auth0Provider
from orgkit.integrations.sentry import init_sentry
from orgkit.managers.roles import RoleManager
from orgkit.repositories.roles import RoleRepository
from orgkit.storage import create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Error tracking
    if init_sentry(settings):
        logger.info("Sentry error tracking enabled")

    # Storage
    state.storage = create_local_storage()

    # Identity provider (one pooled HTTP client for the app's lifetime)
    state.http_client = httpx.AsyncClient()
    state.identity_provider = Auth0Provider.from_settings(state.http_client, settings)
    if not state.identity_provider.is_configured:
        logger.warning("Auth0 client credentials are not set - authentication routes will fail")

    # Bearer token verification, read by the authorization dependencies
    app.state.token_verifier = TokenVerifier.from_settings(settings)

    if settings.seed_admin_role:
        role_manager = RoleManager(RoleRepository(state.storage, settings.repository_timeouts))
        seeded = await role_manager.ensure_admin_role()
        if seeded.is_err:
            logger.warning(f"Could not ensure the admin role: {seeded.unwrap_err()}")

    logger.info(f"orgkit API starting in {settings.environment} mode")

    yield

    await state.http_client.aclose()
    logger.info("orgkit API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="orgkit API",
    description="Organizations, memberships and active-organization authorization",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(organizations_router)
app.include_router(roles_router)
app.include_router(members_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
