# =============================================================================
# Authentication API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/authentication/register              - Sign up and log in
#   POST /api/authentication/register-creating-org - Sign up as admin of a new org
#   POST /api/authentication/login                 - Get tokens
#   POST /api/authentication/forgot-password       - Start password reset
#   POST /api/authentication/refresh-token         - Refresh tokens
#
# Failures answer with the error kind as detail ("invalid_credentials", ...).
#
# =============================================================================

from fastapi import APIRouter, Depends, Response

from orgkit.api.dependencies import get_authenticator
from orgkit.api.errors import http_error
from orgkit.auth.authenticator import Authenticator
from orgkit.core.models import (
    ForgotPasswordPayload,
    LoginPayload,
    LoginSuccessPayload,
    RefreshTokenPayload,
    RegisterCreatingOrgPayload,
    SignUpPayload,
)
from orgkit.core.result import Result

router = APIRouter(prefix="/api/authentication", tags=["authentication"])


def _unwrap(result: Result):
    if result.is_err:
        error = result.unwrap_err()
        raise http_error(error, detail=error.kind.value)
    return result.unwrap()


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", response_model=LoginSuccessPayload)
async def register(
    data: SignUpPayload,
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Create an account and return its tokens."""
    return _unwrap(await authenticator.register(data))


@router.post("/register-creating-org", response_model=LoginSuccessPayload)
async def register_creating_org(
    data: RegisterCreatingOrgPayload,
    authenticator: Authenticator = Depends(get_authenticator),
):
    """
    Create an account together with an organization it administers.
    
    Not transactional: a failure after sign-up keeps the account.
    """
    return _unwrap(await authenticator.register_creating_org(data))


@router.post("/login", response_model=LoginSuccessPayload)
async def login(
    data: LoginPayload,
    authenticator: Authenticator = Depends(get_authenticator),
):
    return _unwrap(await authenticator.login(data))


@router.post("/forgot-password", status_code=204)
async def forgot_password(
    data: ForgotPasswordPayload,
    authenticator: Authenticator = Depends(get_authenticator),
):
    _unwrap(await authenticator.forgot_password(data))
    return Response(status_code=204)


@router.post("/refresh-token", response_model=LoginSuccessPayload)
async def refresh_token(
    data: RefreshTokenPayload,
    authenticator: Authenticator = Depends(get_authenticator),
):
    return _unwrap(await authenticator.refresh_token(data.refresh_token))
