"""
Authenticator - credential checks in front of the identity provider.

Formats are validated locally before any network call; everything else
is the identity provider's job. Registration that also creates an
organization is not transactional: a failure after sign-up leaves the
user (and possibly the organization) in place.
"""

from __future__ import annotations

import logging

from orgkit.core.models import (
    ForgotPasswordPayload,
    LoginPayload,
    LoginSuccessPayload,
    RegisterCreatingOrgPayload,
    SignUpPayload,
    UserCreateOrgPayload,
)
from orgkit.core.result import ErrorKind, Result
from orgkit.core.validation import is_email_valid, is_password_valid
from orgkit.identity.base import IdentityProvider
from orgkit.managers.members import MemberManager

logger = logging.getLogger(__name__)


INVALID_EMAIL = "'email' is invalid."
INVALID_PASSWORD = "'password' is invalid."
EMPTY_REFRESH_TOKEN = "'refresh_token' is empty."


def _check_credentials(email: str | None, password: str | None, kind: ErrorKind) -> Result[None]:
    if not is_email_valid(email):
        return Result.err(kind, INVALID_EMAIL)
    if not is_password_valid(password):
        return Result.err(kind, INVALID_PASSWORD)
    return Result.ok(None)


class Authenticator:
    """
    User-facing authentication flows.

    Usage:
        authenticator = Authenticator(identity_provider, member_manager)
        tokens = await authenticator.login(LoginPayload(email=..., password=...))
    """

    def __init__(self, identity_provider: IdentityProvider, member_manager: MemberManager):
        self.identity_provider = identity_provider
        self.member_manager = member_manager

    async def register(self, payload: SignUpPayload) -> Result[LoginSuccessPayload]:
        """Sign up, then log in with the same credentials."""
        checked = _check_credentials(payload.email, payload.password, ErrorKind.INVALID_CREDENTIALS)
        if checked.is_err:
            return Result.fail(checked.unwrap_err())

        signed_up = await self.identity_provider.sign_up(payload)
        if signed_up.is_err:
            return Result.fail(signed_up.unwrap_err())

        logger.info(f"Registered user {signed_up.unwrap()}")
        return await self.identity_provider.login(
            LoginPayload(email=payload.email, password=payload.password)
        )

    async def register_creating_org(self, payload: RegisterCreatingOrgPayload) -> Result[LoginSuccessPayload]:
        """
        Sign up, create an organization administered by the new user,
        then log in.

        Bad formats are reported as INVALID_DATA.
        """
        user = payload.user
        checked = _check_credentials(user.email, user.password, ErrorKind.INVALID_DATA)
        if checked.is_err:
            return Result.fail(checked.unwrap_err())

        signed_up = await self.identity_provider.sign_up(user)
        if signed_up.is_err:
            return Result.fail(signed_up.unwrap_err())

        user_id = signed_up.unwrap()
        membership = await self.member_manager.user_create_org(
            UserCreateOrgPayload(user_id=user_id, org=payload.org)
        )
        if membership.is_err:
            logger.warning(f"User {user_id} signed up but organization setup failed: {membership.unwrap_err()}")
            return Result.fail(membership.unwrap_err())

        logger.info(f"Registered user {user_id} as admin of a new organization (member {membership.unwrap()})")
        return await self.identity_provider.login(
            LoginPayload(email=user.email, password=user.password)
        )

    async def login(self, payload: LoginPayload) -> Result[LoginSuccessPayload]:
        checked = _check_credentials(payload.email, payload.password, ErrorKind.INVALID_CREDENTIALS)
        if checked.is_err:
            return Result.fail(checked.unwrap_err())

        return await self.identity_provider.login(payload)

    async def forgot_password(self, payload: ForgotPasswordPayload) -> Result[None]:
        if not is_email_valid(payload.email):
            return Result.err(ErrorKind.INVALID_CREDENTIALS, INVALID_EMAIL)

        return await self.identity_provider.forgot_password(payload)

    async def refresh_token(self, refresh_token: str) -> Result[LoginSuccessPayload]:
        if not refresh_token:
            return Result.err(ErrorKind.INVALID_CREDENTIALS, EMPTY_REFRESH_TOKEN)

        return await self.identity_provider.refresh_token(refresh_token)
