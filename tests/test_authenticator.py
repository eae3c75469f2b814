"""
Tests for the authenticator flows.
"""

import pytest

from orgkit.auth.authenticator import Authenticator
from orgkit.core.models import (
    ForgotPasswordPayload,
    LoginPayload,
    RegisterCreatingOrgPayload,
    SignUpPayload,
)
from orgkit.core.result import ErrorKind, Result
from orgkit.storage import Collections


@pytest.fixture
def authenticator(provider, member_manager):
    return Authenticator(provider, member_manager)


# =============================================================================
# Format checks
# =============================================================================


class TestFormatChecks:
    @pytest.mark.asyncio
    async def test_register_bad_email(self, authenticator, provider):
        result = await authenticator.register(SignUpPayload(email="nope", password="secret123"))

        assert result.unwrap_err().kind == ErrorKind.INVALID_CREDENTIALS
        assert result.unwrap_err().message == "'email' is invalid."
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_register_short_password(self, authenticator, provider):
        result = await authenticator.register(SignUpPayload(email="user@example.com", password="short"))

        assert result.unwrap_err().kind == ErrorKind.INVALID_CREDENTIALS
        assert result.unwrap_err().message == "'password' is invalid."
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_login_bad_email(self, authenticator, provider):
        result = await authenticator.login(LoginPayload(email="", password="secret123"))

        assert result.unwrap_err().kind == ErrorKind.INVALID_CREDENTIALS
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_forgot_password_bad_email(self, authenticator, provider):
        result = await authenticator.forgot_password(ForgotPasswordPayload(email="nope"))

        assert result.unwrap_err().kind == ErrorKind.INVALID_CREDENTIALS
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_register_creating_org_bad_format_is_invalid_data(self, authenticator, provider, partial_org):
        payload = RegisterCreatingOrgPayload(
            user=SignUpPayload(email="user@example.com", password="short"),
            org=partial_org,
        )

        result = await authenticator.register_creating_org(payload)

        assert result.unwrap_err().kind == ErrorKind.INVALID_DATA
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_empty_refresh_token(self, authenticator, provider):
        result = await authenticator.refresh_token("")

        assert result.unwrap_err().kind == ErrorKind.INVALID_CREDENTIALS
        assert provider.calls == []


# =============================================================================
# Flows
# =============================================================================


class TestFlows:
    @pytest.mark.asyncio
    async def test_register_signs_up_then_logs_in(self, authenticator, provider):
        result = await authenticator.register(SignUpPayload(email="user@example.com", password="secret123"))

        assert result.unwrap().access_token == "access"
        assert provider.calls == ["sign_up", "login"]

    @pytest.mark.asyncio
    async def test_register_stops_on_sign_up_failure(self, authenticator, provider):
        provider.sign_up_result = Result.err(ErrorKind.SERVICE_ERROR, "invalid_signup")

        result = await authenticator.register(SignUpPayload(email="user@example.com", password="secret123"))

        assert result.unwrap_err().kind == ErrorKind.SERVICE_ERROR
        assert provider.calls == ["sign_up"]

    @pytest.mark.asyncio
    async def test_register_creating_org(self, authenticator, provider, member_manager, role_manager, partial_org):
        admin = (await role_manager.ensure_admin_role()).unwrap()
        payload = RegisterCreatingOrgPayload(
            user=SignUpPayload(email="user@example.com", password="secret123"),
            org=partial_org,
        )

        result = await authenticator.register_creating_org(payload)

        assert result.is_ok
        assert provider.calls == ["sign_up", "login"]

        members = (await member_manager.read_members_by_user_id("auth0|u1")).unwrap()
        assert len(members) == 1
        assert members[0].org_name == "A"
        assert members[0].roles == [admin]

    @pytest.mark.asyncio
    async def test_register_creating_org_keeps_user_and_org_on_failure(
        self, authenticator, provider, storage, partial_org,
    ):
        # No admin role seeded
        payload = RegisterCreatingOrgPayload(
            user=SignUpPayload(email="user@example.com", password="secret123"),
            org=partial_org,
        )

        result = await authenticator.register_creating_org(payload)

        assert result.unwrap_err().kind == ErrorKind.NOT_FOUND
        assert provider.calls == ["sign_up"]
        assert len(await storage.query(Collections.ORGANIZATIONS)) == 1

    @pytest.mark.asyncio
    async def test_login_passes_provider_errors_through(self, authenticator, provider):
        provider.login_result = Result.err(ErrorKind.INVALID_DATA, "invalid_grant")

        result = await authenticator.login(LoginPayload(email="user@example.com", password="secret123"))

        assert result.unwrap_err().kind == ErrorKind.INVALID_DATA

    @pytest.mark.asyncio
    async def test_forgot_password(self, authenticator, provider):
        result = await authenticator.forgot_password(ForgotPasswordPayload(email="user@example.com"))

        assert result.is_ok
        assert provider.calls == ["forgot_password"]

    @pytest.mark.asyncio
    async def test_refresh_token(self, authenticator, provider):
        result = await authenticator.refresh_token("refresh")

        assert result.unwrap().refresh_token == "refresh"
        assert provider.calls == ["refresh_token"]
