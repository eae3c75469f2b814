# =============================================================================
# Auth0 Identity Provider
# =============================================================================
#
# Setup:
#   1. Create a "Regular Web Application" in the Auth0 dashboard
#   2. Enable the "Password" grant type (Advanced Settings → Grant Types)
#   3. Create an API and use its identifier as the audience
#   4. Set env vars:
#      - IDENTITY_PROVIDER_AUTHORITY=https://<tenant>.auth0.com/
#      - IDENTITY_PROVIDER_AUDIENCE=...
#      - AUTH0_CLIENT_ID=...
#      - AUTH0_CLIENT_SECRET=...
#      - AUTH0_DATABASE=Username-Password-Authentication
#
# =============================================================================

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from orgkit.config import IdentityProviderTimeouts, Settings
from orgkit.core.models import (
    ForgotPasswordPayload,
    LoginPayload,
    LoginSuccessPayload,
    SignUpPayload,
)
from orgkit.core.result import ErrorKind, Result
from orgkit.identity.base import IdentityProvider

logger = logging.getLogger(__name__)


# =============================================================================
# Wire Models
# =============================================================================

class SignUpOkResponse(BaseModel):
    """Body of a successful dbconnections/signup call."""
    id: str
    email: str | None = None

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "SignUpOkResponse":
        # Auth0 returns "_id" (and "id" on some tenants)
        return cls(id=data.get("_id") or data["id"], email=data.get("email"))


class TokenOkResponse(BaseModel):
    """Body of a successful oauth/token call."""
    access_token: str
    id_token: str = ""
    refresh_token: str = ""
    scope: str | None = None
    expires_in: int
    token_type: str = "Bearer"

    def to_login_success(self, refresh_token: str = "") -> LoginSuccessPayload:
        return LoginSuccessPayload(
            access_token=self.access_token,
            id_token=self.id_token,
            # Refresh grants without rotation omit the refresh token
            refresh_token=self.refresh_token or refresh_token,
            expires_in=self.expires_in,
        )


# =============================================================================
# Auth0 Provider
# =============================================================================

class Auth0Provider(IdentityProvider):
    """Auth0 database-connection users via the Authentication API."""

    SIGN_UP_ENDPOINT = "dbconnections/signup"
    TOKEN_ENDPOINT = "oauth/token"
    CHANGE_PASSWORD_ENDPOINT = "dbconnections/change_password"

    PASSWORD_GRANT = "password"
    REFRESH_TOKEN_GRANT = "refresh_token"
    REQUIRED_SCOPES = "openid offline_access"

    def __init__(
        self,
        client: httpx.AsyncClient,
        authority: str,
        client_id: str,
        client_secret: str,
        database: str,
        audience: str = "",
        user_id_prefix: str = "auth0|",
        timeouts: IdentityProviderTimeouts | None = None,
    ):
        if not authority.endswith("/"):
            authority = f"{authority}/"

        self.client = client
        self.authority = authority
        self.client_id = client_id
        self.client_secret = client_secret
        self.database = database
        self.audience = audience
        self.user_id_prefix = user_id_prefix
        self.timeouts = timeouts or IdentityProviderTimeouts()

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "Auth0Provider":
        return cls(
            client=client,
            authority=settings.identity_provider_authority,
            client_id=settings.auth0_client_id,
            client_secret=settings.auth0_client_secret,
            database=settings.auth0_database,
            audience=settings.identity_provider_audience,
            user_id_prefix=settings.auth0_user_id_prefix,
            timeouts=settings.identity_provider_timeouts,
        )

    @property
    def is_configured(self) -> bool:
        """Check if Auth0 credentials are configured."""
        return bool(self.client_id and self.client_secret)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def sign_up(self, payload: SignUpPayload) -> Result[str]:
        body = {
            "client_id": self.client_id,
            "email": payload.email,
            "password": payload.password,
            "connection": self.database,
        }
        if payload.full_name:
            body["name"] = payload.full_name

        response = await self._post(self.SIGN_UP_ENDPOINT, body, self.timeouts.sign_up, "signing up")
        if response.is_err:
            return Result.fail(response.unwrap_err())

        try:
            ok = SignUpOkResponse.parse(response.unwrap())
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            return Result.err(ErrorKind.SERVICE_ERROR, f"unexpected sign up response: {e}")

        # Prefixed so ids match the "sub" claim of the provider's tokens
        return Result.ok(f"{self.user_id_prefix}{ok.id}")

    async def login(self, payload: LoginPayload) -> Result[LoginSuccessPayload]:
        body = {
            "grant_type": self.PASSWORD_GRANT,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "audience": self.audience,
            "username": payload.email,
            "password": payload.password,
            "scope": self.REQUIRED_SCOPES,
        }

        response = await self._post(self.TOKEN_ENDPOINT, body, self.timeouts.login, "logging in")
        if response.is_err:
            return Result.fail(response.unwrap_err())

        return _to_login_success(response.unwrap())

    async def forgot_password(self, payload: ForgotPasswordPayload) -> Result[None]:
        body = {
            "client_id": self.client_id,
            "email": payload.email,
            "connection": self.database,
        }

        # The endpoint answers with plain text, not JSON
        response = await self._post(
            self.CHANGE_PASSWORD_ENDPOINT, body, self.timeouts.forgot_password,
            "requesting a password change", expect_json=False,
        )
        if response.is_err:
            return Result.fail(response.unwrap_err())

        return Result.ok(None)

    async def refresh_token(self, refresh_token: str) -> Result[LoginSuccessPayload]:
        body = {
            "grant_type": self.REFRESH_TOKEN_GRANT,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
        }

        response = await self._post(self.TOKEN_ENDPOINT, body, self.timeouts.refresh_token, "refreshing token")
        if response.is_err:
            return Result.fail(response.unwrap_err())

        return _to_login_success(response.unwrap(), refresh_token)

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _post(
        self,
        endpoint: str,
        body: dict[str, Any],
        timeout: float,
        action: str,
        expect_json: bool = True,
    ) -> Result[Any]:
        """POST to the provider and classify the outcome."""
        try:
            response = await self.client.post(f"{self.authority}{endpoint}", json=body, timeout=timeout)
        except httpx.TimeoutException:
            message = f"timed out {action}"
            logger.warning(message)
            return Result.err(ErrorKind.TIMED_OUT, message)
        except httpx.HTTPError as e:
            message = f"failed {action}: {e}"
            logger.warning(message)
            return Result.err(ErrorKind.SERVICE_ERROR, message)

        if not response.is_success:
            return _classify_error_response(response, action)

        if not expect_json:
            return Result.ok(response.text)

        try:
            return Result.ok(response.json())
        except ValueError as e:
            return Result.err(ErrorKind.SERVICE_ERROR, f"undecodable response {action}: {e}")


def _to_login_success(data: Any, refresh_token: str = "") -> Result[LoginSuccessPayload]:
    try:
        ok = TokenOkResponse.model_validate(data)
    except ValidationError as e:
        return Result.err(ErrorKind.SERVICE_ERROR, f"unexpected token response: {e}")

    return Result.ok(ok.to_login_success(refresh_token))


def _classify_error_response(response: httpx.Response, action: str) -> Result[Any]:
    """
    Map a non-success response to an error.
    
    403 means the provider rejected the caller (wrong credentials,
    revoked refresh token); everything else is a service failure.
    """
    code, description = _error_details(response)
    message = f"{code}: {description}" if description else code
    logger.warning(f"Auth0 replied {response.status_code} {action}: {message}")

    if response.status_code == httpx.codes.FORBIDDEN:
        return Result.err(ErrorKind.INVALID_DATA, message)

    return Result.err(ErrorKind.SERVICE_ERROR, message)


def _error_details(response: httpx.Response) -> tuple[str, str]:
    """Extract (code, description) from the provider's error body."""
    try:
        data = response.json()
    except ValueError:
        return f"http_{response.status_code}", response.text

    if not isinstance(data, dict):
        return f"http_{response.status_code}", str(data)

    # Token endpoint: error/error_description; signup: code/description
    code = data.get("error") or data.get("code") or f"http_{response.status_code}"
    description = data.get("error_description") or data.get("description") or data.get("message") or ""
    if not isinstance(description, str):
        description = str(description)

    return str(code), description
