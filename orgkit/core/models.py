"""
Core data models for orgkit.

These models represent the fundamental entities: Organizations, Roles
and Members, plus the payloads exchanged with the identity provider.
"Partial" models are construction-time payloads that have no id yet;
repositories turn them into persisted documents.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# =============================================================================
# Organization
# =============================================================================


class Address(BaseModel):
    """Postal address of an organization."""

    country: str
    province: str
    city: str
    street: str
    number: str
    additional: str | None = None
    postal_code: str


class PartialOrganization(BaseModel):
    """An organization that has not been persisted yet."""

    name: str
    address: Address

    # Permissions available for assignment within the organization.
    # Always emptied by the server on creation.
    permissions: list[str] = Field(default_factory=list)


class Organization(PartialOrganization):
    """A persisted organization - the tenant."""

    id: str


# =============================================================================
# Role
# =============================================================================


class PartialRole(BaseModel):
    name: str
    permissions: list[str] = Field(default_factory=list)

    # Exactly one role per deployment carries this flag
    default_admin: bool = False


class Role(PartialRole):
    """A named bundle of permissions."""

    id: str


# =============================================================================
# Member (membership of a user in an organization)
# =============================================================================


class PartialMember(BaseModel):
    """A membership that has not been persisted yet."""

    org_id: str
    user_id: str
    permissions: list[str] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)


class Member(BaseModel):
    """
    Binding of a user to an organization.

    `id`, `org_id` and `user_id` never change after creation;
    permissions and roles are updated through the MemberManager.
    `org_name` is filled in when listing a user's memberships and
    is never persisted.
    """

    id: str
    org_id: str
    org_name: str | None = None
    user_id: str
    permissions: list[str] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)


# =============================================================================
# Authentication payloads
# =============================================================================


class SignUpPayload(BaseModel):
    email: str
    password: str
    full_name: str | None = None


class LoginPayload(BaseModel):
    email: str
    password: str


class ForgotPasswordPayload(BaseModel):
    email: str


class RefreshTokenPayload(BaseModel):
    refresh_token: str


class RegisterCreatingOrgPayload(BaseModel):
    """Sign up a user and make them the admin of a new organization."""

    user: SignUpPayload
    org: PartialOrganization


class UserCreateOrgPayload(BaseModel):
    """An existing user creates an organization they will administer."""

    user_id: str
    org: PartialOrganization


class LoginSuccessPayload(BaseModel):
    """Tokens returned by the identity provider on login/refresh."""

    access_token: str
    id_token: str
    refresh_token: str
    expires_in: int  # seconds until the access token expires


# =============================================================================
# Response wrappers
# =============================================================================


class WrappedResult(BaseModel, Generic[T]):
    """Keeps list responses inside a JSON object."""

    result: T
