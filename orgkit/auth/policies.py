"""
Policies - route authorization scoped to the caller's active organization.

Route handlers just declare what they need:
    `identity: CallerIdentity = Depends(require_permission("members.read"))`

How a decision is made:
- The request names the active organization in a header
  (ActiveOrganization by default)
- The caller's token carries one claim per membership, whose type is
  the organization id and whose value is the membership as JSON
- The first claim matching the header is parsed, and the required
  permission must be among its permissions

Denials always surface as 403 "Missing required permission."; the
precise reason is only logged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from orgkit.auth.context import CallerIdentity, Claim
from orgkit.auth.tokens import TokenExpiredError, TokenInvalidError, TokenVerifier
from orgkit.config import get_settings

logger = logging.getLogger(__name__)


POLICY_PREFIX = "ActiveOrganizationPermission"

DENIED_DETAIL = "Missing required permission."


# =============================================================================
# Membership claim
# =============================================================================


class MembershipPermissions(BaseModel):
    """The part of a membership claim the policies look at."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    org_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("org_id", "orgId", "OrgId"),
    )
    permissions: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("permissions", "Permissions"),
    )
    roles: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("roles", "Roles"),
    )


def parse_membership(claim: Claim) -> tuple[MembershipPermissions | None, str | None]:
    """
    Deserialize a membership claim.

    Returns: (membership, problem) - exactly one of them is None
    """
    try:
        data = json.loads(claim.value)
    except json.JSONDecodeError:
        return None, f"Membership to organization '{claim.type}' is malformed."

    if data is None:
        return None, f"Membership to organization '{claim.type}' is null."

    try:
        return MembershipPermissions.model_validate(data), None
    except ValidationError:
        return None, f"Membership to organization '{claim.type}' is malformed."


# =============================================================================
# Requirement and handler
# =============================================================================


@dataclass(frozen=True)
class ActiveOrganizationPermissionRequirement:
    """Caller must hold `permission` in the active organization."""

    permission: str

    @property
    def policy_name(self) -> str:
        return f"{POLICY_PREFIX}{self.permission}"


class ActiveOrganizationPermissionHandler:
    """Decides a single requirement against one request."""

    def __init__(self, header: str | None = None):
        self._header = header

    @property
    def header(self) -> str:
        return self._header or get_settings().active_organization_header

    def evaluate(
        self,
        requirement: ActiveOrganizationPermissionRequirement,
        identity: CallerIdentity,
        request: Request | None,
    ) -> tuple[bool, str | None]:
        """
        Returns: (allowed, reason)

        Only the first claim named after the active organization is
        consulted; a later claim of the same type is never looked at.
        """
        if not isinstance(request, Request):
            return False, "Authorization context does not carry an HTTP request."

        header = self.header
        if header not in request.headers:
            return False, f"Request does not contain the '{header}' header."

        active_org = request.headers[header]
        if not active_org:
            return False, f"The '{header}' header is empty."

        claim = identity.first(active_org)
        if claim is not None:
            membership, problem = parse_membership(claim)
            if membership is None:
                return False, problem
            if requirement.permission in membership.permissions:
                return True, None

        return False, f"Membership misses the required permission '{requirement.permission}'."


# =============================================================================
# Policy
# =============================================================================


class Policy:
    """
    A set of requirements that must all hold.

    A policy without requirements only asks for an authenticated caller.
    """

    def __init__(
        self,
        requirements: list[ActiveOrganizationPermissionRequirement] | None = None,
        handler: ActiveOrganizationPermissionHandler | None = None,
    ):
        self.requirements = requirements or []
        self.handler = handler or ActiveOrganizationPermissionHandler()

    def check(self, identity: CallerIdentity, request: Request | None) -> tuple[bool, str | None]:
        """
        Check if the caller satisfies this policy.

        Returns: (allowed, error_message)
        """
        if not identity.is_authenticated:
            return False, "Authentication required"

        for requirement in self.requirements:
            allowed, reason = self.handler.evaluate(requirement, identity, request)
            if not allowed:
                return False, reason

        return True, None


class ActiveOrganizationPermissionPolicyProvider:
    """
    Resolves policy names.

    "ActiveOrganizationPermission<permission>" yields a policy requiring
    <permission>; any other name is unknown.
    """

    def __init__(self, handler: ActiveOrganizationPermissionHandler | None = None):
        self.handler = handler

    def get_policy(self, name: str) -> Policy | None:
        if not name.startswith(POLICY_PREFIX):
            return None

        permission = name[len(POLICY_PREFIX):]
        requirement = ActiveOrganizationPermissionRequirement(permission=permission)
        return Policy([requirement], handler=self.handler)

    def get_default_policy(self) -> Policy:
        return Policy([], handler=self.handler)

    def get_fallback_policy(self) -> Policy | None:
        return None


policy_provider = ActiveOrganizationPermissionPolicyProvider()


def active_organization(request: Request) -> str | None:
    """The organization id the request declares active, if any."""
    return request.headers.get(ActiveOrganizationPermissionHandler().header) or None


# =============================================================================
# Bearer token -> CallerIdentity
# =============================================================================


optional_bearer = HTTPBearer(auto_error=False)


def get_token_verifier(request: Request) -> TokenVerifier:
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise HTTPException(status_code=503, detail="Token verification is not configured")
    return verifier


def get_caller_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> CallerIdentity:
    """
    Verify the bearer token and expose its claims.

    Runs in the threadpool since signing key lookups block.
    """
    if not credentials:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        payload = verifier.decode(credentials.credentials)
    except TokenExpiredError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except TokenInvalidError:
        raise HTTPException(status_code=401, detail="Invalid token")

    identity = CallerIdentity.from_token_payload(payload)
    if not identity.is_authenticated:
        raise HTTPException(status_code=401, detail="Token has no subject")

    return identity


# =============================================================================
# Main Interface
# =============================================================================


def require_permission(permission: str) -> Callable:
    """
    Require a permission in the caller's active organization.

    Usage:
        @router.get("/{id}")
        async def read_member(
            id: str,
            identity: CallerIdentity = Depends(require_permission("members.read")),
        ):
            ...
    """
    requirement = ActiveOrganizationPermissionRequirement(permission=permission)
    return require_policy(requirement.policy_name)


def require_policy(name: str) -> Callable:
    """Require a policy by name, falling back to the provider's fallback policy."""
    policy = policy_provider.get_policy(name) or policy_provider.get_fallback_policy()
    if policy is None:
        raise ValueError(f"Unknown authorization policy '{name}'")
    return _create_dependency(policy)


def require_auth() -> Callable:
    """Just require an authenticated caller."""
    return _create_dependency(policy_provider.get_default_policy())


# =============================================================================
# Internal: Create the FastAPI Dependency
# =============================================================================


def _create_dependency(policy: Policy) -> Callable:
    """Create a FastAPI Depends from a policy."""

    async def dependency(
        request: Request,
        identity: CallerIdentity = Depends(get_caller_identity),
    ) -> CallerIdentity:
        allowed, reason = policy.check(identity, request)
        if not allowed:
            logger.info(f"Denied {request.method} {request.url.path} for {identity.user_id}: {reason}")
            raise HTTPException(status_code=403, detail=DENIED_DETAIL)

        return identity

    return dependency
