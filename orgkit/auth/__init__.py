"""
Authentication and authorization.

Usage in routes:
    from orgkit.auth import CallerIdentity, require_permission

    @router.get("/{id}")
    async def read_member(
        id: str,
        identity: CallerIdentity = Depends(require_permission("members.read")),
    ):
        ...
"""

from orgkit.auth.context import CallerIdentity, Claim
from orgkit.auth.tokens import TokenError, TokenExpiredError, TokenInvalidError, TokenVerifier
from orgkit.auth.policies import (
    ActiveOrganizationPermissionHandler,
    ActiveOrganizationPermissionPolicyProvider,
    ActiveOrganizationPermissionRequirement,
    MembershipPermissions,
    Policy,
    get_caller_identity,
    require_auth,
    require_permission,
    require_policy,
)
from orgkit.auth.authenticator import Authenticator

__all__ = [
    # Identity
    "CallerIdentity",
    "Claim",
    # Tokens
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenVerifier",
    # Policies
    "ActiveOrganizationPermissionHandler",
    "ActiveOrganizationPermissionPolicyProvider",
    "ActiveOrganizationPermissionRequirement",
    "MembershipPermissions",
    "Policy",
    "get_caller_identity",
    "require_auth",
    "require_permission",
    "require_policy",
    # Flows
    "Authenticator",
]
