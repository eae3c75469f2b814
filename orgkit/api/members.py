"""
Membership routes.

Creating, reading and updating single memberships is only exposed in
development environments; production clients go through
user-create-org and the per-user listing.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from orgkit.api.dependencies import dev_only, get_member_manager
from orgkit.api.errors import http_error
from orgkit.auth.context import CallerIdentity
from orgkit.auth.policies import DENIED_DETAIL, active_organization, require_auth, require_permission
from orgkit.core.models import (
    Member,
    PartialMember,
    UserCreateOrgPayload,
    WrappedResult,
)
from orgkit.core.result import ErrorKind
from orgkit.managers.members import MemberManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/membership", tags=["memberships"])


ORG_NOT_FOUND = {ErrorKind.NOT_FOUND: (400, "org id not found")}
MEMBER_NOT_FOUND = {ErrorKind.NOT_FOUND: (400, "member id not found")}


# =============================================================================
# Development Endpoints
# =============================================================================

@router.post("", response_model=str, dependencies=[Depends(dev_only)])
async def create_member(
    data: PartialMember,
    manager: MemberManager = Depends(get_member_manager),
    identity: CallerIdentity = Depends(require_auth()),
):
    """Create a membership in an existing organization. Returns its id."""
    result = await manager.create(data)
    if result.is_err:
        raise http_error(result.unwrap_err(), overrides=ORG_NOT_FOUND)
    return result.unwrap()


async def _read_in_active_organization(
    request: Request,
    manager: MemberManager,
    member_id: str,
    identity: CallerIdentity,
) -> Member:
    """
    Load a stored member, denying access unless it belongs to the
    organization the caller's permission was checked in.
    """
    result = await manager.read(member_id)
    if result.is_err:
        raise http_error(result.unwrap_err(), overrides=MEMBER_NOT_FOUND)

    member = result.unwrap()
    active_org = active_organization(request)
    if member.org_id != active_org:
        logger.info(
            f"Denied {request.method} {request.url.path} for {identity.user_id}: "
            f"member '{member_id}' is not in active organization '{active_org}'"
        )
        raise HTTPException(status_code=403, detail=DENIED_DETAIL)

    return member


@router.get("/{id}", response_model=Member, dependencies=[Depends(dev_only)])
async def read_member(
    id: str,
    request: Request,
    manager: MemberManager = Depends(get_member_manager),
    identity: CallerIdentity = Depends(require_permission("members.read")),
):
    return await _read_in_active_organization(request, manager, id, identity)


@router.patch("", status_code=204, dependencies=[Depends(dev_only)])
async def update_member(
    data: Member,
    request: Request,
    manager: MemberManager = Depends(get_member_manager),
    identity: CallerIdentity = Depends(require_permission("members.write")),
):
    """
    Replace a membership's permissions and roles.

    The organization and user of the stored member are kept; only
    `permissions` and `roles` are taken from the body.
    """
    stored = await _read_in_active_organization(request, manager, data.id, identity)

    updated = stored.model_copy(update={"permissions": data.permissions, "roles": data.roles})
    result = await manager.update(updated)
    if result.is_err:
        raise http_error(result.unwrap_err(), overrides=MEMBER_NOT_FOUND)
    return Response(status_code=204)


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/user/{user_id}", response_model=WrappedResult[list[Member]])
async def read_members_by_user_id(
    user_id: str,
    manager: MemberManager = Depends(get_member_manager),
    identity: CallerIdentity = Depends(require_auth()),
):
    """All memberships of a user, with organization names."""
    result = await manager.read_members_by_user_id(user_id)
    if result.is_err:
        raise http_error(result.unwrap_err())
    return WrappedResult[list[Member]](result=result.unwrap())


@router.post("/user-create-org", response_model=str)
async def user_create_org(
    data: UserCreateOrgPayload,
    manager: MemberManager = Depends(get_member_manager),
    identity: CallerIdentity = Depends(require_auth()),
):
    """Create an organization administered by `user_id`. Returns the membership id."""
    result = await manager.user_create_org(data)
    if result.is_err:
        raise http_error(result.unwrap_err())
    return result.unwrap()
