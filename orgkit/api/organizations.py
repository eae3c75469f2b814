"""
Organization routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from orgkit.api.dependencies import get_organization_manager
from orgkit.api.errors import http_error
from orgkit.auth.context import CallerIdentity
from orgkit.auth.policies import require_auth
from orgkit.core.models import PartialOrganization
from orgkit.managers.organizations import OrganizationManager

router = APIRouter(prefix="/api/organization", tags=["organizations"])


@router.post("", response_model=str)
async def create_organization(
    data: PartialOrganization,
    manager: OrganizationManager = Depends(get_organization_manager),
    identity: CallerIdentity = Depends(require_auth()),
):
    """Create an organization. Returns its id."""
    result = await manager.create(data)
    if result.is_err:
        raise http_error(result.unwrap_err())
    return result.unwrap()
