"""
Role routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from orgkit.api.dependencies import get_role_manager
from orgkit.api.errors import http_error
from orgkit.auth.context import CallerIdentity
from orgkit.auth.policies import require_auth
from orgkit.core.models import Role
from orgkit.managers.roles import RoleManager

router = APIRouter(prefix="/api/role", tags=["roles"])


@router.get("/admin-role", response_model=Role)
async def get_admin_role(
    manager: RoleManager = Depends(get_role_manager),
    identity: CallerIdentity = Depends(require_auth()),
):
    result = await manager.get_admin_role()
    if result.is_err:
        raise http_error(result.unwrap_err())
    return result.unwrap()
