"""
Role manager.
"""

from __future__ import annotations

import logging

from orgkit.core.models import PartialRole, Role
from orgkit.core.result import ErrorKind, Result
from orgkit.repositories.roles import RoleRepository

logger = logging.getLogger(__name__)


DEFAULT_ADMIN_ROLE_NAME = "Administrator"


class RoleManager:
    
    def __init__(self, repository: RoleRepository):
        self.repository = repository
    
    async def get_admin_role(self) -> Result[Role]:
        """The deployment's default administrator role, or NOT_FOUND."""
        return await self.repository.get_admin_role()
    
    async def ensure_admin_role(self, name: str = DEFAULT_ADMIN_ROLE_NAME) -> Result[Role]:
        """
        Return the admin role, creating it first if none exists.
        
        Called once at startup; failures other than NOT_FOUND propagate.
        """
        existing = await self.repository.get_admin_role()
        if existing.is_ok:
            return existing
        
        if existing.unwrap_err().kind != ErrorKind.NOT_FOUND:
            return existing
        
        partial = PartialRole(name=name, default_admin=True)
        created = await self.repository.create(partial)
        if created.is_err:
            return Result.fail(created.unwrap_err())
        
        logger.info(f"Created default admin role '{name}'")
        return Result.ok(Role(id=created.unwrap(), **partial.model_dump()))
