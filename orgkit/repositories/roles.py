"""
Role repository.

Backend failures here are reported as SERVICE_ERROR rather than
STORAGE_ERROR.
"""

from __future__ import annotations

from orgkit.core.models import PartialRole, Role
from orgkit.core.result import ErrorKind, Result
from orgkit.core.utils import generate_id
from orgkit.repositories.base import Repository
from orgkit.storage.base import Collections


class RoleRepository(Repository):
    collection = Collections.ROLES
    failure_kind = ErrorKind.SERVICE_ERROR
    
    async def create(self, partial_role: PartialRole) -> Result[str]:
        role_id = generate_id()
        saved = await self._bounded(
            self.storage.save(self.collection, role_id, partial_role.model_dump()),
            self.timeouts.create,
            "inserting role",
        )
        if saved.is_err:
            return Result.fail(saved.unwrap_err())
        
        return Result.ok(role_id)
    
    async def get_admin_role(self) -> Result[Role]:
        """Find the role flagged as the default administrator role."""
        found = await self._bounded(
            self.storage.query(self.collection, {"default_admin": True}, limit=1),
            self.timeouts.get_admin_role,
            "getting the admin role",
        )
        if found.is_err:
            return Result.fail(found.unwrap_err())
        
        docs = found.unwrap()
        if not docs:
            return Result.err(ErrorKind.NOT_FOUND, "could not find the admin role")
        
        return Result.ok(_to_role(docs[0]))
    
    async def find_by_ids(self, role_ids: list[str]) -> Result[list[Role]]:
        """Resolve role ids to roles. Unknown ids are skipped."""
        if not role_ids:
            return Result.ok([])
        
        found = await self._bounded(
            self.storage.get_many(self.collection, list(role_ids)),
            self.timeouts.find_by_ids,
            "finding roles by ids",
        )
        if found.is_err:
            return Result.fail(found.unwrap_err())
        
        return Result.ok([_to_role(doc) for doc in found.unwrap()])


def _to_role(doc: dict) -> Role:
    return Role.model_validate({**doc, "id": doc["_id"]})
