"""
Organization repository.
"""

from __future__ import annotations

from orgkit.core.models import Organization, PartialOrganization
from orgkit.core.result import ErrorKind, Result
from orgkit.core.utils import generate_id
from orgkit.repositories.base import Repository
from orgkit.storage.base import Collections


class OrganizationRepository(Repository):
    collection = Collections.ORGANIZATIONS
    
    async def create(self, partial_org: PartialOrganization) -> Result[str]:
        """
        Insert an organization.
        
        Returns:
            The new organization's id
        """
        org_id = generate_id()
        saved = await self._bounded(
            self.storage.save(self.collection, org_id, partial_org.model_dump()),
            self.timeouts.create,
            "inserting organization",
        )
        if saved.is_err:
            return Result.fail(saved.unwrap_err())
        
        return Result.ok(org_id)
    
    async def find_by_id(self, org_id: str) -> Result[Organization]:
        found = await self._bounded(
            self.storage.get(self.collection, org_id),
            self.timeouts.find_by_id,
            "finding organization by id",
        )
        if found.is_err:
            return Result.fail(found.unwrap_err())
        
        doc = found.unwrap()
        if doc is None:
            return Result.err(ErrorKind.NOT_FOUND, f"could not find org by id '{org_id}'")
        
        return Result.ok(Organization.model_validate({**doc, "id": doc["_id"]}))
