"""
Organization manager.
"""

from __future__ import annotations

import logging

from orgkit.core.models import PartialOrganization
from orgkit.core.result import Result
from orgkit.repositories.organizations import OrganizationRepository

logger = logging.getLogger(__name__)


class OrganizationManager:
    
    def __init__(self, repository: OrganizationRepository):
        self.repository = repository
    
    async def create(self, partial_org: PartialOrganization) -> Result[str]:
        """
        Create an organization.
        
        Client-supplied permissions are discarded: an organization's
        permission set always starts empty.
        
        Returns:
            The organization's id or an error
        """
        if partial_org.permissions:
            logger.info(f"Discarding {len(partial_org.permissions)} client-supplied organization permissions")
        
        org = partial_org.model_copy(update={"permissions": []})
        return await self.repository.create(org)
