"""
Member manager - memberships of users in organizations.

Compound operations here are NOT transactional: when a later step
fails, earlier steps stay committed and the error of the failing
step is returned as is.
"""

from __future__ import annotations

from orgkit.core.models import Member, PartialMember, UserCreateOrgPayload
from orgkit.core.result import Result
from orgkit.managers.organizations import OrganizationManager
from orgkit.managers.roles import RoleManager
from orgkit.repositories.members import MemberRepository
from orgkit.repositories.organizations import OrganizationRepository


class MemberManager:
    """
    Orchestrates member, organization and role repositories.
    
    Usage:
        manager = MemberManager(member_repo, org_repo, org_manager, role_manager)
        member_id = (await manager.create(partial)).unwrap()
    """
    
    def __init__(
        self,
        member_repository: MemberRepository,
        org_repository: OrganizationRepository,
        org_manager: OrganizationManager,
        role_manager: RoleManager,
    ):
        self.member_repository = member_repository
        self.org_repository = org_repository
        self.org_manager = org_manager
        self.role_manager = role_manager
    
    async def create(self, partial_member: PartialMember) -> Result[str]:
        """
        Create a member of an existing organization.
        
        Returns:
            Id of the created member, or NOT_FOUND if the organization
            does not exist
        """
        org = await self.org_repository.find_by_id(partial_member.org_id)
        if org.is_err:
            return Result.fail(org.unwrap_err())
        
        return await self.member_repository.create(partial_member)
    
    async def read(self, member_id: str) -> Result[Member]:
        """Read a member by id, with its roles resolved."""
        return await self.member_repository.find_by_id(member_id)
    
    async def update(self, member: Member) -> Result[None]:
        """
        Replace a member's permissions and roles.
        
        Two separate writes: if the roles write fails after the
        permissions write succeeded, the permissions stay updated and
        the roles error is returned.
        """
        permissions = await self.member_repository.set_permissions(member.id, member.permissions)
        if permissions.is_err:
            return permissions
        
        role_ids = [role.id for role in member.roles]
        return await self.member_repository.set_roles(member.id, role_ids)
    
    async def read_members_by_user_id(self, user_id: str) -> Result[list[Member]]:
        """
        All memberships of a user, each with its organization's name.
        
        Any failed organization lookup fails the whole batch.
        """
        found = await self.member_repository.find_by_user_id(user_id)
        if found.is_err:
            return found
        
        members = found.unwrap()
        for member in members:
            org = await self.org_repository.find_by_id(member.org_id)
            if org.is_err:
                return Result.fail(org.unwrap_err())
            member.org_name = org.unwrap().name
        
        return Result.ok(members)
    
    async def user_create_org(self, payload: UserCreateOrgPayload) -> Result[str]:
        """
        Create an organization and make the user its administrator.
        
        Steps: create organization → fetch admin role → create membership
        with the admin role and no extra permissions.
        
        Returns:
            Id of the created membership
        """
        created = await self.org_manager.create(payload.org)
        if created.is_err:
            return Result.fail(created.unwrap_err())
        
        admin_role = await self.role_manager.get_admin_role()
        if admin_role.is_err:
            return Result.fail(admin_role.unwrap_err())
        
        partial_member = PartialMember(
            org_id=created.unwrap(),
            user_id=payload.user_id,
            permissions=[],
            roles=[admin_role.unwrap()],
        )
        return await self.create(partial_member)
