"""
Member repository.

Persisted member documents reference roles by id; reads resolve them
back into full Role objects through the RoleRepository.
"""

from __future__ import annotations

from typing import Any

from orgkit.config import RepositoryTimeouts
from orgkit.core.models import Member, PartialMember
from orgkit.core.result import ErrorKind, Result
from orgkit.core.utils import generate_id
from orgkit.repositories.base import Repository
from orgkit.repositories.roles import RoleRepository
from orgkit.storage.base import Collections, MetadataStorage


class MemberRepository(Repository):
    collection = Collections.MEMBERS
    
    def __init__(
        self,
        storage: MetadataStorage,
        role_repository: RoleRepository,
        timeouts: RepositoryTimeouts | None = None,
    ):
        super().__init__(storage, timeouts)
        self.role_repository = role_repository
    
    async def create(self, partial_member: PartialMember) -> Result[str]:
        member_id = generate_id()
        doc = {
            "org_id": partial_member.org_id,
            "user_id": partial_member.user_id,
            "permissions": list(partial_member.permissions),
            "roles": [role.id for role in partial_member.roles],
        }
        saved = await self._bounded(
            self.storage.save(self.collection, member_id, doc),
            self.timeouts.create,
            "creating member",
        )
        if saved.is_err:
            return Result.fail(saved.unwrap_err())
        
        return Result.ok(member_id)
    
    async def find_by_id(self, member_id: str) -> Result[Member]:
        found = await self._bounded(
            self.storage.get(self.collection, member_id),
            self.timeouts.find_by_id,
            "finding member by id",
        )
        if found.is_err:
            return Result.fail(found.unwrap_err())
        
        doc = found.unwrap()
        if doc is None:
            return Result.err(ErrorKind.NOT_FOUND, f"could not find member by id '{member_id}'")
        
        return await self._to_member(doc)
    
    async def find_by_user_id(self, user_id: str) -> Result[list[Member]]:
        """All memberships of a user, across organizations."""
        found = await self._bounded(
            # No realistic user belongs to more organizations than this
            self.storage.query(self.collection, {"user_id": user_id}, limit=1000),
            self.timeouts.find_by_user_id,
            "finding members by user id",
        )
        if found.is_err:
            return Result.fail(found.unwrap_err())
        
        members: list[Member] = []
        for doc in found.unwrap():
            member = await self._to_member(doc)
            if member.is_err:
                return Result.fail(member.unwrap_err())
            members.append(member.unwrap())
        
        return Result.ok(members)
    
    async def set_permissions(self, member_id: str, permissions: list[str]) -> Result[None]:
        return await self._set(member_id, {"permissions": list(permissions)},
                               self.timeouts.set_permissions, "setting permissions")
    
    async def set_roles(self, member_id: str, role_ids: list[str]) -> Result[None]:
        return await self._set(member_id, {"roles": list(role_ids)},
                               self.timeouts.set_roles, "setting roles")
    
    async def _set(
        self,
        member_id: str,
        fields: dict[str, Any],
        timeout: float,
        action: str,
    ) -> Result[None]:
        """NOT_FOUND means no document matched; an unchanged match still succeeds."""
        updated = await self._bounded(
            self.storage.update(self.collection, member_id, fields),
            timeout,
            action,
        )
        if updated.is_err:
            return Result.fail(updated.unwrap_err())
        
        if not updated.unwrap():
            return Result.err(ErrorKind.NOT_FOUND, f"member with id '{member_id}' not found")
        
        return Result.ok(None)
    
    async def _to_member(self, doc: dict[str, Any]) -> Result[Member]:
        roles = await self.role_repository.find_by_ids(doc.get("roles", []))
        if roles.is_err:
            return Result.fail(roles.unwrap_err())
        
        return Result.ok(Member(
            id=doc["_id"],
            org_id=doc["org_id"],
            user_id=doc["user_id"],
            permissions=doc.get("permissions", []),
            roles=roles.unwrap(),
        ))
