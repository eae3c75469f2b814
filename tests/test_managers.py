"""
Tests for managers.

Compound operations are not transactional: a failing step leaves the
earlier steps committed and reports its own error.
"""

import pytest

from orgkit.core.models import Member, PartialMember, PartialRole, UserCreateOrgPayload
from orgkit.core.result import ErrorKind
from orgkit.managers import MemberManager, OrganizationManager, RoleManager
from orgkit.managers.roles import DEFAULT_ADMIN_ROLE_NAME
from orgkit.repositories import MemberRepository, OrganizationRepository, RoleRepository
from orgkit.storage import Collections, InMemoryMetadataStorage


class RolesWriteFailsStorage(InMemoryMetadataStorage):
    """Accepts every write except updates of a member's roles."""

    async def update(self, collection, id, updates):
        if collection == Collections.MEMBERS and "roles" in updates:
            raise ConnectionError("roles write lost")
        return await super().update(collection, id, updates)


def build_member_manager(storage, role_storage=None):
    role_repository = RoleRepository(role_storage or storage)
    org_repository = OrganizationRepository(storage)
    return MemberManager(
        MemberRepository(storage, role_repository),
        org_repository,
        OrganizationManager(org_repository),
        RoleManager(role_repository),
    )


# =============================================================================
# Organization Manager
# =============================================================================


class TestOrganizationManager:
    @pytest.mark.asyncio
    async def test_create_discards_permissions(self, org_manager, org_repository, partial_org):
        org_id = (await org_manager.create(partial_org)).unwrap()

        org = (await org_repository.find_by_id(org_id)).unwrap()
        assert org.permissions == []

    @pytest.mark.asyncio
    async def test_create_leaves_payload_untouched(self, org_manager, partial_org):
        await org_manager.create(partial_org)

        assert partial_org.permissions == ["x"]


# =============================================================================
# Role Manager
# =============================================================================


class TestRoleManager:
    @pytest.mark.asyncio
    async def test_ensure_admin_role_creates_once(self, role_manager, storage):
        first = (await role_manager.ensure_admin_role()).unwrap()
        second = (await role_manager.ensure_admin_role()).unwrap()

        assert first.id == second.id
        assert first.name == DEFAULT_ADMIN_ROLE_NAME
        assert len(await storage.query(Collections.ROLES)) == 1

    @pytest.mark.asyncio
    async def test_ensure_admin_role_keeps_existing(self, role_manager, role_repository):
        existing = (await role_repository.create(PartialRole(name="Owner", default_admin=True))).unwrap()

        role = (await role_manager.ensure_admin_role()).unwrap()

        assert role.id == existing
        assert role.name == "Owner"

    @pytest.mark.asyncio
    async def test_ensure_admin_role_propagates_failures(self, broken_storage):
        manager = RoleManager(RoleRepository(broken_storage))

        result = await manager.ensure_admin_role()

        assert result.unwrap_err().kind == ErrorKind.SERVICE_ERROR


# =============================================================================
# Member Manager
# =============================================================================


class TestMemberManager:
    @pytest.mark.asyncio
    async def test_end_to_end_membership(self, member_manager, partial_org):
        org_id = (await member_manager.org_manager.create(partial_org)).unwrap()
        member_id = (await member_manager.create(PartialMember(org_id=org_id, user_id="u1"))).unwrap()

        members = (await member_manager.read_members_by_user_id("u1")).unwrap()

        assert len(members) == 1
        assert members[0].id == member_id
        assert members[0].org_name == "A"

    @pytest.mark.asyncio
    async def test_create_requires_existing_org(self, member_manager, storage):
        result = await member_manager.create(PartialMember(org_id="missing", user_id="u1"))

        assert result.unwrap_err().kind == ErrorKind.NOT_FOUND
        assert await storage.query(Collections.MEMBERS) == []

    @pytest.mark.asyncio
    async def test_read(self, member_manager, partial_org):
        org_id = (await member_manager.org_manager.create(partial_org)).unwrap()
        member_id = (await member_manager.create(PartialMember(
            org_id=org_id, user_id="u1", permissions=["members.read"],
        ))).unwrap()

        member = (await member_manager.read(member_id)).unwrap()

        assert member.user_id == "u1"
        assert member.permissions == ["members.read"]

    @pytest.mark.asyncio
    async def test_update(self, member_manager, role_manager, partial_org):
        admin = (await role_manager.ensure_admin_role()).unwrap()
        org_id = (await member_manager.org_manager.create(partial_org)).unwrap()
        member_id = (await member_manager.create(PartialMember(org_id=org_id, user_id="u1"))).unwrap()

        updated = Member(id=member_id, org_id=org_id, user_id="u1", permissions=["a"], roles=[admin])
        assert (await member_manager.update(updated)).is_ok

        member = (await member_manager.read(member_id)).unwrap()
        assert member.permissions == ["a"]
        assert member.roles == [admin]

    @pytest.mark.asyncio
    async def test_update_missing_member(self, member_manager):
        member = Member(id="nope", org_id="org-1", user_id="u1")

        result = await member_manager.update(member)

        assert result.unwrap_err().kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_reports_roles_failure_after_permissions_applied(self, partial_org):
        storage = RolesWriteFailsStorage()
        manager = build_member_manager(storage)
        admin = (await manager.role_manager.ensure_admin_role()).unwrap()
        org_id = (await manager.org_manager.create(partial_org)).unwrap()
        member_id = (await manager.create(PartialMember(org_id=org_id, user_id="u1"))).unwrap()

        result = await manager.update(Member(
            id=member_id, org_id=org_id, user_id="u1", permissions=["a"], roles=[admin],
        ))

        assert result.unwrap_err().kind == ErrorKind.STORAGE_ERROR
        assert "roles write lost" in result.unwrap_err().message

        # The permissions write stays applied
        member = (await manager.read(member_id)).unwrap()
        assert member.permissions == ["a"]
        assert member.roles == []

    @pytest.mark.asyncio
    async def test_read_members_fails_whole_batch_on_missing_org(self, member_manager, storage, partial_org):
        org_id = (await member_manager.org_manager.create(partial_org)).unwrap()
        await member_manager.create(PartialMember(org_id=org_id, user_id="u1"))
        await storage.save(Collections.MEMBERS, "orphan", {
            "org_id": "deleted-org", "user_id": "u1", "permissions": [], "roles": [],
        })

        result = await member_manager.read_members_by_user_id("u1")

        assert result.unwrap_err().kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_read_members_of_unknown_user(self, member_manager):
        assert (await member_manager.read_members_by_user_id("nobody")).unwrap() == []

    @pytest.mark.asyncio
    async def test_user_create_org(self, member_manager, role_manager, partial_org):
        admin = (await role_manager.ensure_admin_role()).unwrap()

        member_id = (await member_manager.user_create_org(
            UserCreateOrgPayload(user_id="u1", org=partial_org)
        )).unwrap()

        member = (await member_manager.read(member_id)).unwrap()
        assert member.user_id == "u1"
        assert member.permissions == []
        assert member.roles == [admin]

        org = (await member_manager.org_repository.find_by_id(member.org_id)).unwrap()
        assert org.name == "A"
        assert org.permissions == []

    @pytest.mark.asyncio
    async def test_user_create_org_without_admin_role_keeps_org(self, member_manager, storage, partial_org):
        result = await member_manager.user_create_org(UserCreateOrgPayload(user_id="u1", org=partial_org))

        assert result.unwrap_err().kind == ErrorKind.NOT_FOUND

        # Not rolled back
        assert len(await storage.query(Collections.ORGANIZATIONS)) == 1
        assert await storage.query(Collections.MEMBERS) == []

    @pytest.mark.asyncio
    async def test_user_create_org_role_service_failure(self, storage, broken_storage, partial_org):
        manager = build_member_manager(storage, role_storage=broken_storage)

        result = await manager.user_create_org(UserCreateOrgPayload(user_id="u1", org=partial_org))

        assert result.unwrap_err().kind == ErrorKind.SERVICE_ERROR
        assert len(await storage.query(Collections.ORGANIZATIONS)) == 1
