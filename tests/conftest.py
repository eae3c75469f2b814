"""
Shared fixtures.
"""

import asyncio

import pytest

from orgkit.config import RepositoryTimeouts
from orgkit.core.models import Address, LoginSuccessPayload, PartialOrganization
from orgkit.core.result import Result
from orgkit.identity.base import IdentityProvider
from orgkit.managers import MemberManager, OrganizationManager, RoleManager
from orgkit.repositories import MemberRepository, OrganizationRepository, RoleRepository
from orgkit.storage import InMemoryMetadataStorage


# =============================================================================
# Storage doubles
# =============================================================================


class SlowStorage(InMemoryMetadataStorage):
    """Every call takes longer than any test deadline."""

    DELAY = 1.0

    async def save(self, collection, id, data):
        await asyncio.sleep(self.DELAY)
        return await super().save(collection, id, data)

    async def get(self, collection, id):
        await asyncio.sleep(self.DELAY)
        return await super().get(collection, id)

    async def get_many(self, collection, ids):
        await asyncio.sleep(self.DELAY)
        return await super().get_many(collection, ids)

    async def query(self, collection, filters=None, limit=100, offset=0):
        await asyncio.sleep(self.DELAY)
        return await super().query(collection, filters, limit, offset)

    async def update(self, collection, id, updates):
        await asyncio.sleep(self.DELAY)
        return await super().update(collection, id, updates)


class BrokenStorage(InMemoryMetadataStorage):
    """Every call fails as if the store were unreachable."""

    async def save(self, collection, id, data):
        raise ConnectionError("store unreachable")

    async def get(self, collection, id):
        raise ConnectionError("store unreachable")

    async def get_many(self, collection, ids):
        raise ConnectionError("store unreachable")

    async def query(self, collection, filters=None, limit=100, offset=0):
        raise ConnectionError("store unreachable")

    async def update(self, collection, id, updates):
        raise ConnectionError("store unreachable")


# =============================================================================
# Identity provider double
# =============================================================================


class FakeIdentityProvider(IdentityProvider):
    """Records calls; every call succeeds unless a result is swapped out."""

    def __init__(self):
        self.calls: list[str] = []
        self.sign_up_result = Result.ok("auth0|u1")
        self.login_result = Result.ok(LoginSuccessPayload(
            access_token="access", id_token="id", refresh_token="refresh", expires_in=3600,
        ))
        self.forgot_password_result = Result.ok(None)

    async def sign_up(self, payload):
        self.calls.append("sign_up")
        return self.sign_up_result

    async def login(self, payload):
        self.calls.append("login")
        return self.login_result

    async def forgot_password(self, payload):
        self.calls.append("forgot_password")
        return self.forgot_password_result

    async def refresh_token(self, refresh_token):
        self.calls.append("refresh_token")
        return self.login_result


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def storage():
    return InMemoryMetadataStorage()


@pytest.fixture
def slow_storage():
    return SlowStorage()


@pytest.fixture
def broken_storage():
    return BrokenStorage()


@pytest.fixture
def short_timeouts():
    """Deadlines well below SlowStorage.DELAY."""
    return RepositoryTimeouts(
        create=0.05,
        find_by_id=0.05,
        find_by_ids=0.05,
        find_by_user_id=0.05,
        get_admin_role=0.05,
        set_permissions=0.05,
        set_roles=0.05,
    )


@pytest.fixture
def address():
    return Address(
        country="Italy",
        province="MI",
        city="Milano",
        street="Via Roma",
        number="1",
        postal_code="20100",
    )


@pytest.fixture
def partial_org(address):
    """Organization "A", with client-supplied permissions."""
    return PartialOrganization(name="A", address=address, permissions=["x"])


@pytest.fixture
def org_repository(storage):
    return OrganizationRepository(storage)


@pytest.fixture
def role_repository(storage):
    return RoleRepository(storage)


@pytest.fixture
def member_repository(storage, role_repository):
    return MemberRepository(storage, role_repository)


@pytest.fixture
def org_manager(org_repository):
    return OrganizationManager(org_repository)


@pytest.fixture
def role_manager(role_repository):
    return RoleManager(role_repository)


@pytest.fixture
def member_manager(member_repository, org_repository, org_manager, role_manager):
    return MemberManager(member_repository, org_repository, org_manager, role_manager)


@pytest.fixture
def provider():
    return FakeIdentityProvider()
