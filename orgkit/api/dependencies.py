"""
Application state and FastAPI dependencies.

Long-lived resources (store, HTTP client, identity provider) are created
once at startup; repositories and managers are cheap and built per
request on top of them.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, HTTPException

from orgkit.auth.authenticator import Authenticator
from orgkit.config import Settings, get_settings
from orgkit.identity.base import IdentityProvider
from orgkit.managers.members import MemberManager
from orgkit.managers.organizations import OrganizationManager
from orgkit.managers.roles import RoleManager
from orgkit.repositories.members import MemberRepository
from orgkit.repositories.organizations import OrganizationRepository
from orgkit.repositories.roles import RoleRepository
from orgkit.storage.base import MetadataStorage


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    storage: MetadataStorage
    http_client: httpx.AsyncClient
    identity_provider: IdentityProvider


state = AppState()


# =============================================================================
# Dependencies
# =============================================================================


def get_storage() -> MetadataStorage:
    return state.storage


def get_identity_provider() -> IdentityProvider:
    return state.identity_provider


def get_organization_repository(
    storage: MetadataStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> OrganizationRepository:
    return OrganizationRepository(storage, settings.repository_timeouts)


def get_role_repository(
    storage: MetadataStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> RoleRepository:
    return RoleRepository(storage, settings.repository_timeouts)


def get_member_repository(
    storage: MetadataStorage = Depends(get_storage),
    role_repository: RoleRepository = Depends(get_role_repository),
    settings: Settings = Depends(get_settings),
) -> MemberRepository:
    return MemberRepository(storage, role_repository, settings.repository_timeouts)


def get_organization_manager(
    repository: OrganizationRepository = Depends(get_organization_repository),
) -> OrganizationManager:
    return OrganizationManager(repository)


def get_role_manager(
    repository: RoleRepository = Depends(get_role_repository),
) -> RoleManager:
    return RoleManager(repository)


def get_member_manager(
    member_repository: MemberRepository = Depends(get_member_repository),
    org_repository: OrganizationRepository = Depends(get_organization_repository),
    org_manager: OrganizationManager = Depends(get_organization_manager),
    role_manager: RoleManager = Depends(get_role_manager),
) -> MemberManager:
    return MemberManager(member_repository, org_repository, org_manager, role_manager)


def get_authenticator(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    member_manager: MemberManager = Depends(get_member_manager),
) -> Authenticator:
    return Authenticator(identity_provider, member_manager)


def dev_only(settings: Settings = Depends(get_settings)) -> None:
    """Hide a route outside development environments."""
    if not settings.is_dev_environment:
        raise HTTPException(status_code=404, detail="Not Found")
