"""
Repositories over the document store.

Every call is timeout-bounded and returns a Result.
"""

from orgkit.repositories.base import Repository
from orgkit.repositories.organizations import OrganizationRepository
from orgkit.repositories.roles import RoleRepository
from orgkit.repositories.members import MemberRepository

__all__ = [
    "Repository",
    "OrganizationRepository",
    "RoleRepository",
    "MemberRepository",
]
