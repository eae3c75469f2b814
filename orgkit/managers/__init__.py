"""
Managers orchestrate repositories and enforce invariants.
"""

from orgkit.managers.organizations import OrganizationManager
from orgkit.managers.roles import RoleManager
from orgkit.managers.members import MemberManager

__all__ = [
    "OrganizationManager",
    "RoleManager",
    "MemberManager",
]
