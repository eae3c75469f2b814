"""
Core building blocks: models, results, validation.
"""

from orgkit.core.models import (
    Address,
    Organization,
    PartialOrganization,
    Role,
    PartialRole,
    Member,
    PartialMember,
    SignUpPayload,
    LoginPayload,
    ForgotPasswordPayload,
    RefreshTokenPayload,
    RegisterCreatingOrgPayload,
    UserCreateOrgPayload,
    LoginSuccessPayload,
    WrappedResult,
)
from orgkit.core.result import Error, ErrorKind, Result, ResultError
from orgkit.core.validation import is_email_valid, is_password_valid
from orgkit.core.utils import generate_id, utc_now

__all__ = [
    # Models
    "Address",
    "Organization",
    "PartialOrganization",
    "Role",
    "PartialRole",
    "Member",
    "PartialMember",
    # Payloads
    "SignUpPayload",
    "LoginPayload",
    "ForgotPasswordPayload",
    "RefreshTokenPayload",
    "RegisterCreatingOrgPayload",
    "UserCreateOrgPayload",
    "LoginSuccessPayload",
    "WrappedResult",
    # Results
    "Error",
    "ErrorKind",
    "Result",
    "ResultError",
    # Validation
    "is_email_valid",
    "is_password_valid",
    # Utils
    "generate_id",
    "utc_now",
]
