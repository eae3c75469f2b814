"""
Input validation.

Pure predicates: no side effects, never raise.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email


MIN_PASSWORD_LENGTH = 8


def is_email_valid(email: str | None) -> bool:
    """Check mailbox syntax (no DNS/deliverability lookups)."""
    if not email:
        return False
    
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    
    return True


def is_password_valid(password: str | None) -> bool:
    if password is None:
        return False
    
    return len(password) >= MIN_PASSWORD_LENGTH
