"""
Shared utility functions for orgkit.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone


ID_LENGTH = 24


def generate_id() -> str:
    """
    Generate a unique document ID.
    
    Returns:
        A 24 character lowercase hex string like "653bf78afc1ba1ad481195c4"
    """
    return secrets.token_hex(ID_LENGTH // 2)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
