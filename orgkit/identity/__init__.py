"""
Identity provider adapters.
"""

from orgkit.identity.base import IdentityProvider
from orgkit.identity.auth0 import Auth0Provider

__all__ = [
    "IdentityProvider",
    "Auth0Provider",
]
