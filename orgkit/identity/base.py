"""
Identity provider interface.

The identity provider owns users and credentials. orgkit only signs
users up, logs them in, and forwards password reset and token refresh
requests to it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orgkit.core.models import (
    ForgotPasswordPayload,
    LoginPayload,
    LoginSuccessPayload,
    SignUpPayload,
)
from orgkit.core.result import Result


class IdentityProvider(ABC):
    """
    External authentication service.
    
    Every call is time-bounded. Implementations report:
    - TIMED_OUT when the deadline is exceeded
    - INVALID_DATA when the provider rejects the caller (bad credentials)
    - SERVICE_ERROR for any other provider, network or decoding failure
    """
    
    @abstractmethod
    async def sign_up(self, payload: SignUpPayload) -> Result[str]:
        """Sign up a user. Returns the provider-namespaced user id."""
        pass
    
    @abstractmethod
    async def login(self, payload: LoginPayload) -> Result[LoginSuccessPayload]:
        """Exchange credentials for tokens."""
        pass
    
    @abstractmethod
    async def forgot_password(self, payload: ForgotPasswordPayload) -> Result[None]:
        """Begin the password reset flow."""
        pass
    
    @abstractmethod
    async def refresh_token(self, refresh_token: str) -> Result[LoginSuccessPayload]:
        """Exchange a refresh token for fresh tokens."""
        pass
