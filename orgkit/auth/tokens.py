# =============================================================================
# Bearer Token Verification
# =============================================================================
#
# Tokens are issued by the identity provider; orgkit only verifies them:
#   - RS256 with keys from the authority's JWKS endpoint (production)
#   - HS256 with a shared secret when JWT_SECRET_KEY is set (development)
#
# =============================================================================

import logging
from typing import Any

import jwt

from orgkit.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


# =============================================================================
# Verifier
# =============================================================================

class TokenVerifier:
    """
    Decode and validate bearer tokens.
    
    Constructed once at startup; the JWKS client caches signing keys.
    """

    SHARED_SECRET_ALGORITHM = "HS256"

    def __init__(
        self,
        audience: str = "",
        secret_key: str = "",
        algorithm: str = "RS256",
        jwks_client: jwt.PyJWKClient | None = None,
    ):
        if not secret_key and jwks_client is None:
            raise ValueError("TokenVerifier needs either a secret key or a JWKS client")

        self.audience = audience
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.jwks_client = jwks_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        if settings.jwt_secret_key:
            return cls(
                audience=settings.identity_provider_audience,
                secret_key=settings.jwt_secret_key,
            )

        return cls(
            audience=settings.identity_provider_audience,
            algorithm=settings.jwt_algorithm,
            jwks_client=jwt.PyJWKClient(settings.jwks_url),
        )

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a bearer token.
        
        Returns:
            The token payload
        
        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Token is invalid or its key cannot be resolved
        """
        try:
            if self.secret_key:
                key: Any = self.secret_key
                algorithms = [self.SHARED_SECRET_ALGORITHM]
            else:
                key = self.jwks_client.get_signing_key_from_jwt(token).key
                algorithms = [self.algorithm]

            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=self.audience or None,
                options={"verify_aud": bool(self.audience)},
            )

        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.PyJWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise TokenInvalidError(f"Invalid token: {e}")
