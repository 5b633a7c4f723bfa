"""
Blog API - Bearer Token Verification
======================================

What:  Extracts the bearer token from an Authorization header and verifies it.
How:   The token header's "kid" picks a key from the JwksClient; PyJWT then
       checks the RS256 signature, the issuer, expiry and (optionally) audience.

Failure messages (all raised as AuthenticationError, 401):
    - header missing                  → "No authorization token was found"
    - header not "Bearer <token>"     → "Format is Authorization: Bearer [token]"
    - token unparseable               → PyJWT decode message
    - alg other than RS256            → "Invalid algorithm"
    - signature / issuer / expiry     → PyJWT message ("Invalid issuer", ...)
    - key lookup failures             → JwksClient message
"""

import logging
from typing import Any, Dict, Optional

import httpx
import jwt

from blog_api.config import Settings
from blog_api.exceptions import AuthenticationError
from blog_api.services.jwks_client import JwksClient

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token part of an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        raise AuthenticationError("No authorization token was found")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Format is Authorization: Bearer [token]")

    return parts[1]


class TokenVerifier:
    """
    Verifies RS256 bearer tokens issued by the configured identity provider.

    A verifier built without a JwksClient (no AUTH_DOMAIN configured) rejects
    every token.
    """

    ALGORITHMS = ["RS256"]

    def __init__(
        self,
        jwks_client: Optional[JwksClient],
        issuer: str,
        audience: Optional[str] = None,
    ):
        self.jwks_client = jwks_client
        self.issuer = issuer
        self.audience = audience

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "TokenVerifier":
        jwks_client = None
        if settings.auth_domain:
            jwks_client = JwksClient(
                jwks_url=settings.jwks_url,
                cache_ttl=settings.jwks_cache_ttl,
                requests_per_minute=settings.jwks_requests_per_minute,
                timeout=settings.jwks_request_timeout,
                http_client=http_client,
            )
        return cls(
            jwks_client=jwks_client,
            issuer=settings.auth_issuer,
            audience=settings.auth_audience,
        )

    async def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify token and return its claims.

        Raises:
            AuthenticationError: for every verification failure
        """
        if self.jwks_client is None:
            raise AuthenticationError("Authentication is not configured on this server")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise AuthenticationError(str(e)) from e

        if header.get("alg") not in self.ALGORITHMS:
            raise AuthenticationError(
                "Invalid algorithm",
                context={"alg": header.get("alg")},
            )

        kid = header.get("kid")
        if not kid:
            raise AuthenticationError("Token header is missing 'kid'")

        signing_key = await self.jwks_client.get_signing_key(kid)

        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=self.ALGORITHMS,
                issuer=self.issuer,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.PyJWTError as e:
            raise AuthenticationError(str(e), context={"kid": kid}) from e

        logger.debug("Token verified for subject %s", claims.get("sub"))
        return claims

    async def close(self) -> None:
        if self.jwks_client is not None:
            await self.jwks_client.close()
