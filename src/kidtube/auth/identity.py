"""Bearer token verification against an external identity provider.

Tokens are issued elsewhere; this module only checks them and extracts the
owner id from the ``sub`` claim. Two verifiers are available:

- SharedSecretVerifier: HMAC-signed tokens checked with python-jose
- JWKSVerifier: asymmetric tokens checked with authlib against a remote JWKS
"""

import time
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import httpx
import structlog
from authlib.jose import JsonWebKey, jwt as authlib_jwt
from authlib.jose.errors import BadSignatureError, JoseError
from jose import JWTError, jwt

from kidtube.services.base import UpstreamUnavailableError

from .schemas import OwnerInfo

logger = structlog.get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a bearer token is missing, malformed, expired or unsigned."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)
        self.message = message


@runtime_checkable
class IdentityVerifier(Protocol):
    async def verify(self, token: str) -> OwnerInfo:
        ...


def _owner_from_claims(claims: Dict[str, Any]) -> OwnerInfo:
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise AuthenticationError("Token missing required 'sub' claim")
    return OwnerInfo(owner_id=subject)


class SharedSecretVerifier:
    """Verifies tokens signed with a shared secret (HS256 by default)."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience

    async def verify(self, token: str) -> OwnerInfo:
        """
        Decode and validate a token.

        Raises:
            AuthenticationError: If the signature, expiry, issuer, audience
                or subject is invalid
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.warning("token_rejected", verifier="shared_secret", error=str(e))
            raise AuthenticationError() from e

        return _owner_from_claims(claims)


class JWKSVerifier:
    """
    Verifies tokens against the identity provider's published signing keys.

    The key set is cached for JWKS_TTL seconds. A token signed with a key
    missing from the cached set triggers one forced refetch before it is
    rejected.
    """

    JWKS_TTL = 3600

    def __init__(
        self,
        jwks_url: str,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        algorithms: Optional[List[str]] = None,
        timeout: float = 10,
    ):
        self.jwks_url = jwks_url
        self.issuer = issuer
        self.audience = audience
        self.algorithms = algorithms or ["RS256"]
        self.timeout = timeout
        self._jwks: Optional[Dict[str, Any]] = None
        self._jwks_fetched_at: float = 0.0

    async def _fetch_jwks(self, force: bool = False) -> Dict[str, Any]:
        now = time.monotonic()
        if not force and self._jwks is not None and (now - self._jwks_fetched_at) < self.JWKS_TTL:
            return self._jwks

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.jwks_url)
                resp.raise_for_status()
                jwks = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("jwks_fetch_failed", url=self.jwks_url, error=str(e))
            raise UpstreamUnavailableError(
                "Identity provider is unavailable", upstream="identity"
            ) from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys"), list):
            logger.error("jwks_malformed", url=self.jwks_url, body_type=type(jwks).__name__)
            raise UpstreamUnavailableError(
                "Identity provider returned a malformed key set", upstream="identity"
            )

        self._jwks = jwks
        self._jwks_fetched_at = now
        logger.debug("jwks_fetched", url=self.jwks_url, keys=len(jwks.get("keys", [])))
        return jwks

    def _claims_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"sub": {"essential": True}}
        if self.issuer:
            options["iss"] = {"essential": True, "value": self.issuer}
        if self.audience:
            options["aud"] = {"essential": True, "value": self.audience}
        return options

    def _decode(self, token: str, jwks: Dict[str, Any]) -> Dict[str, Any]:
        keyset = JsonWebKey.import_key_set(jwks)
        claims = authlib_jwt.decode(token, keyset, claims_options=self._claims_options())
        if claims.header.get("alg") not in self.algorithms:
            raise AuthenticationError("Token signed with a disallowed algorithm")
        claims.validate()
        return dict(claims)

    async def verify(self, token: str) -> OwnerInfo:
        """
        Decode and validate a token against the cached key set.

        Raises:
            AuthenticationError: If the token is invalid
            UpstreamUnavailableError: If the key set cannot be fetched
        """
        jwks = await self._fetch_jwks()
        try:
            try:
                claims = self._decode(token, jwks)
            except (BadSignatureError, KeyError, ValueError):
                # Signing key may have rotated
                logger.info("jwks_key_not_found_retrying")
                jwks = await self._fetch_jwks(force=True)
                claims = self._decode(token, jwks)
        except (JoseError, KeyError, ValueError) as e:
            logger.warning("token_rejected", verifier="jwks", error=str(e))
            raise AuthenticationError() from e

        return _owner_from_claims(claims)


def create_verifier(
    jwt_secret: Optional[str] = None,
    jwt_algorithm: str = "HS256",
    jwks_url: Optional[str] = None,
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
) -> IdentityVerifier:
    """
    Build the verifier for the configured identity provider.

    A JWKS URL takes precedence over a shared secret.

    Raises:
        ValueError: If neither jwks_url nor jwt_secret is given
    """
    if jwks_url:
        return JWKSVerifier(jwks_url, issuer=issuer, audience=audience)
    if jwt_secret:
        return SharedSecretVerifier(
            jwt_secret, algorithm=jwt_algorithm, issuer=issuer, audience=audience
        )
    raise ValueError("Either a JWKS URL or a JWT secret is required to verify tokens")
