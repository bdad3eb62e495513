"""JWT authentication provider implementation.

Verifies identity-provider tokens signed with ES256 (public keys from the
provider's JWKS endpoint) and locally signed HS256 tokens used in tests.

Expected payload:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "aud": "authenticated",
        "user_metadata": {"full_name": "Jane", "avatar_url": "https://..."},
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


class JWKSCache:
    """Lazily fetched ``kid -> JWK`` mapping, refreshed on unknown key IDs."""

    def __init__(self, url: str) -> None:
        self._url = url
        self._keys: dict[str, dict[str, Any]] | None = None

    async def get(self, kid: str) -> dict[str, Any] | None:
        if self._keys is None:
            self._keys = await self._fetch()
        key = self._keys.get(kid)
        if key is None:
            # The provider may have rotated its signing keys
            self._keys = await self._fetch()
            key = self._keys.get(kid)
        return key

    def clear(self) -> None:
        self._keys = None

    async def _fetch(self) -> dict[str, dict[str, Any]]:
        if not self._url:
            return {}
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._url, timeout=10.0)
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to fetch JWKS from %s", self._url)
            return {}

        keys = {k["kid"]: k for k in response.json().get("keys", []) if k.get("kid")}
        logger.info("Fetched %d JWKS keys", len(keys))
        return keys


_jwks_cache = JWKSCache(settings.supabase_jwks_url)


def _metadata_value(payload: dict[str, Any], *names: str) -> Optional[str]:
    metadata = payload.get("user_metadata") or {}
    for name in names:
        value = metadata.get(name) or payload.get(name)
        if value:
            return str(value)
    return None


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        audience: str = settings.jwt_audience,
        jwks: JWKSCache | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._audience = audience
        self._jwks = jwks or _jwks_cache

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the caller's identity.

        The signing algorithm is read from the token header: ES256 tokens are
        checked against the JWKS public key, anything else against the shared
        secret with the configured algorithm.

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    **self._audience_kwargs(),
                )
        except JWTError:
            return None

        if payload is None:
            return None

        sub = payload.get("sub")
        email = payload.get("email")
        if not sub or not email:
            return None

        try:
            user_id = UUID(sub)
        except ValueError:
            return None

        return TokenUser(
            id=user_id,
            email=email,
            full_name=_metadata_value(payload, "full_name", "name", "display_name"),
            avatar_url=_metadata_value(payload, "avatar_url", "picture"),
            role=payload.get("role"),
        )

    def _audience_kwargs(self) -> dict[str, Any]:
        if self._audience:
            return {"audience": self._audience}
        return {"options": {"verify_aud": False}}

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = await self._jwks.get(kid)
        if not key_data:
            logger.warning("JWKS key not found for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            **self._audience_kwargs(),
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for a user (used by tests)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": self._audience or "authenticated",
            "role": "authenticated",
            "exp": expire,
            "user_metadata": {
                "full_name": user.full_name,
                "avatar_url": user.avatar_url,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
