"""JWT issuance and verification bound to one key, algorithm and issuer."""

import time
from collections.abc import Callable

from jwtsign.core.settings import JWTSettings
from jwtsign.crypto.algorithms import Algorithm, coerce_algorithm
from jwtsign.crypto.types import KeyMaterial
from jwtsign.token import jwt
from jwtsign.token.types import DecodedToken, TokenClaims

ACCESS_TOKEN_DEFAULT_TTL = 3600


class JWTManager:
    """Creates and verifies tokens signed with a single algorithm."""

    def __init__(
        self,
        key: KeyMaterial,
        algorithm: str | Algorithm,
        issuer: str,
        kid: str | None = None,
        settings: JWTSettings | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._key = key
        self._algorithm = coerce_algorithm(algorithm)
        self._issuer = issuer
        self._kid = kid
        self._settings = settings or JWTSettings()
        self._now = now

    def create_token(self, claims: TokenClaims) -> str:
        """Create a signed token stamped with iss, iat and exp."""
        now = int(self._now())
        ttl = claims.ttl_seconds or ACCESS_TOKEN_DEFAULT_TTL
        payload = {
            "iss": self._issuer,
            "sub": claims.sub,
            "iat": now,
            "exp": now + ttl,
        }
        if claims.aud is not None:
            payload["aud"] = claims.aud
        if claims.jti is not None:
            payload["jti"] = claims.jti
        for name, value in claims.extra.items():
            payload.setdefault(name, value)
        headers = {"kid": self._kid} if self._kid is not None else None
        return jwt.encode(
            payload,
            self._key,
            algorithm=self._algorithm,
            headers=headers,
            settings=self._settings,
        )

    def verify_token(self, token: str, audience: str | None = None) -> DecodedToken:
        """Verify a token issued by this manager and decode its claims."""
        raw = jwt.decode(
            token,
            self._key,
            algorithms=[self._algorithm],
            issuer=self._issuer,
            audience=audience,
            now=self._now,
            settings=self._settings,
        )
        return DecodedToken.model_validate(raw)
