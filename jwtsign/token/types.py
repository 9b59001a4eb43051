"""Type definitions for token signing and verification."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict


class SigningOptions(BaseModel):
    """Header extras and registered claims stamped at signing time."""

    kid: str | None = None
    expires_in: int | timedelta | None = None
    not_before: int | timedelta | None = None
    issuer: str | None = None
    audience: str | list[str] | None = None
    subject: str | None = None
    jwt_id: str | None = None
    issued_at: bool | datetime = False


class ParsedToken(BaseModel):
    """Compact token split and decoded, signature not yet checked."""

    header: dict[str, Any]
    claims: dict[str, Any]
    signature: bytes
    signing_input: bytes


class VerifiedToken(BaseModel):
    """Header and claims of a token that passed every check."""

    header: dict[str, Any]
    claims: dict[str, Any]
    signature: bytes


class TokenClaims(BaseModel):
    """Claims bundle for JWTManager token creation."""

    sub: str
    aud: str | list[str] | None = None
    jti: str | None = None
    ttl_seconds: int = 3600
    extra: dict[str, Any] = {}


class DecodedToken(BaseModel):
    """Decoded and verified JWT claims."""

    model_config = ConfigDict(extra="allow")

    sub: str = ""
    iss: str = ""
    aud: str | list[str] = ""
    exp: int | float | None = None
    nbf: int | float | None = None
    iat: int | float | None = None
    jti: str | None = None
