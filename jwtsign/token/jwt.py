"""Sign and verify JWTs in the JWS Compact Serialization.

Verification is a single fail-fast pass: parse, decode segments, check the
header ``alg`` against the caller's allowlist, verify the signature, then
validate claims. The allowlist is always supplied by the caller; the token's
own header never selects the algorithm on its own, and ``none`` is honoured
only when it is explicitly listed.
"""

import time
from collections.abc import Collection, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from jwtsign.core.errors import AlgorithmMismatch, JWTError, SignatureInvalid
from jwtsign.core.logging import get_logger
from jwtsign.core.settings import JWTSettings
from jwtsign.crypto import engine
from jwtsign.crypto.algorithms import Algorithm, coerce_algorithm, coerce_allowlist
from jwtsign.crypto.types import KeyMaterial
from jwtsign.token import compact
from jwtsign.token.claims import (
    NUMERIC_DATE_CLAIMS,
    Clock,
    ClaimsValidator,
    to_numeric_date,
)
from jwtsign.token.types import SigningOptions, VerifiedToken

TOKEN_TYPE = "JWT"
RESERVED_HEADERS = ("alg", "typ")

logger = get_logger(__name__)


def _seconds(value: int | timedelta) -> int | float:
    return value.total_seconds() if isinstance(value, timedelta) else value


def build_header(
    algorithm: Algorithm,
    headers: Mapping[str, Any] | None = None,
    kid: str | None = None,
) -> dict[str, Any]:
    """Header with ``alg`` and ``typ`` first; extras cannot override them."""
    header: dict[str, Any] = {"alg": algorithm.value, "typ": TOKEN_TYPE}
    if kid is not None:
        header["kid"] = kid
    for name, value in (headers or {}).items():
        if name not in RESERVED_HEADERS:
            header[name] = value
    return header


def build_claims(
    payload: Mapping[str, Any],
    options: SigningOptions | None = None,
    now: float | None = None,
) -> dict[str, Any]:
    """Copy the payload, stamping registered claims from ``options``.

    Claims already present in the payload are kept as given.
    """
    claims = dict(payload)
    if options is not None:
        issued = time.time() if now is None else now
        if isinstance(options.issued_at, datetime):
            claims.setdefault("iat", to_numeric_date(options.issued_at))
        elif options.issued_at:
            claims.setdefault("iat", int(issued))
        if options.expires_in is not None:
            claims.setdefault("exp", int(issued + _seconds(options.expires_in)))
        if options.not_before is not None:
            claims.setdefault("nbf", int(issued + _seconds(options.not_before)))
        for name, value in (
            ("iss", options.issuer),
            ("aud", options.audience),
            ("sub", options.subject),
            ("jti", options.jwt_id),
        ):
            if value is not None:
                claims.setdefault(name, value)
    for name in NUMERIC_DATE_CLAIMS:
        if name in claims:
            claims[name] = to_numeric_date(claims[name])
    return claims


def encode(
    payload: Mapping[str, Any],
    key: KeyMaterial | None,
    algorithm: str | Algorithm = Algorithm.HS256,
    headers: Mapping[str, Any] | None = None,
    options: SigningOptions | None = None,
    *,
    settings: JWTSettings | None = None,
) -> str:
    """Sign ``payload`` and return the compact token string."""
    settings = settings or JWTSettings()
    alg = coerce_algorithm(algorithm)
    header = build_header(alg, headers, options.kid if options else None)
    claims = build_claims(payload, options)

    header_segment, payload_segment = compact.encode_segments(header, claims)
    signature = engine.sign(
        alg,
        key,
        compact.signing_input(header_segment, payload_segment),
        min_rsa_key_bits=settings.min_rsa_key_bits,
    )
    logger.debug("token_signed", alg=alg.value, kid=header.get("kid"))
    return compact.assemble(header_segment, payload_segment, signature)


def get_unverified_header(token: str | bytes) -> dict[str, Any]:
    """Decode the header without any verification; never trust the result."""
    return compact.parse_header(token)


def decode_complete(
    token: str | bytes,
    key: KeyMaterial | None,
    algorithms: Iterable[str | Algorithm],
    *,
    issuer: str | Collection[str] | None = None,
    audience: str | Iterable[str] | None = None,
    subject: str | None = None,
    leeway: float | timedelta | None = None,
    require: Iterable[str] | None = None,
    now: Clock = time.time,
    settings: JWTSettings | None = None,
) -> VerifiedToken:
    """Verify a token and return its header, claims and raw signature."""
    settings = settings or JWTSettings()
    try:
        allowed = coerce_allowlist(algorithms)
        parsed = compact.parse(token)

        declared = parsed.header["alg"]
        try:
            alg = coerce_algorithm(declared)
        except AlgorithmMismatch as exc:
            raise AlgorithmMismatch(f"token algorithm {declared!r} is not allowed") from exc
        if alg not in allowed:
            raise AlgorithmMismatch(f"token algorithm {declared!r} is not allowed")

        if not engine.verify(
            alg,
            key,
            parsed.signing_input,
            parsed.signature,
            min_rsa_key_bits=settings.min_rsa_key_bits,
        ):
            raise SignatureInvalid("signature verification failed")

        ClaimsValidator(
            leeway=settings.leeway_seconds if leeway is None else leeway,
            issuer=issuer,
            audience=audience,
            subject=subject,
            required=settings.required_claims if require is None else require,
            now=now,
        ).validate(parsed.claims)
    except JWTError as exc:
        logger.info("token_rejected", kind=exc.kind.value)
        raise

    return VerifiedToken(
        header=parsed.header, claims=parsed.claims, signature=parsed.signature
    )


def decode(
    token: str | bytes,
    key: KeyMaterial | None,
    algorithms: Iterable[str | Algorithm],
    **kwargs: Any,
) -> dict[str, Any]:
    """Verify a token and return its claims."""
    return decode_complete(token, key, algorithms, **kwargs).claims
