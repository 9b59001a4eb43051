"""Registered claim validation (RFC 7519 section 4.1)."""

import time
from collections.abc import Callable, Collection, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from jwtsign.core.errors import (
    AudienceMismatch,
    IssuerMismatch,
    MalformedToken,
    MissingRequiredClaim,
    SubjectMismatch,
    TokenExpired,
    TokenNotYetValid,
)

Clock = Callable[[], float]
NUMERIC_DATE_CLAIMS = ("exp", "nbf", "iat")


def _as_set(value: str | Iterable[str]) -> set[str]:
    if isinstance(value, str):
        return {value}
    return set(value)


def _numeric_date(claims: Mapping[str, Any], name: str) -> float | None:
    if name not in claims:
        return None
    value = claims[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedToken(f'"{name}" claim must be a number')
    return value


def to_numeric_date(value: datetime | int | float) -> int | float:
    """Convert a datetime to integer Unix seconds; numbers pass through."""
    if isinstance(value, datetime):
        return int(value.timestamp())
    return value


class ClaimsValidator:
    """Checks decoded claims against the clock and expected values."""

    def __init__(
        self,
        *,
        leeway: float | timedelta = 0,
        issuer: str | Collection[str] | None = None,
        audience: str | Iterable[str] | None = None,
        subject: str | None = None,
        required: Iterable[str] = (),
        now: Clock = time.time,
    ) -> None:
        if isinstance(leeway, timedelta):
            leeway = leeway.total_seconds()
        self._leeway = leeway
        self._issuer = issuer
        self._audience = None if audience is None else _as_set(audience)
        self._subject = subject
        self._required = tuple(required)
        self._now = now

    def validate(self, claims: Mapping[str, Any]) -> None:
        """Raise the first applicable ClaimValidationError, if any."""
        for name in self._required:
            if name not in claims:
                raise MissingRequiredClaim(name)

        exp = _numeric_date(claims, "exp")
        nbf = _numeric_date(claims, "nbf")
        _numeric_date(claims, "iat")

        now = self._now()
        if exp is not None and now > exp + self._leeway:
            raise TokenExpired(f"token expired at {exp}")
        if nbf is not None and now < nbf - self._leeway:
            raise TokenNotYetValid(f"token not valid before {nbf}")

        self._validate_issuer(claims)
        self._validate_audience(claims)
        self._validate_subject(claims)

    def _validate_issuer(self, claims: Mapping[str, Any]) -> None:
        if self._issuer is None:
            return
        iss = claims.get("iss")
        accepted = _as_set(self._issuer)
        if not isinstance(iss, str) or iss not in accepted:
            raise IssuerMismatch(f"unexpected issuer {iss!r}")

    def _validate_audience(self, claims: Mapping[str, Any]) -> None:
        if self._audience is None:
            return
        aud = claims.get("aud")
        if isinstance(aud, str):
            presented = {aud}
        elif isinstance(aud, list) and all(isinstance(item, str) for item in aud):
            presented = set(aud)
        else:
            raise AudienceMismatch(f"invalid or missing audience {aud!r}")
        if presented.isdisjoint(self._audience):
            raise AudienceMismatch(f"token audience {aud!r} is not accepted")

    def _validate_subject(self, claims: Mapping[str, Any]) -> None:
        if self._subject is None:
            return
        sub = claims.get("sub")
        if sub != self._subject:
            raise SubjectMismatch(f"unexpected subject {sub!r}")
