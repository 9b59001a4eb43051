"""Tests for registered claim validation."""

from datetime import UTC, datetime, timedelta

import pytest

from jwtsign.core.errors import (
    AudienceMismatch,
    IssuerMismatch,
    MalformedToken,
    MissingRequiredClaim,
    SubjectMismatch,
    TokenExpired,
    TokenNotYetValid,
)
from jwtsign.token.claims import ClaimsValidator, to_numeric_date

NOW = 1_700_000_000


def _validator(**kwargs) -> ClaimsValidator:
    return ClaimsValidator(now=lambda: NOW, **kwargs)


class TestTimeClaims:
    """Tests for exp and nbf."""

    def test_expired(self) -> None:
        with pytest.raises(TokenExpired):
            _validator().validate({"exp": NOW - 1})

    def test_expiry_boundary_is_inclusive(self) -> None:
        _validator().validate({"exp": NOW})

    def test_future_expiry_accepted(self) -> None:
        _validator().validate({"exp": NOW + 3600})

    def test_leeway_extends_expiry(self) -> None:
        _validator(leeway=30).validate({"exp": NOW - 30})
        with pytest.raises(TokenExpired):
            _validator(leeway=30).validate({"exp": NOW - 31})

    def test_leeway_accepts_timedelta(self) -> None:
        _validator(leeway=timedelta(minutes=1)).validate({"exp": NOW - 60})

    def test_not_yet_valid(self) -> None:
        with pytest.raises(TokenNotYetValid):
            _validator().validate({"nbf": NOW + 1})

    def test_nbf_boundary_and_leeway(self) -> None:
        _validator().validate({"nbf": NOW})
        _validator(leeway=10).validate({"nbf": NOW + 10})

    def test_float_dates(self) -> None:
        _validator().validate({"exp": NOW + 0.5, "nbf": NOW - 0.5, "iat": NOW - 0.5})

    @pytest.mark.parametrize("claim", ["exp", "nbf", "iat"])
    @pytest.mark.parametrize("value", ["1700000000", True, None, [NOW]])
    def test_non_numeric_dates_rejected(self, claim: str, value: object) -> None:
        with pytest.raises(MalformedToken):
            _validator().validate({claim: value})

    def test_absent_dates_are_fine(self) -> None:
        _validator().validate({"sub": "alice"})


class TestIssuer:
    """Tests for iss matching."""

    def test_match(self) -> None:
        _validator(issuer="https://issuer").validate({"iss": "https://issuer"})

    def test_mismatch(self) -> None:
        with pytest.raises(IssuerMismatch):
            _validator(issuer="https://issuer").validate({"iss": "https://evil"})

    def test_missing(self) -> None:
        with pytest.raises(IssuerMismatch):
            _validator(issuer="https://issuer").validate({})

    def test_any_of_several(self) -> None:
        _validator(issuer=["a", "b"]).validate({"iss": "b"})

    def test_unchecked_without_expectation(self) -> None:
        _validator().validate({"iss": "anyone"})


class TestAudience:
    """Tests for aud matching."""

    def test_string_claim(self) -> None:
        _validator(audience="api").validate({"aud": "api"})

    def test_list_claim_contains_expected(self) -> None:
        _validator(audience="api").validate({"aud": ["web", "api"]})

    def test_any_expected_audience(self) -> None:
        _validator(audience=["mobile", "web"]).validate({"aud": ["web"]})

    def test_mismatch(self) -> None:
        with pytest.raises(AudienceMismatch):
            _validator(audience="api").validate({"aud": ["web"]})

    def test_missing(self) -> None:
        with pytest.raises(AudienceMismatch):
            _validator(audience="api").validate({})

    def test_malformed_claim(self) -> None:
        with pytest.raises(AudienceMismatch):
            _validator(audience="api").validate({"aud": ["api", 3]})

    def test_unchecked_without_expectation(self) -> None:
        _validator().validate({"aud": "someone-else"})


class TestSubject:
    """Tests for sub matching."""

    def test_match(self) -> None:
        _validator(subject="alice").validate({"sub": "alice"})

    def test_mismatch(self) -> None:
        with pytest.raises(SubjectMismatch):
            _validator(subject="alice").validate({"sub": "bob"})


class TestRequired:
    """Tests for required claims."""

    def test_missing_required_claim(self) -> None:
        with pytest.raises(MissingRequiredClaim) as exc_info:
            _validator(required=["exp", "jti"]).validate({"exp": NOW + 1})
        assert exc_info.value.claim == "jti"

    def test_present_required_claims(self) -> None:
        _validator(required=["jti"]).validate({"jti": "abc"})


def test_to_numeric_date() -> None:
    moment = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
    assert to_numeric_date(moment) == NOW
    assert to_numeric_date(NOW) == NOW
