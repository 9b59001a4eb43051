"""Tests for JWTManager token creation and verification."""

import pytest

from jwtsign.core.errors import (
    AlgorithmMismatch,
    AudienceMismatch,
    IssuerMismatch,
    SignatureInvalid,
    TokenExpired,
)
from jwtsign.crypto.algorithms import Algorithm
from jwtsign.crypto.keys import generate_ec_keypair, load_private_key_pem
from jwtsign.crypto.types import AsymmetricKey
from jwtsign.token import jwt
from jwtsign.token.jwt_manager import JWTManager
from jwtsign.token.types import TokenClaims

ISSUER = "http://localhost:8000"
NOW = 1_700_000_000


@pytest.fixture
def jwt_mgr(rsa_key: AsymmetricKey) -> JWTManager:
    """Create a JWTManager around the session RSA key."""
    return JWTManager(
        key=rsa_key,
        algorithm="RS256",
        issuer=ISSUER,
        kid="kid-1",
        now=lambda: NOW,
    )


class TestCreateToken:
    """Tests for token creation."""

    def test_creates_three_segment_token(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1", aud="client-1"))
        assert isinstance(token, str)
        assert token.count(".") == 2

    def test_token_has_kid_header(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1"))
        header = jwt.get_unverified_header(token)
        assert header == {"alg": "RS256", "typ": "JWT", "kid": "kid-1"}

    def test_token_contains_claims(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(
            TokenClaims(
                sub="user-1",
                aud="client-1",
                jti="token-1",
                ttl_seconds=120,
                extra={"scope": "openid profile", "iss": "ignored"},
            )
        )
        claims = jwt_mgr.verify_token(token, audience="client-1")
        assert claims.sub == "user-1"
        assert claims.aud == "client-1"
        assert claims.iss == ISSUER
        assert claims.iat == NOW
        assert claims.exp == NOW + 120
        assert claims.jti == "token-1"
        assert claims.model_extra == {"scope": "openid profile"}


class TestVerifyToken:
    """Tests for token verification."""

    def test_expired_token_rejected(self, rsa_key: AsymmetricKey) -> None:
        issuer = JWTManager(rsa_key, Algorithm.RS256, ISSUER, now=lambda: NOW)
        verifier = JWTManager(rsa_key, Algorithm.RS256, ISSUER, now=lambda: NOW + 61)
        token = issuer.create_token(TokenClaims(sub="user-1", ttl_seconds=60))
        with pytest.raises(TokenExpired):
            verifier.verify_token(token)

    def test_negative_ttl_is_already_expired(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1", ttl_seconds=-1))
        with pytest.raises(TokenExpired):
            jwt_mgr.verify_token(token)

    def test_wrong_key_rejected(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1"))
        other = generate_ec_keypair(Algorithm.ES256)
        other_mgr = JWTManager(
            key=load_private_key_pem(other.private_key_pem),
            algorithm="ES256",
            issuer=ISSUER,
            now=lambda: NOW,
        )
        with pytest.raises(AlgorithmMismatch):
            other_mgr.verify_token(token)

    def test_forged_signature_rejected(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1"))
        header, payload, signature = token.split(".")
        forged = signature[:-2] + ("AA" if signature[-2:] != "AA" else "BA")
        with pytest.raises(SignatureInvalid):
            jwt_mgr.verify_token(f"{header}.{payload}.{forged}")

    def test_foreign_issuer_rejected(self, rsa_key: AsymmetricKey, jwt_mgr) -> None:
        other = JWTManager(rsa_key, "RS256", "https://elsewhere", now=lambda: NOW)
        token = other.create_token(TokenClaims(sub="user-1"))
        with pytest.raises(IssuerMismatch):
            jwt_mgr.verify_token(token)

    def test_audience_checked_when_given(self, jwt_mgr: JWTManager) -> None:
        token = jwt_mgr.create_token(TokenClaims(sub="user-1", aud=["a", "b"]))
        assert jwt_mgr.verify_token(token).aud == ["a", "b"]
        with pytest.raises(AudienceMismatch):
            jwt_mgr.verify_token(token, audience="c")
