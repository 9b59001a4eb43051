"""Shared test fixtures for jwtsign."""

from collections.abc import Iterator

import pytest

from jwtsign.core.logging import use_library_defaults
from jwtsign.crypto.algorithms import Algorithm
from jwtsign.crypto.keys import (
    generate_ec_keypair,
    generate_rsa_keypair,
    load_private_key_pem,
)
from jwtsign.crypto.types import AsymmetricKey, SigningKeyData, SymmetricKey

FIXED_NOW = 1_700_000_000
HMAC_SECRET = "k" * 64

SETTINGS_ENV = (
    "JWTSIGN_DEFAULT_ALGORITHM",
    "JWTSIGN_LEEWAY_SECONDS",
    "JWTSIGN_REQUIRED_CLAIMS",
    "JWTSIGN_MIN_RSA_KEY_BITS",
    "JWTSIGN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient JWTSIGN_* variables out of the tests."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop logging configured by CLI runs, which binds a test stream."""
    yield
    use_library_defaults()


@pytest.fixture(scope="session")
def rsa_key_data() -> SigningKeyData:
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def rsa_key(rsa_key_data: SigningKeyData) -> AsymmetricKey:
    return load_private_key_pem(rsa_key_data.private_key_pem)


@pytest.fixture(scope="session")
def ec_key_data() -> dict[Algorithm, SigningKeyData]:
    return {
        alg: generate_ec_keypair(alg)
        for alg in (Algorithm.ES256, Algorithm.ES384, Algorithm.ES512)
    }


@pytest.fixture(scope="session")
def ec_keys(ec_key_data: dict[Algorithm, SigningKeyData]) -> dict[Algorithm, AsymmetricKey]:
    return {alg: load_private_key_pem(data.private_key_pem) for alg, data in ec_key_data.items()}


@pytest.fixture
def hmac_key() -> SymmetricKey:
    return SymmetricKey.from_text(HMAC_SECRET)


@pytest.fixture
def key_for(
    hmac_key: SymmetricKey,
    rsa_key: AsymmetricKey,
    ec_keys: dict[Algorithm, AsymmetricKey],
):
    """Resolve a signing key for any algorithm."""

    def _resolve(alg: Algorithm) -> SymmetricKey | AsymmetricKey | None:
        if alg.value.startswith("HS"):
            return hmac_key
        if alg.value.startswith(("RS", "PS")):
            return rsa_key
        if alg is Algorithm.NONE:
            return None
        return ec_keys[alg]

    return _resolve


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
