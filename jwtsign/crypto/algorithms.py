"""JWS algorithm identifiers and their cryptographic parameters (RFC 7518)."""

from collections.abc import Iterable
from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from jwtsign.core.errors import AlgorithmMismatch


class Family(str, Enum):
    """Signature backend selected by an algorithm."""

    HMAC = "HMAC"
    RSA = "RSA"
    RSA_PSS = "RSA-PSS"
    ECDSA = "ECDSA"
    NONE = "none"


class Algorithm(str, Enum):
    """Supported ``alg`` header values."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    NONE = "none"

    @property
    def family(self) -> Family:
        return _FAMILIES[self.value[:2]] if self is not Algorithm.NONE else Family.NONE

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a fresh SHA-2 instance matching the algorithm suffix."""
        if self is Algorithm.NONE:
            raise AlgorithmMismatch("the none algorithm has no hash")
        return _HASHES[self.value[2:]]()

    @property
    def curve(self) -> type[ec.EllipticCurve] | None:
        """Named curve an ECDSA algorithm is bound to."""
        return _CURVES.get(self)


_FAMILIES = {
    "HS": Family.HMAC,
    "RS": Family.RSA,
    "PS": Family.RSA_PSS,
    "ES": Family.ECDSA,
}

_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "256": hashes.SHA256,
    "384": hashes.SHA384,
    "512": hashes.SHA512,
}

_CURVES: dict[Algorithm, type[ec.EllipticCurve]] = {
    Algorithm.ES256: ec.SECP256R1,
    Algorithm.ES384: ec.SECP384R1,
    Algorithm.ES512: ec.SECP521R1,
}


def coerce_algorithm(value: "str | Algorithm") -> Algorithm:
    """Resolve an algorithm name, rejecting anything unsupported."""
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(value)
    except ValueError as exc:
        raise AlgorithmMismatch(f"unsupported algorithm {value!r}") from exc


def coerce_allowlist(values: Iterable["str | Algorithm"]) -> frozenset[Algorithm]:
    """Resolve a caller allowlist; a bare string counts as one algorithm."""
    if isinstance(values, (str, Algorithm)):
        values = [values]
    return frozenset(coerce_algorithm(value) for value in values)
