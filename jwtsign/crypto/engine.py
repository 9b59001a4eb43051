"""Signature engine: compute and check JWS signatures for every algorithm.

One pair of entry points, ``sign`` and ``verify``, dispatches on the algorithm
family. Each backend first checks that the key handle matches the family, so
an RSA public key can never be fed to HMAC as a secret (the classic algorithm
confusion forgery). ECDSA signatures use the fixed-width ``R || S`` encoding of
RFC 7518 section 3.4 rather than DER.
"""

import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from jwtsign.core.errors import InvalidKeyType
from jwtsign.core.logging import get_logger
from jwtsign.core.settings import MIN_RSA_KEY_BITS_DEFAULT
from jwtsign.crypto.algorithms import Algorithm, Family, coerce_algorithm
from jwtsign.crypto.types import AsymmetricKey, KeyMaterial, SymmetricKey

logger = get_logger(__name__)


def _hmac_secret(alg: Algorithm, key: KeyMaterial | None) -> bytes:
    if not isinstance(key, SymmetricKey):
        raise InvalidKeyType(f"{alg.value} requires a symmetric secret")
    digest_size = alg.hash_algorithm().digest_size
    if len(key.secret) < digest_size:
        logger.warning(
            "hmac_secret_short",
            alg=alg.value,
            secret_bytes=len(key.secret),
            recommended_bytes=digest_size,
        )
    return key.secret


def _hmac_digest(alg: Algorithm, secret: bytes, message: bytes) -> bytes:
    return hmac.new(secret, message, alg.hash_algorithm().name).digest()


def _asymmetric(
    alg: Algorithm, key: KeyMaterial | None, min_rsa_key_bits: int
) -> AsymmetricKey:
    if not isinstance(key, AsymmetricKey):
        raise InvalidKeyType(f"{alg.value} requires an asymmetric key")
    if alg.family is Family.ECDSA:
        if not key.is_ec:
            raise InvalidKeyType(f"{alg.value} requires an EC key")
        assert isinstance(key.public_key, ec.EllipticCurvePublicKey)
        expected = alg.curve
        if expected is None or not isinstance(key.public_key.curve, expected):
            raise InvalidKeyType(
                f"{alg.value} requires curve {expected.name if expected else '?'}, "
                f"got {key.public_key.curve.name}"
            )
    else:
        if not key.is_rsa:
            raise InvalidKeyType(f"{alg.value} requires an RSA key")
        if key.key_size < min_rsa_key_bits:
            raise InvalidKeyType(
                f"RSA key of {key.key_size} bits is below the "
                f"{min_rsa_key_bits}-bit minimum"
            )
    return key


def _pss_padding(alg: Algorithm) -> padding.PSS:
    hash_alg = alg.hash_algorithm()
    return padding.PSS(mgf=padding.MGF1(hash_alg), salt_length=hash_alg.digest_size)


def _coordinate_size(public_key: ec.EllipticCurvePublicKey) -> int:
    return (public_key.curve.key_size + 7) // 8


def sign(
    algorithm: str | Algorithm,
    key: KeyMaterial | None,
    message: bytes,
    *,
    min_rsa_key_bits: int = MIN_RSA_KEY_BITS_DEFAULT,
) -> bytes:
    """Compute the signature of ``message``."""
    alg = coerce_algorithm(algorithm)
    family = alg.family

    if family is Family.NONE:
        return b""
    if family is Family.HMAC:
        return _hmac_digest(alg, _hmac_secret(alg, key), message)

    handle = _asymmetric(alg, key, min_rsa_key_bits)
    private_key = handle.private_key
    if private_key is None:
        raise InvalidKeyType(f"signing with {alg.value} requires a private key")

    if family is Family.ECDSA:
        assert isinstance(private_key, ec.EllipticCurvePrivateKey)
        der = private_key.sign(message, ec.ECDSA(alg.hash_algorithm()))
        r, s = decode_dss_signature(der)
        size = _coordinate_size(private_key.public_key())
        return r.to_bytes(size, "big") + s.to_bytes(size, "big")

    assert isinstance(private_key, rsa.RSAPrivateKey)
    if family is Family.RSA_PSS:
        return private_key.sign(message, _pss_padding(alg), alg.hash_algorithm())
    return private_key.sign(message, padding.PKCS1v15(), alg.hash_algorithm())


def verify(
    algorithm: str | Algorithm,
    key: KeyMaterial | None,
    message: bytes,
    signature: bytes,
    *,
    min_rsa_key_bits: int = MIN_RSA_KEY_BITS_DEFAULT,
) -> bool:
    """Return whether ``signature`` is valid for ``message`` under ``key``.

    Key/algorithm mismatches raise ``InvalidKeyType``; a well-formed request
    with a bad signature simply returns False.
    """
    alg = coerce_algorithm(algorithm)
    family = alg.family

    if family is Family.NONE:
        return True
    if family is Family.HMAC:
        expected = _hmac_digest(alg, _hmac_secret(alg, key), message)
        return hmac.compare_digest(expected, signature)

    public_key = _asymmetric(alg, key, min_rsa_key_bits).public_key
    try:
        if family is Family.ECDSA:
            assert isinstance(public_key, ec.EllipticCurvePublicKey)
            size = _coordinate_size(public_key)
            if len(signature) != 2 * size:
                return False
            r = int.from_bytes(signature[:size], "big")
            s = int.from_bytes(signature[size:], "big")
            public_key.verify(
                encode_dss_signature(r, s), message, ec.ECDSA(alg.hash_algorithm())
            )
        elif family is Family.RSA_PSS:
            assert isinstance(public_key, rsa.RSAPublicKey)
            public_key.verify(signature, message, _pss_padding(alg), alg.hash_algorithm())
        else:
            assert isinstance(public_key, rsa.RSAPublicKey)
            public_key.verify(signature, message, padding.PKCS1v15(), alg.hash_algorithm())
    except InvalidSignature:
        return False
    return True
