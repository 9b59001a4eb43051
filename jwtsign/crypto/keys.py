"""Key loading and generation for RSA, EC and HMAC signing keys."""

import secrets

import uuid_utils
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from jwtsign.core.errors import InvalidKeyType
from jwtsign.crypto.algorithms import Algorithm, Family, coerce_algorithm
from jwtsign.crypto.types import AsymmetricKey, KeyMaterial, SigningKeyData, SymmetricKey

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
PEM_MARKER = "-----BEGIN"


def _as_bytes(pem: str | bytes) -> bytes:
    return pem.encode("utf-8") if isinstance(pem, str) else pem


def load_private_key_pem(
    pem: str | bytes, password: str | bytes | None = None
) -> AsymmetricKey:
    """Load a PKCS#8, PKCS#1 or SEC1 PEM private key."""
    if isinstance(password, str):
        password = password.encode("utf-8")
    try:
        loaded = serialization.load_pem_private_key(_as_bytes(pem), password=password)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyType(f"cannot load private key: {exc}") from exc
    if not isinstance(loaded, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise InvalidKeyType(f"unsupported private key type {type(loaded).__name__}")
    return AsymmetricKey(private_key=loaded)


def load_public_key_pem(pem: str | bytes) -> AsymmetricKey:
    """Load a SubjectPublicKeyInfo PEM public key."""
    try:
        loaded = serialization.load_pem_public_key(_as_bytes(pem))
    except (ValueError, TypeError) as exc:
        raise InvalidKeyType(f"cannot load public key: {exc}") from exc
    if not isinstance(loaded, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise InvalidKeyType(f"unsupported public key type {type(loaded).__name__}")
    return AsymmetricKey(public_key=loaded)


def load_key(
    text: str,
    algorithm: str | Algorithm,
    *,
    private: bool = True,
    password: str | None = None,
) -> KeyMaterial:
    """Turn key file contents into a handle suited to ``algorithm``.

    HMAC algorithms take the text verbatim as the shared secret. Everything
    else expects PEM: a private key when signing, and either a public or a
    private key when verifying.
    """
    alg = coerce_algorithm(algorithm)
    if alg.family is Family.HMAC:
        if text.lstrip().startswith(PEM_MARKER):
            raise InvalidKeyType(f"{alg.value} expects a shared secret, not a PEM key")
        return SymmetricKey.from_text(text)
    if private:
        return load_private_key_pem(text, password)
    if "PRIVATE KEY-----" in text:
        return AsymmetricKey(public_key=load_private_key_pem(text, password).public_key)
    return load_public_key_pem(text)


def _to_key_data(private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey) -> SigningKeyData:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    kid = str(uuid_utils.uuid7())
    return SigningKeyData(
        kid=kid, private_key_pem=private_pem, public_key_pem=public_pem
    )


def generate_rsa_keypair(key_size: int = RSA_KEY_SIZE) -> SigningKeyData:
    """Generate a new RSA keypair for RS*/PS* signing."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=key_size,
    )
    return _to_key_data(private_key)


def generate_ec_keypair(algorithm: str | Algorithm = Algorithm.ES256) -> SigningKeyData:
    """Generate an EC keypair on the curve bound to an ES* algorithm."""
    alg = coerce_algorithm(algorithm)
    curve = alg.curve
    if curve is None:
        raise InvalidKeyType(f"{alg.value} is not an ECDSA algorithm")
    return _to_key_data(ec.generate_private_key(curve()))


def generate_hmac_secret(algorithm: str | Algorithm = Algorithm.HS256) -> str:
    """Generate a random secret as long as the algorithm's hash output."""
    alg = coerce_algorithm(algorithm)
    if alg.family is not Family.HMAC:
        raise InvalidKeyType(f"{alg.value} is not an HMAC algorithm")
    return secrets.token_urlsafe(alg.hash_algorithm().digest_size)
