"""Type definitions for key material handles."""

from typing import Self

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import BaseModel, ConfigDict, model_validator

PrivateKey = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey


class SigningKeyData(BaseModel):
    """A PEM keypair for JWT signing."""

    kid: str
    private_key_pem: str
    public_key_pem: str


class SymmetricKey(BaseModel):
    """Shared secret for the HMAC algorithms."""

    model_config = ConfigDict(frozen=True)

    secret: bytes

    @classmethod
    def from_text(cls, text: str) -> Self:
        return cls(secret=text.encode("utf-8"))

    def __repr__(self) -> str:
        return f"SymmetricKey(<{len(self.secret)} bytes>)"

    __str__ = __repr__


class AsymmetricKey(BaseModel):
    """RSA or EC key; either half may be absent, but not both."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    private_key: PrivateKey | None = None
    public_key: PublicKey | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_public_key(cls, data: dict) -> dict:
        if isinstance(data, dict) and data.get("public_key") is None:
            private_key = data.get("private_key")
            if private_key is not None:
                data = {**data, "public_key": private_key.public_key()}
        return data

    @model_validator(mode="after")
    def _require_one_half(self) -> Self:
        if self.private_key is None and self.public_key is None:
            raise ValueError("an asymmetric key needs a private or public component")
        return self

    @property
    def is_rsa(self) -> bool:
        return isinstance(self.public_key, rsa.RSAPublicKey)

    @property
    def is_ec(self) -> bool:
        return isinstance(self.public_key, ec.EllipticCurvePublicKey)

    @property
    def key_size(self) -> int:
        assert self.public_key is not None
        return self.public_key.key_size

    def __repr__(self) -> str:
        kind = "RSA" if self.is_rsa else "EC"
        half = "private" if self.private_key is not None else "public"
        return f"AsymmetricKey({kind}-{self.key_size}, {half})"

    __str__ = __repr__


KeyMaterial = SymmetricKey | AsymmetricKey
