"""Compact JWS signing and verification for JSON Web Tokens."""

from jwtsign.core.errors import (
    AlgorithmMismatch,
    AudienceMismatch,
    ClaimValidationError,
    ErrorKind,
    InvalidKeyType,
    IssuerMismatch,
    JWTError,
    MalformedEncoding,
    MalformedJSON,
    MalformedToken,
    MissingRequiredClaim,
    SignatureInvalid,
    SubjectMismatch,
    TokenExpired,
    TokenNotYetValid,
    UnsupportedValueType,
)
from jwtsign.crypto.algorithms import Algorithm
from jwtsign.crypto.types import AsymmetricKey, KeyMaterial, SymmetricKey
from jwtsign.token.jwt import decode, decode_complete, encode, get_unverified_header
from jwtsign.token.types import SigningOptions, VerifiedToken

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "AlgorithmMismatch",
    "AsymmetricKey",
    "AudienceMismatch",
    "ClaimValidationError",
    "ErrorKind",
    "InvalidKeyType",
    "IssuerMismatch",
    "JWTError",
    "KeyMaterial",
    "MalformedEncoding",
    "MalformedJSON",
    "MalformedToken",
    "MissingRequiredClaim",
    "SignatureInvalid",
    "SigningOptions",
    "SubjectMismatch",
    "SymmetricKey",
    "TokenExpired",
    "TokenNotYetValid",
    "UnsupportedValueType",
    "VerifiedToken",
    "decode",
    "decode_complete",
    "encode",
    "get_unverified_header",
]
