"""Error taxonomy for token signing and verification.

Every failure raised by jwtsign is a ``JWTError`` carrying an ``ErrorKind``.
All kinds are terminal: they describe a malformed or forged token, or a caller
configuration mistake, never a transient condition.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers for every failure mode."""

    MALFORMED_ENCODING = "MalformedEncoding"
    MALFORMED_JSON = "MalformedJSON"
    MALFORMED_TOKEN = "MalformedToken"
    UNSUPPORTED_VALUE_TYPE = "UnsupportedValueType"
    INVALID_KEY_TYPE = "InvalidKeyType"
    ALGORITHM_MISMATCH = "AlgorithmMismatch"
    SIGNATURE_INVALID = "SignatureInvalid"
    TOKEN_EXPIRED = "TokenExpired"
    TOKEN_NOT_YET_VALID = "TokenNotYetValid"
    ISSUER_MISMATCH = "IssuerMismatch"
    AUDIENCE_MISMATCH = "AudienceMismatch"
    SUBJECT_MISMATCH = "SubjectMismatch"
    MISSING_REQUIRED_CLAIM = "MissingRequiredClaim"


class JWTError(Exception):
    """Base class for all jwtsign failures."""

    kind: ErrorKind

    def __str__(self) -> str:
        detail = super().__str__()
        return f"{self.kind.value}: {detail}" if detail else self.kind.value


class MalformedEncoding(JWTError):
    """A segment is not valid unpadded base64url."""

    kind = ErrorKind.MALFORMED_ENCODING


class MalformedJSON(JWTError):
    """A decoded segment is not valid JSON."""

    kind = ErrorKind.MALFORMED_JSON


class MalformedToken(JWTError):
    """The compact serialization is structurally wrong."""

    kind = ErrorKind.MALFORMED_TOKEN


class UnsupportedValueType(JWTError):
    """A header or claim value cannot be represented as JSON."""

    kind = ErrorKind.UNSUPPORTED_VALUE_TYPE


class InvalidKeyType(JWTError):
    """The key material does not fit the requested algorithm."""

    kind = ErrorKind.INVALID_KEY_TYPE


class AlgorithmMismatch(JWTError):
    """The algorithm is unknown or not in the caller's allowlist."""

    kind = ErrorKind.ALGORITHM_MISMATCH


class SignatureInvalid(JWTError):
    """The signature does not match the signing input."""

    kind = ErrorKind.SIGNATURE_INVALID


class ClaimValidationError(JWTError):
    """Base class for claim-level rejections."""

    claim: str = ""


class TokenExpired(ClaimValidationError):
    kind = ErrorKind.TOKEN_EXPIRED
    claim = "exp"


class TokenNotYetValid(ClaimValidationError):
    kind = ErrorKind.TOKEN_NOT_YET_VALID
    claim = "nbf"


class IssuerMismatch(ClaimValidationError):
    kind = ErrorKind.ISSUER_MISMATCH
    claim = "iss"


class AudienceMismatch(ClaimValidationError):
    kind = ErrorKind.AUDIENCE_MISMATCH
    claim = "aud"


class SubjectMismatch(ClaimValidationError):
    kind = ErrorKind.SUBJECT_MISMATCH
    claim = "sub"


class MissingRequiredClaim(ClaimValidationError):
    """A claim the caller marked as required is absent."""

    kind = ErrorKind.MISSING_REQUIRED_CLAIM

    def __init__(self, claim: str) -> None:
        super().__init__(f'token is missing the "{claim}" claim')
        self.claim = claim
