"""JWS Compact Serialization: assembling and splitting three-part tokens."""

from typing import Any

from jwtsign.codec import base64url, json_canonical
from jwtsign.core.errors import MalformedEncoding, MalformedToken
from jwtsign.crypto.algorithms import Algorithm
from jwtsign.token.types import ParsedToken

SEPARATOR = "."


def signing_input(header_segment: str, payload_segment: str) -> bytes:
    """The bytes a JWS signature covers."""
    return f"{header_segment}{SEPARATOR}{payload_segment}".encode("ascii")


def encode_segments(header: dict[str, Any], payload: dict[str, Any]) -> tuple[str, str]:
    return (
        base64url.encode(json_canonical.dumps(header)),
        base64url.encode(json_canonical.dumps(payload)),
    )


def assemble(header_segment: str, payload_segment: str, signature: bytes) -> str:
    """Join encoded header and payload with the encoded signature."""
    return SEPARATOR.join(
        (header_segment, payload_segment, base64url.encode(signature))
    )


def _decode_object(segment: str, name: str) -> dict[str, Any]:
    value = json_canonical.loads(base64url.decode(segment))
    if not isinstance(value, dict):
        raise MalformedToken(f"{name} is not a JSON object")
    return value


def split(token: str | bytes) -> tuple[str, str, str]:
    """Split a compact token into its three raw segments."""
    if isinstance(token, bytes):
        try:
            token = token.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedEncoding("token contains non-ASCII bytes") from exc
    if not isinstance(token, str):
        raise MalformedToken(f"token must be str or bytes, not {type(token).__name__}")

    parts = token.split(SEPARATOR)
    if len(parts) != 3:
        raise MalformedToken(f"expected 3 segments, found {len(parts)}")
    header_segment, payload_segment, signature_segment = parts
    if not header_segment or not payload_segment:
        raise MalformedToken("header and payload segments must be non-empty")
    return header_segment, payload_segment, signature_segment


def parse_header(token: str | bytes) -> dict[str, Any]:
    header_segment, _, _ = split(token)
    return _decode_object(header_segment, "header")


def parse(token: str | bytes) -> ParsedToken:
    """Split and decode a compact token without checking its signature."""
    header_segment, payload_segment, signature_segment = split(token)

    header = _decode_object(header_segment, "header")
    claims = _decode_object(payload_segment, "payload")
    signature = base64url.decode(signature_segment)

    alg = header.get("alg")
    if not isinstance(alg, str):
        raise MalformedToken('header is missing a string "alg"')
    if alg == Algorithm.NONE.value:
        if signature:
            raise MalformedToken("alg=none tokens must have an empty signature")
    elif not signature:
        raise MalformedToken("signature segment is empty")

    return ParsedToken(
        header=header,
        claims=claims,
        signature=signature,
        signing_input=signing_input(header_segment, payload_segment),
    )
