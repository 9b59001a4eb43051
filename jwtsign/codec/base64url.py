"""Unpadded base64url encoding (RFC 4648 section 5, RFC 7515 section 2)."""

import base64
import binascii
import re

from jwtsign.core.errors import MalformedEncoding

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode(text: str | bytes) -> bytes:
    """Decode unpadded base64url text.

    Only the canonical encoding of a byte string is accepted: padding,
    whitespace, a dangling sextet and non-zero trailing bits are all rejected.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedEncoding("non-ASCII bytes in base64url input") from exc
    if _ALPHABET.fullmatch(text) is None:
        raise MalformedEncoding("characters outside the base64url alphabet")
    if len(text) % 4 == 1:
        raise MalformedEncoding("truncated base64url input")

    padded = text + "=" * (-len(text) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise MalformedEncoding(str(exc)) from exc

    if encode(raw) != text:
        raise MalformedEncoding("non-canonical base64url trailing bits")
    return raw
