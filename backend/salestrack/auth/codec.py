"""
Compact signed-token codec.

A token is ``b64u(header).b64u(payload).b64u(signature)`` where ``b64u`` is
base64 with the URL-safe alphabet and no ``=`` padding, and the signature is
HMAC-SHA-256 over the ASCII ``b64u(header).b64u(payload)`` string.
"""
import binascii
import json
import re
from typing import Any, NamedTuple

from jose import jwk
from jose.exceptions import JWKError
from jose.utils import base64url_decode, base64url_encode

from ..models.Token import TOKEN_HEADER

ALGORITHM = "HS256"

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]*$")


class DecodeError(ValueError):
    pass


class ParsedToken(NamedTuple):
    header: dict
    payload: dict
    signature: bytes
    signing_input: str


def encode(value: Any) -> str:
    """
    Encodes raw bytes, or any JSON-serializable value, as an unpadded base64url segment.
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raw = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64url_encode(raw).decode("ascii")


def decode(segment: str | bytes) -> bytes:
    if isinstance(segment, bytes):
        try:
            segment = segment.decode("ascii")
        except UnicodeDecodeError as e:
            raise DecodeError("Segment is not ASCII") from e

    if not _SEGMENT_RE.match(segment):
        raise DecodeError("Segment contains characters outside the base64url alphabet")
    if len(segment) % 4 == 1:
        raise DecodeError("Segment has an impossible length")

    try:
        raw = base64url_decode(segment.encode("ascii"))
    except (binascii.Error, ValueError) as e:
        raise DecodeError(str(e)) from e

    # Unused trailing bits must be zero, so each value has exactly one encoding
    if encode(raw) != segment:
        raise DecodeError("Segment is not canonical base64url")
    return raw


def decode_json(segment: str | bytes) -> Any:
    raw = decode(segment)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Segment is not valid JSON: {e}") from e


def _hmac_key(secret: str):
    try:
        return jwk.construct(secret, algorithm=ALGORITHM)
    except JWKError as e:
        raise ValueError(f"Unusable signing secret: {e}") from e


def sign(message: str, secret: str) -> bytes:
    return _hmac_key(secret).sign(message.encode("utf-8"))


def verify(message: str, signature: bytes, secret: str) -> bool:
    # jose compares digests in constant time
    return bool(_hmac_key(secret).verify(message.encode("utf-8"), signature))


def encode_token(payload: dict, secret: str) -> str:
    signing_input = f"{encode(TOKEN_HEADER)}.{encode(payload)}"
    return f"{signing_input}.{encode(sign(signing_input, secret))}"


def split_token(token: str) -> tuple[str, str, str]:
    parts = token.split(".") if isinstance(token, str) else []
    if len(parts) != 3 or not all(parts):
        raise DecodeError("Token must have exactly three non-empty segments")
    return parts[0], parts[1], parts[2]


def parse_token(token: str) -> ParsedToken:
    """
    Splits and decodes a token WITHOUT checking its signature.
    """
    header_segment, payload_segment, signature_segment = split_token(token)

    header = decode_json(header_segment)
    payload = decode_json(payload_segment)
    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise DecodeError("Header and payload must be JSON objects")

    return ParsedToken(
        header=header,
        payload=payload,
        signature=decode(signature_segment),
        signing_input=f"{header_segment}.{payload_segment}",
    )
