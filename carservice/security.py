"""HS256 bearer tokens.

Tokens are issued by the surrounding auth service (or ``create_access_token``
for operators) and only verified here.  The caller identity is read from the
``user_id`` claim, falling back to ``sub``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time

from carservice.settings import settings

_DIGESTS = {"HS256": hashlib.sha256, "HS384": hashlib.sha384, "HS512": hashlib.sha512}


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, algorithm: str) -> bytes:
    digest = _DIGESTS[algorithm]
    return hmac.new(settings.get_jwt_secret().encode("utf-8"), message, digest).digest()


def create_access_token(identity: str, expires_in: int | None = None) -> str:
    """Create a signed token whose ``user_id`` and ``sub`` claims carry ``identity``."""
    lifetime = expires_in if expires_in is not None else settings.access_token_expire_minutes * 60
    algorithm = settings.jwt_algorithm
    header = {"alg": algorithm, "typ": "JWT"}
    payload = {"user_id": identity, "sub": identity, "exp": int(time.time()) + lifetime}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    return f"{header_b64}.{payload_b64}.{_b64_url_encode(_sign(signing_input, algorithm))}"


def decode_access_token(token: str) -> dict | None:
    """Verify signature and expiry; return the claims or ``None`` when invalid."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64))
        claims = json.loads(_b64_url_decode(payload_b64))
        signature = _b64_url_decode(signature_b64)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(header, dict) or not isinstance(claims, dict):
        return None
    # Only the configured HMAC algorithm is accepted, never "none".
    if header.get("alg") != settings.jwt_algorithm or settings.jwt_algorithm not in _DIGESTS:
        return None
    expected = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), settings.jwt_algorithm)
    if not hmac.compare_digest(expected, signature):
        return None
    exp = claims.get("exp")
    if exp is not None:
        try:
            if int(exp) < int(time.time()):
                return None
        except (TypeError, ValueError):
            return None
    return claims


def identity_from_claims(claims: dict) -> str | None:
    for claim in ("user_id", "sub"):
        value = claims.get(claim)
        if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value).strip():
            return str(value)
    return None


def identity_from_header(authorization: str | None) -> str | None:
    """Resolve the caller identity from an ``Authorization`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    claims = decode_access_token(authorization[len("Bearer ") :].strip())
    if claims is None:
        return None
    return identity_from_claims(claims)
