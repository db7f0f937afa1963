"""Portal bearer tokens: HS256 signing plus the tenant/role claims every request carries.

The portal's identity service issues tokens for staff and clients. This module
verifies them and mints tokens for the seed script and tests.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any

from app.auth.rbac import ROLE_SCOPES
from app.core.exceptions import AuthenticationError

TOKEN_ISSUER = "clienthub"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class PortalClaims:
    user_id: int
    tenant_id: int
    role: str
    expires_at: int
    raw: dict[str, Any]


def _segment(payload: dict[str, Any]) -> str:
    data = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unsegment(segment: str) -> dict[str, Any]:
    padded = segment + "=" * (-len(segment) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if not isinstance(payload, dict):
        raise AuthenticationError("Invalid token payload.")
    return payload


def _signature(signing_input: str, secret: str) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    digest = hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def encode_jwt(payload: dict[str, Any], secret: str, ttl_seconds: int) -> str:
    """Sign ``payload``; ``iat``, ``exp``, ``jti`` and ``iss`` are filled in when absent."""
    now = int(time.time())
    body = {"iat": now, "exp": now + ttl_seconds, "jti": uuid.uuid4().hex, "iss": TOKEN_ISSUER, **payload}
    signing_input = f"{_segment(_HEADER)}.{_segment(body)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(token: str, secret: str) -> dict[str, Any]:
    """Verify signature, issuer and expiry, returning the raw claims."""
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    header_segment, payload_segment, signature = parts
    if not hmac.compare_digest(_signature(f"{header_segment}.{payload_segment}", secret), signature):
        raise AuthenticationError("Invalid token signature.")
    if _unsegment(header_segment).get("alg") != "HS256":
        raise AuthenticationError("Unsupported token algorithm.")

    claims = _unsegment(payload_segment)
    if claims.get("iss") != TOKEN_ISSUER:
        raise AuthenticationError("Token was not issued for this portal.")
    exp = claims.get("exp")
    if not isinstance(exp, int):
        raise AuthenticationError("Token is missing exp claim.")
    if exp < int(time.time()):
        raise AuthenticationError("Token has expired.")
    return claims


def read_portal_claims(token: str, secret: str) -> PortalClaims:
    """Decode a token and pull out the user, tenant and a known role."""
    claims = decode_jwt(token, secret)
    try:
        user_id = int(claims["sub"])
        tenant_id = int(claims["tenant_id"])
        role = str(claims["role"]).lower()
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc
    if role not in ROLE_SCOPES:
        raise AuthenticationError(f"Unknown role: {role}")
    return PortalClaims(user_id=user_id, tenant_id=tenant_id, role=role, expires_at=claims["exp"], raw=claims)


def create_access_token(
    user_id: int,
    tenant_id: int,
    role: str,
    secret: str,
    ttl_minutes: int = 60,
) -> str:
    payload = {"sub": str(user_id), "tenant_id": tenant_id, "role": role}
    return encode_jwt(payload, secret=secret, ttl_seconds=ttl_minutes * 60)
