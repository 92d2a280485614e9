# -*- coding: utf-8 -*-
"""Auth — password hashing, HS256 tokens and the current-user dependency."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from ..config import Settings
from ..deps import get_settings, get_storage
from ..storage import Storage

TOKEN_COOKIE_NAME = "healthglow_token"

_HASH_SCHEME = "pbkdf2_sha256"
_HASH_ITERATIONS = 200_000


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _pbkdf2(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    """Encode as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    salt = secrets.token_bytes(16)
    digest = _pbkdf2(password, salt, _HASH_ITERATIONS)
    return f"{_HASH_SCHEME}${_HASH_ITERATIONS}${_b64(salt)}${_b64(digest)}"


def verify_password(password: str, stored: str | None) -> bool:
    if not stored:
        return False
    try:
        scheme, iterations, salt, digest = stored.split("$")
        if scheme != _HASH_SCHEME:
            return False
        candidate = _pbkdf2(password, _unb64(salt), int(iterations))
        return hmac.compare_digest(candidate, _unb64(digest))
    except ValueError:
        return False


_JWT_HEADER = _b64(b'{"alg":"HS256","typ":"JWT"}')


def _sign(signing_input: str, secret: str) -> str:
    mac = hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256)
    return _b64(mac.digest())


def _jwt_encode(claims: Dict[str, Any], secret: str) -> str:
    body = _b64(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{_JWT_HEADER}.{body}"
    return f"{signing_input}.{_sign(signing_input, secret)}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    """Verify the signature and return the claims; raises ValueError on any defect."""
    signing_input, _, signature = token.rpartition(".")
    if signing_input.count(".") != 1:
        raise ValueError("malformed token")
    if not hmac.compare_digest(_sign(signing_input, secret).encode(), signature.encode()):
        raise ValueError("bad signature")
    claims = json.loads(_unb64(signing_input.split(".", 1)[1]))
    if not isinstance(claims, dict):
        raise ValueError("claims are not an object")
    return claims


def create_access_token(*, user_id: str, email: str, settings: Settings) -> str:
    now = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + int(settings.token_ttl_days) * 24 * 60 * 60,
    }
    return _jwt_encode(claims, settings.jwt_secret)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    try:
        claims = _jwt_decode(token, secret)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if int(claims.get("exp") or 0) < int(time.time()):
        raise HTTPException(status_code=401, detail="Token expired")
    return claims


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    storage: Storage = Depends(get_storage),
) -> Dict[str, Any]:
    """Resolve the authenticated user from a bearer token or the auth cookie."""
    token = get_token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    claims = decode_token(token, settings.jwt_secret)
    user_id = str(claims.get("sub") or "")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user
