from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from crm.core.config import (
    WEB_SESSION_COOKIE_SECURE,
    WEB_SESSION_MAX_AGE_SECONDS,
    WEB_SESSION_SECRET,
)

SESSION_COOKIE_NAME = "crm_session"
SESSION_SALT = "crm-session"
FLASH_COOKIE_NAME = "crm_flash"
FLASH_SALT = "crm-flash"
FLASH_MAX_AGE_SECONDS = 5 * 60


def _serializer(salt: str = SESSION_SALT) -> URLSafeTimedSerializer:
    if not WEB_SESSION_SECRET:
        raise RuntimeError("WEB_SESSION_SECRET is not configured.")
    return URLSafeTimedSerializer(WEB_SESSION_SECRET, salt=salt)


def build_session_payload(user: Any, persistent: bool = False) -> Dict[str, Any]:
    """Claims carried by the session cookie for an authenticated user."""
    return {
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "persistent": bool(persistent),
    }


def create_session(payload: Dict[str, Any]) -> str:
    claims = {key: value for key, value in payload.items() if key != "iat"}
    claims["iat"] = int(time.time())
    return _serializer().dumps(claims)


def decode_session(token: str) -> Optional[Dict[str, Any]]:
    if not WEB_SESSION_SECRET:
        return None
    try:
        payload = _serializer().loads(token, max_age=WEB_SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired, ValueError):
        return None
    if not isinstance(payload, dict) or not payload.get("user_id"):
        return None
    return payload


def session_needs_refresh(payload: Dict[str, Any], now: Optional[float] = None) -> bool:
    """Sliding expiration: renew once more than half of the lifetime has elapsed."""
    now = time.time() if now is None else now
    try:
        issued_at = int(payload.get("iat", 0))
    except (TypeError, ValueError):
        return True
    return (now - issued_at) > WEB_SESSION_MAX_AGE_SECONDS / 2


def build_session_cookie_options(request: Request | None = None) -> dict[str, Any]:
    secure = WEB_SESSION_COOKIE_SECURE
    if request is not None and request.url.scheme == "https":
        secure = True
    return {
        "httponly": True,
        "samesite": "lax",
        "path": "/",
        "secure": secure,
    }


def set_session_cookie(
    response: Response,
    token: str,
    request: Request | None = None,
    persistent: bool = False,
) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=WEB_SESSION_MAX_AGE_SECONDS if persistent else None,
        **build_session_cookie_options(request),
    )


def clear_session_cookie(response: Response, request: Request | None = None) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        **build_session_cookie_options(request),
    )


def set_flash(response: Response, message: str, kind: str = "success", request: Request | None = None) -> None:
    token = _serializer(FLASH_SALT).dumps({"message": message, "kind": kind})
    response.set_cookie(
        key=FLASH_COOKIE_NAME,
        value=token,
        max_age=FLASH_MAX_AGE_SECONDS,
        **build_session_cookie_options(request),
    )


def read_flash(request: Request) -> Optional[Dict[str, str]]:
    token = request.cookies.get(FLASH_COOKIE_NAME)
    if not token or not WEB_SESSION_SECRET:
        return None
    try:
        payload = _serializer(FLASH_SALT).loads(token, max_age=FLASH_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired, ValueError):
        return None
    if not isinstance(payload, dict) or not payload.get("message"):
        return None
    return {"message": str(payload["message"]), "kind": str(payload.get("kind") or "success")}


def clear_flash(response: Response, request: Request | None = None) -> None:
    response.delete_cookie(key=FLASH_COOKIE_NAME, **build_session_cookie_options(request))
