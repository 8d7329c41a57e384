from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware

from crm.web.schemas import SessionUser
from crm.web.services.session import (
    SESSION_COOKIE_NAME,
    create_session,
    decode_session,
    session_needs_refresh,
    set_session_cookie,
)


def _user_from_payload(payload: dict) -> SessionUser:
    return SessionUser(
        id=int(payload["user_id"]),
        username=str(payload.get("username") or ""),
        email=str(payload.get("email") or ""),
        first_name=str(payload.get("first_name") or ""),
        last_name=str(payload.get("last_name") or ""),
        role=str(payload.get("role") or ""),
    )


def _response_sets_session(response) -> bool:
    prefix = f"{SESSION_COOKIE_NAME}="
    return any(value.startswith(prefix) for value in response.headers.getlist("set-cookie"))


class WebSessionMiddleware(BaseHTTPMiddleware):
    """Decodes the session cookie and slides its expiration."""

    async def dispatch(self, request, call_next):
        request.state.session_payload = None
        request.state.user = None

        token = request.cookies.get(SESSION_COOKIE_NAME)
        payload = decode_session(token) if token else None
        if payload is not None:
            request.state.session_payload = payload
            request.state.user = _user_from_payload(payload)

        response = await call_next(request)

        if payload is not None and session_needs_refresh(payload) and not _response_sets_session(response):
            set_session_cookie(
                response,
                create_session(payload),
                request=request,
                persistent=bool(payload.get("persistent")),
            )
        return response
