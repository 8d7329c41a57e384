from __future__ import annotations

import logging
from typing import AsyncIterator, Iterable
from urllib.parse import quote

import httpx
from fastapi import Depends, HTTPException, Request, status

from crm.web.schemas import SessionUser
from crm.web.services.auth_service import AuthService
from crm.web.services.customer_service import CustomerService
from crm.web.services.graphql_client import GraphQLClient
from crm.web.services.user_service import UserService

logger = logging.getLogger(__name__)

LOGIN_PATH = "/Account/Login"
ACCESS_DENIED_PATH = "/Account/AccessDenied"


def is_ajax(request: Request) -> bool:
    return request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"


def is_local_url(url: str | None) -> bool:
    if not url or not url.startswith("/"):
        return False
    return not (url.startswith("//") or url.startswith("/\\"))


def _return_url(request: Request) -> str:
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return quote(target, safe="")


def _redirect(location: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": location})


def _log_access_denied(*, reason: str, user: SessionUser | None, request: Request) -> None:
    endpoint = f"{request.method} {request.url.path}"
    logger.warning(
        "Access denied (%s): user_id=%s username=%s user_role=%s endpoint=%s",
        reason,
        getattr(user, "id", None),
        getattr(user, "username", None),
        getattr(user, "role", None),
        endpoint,
    )


def get_current_user(request: Request) -> SessionUser | None:
    return getattr(request.state, "user", None)


def require_user_ui(request: Request) -> SessionUser:
    user = get_current_user(request)
    if user is None:
        _log_access_denied(reason="anonymous", user=None, request=request)
        raise _redirect(f"{LOGIN_PATH}?returnUrl={_return_url(request)}")
    return user


def require_role_ui(roles: Iterable[str]):
    allowed = frozenset(roles)

    def _dependency(
        request: Request,
        user: SessionUser = Depends(require_user_ui),
    ) -> SessionUser:
        if user.role not in allowed:
            _log_access_denied(reason="role_denied", user=user, request=request)
            raise _redirect(f"{ACCESS_DENIED_PATH}?returnUrl={_return_url(request)}")
        return user

    return _dependency


async def get_graphql_client(request: Request) -> AsyncIterator[GraphQLClient]:
    http: httpx.AsyncClient = request.app.state.graphql_http
    yield GraphQLClient(http, endpoint=request.app.state.graphql_endpoint)


def get_customer_service(client: GraphQLClient = Depends(get_graphql_client)) -> CustomerService:
    return CustomerService(client)


def get_user_service(client: GraphQLClient = Depends(get_graphql_client)) -> UserService:
    return UserService(client)


def get_auth_service(user_service: UserService = Depends(get_user_service)) -> AuthService:
    return AuthService(user_service)
