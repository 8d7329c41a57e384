from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from pydantic import ValidationError

from crm.web.deps import get_auth_service, get_current_user, is_local_url
from crm.web.responses import pop_flash, redirect, redirect_with_flash, render
from crm.web.schemas import RegisterForm, validation_messages
from crm.web.services.auth_service import AuthService
from crm.web.services.session import (
    build_session_payload,
    clear_session_cookie,
    create_session,
    set_session_cookie,
)
from crm.web.views import access_denied_page, login_page, register_page

router = APIRouter(tags=["account"])
logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid login attempt."


@router.get("/Account/Login")
def login_form(request: Request, returnUrl: str = ""):
    return render(request, login_page(return_url=returnUrl, flash=pop_flash(request)))


@router.post("/Account/Login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    remember_me: bool = Form(False),
    return_url: str = Form(""),
    auth_service: AuthService = Depends(get_auth_service),
):
    username = username.strip()
    if not username or not password:
        return render(
            request,
            login_page("Username and password are required.", return_url=return_url, username=username),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not await auth_service.validate_user(username, password):
        return render(
            request,
            login_page(INVALID_LOGIN, return_url=return_url, username=username),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    user = await auth_service.get_user_by_username(username)
    if user is None:
        return render(
            request,
            login_page(INVALID_LOGIN, return_url=return_url, username=username),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    token = create_session(build_session_payload(user, persistent=remember_me))
    response = redirect(return_url if is_local_url(return_url) else "/")
    set_session_cookie(response, token, request=request, persistent=remember_me)
    logger.info("User signed in username=%s role=%s persistent=%s", user.username, user.role, remember_me)
    return response


@router.get("/Account/Register")
def register_form(request: Request):
    return render(request, register_page())


@router.post("/Account/Register")
async def register(
    request: Request,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    auth_service: AuthService = Depends(get_auth_service),
):
    values = {"username": username, "email": email, "first_name": first_name, "last_name": last_name}
    try:
        form = RegisterForm(
            username=username,
            email=email,
            password=password,
            confirm_password=confirm_password,
            first_name=first_name,
            last_name=last_name,
        )
    except ValidationError as exc:
        return render(
            request,
            register_page(values, validation_messages(exc)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not await auth_service.register_user(form):
        return render(
            request,
            register_page(values, ["Registration failed. Username may already exist."]),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return redirect_with_flash(request, "/Account/Login", "Registration successful! Please log in.")


@router.post("/Account/Logout")
def logout(request: Request):
    user = get_current_user(request)
    response = redirect("/")
    clear_session_cookie(response, request)
    if user is not None:
        logger.info("User signed out username=%s", user.username)
    return response


@router.get("/Account/AccessDenied")
def access_denied(request: Request, returnUrl: str = ""):
    back = returnUrl if is_local_url(returnUrl) else ""
    return render(
        request,
        access_denied_page(get_current_user(request), back),
        status_code=status.HTTP_403_FORBIDDEN,
    )
