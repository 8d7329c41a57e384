from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from pydantic import ValidationError

from crm.models.roles import AppRoles, is_valid_role
from crm.web.deps import get_user_service, require_role_ui
from crm.web.responses import ajax_result, pop_flash, redirect_with_flash, render
from crm.web.schemas import SessionUser, UserCreateForm, validation_messages
from crm.web.services.user_service import UserService
from crm.web.views import (
    not_found_page,
    user_create_page,
    user_details_page,
    user_edit_role_page,
    users_index_page,
)

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)

require_admin_ui = require_role_ui([AppRoles.ADMIN])

USER_NOT_FOUND = "User not found."


def _not_found(request: Request, user: SessionUser):
    return render(request, not_found_page(user, USER_NOT_FOUND), status_code=status.HTTP_404_NOT_FOUND)


@router.get("/Users")
@router.get("/Users/Index")
async def index(
    request: Request,
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    users = await service.get_users()
    return render(request, users_index_page(user, users, flash=pop_flash(request)))


@router.get("/Users/Details/{user_id}")
async def details(
    user_id: int,
    request: Request,
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    target = await service.get_user_by_id(user_id)
    if target is None:
        return _not_found(request, user)
    return render(request, user_details_page(user, target))


@router.get("/Users/Create")
def create_form(request: Request, user: SessionUser = Depends(require_admin_ui)):
    return render(request, user_create_page(user))


@router.post("/Users/Create")
async def create(
    request: Request,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    role: str = Form(AppRoles.USER),
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    values = {
        "username": username,
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
        "role": role,
    }
    try:
        form = UserCreateForm(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
    except ValidationError as exc:
        return render(
            request,
            user_create_page(user, values, validation_messages(exc)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    created = await service.create_user(form.to_user(), form.password)
    if created is None:
        return render(
            request,
            user_create_page(user, values, ["Error creating user. Username or email may already exist."]),
        )

    logger.info("User created id=%s role=%s by username=%s", created.id, created.role, user.username)
    return redirect_with_flash(request, "/Users", f"User '{created.username}' created successfully.")


@router.get("/Users/EditRole/{user_id}")
async def edit_role_form(
    user_id: int,
    request: Request,
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    target = await service.get_user_by_id(user_id)
    if target is None:
        return _not_found(request, user)
    return render(request, user_edit_role_page(user, target))


@router.post("/Users/EditRole/{user_id}")
async def edit_role(
    user_id: int,
    request: Request,
    role: str = Form(""),
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    target = await service.get_user_by_id(user_id)
    if target is None:
        return _not_found(request, user)

    if not is_valid_role(role):
        return render(
            request,
            user_edit_role_page(user, target, ["Invalid role selected."]),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    updated = await service.update_user_role(user_id, role)
    if updated is None:
        return render(request, user_edit_role_page(user, target, ["Error updating user role."]))

    logger.info("User role changed id=%s role=%s by username=%s", user_id, role, user.username)
    return redirect_with_flash(request, "/Users", f"Role for '{updated.username}' updated to {updated.role}.")


@router.post("/Users/EditRoleAjax/{user_id}")
async def edit_role_ajax(
    user_id: int,
    role: str = Form(""),
    user: SessionUser = Depends(require_admin_ui),
    service: UserService = Depends(get_user_service),
):
    if not is_valid_role(role):
        return ajax_result(False, "Invalid role selected.")

    updated = await service.update_user_role(user_id, role)
    if updated is None:
        return ajax_result(False, "Error updating user role.")

    logger.info("User role changed id=%s role=%s by username=%s", user_id, role, user.username)
    return ajax_result(True, f"Role updated to {updated.role}.")
