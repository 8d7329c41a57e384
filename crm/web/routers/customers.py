from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from pydantic import ValidationError

from crm.models.roles import AppRoles, permissions_for
from crm.web.deps import get_customer_service, is_ajax, require_role_ui
from crm.web.responses import ajax_result, pop_flash, redirect_with_flash, render
from crm.web.schemas import CustomerForm, SessionUser, validation_messages
from crm.web.services.customer_service import CustomerService
from crm.web.views import (
    customer_details_page,
    customer_form_page,
    customer_form_values,
    customers_index_page,
    not_found_page,
)

router = APIRouter(tags=["customers"])
logger = logging.getLogger(__name__)

VIEW_ROLES = AppRoles.ALL_ROLES
CREATE_ROLES = (AppRoles.ADMIN, AppRoles.MANAGER, AppRoles.USER)
EDIT_ROLES = (AppRoles.ADMIN, AppRoles.MANAGER)
DELETE_ROLES = (AppRoles.ADMIN,)

CUSTOMER_NOT_FOUND = "Customer not found."


def _not_found(request: Request, user: SessionUser):
    return render(request, not_found_page(user, CUSTOMER_NOT_FOUND), status_code=status.HTTP_404_NOT_FOUND)


def _form_values(first_name, last_name, contact, email, date_of_birth, customer_id=None) -> dict[str, str]:
    values = {
        "first_name": first_name,
        "last_name": last_name,
        "contact": contact,
        "email": email,
        "date_of_birth": date_of_birth,
    }
    if customer_id is not None:
        values["id"] = str(customer_id)
    return values


@router.get("/Customers")
@router.get("/Customers/Index")
async def index(
    request: Request,
    user: SessionUser = Depends(require_role_ui(VIEW_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    customers = await service.get_customers()
    return render(
        request,
        customers_index_page(user, customers, permissions_for(user.role), flash=pop_flash(request)),
    )


@router.get("/Customers/Details/{customer_id}")
async def details(
    customer_id: int,
    request: Request,
    user: SessionUser = Depends(require_role_ui(VIEW_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    customer = await service.get_customer_by_id(customer_id)
    if customer is None:
        return _not_found(request, user)
    return render(request, customer_details_page(user, customer, permissions_for(user.role)))


@router.get("/Customers/Create")
def create_form(
    request: Request,
    user: SessionUser = Depends(require_role_ui(CREATE_ROLES)),
):
    return render(request, customer_form_page(user))


@router.post("/Customers/Create")
async def create(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    contact: str = Form(""),
    email: str = Form(""),
    date_of_birth: str = Form(""),
    user: SessionUser = Depends(require_role_ui(CREATE_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    values = _form_values(first_name, last_name, contact, email, date_of_birth)
    try:
        form = CustomerForm(
            first_name=first_name,
            last_name=last_name,
            contact=contact,
            email=email,
            date_of_birth=date_of_birth,
        )
    except ValidationError as exc:
        errors = validation_messages(exc)
        if is_ajax(request):
            return ajax_result(False, "; ".join(errors), status_code=status.HTTP_400_BAD_REQUEST)
        return render(request, customer_form_page(user, values, errors), status_code=status.HTTP_400_BAD_REQUEST)

    created = await service.create_customer(form.to_customer())
    if created is None:
        message = "Error creating customer. Please try again."
        if is_ajax(request):
            return ajax_result(False, message)
        return render(request, customer_form_page(user, values, [message]))

    logger.info("Customer created id=%s by username=%s", created.id, user.username)
    message = "Customer created successfully."
    if is_ajax(request):
        return ajax_result(True, message)
    return redirect_with_flash(request, "/Customers", message)


@router.get("/Customers/Edit/{customer_id}")
async def edit_form(
    customer_id: int,
    request: Request,
    user: SessionUser = Depends(require_role_ui(EDIT_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    customer = await service.get_customer_by_id(customer_id)
    if customer is None:
        return _not_found(request, user)
    return render(request, customer_form_page(user, customer_form_values(customer), customer_id=customer_id))


@router.post("/Customers/Edit/{customer_id}")
async def edit(
    customer_id: int,
    request: Request,
    id: Optional[int] = Form(None),
    first_name: str = Form(""),
    last_name: str = Form(""),
    contact: str = Form(""),
    email: str = Form(""),
    date_of_birth: str = Form(""),
    user: SessionUser = Depends(require_role_ui(EDIT_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    if id is not None and id != customer_id:
        logger.warning("Customer id mismatch path=%s form=%s", customer_id, id)
        if is_ajax(request):
            return ajax_result(False, "Invalid customer ID.")
        return _not_found(request, user)

    values = _form_values(first_name, last_name, contact, email, date_of_birth, customer_id)
    try:
        form = CustomerForm(
            id=customer_id,
            first_name=first_name,
            last_name=last_name,
            contact=contact,
            email=email,
            date_of_birth=date_of_birth,
        )
    except ValidationError as exc:
        errors = validation_messages(exc)
        if is_ajax(request):
            return ajax_result(False, "; ".join(errors), status_code=status.HTTP_400_BAD_REQUEST)
        return render(
            request,
            customer_form_page(user, values, errors, customer_id=customer_id),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    updated = await service.update_customer(form.to_customer())
    if updated is None:
        message = "Error updating customer. Please try again."
        if is_ajax(request):
            return ajax_result(False, message)
        return render(request, customer_form_page(user, values, [message], customer_id=customer_id))

    logger.info("Customer updated id=%s by username=%s", customer_id, user.username)
    message = "Customer updated successfully."
    if is_ajax(request):
        return ajax_result(True, message)
    return redirect_with_flash(request, "/Customers", message)


@router.post("/Customers/Delete/{customer_id}")
async def delete(
    customer_id: int,
    request: Request,
    user: SessionUser = Depends(require_role_ui(DELETE_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    deleted = await service.delete_customer(customer_id)
    if not deleted:
        message = "Error deleting customer."
        if is_ajax(request):
            return ajax_result(False, message)
        return redirect_with_flash(request, "/Customers", message, kind="error")

    logger.info("Customer deleted id=%s by username=%s", customer_id, user.username)
    message = "Customer deleted successfully."
    if is_ajax(request):
        return ajax_result(True, message)
    return redirect_with_flash(request, "/Customers", message)
