from datetime import datetime
from unittest.mock import AsyncMock

from crm.web.schemas import Customer
from crm.web.services.customer_service import CustomerService
from tests.fixtures_data import CUSTOMER_RECORD
from tests.web_helpers import build_web_client

AJAX = {"X-Requested-With": "XMLHttpRequest"}

VALID_FORM = {
    "first_name": "Jane",
    "last_name": "Smith",
    "contact": "+1-555-0102",
    "email": "jane.smith@email.com",
    "date_of_birth": "1990-07-22",
}


def _customer_service(**results):
    service = AsyncMock(spec=CustomerService)
    service.get_customers.return_value = [Customer.model_validate(CUSTOMER_RECORD)]
    service.get_customer_by_id.return_value = Customer.model_validate(CUSTOMER_RECORD)
    for name, value in results.items():
        getattr(service, name).return_value = value
    return service


def test_anonymous_user_is_sent_to_login(web_app):
    client = build_web_client(web_app)

    response = client.get("/Customers")

    assert response.status_code == 303
    assert response.headers["location"] == "/Account/Login?returnUrl=%2FCustomers"


def test_guest_sees_list_without_write_actions(web_app):
    client = build_web_client(web_app, role="Guest", customers=_customer_service())

    response = client.get("/Customers")

    assert response.status_code == 200
    assert "Jane" in response.text
    assert "1990-07-22" in response.text
    assert "/Customers/Create" not in response.text
    assert "/Customers/Edit/3" not in response.text
    assert "/Customers/Delete/3" not in response.text


def test_admin_sees_every_action(web_app):
    client = build_web_client(web_app, role="Admin", customers=_customer_service())

    response = client.get("/Customers/Index")

    assert "/Customers/Create" in response.text
    assert "/Customers/Edit/3" in response.text
    assert "/Customers/Delete/3" in response.text


def test_customer_values_are_html_escaped(web_app):
    hostile = Customer.model_validate(dict(CUSTOMER_RECORD, firstName="<script>alert(1)</script>"))
    client = build_web_client(web_app, role="User", customers=_customer_service(get_customers=[hostile]))

    response = client.get("/Customers")

    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in response.text


def test_details_returns_404_for_missing_customer(web_app):
    client = build_web_client(web_app, role="Guest", customers=_customer_service(get_customer_by_id=None))

    response = client.get("/Customers/Details/99")

    assert response.status_code == 404
    assert "Customer not found." in response.text


def test_guest_cannot_create(web_app):
    client = build_web_client(web_app, role="Guest", customers=_customer_service())

    response = client.get("/Customers/Create")

    assert response.status_code == 303
    assert response.headers["location"].startswith("/Account/AccessDenied")


def test_create_success_redirects_with_flash(web_app):
    service = _customer_service(create_customer=Customer.model_validate(dict(CUSTOMER_RECORD, id=12)))
    client = build_web_client(web_app, role="User", customers=service)

    response = client.post("/Customers/Create", data=VALID_FORM)

    assert response.status_code == 303
    assert response.headers["location"] == "/Customers"
    assert "crm_flash=" in response.headers.get("set-cookie", "")
    sent = service.create_customer.await_args.args[0]
    assert sent.first_name == "Jane"
    assert sent.date_of_birth == datetime(1990, 7, 22)


def test_create_validation_error_rerenders_form(web_app):
    service = _customer_service()
    client = build_web_client(web_app, role="Manager", customers=service)

    response = client.post("/Customers/Create", data=dict(VALID_FORM, email="not-an-email"))

    assert response.status_code == 400
    assert "email" in response.text
    service.create_customer.assert_not_awaited()


def test_create_api_failure_rerenders_with_error(web_app):
    client = build_web_client(web_app, role="Admin", customers=_customer_service(create_customer=None))

    response = client.post("/Customers/Create", data=VALID_FORM)

    assert response.status_code == 200
    assert "Error creating customer. Please try again." in response.text


def test_create_ajax_returns_json(web_app):
    client = build_web_client(
        web_app,
        role="Admin",
        customers=_customer_service(create_customer=Customer.model_validate(CUSTOMER_RECORD)),
    )

    response = client.post("/Customers/Create", data=VALID_FORM, headers=AJAX)

    assert response.json() == {"success": True, "message": "Customer created successfully."}


def test_user_role_cannot_edit(web_app):
    client = build_web_client(web_app, role="User", customers=_customer_service())

    response = client.get("/Customers/Edit/3")

    assert response.status_code == 303
    assert response.headers["location"] == "/Account/AccessDenied?returnUrl=%2FCustomers%2FEdit%2F3"


def test_edit_form_is_prefilled(web_app):
    client = build_web_client(web_app, role="Manager", customers=_customer_service())

    response = client.get("/Customers/Edit/3")

    assert response.status_code == 200
    assert 'value="jane.smith@email.com"' in response.text
    assert 'value="1990-07-22"' in response.text


def test_edit_id_mismatch(web_app):
    service = _customer_service()
    client = build_web_client(web_app, role="Manager", customers=service)

    ajax = client.post("/Customers/Edit/3", data=dict(VALID_FORM, id="4"), headers=AJAX)
    plain = client.post("/Customers/Edit/3", data=dict(VALID_FORM, id="4"))

    assert ajax.json() == {"success": False, "message": "Invalid customer ID."}
    assert plain.status_code == 404
    service.update_customer.assert_not_awaited()


def test_edit_success_sends_path_id(web_app):
    service = _customer_service(update_customer=Customer.model_validate(CUSTOMER_RECORD))
    client = build_web_client(web_app, role="Admin", customers=service)

    response = client.post("/Customers/Edit/3", data=dict(VALID_FORM, id="3"))

    assert response.status_code == 303
    assert service.update_customer.await_args.args[0].id == 3


def test_only_admin_can_delete(web_app):
    service = _customer_service(delete_customer=True)
    manager = build_web_client(web_app, role="Manager", customers=service)

    response = manager.post("/Customers/Delete/3", headers=AJAX)

    assert response.status_code == 303
    service.delete_customer.assert_not_awaited()


def test_admin_delete_via_ajax(web_app):
    service = _customer_service(delete_customer=True)
    client = build_web_client(web_app, role="Admin", customers=service)

    response = client.post("/Customers/Delete/3", headers=AJAX)

    assert response.json() == {"success": True, "message": "Customer deleted successfully."}
    service.delete_customer.assert_awaited_once_with(3)


def test_admin_delete_failure_flashes_error(web_app):
    client = build_web_client(web_app, role="Admin", customers=_customer_service(delete_customer=False))

    response = client.post("/Customers/Delete/3")

    assert response.status_code == 303
    assert response.headers["location"] == "/Customers"
    assert "crm_flash=" in response.headers.get("set-cookie", "")
