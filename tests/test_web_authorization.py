from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from crm.web.deps import is_ajax, is_local_url, require_role_ui, require_user_ui


def _build_request(path: str = "/Customers", query_string: str = "", user=None, headers=None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query_string.encode(),
        "headers": headers or [],
        "path_params": {},
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    request = Request(scope)
    request.state.user = user
    return request


def test_anonymous_user_is_redirected_to_login_with_return_url():
    request = _build_request(path="/Customers/Details/3", query_string="tab=info")

    with pytest.raises(HTTPException) as exc:
        require_user_ui(request)

    assert exc.value.status_code == 303
    assert exc.value.headers["Location"] == "/Account/Login?returnUrl=%2FCustomers%2FDetails%2F3%3Ftab%3Dinfo"


def test_role_outside_allow_list_is_sent_to_access_denied(caplog):
    user = SimpleNamespace(id=4, username="guest", role="Guest")
    request = _build_request(path="/Customers/Create", user=user)
    dependency = require_role_ui(["Admin", "Manager", "User"])

    with caplog.at_level("WARNING"):
        with pytest.raises(HTTPException) as exc:
            dependency(request=request, user=user)

    assert exc.value.status_code == 303
    assert exc.value.headers["Location"] == "/Account/AccessDenied?returnUrl=%2FCustomers%2FCreate"
    assert "Access denied (role_denied)" in caplog.text


def test_role_in_allow_list_passes_through():
    user = SimpleNamespace(id=1, username="admin", role="Admin")
    dependency = require_role_ui(["Admin"])

    assert dependency(request=_build_request(user=user), user=user) is user


def test_role_match_is_case_sensitive():
    user = SimpleNamespace(id=1, username="admin", role="admin")

    with pytest.raises(HTTPException):
        require_role_ui(["Admin"])(request=_build_request(user=user), user=user)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("/Customers", True),
        ("/Customers/Details/1?x=1", True),
        ("", False),
        (None, False),
        ("https://evil.example/", False),
        ("//evil.example/", False),
        ("/\\evil.example", False),
    ],
)
def test_is_local_url(url, expected):
    assert is_local_url(url) is expected


def test_is_ajax_reads_requested_with_header():
    ajax = _build_request(headers=[(b"x-requested-with", b"XMLHttpRequest")])

    assert is_ajax(ajax) is True
    assert is_ajax(_build_request()) is False
