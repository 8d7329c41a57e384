import asyncio
from unittest.mock import AsyncMock

from crm.web.schemas import RegisterForm, User
from crm.web.services.auth_service import AuthService
from tests.fixtures_data import USER_RECORD


def _user_service(user=None):
    service = AsyncMock()
    service.get_user_by_username.return_value = user
    service.update_user_last_login.return_value = user
    service.create_user.return_value = user
    return service


def test_validate_user_success_updates_last_login():
    user = User.model_validate(USER_RECORD)
    service = _user_service(user)

    assert asyncio.run(AuthService(service).validate_user("jdoe", "abc")) is True
    service.update_user_last_login.assert_awaited_once_with(5)


def test_validate_user_rejects_wrong_password():
    service = _user_service(User.model_validate(USER_RECORD))

    assert asyncio.run(AuthService(service).validate_user("jdoe", "abd")) is False
    service.update_user_last_login.assert_not_awaited()


def test_validate_user_rejects_missing_and_inactive_users():
    inactive = User.model_validate(dict(USER_RECORD, isActive=False))

    assert asyncio.run(AuthService(_user_service(None)).validate_user("ghost", "abc")) is False
    assert asyncio.run(AuthService(_user_service(inactive)).validate_user("jdoe", "abc")) is False


def test_validate_user_returns_false_on_unexpected_failure():
    service = _user_service()
    service.get_user_by_username.side_effect = RuntimeError("api down")

    assert asyncio.run(AuthService(service).validate_user("jdoe", "abc")) is False


def _register_form(**overrides):
    values = {
        "username": "newbie",
        "email": "newbie@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
        "first_name": "New",
        "last_name": "Bie",
    }
    values.update(overrides)
    return RegisterForm(**values)


def test_register_user_creates_user_with_user_role():
    service = _user_service()
    service.create_user.return_value = User(id=9, username="newbie", role="User")

    assert asyncio.run(AuthService(service).register_user(_register_form())) is True

    created_user, password = service.create_user.await_args.args
    assert created_user.role == "User"
    assert created_user.username == "newbie"
    assert password == "secret123"


def test_register_user_rejects_existing_username():
    service = _user_service(User.model_validate(USER_RECORD))

    assert asyncio.run(AuthService(service).register_user(_register_form(username="jdoe"))) is False
    service.create_user.assert_not_awaited()


def test_password_helpers_delegate_to_hashing_module():
    auth = AuthService(_user_service())

    assert auth.hash_password("abc") == USER_RECORD["passwordHash"]
    assert auth.verify_password("abc", USER_RECORD["passwordHash"]) is True
