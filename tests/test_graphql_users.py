from crm.models.user import User
from crm.services.passwords import hash_password
from crm.services.seed import seed_users_if_empty

USER_FIELDS = "id username email passwordHash firstName lastName role isActive createdAt lastLoginAt"

ADD_USER = f"""
mutation AddUser($username: String!, $email: String!, $password: String!, $firstName: String!, $lastName: String!, $role: String) {{
  addUser(username: $username, email: $email, password: $password, firstName: $firstName, lastName: $lastName, role: $role) {{
    {USER_FIELDS}
  }}
}}
"""


def _post(client, query, variables=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}})
    assert response.status_code == 200
    return response.json()


def _new_user(**overrides):
    variables = {
        "username": "jdoe",
        "email": "jdoe@example.com",
        "password": "secret123",
        "firstName": "John",
        "lastName": "Doe",
    }
    variables.update(overrides)
    return variables


def test_users_query_lists_seeded_accounts(api_client, session_factory):
    with session_factory() as db:
        seed_users_if_empty(db)

    body = _post(api_client, f"{{ users {{ {USER_FIELDS} }} }}")

    users = body["data"]["users"]
    assert [user["username"] for user in users] == ["admin", "manager", "user", "guest"]
    assert users[0]["passwordHash"] == hash_password("admin123")
    assert users[0]["lastLoginAt"] is None
    assert users[0]["isActive"] is True


def test_user_query_by_username_and_id(api_client, session_factory):
    with session_factory() as db:
        seed_users_if_empty(db)
        manager_id = db.query(User).filter(User.username == "manager").one().id

    by_name = _post(api_client, 'query { user(username: "manager") { id role } }')
    by_id = _post(api_client, "query($id: Int!) { userById(id: $id) { username } }", {"id": manager_id})
    missing = _post(api_client, 'query { user(username: "nobody") { id } }')

    assert by_name["data"]["user"] == {"id": manager_id, "role": "Manager"}
    assert by_id["data"]["userById"] == {"username": "manager"}
    assert missing == {"data": {"user": None}}


def test_add_user_defaults_role_and_hashes_password(api_client, session_factory):
    body = _post(api_client, ADD_USER, _new_user())

    assert "errors" not in body
    created = body["data"]["addUser"]
    assert created["role"] == "User"
    assert created["isActive"] is True
    assert created["createdAt"]
    assert created["passwordHash"] == hash_password("secret123")

    with session_factory() as db:
        assert db.get(User, created["id"]).password_hash != "secret123"


def test_add_user_accepts_explicit_role(api_client):
    body = _post(api_client, ADD_USER, _new_user(role="Manager"))

    assert body["data"]["addUser"]["role"] == "Manager"


def test_add_user_null_role_falls_back_to_user(api_client):
    body = _post(api_client, ADD_USER, _new_user(role=None))

    assert "errors" not in body
    assert body["data"]["addUser"]["role"] == "User"


def test_add_user_rejects_invalid_role(api_client):
    body = _post(api_client, ADD_USER, _new_user(role="Owner"))

    assert body["data"] == {"addUser": None}
    assert body["errors"][0]["message"] == "Error adding user: Invalid role 'Owner'"


def test_add_user_rejects_duplicate_username_then_email(api_client):
    _post(api_client, ADD_USER, _new_user())

    same_name = _post(api_client, ADD_USER, _new_user(email="other@example.com"))
    same_email = _post(api_client, ADD_USER, _new_user(username="other"))

    assert same_name["errors"][0]["message"] == "Error adding user: Username 'jdoe' already exists"
    assert same_email["errors"][0]["message"] == "Error adding user: Email 'jdoe@example.com' already exists"


def test_update_user_role(api_client):
    created = _post(api_client, ADD_USER, _new_user())["data"]["addUser"]

    body = _post(
        api_client,
        "mutation($id: Int!, $role: String!) { updateUserRole(id: $id, role: $role) { id role } }",
        {"id": created["id"], "role": "Guest"},
    )

    assert body["data"]["updateUserRole"] == {"id": created["id"], "role": "Guest"}


def test_update_user_role_rejects_missing_user_and_bad_role(api_client):
    query = "mutation($id: Int!, $role: String!) { updateUserRole(id: $id, role: $role) { id } }"

    missing = _post(api_client, query, {"id": 42, "role": "Admin"})
    bad_role = _post(api_client, query, {"id": 42, "role": "root"})

    assert missing["errors"][0]["message"] == "Error updating user role: User with id 42 not found"
    assert bad_role["errors"][0]["message"] == "Error updating user role: Invalid role 'root'"


def test_update_user_last_login_sets_timestamp(api_client):
    created = _post(api_client, ADD_USER, _new_user())["data"]["addUser"]
    assert created["lastLoginAt"] is None

    body = _post(
        api_client,
        "mutation($id: Int!) { updateUserLastLogin(id: $id) { id lastLoginAt } }",
        {"id": created["id"]},
    )

    assert body["data"]["updateUserLastLogin"]["lastLoginAt"] is not None


def test_update_user_last_login_missing_user(api_client):
    body = _post(api_client, "mutation { updateUserLastLogin(id: 9) { id } }")

    assert body["data"] == {"updateUserLastLogin": None}
    assert body["errors"][0]["message"] == "Error updating user last login: User with id 9 not found"
