from __future__ import annotations

import logging
from typing import Any

from crm.web.schemas import User
from crm.web.services.graphql_client import GraphQLClient, GraphQLResponse

logger = logging.getLogger(__name__)

USER_FIELDS = "id username email passwordHash firstName lastName role isActive createdAt lastLoginAt"

GET_USERS = f"query GetUsers {{ users {{ {USER_FIELDS} }} }}"

GET_USER = f"""
query GetUser($username: String!) {{
  user(username: $username) {{ {USER_FIELDS} }}
}}
"""

GET_USER_BY_ID = f"""
query GetUserById($id: Int!) {{
  userById(id: $id) {{ {USER_FIELDS} }}
}}
"""

ADD_USER = f"""
mutation AddUser($username: String!, $email: String!, $password: String!, $firstName: String!, $lastName: String!, $role: String) {{
  addUser(username: $username, email: $email, password: $password, firstName: $firstName, lastName: $lastName, role: $role) {{
    {USER_FIELDS}
  }}
}}
"""

UPDATE_USER_ROLE = f"""
mutation UpdateUserRole($id: Int!, $role: String!) {{
  updateUserRole(id: $id, role: $role) {{ {USER_FIELDS} }}
}}
"""

UPDATE_USER_LAST_LOGIN = f"""
mutation UpdateUserLastLogin($id: Int!) {{
  updateUserLastLogin(id: $id) {{ {USER_FIELDS} }}
}}
"""


def _single_user(response: GraphQLResponse | None, field: str) -> User | None:
    if response is None or response.has_errors or not response.data:
        return None
    item: Any = response.data.get(field)
    return User.model_validate(item) if item else None


class UserService:
    def __init__(self, client: GraphQLClient):
        self.client = client

    async def get_users(self) -> list[User]:
        try:
            response = await self.client.execute(GET_USERS)
            if response is None or response.has_errors or not response.data:
                return []
            return [User.model_validate(item) for item in response.data.get("users") or []]
        except Exception:
            logger.exception("Error fetching users")
            return []

    async def get_user_by_username(self, username: str) -> User | None:
        try:
            response = await self.client.execute(GET_USER, {"username": username})
            return _single_user(response, "user")
        except Exception:
            logger.exception("Error fetching user username=%s", username)
            return None

    async def get_user_by_id(self, user_id: int) -> User | None:
        try:
            response = await self.client.execute(GET_USER_BY_ID, {"id": user_id})
            return _single_user(response, "userById")
        except Exception:
            logger.exception("Error fetching user id=%s", user_id)
            return None

    async def create_user(self, user: User, password: str) -> User | None:
        variables = {
            "username": user.username,
            "email": user.email,
            "password": password,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "role": user.role,
        }
        try:
            response = await self.client.execute(ADD_USER, variables)
            created = _single_user(response, "addUser")
            if created is not None:
                logger.info("User created through API id=%s role=%s", created.id, created.role)
            return created
        except Exception:
            logger.exception("Error creating user username=%s", user.username)
            return None

    async def update_user_role(self, user_id: int, role: str) -> User | None:
        try:
            response = await self.client.execute(UPDATE_USER_ROLE, {"id": user_id, "role": role})
            return _single_user(response, "updateUserRole")
        except Exception:
            logger.exception("Error updating role for user id=%s", user_id)
            return None

    async def update_user_last_login(self, user_id: int) -> User | None:
        try:
            response = await self.client.execute(UPDATE_USER_LAST_LOGIN, {"id": user_id})
            return _single_user(response, "updateUserLastLogin")
        except Exception:
            logger.exception("Error updating last login for user id=%s", user_id)
            return None
