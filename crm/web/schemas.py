from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from crm.models.roles import AppRoles


class GraphQLModel(BaseModel):
    """Models exchanged with the GraphQL API use camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Customer(GraphQLModel):
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    contact: str = ""
    email: str = ""
    date_of_birth: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class User(GraphQLModel):
    id: int = 0
    username: str = ""
    email: str = ""
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = AppRoles.USER
    is_active: bool = True
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class SessionUser(BaseModel):
    id: int
    username: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = AppRoles.GUEST

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class CustomerForm(BaseModel):
    id: int = 0
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    date_of_birth: date

    _strip_fields = field_validator("first_name", "last_name", "contact", "email", mode="before")(_strip)

    def to_customer(self) -> Customer:
        return Customer(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            contact=self.contact,
            email=str(self.email),
            date_of_birth=datetime.combine(self.date_of_birth, time.min),
        )


class UserCreateForm(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field("", max_length=50)
    last_name: str = Field("", max_length=50)
    role: str = AppRoles.USER

    _strip_fields = field_validator("username", "email", "first_name", "last_name", mode="before")(_strip)

    @field_validator("role")
    @classmethod
    def _known_role(cls, value: str) -> str:
        if value not in AppRoles.ALL_ROLES:
            raise ValueError(f"Role must be one of {', '.join(AppRoles.ALL_ROLES)}")
        return value

    def to_user(self) -> User:
        return User(
            username=self.username,
            email=str(self.email),
            first_name=self.first_name,
            last_name=self.last_name,
            role=self.role,
            is_active=True,
        )


class RegisterForm(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    confirm_password: str
    first_name: str = Field("", max_length=50)
    last_name: str = Field("", max_length=50)

    _strip_fields = field_validator("username", "email", "first_name", "last_name", mode="before")(_strip)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterForm":
        if self.password != self.confirm_password:
            raise ValueError("The password and confirmation password do not match.")
        return self


def validation_messages(exc) -> list[str]:
    """Flatten a pydantic ValidationError into user-facing messages."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(f"{location}: {message}" if location else message)
    return messages
