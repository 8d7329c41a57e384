from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from crm.core.database import Base
from crm.models.roles import AppRoles


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Uniqueness is checked by the addUser mutation, not by a constraint.
    username = Column(String(50), nullable=False, index=True)
    email = Column(String(100), nullable=False, index=True)
    password_hash = Column(String(100), nullable=False)

    first_name = Column(String(50), nullable=False, default="")
    last_name = Column(String(50), nullable=False, default="")

    # "Admin" | "Manager" | "User" | "Guest"
    role = Column(String(20), nullable=False, default=AppRoles.USER)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_login_at = Column(DateTime, nullable=True)
