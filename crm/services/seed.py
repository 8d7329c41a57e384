from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from crm.core.database import Base
from crm.models.customer import Customer
from crm.models.roles import AppRoles
from crm.models.user import User, utcnow
from crm.services.passwords import hash_password

logger = logging.getLogger(__name__)
SEED_PREFIX = "[SEED]"

SEED_USERS = [
    {
        "username": "admin",
        "email": "admin@example.com",
        "password": "admin123",
        "first_name": "Admin",
        "last_name": "User",
        "role": AppRoles.ADMIN,
    },
    {
        "username": "manager",
        "email": "manager@example.com",
        "password": "manager123",
        "first_name": "Manager",
        "last_name": "User",
        "role": AppRoles.MANAGER,
    },
    {
        "username": "user",
        "email": "user@example.com",
        "password": "user123",
        "first_name": "Regular",
        "last_name": "User",
        "role": AppRoles.USER,
    },
    {
        "username": "guest",
        "email": "guest@example.com",
        "password": "guest123",
        "first_name": "Guest",
        "last_name": "User",
        "role": AppRoles.GUEST,
    },
]

SEED_CUSTOMERS = [
    ("John", "Doe", "+1-555-0101", "john.doe@email.com", datetime(1985, 3, 15)),
    ("Jane", "Smith", "+1-555-0102", "jane.smith@email.com", datetime(1990, 7, 22)),
    ("Michael", "Johnson", "+1-555-0103", "michael.johnson@email.com", datetime(1982, 11, 8)),
    ("Sarah", "Williams", "+1-555-0104", "sarah.williams@email.com", datetime(1988, 4, 12)),
    ("David", "Brown", "+1-555-0105", "david.brown@email.com", datetime(1995, 9, 30)),
    ("Emily", "Davis", "+1-555-0106", "emily.davis@email.com", datetime(1992, 1, 18)),
    ("Robert", "Wilson", "+1-555-0107", "robert.wilson@email.com", datetime(1987, 6, 25)),
    ("Lisa", "Anderson", "+1-555-0108", "lisa.anderson@email.com", datetime(1993, 12, 3)),
    ("James", "Taylor", "+1-555-0109", "james.taylor@email.com", datetime(1980, 8, 14)),
    ("Amanda", "Martinez", "+1-555-0110", "amanda.martinez@email.com", datetime(1991, 2, 28)),
]


def seed_users_if_empty(db: Session) -> int:
    existing = db.query(User).count()
    if existing > 0:
        logger.info("%s users already present count=%s", SEED_PREFIX, existing)
        return 0

    now = utcnow()
    users = [
        User(
            username=s["username"],
            email=s["email"],
            password_hash=hash_password(s["password"]),
            first_name=s["first_name"],
            last_name=s["last_name"],
            role=s["role"],
            is_active=True,
            created_at=now,
        )
        for s in SEED_USERS
    ]
    db.add_all(users)
    db.commit()
    logger.info("%s created users count=%s", SEED_PREFIX, len(users))
    return len(users)


def seed_customers_if_empty(db: Session) -> int:
    existing = db.query(Customer).count()
    if existing > 0:
        logger.info("%s customers already present count=%s", SEED_PREFIX, existing)
        return 0

    customers = [
        Customer(
            first_name=first_name,
            last_name=last_name,
            contact=contact,
            email=email,
            date_of_birth=date_of_birth,
        )
        for first_name, last_name, contact, email, date_of_birth in SEED_CUSTOMERS
    ]
    db.add_all(customers)
    db.commit()
    logger.info("%s created customers count=%s", SEED_PREFIX, len(customers))
    return len(customers)


def initialize_database(db: Session) -> None:
    """Create the schema if needed and load the sample users and customers."""
    Base.metadata.create_all(bind=db.get_bind())
    try:
        seed_users_if_empty(db)
        seed_customers_if_empty(db)
    except Exception:
        db.rollback()
        logger.exception("%s ERROR seeding failed", SEED_PREFIX)
        raise


def upsert_user(
    db: Session,
    *,
    username: str,
    email: str,
    first_name: str,
    last_name: str,
    role: str,
    password: str | None,
) -> tuple[User, bool]:
    """Create the user or refresh an existing one with the same username."""
    if role not in AppRoles.ALL_ROLES:
        raise ValueError(f"Invalid role '{role}'. Expected one of: {', '.join(AppRoles.ALL_ROLES)}")

    existing = db.query(User).filter(User.username == username).first()
    if existing:
        existing.email = email
        existing.first_name = first_name
        existing.last_name = last_name
        existing.role = role
        existing.is_active = True
        if password:
            existing.password_hash = hash_password(password)
        db.commit()
        db.refresh(existing)
        return existing, False

    if not password:
        raise ValueError("A password is required to create a new user.")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_active=True,
        created_at=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, True
