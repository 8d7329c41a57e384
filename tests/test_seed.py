from crm.models.customer import Customer
from crm.models.roles import AppRoles
from crm.models.user import User
from crm.services.passwords import verify_password
from crm.services.seed import (
    SEED_CUSTOMERS,
    SEED_USERS,
    initialize_database,
    seed_customers_if_empty,
    seed_users_if_empty,
)


def test_initialize_database_seeds_users_and_customers(db_session):
    initialize_database(db_session)

    users = db_session.query(User).order_by(User.id).all()
    assert [user.username for user in users] == ["admin", "manager", "user", "guest"]
    assert [user.role for user in users] == list(AppRoles.ALL_ROLES)
    assert all(user.is_active for user in users)
    assert all(user.last_login_at is None for user in users)
    assert verify_password("admin123", users[0].password_hash)

    assert db_session.query(Customer).count() == len(SEED_CUSTOMERS) == 10


def test_seeding_is_skipped_when_tables_have_rows(db_session):
    assert seed_users_if_empty(db_session) == len(SEED_USERS)
    assert seed_customers_if_empty(db_session) == len(SEED_CUSTOMERS)

    assert seed_users_if_empty(db_session) == 0
    assert seed_customers_if_empty(db_session) == 0
    assert db_session.query(User).count() == 4


def test_users_and_customers_are_seeded_independently(db_session):
    db_session.add(
        User(
            username="solo",
            email="solo@example.com",
            password_hash="x",
            first_name="Solo",
            last_name="User",
            role=AppRoles.GUEST,
        )
    )
    db_session.commit()

    initialize_database(db_session)

    assert db_session.query(User).count() == 1
    assert db_session.query(Customer).count() == 10
