from __future__ import annotations

import logging

import graphene
from graphql import GraphQLError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crm.graph.context import get_session
from crm.graph.types import CustomerType, UserType
from crm.models.customer import Customer
from crm.models.roles import AppRoles, is_valid_role
from crm.models.user import User, utcnow
from crm.services.passwords import hash_password

logger = logging.getLogger(__name__)


class MutationFailed(GraphQLError):
    """A mutation failure reported to the client as ``Error <action>: <detail>``."""

    def __init__(self, action: str, detail: str):
        super().__init__(f"Error {action}: {detail}")
        self.action = action
        self.detail = detail


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Mutation failed while %s", action)
        raise MutationFailed(action, str(exc)) from exc


def _customer_or_fail(db: Session, customer_id: int, action: str) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        logger.warning("Customer not found id=%s action=%s", customer_id, action)
        raise MutationFailed(action, f"Customer with id {customer_id} not found")
    return customer


def _user_or_fail(db: Session, user_id: int, action: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        logger.warning("User not found id=%s action=%s", user_id, action)
        raise MutationFailed(action, f"User with id {user_id} not found")
    return user


def _customer_arguments(with_id: bool = False) -> dict:
    arguments = {
        "first_name": graphene.String(required=True),
        "last_name": graphene.String(required=True),
        "contact": graphene.String(required=True),
        "email": graphene.String(required=True),
        "date_of_birth": graphene.DateTime(required=True),
    }
    if with_id:
        arguments["id"] = graphene.Int(required=True)
    return arguments


class Mutation(graphene.ObjectType):
    add_customer = graphene.Field(CustomerType, **_customer_arguments())
    update_customer = graphene.Field(CustomerType, **_customer_arguments(with_id=True))
    delete_customer = graphene.Boolean(id=graphene.Int(required=True))

    add_user = graphene.Field(
        UserType,
        username=graphene.String(required=True),
        email=graphene.String(required=True),
        password=graphene.String(required=True),
        first_name=graphene.String(required=True),
        last_name=graphene.String(required=True),
        role=graphene.String(default_value=AppRoles.USER),
    )
    update_user_role = graphene.Field(
        UserType,
        id=graphene.Int(required=True),
        role=graphene.String(required=True),
    )
    update_user_last_login = graphene.Field(UserType, id=graphene.Int(required=True))

    def resolve_add_customer(root, info, first_name, last_name, contact, email, date_of_birth):
        action = "adding customer"
        db = get_session(info)
        customer = Customer(
            first_name=first_name,
            last_name=last_name,
            contact=contact,
            email=email,
            date_of_birth=date_of_birth,
        )
        db.add(customer)
        _commit(db, action)
        db.refresh(customer)
        logger.info("Customer created id=%s", customer.id)
        return customer

    def resolve_update_customer(root, info, id, first_name, last_name, contact, email, date_of_birth):
        action = "updating customer"
        db = get_session(info)
        customer = _customer_or_fail(db, id, action)

        customer.first_name = first_name
        customer.last_name = last_name
        customer.contact = contact
        customer.email = email
        customer.date_of_birth = date_of_birth

        _commit(db, action)
        db.refresh(customer)
        logger.info("Customer updated id=%s", customer.id)
        return customer

    def resolve_delete_customer(root, info, id):
        action = "deleting customer"
        db = get_session(info)
        customer = _customer_or_fail(db, id, action)

        db.delete(customer)
        _commit(db, action)
        logger.info("Customer deleted id=%s", id)
        return True

    def resolve_add_user(root, info, username, email, password, first_name, last_name, role=AppRoles.USER):
        action = "adding user"
        db = get_session(info)
        role = role or AppRoles.USER

        if not is_valid_role(role):
            raise MutationFailed(action, f"Invalid role '{role}'")

        # Not atomic: concurrent requests can still insert duplicates.
        if db.query(User).filter(User.username == username).first():
            raise MutationFailed(action, f"Username '{username}' already exists")
        if db.query(User).filter(User.email == email).first():
            raise MutationFailed(action, f"Email '{email}' already exists")

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
        _commit(db, action)
        db.refresh(user)
        logger.info("User created id=%s username=%s role=%s", user.id, user.username, user.role)
        return user

    def resolve_update_user_role(root, info, id, role):
        action = "updating user role"
        db = get_session(info)

        if not is_valid_role(role):
            raise MutationFailed(action, f"Invalid role '{role}'")

        user = _user_or_fail(db, id, action)
        user.role = role
        _commit(db, action)
        db.refresh(user)
        logger.info("User role updated id=%s role=%s", user.id, user.role)
        return user

    def resolve_update_user_last_login(root, info, id):
        action = "updating user last login"
        db = get_session(info)
        user = _user_or_fail(db, id, action)

        user.last_login_at = utcnow()
        _commit(db, action)
        db.refresh(user)
        return user
