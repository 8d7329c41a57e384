from __future__ import annotations

import logging

from crm.models.roles import AppRoles
from crm.services import passwords
from crm.web.schemas import RegisterForm, User
from crm.web.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, user_service: UserService):
        self.user_service = user_service

    async def validate_user(self, username: str, password: str) -> bool:
        try:
            user = await self.user_service.get_user_by_username(username)
            if user is None:
                logger.warning("Login rejected: user not found username=%s", username)
                return False
            if not user.is_active:
                logger.warning("Login rejected: user inactive username=%s", username)
                return False
            if not self.verify_password(password, user.password_hash):
                logger.warning("Login rejected: invalid password username=%s", username)
                return False

            await self.user_service.update_user_last_login(user.id)
            logger.info("Login succeeded username=%s", username)
            return True
        except Exception:
            logger.exception("Error validating user username=%s", username)
            return False

    async def get_user_by_username(self, username: str) -> User | None:
        return await self.user_service.get_user_by_username(username)

    async def register_user(self, form: RegisterForm) -> bool:
        try:
            existing = await self.user_service.get_user_by_username(form.username)
            if existing is not None:
                logger.warning("Registration rejected: username exists username=%s", form.username)
                return False

            user = User(
                username=form.username,
                email=str(form.email),
                first_name=form.first_name,
                last_name=form.last_name,
                role=AppRoles.USER,
                is_active=True,
            )
            created = await self.user_service.create_user(user, form.password)
            if created is None:
                return False
            logger.info("User registered username=%s id=%s", created.username, created.id)
            return True
        except Exception:
            logger.exception("Error registering user username=%s", form.username)
            return False

    def hash_password(self, password: str) -> str:
        return passwords.hash_password(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        return passwords.verify_password(password, password_hash)
