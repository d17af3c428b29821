from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty, require_non_negative
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import EmployeeRate, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Failed login for %s", user.email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, name=user.display_name, email=user.email, role=user.role)


class EmployeeService:
    """Use case: manage employees (admin) and read the directory for payroll."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def list_employees(self) -> Sequence[User]:
        return list(self._users.list_by_role(Role.EMPLOYEE))

    def employee_rates(self) -> list[EmployeeRate]:
        return [EmployeeRate(user_id=u.user_id, hourly_rate=float(u.hourly_rate or 0)) for u in self.list_employees()]

    def create_employee(self, *, email: str, password: str, full_name: str, hourly_rate: float = 0.0) -> User:
        email = require_email(email)
        full_name = require_non_empty(full_name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        rate = require_non_negative(hourly_rate, "Hourly rate")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
            hourly_rate=rate,
        )
        logger.info("Created employee %s (user_id=%s, rate=%.2f)", email, user_id, rate)
        return self.get_user(user_id)

    def update_employee(
        self,
        user_id: int,
        *,
        full_name: Optional[str] = None,
        hourly_rate: Optional[float] = None,
    ) -> User:
        if full_name is not None:
            full_name = require_non_empty(full_name, "Name")
        if hourly_rate is not None:
            hourly_rate = require_non_negative(hourly_rate, "Hourly rate")

        if not self._users.update_profile(int(user_id), full_name=full_name, hourly_rate=hourly_rate):
            raise NotFoundError(f"User {user_id} not found")
        logger.info("Updated employee user_id=%s", user_id)
        return self.get_user(user_id)

    def delete_employee(self, user_id: int) -> None:
        user = self.get_user(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError(f"User {user_id} not found")
        logger.info("Deleted employee user_id=%s", user_id)
