from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for the user directory.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        """Newest first."""
        raise NotImplementedError

    def create_user(
        self,
        *,
        full_name: Optional[str],
        email: str,
        password_hash: str,
        role: Role,
        hourly_rate: float,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: Optional[str] = None,
        hourly_rate: Optional[float] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
