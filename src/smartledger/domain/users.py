"""In-memory user directory.

Users are session state only: nothing here is written to the snapshot.
"""

from dataclasses import replace
from typing import Optional

from smartledger.domain.entities import User, UserRole
from smartledger.domain.errors import NotFoundError, ValidationError, user_not_found


class UserDirectory:
    """Service for managing application users for the current session."""

    def __init__(self, users: Optional[list[User]] = None):
        self._users: list[User] = list(users or [])
        self._next_id = len(self._users) + 1

    def list_users(self, active_only: bool = False) -> list[User]:
        if active_only:
            return [u for u in self._users if u.active]
        return list(self._users)

    def get_user(self, user_id: str) -> Optional[User]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def create_user(
        self,
        username: str,
        full_name: str,
        email: str,
        role: UserRole = UserRole.ACCOUNTANT,
        active: bool = True,
    ) -> User:
        """Create a user.

        Raises:
            ValidationError: If the username is already taken
        """
        if any(u.username == username for u in self._users):
            raise ValidationError(f"User with username '{username}' already exists")

        while self.get_user(str(self._next_id)) is not None:
            self._next_id += 1
        user = User(
            id=str(self._next_id),
            username=username,
            full_name=full_name,
            role=role,
            email=email,
            active=active,
        )
        self._next_id += 1
        self._users.append(user)
        return user

    def update_user(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[UserRole] = None,
        active: Optional[bool] = None,
    ) -> User:
        """Update user fields that are provided.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))

        changes = {
            key: value
            for key, value in (
                ("full_name", full_name),
                ("email", email),
                ("role", role),
                ("active", active),
            )
            if value is not None
        }
        updated = replace(user, **changes)
        self._users = [updated if u.id == user_id else u for u in self._users]
        return updated

    def delete_user(self, user_id: str) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        if self.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        self._users = [u for u in self._users if u.id != user_id]

    def count_by_role(self, role: UserRole) -> int:
        return sum(1 for u in self._users if u.role == role)
