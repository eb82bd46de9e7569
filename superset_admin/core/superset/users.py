"""Superset user management operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .client import SupersetClient
from .exceptions import DecodeError
from .models import User

logger = logging.getLogger(__name__)

USERS_PATH = "/api/v1/security/users/"
USER_PATH = "/api/v1/security/users/{user_id}"
USERS_LIST_PATH = "/api/v1/security/users/?q=(page_size:5000)"


def _user_payload(
    username: str,
    first_name: str,
    last_name: str,
    email: str,
    password: Optional[str],
    active: bool,
    roles: Optional[List[int]],
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "username": username,
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "active": active,
        "roles": list(roles or []),
    }
    # Empty password means "leave unchanged", never "clear"
    if password:
        payload["password"] = password
    return payload


class UserService:
    """Service for managing Superset users."""

    def __init__(self, client: SupersetClient):
        """Initialize user service.

        Args:
            client: Superset client (logs in lazily)
        """
        self.client = client

    def create_user(
        self,
        username: str,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        active: bool = True,
        roles: Optional[List[int]] = None,
    ) -> int:
        """Create a user and return its numeric id.

        Args:
            username: Login name (immutable once created)
            first_name: First name
            last_name: Last name
            email: Email address
            password: Initial password, must be non-empty
            active: Whether the account is enabled
            roles: Role ids to assign, in order

        Returns:
            New user id

        Raises:
            ValueError: If password is empty
        """
        if not password:
            raise ValueError("password is required when creating a user")
        payload = _user_payload(username, first_name, last_name, email, password, active, roles)
        resp = self.client.post(USERS_PATH, "create_user", json=payload)
        user_id = self.client.decode_created_id(resp, "create_user")
        logger.debug(f"Created user '{username}' (id={user_id})")
        return user_id

    def get_user(self, user_id: int) -> User:
        """Return the user with the given id."""
        resp = self.client.get(USER_PATH.format(user_id=user_id), "get_user")
        return User.from_api(self.client.decode_record(resp, "get_user", user_id))

    def update_user(
        self,
        user_id: int,
        username: str,
        first_name: str,
        last_name: str,
        email: str,
        password: Optional[str] = "",
        active: bool = True,
        roles: Optional[List[int]] = None,
    ) -> None:
        """Replace a user's attributes; an empty password keeps the stored one."""
        payload = _user_payload(username, first_name, last_name, email, password, active, roles)
        self.client.put(USER_PATH.format(user_id=user_id), "update_user", json=payload)
        logger.debug(f"Updated user id={user_id} (password {'changed' if password else 'unchanged'})")

    def delete_user(self, user_id: int) -> None:
        self.client.delete(USER_PATH.format(user_id=user_id), "delete_user")
        logger.debug(f"Deleted user id={user_id}")

    def fetch_users(self) -> List[User]:
        """List every user (single page of up to 5000), in server order."""
        resp = self.client.get(USERS_LIST_PATH, "fetch_users")
        result = self.client.decode_result(resp, "fetch_users")
        if not isinstance(result, list):
            raise DecodeError("fetch_users: 'result' is not a list")
        return [User.from_api(item) for item in result]
