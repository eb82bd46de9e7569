"""Single entry point over the Superset services.

One constructor taking host and credentials, one method per entity
operation. Each call returns a plain record or raises a SupersetError.
"""
from __future__ import annotations
from typing import List, Optional

from .client import REQUEST_TIMEOUT, SupersetClient
from .models import DEFAULT_FILTER_TYPE, RowLevelSecurityRule, User
from .roles import RoleService
from .row_level_security import RowLevelSecurityService
from .users import UserService


class SupersetAdminClient:
    """Users, roles and row level security rules of one Superset instance.

    Usage:
        superset = SupersetAdminClient("http://superset:8088", "admin", "admin")
        user_id = superset.create_user("alice", "Alice", "Smith", "alice@example.com", "S3cret!", True, [4])
        user = superset.get_user(user_id)
    """

    def __init__(
        self,
        host: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        verify: bool = True,
        client: Optional[SupersetClient] = None,
    ):
        self.client = client or SupersetClient(host, username, password, timeout=timeout, verify=verify)
        self.users = UserService(self.client)
        self.roles = RoleService(self.client)
        self.row_level_security = RowLevelSecurityService(self.client)

    @property
    def host(self) -> str:
        return self.client.host

    def login(self) -> str:
        return self.client.login()

    def fetch_csrf_token(self) -> str:
        return self.client.fetch_csrf_token()

    # Users
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
        return self.users.create_user(username, first_name, last_name, email, password, active, roles)

    def get_user(self, user_id: int) -> User:
        return self.users.get_user(user_id)

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
        self.users.update_user(user_id, username, first_name, last_name, email, password, active, roles)

    def delete_user(self, user_id: int) -> None:
        self.users.delete_user(user_id)

    def fetch_users(self) -> List[User]:
        return self.users.fetch_users()

    # Roles
    def get_role_id_by_name(self, name: str) -> int:
        return self.roles.get_role_id_by_name(name)

    # Row level security
    def create_row_level_security(
        self,
        name: str,
        tables: List[int],
        clause: str,
        role_ids: Optional[List[int]] = None,
        group_key: str = "",
        filter_type: str = DEFAULT_FILTER_TYPE,
        description: str = "",
    ) -> int:
        return self.row_level_security.create_row_level_security(
            name, tables, clause, role_ids, group_key, filter_type, description
        )

    def get_row_level_security(self, rls_id: int) -> RowLevelSecurityRule:
        return self.row_level_security.get_row_level_security(rls_id)

    def update_row_level_security(
        self,
        rls_id: int,
        name: str,
        tables: List[int],
        clause: str,
        role_ids: Optional[List[int]] = None,
        group_key: str = "",
        filter_type: str = DEFAULT_FILTER_TYPE,
        description: str = "",
    ) -> None:
        self.row_level_security.update_row_level_security(
            rls_id, name, tables, clause, role_ids, group_key, filter_type, description
        )

    def delete_row_level_security(self, rls_id: int) -> None:
        self.row_level_security.delete_row_level_security(rls_id)
