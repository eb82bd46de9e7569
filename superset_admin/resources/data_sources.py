"""Read-only data sources: the user list and role lookup by name."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.superset import SupersetAdminClient, SupersetError
from .base import ResourceError

logger = logging.getLogger(__name__)


@dataclass
class RoleModel:
    id: int
    name: str


@dataclass
class UserModel:
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    active: bool
    roles: List[RoleModel] = field(default_factory=list)


@dataclass
class UsersDataSourceModel:
    users: List[UserModel] = field(default_factory=list)


@dataclass
class RoleDataSourceModel:
    name: str
    id: Optional[int] = None


class UsersDataSource:
    """Every user with its roles (id and name), in server order."""

    type_name = "superset_users"

    def __init__(self, client: SupersetAdminClient):
        self.client = client

    def read(self) -> UsersDataSourceModel:
        try:
            users = self.client.fetch_users()
        except SupersetError as exc:
            raise ResourceError("Unable to Read Superset Users", str(exc)) from exc

        state = UsersDataSourceModel()
        for user in users:
            state.users.append(
                UserModel(
                    id=user.id,
                    username=user.username,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    email=user.email,
                    active=user.active,
                    roles=[RoleModel(id=role.id, name=role.name) for role in user.roles],
                )
            )
        logger.debug(f"Read {len(state.users)} users")
        return state


class RoleDataSource:
    """Resolve a role name to its numeric id."""

    type_name = "superset_role"

    def __init__(self, client: SupersetAdminClient):
        self.client = client

    def read(self, config: RoleDataSourceModel) -> RoleDataSourceModel:
        try:
            role_id = self.client.get_role_id_by_name(config.name)
        except SupersetError as exc:
            raise ResourceError("Unable to Read Superset Role", str(exc)) from exc
        return RoleDataSourceModel(name=config.name, id=role_id)
