"""Lifecycle callbacks for Superset entities managed as declarative resources.

- user.py: superset_user (create/read/update/delete/import)
- row_level_security.py: superset_row_level_security
- data_sources.py: superset_users and superset_role (read only)
- base.py: ResourceError and shared helpers
"""
from .base import Resource, ResourceError, reconcile_ids
from .user import UserResource, UserResourceModel
from .row_level_security import RowLevelSecurityResource, RowLevelSecurityResourceModel
from .data_sources import (
    RoleDataSource,
    RoleDataSourceModel,
    RoleModel,
    UserModel,
    UsersDataSource,
    UsersDataSourceModel,
)

__all__ = [
    "Resource",
    "ResourceError",
    "reconcile_ids",
    "UserResource",
    "UserResourceModel",
    "RowLevelSecurityResource",
    "RowLevelSecurityResourceModel",
    "RoleDataSource",
    "RoleDataSourceModel",
    "RoleModel",
    "UserModel",
    "UsersDataSource",
    "UsersDataSourceModel",
]
