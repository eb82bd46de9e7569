"""Superset REST API client library.

This package provides a modular, testable interface to Superset's security
and row level security endpoints.

Architecture:
- client.py: HTTP client with login, CSRF handling and status checks
- users.py: User lifecycle operations (create, read, update, delete, list)
- roles.py: Role lookup by name
- row_level_security.py: Row level security rule operations
- models.py: Plain records decoded from API responses
- admin.py: SupersetAdminClient, one object exposing every operation
- exceptions.py: Typed exceptions for error handling

Usage:
    from superset_admin.core.superset import SupersetAdminClient

    superset = SupersetAdminClient("http://superset:8088", "admin", "admin")
    role_id = superset.get_role_id_by_name("Gamma")
    user_id = superset.create_user("alice", "Alice", "Smith", "alice@example.com", "S3cret!", True, [role_id])
"""
from .client import (
    SupersetClient,
    create_client_with_token,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    SupersetError,
    AuthError,
    HTTPStatusError,
    DecodeError,
    NotFoundError,
    RoleNotFoundError,
)
from .models import (
    Credential,
    Role,
    User,
    RowLevelSecurityRule,
    DEFAULT_FILTER_TYPE,
)
from .users import UserService
from .roles import RoleService
from .row_level_security import RowLevelSecurityService
from .admin import SupersetAdminClient

__all__ = [
    # Client
    "SupersetClient",
    "SupersetAdminClient",
    "create_client_with_token",
    "REQUEST_TIMEOUT",

    # Exceptions
    "SupersetError",
    "AuthError",
    "HTTPStatusError",
    "DecodeError",
    "NotFoundError",
    "RoleNotFoundError",

    # Records
    "Credential",
    "Role",
    "User",
    "RowLevelSecurityRule",
    "DEFAULT_FILTER_TYPE",

    # Services
    "UserService",
    "RoleService",
    "RowLevelSecurityService",
]
