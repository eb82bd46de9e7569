"""Superset role lookups.

Roles are read-only from this package's point of view: they are looked up by
name or embedded in user responses, never created or modified here.
"""
from __future__ import annotations
import logging
from typing import List

from .client import SupersetClient
from .exceptions import DecodeError, RoleNotFoundError
from .models import Role

logger = logging.getLogger(__name__)

ROLES_PATH = "/api/v1/security/roles/"


def _rison_string(value: str) -> str:
    """Quote a string for a rison query (``!`` and ``'`` are escaped with ``!``)."""
    escaped = value.replace("!", "!!").replace("'", "!'")
    return f"'{escaped}'"


def role_name_query(name: str) -> str:
    return f"(filters:!((col:name,opr:eq,value:{_rison_string(name)})),page_size:100)"


class RoleService:
    """Service for looking up Superset roles."""

    def __init__(self, client: SupersetClient):
        self.client = client

    def find_roles(self, name: str) -> List[Role]:
        """Return roles whose name matches exactly, in server order."""
        resp = self.client.get(ROLES_PATH, "get_role_id_by_name", params={"q": role_name_query(name)})
        result = self.client.decode_result(resp, "get_role_id_by_name")
        if not isinstance(result, list):
            raise DecodeError("get_role_id_by_name: 'result' is not a list")
        # The server-side filter may be case-insensitive; keep exact matches only
        return [role for role in (Role.from_api(item) for item in result) if role.name == name]

    def get_role_id_by_name(self, name: str) -> int:
        """Return the id of the role called ``name``.

        When several roles match, the first one in server order wins.

        Raises:
            RoleNotFoundError: If no role has exactly this name
        """
        matches = self.find_roles(name)
        if not matches:
            raise RoleNotFoundError(f"role '{name}' not found")
        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} roles named '{name}'; using id={matches[0].id}"
            )
        return matches[0].id
