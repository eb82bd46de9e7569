"""Superset row level security rule operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ..validators import validate_filter_type
from .client import SupersetClient
from .models import DEFAULT_FILTER_TYPE, RowLevelSecurityRule

logger = logging.getLogger(__name__)

RLS_PATH = "/api/v1/rowlevelsecurity/"
RLS_ITEM_PATH = "/api/v1/rowlevelsecurity/{rls_id}"


def _rls_payload(
    name: str,
    tables: List[int],
    clause: str,
    role_ids: Optional[List[int]],
    group_key: str,
    filter_type: str,
    description: str,
) -> Dict[str, Any]:
    return {
        "name": name,
        "tables": list(tables),
        "clause": clause,
        "roles": list(role_ids or []),
        "group_key": group_key or "",
        "filter_type": validate_filter_type(filter_type or DEFAULT_FILTER_TYPE),
        "description": description or "",
    }


class RowLevelSecurityService:
    """Service for managing row level security rules."""

    def __init__(self, client: SupersetClient):
        self.client = client

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
        """Create a rule and return its numeric id.

        Args:
            name: Rule name
            tables: Dataset ids the clause applies to
            clause: SQL predicate, e.g. ``user_id = 1``
            role_ids: Role ids the rule targets
            group_key: Rules sharing a group key are OR-ed together
            filter_type: "Regular" or "Base"
            description: Free text

        Returns:
            New rule id
        """
        payload = _rls_payload(name, tables, clause, role_ids, group_key, filter_type, description)
        resp = self.client.post(RLS_PATH, "create_row_level_security", json=payload)
        rls_id = self.client.decode_created_id(resp, "create_row_level_security")
        logger.debug(f"Created RLS rule '{name}' (id={rls_id}, tables={payload['tables']})")
        return rls_id

    def get_row_level_security(self, rls_id: int) -> RowLevelSecurityRule:
        resp = self.client.get(RLS_ITEM_PATH.format(rls_id=rls_id), "get_row_level_security")
        return RowLevelSecurityRule.from_api(
            self.client.decode_record(resp, "get_row_level_security", rls_id)
        )

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
        payload = _rls_payload(name, tables, clause, role_ids, group_key, filter_type, description)
        self.client.put(RLS_ITEM_PATH.format(rls_id=rls_id), "update_row_level_security", json=payload)
        logger.debug(f"Updated RLS rule id={rls_id}")

    def delete_row_level_security(self, rls_id: int) -> None:
        self.client.delete(RLS_ITEM_PATH.format(rls_id=rls_id), "delete_row_level_security")
        logger.debug(f"Deleted RLS rule id={rls_id}")
