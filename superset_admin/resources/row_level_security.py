"""Managed row level security rule resource."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from ..core.superset import DEFAULT_FILTER_TYPE, SupersetError
from ..core.validators import parse_import_id, validate_filter_type
from .base import Resource, ResourceError, is_not_found, reconcile_ids

logger = logging.getLogger(__name__)


@dataclass
class RowLevelSecurityResourceModel:
    id: Optional[int] = None
    name: str = ""
    tables: List[int] = field(default_factory=list)
    clause: str = ""
    role_ids: Optional[List[int]] = None
    group_key: Optional[str] = None
    filter_type: Optional[str] = None
    description: Optional[str] = None


def _filter_type(plan: RowLevelSecurityResourceModel) -> str:
    try:
        return validate_filter_type(plan.filter_type or DEFAULT_FILTER_TYPE)
    except ValueError as exc:
        raise ResourceError("Invalid Filter Type", str(exc)) from exc


class RowLevelSecurityResource(Resource[RowLevelSecurityResourceModel]):
    """Create, read, update, delete and import row level security rules."""

    type_name = "superset_row_level_security"

    def create(self, plan: RowLevelSecurityResourceModel) -> RowLevelSecurityResourceModel:
        filter_type = _filter_type(plan)
        logger.debug(f"Creating RLS rule: tables={plan.tables}")
        try:
            rls_id = self.client.create_row_level_security(
                plan.name,
                list(plan.tables),
                plan.clause,
                list(plan.role_ids or []),
                plan.group_key or "",
                filter_type,
                plan.description or "",
            )
        except SupersetError as exc:
            raise ResourceError("Error creating RLS rule", f"Could not create RLS rule: {exc}") from exc

        logger.debug(f"Created RLS rule: id={rls_id}")
        return replace(plan, id=rls_id, filter_type=filter_type)

    def read(self, state: RowLevelSecurityResourceModel) -> RowLevelSecurityResourceModel:
        try:
            rls = self.client.get_row_level_security(state.id)
        except SupersetError as exc:
            raise ResourceError("Error reading RLS rule", f"Could not read RLS rule ID {state.id}: {exc}") from exc

        return replace(
            state,
            name=rls.name,
            clause=rls.clause,
            group_key=rls.group_key,
            filter_type=rls.filter_type,
            description=rls.description,
            tables=reconcile_ids(state.tables, rls.tables),
            role_ids=reconcile_ids(state.role_ids, rls.role_ids),
        )

    def update(
        self, plan: RowLevelSecurityResourceModel, state: RowLevelSecurityResourceModel
    ) -> RowLevelSecurityResourceModel:
        filter_type = _filter_type(plan)
        rls_id = plan.id if plan.id is not None else state.id
        try:
            self.client.update_row_level_security(
                rls_id,
                plan.name,
                list(plan.tables),
                plan.clause,
                list(plan.role_ids or []),
                plan.group_key or "",
                filter_type,
                plan.description or "",
            )
        except SupersetError as exc:
            raise ResourceError("Error updating RLS rule", f"Could not update RLS rule ID {rls_id}: {exc}") from exc

        logger.debug(f"Updated RLS rule: id={rls_id}")
        return replace(plan, id=rls_id, filter_type=filter_type)

    def delete(self, state: RowLevelSecurityResourceModel) -> None:
        try:
            self.client.delete_row_level_security(state.id)
        except SupersetError as exc:
            if is_not_found(exc):
                logger.warning(f"RLS rule ID {state.id} not found, removing from state")
                return
            raise ResourceError("Error deleting RLS rule", f"Could not delete RLS rule: {exc}") from exc
        logger.debug(f"Deleted RLS rule: id={state.id}")

    def import_state(self, import_id: str) -> RowLevelSecurityResourceModel:
        try:
            rls_id = parse_import_id(import_id)
        except ValueError as exc:
            raise ResourceError("Error importing RLS rule", f"Could not parse RLS rule ID: {exc}") from exc
        return self.read(RowLevelSecurityResourceModel(id=rls_id))
