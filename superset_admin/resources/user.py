"""Managed Superset user resource."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from ..core.superset import SupersetError
from ..core.validators import parse_import_id
from .base import Resource, ResourceError, is_not_found, reconcile_ids, timestamp

logger = logging.getLogger(__name__)


@dataclass
class UserResourceModel:
    """Desired/observed state of a user.

    ``username`` cannot change once created (a new value means replace);
    ``password`` is write-only and is never read back from the server.
    """
    id: Optional[int] = None
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: Optional[str] = None
    active: bool = True
    roles: List[int] = field(default_factory=list)
    last_updated: Optional[str] = None


class UserResource(Resource[UserResourceModel]):
    """Create, read, update, delete and import Superset users."""

    type_name = "superset_user"

    def create(self, plan: UserResourceModel) -> UserResourceModel:
        logger.debug("Starting Create method")
        if not plan.password:
            raise ResourceError("Missing Password", "Password is required when creating a new user")

        try:
            user_id = self.client.create_user(
                plan.username,
                plan.first_name,
                plan.last_name,
                plan.email,
                plan.password,
                plan.active,
                list(plan.roles),
            )
        except SupersetError as exc:
            raise ResourceError("Unable to Create Superset User", f"CreateUser failed: {exc}") from exc

        state = replace(plan, id=user_id, last_updated=timestamp())
        logger.debug(f"Created user: ID={state.id}, Username={state.username}")
        return state

    def read(self, state: UserResourceModel) -> UserResourceModel:
        logger.debug("Starting Read method")
        try:
            user = self.client.get_user(state.id)
        except SupersetError as exc:
            raise ResourceError("Error reading user", f"Could not read user ID {state.id}: {exc}") from exc

        logger.debug(f"API returned user: id={user.id}, username={user.username}")
        return replace(
            state,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            active=user.active,
            roles=reconcile_ids(state.roles, user.role_ids),
        )

    def update(self, plan: UserResourceModel, state: UserResourceModel) -> UserResourceModel:
        logger.debug("Starting Update method")
        try:
            self.client.update_user(
                state.id,
                plan.username,
                plan.first_name,
                plan.last_name,
                plan.email,
                plan.password or "",
                plan.active,
                list(plan.roles),
            )
        except SupersetError as exc:
            raise ResourceError("Failed to update user", f"Error: {exc}") from exc

        new_state = replace(plan, id=state.id, last_updated=timestamp())
        logger.debug(f"Updated user: ID={new_state.id}, Username={new_state.username}")
        return new_state

    def delete(self, state: UserResourceModel) -> None:
        logger.debug("Starting Delete method")
        try:
            self.client.delete_user(state.id)
        except SupersetError as exc:
            if is_not_found(exc):
                logger.warning(f"User ID {state.id} not found, removing from state")
                return
            raise ResourceError("Unable to Delete Superset User", f"DeleteUser failed: {exc}") from exc
        logger.debug(f"Deleted user: ID={state.id}")

    def import_state(self, import_id: str) -> UserResourceModel:
        logger.debug(f"Starting ImportState method: import_id={import_id}")
        try:
            user_id = parse_import_id(import_id)
        except ValueError as exc:
            raise ResourceError("Invalid Import ID", str(exc)) from exc
        return self.read(UserResourceModel(id=user_id))
