"""Plain records mirroring Superset's security API payloads.

Records are produced fresh on every call and handed to the caller; nothing
here is cached or shared between calls.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .exceptions import DecodeError

DEFAULT_FILTER_TYPE = "Regular"


def _require(payload: Dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(payload, dict):
        raise DecodeError(f"{kind}: expected a JSON object, got {type(payload).__name__}")
    if key not in payload:
        raise DecodeError(f"{kind}: missing field '{key}'")
    return payload[key]


def _as_int(value: Any, kind: str, key: str) -> int:
    # bool is an int subclass; a flag in an id slot is a malformed payload
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{kind}: field '{key}' is not an integer: {value!r}")
    return value


def _id_list(items: Optional[List[Any]], kind: str, key: str) -> List[int]:
    """Accept either bare ids or objects carrying an ``id``, preserving order."""
    ids: List[int] = []
    for item in items or []:
        if isinstance(item, dict):
            ids.append(_as_int(_require(item, "id", kind), kind, key))
        else:
            ids.append(_as_int(item, kind, key))
    return ids


@dataclass
class Credential:
    """Bearer token plus the CSRF material for the next mutation."""
    bearer_token: str
    csrf_token: str = ""
    csrf_cookies: Dict[str, str] = field(default_factory=dict)
    acquired_at: datetime = field(default_factory=datetime.now)


@dataclass
class Role:
    id: int
    name: str = ""

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Role":
        return cls(
            id=_as_int(_require(payload, "id", "role"), "role", "id"),
            name=payload.get("name") or "",
        )


@dataclass
class User:
    """A Superset user as returned by ``/api/v1/security/users``."""
    id: int
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    active: bool = True
    roles: List[Role] = field(default_factory=list)

    @property
    def role_ids(self) -> List[int]:
        return [role.id for role in self.roles]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "User":
        user_id = _as_int(_require(payload, "id", "user"), "user", "id")
        roles = []
        for item in payload.get("roles") or []:
            if isinstance(item, dict):
                roles.append(Role.from_api(item))
            else:
                roles.append(Role(id=_as_int(item, "user", "roles")))
        return cls(
            id=user_id,
            username=_require(payload, "username", "user"),
            first_name=payload.get("first_name") or "",
            last_name=payload.get("last_name") or "",
            email=payload.get("email") or "",
            active=bool(payload.get("active", True)),
            roles=roles,
        )


@dataclass
class RowLevelSecurityRule:
    """A row level security rule; ``tables`` and ``role_ids`` keep server order."""
    id: int
    name: str
    clause: str = ""
    group_key: str = ""
    filter_type: str = DEFAULT_FILTER_TYPE
    description: str = ""
    tables: List[int] = field(default_factory=list)
    role_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RowLevelSecurityRule":
        kind = "row level security rule"
        return cls(
            id=_as_int(_require(payload, "id", kind), kind, "id"),
            name=_require(payload, "name", kind),
            clause=payload.get("clause") or "",
            group_key=payload.get("group_key") or "",
            filter_type=payload.get("filter_type") or DEFAULT_FILTER_TYPE,
            description=payload.get("description") or "",
            tables=_id_list(payload.get("tables"), kind, "tables"),
            role_ids=_id_list(payload.get("roles"), kind, "roles"),
        )
