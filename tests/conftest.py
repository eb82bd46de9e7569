"""Pytest shared fixtures: network guard and an in-memory fake Superset."""
import json
import pathlib
import re
import sys
from types import SimpleNamespace
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from superset_admin.core.superset import SupersetAdminClient

HOST = "http://superset-host"
ADMIN_USER = "admin"
ADMIN_PASSWORD = "admin-pass"
BEARER = "fake-token"


class _StubResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, url: str = "", cookies=None):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        self.cookies = cookies or {}
        if isinstance(payload, str):
            self.text = payload
        else:
            self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        if isinstance(self._payload, str) or self._payload is None:
            return json.loads(self.text)
        return self._payload


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Prevent unit tests from hitting a live Superset."""

    def _refuse(method):
        def _stub(url, *args, **kwargs):
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        return _stub

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(requests, method, _refuse(method.upper()))


# ─────────────────────────────────────────────────────────────────────────────
# Fake Superset
# ─────────────────────────────────────────────────────────────────────────────
class FakeSuperset:
    """Just enough of Superset's security and RLS API to exercise the client.

    State lives in dicts; every request is recorded in ``requests`` in order.
    ``overrides[(METHOD, path)] = (status, body)`` forces a response.
    """

    USERS = "/api/v1/security/users/"
    RLS = "/api/v1/rowlevelsecurity/"

    def __init__(self):
        self.roles = [
            {"id": 1, "name": "Admin"},
            {"id": 2, "name": "Public"},
            {"id": 3, "name": "Alpha"},
            {"id": 4, "name": "Gamma"},
            {"id": 5, "name": "sql_lab"},
        ]
        self.users: Dict[int, Dict[str, Any]] = {}
        self.rls: Dict[int, Dict[str, Any]] = {}
        self.next_user_id = 100
        self.next_rls_id = 123
        self.csrf_counter = 0
        self.current_csrf: Optional[str] = None
        self.valid_token = BEARER
        self.requests = []
        self.overrides: Dict[tuple, tuple] = {}

    # helpers ---------------------------------------------------------------
    def role_name(self, role_id: int) -> str:
        return next((r["name"] for r in self.roles if r["id"] == role_id), f"role_{role_id}")

    def calls(self, method: Optional[str] = None, path: Optional[str] = None):
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.path == path)
        ]

    def add_user(self, **fields) -> int:
        user_id = self.next_user_id
        self.next_user_id += 1
        record = {
            "username": "", "first_name": "", "last_name": "", "email": "",
            "active": True, "roles": [], "password": "",
        }
        record.update(fields)
        self.users[user_id] = record
        return user_id

    def _user_json(self, user_id: int) -> Dict[str, Any]:
        record = self.users[user_id]
        return {
            "id": user_id,
            "username": record["username"],
            "first_name": record["first_name"],
            "last_name": record["last_name"],
            "email": record["email"],
            "active": record["active"],
            "roles": [{"id": rid, "name": self.role_name(rid)} for rid in record["roles"]],
        }

    def _rls_json(self, rls_id: int) -> Dict[str, Any]:
        record = self.rls[rls_id]
        return {
            "id": rls_id,
            "name": record["name"],
            "clause": record["clause"],
            "group_key": record["group_key"],
            "filter_type": record["filter_type"],
            "description": record["description"],
            "tables": [{"id": tid, "schema": "public", "table_name": f"table_{tid}"} for tid in record["tables"]],
            "roles": [{"id": rid, "name": self.role_name(rid)} for rid in record["roles"]],
        }

    # dispatch --------------------------------------------------------------
    def handle(self, method: str, url: str, **kwargs) -> _StubResponse:
        parts = urlsplit(url)
        query = parse_qs(parts.query)
        for key, value in (kwargs.get("params") or {}).items():
            query[key] = [value]
        headers = kwargs.get("headers") or {}
        record = SimpleNamespace(
            method=method,
            path=parts.path,
            query=query,
            headers=dict(headers),
            json=kwargs.get("json"),
            cookies=dict(kwargs.get("cookies") or {}),
            timeout=kwargs.get("timeout"),
        )
        self.requests.append(record)

        def respond(payload, status=200, cookies=None):
            return _StubResponse(payload, status, url=url, cookies=cookies)

        if (method, parts.path) in self.overrides:
            status, body = self.overrides[(method, parts.path)]
            return respond(body, status)

        if method == "POST" and parts.path == "/api/v1/security/login":
            body = record.json or {}
            if body.get("username") == ADMIN_USER and body.get("password") == ADMIN_PASSWORD:
                return respond({"access_token": self.valid_token, "refresh_token": "fake-refresh"})
            return respond({"message": "Not authorized"}, 401)

        if headers.get("Authorization") != f"Bearer {self.valid_token}":
            return respond({"msg": "Token has expired"}, 401)

        if method == "GET" and parts.path == "/api/v1/security/csrf_token/":
            self.csrf_counter += 1
            self.current_csrf = f"csrf-{self.csrf_counter}"
            return respond({"result": self.current_csrf}, cookies={"session": f"session-{self.csrf_counter}"})

        if method in ("POST", "PUT", "DELETE"):
            if not self.current_csrf or headers.get("X-CSRFToken") != self.current_csrf:
                return respond({"errors": ["The CSRF token is missing."]}, 400)

        if parts.path.startswith(self.USERS):
            return self._users(method, parts.path[len(self.USERS):], record, respond)
        if parts.path == "/api/v1/security/roles/" and method == "GET":
            return self._roles(query, respond)
        if parts.path.startswith(self.RLS):
            return self._row_level_security(method, parts.path[len(self.RLS):], record, respond)
        return respond({"message": "Not found"}, 404)

    def _users(self, method, suffix, record, respond):
        if suffix == "":
            if method == "GET":
                assert record.query.get("q") == ["(page_size:5000)"]
                return respond({"count": len(self.users), "result": [self._user_json(i) for i in self.users]})
            if method == "POST":
                body = dict(record.json)
                user_id = self.add_user(**body)
                return respond({"id": user_id, "result": body}, 201)
        user_id = int(suffix)
        if user_id not in self.users:
            return respond({"message": "Not found"}, 404)
        if method == "GET":
            return respond({"id": user_id, "result": self._user_json(user_id)})
        if method == "PUT":
            self.users[user_id].update(record.json)
            return respond({"id": user_id, "result": record.json})
        if method == "DELETE":
            del self.users[user_id]
            return respond({"message": "OK"})
        return respond({"message": "Method not allowed"}, 405)

    def _roles(self, query, respond):
        q = query.get("q", [""])[0]
        match = re.search(r"value:'((?:[^'!]|!.)*)'", q)
        name = re.sub(r"!(.)", r"\1", match.group(1)) if match else ""
        # Mimic a case-insensitive database collation
        result = [r for r in self.roles if r["name"].lower() == name.lower()]
        return respond({"count": len(result), "result": result})

    def _row_level_security(self, method, suffix, record, respond):
        if suffix == "" and method == "POST":
            rls_id = self.next_rls_id
            self.next_rls_id += 1
            self.rls[rls_id] = dict(record.json)
            return respond({"id": rls_id, "result": record.json}, 201)
        rls_id = int(suffix)
        if rls_id not in self.rls:
            return respond({"message": "Not found"}, 404)
        if method == "GET":
            return respond({"id": rls_id, "result": self._rls_json(rls_id)})
        if method == "PUT":
            self.rls[rls_id].update(record.json)
            return respond({"id": rls_id, "result": record.json})
        if method == "DELETE":
            del self.rls[rls_id]
            return respond({"message": "OK"})
        return respond({"message": "Method not allowed"}, 405)


@pytest.fixture()
def fake_superset(monkeypatch):
    """Route requests.get/post/put/delete to a fresh FakeSuperset."""
    fake = FakeSuperset()

    def _route(method):
        def _call(url, *args, **kwargs):
            return fake.handle(method, url, **kwargs)
        return _call

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(requests, method, _route(method.upper()))
    return fake


@pytest.fixture()
def superset(fake_superset):
    """Admin client bound to the fake; logs in lazily."""
    return SupersetAdminClient(HOST, ADMIN_USER, ADMIN_PASSWORD)
