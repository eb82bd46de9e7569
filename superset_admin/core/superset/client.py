"""Low-level HTTP client for the Superset REST API.

Handles login, CSRF token acquisition, and authenticated HTTP operations.
"""
from __future__ import annotations
import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import requests

from .exceptions import AuthError, DecodeError, HTTPStatusError
from .models import Credential

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30

LOGIN_PATH = "/api/v1/security/login"
CSRF_TOKEN_PATH = "/api/v1/security/csrf_token/"


class SupersetClient:
    """HTTP client for the Superset REST API with per-instance credentials.

    Features:
    - Lazy login on first use, bearer token attached to every request
    - Fresh CSRF token fetched before every POST/PUT/DELETE
    - Credential discarded on 401 so the next call logs in again
    - Centralized status checking and JSON decoding

    Usage:
        client = SupersetClient("http://superset:8088", "admin", "admin")
        client.login()
        response = client.get("/api/v1/security/users/1", "get_user")
    """

    def __init__(
        self,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        verify: bool = True,
    ):
        """Initialize Superset client.

        Args:
            host: Superset base URL (defaults to SUPERSET_HOST env var)
            username: Login username (database auth provider)
            password: Login password
            timeout: Per-request timeout in seconds
            verify: Verify TLS certificates
        """
        self.host = (host or os.environ.get("SUPERSET_HOST", "http://localhost:8088")).rstrip("/")
        self.username = username
        self.password = password
        self.timeout = timeout
        self.verify = verify
        self._credential: Optional[Credential] = None

    @property
    def token(self) -> Optional[str]:
        """Current bearer token, or None when not authenticated."""
        return self._credential.bearer_token if self._credential else None

    @property
    def token_acquired_at(self) -> Optional[datetime]:
        """When the current bearer token was obtained, or None."""
        return self._credential.acquired_at if self._credential else None

    def url(self, path: str) -> str:
        return f"{self.host}{path}"

    # ─────────────────────────────────────────────────────────────────────
    # Authentication
    # ─────────────────────────────────────────────────────────────────────
    def login(self) -> str:
        """Obtain a bearer token from the login endpoint.

        Returns:
            Access token

        Raises:
            AuthError: On non-2xx status or a body without ``access_token``
        """
        if not self.username or not self.password:
            raise AuthError("login failed: username and password are required")

        url = self.url(LOGIN_PATH)
        payload = {
            "username": self.username,
            "password": self.password,
            "provider": "db",
            "refresh": True,
        }
        resp = requests.post(url, json=payload, timeout=self.timeout, verify=self.verify)
        if not 200 <= resp.status_code < 300:
            raise AuthError(f"login failed, status code: {resp.status_code}: {resp.text}")
        try:
            token = resp.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthError(f"login failed: malformed response body: {exc}") from exc
        if not token:
            raise AuthError("login failed: empty access_token")

        self._credential = Credential(bearer_token=token)
        logger.debug(f"Logged in to {self.host} as {self.username}")
        return token

    def fetch_csrf_token(self) -> str:
        """Fetch a CSRF token for the next mutating request.

        Session cookies set by this response are kept alongside the token;
        Superset validates the token against that session.

        Raises:
            AuthError: On non-2xx status or a body without ``result``
        """
        self._ensure_authenticated()
        url = self.url(CSRF_TOKEN_PATH)
        resp = requests.get(url, headers=self._auth_headers(), timeout=self.timeout, verify=self.verify)
        if not 200 <= resp.status_code < 300:
            if resp.status_code == 401:
                self._invalidate()
            raise AuthError(f"failed to fetch CSRF token, status code: {resp.status_code}: {resp.text}")
        try:
            csrf_token = resp.json()["result"]
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthError(f"failed to fetch CSRF token: malformed response body: {exc}") from exc
        if not csrf_token:
            raise AuthError("failed to fetch CSRF token: empty result")

        self._credential.csrf_token = csrf_token
        self._credential.csrf_cookies = dict(getattr(resp, "cookies", None) or {})
        return csrf_token

    def _ensure_authenticated(self) -> None:
        """Log in when no credential is held."""
        if self._credential is not None:
            return
        if not self.username or not self.password:
            raise AuthError("Not authenticated - call login() or provide username and password")
        self.login()

    def _invalidate(self) -> None:
        if self._credential is not None:
            acquired = self._credential.acquired_at.isoformat(timespec="seconds")
            logger.warning(f"Discarding Superset credential for {self.host} after 401 (acquired {acquired})")
        self._credential = None

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._credential.bearer_token}"}

    def _mutation_headers(self) -> Dict[str, str]:
        headers = self._auth_headers()
        headers["X-CSRFToken"] = self._credential.csrf_token
        headers["Referer"] = self.host
        return headers

    # ─────────────────────────────────────────────────────────────────────
    # HTTP verbs
    # ─────────────────────────────────────────────────────────────────────
    def get(
        self,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        expected: Iterable[int] = (200,),
    ) -> requests.Response:
        """Execute GET request with the bearer token only.

        Args:
            path: API endpoint path (e.g., "/api/v1/security/users/1")
            operation: Operation name used in error messages
            params: Query parameters
            expected: Status codes treated as success

        Raises:
            HTTPStatusError: On a status outside ``expected``
        """
        self._ensure_authenticated()
        url = self.url(path)
        resp = requests.get(
            url, params=params, headers=self._auth_headers(), timeout=self.timeout, verify=self.verify
        )
        self._check_status(resp, operation, expected)
        return resp

    def post(
        self,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
        expected: Iterable[int] = (200, 201),
    ) -> requests.Response:
        """Execute POST request after fetching a fresh CSRF token."""
        self.fetch_csrf_token()
        url = self.url(path)
        resp = requests.post(
            url,
            json=json,
            headers=self._mutation_headers(),
            cookies=self._credential.csrf_cookies,
            timeout=self.timeout,
            verify=self.verify,
        )
        self._check_status(resp, operation, expected)
        return resp

    def put(
        self,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
        expected: Iterable[int] = (200,),
    ) -> requests.Response:
        """Execute PUT request after fetching a fresh CSRF token."""
        self.fetch_csrf_token()
        url = self.url(path)
        resp = requests.put(
            url,
            json=json,
            headers=self._mutation_headers(),
            cookies=self._credential.csrf_cookies,
            timeout=self.timeout,
            verify=self.verify,
        )
        self._check_status(resp, operation, expected)
        return resp

    def delete(
        self,
        path: str,
        operation: str,
        expected: Iterable[int] = (200, 204),
    ) -> requests.Response:
        """Execute DELETE request after fetching a fresh CSRF token."""
        self.fetch_csrf_token()
        url = self.url(path)
        resp = requests.delete(
            url,
            headers=self._mutation_headers(),
            cookies=self._credential.csrf_cookies,
            timeout=self.timeout,
            verify=self.verify,
        )
        self._check_status(resp, operation, expected)
        return resp

    def _check_status(self, resp: requests.Response, operation: str, expected: Iterable[int]) -> None:
        """Centralized status checking for HTTP responses.

        Raises:
            HTTPStatusError: If the status is not in ``expected``
        """
        if resp.status_code in tuple(expected):
            return
        if resp.status_code == 401:
            self._invalidate()
        raise HTTPStatusError(resp.status_code, operation, resp.text, getattr(resp, "url", ""))

    @staticmethod
    def decode_json(resp: requests.Response, operation: str) -> Any:
        """Decode a response body, mapping malformed JSON to DecodeError."""
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(f"{operation}: invalid JSON response: {exc}") from exc

    @classmethod
    def decode_result(cls, resp: requests.Response, operation: str) -> Any:
        """Return the record wrapped under the ``result`` key."""
        body = cls.decode_json(resp, operation)
        if not isinstance(body, dict) or "result" not in body:
            raise DecodeError(f"{operation}: response has no 'result' field")
        return body["result"]

    @classmethod
    def decode_record(cls, resp: requests.Response, operation: str, record_id: int) -> Any:
        """Return a single record from a show response.

        The show endpoints may carry the id only on the envelope
        (``{"id": N, "result": {...}}``); it is copied into the record,
        falling back to the requested ``record_id``.
        """
        body = cls.decode_json(resp, operation)
        if not isinstance(body, dict) or "result" not in body:
            raise DecodeError(f"{operation}: response has no 'result' field")
        record = body["result"]
        if isinstance(record, dict) and record.get("id") is None:
            envelope_id = body.get("id")
            record = dict(record, id=envelope_id if envelope_id is not None else record_id)
        return record

    @classmethod
    def decode_created_id(cls, resp: requests.Response, operation: str) -> int:
        """Return the new identifier from a create response.

        Superset answers ``{"id": N, "result": {...}}``; older releases only
        carry the id inside ``result``. Both are accepted.
        """
        body = cls.decode_json(resp, operation)
        if not isinstance(body, dict):
            raise DecodeError(f"{operation}: expected a JSON object")
        new_id = body.get("id")
        if new_id is None and isinstance(body.get("result"), dict):
            new_id = body["result"].get("id")
        if isinstance(new_id, bool) or not isinstance(new_id, int):
            raise DecodeError(f"{operation}: response has no numeric 'id': {body!r}")
        return new_id


def create_client_with_token(host: str, token: str, timeout: float = REQUEST_TIMEOUT) -> SupersetClient:
    """Create a SupersetClient around a pre-obtained bearer token.

    The client holds no username/password, so once the token is rejected
    further calls fail with AuthError instead of logging in again.
    """
    client = SupersetClient(host, timeout=timeout)
    client._credential = Credential(bearer_token=token)
    return client
