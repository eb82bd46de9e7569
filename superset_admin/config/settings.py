"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.superset.client import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info(f"Loaded {env_var} from environment (fallback)")
            return secret_value

    return None


def _require_env(var_name: str, value: Optional[str]) -> str:
    if not value:
        raise RuntimeError(f"Environment variable {var_name} is required.")
    return value


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ProviderConfig:
    """Connection settings for one Superset instance."""
    host: str
    username: str
    password: str
    request_timeout: float = REQUEST_TIMEOUT
    verify_tls: bool = True

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(host={self.host!r}, username={self.username!r}, password='***', "
            f"request_timeout={self.request_timeout!r}, verify_tls={self.verify_tls!r})"
        )


def load_settings() -> ProviderConfig:
    """Load provider settings from environment and /run/secrets.

    Variables:
        SUPERSET_HOST: Base URL, e.g. http://superset:8088 (required)
        SUPERSET_USERNAME: Login user (required)
        SUPERSET_PASSWORD: Login password, /run/secrets/superset_password wins (required)
        SUPERSET_REQUEST_TIMEOUT: Seconds per request (default 30)
        SUPERSET_VERIFY_TLS: Verify certificates (default true)

    Raises:
        RuntimeError: If a required value is missing or the timeout is invalid
    """
    host = _require_env("SUPERSET_HOST", os.environ.get("SUPERSET_HOST", "").strip()).rstrip("/")
    username = _require_env("SUPERSET_USERNAME", os.environ.get("SUPERSET_USERNAME", "").strip())
    password = _require_env(
        "SUPERSET_PASSWORD",
        _load_secret_from_file("superset_password", "SUPERSET_PASSWORD"),
    )

    timeout_raw = os.environ.get("SUPERSET_REQUEST_TIMEOUT", "").strip()
    if timeout_raw:
        try:
            request_timeout = float(timeout_raw)
        except ValueError:
            raise RuntimeError(f"SUPERSET_REQUEST_TIMEOUT must be a number, got '{timeout_raw}'") from None
        if request_timeout <= 0:
            raise RuntimeError("SUPERSET_REQUEST_TIMEOUT must be positive")
    else:
        request_timeout = float(REQUEST_TIMEOUT)

    verify_tls = _parse_bool(os.environ.get("SUPERSET_VERIFY_TLS"), True)
    if not verify_tls:
        logger.warning("TLS verification disabled for Superset requests")

    logger.info(f"Superset host={host}; user={username}; timeout={request_timeout}s")

    return ProviderConfig(
        host=host,
        username=username,
        password=password,
        request_timeout=request_timeout,
        verify_tls=verify_tls,
    )
