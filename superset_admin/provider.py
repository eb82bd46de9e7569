"""Provider wiring: settings -> authenticated client -> resources.

Usage:
    provider = configure_provider()              # reads SUPERSET_* env vars
    users = provider.resources["superset_user"]
    state = users.create(UserResourceModel(username="alice", ...))
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .config.settings import ProviderConfig, load_settings
from .core.superset import SupersetAdminClient, SupersetError
from .resources import (
    Resource,
    ResourceError,
    RoleDataSource,
    RowLevelSecurityResource,
    UserResource,
    UsersDataSource,
)

logger = logging.getLogger(__name__)


@dataclass
class Provider:
    client: SupersetAdminClient
    resources: Dict[str, Resource] = field(default_factory=dict)
    data_sources: Dict[str, object] = field(default_factory=dict)


def build_provider(client: SupersetAdminClient) -> Provider:
    """Bind every resource and data source to one client."""
    provider = Provider(client=client)
    for resource in (UserResource(client), RowLevelSecurityResource(client)):
        provider.resources[resource.type_name] = resource
    for data_source in (UsersDataSource(client), RoleDataSource(client)):
        provider.data_sources[data_source.type_name] = data_source
    return provider


def configure_provider(config: Optional[ProviderConfig] = None) -> Provider:
    """Log in to Superset and return the bound provider.

    Raises:
        ResourceError: If login fails
    """
    config = config or load_settings()
    client = SupersetAdminClient(
        config.host,
        config.username,
        config.password,
        timeout=config.request_timeout,
        verify=config.verify_tls,
    )
    try:
        client.login()
    except SupersetError as exc:
        raise ResourceError("Unable to Create Superset API Client", str(exc)) from exc
    logger.info(f"Configured Superset provider for {config.host}")
    return build_provider(client)
