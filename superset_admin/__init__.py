"""Superset administration as declaratively managed resources.

To use the REST client:
    from superset_admin.core.superset import SupersetAdminClient

To drive resources from a lifecycle engine:
    from superset_admin.provider import configure_provider
"""
