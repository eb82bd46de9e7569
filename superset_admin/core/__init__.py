"""Core Business Logic Module

Module Structure:
    - superset/     : Superset REST API client (auth, users, roles, RLS)
    - validators.py : Input validation (filter types, import IDs)

Import explicitly when needed:
    from superset_admin.core.superset import SupersetAdminClient, SupersetError
    from superset_admin.core.validators import validate_filter_type
"""
