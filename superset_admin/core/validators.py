"""Input validation helpers for resource data."""
from __future__ import annotations
import re

FILTER_TYPES = ("Regular", "Base")
IMPORT_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def validate_filter_type(filter_type: str) -> str:
    """Validate a row level security filter type.

    Args:
        filter_type: "Regular" or "Base"

    Returns:
        The filter type unchanged

    Raises:
        ValueError: If the filter type is not supported
    """
    if filter_type not in FILTER_TYPES:
        raise ValueError(
            f"Invalid filter type '{filter_type}': expected one of {', '.join(FILTER_TYPES)}"
        )
    return filter_type


def parse_import_id(raw: str) -> int:
    """Parse the identifier given to an import.

    Only an optional sign followed by ASCII digits is accepted; padding,
    underscores and other forms ``int()`` tolerates are rejected.

    Args:
        raw: Import ID as typed by the user

    Returns:
        Numeric identifier

    Raises:
        ValueError: If the ID is not a base-10 integer
    """
    if not isinstance(raw, str) or not IMPORT_ID_PATTERN.fullmatch(raw):
        raise ValueError(f"The provided import ID '{raw}' is not a valid integer")
    return int(raw, 10)
