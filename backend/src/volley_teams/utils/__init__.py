"""Utility modules for volley_teams."""

from volley_teams.utils.names import format_short_name
from volley_teams.utils.role_normalizer import (
    CANONICAL_ORDER,
    DEFAULT_ROLE,
    CanonicalRole,
    normalize_role,
    normalize_roles,
    role_index,
    sort_by_role,
)

__all__ = [
    "CANONICAL_ORDER",
    "DEFAULT_ROLE",
    "CanonicalRole",
    "format_short_name",
    "normalize_role",
    "normalize_roles",
    "role_index",
    "sort_by_role",
]
