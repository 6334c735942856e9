"""Centralized role normalization utility.

All role handling in the engine should go through this module so that every
free-text position label lands in one of the five canonical on-court roles.
Matching is exact (after trimming): "Outside Hitter" is recognized, while
"outside hitter" is not and falls into the default bucket.
"""

from enum import Enum
from typing import Iterable, Optional, TypeVar


class CanonicalRole(str, Enum):
    """The closed set of on-court volleyball roles."""

    SETTER = "Setter"
    MIDDLE_BLOCKER = "Middle Blocker"
    OPPOSITE = "Opposite"
    OUTSIDE_HITTER = "Outside Hitter"
    LIBERO = "Libero"

    def __str__(self) -> str:
        return self.value


# Unrecognized labels are grouped here so sorting/grouping never fails
DEFAULT_ROLE = CanonicalRole.OPPOSITE

_ROLES_BY_LABEL: dict[str, CanonicalRole] = {role.value: role for role in CanonicalRole}

# Display/alignment order for both teams
CANONICAL_ORDER: tuple[CanonicalRole, ...] = (
    CanonicalRole.SETTER,
    CanonicalRole.MIDDLE_BLOCKER,
    CanonicalRole.OPPOSITE,
    CanonicalRole.OUTSIDE_HITTER,
    CanonicalRole.LIBERO,
)

T = TypeVar("T")


def normalize_role(role: Optional[str]) -> CanonicalRole:
    """Map any DB/display string to a canonical role.

    Args:
        role: Free-text role label, possibly None or padded with whitespace

    Returns:
        The matching CanonicalRole, or Opposite when the label is empty or
        not an exact match

    Examples:
        >>> normalize_role("  Setter ")
        <CanonicalRole.SETTER: 'Setter'>
        >>> normalize_role("outside hitter")
        <CanonicalRole.OPPOSITE: 'Opposite'>
        >>> normalize_role(None)
        <CanonicalRole.OPPOSITE: 'Opposite'>
    """
    if isinstance(role, CanonicalRole):
        return role
    if not isinstance(role, str):
        return DEFAULT_ROLE
    return _ROLES_BY_LABEL.get(role.strip(), DEFAULT_ROLE)


def normalize_roles(roles: Optional[Iterable[Optional[str]]]) -> list[CanonicalRole]:
    """Normalize a list of labels, dropping duplicates but keeping order."""
    result: list[CanonicalRole] = []
    for role in roles or ():
        canonical = normalize_role(role)
        if canonical not in result:
            result.append(canonical)
    return result


def role_index(role: CanonicalRole) -> int:
    """Position of a role in CANONICAL_ORDER."""
    return CANONICAL_ORDER.index(normalize_role(role))


def sort_by_role(items: Iterable[T], key) -> list[T]:
    """Sort role-tagged items in canonical order.

    Args:
        items: Anything carrying a role
        key: Callable returning the role (string or CanonicalRole) of an item

    Returns:
        New list ordered Setter, Middle Blocker, Opposite, Outside Hitter, Libero.
        The sort is stable, so items sharing a role keep their input order.
    """
    return sorted(items, key=lambda item: role_index(normalize_role(key(item))))
