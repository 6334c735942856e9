"""Player models consumed and produced by the team generator."""

import math
from dataclasses import dataclass
from typing import Any, Optional

from volley_teams.utils.names import format_short_name
from volley_teams.utils.role_normalizer import (
    DEFAULT_ROLE,
    CanonicalRole,
    normalize_role,
    normalize_roles,
)

GENDERS = ("male", "female", "other")

# Used wherever a player has no skill rating
DEFAULT_SKILL_RATING = 5.0


def normalize_gender(gender: Optional[str]) -> str:
    """Map a gender tag to male/female/other (anything unknown is "other")."""
    value = (gender or "").strip().lower()
    return value if value in GENDERS else "other"


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # NaN and infinity cannot be averaged or serialized; treat as missing
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class Player:
    """A club member eligible for a generated lineup.

    Role labels are kept as the raw strings supplied upstream and only
    normalized on read, so the source record is never rewritten.
    """

    id: str
    first_name: str = ""
    last_name: str = ""
    primary_role: Optional[str] = None
    secondary_roles: tuple[str, ...] = ()
    skill_rating: Optional[float] = None
    gender: str = "other"
    height_cm: Optional[float] = None

    @property
    def display_name(self) -> str:
        return format_short_name(self.first_name, self.last_name)

    @property
    def effective_skill(self) -> float:
        """Skill rating with the default applied when missing or non-finite."""
        if self.skill_rating is None or not math.isfinite(self.skill_rating):
            return DEFAULT_SKILL_RATING
        return float(self.skill_rating)

    @property
    def canonical_primary(self) -> CanonicalRole:
        return normalize_role(self.primary_role)

    @property
    def canonical_secondaries(self) -> list[CanonicalRole]:
        """Normalized secondary roles without duplicates of the primary."""
        primary = self.canonical_primary
        return [role for role in normalize_roles(self.secondary_roles) if role != primary]

    @property
    def preferences(self) -> list[CanonicalRole]:
        """Primary role first, then secondaries, each role listed once."""
        prefs = normalize_roles([self.primary_role, *self.secondary_roles])
        return prefs or [DEFAULT_ROLE]

    @classmethod
    def from_record(cls, record: dict) -> "Player":
        """Build a Player from an upstream player row.

        Accepts either a joined ``player_positions`` list (each entry carrying
        ``is_primary`` and ``positions.name``) or flat ``primary_position`` /
        ``secondary_positions`` fields. Any optional field may be null.
        """
        player_id = record.get("id")
        if player_id is None or str(player_id) == "":
            raise ValueError("Player record is missing an id")

        primary = record.get("primary_position") or record.get("primaryRole")
        secondaries = list(
            record.get("secondary_positions") or record.get("secondaryRoles") or []
        )

        for link in record.get("player_positions") or []:
            position = link.get("positions") or {}
            name = position.get("name") if isinstance(position, dict) else None
            if not name:
                continue
            if link.get("is_primary") and primary is None:
                primary = name
            else:
                secondaries.append(name)

        return cls(
            id=str(player_id),
            first_name=record.get("first_name") or "",
            last_name=record.get("last_name") or "",
            primary_role=primary,
            secondary_roles=tuple(s for s in secondaries if s),
            skill_rating=_optional_float(record.get("skill_rating")),
            gender=normalize_gender(record.get("gender")),
            height_cm=_optional_float(record.get("height_cm")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.display_name,
            "primary_role": self.canonical_primary.value,
            "secondary_roles": [role.value for role in self.canonical_secondaries],
            "skill_rating": _optional_float(self.skill_rating),
            "gender": self.gender,
            "height_cm": _optional_float(self.height_cm),
        }


@dataclass(frozen=True)
class AssignedPlayer:
    """A player paired with the role chosen for one generated lineup."""

    player: Player
    assigned_role: CanonicalRole

    @property
    def id(self) -> str:
        return self.player.id

    @property
    def gender(self) -> str:
        return self.player.gender

    @property
    def effective_skill(self) -> float:
        return self.player.effective_skill

    def to_dict(self) -> dict:
        data = self.player.to_dict()
        data["assigned_role"] = self.assigned_role.value
        return data
