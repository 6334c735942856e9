"""Greedy lineup assignment with volleyball constraints.

Ideal six: 1 Setter, 1 Opposite, 2 Middle Blockers, 2 Outside Hitters.
Libero is optional and never targeted. Fallback minimum: at least one
Setter, one Middle Blocker and one Outside Hitter when anyone can play them.
"""
import logging
from typing import Iterable, Optional

from volley_teams.models.player import AssignedPlayer, Player
from volley_teams.utils.role_normalizer import CanonicalRole, sort_by_role

logger = logging.getLogger(__name__)

LINEUP_SIZE = 6

# Fill order matters: earlier roles get first pick of flexible players
ROLE_TARGETS: dict[CanonicalRole, int] = {
    CanonicalRole.SETTER: 1,
    CanonicalRole.OPPOSITE: 1,
    CanonicalRole.MIDDLE_BLOCKER: 2,
    CanonicalRole.OUTSIDE_HITTER: 2,
}

MINIMUM_ROLES: tuple[CanonicalRole, ...] = (
    CanonicalRole.SETTER,
    CanonicalRole.MIDDLE_BLOCKER,
    CanonicalRole.OUTSIDE_HITTER,
)


class _Pool:
    """Unassigned players with their preference lists, in encounter order."""

    def __init__(self, players: Iterable[Player]):
        self._entries: list[tuple[Player, list[CanonicalRole]]] = [
            (p, p.preferences) for p in players
        ]
        self._taken: set[int] = set()

    def __len__(self) -> int:
        return len(self._entries) - len(self._taken)

    def best_for(self, role: CanonicalRole) -> Optional[int]:
        """Index of the player ranking ``role`` highest; first match wins ties."""
        best_idx = None
        best_rank = None
        for i, (_, prefs) in enumerate(self._entries):
            if i in self._taken or role not in prefs:
                continue
            rank = prefs.index(role)
            if best_rank is None or rank < best_rank:
                best_idx, best_rank = i, rank
        return best_idx

    def take(self, idx: int) -> tuple[Player, list[CanonicalRole]]:
        self._taken.add(idx)
        return self._entries[idx]

    def remaining(self) -> list[int]:
        return [i for i in range(len(self._entries)) if i not in self._taken]


def _fill_role(
    pool: _Pool,
    role: CanonicalRole,
    count: int,
    result: list[AssignedPlayer],
) -> None:
    for _ in range(count):
        idx = pool.best_for(role)
        if idx is None:
            break
        player, _ = pool.take(idx)
        result.append(AssignedPlayer(player=player, assigned_role=role))


def assign_roles(team: Iterable[Player], lineup_size: int = LINEUP_SIZE) -> list[AssignedPlayer]:
    """Assign exactly one canonical role to each player of a candidate team.

    Args:
        team: Players already split into one side, in encounter order
        lineup_size: Maximum number of players placed in the lineup

    Returns:
        Assigned players sorted by canonical role order. Never raises; a team
        that cannot cover a role simply leaves it uncovered.
    """
    pool = _Pool(team)
    result: list[AssignedPlayer] = []

    for role, target in ROLE_TARGETS.items():
        _fill_role(pool, role, target, result)

    for role in MINIMUM_ROLES:
        if not any(a.assigned_role == role for a in result):
            _fill_role(pool, role, 1, result)

    for idx in pool.remaining():
        if len(result) >= lineup_size:
            break
        player, prefs = pool.take(idx)
        result.append(AssignedPlayer(player=player, assigned_role=prefs[0]))

    if len(pool):
        logger.debug(f"Lineup full at {lineup_size}; {len(pool)} player(s) left unassigned")

    return sort_by_role(result, key=lambda a: a.assigned_role)
