"""Candidate two-team splits of a player pool.

Strict mode seeds both teams from per-role buckets (highest skill first) and
adds a few lightly perturbed copies. Loose mode favours variety: either pure
random shuffles of the pool, or a role-aware seeding pass that lets secondary
positions pick the bucket, followed by heavier perturbation.
"""
import logging
import random
from collections import deque
from typing import Callable, Optional, Sequence

from volley_teams.models.player import Player
from volley_teams.models.team import GenerationMode, TeamPairCandidate
from volley_teams.utils.role_normalizer import CanonicalRole

logger = logging.getLogger(__name__)

MIN_PLAYERS = 4

# Per-team demand for a 6-a-side lineup, truncated to the team size
BASE_DEMAND: tuple[CanonicalRole, ...] = (
    CanonicalRole.SETTER,
    CanonicalRole.MIDDLE_BLOCKER,
    CanonicalRole.OPPOSITE,
    CanonicalRole.OUTSIDE_HITTER,
    CanonicalRole.OUTSIDE_HITTER,
    CanonicalRole.LIBERO,
)

# Leftover players are pooled in this bucket order
BUCKET_ORDER: tuple[CanonicalRole, ...] = (
    CanonicalRole.SETTER,
    CanonicalRole.OPPOSITE,
    CanonicalRole.MIDDLE_BLOCKER,
    CanonicalRole.OUTSIDE_HITTER,
    CanonicalRole.LIBERO,
)


class InsufficientPlayersError(ValueError):
    """Raised when the pool is too small to build two teams."""

    def __init__(self, message: str, required: int, actual: int):
        super().__init__(message)
        self.message = message
        self.required = required
        self.actual = actual


def unique_players(players: Sequence[Player]) -> list[Player]:
    """Drop repeated player ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for player in players:
        if player.id in seen:
            continue
        seen.add(player.id)
        unique.append(player)
    if len(unique) < len(players):
        logger.warning(f"Ignored {len(players) - len(unique)} duplicate player row(s)")
    return unique


def ensure_minimum_players(players: Sequence[Player]) -> None:
    """Fail fast when fewer than four players were supplied."""
    if len(players) < MIN_PLAYERS:
        raise InsufficientPlayersError(
            "Need at least 4 players to generate teams",
            required=MIN_PLAYERS,
            actual=len(players),
        )


class CandidateGenerator:
    """Builds candidate team pairs from a pool of players.

    All randomness flows through ``rng`` so a seeded ``random.Random`` gives
    reproducible candidates.
    """

    STRICT_SWAPS = (1, 2)
    SEEDED_LOOSE_PERTURBATIONS = 10
    SEEDED_LOOSE_MIN_SWAPS = 2

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        shuffle_attempts: int = 40,
        strict_perturbations: int = 3,
    ):
        self.rng = rng or random.Random()
        self.shuffle_attempts = shuffle_attempts
        self.strict_perturbations = strict_perturbations

    def generate_candidates(
        self,
        players: Sequence[Player],
        target_team_size: int,
        mode: GenerationMode = "strict",
        prioritize_gender_balance: bool = True,
        allow_secondary_positions: bool = False,
    ) -> list[TeamPairCandidate]:
        """Generate candidate splits for the given mode.

        Raises:
            InsufficientPlayersError: If the pool cannot fill two teams
            ValueError: If target_team_size is not positive
        """
        self._check_pool(players, target_team_size)

        if mode == "strict":
            base = self._seed_split(
                players,
                target_team_size,
                role_of=lambda p: p.canonical_primary,
                prioritize_gender_balance=prioritize_gender_balance,
            )
            candidates = [base] + self._perturb(
                base, self.strict_perturbations, *self.STRICT_SWAPS
            )
        elif allow_secondary_positions:
            base = self._seed_split(
                players,
                target_team_size,
                role_of=self._random_eligible_role,
                prioritize_gender_balance=prioritize_gender_balance,
            )
            max_swaps = max(3, target_team_size // 2)
            candidates = [base] + self._perturb(
                base,
                self.SEEDED_LOOSE_PERTURBATIONS,
                self.SEEDED_LOOSE_MIN_SWAPS,
                max_swaps,
            )
        else:
            candidates = self._shuffled_splits(players, target_team_size)

        logger.debug(f"Generated {len(candidates)} {mode} candidate(s) from {len(players)} players")
        return candidates

    def _check_pool(self, players: Sequence[Player], target_team_size: int) -> None:
        if target_team_size < 1:
            raise ValueError(f"target_team_size must be positive, got {target_team_size}")
        required = target_team_size * 2
        if len(players) < required:
            raise InsufficientPlayersError(
                f"Not enough players to seed two teams of size {target_team_size}. "
                f"Need {required}, got {len(players)}.",
                required=required,
                actual=len(players),
            )

    def _random_eligible_role(self, player: Player) -> CanonicalRole:
        """Draw the seeding bucket from the player's primary and secondary roles."""
        roles = [player.canonical_primary, *player.canonical_secondaries]
        if len(roles) == 1:
            return roles[0]
        return self.rng.choice(roles)

    def _seed_split(
        self,
        players: Sequence[Player],
        team_size: int,
        role_of: Callable[[Player], CanonicalRole],
        prioritize_gender_balance: bool,
    ) -> TeamPairCandidate:
        """Split the pool by draining role buckets into both teams."""
        by_skill = sorted(players, key=lambda p: p.effective_skill, reverse=True)

        buckets: dict[CanonicalRole, deque[Player]] = {role: deque() for role in BUCKET_ORDER}
        for player in by_skill:
            buckets[role_of(player)].append(player)

        team_a: list[Player] = []
        team_b: list[Player] = []
        for role in BASE_DEMAND[:team_size]:
            bucket = buckets[role]
            if bucket:
                team_a.append(bucket.popleft())
            if bucket:
                team_b.append(bucket.popleft())

        remaining = [p for role in BUCKET_ORDER for p in buckets[role]]
        self._fill_team(team_a, remaining, team_size, prioritize_gender_balance)
        self._fill_team(team_b, remaining, team_size, prioritize_gender_balance)

        return TeamPairCandidate(team_a=team_a, team_b=team_b)

    @staticmethod
    def _gender_need(player: Player, team: list[Player]) -> int:
        females = sum(1 for p in team if p.gender == "female")
        males = sum(1 for p in team if p.gender == "male")
        if player.gender == "female" and females <= males:
            return 2
        if player.gender == "male" and males <= females:
            return 2
        return 1

    def _fill_team(
        self,
        team: list[Player],
        remaining: list[Player],
        team_size: int,
        prioritize_gender_balance: bool,
    ) -> None:
        """Top up a team from the leftover pool, consuming picked players."""
        while len(team) < team_size and remaining:
            if prioritize_gender_balance:
                # max() keeps the first of equally scored players (pool order)
                idx = max(
                    range(len(remaining)),
                    key=lambda i: self._gender_need(remaining[i], team),
                )
            else:
                idx = 0
            team.append(remaining.pop(idx))

    def _perturb(
        self,
        base: TeamPairCandidate,
        count: int,
        min_swaps: int,
        max_swaps: int,
    ) -> list[TeamPairCandidate]:
        """Copies of ``base`` with a few random cross-team swaps each."""
        perturbed = []
        for _ in range(count):
            candidate = base.copy()
            if candidate.team_a and candidate.team_b:
                swaps = self.rng.randint(min_swaps, max_swaps)
                for _ in range(swaps):
                    idx_a = self.rng.randrange(len(candidate.team_a))
                    idx_b = self.rng.randrange(len(candidate.team_b))
                    candidate.team_a[idx_a], candidate.team_b[idx_b] = (
                        candidate.team_b[idx_b],
                        candidate.team_a[idx_a],
                    )
            perturbed.append(candidate)
        return perturbed

    def _shuffled_splits(
        self, players: Sequence[Player], team_size: int
    ) -> list[TeamPairCandidate]:
        candidates = []
        for attempt in range(self.shuffle_attempts):
            pool = list(players)
            self.rng.shuffle(pool)
            team_a = pool[:team_size]
            team_b = pool[team_size:team_size * 2]
            if len(team_b) < team_size:
                logger.warning(f"Discarding shuffle {attempt}: team B has {len(team_b)}/{team_size}")
                continue
            candidates.append(TeamPairCandidate(team_a=team_a, team_b=team_b))
        return candidates
