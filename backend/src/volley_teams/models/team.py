"""Generated team and suggestion models."""

from dataclasses import dataclass, field
from typing import Literal

from volley_teams.models.player import AssignedPlayer, Player
from volley_teams.utils.role_normalizer import CANONICAL_ORDER, CanonicalRole

GenerationMode = Literal["strict", "loose"]


@dataclass
class TeamGenerationConfig:
    """Inputs for one generation request."""

    available_players: list[Player]
    target_team_size: int = 6
    prioritize_gender_balance: bool = True
    allow_secondary_positions: bool = False


@dataclass
class TeamPairCandidate:
    """An unassigned two-team split of the player pool."""

    team_a: list[Player]
    team_b: list[Player]

    def copy(self) -> "TeamPairCandidate":
        return TeamPairCandidate(team_a=list(self.team_a), team_b=list(self.team_b))


@dataclass
class GeneratedTeam:
    """One side of a suggestion, with roles assigned and aggregates derived."""

    players: list[AssignedPlayer]
    average_skill: float = 0.0
    position_coverage: dict[CanonicalRole, int] = field(default_factory=dict)
    gender_balance: dict[str, int] = field(
        default_factory=lambda: {"male": 0, "female": 0, "other": 0}
    )
    warnings: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.players)

    @property
    def player_ids(self) -> set[str]:
        return {p.id for p in self.players}

    def coverage(self, role: CanonicalRole) -> int:
        return self.position_coverage.get(role, 0)

    def to_dict(self) -> dict:
        return {
            "players": [p.to_dict() for p in self.players],
            "average_skill": round(self.average_skill, 2),
            "position_coverage": {
                role.value: self.position_coverage[role]
                for role in CANONICAL_ORDER
                if role in self.position_coverage
            },
            "gender_balance": dict(self.gender_balance),
            "warnings": list(self.warnings),
        }


@dataclass
class TeamSuggestion:
    """A scored pair of teams offered to the organizer."""

    team_a: GeneratedTeam
    team_b: GeneratedTeam
    balance_score: int
    reasoning: str
    overall_warnings: list[str] = field(default_factory=list)
    # Sub-scores behind balance_score (position/skill/gender)
    components: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "team_a": self.team_a.to_dict(),
            "team_b": self.team_b.to_dict(),
            "balance_score": self.balance_score,
            "overall_warnings": list(self.overall_warnings),
            "reasoning": self.reasoning,
            "components": dict(self.components),
        }
