"""Balance scoring for a pair of generated teams."""
import logging
import math
from typing import Iterable

from volley_teams.models.player import AssignedPlayer
from volley_teams.models.team import GeneratedTeam, GenerationMode
from volley_teams.utils.role_normalizer import CanonicalRole

logger = logging.getLogger(__name__)


class TeamScorer:
    """Scores a team pair on position coverage, skill spread and gender mix.

    Each component is a 0-100 score. The composite is a weighted sum whose
    weights depend on the generation mode:
    - strict: positions dominate, skill matters more than gender
    - loose: positions still dominate, skill is softened so shuffles vary
    """

    # Libero is optional and excluded from the ideal-count penalty
    IDEAL_POSITIONS: dict[CanonicalRole, int] = {
        CanonicalRole.SETTER: 1,
        CanonicalRole.MIDDLE_BLOCKER: 2,
        CanonicalRole.OUTSIDE_HITTER: 2,
        CanonicalRole.OPPOSITE: 1,
    }

    IDEAL_MISS_PENALTY = 8
    CROSS_TEAM_PENALTY = 5

    # Spreads at which the skill/gender penalty saturates
    MAX_SKILL_SPREAD = 5.0
    MAX_GENDER_SPREAD = 3.0

    SKILL_PENALTY = {"strict": 100.0, "loose": 60.0}
    GENDER_PENALTY = {"strict": 100.0, "loose": 80.0}

    WEIGHTS = {
        "strict": {"position": 0.65, "skill": 0.20, "gender": 0.15},
        "loose": {"position": 0.70, "skill": 0.10, "gender": 0.20},
    }

    MAX_GENDER_GAP = 2

    def build_team(self, players: Iterable[AssignedPlayer]) -> GeneratedTeam:
        """Derive aggregates and warnings for a fully assigned team."""
        players = list(players)
        team = GeneratedTeam(players=players)
        if players:
            team.average_skill = sum(p.effective_skill for p in players) / len(players)

        for player in players:
            role = player.assigned_role
            team.position_coverage[role] = team.position_coverage.get(role, 0) + 1
            team.gender_balance[player.gender] = team.gender_balance.get(player.gender, 0) + 1

        team.warnings.extend(self.position_warnings(team))
        team.warnings.extend(self.gender_warnings(team))
        return team

    def position_warnings(self, team: GeneratedTeam) -> list[str]:
        warnings = []
        for role, ideal in self.IDEAL_POSITIONS.items():
            count = team.coverage(role)
            if count == 0:
                warnings.append(f"No {role.value}")
            elif count > ideal + 1:
                warnings.append(f"Too many {role.value}s ({count})")
        return warnings

    def gender_warnings(self, team: GeneratedTeam) -> list[str]:
        male = team.gender_balance.get("male", 0)
        female = team.gender_balance.get("female", 0)
        if abs(male - female) > self.MAX_GENDER_GAP:
            return [f"Gender imbalance: {male}M/{female}F"]
        return []

    def position_score(self, team_a: GeneratedTeam, team_b: GeneratedTeam) -> float:
        """Mode-independent coverage score, 100 minus deviation penalties."""
        score = 100.0
        for role, ideal in self.IDEAL_POSITIONS.items():
            count_a = team_a.coverage(role)
            count_b = team_b.coverage(role)
            score -= self.IDEAL_MISS_PENALTY * abs(count_a - ideal)
            score -= self.IDEAL_MISS_PENALTY * abs(count_b - ideal)
            score -= self.CROSS_TEAM_PENALTY * abs(count_a - count_b)
        return max(0.0, score)

    def skill_score(
        self, team_a: GeneratedTeam, team_b: GeneratedTeam, mode: GenerationMode = "strict"
    ) -> float:
        skill_diff = abs(team_a.average_skill - team_b.average_skill)
        penalty_ratio = min(1.0, skill_diff / self.MAX_SKILL_SPREAD)
        return 100.0 - self.SKILL_PENALTY[mode] * penalty_ratio

    def gender_score(
        self, team_a: GeneratedTeam, team_b: GeneratedTeam, mode: GenerationMode = "strict"
    ) -> float:
        gender_diff = abs(
            team_a.gender_balance.get("female", 0) - team_b.gender_balance.get("female", 0)
        )
        penalty_ratio = min(1.0, gender_diff / self.MAX_GENDER_SPREAD)
        return 100.0 - self.GENDER_PENALTY[mode] * penalty_ratio

    def score_components(
        self, team_a: GeneratedTeam, team_b: GeneratedTeam, mode: GenerationMode = "strict"
    ) -> dict[str, float]:
        return {
            "position": self.position_score(team_a, team_b),
            "skill": self.skill_score(team_a, team_b, mode),
            "gender": self.gender_score(team_a, team_b, mode),
        }

    def balance_score(self, components: dict[str, float], mode: GenerationMode = "strict") -> int:
        weights = self.WEIGHTS[mode]
        total = sum(components[name] * weight for name, weight in weights.items())
        # Half-up rounding, so 72.5 scores 73
        return max(0, min(100, math.floor(total + 0.5)))

    def generate_reasoning(
        self, team_a: GeneratedTeam, team_b: GeneratedTeam, balance_score: int
    ) -> str:
        """One-paragraph explanation of a suggestion's balance."""
        skill_diff = abs(team_a.average_skill - team_b.average_skill)
        gender_diff = abs(
            team_a.gender_balance.get("male", 0) - team_b.gender_balance.get("male", 0)
        )

        reasoning = f"Balance Score: {balance_score}/100. "

        if skill_diff < 0.5:
            reasoning += "Excellent skill balance. "
        elif skill_diff < 1.0:
            reasoning += "Good skill balance. "
        else:
            reasoning += f"Skill difference: {skill_diff:.1f} points. "

        if gender_diff <= 1:
            reasoning += "Good gender balance."
        else:
            reasoning += f"Gender difference: {gender_diff} players."

        return reasoning

    def score_pair(
        self, team_a: GeneratedTeam, team_b: GeneratedTeam, mode: GenerationMode = "strict"
    ) -> dict:
        """Score a team pair.

        Returns:
            Dict with balance_score (int 0-100), warnings (both teams'
            warnings, team A first), reasoning and the component scores.
        """
        components = self.score_components(team_a, team_b, mode)
        balance_score = self.balance_score(components, mode)
        logger.debug(f"Scored pair ({mode}): {balance_score} from {components}")
        return {
            "balance_score": balance_score,
            "warnings": [*team_a.warnings, *team_b.warnings],
            "reasoning": self.generate_reasoning(team_a, team_b, balance_score),
            "components": {name: round(value, 2) for name, value in components.items()},
        }
