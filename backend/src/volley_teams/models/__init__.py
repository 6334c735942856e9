"""Data models for the volleyball team generator."""

from volley_teams.models.player import (
    DEFAULT_SKILL_RATING,
    GENDERS,
    AssignedPlayer,
    Player,
    normalize_gender,
)
from volley_teams.models.team import (
    GeneratedTeam,
    GenerationMode,
    TeamGenerationConfig,
    TeamPairCandidate,
    TeamSuggestion,
)

__all__ = [
    "DEFAULT_SKILL_RATING",
    "GENDERS",
    "AssignedPlayer",
    "Player",
    "normalize_gender",
    "GeneratedTeam",
    "GenerationMode",
    "TeamGenerationConfig",
    "TeamPairCandidate",
    "TeamSuggestion",
]
