"""Team generation services."""

from volley_teams.services.candidate_generator import (
    CandidateGenerator,
    InsufficientPlayersError,
)
from volley_teams.services.lineup_assigner import assign_roles
from volley_teams.services.team_generator import TeamGenerator

__all__ = [
    "CandidateGenerator",
    "InsufficientPlayersError",
    "assign_roles",
    "TeamGenerator",
]
