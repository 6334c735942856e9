"""Scoring components for team suggestions."""
from volley_teams.services.scorers.team_scorer import TeamScorer

__all__ = [
    "TeamScorer",
]
