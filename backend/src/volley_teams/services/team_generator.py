"""Team generation orchestrator.

Ties the pipeline together: candidate splits -> per-team role assignment ->
pair scoring -> ranking. Each call works on its own copies of the player
list, so one generator can serve independent requests.
"""
import logging
import random
import uuid
from typing import Optional

from volley_teams.config import settings
from volley_teams.models.team import (
    GenerationMode,
    TeamGenerationConfig,
    TeamPairCandidate,
    TeamSuggestion,
)
from volley_teams.services.candidate_generator import (
    CandidateGenerator,
    InsufficientPlayersError,
    ensure_minimum_players,
    unique_players,
)
from volley_teams.services.lineup_assigner import LINEUP_SIZE, assign_roles
from volley_teams.services.scorers.team_scorer import TeamScorer
from volley_teams.services.scoring_logger import ScoringLogger

logger = logging.getLogger(__name__)


class TeamGenerator:
    """Produces ranked two-team suggestions from a pool of players."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        scorer: Optional[TeamScorer] = None,
        scoring_logger: Optional[ScoringLogger] = None,
        suggestion_count: Optional[int] = None,
        shuffle_attempts: Optional[int] = None,
        strict_perturbations: Optional[int] = None,
    ):
        self.rng = rng or random.Random(settings.random_seed)
        self.scorer = scorer or TeamScorer()
        self.scoring_logger = scoring_logger
        self.suggestion_count = suggestion_count or settings.suggestion_count
        self.candidate_generator = CandidateGenerator(
            rng=self.rng,
            shuffle_attempts=shuffle_attempts or settings.loose_shuffle_attempts,
            strict_perturbations=(
                strict_perturbations
                if strict_perturbations is not None
                else settings.strict_perturbations
            ),
        )

    def generate_teams(self, config: TeamGenerationConfig) -> list[TeamSuggestion]:
        """Best-effort balanced suggestions (strict mode).

        Raises:
            InsufficientPlayersError: Fewer than 4 distinct players, or fewer
                than two full teams' worth
        """
        return self._run(config, "strict")

    def regenerate_teams(self, config: TeamGenerationConfig) -> list[TeamSuggestion]:
        """Shuffle-button variant: shuffled pool, loose candidates, loose scoring."""
        return self._run(config, "loose")

    def _run(self, config: TeamGenerationConfig, mode: GenerationMode) -> list[TeamSuggestion]:
        players = unique_players(config.available_players)
        try:
            ensure_minimum_players(players)
            if mode == "loose":
                self.rng.shuffle(players)
            candidates = self.candidate_generator.generate_candidates(
                players,
                config.target_team_size,
                mode=mode,
                prioritize_gender_balance=config.prioritize_gender_balance,
                allow_secondary_positions=(
                    config.allow_secondary_positions if mode == "loose" else False
                ),
            )
        except InsufficientPlayersError as e:
            if self.scoring_logger is not None:
                self._start_diagnostics(mode, len(players), config.target_team_size)
                self.scoring_logger.log_error(e.message)
                self.scoring_logger.save(suffix="_rejected")
            raise
        return self._rank(candidates, len(players), config.target_team_size, mode)

    def build_suggestion(
        self,
        candidate: TeamPairCandidate,
        mode: GenerationMode = "strict",
        lineup_size: int = LINEUP_SIZE,
    ) -> TeamSuggestion:
        """Assign roles on both sides of a split and score the result."""
        team_a = self.scorer.build_team(assign_roles(candidate.team_a, lineup_size))
        team_b = self.scorer.build_team(assign_roles(candidate.team_b, lineup_size))
        scored = self.scorer.score_pair(team_a, team_b, mode)
        return TeamSuggestion(
            team_a=team_a,
            team_b=team_b,
            balance_score=scored["balance_score"],
            reasoning=scored["reasoning"],
            overall_warnings=scored["warnings"],
            components=scored["components"],
        )

    def _start_diagnostics(self, mode: GenerationMode, player_count: int, team_size: int):
        self.scoring_logger.start_session(
            uuid.uuid4().hex,
            mode,
            player_count=player_count,
            team_size=team_size,
        )

    def _rank(
        self,
        candidates: list[TeamPairCandidate],
        player_count: int,
        team_size: int,
        mode: GenerationMode,
    ) -> list[TeamSuggestion]:
        considered = candidates[: self.suggestion_count]
        lineup_size = max(LINEUP_SIZE, team_size)

        if self.scoring_logger is not None:
            self._start_diagnostics(mode, player_count, team_size)
            self.scoring_logger.log_candidates(len(candidates), len(considered))

        suggestions = [self.build_suggestion(c, mode, lineup_size) for c in considered]
        # sorted() is stable, so equal scores keep generation order
        suggestions = sorted(suggestions, key=lambda s: s.balance_score, reverse=True)

        if self.scoring_logger is not None:
            self.scoring_logger.log_suggestions(suggestions)
            self.scoring_logger.save()

        logger.info(
            f"Generated {len(suggestions)} {mode} suggestion(s) for "
            f"{player_count} players; best score "
            f"{suggestions[0].balance_score if suggestions else 'n/a'}"
        )
        return suggestions
