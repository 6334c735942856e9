"""REST endpoints for team generation."""

import logging
import random
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from volley_teams.config import settings
from volley_teams.models.player import Player
from volley_teams.models.team import TeamGenerationConfig
from volley_teams.services.candidate_generator import InsufficientPlayersError
from volley_teams.services.team_generator import TeamGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["teams"])


class PlayerPositionName(BaseModel):
    name: Optional[str] = None


class PlayerPositionLink(BaseModel):
    is_primary: bool = False
    positions: Optional[PlayerPositionName] = None


class PlayerPayload(BaseModel):
    """Player row as supplied by the roster data layer."""

    id: str | int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skill_rating: Optional[float] = Field(default=None, allow_inf_nan=False)
    gender: Optional[str] = None
    height_cm: Optional[float] = Field(default=None, allow_inf_nan=False)
    primary_position: Optional[str] = None
    secondary_positions: Optional[list[str]] = None
    player_positions: Optional[list[PlayerPositionLink]] = None


class GenerateTeamsRequest(BaseModel):
    available_players: list[PlayerPayload]
    target_team_size: int = Field(default_factory=lambda: settings.default_team_size, ge=1)
    prioritize_gender_balance: bool = True
    allow_secondary_positions: bool = False
    seed: Optional[int] = None


def _get_generator(request: Request, seed: Optional[int]) -> TeamGenerator:
    """Seeded requests get their own generator; others share the app's."""
    if seed is not None:
        shared = getattr(request.app.state, "team_generator", None)
        return TeamGenerator(
            rng=random.Random(seed),
            scoring_logger=shared.scoring_logger if shared is not None else None,
        )
    if not hasattr(request.app.state, "team_generator"):
        request.app.state.team_generator = TeamGenerator()
    return request.app.state.team_generator


def _to_config(body: GenerateTeamsRequest) -> TeamGenerationConfig:
    return TeamGenerationConfig(
        available_players=[
            Player.from_record(p.model_dump(exclude_none=True)) for p in body.available_players
        ],
        target_team_size=body.target_team_size,
        prioritize_gender_balance=body.prioritize_gender_balance,
        allow_secondary_positions=body.allow_secondary_positions,
    )


def _run(request: Request, body: GenerateTeamsRequest, mode: Literal["generate", "regenerate"]) -> dict:
    generator = _get_generator(request, body.seed)
    config = _to_config(body)
    try:
        if mode == "generate":
            suggestions = generator.generate_teams(config)
        else:
            suggestions = generator.regenerate_teams(config)
    except InsufficientPlayersError as e:
        logger.info(f"Rejected {mode} request: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)

    return {"suggestions": [s.to_dict() for s in suggestions]}


@router.post("/generate")
async def generate_teams(request: Request, body: GenerateTeamsRequest):
    """Ranked, balance-first team suggestions."""
    return _run(request, body, "generate")


@router.post("/regenerate")
async def regenerate_teams(request: Request, body: GenerateTeamsRequest):
    """Shuffle: looser, more varied suggestions."""
    return _run(request, body, "regenerate")
