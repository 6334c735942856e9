"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from volley_teams.config import settings
from volley_teams.api.routes.teams import router as teams_router
from volley_teams.services.scoring_logger import ScoringLogger
from volley_teams.services.team_generator import TeamGenerator

logging.getLogger("volley_teams").setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    if not hasattr(app.state, "team_generator"):
        scoring_logger = ScoringLogger() if settings.scoring_diagnostics else None
        app.state.team_generator = TeamGenerator(scoring_logger=scoring_logger)
    yield


app = FastAPI(
    title="Volley Teams",
    description="Volleyball club team balancing - ranked lineup suggestions",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "volley-teams"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Volley Teams API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(teams_router)
