"""Tests for team generation API routes."""

import httpx
import pytest

from volley_teams.main import app
from volley_teams.services.scoring_logger import ScoringLogger
from volley_teams.services.team_generator import TeamGenerator

pytestmark = pytest.mark.anyio

ROLES = ["Setter", "Middle Blocker", "Opposite", "Outside Hitter", "Outside Hitter", "Libero"]


def _players(count):
    return [
        {
            "id": f"p{i}",
            "first_name": f"Player{i}",
            "last_name": "Club",
            "skill_rating": (i % 7) + 2,
            "gender": "female" if i % 2 else "male",
            "primary_position": ROLES[i % len(ROLES)],
        }
        for i in range(count)
    ]


@pytest.fixture
async def client():
    """Create async test client with a fresh shared generator."""
    if hasattr(app.state, "team_generator"):
        delattr(app.state, "team_generator")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestGenerate:
    """Tests for POST /api/teams/generate."""

    async def test_generate_success(self, client):
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": _players(12), "target_team_size": 6, "seed": 5},
        )

        assert response.status_code == 200
        suggestions = response.json()["suggestions"]
        assert len(suggestions) == 3

        scores = [s["balance_score"] for s in suggestions]
        assert scores == sorted(scores, reverse=True)
        for s in suggestions:
            ids_a = {p["id"] for p in s["team_a"]["players"]}
            ids_b = {p["id"] for p in s["team_b"]["players"]}
            assert len(ids_a) == len(ids_b) == 6
            assert ids_a.isdisjoint(ids_b)
            assert sum(s["team_a"]["position_coverage"].values()) == 6
            assert s["reasoning"].startswith("Balance Score:")

    async def test_seeded_requests_are_reproducible(self, client):
        body = {"available_players": _players(12), "seed": 42}
        first = await client.post("/api/teams/generate", json=body)
        second = await client.post("/api/teams/generate", json=body)

        assert first.json() == second.json()

    async def test_joined_position_rows(self, client):
        """Players may carry their roles as joined player_positions rows."""
        players = [
            {
                "id": i,
                "first_name": "Row",
                "last_name": None,
                "skill_rating": None,
                "gender": "diverse",
                "player_positions": [
                    {"is_primary": True, "positions": {"name": ROLES[i % 4]}},
                ],
            }
            for i in range(4)
        ]
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": players, "target_team_size": 2},
        )

        assert response.status_code == 200
        team = response.json()["suggestions"][0]["team_a"]
        assert team["gender_balance"] == {"male": 0, "female": 0, "other": 2}
        assert team["average_skill"] == 5.0
        assert all(p["assigned_role"] in ROLES for p in team["players"])

    async def test_too_few_players(self, client):
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": _players(3), "target_team_size": 1},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Need at least 4 players to generate teams"

    async def test_not_enough_for_team_size(self, client):
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": _players(10), "target_team_size": 6},
        )

        assert response.status_code == 400
        assert "Not enough players" in response.json()["detail"]

    async def test_invalid_team_size(self, client):
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": _players(12), "target_team_size": 0},
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("raw", ["NaN", "inf"])
    async def test_non_finite_skill_rejected(self, client, raw):
        players = _players(4)
        players[1]["skill_rating"] = raw
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": players, "target_team_size": 2},
        )

        assert response.status_code == 422

    async def test_duplicate_rows_stay_on_one_team(self, client):
        players = _players(5)
        players.append(dict(players[0]))
        response = await client.post(
            "/api/teams/generate",
            json={"available_players": players, "target_team_size": 2, "seed": 3},
        )

        assert response.status_code == 200
        for s in response.json()["suggestions"]:
            ids_a = [p["id"] for p in s["team_a"]["players"]]
            ids_b = [p["id"] for p in s["team_b"]["players"]]
            assert set(ids_a).isdisjoint(ids_b)

    async def test_seeded_request_keeps_diagnostics(self, client, tmp_path):
        app.state.team_generator = TeamGenerator(
            scoring_logger=ScoringLogger(output_dir=tmp_path, enabled=True)
        )
        try:
            response = await client.post(
                "/api/teams/generate",
                json={"available_players": _players(12), "seed": 8},
            )
        finally:
            delattr(app.state, "team_generator")

        assert response.status_code == 200
        assert len(list(tmp_path.glob("strict_*.json"))) == 1


class TestRegenerate:
    """Tests for POST /api/teams/regenerate."""

    async def test_regenerate_success(self, client):
        response = await client.post(
            "/api/teams/regenerate",
            json={"available_players": _players(14), "target_team_size": 6},
        )

        assert response.status_code == 200
        suggestions = response.json()["suggestions"]
        assert len(suggestions) == 3
        for s in suggestions:
            assert len(s["team_a"]["players"]) == 6
            assert len(s["team_b"]["players"]) == 6

    async def test_regenerate_with_secondary_positions(self, client):
        players = _players(12)
        for p in players:
            p["secondary_positions"] = ["Setter"]
        response = await client.post(
            "/api/teams/regenerate",
            json={
                "available_players": players,
                "allow_secondary_positions": True,
                "seed": 3,
            },
        )

        assert response.status_code == 200
        assert len(response.json()["suggestions"]) == 3
