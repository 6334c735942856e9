"""Tests for team pair balance scoring."""
import pytest

from volley_teams.models.player import AssignedPlayer, Player
from volley_teams.services.scorers.team_scorer import TeamScorer
from volley_teams.utils.role_normalizer import CanonicalRole as R

IDEAL_ROLES = [R.SETTER, R.MIDDLE_BLOCKER, R.MIDDLE_BLOCKER, R.OPPOSITE, R.OUTSIDE_HITTER, R.OUTSIDE_HITTER]


@pytest.fixture
def scorer():
    return TeamScorer()


def _assigned(pid, role, skill=5, gender="other"):
    player = Player(id=pid, first_name=pid, primary_role=role.value, skill_rating=skill, gender=gender)
    return AssignedPlayer(player=player, assigned_role=role)


def _team(scorer, roles, prefix, skills=None, genders=None):
    skills = skills or [5] * len(roles)
    genders = genders or ["other"] * len(roles)
    return scorer.build_team(
        _assigned(f"{prefix}{i}", role, skill, gender)
        for i, (role, skill, gender) in enumerate(zip(roles, skills, genders))
    )


# ======================================================================
# Team aggregates and warnings
# ======================================================================


def test_build_team_aggregates(scorer):
    team = _team(
        scorer,
        IDEAL_ROLES,
        "a",
        skills=[4, 6, 5, 5, 8, 2],
        genders=["male", "female", "male", "female", "other", "female"],
    )

    assert team.average_skill == pytest.approx(5.0)
    assert team.position_coverage[R.MIDDLE_BLOCKER] == 2
    assert sum(team.position_coverage.values()) == team.size == 6
    assert team.gender_balance == {"male": 2, "female": 3, "other": 1}
    assert team.warnings == []


def test_missing_skill_counts_as_five(scorer):
    player = Player(id="x", primary_role="Setter")
    team = scorer.build_team([AssignedPlayer(player=player, assigned_role=R.SETTER)])
    assert team.average_skill == 5.0


def test_position_warnings(scorer):
    roles = [R.OUTSIDE_HITTER] * 4 + [R.MIDDLE_BLOCKER, R.LIBERO]
    team = _team(scorer, roles, "a")

    assert "No Setter" in team.warnings
    assert "No Opposite" in team.warnings
    assert "Too many Outside Hitters (4)" in team.warnings
    assert not any("Middle Blocker" in w for w in team.warnings)
    assert not any("Libero" in w for w in team.warnings)


def test_gender_warning(scorer):
    team = _team(scorer, IDEAL_ROLES, "a", genders=["male"] * 5 + ["female"])
    assert team.warnings == ["Gender imbalance: 5M/1F"]


def test_gender_gap_of_two_is_tolerated(scorer):
    team = _team(scorer, IDEAL_ROLES, "a", genders=["male"] * 4 + ["female"] * 2)
    assert team.warnings == []


# ======================================================================
# Sub-scores
# ======================================================================


def test_ideal_pair_scores_perfectly(scorer):
    team_a = _team(scorer, IDEAL_ROLES, "a")
    team_b = _team(scorer, IDEAL_ROLES, "b")

    result = scorer.score_pair(team_a, team_b, "strict")
    assert result["balance_score"] == 100
    assert result["components"] == {"position": 100.0, "skill": 100.0, "gender": 100.0}
    assert result["warnings"] == []


def test_position_score_penalties(scorer):
    """Missing setter on B: -8 ideal, -8 extra opposite, -5 and -5 cross-team."""
    team_a = _team(scorer, IDEAL_ROLES, "a")
    roles_b = [R.OPPOSITE, R.MIDDLE_BLOCKER, R.MIDDLE_BLOCKER, R.OPPOSITE, R.OUTSIDE_HITTER, R.OUTSIDE_HITTER]
    team_b = _team(scorer, roles_b, "b")

    assert scorer.position_score(team_a, team_b) == 74.0


def test_position_score_floors_at_zero(scorer):
    team_a = _team(scorer, [R.LIBERO] * 6, "a")
    team_b = _team(scorer, [R.LIBERO] * 6, "b")
    # 2 teams * 6 missing ideal slots * 8 = 96 penalty
    assert scorer.position_score(team_a, team_b) == 4.0

    team_c = _team(scorer, [R.OUTSIDE_HITTER] * 8, "c")
    assert scorer.position_score(team_a, team_c) == 0.0


def test_near_equal_skill_is_excellent(scorer):
    """Averages of 50 and 50.4 give a near-perfect strict skill score."""
    team_a = _team(scorer, IDEAL_ROLES, "a", skills=[50] * 6)
    team_b = _team(scorer, IDEAL_ROLES, "b", skills=[50, 50, 50, 50, 50, 52.4])

    assert team_b.average_skill == pytest.approx(50.4)
    assert scorer.skill_score(team_a, team_b, "strict") == pytest.approx(92.0)
    result = scorer.score_pair(team_a, team_b, "strict")
    assert "Excellent skill balance" in result["reasoning"]


@pytest.mark.parametrize(
    "diff,mode,expected",
    [
        (0.0, "strict", 100.0),
        (2.5, "strict", 50.0),
        (5.0, "strict", 0.0),
        (9.0, "strict", 0.0),
        (2.5, "loose", 70.0),
        (5.0, "loose", 40.0),
        (9.0, "loose", 40.0),
    ],
)
def test_skill_score_by_mode(scorer, diff, mode, expected):
    team_a = _team(scorer, [R.SETTER], "a", skills=[1])
    team_b = _team(scorer, [R.SETTER], "b", skills=[1 + diff])
    assert scorer.skill_score(team_a, team_b, mode) == pytest.approx(expected)


@pytest.mark.parametrize(
    "females_b,mode,expected",
    [
        (0, "strict", 100.0),
        (1, "strict", 100.0 - 100.0 / 3),
        (3, "strict", 0.0),
        (4, "strict", 0.0),
        (3, "loose", 20.0),
    ],
)
def test_gender_score_by_mode(scorer, females_b, mode, expected):
    team_a = _team(scorer, IDEAL_ROLES, "a", genders=["male"] * 6)
    genders_b = ["female"] * females_b + ["male"] * (6 - females_b)
    team_b = _team(scorer, IDEAL_ROLES, "b", genders=genders_b)
    assert scorer.gender_score(team_a, team_b, mode) == pytest.approx(expected)


# ======================================================================
# Composite score
# ======================================================================


def test_mode_weights(scorer):
    components = {"position": 100.0, "skill": 0.0, "gender": 0.0}
    assert scorer.balance_score(components, "strict") == 65
    assert scorer.balance_score(components, "loose") == 70

    components = {"position": 0.0, "skill": 0.0, "gender": 100.0}
    assert scorer.balance_score(components, "strict") == 15
    assert scorer.balance_score(components, "loose") == 20


@pytest.mark.parametrize(
    "components",
    [
        {"position": 0.0, "skill": 0.0, "gender": 0.0},
        {"position": 100.0, "skill": 100.0, "gender": 100.0},
        {"position": 250.0, "skill": 250.0, "gender": 250.0},
        {"position": -50.0, "skill": -50.0, "gender": -50.0},
    ],
)
def test_balance_score_is_clamped(scorer, components):
    for mode in ("strict", "loose"):
        assert 0 <= scorer.balance_score(components, mode) <= 100


def test_warnings_union_team_a_first(scorer):
    team_a = _team(scorer, [R.LIBERO] * 6, "a")
    team_b = _team(scorer, IDEAL_ROLES, "b", genders=["female"] * 6)

    result = scorer.score_pair(team_a, team_b)
    assert result["warnings"] == [
        "No Setter",
        "No Middle Blocker",
        "No Outside Hitter",
        "No Opposite",
        "Gender imbalance: 0M/6F",
    ]


# ======================================================================
# Reasoning
# ======================================================================


def test_reasoning_good_skill_and_gender_difference(scorer):
    team_a = _team(scorer, IDEAL_ROLES, "a", skills=[5] * 6, genders=["male"] * 6)
    team_b = _team(scorer, IDEAL_ROLES, "b", skills=[5.7] * 6, genders=["male"] * 3 + ["female"] * 3)

    reasoning = scorer.generate_reasoning(team_a, team_b, 81)
    assert reasoning == "Balance Score: 81/100. Good skill balance. Gender difference: 3 players."


def test_reasoning_reports_large_skill_gap(scorer):
    team_a = _team(scorer, IDEAL_ROLES, "a", skills=[4] * 6)
    team_b = _team(scorer, IDEAL_ROLES, "b", skills=[6] * 6)

    reasoning = scorer.generate_reasoning(team_a, team_b, 70)
    assert reasoning == "Balance Score: 70/100. Skill difference: 2.0 points. Good gender balance."
