#!/usr/bin/env python3
"""Balance-score sweep for strict vs. loose team generation.

Builds random club rosters and reports how the best suggestion scores in each
mode, plus the most frequent warnings. Useful when tuning scorer weights.

Usage:
  python scripts/balance_sweep.py --pools 200 --players 14 --team-size 6 --seed 7
"""

import argparse
import json
import random
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend" / "src"))

from volley_teams.models.player import Player
from volley_teams.models.team import TeamGenerationConfig
from volley_teams.services.team_generator import TeamGenerator
from volley_teams.utils.role_normalizer import CANONICAL_ORDER

# Rough share of each primary role in a recreational club
ROLE_WEIGHTS = {
    "Setter": 0.15,
    "Middle Blocker": 0.20,
    "Opposite": 0.15,
    "Outside Hitter": 0.35,
    "Libero": 0.15,
}


@dataclass
class SweepResult:
    label: str
    scores: list[int] = field(default_factory=list)
    warnings: Counter = field(default_factory=Counter)

    @property
    def avg(self) -> float:
        return sum(self.scores) / len(self.scores) if self.scores else 0.0

    @property
    def worst(self) -> int:
        return min(self.scores) if self.scores else 0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "runs": len(self.scores),
            "avg_best_score": round(self.avg, 2),
            "worst_best_score": self.worst,
            "top_warnings": dict(self.warnings.most_common(5)),
        }


def random_pool(rng: random.Random, size: int) -> list[Player]:
    roles = list(ROLE_WEIGHTS)
    weights = list(ROLE_WEIGHTS.values())
    pool = []
    for i in range(size):
        primary = rng.choices(roles, weights=weights)[0]
        secondaries = tuple(
            r.value for r in CANONICAL_ORDER if r.value != primary and rng.random() < 0.2
        )
        pool.append(
            Player(
                id=f"p{i}",
                first_name=f"Player{i}",
                last_name="Sweep",
                primary_role=primary,
                secondary_roles=secondaries,
                skill_rating=rng.randint(1, 10) if rng.random() > 0.1 else None,
                gender=rng.choice(["male", "female", "female", "male", "other"]),
            )
        )
    return pool


def run_sweep(pools: int, players: int, team_size: int, seed: int) -> list[SweepResult]:
    rng = random.Random(seed)
    generator = TeamGenerator(rng=random.Random(seed + 1))
    results = {
        "strict": SweepResult("strict"),
        "loose": SweepResult("loose"),
        "loose+secondary": SweepResult("loose+secondary"),
    }

    for _ in range(pools):
        pool = random_pool(rng, players)
        config = TeamGenerationConfig(available_players=pool, target_team_size=team_size)
        seeded_config = TeamGenerationConfig(
            available_players=pool,
            target_team_size=team_size,
            allow_secondary_positions=True,
        )
        for label, suggestions in (
            ("strict", generator.generate_teams(config)),
            ("loose", generator.regenerate_teams(config)),
            ("loose+secondary", generator.regenerate_teams(seeded_config)),
        ):
            best = suggestions[0]
            results[label].scores.append(best.balance_score)
            results[label].warnings.update(best.overall_warnings)

    return list(results.values())


def main():
    parser = argparse.ArgumentParser(description="Balance-score sweep for team generation")
    parser.add_argument("--pools", type=int, default=100, help="Number of random rosters")
    parser.add_argument("--players", type=int, default=12, help="Players per roster")
    parser.add_argument("--team-size", type=int, default=6, help="Players per team")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", type=Path, default=None, help="Optional JSON output path")
    args = parser.parse_args()

    if args.players < args.team_size * 2:
        parser.error(f"--players must be at least {args.team_size * 2} for --team-size {args.team_size}")

    results = run_sweep(args.pools, args.players, args.team_size, args.seed)

    print("\n=== BALANCE SWEEP ===")
    for result in results:
        print(f"{result.label:<16} avg={result.avg:6.2f}  worst={result.worst:3d}")
        for warning, count in result.warnings.most_common(3):
            print(f"    {count:4d}x {warning}")

    if args.output:
        args.output.write_text(json.dumps([r.to_dict() for r in results], indent=2))
        print(f"\nResults saved to: {args.output}")


if __name__ == "__main__":
    main()
