"""Diagnostic logging for team balance scoring analysis.

This module captures detailed scoring information for generation requests so
weights and heuristics can be tuned offline.

Usage:
    from volley_teams.services.scoring_logger import ScoringLogger

    logger = ScoringLogger()
    logger.start_session("request-123", "strict", player_count=12, team_size=6)
    logger.log_candidates(4, 3)
    logger.log_suggestions(suggestions)
    logger.save()
"""
import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from volley_teams.models.team import TeamSuggestion

# Configure module logger
module_logger = logging.getLogger("volley_teams.scoring_diagnostics")


class ScoringLogger:
    """Captures detailed scoring diagnostics for analysis."""

    def __init__(self, output_dir: Optional[Path] = None, enabled: bool = True):
        """Initialize scoring logger.

        Args:
            output_dir: Directory to save diagnostic files. Defaults to logs/scoring/
            enabled: Whether logging is active. The app enables it from
                the scoring_diagnostics setting.
        """
        self.enabled = enabled
        self.output_dir = output_dir or Path(__file__).parents[4] / "logs" / "scoring"
        self.entries: list[dict] = []
        self.session_id: str = ""
        self.mode: str = ""
        self._metadata: dict = {}

        if self.enabled:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            module_logger.info(f"Scoring diagnostics enabled, output dir: {self.output_dir}")

    def start_session(
        self,
        session_id: str,
        mode: str,
        player_count: int,
        team_size: int,
        extra_metadata: Optional[dict] = None,
    ):
        """Initialize a new diagnostic session for one generation request."""
        if not self.enabled:
            return

        self.session_id = session_id
        self.mode = mode
        self.entries = []
        self._metadata = {
            "session_id": session_id,
            "mode": mode,
            "player_count": player_count,
            "team_size": team_size,
            "started_at": datetime.now().isoformat(),
            **(extra_metadata or {})
        }

        self.entries.append({
            "event": "session_start",
            "timestamp": datetime.now().isoformat(),
            **self._metadata
        })

    def log_candidates(self, candidate_count: int, considered: int):
        """Log how many candidate splits were generated and how many were scored."""
        if not self.enabled:
            return

        self.entries.append({
            "event": "candidates",
            "timestamp": datetime.now().isoformat(),
            "generated": candidate_count,
            "considered": considered,
        })

    def log_suggestions(self, suggestions: list["TeamSuggestion"]):
        """Log ranked suggestions with their component scores."""
        if not self.enabled:
            return

        self.entries.append({
            "event": "suggestions",
            "timestamp": datetime.now().isoformat(),
            "suggestions": [
                {
                    "rank": i + 1,
                    "balance_score": s.balance_score,
                    "components": dict(s.components),
                    "warnings": list(s.overall_warnings),
                    "team_a": sorted(s.team_a.player_ids),
                    "team_b": sorted(s.team_b.player_ids),
                    "average_skill": [
                        round(s.team_a.average_skill, 2),
                        round(s.team_b.average_skill, 2),
                    ],
                }
                for i, s in enumerate(suggestions)
            ]
        })

    def log_error(self, error_message: str):
        """Log an error that occurred during generation."""
        if not self.enabled:
            return

        self.entries.append({
            "event": "error",
            "timestamp": datetime.now().isoformat(),
            "error": error_message,
        })
        module_logger.error(f"Scoring error logged: {error_message[:200]}")

    def save(self, suffix: str = "") -> Optional[Path]:
        """Save diagnostics to JSON file.

        Returns:
            Path to saved file, or None if disabled/empty
        """
        if not self.enabled or not self.entries:
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        session_short = self.session_id[:8] if self.session_id else "unknown"
        filename = f"{self.mode}_{session_short}_{timestamp}{suffix}.json"
        output_path = self.output_dir / filename

        with open(output_path, "w") as f:
            json.dump({
                "metadata": self._metadata,
                "summary": self._compute_summary(),
                "entries": self.entries,
            }, f, indent=2)

        module_logger.info(f"Scoring diagnostics saved: {output_path}")
        return output_path

    def _compute_summary(self) -> dict:
        """Compute summary statistics from logged entries."""
        ranked = [
            s
            for e in self.entries
            if e["event"] == "suggestions"
            for s in e["suggestions"]
        ]

        component_stats: dict[str, dict] = {}
        for comp in ("position", "skill", "gender"):
            vals = [s["components"][comp] for s in ranked if comp in s["components"]]
            if vals:
                component_stats[comp] = {
                    "avg": round(sum(vals) / len(vals), 2),
                    "min": round(min(vals), 2),
                    "max": round(max(vals), 2),
                }

        warning_counts = Counter(w for s in ranked for w in s["warnings"])
        scores = [s["balance_score"] for s in ranked]

        return {
            "total_suggestions": len(ranked),
            "best_score": max(scores) if scores else None,
            "avg_score": round(sum(scores) / len(scores), 1) if scores else None,
            "component_stats": component_stats,
            "warning_counts": dict(warning_counts.most_common()),
            "errors": sum(1 for e in self.entries if e["event"] == "error"),
        }
