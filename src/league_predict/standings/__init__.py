"""Standings, leaderboard, and schedule computations."""

from __future__ import annotations

from league_predict.standings.fixtures import (
    MatchDay,
    PredictionTally,
    TeamFixture,
    group_matches_by_date,
    predictable_matches,
    prediction_tally,
    team_fixtures,
)
from league_predict.standings.frames import leaderboard_frame, standings_frame
from league_predict.standings.leaderboard import compute_leaderboard
from league_predict.standings.outcome import classify_prediction, match_outcome
from league_predict.standings.table import compute_team_stats, group_standings, rank_teams

__all__ = [
    "MatchDay",
    "PredictionTally",
    "TeamFixture",
    "classify_prediction",
    "compute_leaderboard",
    "compute_team_stats",
    "group_matches_by_date",
    "group_standings",
    "leaderboard_frame",
    "match_outcome",
    "predictable_matches",
    "prediction_tally",
    "rank_teams",
    "standings_frame",
    "team_fixtures",
]
