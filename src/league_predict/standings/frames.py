"""Tabular views of the league table and the leaderboard.

Turns calculator output into pandas DataFrames with display ranks and
medals, validated with the Pandera helpers in
`league_predict.utils.assertions` before they reach a renderer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import pandas as pd

from league_predict.ingest.schema import ProfileWithScore, Team, TeamStats
from league_predict.standings.table import group_standings
from league_predict.utils.assertions import (
    assert_columns,
    assert_no_nulls,
    assert_row_identity,
    assert_value_range,
)

MEDALS: dict[int, str] = {1: "🥇", 2: "🥈", 3: "🥉"}

STANDINGS_COLUMNS: list[str] = [
    "group_name",
    "rank",
    "team_id",
    "team_name",
    "played",
    "won",
    "drawn",
    "lost",
    "goals_for",
    "goals_against",
    "goal_difference",
    "points",
    "medal",
]

LEADERBOARD_COLUMNS: list[str] = [
    "rank",
    "user_id",
    "username",
    "score",
    "total",
    "correct",
    "wrong",
    "pending",
    "medal",
]

_TABLE_COUNTERS = ("played", "won", "drawn", "lost", "goals_for", "goals_against", "points")
_LEADERBOARD_COUNTERS = ("score", "total", "correct", "wrong", "pending")


def standings_frame(teams: Sequence[Team], stats: Iterable[TeamStats]) -> pd.DataFrame:
    """Build the per-group league table, one row per team in rank order.

    Rows are grouped by ``group_name`` (sorted) and ranked within each
    group starting at 1.  Ranks 1-3 carry a medal, others an empty string.
    """
    names = {team.id: team.name for team in teams}
    rows: list[dict[str, object]] = []
    for group, ranked in group_standings(teams, stats).items():
        for rank, record in enumerate(ranked, start=1):
            rows.append({
                "group_name": group,
                "rank": rank,
                "team_id": record.team_id,
                "team_name": names[record.team_id],
                "played": record.played,
                "won": record.won,
                "drawn": record.drawn,
                "lost": record.lost,
                "goals_for": record.goals_for,
                "goals_against": record.goals_against,
                "goal_difference": record.goal_difference,
                "points": record.points,
                "medal": MEDALS.get(rank, ""),
            })
    df = pd.DataFrame(rows, columns=STANDINGS_COLUMNS)

    assert_columns(df, STANDINGS_COLUMNS)
    assert_no_nulls(df)
    for col in _TABLE_COUNTERS:
        assert_value_range(df, col, min_val=0)
    assert_row_identity(df, "played", plus=["won", "drawn", "lost"])
    assert_row_identity(df, "goal_difference", plus=["goals_for"], minus=["goals_against"])
    return df


def leaderboard_frame(rows: Iterable[ProfileWithScore]) -> pd.DataFrame:
    """Build the leaderboard table in the order given (already sorted by score).

    Rows are numbered by position, so tied scores still get consecutive
    ranks in their stable order.  Positions 1-3 carry a medal.
    """
    records: list[dict[str, object]] = []
    for rank, row in enumerate(rows, start=1):
        records.append({
            "rank": rank,
            "user_id": row.id,
            "username": row.username,
            "score": row.score,
            "total": row.total_predictions,
            "correct": row.correct_predictions,
            "wrong": row.wrong_predictions,
            "pending": row.pending_predictions,
            "medal": MEDALS.get(rank, ""),
        })
    df = pd.DataFrame(records, columns=LEADERBOARD_COLUMNS)

    assert_columns(df, LEADERBOARD_COLUMNS)
    assert_no_nulls(df)
    for col in _LEADERBOARD_COUNTERS:
        assert_value_range(df, col, min_val=0)
    assert_row_identity(df, "total", plus=["correct", "wrong", "pending"])
    assert_row_identity(df, "score", plus=["correct"])
    return df
