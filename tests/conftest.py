"""Shared pytest fixtures for the league_predict test suite.

Fixtures defined here are available to all tests without explicit imports.
"""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from league_predict.ingest.repository import ParquetRepository
from league_predict.ingest.schema import Match, Player, Prediction, Profile, Team


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Provide an isolated temporary directory for a Parquet store."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def sample_teams() -> list[Team]:
    """Four teams split across groups "A" and "B"."""
    return [
        Team(id=1, name="Lions", group_name="A", players=[Player(id=1, name="Reza", team_id=1)]),
        Team(id=2, name="Tigers", group_name="A"),
        Team(id=3, name="Eagles", group_name="B"),
        Team(id=4, name="Sharks", group_name="B"),
    ]


@pytest.fixture
def sample_matches() -> list[Match]:
    """Two completed matches, one scheduled, one completed without a score."""
    return [
        Match(
            id=1,
            team_a_id=1,
            team_b_id=2,
            team_a_score=2,
            team_b_score=1,
            status="completed",
            match_date=datetime.date(2025, 5, 1),
        ),
        Match(
            id=2,
            team_a_id=3,
            team_b_id=4,
            team_a_score=0,
            team_b_score=0,
            status="completed",
            match_date=datetime.date(2025, 5, 1),
        ),
        Match(id=3, team_a_id=2, team_b_id=1, match_date=datetime.date(2025, 5, 8)),
        Match(id=4, team_a_id=4, team_b_id=3, status="completed"),
    ]


@pytest.fixture
def sample_profiles() -> list[Profile]:
    """An admin and two ordinary players."""
    return [
        Profile(id="u-admin", username="organiser", role="admin"),
        Profile(id="u-sara", username="sara"),
        Profile(id="u-omid", username="omid"),
    ]


@pytest.fixture
def sample_predictions() -> list[Prediction]:
    """Picks covering correct, wrong, pending and dangling cases."""
    return [
        Prediction(id=1, match_id=1, user_id="u-sara", prediction="teamA"),
        Prediction(id=2, match_id=2, user_id="u-sara", prediction="draw"),
        Prediction(id=3, match_id=1, user_id="u-omid", prediction="teamB"),
        Prediction(id=4, match_id=3, user_id="u-omid", prediction="draw"),
        Prediction(id=5, match_id=99, user_id="u-omid", prediction="teamA"),
    ]


@pytest.fixture
def populated_repo(
    temp_data_dir: Path,
    sample_teams: list[Team],
    sample_matches: list[Match],
    sample_predictions: list[Prediction],
    sample_profiles: list[Profile],
) -> ParquetRepository:
    """A ParquetRepository pre-loaded with the sample records."""
    repo = ParquetRepository(temp_data_dir)
    repo.save_teams(sample_teams)
    repo.save_matches(sample_matches)
    repo.save_predictions(sample_predictions)
    repo.save_profiles(sample_profiles)
    return repo
