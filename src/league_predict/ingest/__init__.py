"""Records and the repository gateway."""

from __future__ import annotations

from league_predict.ingest.repository import (
    Entity,
    ParquetRepository,
    RecordNotFoundError,
    Repository,
    RepositoryError,
)
from league_predict.ingest.schema import (
    Match,
    Player,
    Prediction,
    PredictionResult,
    Profile,
    ProfileWithScore,
    Team,
    TeamStats,
)

__all__ = [
    "Entity",
    "Match",
    "ParquetRepository",
    "Player",
    "Prediction",
    "PredictionResult",
    "Profile",
    "ProfileWithScore",
    "RecordNotFoundError",
    "Repository",
    "RepositoryError",
    "Team",
    "TeamStats",
]
