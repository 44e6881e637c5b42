"""Repository gateway for league and prediction-game data.

Defines the abstract ``Repository`` interface the rest of the package talks
to, and a concrete ``ParquetRepository`` that keeps a local snapshot of the
league in Apache Parquet files.  The calculators never see the repository:
callers fetch plain lists through it and pass them in, so the scoring logic
stays testable without any backend.
"""

from __future__ import annotations

import abc
import datetime
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

import pyarrow as pa  # type: ignore[import-untyped]
import pyarrow.parquet as pq  # type: ignore[import-untyped]

from league_predict.ingest.schema import Match, Prediction, PredictionResult, Profile, Team

Entity = Literal["teams", "matches", "predictions", "profiles"]

# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class RepositoryError(Exception):
    """Base exception for all repository errors."""


class RecordNotFoundError(RepositoryError):
    """A mutation referenced a record id that does not exist."""


# ---------------------------------------------------------------------------
# Abstract Repository
# ---------------------------------------------------------------------------


class Repository(abc.ABC):
    """Abstract gateway to the league data store."""

    # -- reads ---------------------------------------------------------------

    @abc.abstractmethod
    def list_teams(self) -> list[Team]:
        """Return all teams with their players."""

    @abc.abstractmethod
    def list_matches(self) -> list[Match]:
        """Return all matches ordered by date (undated last), then id."""

    @abc.abstractmethod
    def list_predictions(self) -> list[Prediction]:
        """Return every user's predictions."""

    @abc.abstractmethod
    def list_profiles(self) -> list[Profile]:
        """Return all user profiles."""

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile for *user_id*, or ``None`` if there is none."""
        for profile in self.list_profiles():
            if profile.id == user_id:
                return profile
        return None

    # -- single-record mutations --------------------------------------------

    @abc.abstractmethod
    def save_match_result(self, match_id: int, team_a_score: int, team_b_score: int) -> Match:
        """Record a final score and mark the match completed."""

    @abc.abstractmethod
    def save_match_date(self, match_id: int, match_date: datetime.date | None) -> Match:
        """Set (or clear) the date of a match."""

    @abc.abstractmethod
    def save_team_name(self, team_id: int, name: str) -> Team:
        """Rename a team."""

    @abc.abstractmethod
    def upsert_prediction(self, match_id: int, user_id: str, prediction: PredictionResult) -> Prediction:
        """Insert or replace the prediction keyed by (*match_id*, *user_id*)."""

    # -- bulk writes ---------------------------------------------------------

    @abc.abstractmethod
    def save_teams(self, teams: list[Team]) -> None:
        """Persist a collection of teams (overwrite)."""

    @abc.abstractmethod
    def save_matches(self, matches: list[Match]) -> None:
        """Persist a collection of matches (overwrite)."""

    @abc.abstractmethod
    def save_predictions(self, predictions: list[Prediction]) -> None:
        """Persist a collection of predictions (overwrite)."""

    @abc.abstractmethod
    def save_profiles(self, profiles: list[Profile]) -> None:
        """Persist a collection of profiles (overwrite)."""

    @abc.abstractmethod
    def clear(self, entity: Entity) -> None:
        """Remove every stored record of *entity*."""


# ---------------------------------------------------------------------------
# Parquet Repository
# ---------------------------------------------------------------------------

# Explicit PyArrow schemas for deterministic column types across reads/writes.

_PLAYER_TYPE = pa.struct([
    ("id", pa.int64()),
    ("name", pa.string()),
    ("team_id", pa.int64()),
])

_TEAM_SCHEMA = pa.schema([
    ("id", pa.int64()),
    ("name", pa.string()),
    ("group_name", pa.string()),
    ("players", pa.list_(_PLAYER_TYPE)),
])

_MATCH_SCHEMA = pa.schema([
    ("id", pa.int64()),
    ("team_a_id", pa.int64()),
    ("team_b_id", pa.int64()),
    ("team_a_score", pa.int64()),
    ("team_b_score", pa.int64()),
    ("status", pa.string()),
    ("match_date", pa.date32()),
])

_PREDICTION_SCHEMA = pa.schema([
    ("id", pa.int64()),
    ("match_id", pa.int64()),
    ("user_id", pa.string()),
    ("prediction", pa.string()),
])

_PROFILE_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("username", pa.string()),
    ("role", pa.string()),
])


_SCHEMAS: dict[str, pa.Schema] = {
    "teams": _TEAM_SCHEMA,
    "matches": _MATCH_SCHEMA,
    "predictions": _PREDICTION_SCHEMA,
    "profiles": _PROFILE_SCHEMA,
}


def _match_order(match: Match) -> tuple[bool, datetime.date, int]:
    return (match.match_date is None, match.match_date or datetime.date.min, match.id)


class ParquetRepository(Repository):
    """Repository implementation backed by Parquet files.

    Directory layout::

        {base_path}/
            teams.parquet        (players nested per team)
            matches.parquet
            predictions.parquet
            profiles.parquet

    Every write rewrites the whole file for that entity.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path

    def _read(self, name: str) -> list[dict[str, Any]]:
        path = self._base_path / f"{name}.parquet"
        if not path.exists():
            return []
        # to_pylist keeps nullable integers as None instead of NaN floats.
        rows: list[dict[str, Any]] = pq.read_table(path).to_pylist()
        return rows

    def _write(self, name: str, schema: pa.Schema, rows: Sequence[dict[str, Any]]) -> None:
        self._base_path.mkdir(parents=True, exist_ok=True)
        table = pa.Table.from_pylist(list(rows), schema=schema)
        pq.write_table(table, self._base_path / f"{name}.parquet")

    # -- reads ---------------------------------------------------------------

    def list_teams(self) -> list[Team]:
        return [Team(**row) for row in self._read("teams")]

    def list_matches(self) -> list[Match]:
        matches = [Match(**row) for row in self._read("matches")]
        return sorted(matches, key=_match_order)

    def list_predictions(self) -> list[Prediction]:
        return [Prediction(**row) for row in self._read("predictions")]

    def list_profiles(self) -> list[Profile]:
        return [Profile(**row) for row in self._read("profiles")]

    # -- single-record mutations --------------------------------------------

    def _replace_match(self, match_id: int, **changes: Any) -> Match:
        matches = self.list_matches()
        for i, match in enumerate(matches):
            if match.id == match_id:
                # Re-validate so bad scores are rejected before anything is written.
                updated = Match.model_validate({**match.model_dump(), **changes})
                matches[i] = updated
                self.save_matches(matches)
                return updated
        raise RecordNotFoundError(f"match {match_id} not found")

    def save_match_result(self, match_id: int, team_a_score: int, team_b_score: int) -> Match:
        return self._replace_match(
            match_id,
            team_a_score=team_a_score,
            team_b_score=team_b_score,
            status="completed",
        )

    def save_match_date(self, match_id: int, match_date: datetime.date | None) -> Match:
        return self._replace_match(match_id, match_date=match_date)

    def save_team_name(self, team_id: int, name: str) -> Team:
        teams = self.list_teams()
        for i, team in enumerate(teams):
            if team.id == team_id:
                updated = Team.model_validate({**team.model_dump(), "name": name})
                teams[i] = updated
                self.save_teams(teams)
                return updated
        raise RecordNotFoundError(f"team {team_id} not found")

    def upsert_prediction(self, match_id: int, user_id: str, prediction: PredictionResult) -> Prediction:
        predictions = self.list_predictions()
        for i, existing in enumerate(predictions):
            if existing.match_id == match_id and existing.user_id == user_id:
                updated = Prediction(id=existing.id, match_id=match_id, user_id=user_id, prediction=prediction)
                predictions[i] = updated
                self.save_predictions(predictions)
                return updated
        next_id = max((p.id for p in predictions if p.id is not None), default=0) + 1
        created = Prediction(id=next_id, match_id=match_id, user_id=user_id, prediction=prediction)
        predictions.append(created)
        self.save_predictions(predictions)
        return created

    # -- bulk writes ---------------------------------------------------------

    def save_teams(self, teams: list[Team]) -> None:
        if not teams:
            return
        self._write("teams", _TEAM_SCHEMA, [t.model_dump() for t in teams])

    def save_matches(self, matches: list[Match]) -> None:
        if not matches:
            return
        self._write("matches", _MATCH_SCHEMA, [m.model_dump() for m in matches])

    def save_predictions(self, predictions: list[Prediction]) -> None:
        if not predictions:
            return
        self._write("predictions", _PREDICTION_SCHEMA, [p.model_dump() for p in predictions])

    def save_profiles(self, profiles: list[Profile]) -> None:
        if not profiles:
            return
        self._write("profiles", _PROFILE_SCHEMA, [p.model_dump() for p in profiles])

    def clear(self, entity: Entity) -> None:
        self._write(entity, _SCHEMAS[entity], [])
