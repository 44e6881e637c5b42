"""Pydantic v2 schema models for league and prediction-game records.

Defines the raw records supplied by the data store (Team, Player, Match,
Prediction, Profile) and the derived aggregates produced by the standings
and leaderboard calculators (TeamStats, ProfileWithScore).  All downstream
code operates on these models regardless of which backend produced the rows.

Camel-case aliases mirror the JSON field names used by the presentation
layer, so ``model_dump(by_alias=True)`` yields ``goalsFor``,
``totalPredictions`` and friends.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PredictionResult = Literal["teamA", "teamB", "draw"]
MatchStatus = Literal["scheduled", "completed"]

ADMIN_ROLE = "admin"


class Player(BaseModel):
    """A squad member listed on a team."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    team_id: int | None = Field(default=None, ge=1)


class Team(BaseModel):
    """A team competing within one named group."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    group_name: str = Field(..., min_length=1)
    players: list[Player] = Field(default_factory=list)


class Match(BaseModel):
    """A fixture between two teams, possibly with a final score.

    Scores are expected to be both set or both null, and ``completed``
    implies both are set.  Those couplings are *not* enforced here: the
    calculators tolerate malformed rows instead of rejecting the snapshot.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    team_a_id: int = Field(..., ge=1)
    team_b_id: int = Field(..., ge=1)
    team_a_score: int | None = Field(default=None, ge=0)
    team_b_score: int | None = Field(default=None, ge=0)
    status: MatchStatus = "scheduled"
    match_date: datetime.date | None = None

    @model_validator(mode="after")
    def _check_distinct_teams(self) -> Match:
        if self.team_a_id == self.team_b_id:
            msg = f"team_a_id and team_b_id must differ (both are {self.team_a_id})"
            raise ValueError(msg)
        return self

    @property
    def has_scores(self) -> bool:
        """``True`` when both scores are recorded."""
        return self.team_a_score is not None and self.team_b_score is not None


class Prediction(BaseModel):
    """A user's pick for the outcome of one match."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    match_id: int = Field(..., ge=1)
    user_id: str = Field(..., min_length=1)
    prediction: PredictionResult


class Profile(BaseModel):
    """A registered player of the prediction game."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    username: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class TeamStats(BaseModel):
    """Derived league-table record for a single team."""

    model_config = ConfigDict(populate_by_name=True)

    team_id: int = Field(..., alias="teamId")
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = Field(default=0, alias="goalsFor")
    goals_against: int = Field(default=0, alias="goalsAgainst")
    goal_difference: int = Field(default=0, alias="goalDifference")
    points: int = 0


class ProfileWithScore(Profile):
    """A profile extended with prediction-game score and outcome counters."""

    score: int = 0
    total_predictions: int = Field(default=0, alias="totalPredictions")
    correct_predictions: int = Field(default=0, alias="correctPredictions")
    wrong_predictions: int = Field(default=0, alias="wrongPredictions")
    pending_predictions: int = Field(default=0, alias="pendingPredictions")
