"""League mutations: admin edits and prediction submission.

`LeagueService` enforces who may change what before delegating the write
to a `Repository`.  Score, date and team-name edits are admin-only;
predictions are open to any profile but only while a match is scheduled.
After every successful write a `ChangeEvent` is published on the attached
feed, which is how a `RefreshEngine` learns to recompute.
"""

from __future__ import annotations

import datetime
import logging

from league_predict.ingest.repository import RecordNotFoundError, Repository
from league_predict.ingest.schema import Match, Prediction, PredictionResult, Profile, Team
from league_predict.refresh import ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class ServiceError(Exception):
    """Base exception for rejected league mutations."""


class PermissionDeniedError(ServiceError):
    """The acting profile lacks the role the operation needs."""


class InvalidMutationError(ServiceError):
    """The requested change is not allowed in the record's current state."""


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class LeagueService:
    """Applies league mutations on behalf of a profile.

    Args:
        repository: Gateway that performs the writes.
        feed: Optional change feed notified after each successful write.
    """

    def __init__(self, repository: Repository, feed: ChangeFeed | None = None) -> None:
        self._repo = repository
        self._feed = feed

    def _require_admin(self, actor: Profile, action: str) -> None:
        if not actor.is_admin:
            logger.warning("%s denied for %s (role %r)", action, actor.username, actor.role)
            raise PermissionDeniedError(f"{action} requires the admin role")

    def _get_match(self, match_id: int) -> Match:
        for match in self._repo.list_matches():
            if match.id == match_id:
                return match
        raise RecordNotFoundError(f"match {match_id} not found")

    def _notify(self, table: str, record_id: int | str | None) -> None:
        if self._feed is not None:
            self._feed.publish(ChangeEvent(table=table, action="update", record_id=record_id))

    def update_match_result(self, actor: Profile, match_id: int, team_a_score: int, team_b_score: int) -> Match:
        """Record a final score; the match becomes ``completed``."""
        self._require_admin(actor, "update_match_result")
        if team_a_score < 0 or team_b_score < 0:
            raise InvalidMutationError("scores must be non-negative")
        match = self._repo.save_match_result(match_id, team_a_score, team_b_score)
        logger.info("match %d result set to %d-%d", match_id, team_a_score, team_b_score)
        self._notify("matches", match_id)
        return match

    def update_match_date(self, actor: Profile, match_id: int, match_date: datetime.date | None) -> Match:
        """Move a scheduled match to *match_date* (``None`` clears the date)."""
        self._require_admin(actor, "update_match_date")
        current = self._get_match(match_id)
        if current.status != "scheduled":
            raise InvalidMutationError(f"match {match_id} is {current.status}; only scheduled matches can be moved")
        match = self._repo.save_match_date(match_id, match_date)
        logger.info("match %d moved to %s", match_id, match_date)
        self._notify("matches", match_id)
        return match

    def rename_team(self, actor: Profile, team_id: int, name: str) -> Team:
        """Rename a team; surrounding whitespace is stripped."""
        self._require_admin(actor, "rename_team")
        cleaned = name.strip()
        if not cleaned:
            raise InvalidMutationError("team name must not be empty")
        team = self._repo.save_team_name(team_id, cleaned)
        logger.info("team %d renamed to %r", team_id, cleaned)
        self._notify("teams", team_id)
        return team

    def submit_prediction(self, actor: Profile, match_id: int, prediction: PredictionResult) -> Prediction:
        """Create or replace *actor*'s pick for a scheduled match."""
        match = self._get_match(match_id)
        if match.status != "scheduled":
            raise InvalidMutationError(f"match {match_id} is {match.status}; predictions are closed")
        saved = self._repo.upsert_prediction(match_id, actor.id, prediction)
        logger.info("%s picked %s for match %d", actor.username, prediction, match_id)
        self._notify("predictions", saved.id)
        return saved
