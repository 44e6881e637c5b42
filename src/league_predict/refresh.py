"""Change-driven recomputation of standings and leaderboard.

`RefreshEngine` fetches a full snapshot through a `Repository`, runs the
standings and leaderboard calculators over it and hands the resulting
`LeagueSnapshot` to its listeners.  Attached to a `ChangeFeed`, it repeats
that fetch-then-recompute cycle on every change notification; nothing is
updated incrementally.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from typing import Literal

from league_predict.ingest.repository import Repository
from league_predict.ingest.schema import Match, Prediction, Profile, ProfileWithScore, Team, TeamStats
from league_predict.standings.leaderboard import compute_leaderboard
from league_predict.standings.table import compute_team_stats, group_standings
from league_predict.utils.logger import VERBOSE

logger = logging.getLogger(__name__)

ChangeAction = Literal["insert", "update", "delete"]


@dataclasses.dataclass(frozen=True)
class ChangeEvent:
    """Notification that a row in the data store changed."""

    table: str
    action: ChangeAction
    record_id: int | str | None = None


ChangeCallback = Callable[[ChangeEvent], None]
SnapshotCallback = Callable[["LeagueSnapshot"], None]


class ChangeFeed:
    """In-process publish/subscribe channel for `ChangeEvent` notifications.

    Stands in for a backend's realtime channel: whatever receives the
    backend's notifications publishes them here.
    """

    def __init__(self) -> None:
        self._subscribers: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register *callback*; return a function that unregisters it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        """Deliver *event* to every subscriber in registration order."""
        for callback in list(self._subscribers):
            callback(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


@dataclasses.dataclass(frozen=True)
class LeagueSnapshot:
    """Raw records plus every aggregate derived from them."""

    teams: list[Team]
    matches: list[Match]
    predictions: list[Prediction]
    profiles: list[Profile]
    team_stats: list[TeamStats]
    group_tables: dict[str, list[TeamStats]]
    leaderboard: list[ProfileWithScore]


def build_snapshot(
    teams: list[Team],
    matches: list[Match],
    predictions: list[Prediction],
    profiles: list[Profile],
) -> LeagueSnapshot:
    """Run both calculators over already-fetched records."""
    team_stats = compute_team_stats(teams, matches)
    return LeagueSnapshot(
        teams=teams,
        matches=matches,
        predictions=predictions,
        profiles=profiles,
        team_stats=team_stats,
        group_tables=group_standings(teams, team_stats),
        leaderboard=compute_leaderboard(profiles, matches, predictions),
    )


class RefreshEngine:
    """Keeps a `LeagueSnapshot` in step with the data store.

    Args:
        repository: Gateway used for every fetch.
        feed: Optional change feed; `start` subscribes to it.
    """

    def __init__(self, repository: Repository, feed: ChangeFeed | None = None) -> None:
        self._repo = repository
        self._feed = feed
        self._unsubscribe: Callable[[], None] | None = None
        self._listeners: list[SnapshotCallback] = []
        self._latest: LeagueSnapshot | None = None

    @property
    def latest(self) -> LeagueSnapshot | None:
        """The most recent snapshot, or ``None`` before the first refresh."""
        return self._latest

    @property
    def running(self) -> bool:
        return self._unsubscribe is not None

    def on_snapshot(self, callback: SnapshotCallback) -> None:
        """Call *callback* with every new snapshot."""
        self._listeners.append(callback)

    def refresh(self) -> LeagueSnapshot:
        """Fetch all records, recompute, and publish the new snapshot."""
        teams = self._repo.list_teams()
        matches = self._repo.list_matches()
        predictions = self._repo.list_predictions()
        profiles = self._repo.list_profiles()
        snapshot = build_snapshot(teams, matches, predictions, profiles)
        logger.log(
            VERBOSE,
            "refresh: %d teams, %d matches, %d predictions, %d profiles",
            len(teams),
            len(matches),
            len(predictions),
            len(profiles),
        )
        self._latest = snapshot
        for callback in self._listeners:
            callback(snapshot)
        return snapshot

    def _handle_change(self, event: ChangeEvent) -> None:
        logger.debug("change on %s (%s %s); refreshing", event.table, event.action, event.record_id)
        self.refresh()

    def start(self) -> LeagueSnapshot:
        """Take an initial snapshot and recompute on every feed event.

        Raises:
            RuntimeError: The engine has no change feed.
        """
        if self._feed is None:
            raise RuntimeError("RefreshEngine.start() requires a ChangeFeed")
        if self._unsubscribe is None:
            self._unsubscribe = self._feed.subscribe(self._handle_change)
        return self.refresh()

    def stop(self) -> None:
        """Stop reacting to feed events; the latest snapshot is kept."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
