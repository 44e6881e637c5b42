"""Fixture lists, schedule grouping, and prediction tallies.

Pure helpers behind the team-detail page, the match schedule and the
prediction cards.  Like the calculators they read snapshots and return
fresh values.
"""

from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Iterable, Sequence
from typing import Literal

from league_predict.ingest.schema import Match, Prediction
from league_predict.standings.outcome import match_outcome

FixtureResult = Literal["W", "D", "L"]


@dataclasses.dataclass(frozen=True)
class TeamFixture:
    """One match seen from a single team's side.

    Attributes
    ----------
    match
        The underlying match record.
    opponent_id
        Id of the other team.
    goals_for
        Goals scored by the team, or ``None`` if not decided.
    goals_against
        Goals conceded by the team, or ``None`` if not decided.
    result
        ``"W"``, ``"D"`` or ``"L"``; ``None`` while the match is undecided.
    """

    match: Match
    opponent_id: int
    goals_for: int | None
    goals_against: int | None
    result: FixtureResult | None


@dataclasses.dataclass(frozen=True)
class MatchDay:
    """Matches sharing a date (``None`` for the undated bucket)."""

    date: datetime.date | None
    matches: tuple[Match, ...]


@dataclasses.dataclass(frozen=True)
class PredictionTally:
    """Count of picks per outcome for a single match."""

    team_a: int = 0
    draw: int = 0
    team_b: int = 0

    @property
    def total(self) -> int:
        return self.team_a + self.draw + self.team_b


def team_fixtures(team_id: int, matches: Iterable[Match]) -> list[TeamFixture]:
    """Return every match involving *team_id*, oldest first.

    Undated matches sort before dated ones; matches on the same date are
    ordered by id.
    """
    fixtures: list[TeamFixture] = []
    own = [m for m in matches if team_id in (m.team_a_id, m.team_b_id)]
    own.sort(key=lambda m: (m.match_date or datetime.date.min, m.id))
    for match in own:
        is_team_a = match.team_a_id == team_id
        opponent_id = match.team_b_id if is_team_a else match.team_a_id
        outcome = match_outcome(match)
        if outcome is None:
            fixtures.append(TeamFixture(match, opponent_id, None, None, None))
            continue
        goals_for = match.team_a_score if is_team_a else match.team_b_score
        goals_against = match.team_b_score if is_team_a else match.team_a_score
        result: FixtureResult
        if outcome == "draw":
            result = "D"
        elif (outcome == "teamA") == is_team_a:
            result = "W"
        else:
            result = "L"
        fixtures.append(TeamFixture(match, opponent_id, goals_for, goals_against, result))
    return fixtures


def group_matches_by_date(matches: Iterable[Match]) -> list[MatchDay]:
    """Bucket matches by date: ascending dates, then the undated bucket."""
    buckets: dict[datetime.date | None, list[Match]] = {}
    for match in matches:
        buckets.setdefault(match.match_date, []).append(match)

    dated = sorted(d for d in buckets if d is not None)
    order: list[datetime.date | None] = [*dated, None] if None in buckets else list(dated)
    return [MatchDay(date=d, matches=tuple(sorted(buckets[d], key=lambda m: m.id))) for d in order]


def prediction_tally(match_id: int, predictions: Iterable[Prediction]) -> PredictionTally:
    """Count the picks made for *match_id*."""
    team_a = draw = team_b = 0
    for p in predictions:
        if p.match_id != match_id:
            continue
        if p.prediction == "teamA":
            team_a += 1
        elif p.prediction == "teamB":
            team_b += 1
        else:
            draw += 1
    return PredictionTally(team_a=team_a, draw=draw, team_b=team_b)


def predictable_matches(
    matches: Sequence[Match],
    predictions: Iterable[Prediction],
    user_id: str | None = None,
) -> list[Match]:
    """Return the matches shown on the prediction page.

    An anonymous viewer (``user_id=None``) sees every scheduled and
    completed match.  A signed-in user sees scheduled matches plus the
    completed ones they made a pick for.
    """
    if user_id is None:
        return [m for m in matches if m.status in ("scheduled", "completed")]
    predicted = {p.match_id for p in predictions if p.user_id == user_id}
    return [m for m in matches if m.status == "scheduled" or (m.status == "completed" and m.id in predicted)]
