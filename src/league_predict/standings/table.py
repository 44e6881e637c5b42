"""League table computation: per-team records and per-group ranking.

`compute_team_stats` accumulates played/won/drawn/lost, goals and points
from decided matches.  `rank_teams` orders a table by points, goal
difference, goals scored and finally team id, which makes the order total
and independent of input order.  `group_standings` partitions by whatever
group labels the teams carry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from league_predict.ingest.schema import Match, Team, TeamStats
from league_predict.standings.outcome import match_outcome

logger = logging.getLogger(__name__)

WIN_POINTS = 3
DRAW_POINTS = 1


def compute_team_stats(teams: Sequence[Team], matches: Iterable[Match]) -> list[TeamStats]:
    """Compute one `TeamStats` per team from the decided matches.

    Matches that are not completed, lack a score, or reference a team that
    is not in *teams* contribute nothing.  The result follows the order of
    *teams*; ranking is left to `rank_teams`.

    Args:
        teams: Teams to build records for.
        matches: All known matches; undecided ones are ignored.

    Returns:
        Fresh `TeamStats` records, one per input team.

    Example:
        >>> from league_predict.ingest.schema import Match, Team
        >>> teams = [Team(id=1, name="A", group_name="X"), Team(id=2, name="B", group_name="X")]
        >>> m = Match(id=1, team_a_id=1, team_b_id=2, team_a_score=2, team_b_score=1, status="completed")
        >>> [s.points for s in compute_team_stats(teams, [m])]
        [3, 0]
    """
    stats: dict[int, TeamStats] = {team.id: TeamStats(team_id=team.id) for team in teams}

    for match in matches:
        outcome = match_outcome(match)
        if outcome is None:
            continue
        team_a = stats.get(match.team_a_id)
        team_b = stats.get(match.team_b_id)
        if team_a is None or team_b is None:
            logger.debug(
                "match %d references unknown team (%d vs %d); skipped",
                match.id,
                match.team_a_id,
                match.team_b_id,
            )
            continue
        # match_outcome guarantees both scores are present.
        score_a = match.team_a_score or 0
        score_b = match.team_b_score or 0

        team_a.played += 1
        team_b.played += 1
        team_a.goals_for += score_a
        team_a.goals_against += score_b
        team_b.goals_for += score_b
        team_b.goals_against += score_a
        team_a.goal_difference = team_a.goals_for - team_a.goals_against
        team_b.goal_difference = team_b.goals_for - team_b.goals_against

        if outcome == "teamA":
            team_a.won += 1
            team_a.points += WIN_POINTS
            team_b.lost += 1
        elif outcome == "teamB":
            team_b.won += 1
            team_b.points += WIN_POINTS
            team_a.lost += 1
        else:
            team_a.drawn += 1
            team_b.drawn += 1
            team_a.points += DRAW_POINTS
            team_b.points += DRAW_POINTS

    return list(stats.values())


def _ranking_key(stats: TeamStats) -> tuple[int, int, int, int]:
    return (-stats.points, -stats.goal_difference, -stats.goals_for, stats.team_id)


def rank_teams(stats: Iterable[TeamStats]) -> list[TeamStats]:
    """Return *stats* in league order (best first)."""
    return sorted(stats, key=_ranking_key)


def group_standings(teams: Iterable[Team], stats: Iterable[TeamStats]) -> dict[str, list[TeamStats]]:
    """Partition *stats* by each team's group and rank every partition.

    Groups appear in sorted label order.  Every group that has at least one
    team gets an entry, so no team is dropped because of its label.  Stats
    whose team id is not among *teams* are ignored.
    """
    group_of: dict[int, str] = {team.id: team.group_name for team in teams}
    groups: dict[str, list[TeamStats]] = {name: [] for name in sorted(set(group_of.values()))}
    for record in stats:
        group = group_of.get(record.team_id)
        if group is None:
            logger.debug("stats for unknown team %d ignored", record.team_id)
            continue
        groups[group].append(record)
    return {name: rank_teams(members) for name, members in groups.items()}
