"""Prediction-game leaderboard computation.

Every correct prediction is worth one point; there is no bonus for margin
or difficulty.  Each profile also receives total/correct/wrong/pending
counters, and ``total == correct + wrong + pending`` holds for every row
because predictions on unknown matches are counted as pending.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence

from league_predict.ingest.schema import Match, Prediction, Profile, ProfileWithScore
from league_predict.standings.outcome import classify_prediction

logger = logging.getLogger(__name__)

POINTS_PER_CORRECT = 1

_PROFILE_FIELDS = set(Profile.model_fields)


@dataclasses.dataclass
class _Counters:
    score: int = 0
    total: int = 0
    correct: int = 0
    wrong: int = 0
    pending: int = 0


def compute_leaderboard(
    profiles: Sequence[Profile],
    matches: Iterable[Match],
    predictions: Iterable[Prediction],
) -> list[ProfileWithScore]:
    """Score every profile's predictions against the decided matches.

    Args:
        profiles: The users to score; the output has exactly one row each.
        matches: All known matches.
        predictions: All predictions.  Entries from users outside *profiles*
            are ignored.

    Returns:
        `ProfileWithScore` rows sorted by score, highest first.  Ties keep
        the order of *profiles*.
    """
    matches_by_id: dict[int, Match] = {match.id: match for match in matches}
    counters: dict[str, _Counters] = {profile.id: _Counters() for profile in profiles}

    dangling = 0
    for prediction in predictions:
        tally = counters.get(prediction.user_id)
        if tally is None:
            continue
        tally.total += 1
        match = matches_by_id.get(prediction.match_id)
        if match is None:
            dangling += 1
        verdict = classify_prediction(prediction, match)
        if verdict == "correct":
            tally.correct += 1
            tally.score += POINTS_PER_CORRECT
        elif verdict == "wrong":
            tally.wrong += 1
        else:
            tally.pending += 1

    if dangling:
        logger.debug("%d predictions reference unknown matches; counted as pending", dangling)

    rows = [
        ProfileWithScore(
            **profile.model_dump(include=_PROFILE_FIELDS),
            score=counters[profile.id].score,
            total_predictions=counters[profile.id].total,
            correct_predictions=counters[profile.id].correct,
            wrong_predictions=counters[profile.id].wrong,
            pending_predictions=counters[profile.id].pending,
        )
        for profile in profiles
    ]
    # list.sort is stable, so equal scores keep profile order.
    rows.sort(key=lambda row: row.score, reverse=True)
    return rows
