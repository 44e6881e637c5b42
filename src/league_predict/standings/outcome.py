"""Match outcome and prediction verdict rules shared by both calculators.

A match is *decided* only when it is marked ``completed`` and both scores
are recorded.  Standings skip undecided matches and the leaderboard counts
predictions on them as pending, so the two views never disagree about
which results exist.
"""

from __future__ import annotations

from typing import Literal

from league_predict.ingest.schema import Match, Prediction, PredictionResult

Verdict = Literal["correct", "wrong", "pending"]


def match_outcome(match: Match) -> PredictionResult | None:
    """Return the result of a decided match, or ``None`` if undecided.

    Example:
        >>> from league_predict.ingest.schema import Match
        >>> m = Match(id=1, team_a_id=1, team_b_id=2, team_a_score=2, team_b_score=1, status="completed")
        >>> match_outcome(m)
        'teamA'
    """
    if match.status != "completed" or match.team_a_score is None or match.team_b_score is None:
        return None
    if match.team_a_score > match.team_b_score:
        return "teamA"
    if match.team_b_score > match.team_a_score:
        return "teamB"
    return "draw"


def classify_prediction(prediction: Prediction, match: Match | None) -> Verdict:
    """Classify *prediction* against its match.

    A prediction whose match is missing from the snapshot, or whose match is
    not yet decided, is ``"pending"``.
    """
    if match is None:
        return "pending"
    actual = match_outcome(match)
    if actual is None:
        return "pending"
    return "correct" if prediction.prediction == actual else "wrong"
