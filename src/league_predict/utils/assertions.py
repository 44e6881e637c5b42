"""DataFrame validation helpers backed by Pandera.

Used to check the table and leaderboard frames before they are handed to a
renderer: required columns, null-free cells, non-negative counters, and
per-row identities such as ``played == won + drawn + lost``.

Every helper raises `pandera.errors.SchemaError` on failure.

Usage:
    >>> import pandas as pd
    >>> from league_predict.utils.assertions import assert_columns, assert_row_identity
    >>> df = pd.DataFrame({"played": [3], "won": [2], "drawn": [1], "lost": [0]})
    >>> assert_columns(df, ["played", "won"])
    >>> assert_row_identity(df, "played", plus=["won", "drawn", "lost"])
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
import pandera.pandas as pa


def assert_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """Validate that all *required* columns exist in *df*.

    Raises:
        pa.errors.SchemaError: If any required column is missing.
    """
    if not required:
        return
    pa.DataFrameSchema(
        {col: pa.Column() for col in required},
        strict=False,
    ).validate(df)


def assert_no_nulls(
    df: pd.DataFrame,
    columns: Sequence[str] | None = None,
) -> None:
    """Validate that the given columns (all columns by default) hold no nulls.

    Raises:
        pa.errors.SchemaError: If a null is found or a column is missing.
    """
    cols = list(df.columns) if columns is None else list(columns)
    if not cols:
        return
    pa.DataFrameSchema(
        {col: pa.Column(nullable=False) for col in cols},
        strict=False,
    ).validate(df)


def assert_value_range(
    df: pd.DataFrame,
    column: str,
    *,
    min_val: float | None = None,
    max_val: float | None = None,
) -> None:
    """Validate that *column* values fall within the inclusive bounds.

    Raises:
        pa.errors.SchemaError: If a value is out of range or the column is
            missing.
    """
    checks: list[pa.Check] = []
    if min_val is not None:
        checks.append(pa.Check.ge(min_val))
    if max_val is not None:
        checks.append(pa.Check.le(max_val))
    # Build the schema even without bounds so a missing column still fails.
    pa.DataFrameSchema(
        {column: pa.Column(checks=checks or None)},
        strict=False,
    ).validate(df)


def assert_row_identity(
    df: pd.DataFrame,
    target: str,
    *,
    plus: Sequence[str] = (),
    minus: Sequence[str] = (),
) -> None:
    """Validate ``df[target] == sum(df[plus]) - sum(df[minus])`` on every row.

    Example:
        >>> import pandas as pd
        >>> df = pd.DataFrame({"goal_difference": [1], "goals_for": [3], "goals_against": [2]})
        >>> assert_row_identity(df, "goal_difference", plus=["goals_for"], minus=["goals_against"])

    Raises:
        pa.errors.SchemaError: If any row breaks the identity or a column is
            missing.
    """
    assert_columns(df, [target, *plus, *minus])
    if df.empty:
        return
    terms = " + ".join(plus) or "0"
    if minus:
        terms = f"{terms} - {' - '.join(minus)}"

    def _holds(frame: pd.DataFrame) -> pd.Series[bool]:
        expected = frame[list(plus)].sum(axis=1) - frame[list(minus)].sum(axis=1)
        return frame[target] == expected

    pa.DataFrameSchema(
        checks=[pa.Check(_holds, error=f"{target} == {terms}")],
        strict=False,
    ).validate(df)
