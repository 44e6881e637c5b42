"""Typer CLI for viewing and editing a local league snapshot."""

from __future__ import annotations

import datetime
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

import pandas as pd
import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from league_predict.ingest import (
    Entity,
    Match,
    ParquetRepository,
    Prediction,
    PredictionResult,
    Profile,
    Repository,
    RepositoryError,
    Team,
)
from league_predict.refresh import ChangeFeed, LeagueSnapshot, RefreshEngine
from league_predict.service import LeagueService, ServiceError
from league_predict.standings import (
    compute_leaderboard,
    compute_team_stats,
    group_matches_by_date,
    leaderboard_frame,
    prediction_tally,
    standings_frame,
    team_fixtures,
)
from league_predict.utils.logger import LEVEL_ENV_VAR, configure_logging, get_logger

DATA_DIR_ENV_VAR = "LEAGUE_PREDICT_DATA_DIR"
VALID_CHOICES: tuple[str, ...] = ("teamA", "teamB", "draw")

app = typer.Typer(help="League table and prediction-game CLI")
console = Console()
log = get_logger("cli")

DATA_DIR_OPTION = typer.Option(
    Path("data/"),
    "--data-dir",
    envvar=DATA_DIR_ENV_VAR,
    help="Local Parquet data directory",
)
ACTOR_OPTION = typer.Option(..., "--as", help="Profile id of the user performing the change")


@app.callback()
def _callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help=f"QUIET | NORMAL | VERBOSE | DEBUG (default: ${LEVEL_ENV_VAR} or NORMAL)",
    ),
) -> None:
    """League standings and prediction leaderboard."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise _fail(str(exc))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _resolve_actor(repo: Repository, user_id: str) -> Profile:
    actor = repo.get_profile(user_id)
    if actor is None:
        raise _fail(f"Unknown profile {user_id!r}")
    return actor


def _start_session(data_dir: Path) -> tuple[LeagueService, RefreshEngine, Repository]:
    repo = ParquetRepository(base_path=data_dir)
    feed = ChangeFeed()
    engine = RefreshEngine(repo, feed)
    engine.start()
    return LeagueService(repo, feed), engine, repo


def _team_names(teams: list[Team]) -> dict[int, str]:
    return {team.id: team.name for team in teams}


def _print_group_table(df: pd.DataFrame, group: str) -> None:
    out = Table(title=f"Group {group}")
    out.add_column("#", justify="right")
    out.add_column("Team", style="cyan")
    for header in ("P", "W", "D", "L", "GF", "GA", "GD", "Pts"):
        out.add_column(header, justify="right")
    for row in df[df["group_name"] == group].itertuples(index=False):
        out.add_row(
            f"{row.medal} {row.rank}".strip(),
            escape(str(row.team_name)),
            str(row.played),
            str(row.won),
            str(row.drawn),
            str(row.lost),
            str(row.goals_for),
            str(row.goals_against),
            f"{row.goal_difference:+d}",
            f"[bold]{row.points}[/bold]",
        )
    console.print(out)


def _score_text(match: Match) -> str:
    if match.has_scores and match.status == "completed":
        return f"{match.team_a_score} : {match.team_b_score}"
    return "vs"


def _load_records(path: Path) -> dict[str, list[Any]]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("snapshot must be a JSON object")
    models: dict[str, type[BaseModel]] = {
        "teams": Team,
        "matches": Match,
        "predictions": Prediction,
        "profiles": Profile,
    }
    # Only keys present in the file are returned; absent entities stay untouched.
    return {name: [model.model_validate(r) for r in raw[name]] for name, model in models.items() if name in raw}


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


@app.command("import")
def import_snapshot(
    snapshot: Path = typer.Argument(..., help="JSON file with teams, matches, predictions and profiles"),
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Load a JSON snapshot into the local store (replaces each entity present, even when empty)."""
    if not snapshot.exists():
        raise _fail(f"Snapshot file not found: {snapshot}")
    try:
        records = _load_records(snapshot)
    except ValueError as exc:
        # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors.
        raise _fail(f"Invalid snapshot: {exc}")

    repo = ParquetRepository(base_path=data_dir)
    savers: dict[Entity, Callable[[list[Any]], None]] = {
        "teams": repo.save_teams,
        "matches": repo.save_matches,
        "predictions": repo.save_predictions,
        "profiles": repo.save_profiles,
    }
    for name, save in savers.items():
        if name not in records:
            continue
        if records[name]:
            save(records[name])
        else:
            repo.clear(name)
    counts = ", ".join(f"{name}: {len(items)}" for name, items in records.items())
    log.info("imported %s into %s", counts, data_dir)
    console.print(f"Imported {counts}")


@app.command()
def table(
    group: str | None = typer.Option(None, "--group", help="Only show this group"),
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Show the league table for every group."""
    repo = ParquetRepository(base_path=data_dir)
    teams = repo.list_teams()
    if not teams:
        console.print("[yellow]No teams found.[/yellow]")
        return
    df = standings_frame(teams, compute_team_stats(teams, repo.list_matches()))
    groups = sorted(df["group_name"].unique())
    if group is not None:
        if group not in groups:
            raise _fail(f"Unknown group {group!r}. Available groups: {', '.join(groups)}")
        groups = [group]
    for name in groups:
        _print_group_table(df, name)


@app.command()
def leaderboard(data_dir: Path = DATA_DIR_OPTION) -> None:
    """Show the prediction-game leaderboard."""
    repo = ParquetRepository(base_path=data_dir)
    rows = compute_leaderboard(repo.list_profiles(), repo.list_matches(), repo.list_predictions())
    if not rows:
        console.print("[yellow]No players yet.[/yellow]")
        return
    df = leaderboard_frame(rows)

    out = Table(title="Prediction Leaderboard")
    out.add_column("#", justify="right")
    out.add_column("Player", style="cyan")
    for header in ("Score", "Total", "Correct", "Wrong", "Pending"):
        out.add_column(header, justify="right")
    for row in df.itertuples(index=False):
        out.add_row(
            f"{row.medal} {row.rank}".strip(),
            escape(str(row.username)),
            f"[bold]{row.score}[/bold]",
            str(row.total),
            f"[green]{row.correct}[/green]",
            f"[red]{row.wrong}[/red]",
            str(row.pending),
        )
    console.print(out)


@app.command()
def team(
    team_id: int = typer.Argument(..., help="Team id"),
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Show a team's record, squad and fixtures."""
    repo = ParquetRepository(base_path=data_dir)
    teams = repo.list_teams()
    selected = next((t for t in teams if t.id == team_id), None)
    if selected is None:
        raise _fail(f"Team {team_id} not found")
    matches = repo.list_matches()
    stats = next(s for s in compute_team_stats(teams, matches) if s.team_id == team_id)
    names = _team_names(teams)

    console.print(f"[bold]{selected.name}[/bold]  (group {selected.group_name})")
    console.print(
        f"P {stats.played}  W {stats.won}  D {stats.drawn}  L {stats.lost}  "
        f"GF {stats.goals_for}  GA {stats.goals_against}  GD {stats.goal_difference:+d}  "
        f"Pts {stats.points}"
    )
    if selected.players:
        console.print("Squad: " + ", ".join(p.name for p in selected.players))

    out = Table(title="Fixtures")
    out.add_column("Date")
    out.add_column("Opponent", style="cyan")
    out.add_column("Score", justify="center")
    out.add_column("Result", justify="center")
    styles = {"W": "[green]W[/green]", "D": "[yellow]D[/yellow]", "L": "[red]L[/red]"}
    for fixture in team_fixtures(team_id, matches):
        date_text = fixture.match.match_date.isoformat() if fixture.match.match_date else "TBD"
        score = "-" if fixture.result is None else f"{fixture.goals_for} : {fixture.goals_against}"
        out.add_row(
            date_text,
            names.get(fixture.opponent_id, f"#{fixture.opponent_id}"),
            score,
            "not played" if fixture.result is None else styles[fixture.result],
        )
    console.print(out)


@app.command()
def schedule(data_dir: Path = DATA_DIR_OPTION) -> None:
    """Show every match grouped by date, with prediction counts."""
    repo = ParquetRepository(base_path=data_dir)
    names = _team_names(repo.list_teams())
    predictions = repo.list_predictions()
    days = group_matches_by_date(repo.list_matches())
    if not days:
        console.print("[yellow]No matches scheduled.[/yellow]")
        return
    for day in days:
        out = Table(title=day.date.isoformat() if day.date else "Undated")
        out.add_column("Id", justify="right")
        out.add_column("Team A", style="cyan")
        out.add_column("Score", justify="center")
        out.add_column("Team B", style="cyan")
        out.add_column("Picks A/D/B", justify="center")
        for match in day.matches:
            tally = prediction_tally(match.id, predictions)
            out.add_row(
                str(match.id),
                names.get(match.team_a_id, f"#{match.team_a_id}"),
                _score_text(match),
                names.get(match.team_b_id, f"#{match.team_b_id}"),
                f"{tally.team_a}/{tally.draw}/{tally.team_b}",
            )
        console.print(out)


# ---------------------------------------------------------------------------
# Write commands
# ---------------------------------------------------------------------------


def _print_group_after(snapshot: LeagueSnapshot | None, match: Match) -> None:
    if snapshot is None:
        return
    group = next((t.group_name for t in snapshot.teams if t.id == match.team_a_id), None)
    if group is None:
        return
    df = standings_frame(snapshot.teams, snapshot.team_stats)
    _print_group_table(df, group)


@app.command("set-score")
def set_score(
    match_id: int = typer.Argument(..., help="Match id"),
    team_a_score: int = typer.Argument(..., help="Goals scored by team A"),
    team_b_score: int = typer.Argument(..., help="Goals scored by team B"),
    actor_id: str = ACTOR_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Record a final score (admin only)."""
    service, engine, repo = _start_session(data_dir)
    actor = _resolve_actor(repo, actor_id)
    try:
        match = service.update_match_result(actor, match_id, team_a_score, team_b_score)
    except (ServiceError, RepositoryError) as exc:
        raise _fail(str(exc))
    console.print(f"Match {match.id} completed {match.team_a_score} : {match.team_b_score}")
    _print_group_after(engine.latest, match)


@app.command("set-date")
def set_date(
    match_id: int = typer.Argument(..., help="Match id"),
    match_date: str | None = typer.Argument(None, help="New date (YYYY-MM-DD); omit to clear"),
    actor_id: str = ACTOR_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Move a scheduled match to another date (admin only)."""
    try:
        parsed = datetime.date.fromisoformat(match_date) if match_date else None
    except ValueError:
        raise _fail(f"Invalid date {match_date!r}; expected YYYY-MM-DD")
    service, _engine, repo = _start_session(data_dir)
    actor = _resolve_actor(repo, actor_id)
    try:
        match = service.update_match_date(actor, match_id, parsed)
    except (ServiceError, RepositoryError) as exc:
        raise _fail(str(exc))
    console.print(f"Match {match.id} date: {match.match_date.isoformat() if match.match_date else 'TBD'}")


@app.command("rename-team")
def rename_team(
    team_id: int = typer.Argument(..., help="Team id"),
    name: str = typer.Argument(..., help="New team name"),
    actor_id: str = ACTOR_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Rename a team (admin only)."""
    service, _engine, repo = _start_session(data_dir)
    actor = _resolve_actor(repo, actor_id)
    try:
        renamed = service.rename_team(actor, team_id, name)
    except (ServiceError, RepositoryError) as exc:
        raise _fail(str(exc))
    console.print(f"Team {renamed.id} is now {renamed.name!r}")


@app.command()
def predict(
    match_id: int = typer.Argument(..., help="Match id"),
    choice: str = typer.Argument(..., help="teamA | teamB | draw"),
    actor_id: str = ACTOR_OPTION,
    data_dir: Path = DATA_DIR_OPTION,
) -> None:
    """Submit or change a prediction for a scheduled match."""
    if choice not in VALID_CHOICES:
        raise _fail(f"choice must be one of: {', '.join(VALID_CHOICES)}")
    service, engine, repo = _start_session(data_dir)
    actor = _resolve_actor(repo, actor_id)
    try:
        saved = service.submit_prediction(actor, match_id, cast(PredictionResult, choice))
    except (ServiceError, RepositoryError) as exc:
        raise _fail(str(exc))
    snapshot = engine.latest
    tally = prediction_tally(match_id, snapshot.predictions if snapshot else [saved])
    console.print(
        f"{actor.username} picked {saved.prediction} for match {match_id} "
        f"(picks A/D/B: {tally.team_a}/{tally.draw}/{tally.team_b})"
    )
