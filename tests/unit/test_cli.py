"""Tests for the Typer CLI (``python -m league_predict.cli``)."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from league_predict.cli.main import app
from league_predict.ingest.repository import ParquetRepository

runner = CliRunner()

_SNAPSHOT: dict[str, list[dict[str, object]]] = {
    "teams": [
        {"id": 1, "name": "Lions", "group_name": "A", "players": [{"id": 1, "name": "Reza", "team_id": 1}]},
        {"id": 2, "name": "Tigers", "group_name": "A"},
        {"id": 3, "name": "Eagles", "group_name": "B"},
        {"id": 4, "name": "Sharks", "group_name": "B"},
    ],
    "matches": [
        {
            "id": 1,
            "team_a_id": 1,
            "team_b_id": 2,
            "team_a_score": 2,
            "team_b_score": 1,
            "status": "completed",
            "match_date": "2025-05-01",
        },
        {"id": 2, "team_a_id": 3, "team_b_id": 4, "status": "scheduled", "match_date": "2025-05-08"},
        {"id": 3, "team_a_id": 2, "team_b_id": 1, "status": "scheduled", "match_date": None},
    ],
    "predictions": [
        {"id": 1, "match_id": 1, "user_id": "u-sara", "prediction": "teamA"},
        {"id": 2, "match_id": 2, "user_id": "u-sara", "prediction": "draw"},
    ],
    "profiles": [
        {"id": "u-admin", "username": "organiser", "role": "admin"},
        {"id": "u-sara", "username": "sara", "role": "user"},
    ],
}


@pytest.fixture(autouse=True)
def _reset_league_logger() -> Iterator[None]:
    """Drop the handler each CLI run attaches to the captured stderr."""
    yield
    root = logging.getLogger("league_predict")
    root.handlers.clear()
    root.setLevel(logging.WARNING)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory populated through the ``import`` command."""
    snapshot = tmp_path / "snapshot.json"
    snapshot.write_text(json.dumps(_SNAPSHOT), encoding="utf-8")
    target = tmp_path / "data"
    result = runner.invoke(app, ["import", str(snapshot), "--data-dir", str(target)])
    assert result.exit_code == 0, result.output
    return target


class TestImport:
    """Tests for the ``import`` command."""

    @pytest.mark.smoke
    def test_import_writes_store(self, data_dir: Path) -> None:
        repo = ParquetRepository(data_dir)
        assert len(repo.list_teams()) == 4
        assert len(repo.list_matches()) == 3
        assert repo.get_profile("u-admin") is not None

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["import", str(tmp_path / "nope.json"), "--data-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_record(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"matches": [{"id": 1, "team_a_id": 2, "team_b_id": 2}]}), encoding="utf-8")
        result = runner.invoke(app, ["import", str(bad), "--data-dir", str(tmp_path / "data")])
        assert result.exit_code == 1
        assert "Invalid snapshot" in result.output

    def test_malformed_json(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["import", str(bad), "--data-dir", str(tmp_path / "data")])
        assert result.exit_code == 1

    def test_reimport_with_empty_list_clears_entity(self, data_dir: Path, tmp_path: Path) -> None:
        snapshot = tmp_path / "empty_picks.json"
        snapshot.write_text(json.dumps({**_SNAPSHOT, "predictions": []}), encoding="utf-8")
        result = runner.invoke(app, ["import", str(snapshot), "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "predictions: 0" in result.output
        repo = ParquetRepository(data_dir)
        assert repo.list_predictions() == []
        assert len(repo.list_teams()) == 4

    def test_reimport_leaves_absent_keys_untouched(self, data_dir: Path, tmp_path: Path) -> None:
        snapshot = tmp_path / "teams_only.json"
        snapshot.write_text(json.dumps({"teams": _SNAPSHOT["teams"][:2]}), encoding="utf-8")
        result = runner.invoke(app, ["import", str(snapshot), "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        repo = ParquetRepository(data_dir)
        assert len(repo.list_teams()) == 2
        assert len(repo.list_predictions()) == 2
        assert len(repo.list_matches()) == 3


class TestReadCommands:
    """Tests for ``table``, ``leaderboard``, ``team`` and ``schedule``."""

    def test_table_all_groups(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["table", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "Group A" in result.output
        assert "Group B" in result.output
        assert "Lions" in result.output

    def test_table_single_group(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["table", "--group", "B", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "Group A" not in result.output
        assert "Eagles" in result.output

    def test_table_unknown_group(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["table", "--group", "Z", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "Unknown group" in result.output

    def test_table_empty_store(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["table", "--data-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "No teams" in result.output

    def test_data_dir_from_env(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["table"], env={"LEAGUE_PREDICT_DATA_DIR": str(data_dir)})
        assert result.exit_code == 0, result.output
        assert "Tigers" in result.output

    def test_leaderboard(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["leaderboard", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "sara" in result.output
        assert "organiser" in result.output
        assert "🥇" in result.output

    def test_team(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["team", "1", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "Lions" in result.output
        assert "Reza" in result.output
        assert "Tigers" in result.output

    def test_unknown_team(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["team", "99", "--data-dir", str(data_dir)])
        assert result.exit_code == 1

    def test_schedule(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["schedule", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "2025-05-01" in result.output
        assert "Undated" in result.output

    def test_bad_log_level(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["--log-level", "TRACE", "table", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "Unknown log level" in result.output


class TestWriteCommands:
    """Tests for the mutation commands."""

    def test_set_score_as_admin(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-score", "2", "1", "3", "--as", "u-admin", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "Group B" in result.output
        match = {m.id: m for m in ParquetRepository(data_dir).list_matches()}[2]
        assert match.status == "completed"
        assert (match.team_a_score, match.team_b_score) == (1, 3)

    def test_set_score_denied_for_player(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-score", "2", "1", "3", "--as", "u-sara", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "admin" in result.output

    def test_unknown_actor(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-score", "2", "1", "3", "--as", "ghost", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "Unknown profile" in result.output

    def test_set_date(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-date", "3", "2025-06-01", "--as", "u-admin", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        match = {m.id: m for m in ParquetRepository(data_dir).list_matches()}[3]
        assert match.match_date is not None
        assert match.match_date.isoformat() == "2025-06-01"

    def test_set_date_invalid(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-date", "3", "June 1st", "--as", "u-admin", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_set_date_on_completed_match(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["set-date", "1", "2025-06-01", "--as", "u-admin", "--data-dir", str(data_dir)])
        assert result.exit_code == 1

    def test_rename_team(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["rename-team", "2", "Kings", "--as", "u-admin", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert {t.id: t.name for t in ParquetRepository(data_dir).list_teams()}[2] == "Kings"

    def test_predict(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["predict", "3", "teamB", "--as", "u-sara", "--data-dir", str(data_dir)])
        assert result.exit_code == 0, result.output
        assert "0/0/1" in result.output

    def test_predict_invalid_choice(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["predict", "3", "home", "--as", "u-sara", "--data-dir", str(data_dir)])
        assert result.exit_code == 1

    def test_predict_closed_match(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["predict", "1", "draw", "--as", "u-sara", "--data-dir", str(data_dir)])
        assert result.exit_code == 1
        assert "closed" in result.output
