"""Entry point for ``python -m league_predict.cli``."""

from __future__ import annotations

from league_predict.cli.main import app

app()
