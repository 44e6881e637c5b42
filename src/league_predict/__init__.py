"""League table and match-prediction scoring."""

from __future__ import annotations

__version__ = "0.1.0"
