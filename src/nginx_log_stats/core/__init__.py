"""Core parsing and aggregation."""

from __future__ import annotations

from .matcher import match_line
from .models import Record, Stat, StatType
from .parser import Parser
from .stats import StatsStore

__all__ = [
    "Parser",
    "Record",
    "Stat",
    "StatType",
    "StatsStore",
    "match_line",
]
