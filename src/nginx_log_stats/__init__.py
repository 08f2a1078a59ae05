"""Concurrent access-log parser with running frequency statistics."""

from __future__ import annotations

from .core import Parser, Record, Stat, StatType, match_line

__all__ = ["Parser", "Record", "Stat", "StatType", "match_line"]
