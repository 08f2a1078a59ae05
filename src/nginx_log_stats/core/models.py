"""Core data models for access-log statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class StatType(str, Enum):
    """Dimensions tracked by the stats store."""

    IPS = "ips"
    STATUS_CODES = "status_codes"
    PAGES = "pages"  # path with the query string stripped
    HITS = "hits"  # raw request target
    USER_AGENTS = "user_agents"
    EXTENSIONS = "extensions"


@dataclass(frozen=True, slots=True)
class Record:
    """One matched access-log line."""

    ip: str
    timestamp: datetime | None  # None when the timestamp field does not parse
    method: str
    filename: str  # may include a query string
    status: str
    referer: str
    user_agent: str


@dataclass(frozen=True, slots=True)
class Stat:
    """A (key, count) pair from a stats snapshot."""

    name: str
    value: int
