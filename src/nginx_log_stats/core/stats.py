"""Frequency tables for matched access-log records."""

from __future__ import annotations

from collections import Counter

from .models import Record, Stat, StatType
from .rwlock import RWLock


def clean_path(filename: str) -> str:
    """Strip the query string (everything from the first '?')."""
    idx = filename.find("?")
    if idx != -1:
        return filename[:idx]
    return filename


def path_extension(path: str) -> str:
    """Extension of the final path segment, including the dot; '' if none."""
    base = path[path.rfind("/") + 1 :]
    idx = base.rfind(".")
    if idx == -1:
        return ""
    return base[idx:]


def resolve_stat_type(stat_type: StatType | str) -> StatType:
    """Accept a StatType or its string value."""
    if isinstance(stat_type, StatType):
        return stat_type
    try:
        return StatType(str(stat_type).strip().lower())
    except ValueError as e:
        valid = ", ".join(t.value for t in StatType)
        raise ValueError(f"Unknown stat type '{stat_type}'. Valid values: {valid}.") from e


class StatsStore:
    """Six frequency tables plus total and distinct-IPv6 counters.

    Every mutation and every read goes through one reader/writer lock. A
    record's increments are applied together while the write lock is held,
    so readers never observe half of a record.
    """

    def __init__(self) -> None:
        self._lock = RWLock()
        self._tables: dict[StatType, Counter[str]] = {t: Counter() for t in StatType}
        self._count = 0
        self._ipv6 = 0

    def add(self, record: Record) -> None:
        """Fold one record into the tables."""
        page = clean_path(record.filename)
        ext = path_extension(page)

        with self._lock.write():
            ips = self._tables[StatType.IPS]
            if ips[record.ip] == 0 and ":" in record.ip:
                self._ipv6 += 1
            ips[record.ip] += 1
            self._tables[StatType.STATUS_CODES][record.status] += 1
            self._tables[StatType.PAGES][page] += 1
            self._tables[StatType.HITS][record.filename] += 1
            # TODO: classify agents into browser families instead of raw strings
            self._tables[StatType.USER_AGENTS][record.user_agent] += 1
            self._tables[StatType.EXTENSIONS][ext] += 1
            self._count += 1

    def stats(self, stat_type: StatType | str, min_count: int = 0) -> list[Stat]:
        """Entries with value >= min_count, most frequent first.

        ``min_count`` of 0 disables filtering. Ties come back in no particular
        order.
        """
        table_key = resolve_stat_type(stat_type)
        with self._lock.read():
            out = [
                Stat(name, value)
                for name, value in self._tables[table_key].items()
                if min_count <= 0 or value >= min_count
            ]

        # sorted outside the lock so writers are not held up
        out.sort(key=lambda s: s.value, reverse=True)
        return out

    def count(self) -> int:
        with self._lock.read():
            return self._count

    def ips_count(self) -> tuple[int, int]:
        """Return (distinct IPv4 addresses, distinct IPv6 addresses)."""
        with self._lock.read():
            total = len(self._tables[StatType.IPS])
            ipv6 = self._ipv6
        return total - ipv6, ipv6
