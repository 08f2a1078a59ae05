"""Report tool implementation.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from nginx_log_stats.core.models import StatType
from nginx_log_stats.core.parser import Parser
from nginx_log_stats.core.stats import resolve_stat_type

HARD_LIMIT = 5000
DEFAULT_STATS = [StatType.IPS]


class StatEntry(BaseModel):
    name: str = Field(description="Table key (address, status, path, agent or extension).")
    value: int = Field(ge=0, description="Number of matched requests with this key.")


class IPCounts(BaseModel):
    ipv4: int = Field(ge=0, description="Distinct IPv4 client addresses.")
    ipv6: int = Field(ge=0, description="Distinct IPv6 client addresses.")


class StatsReport(BaseModel):
    count: int = Field(ge=0, description="Matched and aggregated requests.")
    ips: IPCounts
    stats: dict[str, list[StatEntry]] = Field(default_factory=dict)


def parse_stat_types(names: Sequence[str] | None) -> list[StatType]:
    """Parse user-supplied dimension names; 'all' selects every dimension."""
    if not names:
        return list(DEFAULT_STATS)
    out: list[StatType] = []
    for s in names:
        if s.strip().lower() == "all":
            return list(StatType)
        stat_type = resolve_stat_type(s)
        if stat_type not in out:
            out.append(stat_type)
    return out


def build_report(
    parser: Parser,
    stat_types: Sequence[StatType],
    *,
    min_count: int = 0,
    limit: int | None = None,
) -> StatsReport:
    """Snapshot the requested dimensions of ``parser`` into a report."""
    if limit is not None:
        if limit <= 0:
            raise ValueError("limit must be > 0")
        limit = min(limit, HARD_LIMIT)

    ipv4, ipv6 = parser.ips_count()
    stats: dict[str, list[StatEntry]] = {}
    for stat_type in stat_types:
        entries = parser.stats(stat_type, min_count)
        if limit is not None:
            entries = entries[:limit]
        stats[stat_type.value] = [StatEntry(name=s.name, value=s.value) for s in entries]

    return StatsReport(count=parser.count(), ips=IPCounts(ipv4=ipv4, ipv6=ipv6), stats=stats)


async def access_log_stats_impl(
    *,
    log_path: str,
    stats: Sequence[str] | None = None,
    min_count: int = 0,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `access_log_stats` MCP tool."""
    if min_count < 0:
        raise ValueError("min_count must be >= 0")
    stat_types = parse_stat_types(stats)

    parser = Parser()
    await parser.parse_file(log_path)
    return build_report(parser, stat_types, min_count=min_count, limit=limit).model_dump()
