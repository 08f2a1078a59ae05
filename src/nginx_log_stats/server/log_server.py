"""MCP server entrypoint (stdio transport).

Exposes access-log statistics as a tool so MCP clients can ask for the
busiest clients, paths or status codes of a local log file.

Run locally (stdio):
    python -m nginx_log_stats.server.log_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from nginx_log_stats.logging_config import configure_logging
from nginx_log_stats.tools.stats import access_log_stats_impl

LOGGER = logging.getLogger(__name__)

mcp = FastMCP("access-log-stats", json_response=True)


@mcp.tool()
async def access_log_stats(
    log_path: str,
    stats: list[str] | None = None,
    min_count: int = 0,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return request statistics for an nginx/Apache combined access log.

    Parameters
    ----------
    log_path:
        Path to a local access log. Supports plain text and .gz.
    stats:
        Dimensions to report: ips, status_codes, pages, hits, user_agents,
        extensions, or "all". Defaults to ["ips"].
    min_count:
        Drop entries seen fewer than this many times (0 keeps everything).
    limit:
        Maximum entries per dimension (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"count": int, "ips": {"ipv4": int, "ipv6": int}, "stats": {name: [{"name", "value"}]}}
    """
    return await access_log_stats_impl(
        log_path=log_path,
        stats=stats,
        min_count=min_count,
        limit=limit,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
