from __future__ import annotations

from pathlib import Path

import pytest

from nginx_log_stats.server.log_server import access_log_stats, mcp


@pytest.mark.asyncio
async def test_access_log_stats_tool_registered() -> None:
    tools = await mcp.list_tools()
    assert "access_log_stats" in [t.name for t in tools]


@pytest.mark.asyncio
async def test_access_log_stats_tool(tmp_path: Path, write_access_log, example_lines) -> None:
    path = tmp_path / "access.log"
    write_access_log(path, example_lines)

    out = await access_log_stats(str(path), stats=["pages"], limit=10)
    assert out["count"] == 2
    assert out["stats"]["pages"] == [{"name": "/index.html", "value": 2}]
