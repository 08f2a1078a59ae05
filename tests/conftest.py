from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def _access_line(
    ip: str = "10.0.0.1",
    path: str = "/index.html",
    status: int = 200,
    size: int = 512,
    agent: str = "curl/7.68.0",
    ts: str = "10/Oct/2023:13:55:36 -0700",
) -> str:
    return f'{ip} - - [{ts}] "GET {path} HTTP/1.1" {status} {size} "-" "{agent}"'


@pytest.fixture
def make_line() -> Callable[..., str]:
    return _access_line


@pytest.fixture
def example_lines() -> list[str]:
    return [
        '10.0.0.1 - - [10/Oct/2023:13:55:36 -0700] "GET /index.html HTTP/1.1" 200 512 "-" "curl/7.68.0"',
        '2001:db8::1 - - [10/Oct/2023:13:55:37 -0700] "GET /index.html?v=2 HTTP/1.1" 404 0 "-" "curl/7.68.0"',
    ]


@pytest.fixture
def sample_lines(example_lines: list[str]) -> list[str]:
    """Four well-formed lines and two malformed ones."""
    return [
        *example_lines,
        _access_line(ip="10.0.0.2", path="/static/app.js?v=9", status=304, size=0),
        _access_line(ip="10.0.0.1", path="/api/items", status=500, size=17, agent="Mozilla/5.0"),
        "not an access log line",
        '10.0.0.9 - - [10/Oct/2023:13:55:40 -0700] "GET / HTTP/1.1" 200 5 "-" "curl/7.68.0',
    ]


@pytest.fixture
def write_access_log() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write
