from __future__ import annotations

import json
from pathlib import Path

import pytest

from nginx_log_stats.cli import main


def test_cli_prints_ip_stats(tmp_path: Path, write_access_log, sample_lines, capsys) -> None:
    path = tmp_path / "access.log"
    write_access_log(path, sample_lines)

    main([str(path)])
    out = capsys.readouterr().out

    assert "[ips]" in out
    assert "2 10.0.0.1" in out
    assert "Requests: 4" in out
    assert "IPv4 addresses: 2, IPv6 addresses: 1" in out


def test_cli_json_all_stats(tmp_path: Path, write_access_log, example_lines, capsys) -> None:
    path = tmp_path / "access.log"
    write_access_log(path, example_lines)

    main([str(path), "--stat", "all", "--json"])
    report = json.loads(capsys.readouterr().out)

    assert report["count"] == 2
    assert report["ips"] == {"ipv4": 1, "ipv6": 1}
    assert report["stats"]["pages"] == [{"name": "/index.html", "value": 2}]
    assert len(report["stats"]) == 6


def test_cli_records_callback(tmp_path: Path, write_access_log, example_lines, capsys) -> None:
    path = tmp_path / "access.log"
    write_access_log(path, example_lines)

    main([str(path), "--records", "--stat", "status_codes", "--min", "1"])
    out = capsys.readouterr().out

    assert '"GET /index.html?v=2" 404 "curl/7.68.0"' in out
    assert "2023-10-10T13:55:36-07:00" in out
    assert "[status_codes]" in out


def test_cli_missing_file_exits_2(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.log")])
    assert exc.value.code == 2
    assert "Log file not found" in capsys.readouterr().err


def test_cli_bad_limit_exits_2(tmp_path: Path, write_access_log, example_lines, capsys) -> None:
    path = tmp_path / "access.log"
    write_access_log(path, example_lines)

    with pytest.raises(SystemExit) as exc:
        main([str(path), "--limit", "0"])
    assert exc.value.code == 2
    assert "limit must be > 0" in capsys.readouterr().err
