from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from nginx_log_stats.core.models import Record, StatType
from nginx_log_stats.core.parser import Parser
from nginx_log_stats.logging_config import configure_logging
from nginx_log_stats.tools.stats import build_report, parse_stat_types

LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_PATH = "access.log"
_STAT_CHOICES = [t.value for t in StatType] + ["all"]


def _non_negative(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {s!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def _print_record(record: Record) -> None:
    ts = record.timestamp.isoformat() if record.timestamp else "-"
    print(f'{record.ip} {ts} "{record.method} {record.filename}" {record.status} "{record.user_agent}"')


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Request statistics for an nginx/Apache combined access log.")
    p.add_argument("log_path", nargs="?", default=DEFAULT_LOG_PATH, help=f"Access log (default: {DEFAULT_LOG_PATH})")
    p.add_argument(
        "--stat",
        dest="stats",
        action="append",
        choices=_STAT_CHOICES,
        default=None,
        help="Dimension to print; repeatable. Default: ips",
    )
    p.add_argument("--min", dest="min_count", type=_non_negative, default=0, help="Hide entries seen fewer than N times")
    p.add_argument("--limit", type=int, default=None, help="Max entries printed per dimension (default: no cap)")
    p.add_argument("--workers", dest="max_workers", type=int, default=None, help="Matcher workers (default: CPU count)")
    p.add_argument("--records", action="store_true", help="Print every matched record as it is aggregated")
    p.add_argument("--json", dest="as_json", action="store_true", help="Print the report as JSON")
    p.add_argument("--log-level", default=None, help="Logging level (default: $NGINX_STATS_LOG_LEVEL or INFO)")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)

    parser = Parser()
    try:
        stat_types = parse_stat_types(args.stats)
        asyncio.run(
            parser.parse_file(
                args.log_path,
                _print_record if args.records else None,
                max_workers=args.max_workers,
            )
        )
        report = build_report(parser, stat_types, min_count=args.min_count, limit=args.limit)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    LOGGER.debug("Aggregated %d records from %s", report.count, args.log_path)

    if args.as_json:
        print(report.model_dump_json(indent=2))
        return

    for name, entries in report.stats.items():
        print(f"[{name}]")
        for entry in entries:
            print(f"{entry.value:>10} {entry.name}")

    print(f"\nRequests: {report.count}")
    print(f"IPv4 addresses: {report.ips.ipv4}, IPv6 addresses: {report.ips.ipv6}")


if __name__ == "__main__":
    main()
