"""Access-log line matcher."""

from __future__ import annotations

import re
from datetime import datetime
from itertools import islice

from .models import Record

TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

# $remote_addr - $remote_user [$time_local] "$request" $status $body_bytes_sent "$http_referer" "$http_user_agent"
_LINE_RE = re.compile(
    r"(?P<ip>.+?)\s[^\[]+\[(?P<ts>[^\]]+)\]\s"
    r'"(?P<method>\w+) (?P<path>.+?)\sHTTP/(?P<version>\d\.\d)"\s+'
    r"(?P<status>\d+)\s+"
    r"(?P<size>\d+)\s+"
    r'"(?P<referer>[^"]*)"\s+'
    r'"(?P<ua>[^"]*)"'
)


def _parse_ts(ts_str: str) -> datetime | None:
    try:
        return datetime.strptime(ts_str, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def match_line(line: str) -> Record | None:
    """Match one combined-format access-log line.

    Returns None unless the grammar matches exactly once. Unmatched lines are
    dropped by callers without being counted or reported, so truncated or
    foreign lines in real-world logs never abort a run.

    A timestamp that does not follow ``TIMESTAMP_FORMAT`` does not reject the
    line; the record is produced with ``timestamp=None``.
    """
    found = list(islice(_LINE_RE.finditer(line), 2))
    if len(found) != 1:
        return None

    m = found[0]
    return Record(
        ip=m.group("ip"),
        timestamp=_parse_ts(m.group("ts")),
        method=m.group("method"),
        filename=m.group("path"),
        status=m.group("status"),
        referer=m.group("referer"),
        user_agent=m.group("ua"),
    )
