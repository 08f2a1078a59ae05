"""Parser: concurrent ingestion into a shared stats store.

This module is the main integration point: feed it access-log streams or
files and query the accumulated statistics at any time, including while
other ingestions are still running.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import aclosing
from pathlib import Path
from typing import Any

from .log_service import iter_lines, open_log, resolve_max_workers, run_pipeline
from .matcher import match_line
from .models import Record, Stat, StatType
from .stats import StatsStore

RecordCallback = Callable[[Record], Any]


class Parser:
    """Owns the stats tables and folds parsed records into them.

    Repeated ``parse`` calls accumulate; nothing is reset between calls.
    Independent instances share no state.
    """

    def __init__(self) -> None:
        self._store = StatsStore()

    async def parse(
        self,
        stream: Any,
        fn: RecordCallback | None = None,
        *,
        max_workers: int | None = None,
        encoding: str = "utf-8",
        decode_errors: str = "replace",
    ) -> None:
        """Consume ``stream`` to the end and aggregate every matched line.

        ``fn`` is called once per matched record, before the record is
        counted, on the aggregation path: a slow callback stalls the whole
        pipeline. Records arrive in completion order, not input order.

        Returns once the stream is exhausted and every update is applied.
        Errors raised while reading the stream propagate to the caller.
        """
        worker_count = resolve_max_workers(max_workers)
        lines = iter_lines(stream, encoding=encoding, decode_errors=decode_errors)

        async with aclosing(
            run_pipeline(lines, worker_count=worker_count, matcher=match_line)
        ) as records:
            async for record in records:
                if fn is not None:
                    fn(record)
                self._store.add(record)

    async def parse_file(
        self,
        log_path: str | Path,
        fn: RecordCallback | None = None,
        *,
        max_workers: int | None = None,
        encoding: str = "utf-8",
        decode_errors: str = "replace",
    ) -> None:
        """Open a local log (plain or .gz) and ``parse`` it."""
        path = Path(log_path)
        if not path.is_file():
            raise FileNotFoundError(f"Log file not found: {path}")

        async with open_log(path, encoding=encoding, decode_errors=decode_errors) as f:
            await self.parse(
                f,
                fn,
                max_workers=max_workers,
                encoding=encoding,
                decode_errors=decode_errors,
            )

    def stats(self, stat_type: StatType | str, min_count: int = 0) -> list[Stat]:
        return self._store.stats(stat_type, min_count)

    def count(self) -> int:
        return self._store.count()

    def ips_count(self) -> tuple[int, int]:
        return self._store.ips_count()
