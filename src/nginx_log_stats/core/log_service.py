"""Line reading and the concurrent match pipeline.

Lines flow from a single producer through a bounded queue to a pool of
workers that run the matcher on executor threads; matched records come back
through a second bounded queue in whatever order the workers finish.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import os
from collections.abc import AsyncIterator, Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.threadpool import wrap

from .models import Record

LOGGER = logging.getLogger(__name__)

MAX_WORKERS_ENV = "NGINX_STATS_MAX_WORKERS"

# Bytes per batch when pulling lines from a blocking stream on a thread.
_READ_HINT = 64 * 1024


@asynccontextmanager
async def open_log(path: Path, *, encoding: str, decode_errors: str):
    """Open an access log for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def resolve_max_workers(max_workers: int | None) -> int:
    if max_workers is not None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        return max_workers

    env = os.getenv(MAX_WORKERS_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_WORKERS_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_WORKERS_ENV} must be >= 1")
        return value

    # available CPUs, capped so huge hosts do not spawn hundreds of threads
    cpu_count = os.cpu_count() or 1
    return min(32, cpu_count)


def _decode(raw: str | bytes, *, encoding: str, decode_errors: str) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode(encoding, errors=decode_errors)
    return raw.rstrip("\r\n")


async def iter_lines(
    stream: Any,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[str]:
    """Yield newline-stripped text lines from an async or blocking stream.

    Async iterables (aiofiles handles, async generators) are consumed
    directly. Blocking file-like objects are read in batches via
    ``readlines(hint)`` on a thread so the event loop stays free.
    """
    if hasattr(stream, "__aiter__"):
        async for raw in stream:
            yield _decode(raw, encoding=encoding, decode_errors=decode_errors)
        return

    while True:
        batch = await asyncio.to_thread(stream.readlines, _READ_HINT)
        if not batch:
            return
        for raw in batch:
            yield _decode(raw, encoding=encoding, decode_errors=decode_errors)


async def run_pipeline(
    lines: AsyncIterator[str],
    *,
    worker_count: int,
    matcher: Callable[[str], Record | None],
) -> AsyncIterator[Record]:
    """Fan lines out to ``worker_count`` matchers and yield records as they finish.

    Lines the matcher rejects are dropped. The first error raised while
    reading ``lines`` is re-raised once the workers have drained.
    """
    if worker_count < 1:
        raise ValueError("worker_count must be >= 1")

    queue_size = max(1, worker_count * 4)
    line_queue: asyncio.Queue[object] = asyncio.Queue(maxsize=queue_size)
    record_queue: asyncio.Queue[object] = asyncio.Queue(maxsize=queue_size)
    line_sentinel = object()
    done_sentinel = object()
    errors: list[Exception] = []
    lines_read = 0

    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="nginx-stats")

    async def reader() -> None:
        nonlocal lines_read
        try:
            async for line in lines:
                lines_read += 1
                await line_queue.put(line)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            errors.append(exc)
        # sentinels only on a normal finish; a cancelled pipeline has no consumers left
        for _ in range(worker_count):
            await line_queue.put(line_sentinel)

    async def worker() -> None:
        try:
            while True:
                line = await line_queue.get()
                if line is line_sentinel:
                    break
                record = await loop.run_in_executor(executor, matcher, line)
                if record is not None:
                    await record_queue.put(record)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            errors.append(exc)
        await record_queue.put(done_sentinel)

    LOGGER.debug("Starting match pipeline (workers=%d)", worker_count)
    reader_task = asyncio.create_task(reader())
    worker_tasks = [asyncio.create_task(worker()) for _ in range(worker_count)]

    done_workers = 0
    records_out = 0
    try:
        while True:
            item = await record_queue.get()
            if item is done_sentinel:
                done_workers += 1
                if done_workers == worker_count:
                    break
                continue
            records_out += 1
            yield item

        if errors:
            raise errors[0]
        LOGGER.debug("Match pipeline drained (lines=%d, records=%d)", lines_read, records_out)
    finally:
        reader_task.cancel()
        for task in worker_tasks:
            task.cancel()
        await asyncio.gather(reader_task, *worker_tasks, return_exceptions=True)
        # matcher calls still running finish on their own; nothing waits on them
        executor.shutdown(wait=False, cancel_futures=True)
