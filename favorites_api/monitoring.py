"""Slow statement logging for the favorites store.

SQLite runs in-process, so a slow statement almost always means lock
contention on the database file or a runaway table scan.  Logging those
statements is the only visibility the service has into the store.
"""

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

_MAX_LOGGED_STATEMENT_CHARS = 500


def setup_query_monitoring(
    engine: AsyncEngine,
    slow_query_threshold: float = 0.1,
) -> None:
    """Attach cursor listeners that warn about statements above the threshold.

    Args:
        engine: Async engine whose ``sync_engine`` receives the listeners
        slow_query_threshold: Log statements slower than this many seconds
    """
    if not hasattr(engine, "sync_engine"):
        logger.warning("Engine does not have sync_engine attribute, skipping query monitoring")
        return

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _record_start(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _log_if_slow(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        started = conn.info["query_start_time"].pop()
        elapsed = time.perf_counter() - started
        if elapsed <= slow_query_threshold:
            return

        logged_statement = statement[:_MAX_LOGGED_STATEMENT_CHARS]
        if len(statement) > _MAX_LOGGED_STATEMENT_CHARS:
            logged_statement += "..."

        logger.warning(
            "Slow query detected (%.3fs): %s",
            elapsed,
            logged_statement,
            extra={
                "duration_seconds": elapsed,
                "threshold_seconds": slow_query_threshold,
            },
        )

    logger.debug(
        "Query monitoring enabled (slow query threshold: %ss)", slow_query_threshold
    )
