# app/core/bridge/aggregate.py
"""
AGGREGATE MODULE - Fan a batch of named queries out and collect a Snapshot

Purpose:
    1. Run every query of a BatchSpec concurrently through the bridge
    2. Isolate failures per label (one bad query never sinks the batch)
    3. Unwrap single-row summaries
    4. Swap the finished Snapshot in as a whole

Data Flow:
    BatchSpec → run_query() x N (concurrently) → gather() → Snapshot
              → SnapshotStore.refresh() replaces the stored Snapshot
"""

import asyncio
import copy
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core import schemas
from app.core.bridge.client import QueryBridge
from app.core.exceptions import QueryFailedError

logger = logging.getLogger(__name__)


def unwrap_summary(rows: Any, default: Any = None) -> Any:
    """
    Expose the sole row of a single-row statement.

    Example:
        [{"total": 3}] -> {"total": 3}
        []             -> default
    """
    if isinstance(rows, list):
        return rows[0] if rows else default
    return rows


async def run_query(bridge: QueryBridge, query: schemas.QuerySpec) -> Any:
    """
    Execute one labelled query and shape its value for the Snapshot.

    Raises:
        QueryFailedError: the bridge returned an error result
    """
    result = await bridge.execute(query.sql)
    if result.is_error:
        raise QueryFailedError(query.label, result.error)

    rows = result.rows or []
    if query.summary:
        return unwrap_summary(rows, copy.deepcopy(query.default))
    return rows


async def gather(bridge: QueryBridge, batch: schemas.BatchSpec) -> schemas.Snapshot:
    """
    Run the whole batch concurrently and wait for every outcome.

    Every label of the batch ends up in the Snapshot exactly once: its
    value on success, its default on failure (and listed in
    Snapshot.failed). Never raises because of an individual query.
    """
    started = time.perf_counter()

    outcomes = await asyncio.gather(
        *(run_query(bridge, query) for query in batch.queries),
        return_exceptions=True,
    )

    data: Dict[str, Any] = {}
    failed: List[str] = []
    for query, outcome in zip(batch.queries, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning(f"[{query.label}] falling back to default: {outcome}")
            data[query.label] = copy.deepcopy(query.default)
            failed.append(query.label)
        else:
            data[query.label] = outcome

    duration = time.perf_counter() - started
    logger.info(
        f"Gathered {len(batch.queries) - len(failed)}/{len(batch.queries)} queries "
        f"in {duration:.3f}s"
        + (f" (failed: {', '.join(failed)})" if failed else "")
    )

    return schemas.Snapshot(
        data=data,
        failed=failed,
        refreshed_at=datetime.now(timezone.utc),
        duration_seconds=duration,
    )


class SnapshotStore:
    """
    Holds the current Snapshot.

    A refresh builds a complete new Snapshot before replacing the stored
    one, so readers keep seeing the previous cycle until the new one is
    ready. Overlapping refreshes are not prevented: the last one to finish
    wins.
    """

    def __init__(self):
        self._snapshot: Optional[schemas.Snapshot] = None
        self._in_flight = 0

    @property
    def current(self) -> Optional[schemas.Snapshot]:
        return self._snapshot

    @property
    def refreshing(self) -> bool:
        return self._in_flight > 0

    async def refresh(
        self, bridge: QueryBridge, batch: schemas.BatchSpec
    ) -> schemas.Snapshot:
        if self._in_flight:
            logger.warning(
                f"Refresh started while {self._in_flight} other refresh(es) in flight; "
                "last to finish wins"
            )
        self._in_flight += 1
        try:
            snapshot = await gather(bridge, batch)
        finally:
            self._in_flight -= 1

        self._snapshot = snapshot
        return snapshot
