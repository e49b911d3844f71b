"""
dashfs Visit Activity — background recording of "last visited" markers.

Reads never wait on activity writes: record_visit() hands the upsert to a
fixed-size thread pool and returns immediately. Each task runs in its own
session; a failed task is logged and dropped, never retried and never
surfaced to the caller.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from datetime import datetime
from typing import Optional, Set

from dashfs.db.base import utcnow
from dashfs.db.session import Database
from dashfs.fs.store import NodeStore

logger = logging.getLogger("dashfs.fs.activity")


class VisitActivityScheduler:
    """
    Fixed-size pool that upserts (user, node) visit rows.

    Usage:
        scheduler = VisitActivityScheduler(database, workers=2)
        scheduler.record_visit("alice", 42)
        scheduler.shutdown()
    """

    def __init__(self, database: Database, workers: int = 2, store: Optional[NodeStore] = None):
        self._db = database
        self._store = store or NodeStore()
        self._executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="dashfs-activity",
        )
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def record_visit(self, user_id: str, node_id: int) -> Optional[Future]:
        """Schedule an upsert stamped with the current time. Returns the task's future."""
        visited_at = utcnow()
        with self._lock:
            if self._closed:
                logger.warning(f"Activity scheduler is shut down; dropped visit {user_id} → {node_id}")
                return None
            try:
                future = self._executor.submit(self._upsert, user_id, node_id, visited_at)
            except RuntimeError as e:
                logger.warning(f"Could not schedule visit {user_id} → {node_id}: {e}")
                return None
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _upsert(self, user_id: str, node_id: int, visited_at: datetime) -> bool:
        try:
            with self._db.session_scope() as session:
                self._store.upsert_visit(session, user_id, node_id, visited_at)
            return True
        except Exception as e:
            logger.error(f"Error while adding activity for user {user_id} on node {node_id}: {e}")
            return False

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every task scheduled so far has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait_for_futures(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
        logger.info("Activity scheduler stopped")

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)
