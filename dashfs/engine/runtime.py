"""
dashfs Runtime — wires the tree service and its collaborators.

Ties together:
- Database (request path) and a second Database for the activity pool
- NamespaceCache (Redis when enabled, otherwise database only)
- ProfileDirectory and Authorizer
- AuditLog (JSONL per category per day)
- VisitActivityScheduler (background visit writes)
- FolderService

Usage:
    with DashboardRuntime(load_config()) as runtime:
        runtime.folders.create_folder("Reports", "user.alice")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dashfs.db.session import Database
from dashfs.engine.cache import NamespaceCache
from dashfs.engine.config import DashFSConfig
from dashfs.engine.errors import InternalError
from dashfs.engine.logging import AuditLog, configure_logging
from dashfs.fs.activity import VisitActivityScheduler
from dashfs.fs.service import FolderService
from dashfs.profile.directory import ProfileDirectory
from dashfs.security.authorization import Authorizer

logger = logging.getLogger("dashfs.engine.runtime")


class DashboardRuntime:
    """
    Owns every long-lived object of a dashfs process.

    Nothing is a module-level singleton; tests build one runtime per
    database and tear it down with shutdown().
    """

    def __init__(self, config: Optional[DashFSConfig] = None, configure_logs: bool = True):
        self.config = config or DashFSConfig()
        self._configure_logs = configure_logs
        self._started = False

        self.database: Optional[Database] = None
        self.activity_database: Optional[Database] = None
        self.namespace_cache: Optional[NamespaceCache] = None
        self.directory: Optional[ProfileDirectory] = None
        self.authorizer: Optional[Authorizer] = None
        self.audit_log: Optional[AuditLog] = None
        self.activity: Optional[VisitActivityScheduler] = None
        self._folders: Optional[FolderService] = None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def folders(self) -> FolderService:
        if self._folders is None:
            raise InternalError("Runtime not started")
        return self._folders

    def startup(self) -> None:
        """Initialize all subsystems."""
        if self._started:
            logger.warning("Runtime already started")
            return

        # 1. Logging
        if self._configure_logs:
            configure_logging(self.config.logging.level, self.config.logging.format)
        logger.info(f"Starting dashfs runtime ({self.config.environment})...")

        # 2. Storage
        self.database = Database(self.config.database)
        if self.config.database.create_tables:
            self.database.create_all()
        self.activity_database = Database(self.config.database)

        # 3. Directory with namespace cache (Redis only when enabled)
        self.directory = ProfileDirectory(
            self.database,
            redis_url=self.config.redis.url if self.config.redis.enabled else None,
            namespace_ttl=self.config.cache.namespace_ttl,
            redis_db=self.config.redis.db,
        )
        self.namespace_cache = self.directory.namespace_cache

        # 4. Audit log and security
        if self.config.logging.directory:
            self.audit_log = AuditLog(self.config.logging.directory)
        self.authorizer = Authorizer(
            self.directory,
            super_admins=self.config.security.super_admins,
            audit_log=self.audit_log,
        )

        # 5. Background activity
        self.activity = VisitActivityScheduler(
            self.activity_database,
            workers=self.config.activity.workers,
        )

        # 6. Tree service
        self._folders = FolderService(
            self.database,
            self.authorizer,
            self.directory,
            activity=self.activity,
            audit_log=self.audit_log,
            recent_limit=self.config.activity.recent_limit,
        )

        self._started = True
        logger.info("dashfs runtime started")

    def shutdown(self) -> None:
        """Drain the activity pool, close connections."""
        if not self._started:
            return

        logger.info("Shutting down dashfs runtime...")
        if self.activity is not None:
            self.activity.shutdown(wait=True)
        for database in (self.activity_database, self.database):
            if database is not None:
                database.dispose()

        self._folders = None
        self._started = False
        logger.info("dashfs runtime shut down")

    def status(self) -> Dict[str, Any]:
        return {
            "started": self._started,
            "environment": self.config.environment,
            "database": self.database.health_check() if self.database else False,
            "redis": self.config.redis.enabled,
            "activity_pending": self.activity.pending if self.activity else 0,
        }

    def __enter__(self) -> "DashboardRuntime":
        self.startup()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()
