"""
dashfs Logging — Logger setup and a structured JSONL audit log.

Implements:
- configure_logging(): JSON or text formatting for the "dashfs" logger tree
- AuditLog: per-category, per-day JSONL files for tree mutations and denials
- Entry builders for each audited event

Audit files: {directory}/{category}/{YYYY-MM-DD}.jsonl
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("dashfs.engine.logging")

AUDIT_CATEGORIES = ("tree", "content", "security")


class JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str, separators=(",", ":"))


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """Attach a single stream handler to the "dashfs" logger. Safe to call twice."""
    root = logging.getLogger("dashfs")
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_dashfs_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._dashfs_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root


class AuditEntry:
    """A structured audit record destined for one category file."""

    __slots__ = ("category", "data")

    def __init__(self, category: str, data: Dict[str, Any]):
        self.category = category
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


class AuditLog:
    """
    Appends audit entries to daily JSONL files, one directory per category.

    Thread-safe: one lock per file path.
    """

    def __init__(self, directory: str):
        self._dir = Path(directory)
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        for category in AUDIT_CATEGORIES:
            (self._dir / category).mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _resolve_path(self, category: str) -> Path:
        return self._dir / category / f"{date.today().isoformat()}.jsonl"

    def write(self, entry: AuditEntry) -> None:
        file_path = self._resolve_path(entry.category)
        with self._locks[str(file_path)]:
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(entry.to_json())
                f.write("\n")

    def read(self, category: str, day: Optional[date] = None) -> List[Dict[str, Any]]:
        """Read one day's entries for a category, oldest first."""
        day = day or date.today()
        file_path = self._dir / category / f"{day.isoformat()}.jsonl"
        if not file_path.exists():
            return []
        entries: List[Dict[str, Any]] = []
        with open(file_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed audit line in {file_path}")
        return entries


# ---------------------------------------------------------------------------
# Entry builders
# ---------------------------------------------------------------------------

def _base_entry(event: str, principal: Optional[str], **extra: Any) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    if principal is not None:
        entry["principal"] = principal
    entry.update(extra)
    return entry


def log_tree_event(
    event: str,
    principal: str,
    node_id: int,
    path: str,
    old_path: Optional[str] = None,
    descendants: Optional[int] = None,
) -> AuditEntry:
    """Build a tree mutation entry (node_created / node_renamed / node_moved)."""
    data = _base_entry(event, principal, node_id=node_id, path=path)
    if old_path is not None:
        data["old_path"] = old_path
    if descendants is not None:
        data["descendants"] = descendants
    return AuditEntry("tree", data)


def log_content_change(
    principal: str,
    node_id: int,
    content_hash: str,
    created: bool,
) -> AuditEntry:
    """Build a content assignment entry. *created* is False when the blob was deduplicated."""
    data = _base_entry(
        "content_assigned",
        principal,
        node_id=node_id,
        content_hash=content_hash,
        created=created,
    )
    return AuditEntry("content", data)


def log_access_denied(principal: str, path: str, root_type: str) -> AuditEntry:
    data = _base_entry("access_denied", principal, path=path, root_type=root_type)
    return AuditEntry("security", data)
