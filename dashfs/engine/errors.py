"""
dashfs Error Hierarchy — Structured exceptions for the folder/file tree.

Every error carries a message plus free-form context and serializes to JSON,
so the API layer can map it to a response and the audit log can store it.

Hierarchy:
    DashFSError
    ├── NotFoundError      — Missing node / content / user / namespace
    ├── BadRequestError    — Invalid input (destination not a folder, cycles)
    │   └── PathError      — Malformed path string or illegal leaf name
    ├── ForbiddenError     — Authorization denied for the resolved root
    ├── ConflictError      — Duplicate path hash
    └── InternalError      — Unexpected storage / I/O failure
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class DashFSError(Exception):
    """
    Base error for all dashfs failures.
    All context is kept JSON-serializable for logging.
    """

    status_code: int = 500

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.principal: Optional[str] = context.get("principal")
        self.node_id: Optional[int] = context.get("node_id")
        self.path: Optional[str] = context.get("path")
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict."""
        return {
            "error_type": self.error_type,
            "status_code": self.status_code,
            "message": self.message,
            "principal": self.principal,
            "node_id": self.node_id,
            "path": self.path,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("principal", "node_id", "path")
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.path:
            parts.append(f"path={self.path}")
        if self.node_id is not None:
            parts.append(f"node_id={self.node_id}")
        return " | ".join(parts)


class NotFoundError(DashFSError):
    """Node, content, user or namespace does not exist."""

    status_code = 404


class BadRequestError(DashFSError):
    """Request is well-formed but not acceptable (e.g. move into own descendant)."""

    status_code = 400


class PathError(BadRequestError):
    """
    Path string failed validation.
    Raised before any write so callers get the precise reason.
    """

    def __init__(self, message: str, **context: Any):
        self.reason: Optional[str] = context.get("reason")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["reason"] = self.reason
        return d


class ForbiddenError(DashFSError):
    """Principal is not allowed to mutate under the resolved root."""

    status_code = 403


class ConflictError(DashFSError):
    """A node already occupies the computed path."""

    status_code = 409


class InternalError(DashFSError):
    """Unexpected storage failure. The transaction has been rolled back."""

    status_code = 500
