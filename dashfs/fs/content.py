"""
dashfs Content Store — content-addressed, deduplicating payload storage.

Encoding pipeline:
    payload → canonical JSON (sorted keys, compact) → sha256 hex → gzip

The hash is computed over the serialized bytes *before* compression, so two
payloads with the same canonical serialization always share one row no matter
how the compressor behaves. Rows are immutable and never deleted; there is no
owner and no reference count.

Every assignment of content to a file is appended to content_history.
"""

from __future__ import annotations

import gzip
import hashlib
import json
import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from dashfs.db.base import utcnow
from dashfs.db.models import Content, ContentHistoryEntry
from dashfs.engine.errors import NotFoundError

logger = logging.getLogger("dashfs.fs.content")


def serialize(payload: Any) -> bytes:
    """Canonical JSON bytes: identical values always serialize identically."""
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def content_hash(serialized: bytes) -> str:
    return hashlib.sha256(serialized).hexdigest()


def compress(data: bytes) -> bytes:
    # mtime=0 keeps the compressed bytes stable for identical input
    return gzip.compress(data, mtime=0)


def decompress(data: bytes) -> bytes:
    return gzip.decompress(data)


def encode(payload: Any) -> Tuple[str, bytes]:
    """Return (hash, compressed bytes) for a payload."""
    serialized = serialize(payload)
    return content_hash(serialized), compress(serialized)


def decode(data: bytes) -> Any:
    """Inverse of encode(): decompress and deserialize."""
    return json.loads(decompress(data).decode("utf-8"))


class ContentStore:
    """
    Stateless data access for content and content history.

    All methods take the caller's session so they join the caller's
    transaction.
    """

    def put(
        self,
        session: Session,
        payload: Any,
        actor: str,
        time: Optional[datetime] = None,
    ) -> Tuple[Content, bool]:
        """
        Store *payload* once per distinct canonical serialization.

        Returns:
            (content row, created) — created is False when the hash already existed.
        """
        digest, data = encode(payload)
        existing = session.get(Content, digest)
        if existing is not None:
            logger.debug(f"Content dedup hit: {digest[:12]}")
            return existing, False

        content = Content(
            hash=digest,
            data=data,
            created_by=actor,
            created_time=time or utcnow(),
        )
        session.add(content)
        session.flush()
        logger.info(f"Stored content {digest[:12]} ({len(data)} bytes compressed)")
        return content, True

    def get(self, session: Session, digest: str) -> Content:
        """Return the stored (compressed) row. Caller decodes."""
        content = session.get(Content, digest)
        if content is None:
            raise NotFoundError(f"Content not found: {digest}", content_hash=digest)
        return content

    def load(self, session: Session, digest: str) -> Any:
        """Fetch and decode in one step."""
        return decode(self.get(session, digest).data)

    def exists(self, session: Session, digest: str) -> bool:
        return session.get(Content, digest) is not None

    def record_history(
        self,
        session: Session,
        owner_id: int,
        digest: str,
        actor: str,
        time: Optional[datetime] = None,
    ) -> ContentHistoryEntry:
        """Append one immutable history row."""
        entry = ContentHistoryEntry(
            owner_id=owner_id,
            content_hash=digest,
            actor=actor,
            created_time=time or utcnow(),
        )
        session.add(entry)
        session.flush()
        return entry

    def list_history(self, session: Session, owner_id: int) -> List[ContentHistoryEntry]:
        """History rows for an owner, oldest first."""
        stmt = (
            select(ContentHistoryEntry)
            .where(ContentHistoryEntry.owner_id == owner_id)
            .order_by(ContentHistoryEntry.id)
        )
        return list(session.scalars(stmt))
