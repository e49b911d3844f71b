"""
dashfs Models — All SQLAlchemy models.

Tree and content tables:
1. node              — Folders and files, addressed by path hash
2. content           — Content-addressed, gzip-compressed payloads
3. content_history   — Append-only log of content assignments per file
4. favorite          — Per-user bookmarks
5. visit_activity    — Per-user last-visited markers

Profile tables (owned by the profile service; read here for identity,
membership and namespace resolution):
6. users
7. namespace
8. namespace_member
9. namespace_follower
"""

from __future__ import annotations

import enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    UniqueConstraint,
)

from dashfs.db.base import AuditMixin, Base, utcnow


class NodeKind(str, enum.Enum):
    FOLDER = "FOLDER"
    FILE = "FILE"


# ---------------------------------------------------------------------------
# 1. Node
# ---------------------------------------------------------------------------

class Node(Base, AuditMixin):
    __tablename__ = "node"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    path = Column(String(2048), nullable=False)
    path_hash = Column(LargeBinary(16), nullable=False)
    parent_path_hash = Column(LargeBinary(16), nullable=True)
    kind = Column(Enum(NodeKind, name="node_kind"), nullable=False, default=NodeKind.FOLDER)
    content_hash = Column(String(64), ForeignKey("content.hash"), nullable=True)

    __table_args__ = (
        UniqueConstraint("path_hash", name="uq_node_path_hash"),
        Index("idx_node_parent_path_hash", "parent_path_hash"),
        {"sqlite_autoincrement": True},
    )

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    @property
    def is_root(self) -> bool:
        return self.parent_path_hash is None

    def __repr__(self) -> str:
        return f"<Node(id={self.id}, kind={self.kind.value if self.kind else None}, path='{self.path}')>"


# ---------------------------------------------------------------------------
# 2. Content
# ---------------------------------------------------------------------------

class Content(Base):
    __tablename__ = "content"

    hash = Column(String(64), primary_key=True)
    data = Column(LargeBinary, nullable=False)
    created_by = Column(String(128), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Content(hash='{self.hash[:12]}', bytes={len(self.data or b'')})>"


# ---------------------------------------------------------------------------
# 3. Content history
# ---------------------------------------------------------------------------

class ContentHistoryEntry(Base):
    __tablename__ = "content_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("node.id"), nullable=False)
    content_hash = Column(String(64), ForeignKey("content.hash"), nullable=False)
    actor = Column(String(128), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_content_history_owner", "owner_id"),
    )


# ---------------------------------------------------------------------------
# 4. Favorite
# ---------------------------------------------------------------------------

class Favorite(Base):
    __tablename__ = "favorite"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False)
    node_id = Column(Integer, ForeignKey("node.id"), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "node_id", name="uq_favorite_user_node"),
    )


# ---------------------------------------------------------------------------
# 5. Visit activity
# ---------------------------------------------------------------------------

class VisitActivity(Base):
    __tablename__ = "visit_activity"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False)
    node_id = Column(Integer, ForeignKey("node.id"), nullable=False)
    last_visited_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "node_id", name="uq_visit_user_node"),
        Index("idx_visit_user_time", "user_id", "last_visited_time"),
    )


# ---------------------------------------------------------------------------
# 6-9. Profile tables
# ---------------------------------------------------------------------------

class User(Base):
    __tablename__ = "users"

    user_id = Column(String(128), primary_key=True)
    name = Column(String(200), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User(user_id='{self.user_id}')>"


class Namespace(Base):
    __tablename__ = "namespace"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    alias = Column(String(100), unique=True, nullable=False, index=True)
    created_by = Column(String(128), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "alias": self.alias}

    def __repr__(self) -> str:
        return f"<Namespace(id={self.id}, alias='{self.alias}')>"


class NamespaceMember(Base):
    __tablename__ = "namespace_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    namespace_id = Column(Integer, ForeignKey("namespace.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(128), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace_id", "user_id", name="uq_namespace_member"),
    )


class NamespaceFollower(Base):
    __tablename__ = "namespace_follower"

    id = Column(Integer, primary_key=True, autoincrement=True)
    namespace_id = Column(Integer, ForeignKey("namespace.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(128), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace_id", "user_id", name="uq_namespace_follower"),
    )
