"""
dashfs Node Store — data access for the folder/file tree, favorites and
visit activity.

Every method runs inside the session it is given; transaction boundaries
belong to the caller (FolderService or the activity worker).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from dashfs.db.base import utcnow
from dashfs.db.models import Favorite, Node, NodeKind, VisitActivity

logger = logging.getLogger("dashfs.fs.store")


class NodeStore:
    """Queries and writes against the node, favorite and visit_activity tables."""

    # -------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------

    def get_by_id(
        self,
        session: Session,
        node_id: int,
        kind: Optional[NodeKind] = None,
    ) -> Optional[Node]:
        node = session.get(Node, node_id)
        if node is None or (kind is not None and node.kind != kind):
            return None
        return node

    def get_by_path_hash(self, session: Session, path_hash: bytes) -> Optional[Node]:
        return session.scalars(select(Node).where(Node.path_hash == path_hash)).first()

    def list_children(self, session: Session, parent_path_hash: bytes) -> List[Node]:
        """Direct children of the node whose path hashes to *parent_path_hash*, by id."""
        stmt = (
            select(Node)
            .where(Node.parent_path_hash == parent_path_hash)
            .order_by(Node.id)
        )
        return list(session.scalars(stmt))

    def list_all(self, session: Session) -> List[Node]:
        return list(session.scalars(select(Node).order_by(Node.id)))

    def insert(self, session: Session, node: Node) -> Node:
        """Insert and flush so the id is assigned and a path collision raises here."""
        session.add(node)
        session.flush()
        return node

    def save(self, session: Session, node: Node) -> Node:
        """Flush pending changes of an already-loaded node."""
        session.add(node)
        session.flush()
        return node

    # -------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------

    def is_favorite(self, session: Session, user_id: str, node_id: int) -> bool:
        return self._get_favorite(session, user_id, node_id) is not None

    def _get_favorite(self, session: Session, user_id: str, node_id: int) -> Optional[Favorite]:
        stmt = select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.node_id == node_id,
        )
        return session.scalars(stmt).first()

    def add_favorite(self, session: Session, user_id: str, node_id: int) -> bool:
        """Insert the favorite unless present. Returns True when a row was created."""
        insert = _dialect_insert(session)
        stmt = (
            insert(Favorite.__table__)
            .values(user_id=user_id, node_id=node_id, created_time=utcnow())
            .on_conflict_do_nothing(index_elements=["user_id", "node_id"])
        )
        return session.execute(stmt).rowcount == 1

    def remove_favorite(self, session: Session, user_id: str, node_id: int) -> int:
        result = session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.node_id == node_id,
            )
        )
        return result.rowcount or 0

    def list_favorites(self, session: Session, user_id: str) -> List[Tuple[Node, datetime]]:
        """(node, favorited time) pairs, most recent first."""
        stmt = (
            select(Node, Favorite.created_time)
            .join(Favorite, Favorite.node_id == Node.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_time.desc(), Favorite.id.desc())
        )
        return [(node, favorited) for node, favorited in session.execute(stmt)]

    # -------------------------------------------------------------------
    # Visit activity
    # -------------------------------------------------------------------

    def upsert_visit(
        self,
        session: Session,
        user_id: str,
        node_id: int,
        time: Optional[datetime] = None,
    ) -> None:
        """
        Bump the existing (user, node) marker or create it, in one statement.

        Concurrent upserts of a fresh pair resolve on the unique key instead
        of racing a read against an insert. The stored time never moves
        backwards.
        """
        now = time or utcnow()
        insert = _dialect_insert(session)
        stmt = insert(VisitActivity.__table__).values(
            user_id=user_id,
            node_id=node_id,
            last_visited_time=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "node_id"],
            set_={"last_visited_time": stmt.excluded.last_visited_time},
            where=VisitActivity.__table__.c.last_visited_time < stmt.excluded.last_visited_time,
        )
        session.execute(stmt)

    def list_visit_rows(self, session: Session, user_id: str) -> List[VisitActivity]:
        stmt = select(VisitActivity).where(VisitActivity.user_id == user_id)
        return list(session.scalars(stmt))

    def list_recently_visited(
        self,
        session: Session,
        user_id: str,
        limit: int,
    ) -> List[Tuple[Node, datetime]]:
        """(node, last visited time) pairs, most recent first."""
        stmt = (
            select(Node, VisitActivity.last_visited_time)
            .join(VisitActivity, VisitActivity.node_id == Node.id)
            .where(VisitActivity.user_id == user_id)
            .order_by(VisitActivity.last_visited_time.desc(), VisitActivity.id.desc())
            .limit(limit)
        )
        return [(node, visited) for node, visited in session.execute(stmt)]


_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _dialect_insert(session: Session):
    """The INSERT construct with ON CONFLICT support for the bound database."""
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise ValueError(f"Upserts are not supported on dialect '{dialect}'") from None
