"""
dashfs Profile Directory — read access to users, namespaces and memberships.

The profile tables are owned by the profile service; the tree only reads
them to resolve roots, check membership and build the user's landing view.
Namespace lookups by alias go through NamespaceCache.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dashfs.db.models import Namespace, NamespaceFollower, NamespaceMember, User
from dashfs.db.session import Database
from dashfs.engine.cache import NamespaceCache, create_namespace_cache

logger = logging.getLogger("dashfs.profile.directory")


class ProfileDirectory:
    """
    Lookups over the profile tables.

    Session-taking methods join the caller's transaction; get_namespace()
    uses its own short read session so the cache can load on a miss.
    """

    def __init__(
        self,
        database: Database,
        redis_url: Optional[str] = None,
        namespace_ttl: int = 600,
        redis_db: int = 3,
    ):
        self._db = database
        self._namespace_cache = create_namespace_cache(
            self._load_namespace,
            redis_url=redis_url,
            ttl=namespace_ttl,
            db=redis_db,
        )

    @property
    def namespace_cache(self) -> NamespaceCache:
        return self._namespace_cache

    def _load_namespace(self, alias: str) -> Optional[Dict[str, Any]]:
        with self._db.session_scope() as session:
            namespace = session.scalars(
                select(Namespace).where(func.lower(Namespace.alias) == alias.lower())
            ).first()
            return namespace.to_dict() if namespace else None

    def get_namespace(self, alias: str) -> Optional[Dict[str, Any]]:
        return self._namespace_cache.get_by_alias(alias)

    def get_user(self, session: Session, user_id: str) -> Optional[User]:
        return session.get(User, user_id)

    def is_member(self, session: Session, namespace_id: int, user_id: str) -> bool:
        stmt = select(NamespaceMember.id).where(
            NamespaceMember.namespace_id == namespace_id,
            NamespaceMember.user_id == user_id,
        )
        return session.scalars(stmt).first() is not None

    def member_namespaces(self, session: Session, user_id: str) -> List[Namespace]:
        stmt = (
            select(Namespace)
            .join(NamespaceMember, NamespaceMember.namespace_id == Namespace.id)
            .where(NamespaceMember.user_id == user_id)
            .order_by(Namespace.alias)
        )
        return list(session.scalars(stmt))

    def following_namespaces(self, session: Session, user_id: str) -> List[Namespace]:
        stmt = (
            select(Namespace)
            .join(NamespaceFollower, NamespaceFollower.namespace_id == Namespace.id)
            .where(NamespaceFollower.user_id == user_id)
            .order_by(Namespace.alias)
        )
        return list(session.scalars(stmt))
