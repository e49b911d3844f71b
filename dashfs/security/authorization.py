"""
dashfs Authorization — decides whether a principal may mutate under a root.

Resolution:
    /user/<id>/...        → allowed iff the principal is that user
    /namespace/<alias>/... → namespace must exist (NotFound otherwise);
                             allowed iff the principal is a member,
                             or is a configured super admin

Denials raise ForbiddenError and are written to the security audit log.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from dashfs.engine.errors import ForbiddenError, InternalError, NotFoundError
from dashfs.engine.logging import AuditLog, log_access_denied
from dashfs.fs.path import Path, RootType, user_id_from_principal
from dashfs.profile.directory import ProfileDirectory

logger = logging.getLogger("dashfs.security.authorization")


class Authorizer:
    """Root-scoped access decisions, consumed by FolderService before every mutation."""

    def __init__(
        self,
        directory: ProfileDirectory,
        super_admins: Optional[Iterable[str]] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        self._directory = directory
        self._super_admins = {user_id_from_principal(p) for p in (super_admins or [])}
        self._audit = audit_log

    def is_super_admin(self, principal: str) -> bool:
        return user_id_from_principal(principal) in self._super_admins

    def authorize(self, session: Session, namespace: Dict[str, Any], principal: str) -> bool:
        """Membership first, then the super-admin escape hatch."""
        user_id = user_id_from_principal(principal)
        if self._directory.is_member(session, namespace["id"], user_id):
            return True
        if self.is_super_admin(principal):
            logger.info(f"Used super admin privilege: {principal} on namespace {namespace['alias']}")
            return True
        return False

    def check_access(self, session: Session, path: Path, principal: str) -> None:
        """Raise ForbiddenError unless *principal* may mutate under *path*'s root."""
        if path.root_type == RootType.USER:
            has_access = path.root_name == user_id_from_principal(principal).lower()
        elif path.root_type == RootType.NAMESPACE:
            try:
                namespace = self._directory.get_namespace(path.root_name)
            except Exception as e:
                message = f"Error reading namespace with name: {path.root_name}"
                logger.error(f"{message}: {e}")
                raise InternalError(message, path=path.path) from e
            if namespace is None:
                raise NotFoundError(
                    f"Namespace not found with name: {path.root_name}",
                    path=path.path,
                )
            has_access = self.authorize(session, namespace, principal)
        else:
            raise InternalError(f"Invalid root type: {path.root_type}", path=path.path)

        if not has_access:
            logger.warning(f"Access denied to path: {path.path} for {principal}")
            if self._audit is not None:
                self._audit.write(log_access_denied(principal, path.path, path.root_type.value))
            raise ForbiddenError(
                f"Access denied to path: {path.path}",
                principal=principal,
                path=path.path,
            )
