"""
dashfs Folder Service — operations over the folder/file tree.

Handles:
- Home provisioning (a root "Home" folder plus its "Trash" child)
- Folder and file creation, rename and content updates
- Moves, re-addressing the whole moved subtree
- Lookups by id, by canonical path and by display path
- Favorites, recently visited nodes and file content history

Every public operation runs in exactly one transaction. Any failure rolls
the transaction back; IntegrityError surfaces as ConflictError and other
storage errors as InternalError.

Addressing:
    node.path_hash        = md5(node.path)
    node.parent_path_hash = md5(parent.path)   (NULL for a Home root)

Children are looked up by parent_path_hash, so a rename or move must
rewrite path, path_hash and parent_path_hash of every descendant.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dashfs.db.base import utcnow
from dashfs.db.models import Node, NodeKind
from dashfs.db.session import Database
from dashfs.engine.errors import (
    BadRequestError,
    ConflictError,
    DashFSError,
    InternalError,
    NotFoundError,
)
from dashfs.engine.logging import AuditEntry, AuditLog, log_content_change, log_tree_event
from dashfs.fs.activity import VisitActivityScheduler
from dashfs.fs.content import ContentStore, encode
from dashfs.fs.path import Path, RootType, child_path, hash_path, slugify, user_id_from_principal
from dashfs.fs.store import NodeStore
from dashfs.fs.views import (
    FileHistoryView,
    FileView,
    FolderView,
    NamespaceFolderView,
    UserFolderView,
)
from dashfs.profile.directory import ProfileDirectory
from dashfs.security.authorization import Authorizer

logger = logging.getLogger("dashfs.fs.service")

HOME_FOLDER_NAME = "Home"
TRASH_FOLDER_NAME = "Trash"
COPY_PREFIX = "Copy of "

# Display form produced by the views: /{id}/{slug}
_DISPLAY_PATH = re.compile(r"^/?(\d+)/([^/]+)/?$")


class FolderService:
    """
    Tree operations for dashboards and documents.

    Collaborators are injected (see DashboardRuntime):
        database   — owns sessions and transactions
        authorizer — root-scoped access checks before every mutation
        directory  — users, namespaces, memberships
        activity   — background visit recording (optional)
        audit_log  — structured mutation log (optional)
    """

    def __init__(
        self,
        database: Database,
        authorizer: Authorizer,
        directory: ProfileDirectory,
        activity: Optional[VisitActivityScheduler] = None,
        audit_log: Optional[AuditLog] = None,
        recent_limit: int = 20,
        node_store: Optional[NodeStore] = None,
        content_store: Optional[ContentStore] = None,
    ):
        self._db = database
        self._authorizer = authorizer
        self._directory = directory
        self._activity = activity
        self._audit = audit_log
        self._recent_limit = recent_limit
        self._nodes = node_store or NodeStore()
        self._contents = content_store or ContentStore()

    # -------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------

    @contextmanager
    def _transaction(self, error_message: str) -> Generator[Session, None, None]:
        try:
            with self._db.session_scope() as session:
                yield session
        except DashFSError:
            raise
        except IntegrityError as e:
            logger.error(f"{error_message}: {e}")
            raise ConflictError(f"{error_message}: conflicting node already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"{error_message}: {e}")
            raise InternalError(error_message) from e

    def _emit(self, entries: List[AuditEntry]) -> None:
        if self._audit is None:
            return
        for entry in entries:
            self._audit.write(entry)

    def _schedule_visit(self, user_id: Optional[str], node_id: int) -> None:
        if self._activity is not None and user_id:
            self._activity.record_visit(user_id_from_principal(user_id), node_id)

    # -------------------------------------------------------------------
    # Home provisioning
    # -------------------------------------------------------------------

    def create_home_folder(self, root_path: Union[str, Path], principal: str) -> FolderView:
        """
        Provision the Home row of a user or namespace root with its Trash child.

        Idempotent: an existing Home is returned as-is.
        """
        root = root_path if isinstance(root_path, Path) else Path.parse(root_path)
        if not root.is_root:
            raise BadRequestError(f"Not a root path: {root.path}", path=root.path)
        if root.root_type == RootType.NAMESPACE and self._directory.get_namespace(root.root_name) is None:
            raise NotFoundError(f"Namespace not found with name: {root.root_name}", path=root.path)

        with self._transaction(f"Error creating home folder: {root.path}") as session:
            home = self._ensure_home(session, root, principal)
            return self._folder_view(session, home, user_id_from_principal(principal))

    def _ensure_home(self, session: Session, root: Path, principal: str) -> Node:
        home = self._nodes.get_by_path_hash(session, root.hash())
        if home is not None:
            return home

        now = utcnow()
        home = self._nodes.insert(session, Node(
            name=HOME_FOLDER_NAME,
            slug=root.leaf,
            path=root.path,
            path_hash=root.hash(),
            parent_path_hash=None,
            kind=NodeKind.FOLDER,
            created_by=principal,
            created_time=now,
            updated_by=principal,
            updated_time=now,
        ))
        trash_path = root.child_path(TRASH_FOLDER_NAME)
        self._nodes.insert(session, Node(
            name=TRASH_FOLDER_NAME,
            slug=slugify(TRASH_FOLDER_NAME),
            path=trash_path,
            path_hash=hash_path(trash_path),
            parent_path_hash=home.path_hash,
            kind=NodeKind.FOLDER,
            created_by=principal,
            created_time=now,
            updated_by=principal,
            updated_time=now,
        ))
        logger.info(f"Created home folder: {root.path}")
        return home

    # -------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------

    def create_folder(self, name: str, principal: str, parent_id: Optional[int] = None) -> FolderView:
        node, audit = self._create(name, principal, parent_id, NodeKind.FOLDER)
        self._emit(audit)
        return node

    def create_file(
        self,
        name: str,
        content: Any,
        principal: str,
        parent_id: Optional[int] = None,
    ) -> FileView:
        node, audit = self._create(name, principal, parent_id, NodeKind.FILE, content)
        self._emit(audit)
        return node

    def _create(
        self,
        name: str,
        principal: str,
        parent_id: Optional[int],
        kind: NodeKind,
        content: Any = None,
    ) -> Tuple[FolderView, List[AuditEntry]]:
        label = kind.value.lower()
        audit: List[AuditEntry] = []
        with self._transaction(f"Error creating {label}: {name}") as session:
            if parent_id is None:
                parent = self._ensure_home(session, Path.for_user(principal), principal)
            else:
                parent = self._nodes.get_by_id(session, parent_id)
                if parent is None or parent.is_file:
                    raise BadRequestError("Invalid parent id", parent_id=parent_id)

            parent_path = Path.parse(parent.path)
            self._authorizer.check_access(session, parent_path, principal)

            path = Path.parse(parent_path.child_path(name))
            if self._nodes.get_by_path_hash(session, path.hash()) is not None:
                raise ConflictError(
                    f"A {label} with the name '{name}' already exists in {parent_path.path}",
                    path=path.path,
                )

            now = utcnow()
            node = Node(
                name=name.strip(),
                slug=path.leaf,
                path=path.path,
                path_hash=path.hash(),
                parent_path_hash=parent.path_hash,
                kind=kind,
                created_by=principal,
                created_time=now,
                updated_by=principal,
                updated_time=now,
            )
            if kind == NodeKind.FILE:
                digest, created = self._put_content(session, content, principal, now)
                node.content_hash = digest
                self._nodes.insert(session, node)
                self._contents.record_history(session, node.id, digest, principal, now)
                audit.append(log_content_change(principal, node.id, digest, created))
                view = FileView.from_node(node, content=content)
            else:
                self._nodes.insert(session, node)
                view = FolderView.from_node(node)

            logger.info(f"Created {label} {node.id}: {node.path}")
            audit.insert(0, log_tree_event("node_created", principal, node.id, node.path))
            return view, audit

    def _put_content(
        self,
        session: Session,
        content: Any,
        principal: str,
        now: datetime,
    ) -> Tuple[str, bool]:
        try:
            stored, created = self._contents.put(session, content, principal, now)
        except (TypeError, ValueError) as e:
            raise BadRequestError(f"Content is not JSON serializable: {e}") from e
        return stored.hash, created

    # -------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------

    def get_folder_by_id(self, folder_id: int, user_id: Optional[str] = None) -> FolderView:
        with self._transaction(f"Error reading folder: {folder_id}") as session:
            node = self._nodes.get_by_id(session, folder_id, NodeKind.FOLDER)
            if node is None:
                raise NotFoundError(f"Folder not found with id: {folder_id}", node_id=folder_id)
            return self._folder_view(session, node, user_id)

    def get_file_by_id(self, file_id: int, user_id: Optional[str] = None) -> FileView:
        """Read a file with its content. Schedules a visit for *user_id*."""
        with self._transaction(f"Error reading file: {file_id}") as session:
            node = self._nodes.get_by_id(session, file_id, NodeKind.FILE)
            if node is None:
                raise NotFoundError(f"File not found with id: {file_id}", node_id=file_id)
            view = self._file_view(session, node, user_id)
        self._schedule_visit(user_id, file_id)
        return view

    def get_by_path(self, path: str, user_id: Optional[str] = None) -> FolderView:
        """
        Resolve a canonical path (/user/alice/reports) or a display path
        (/42/reports). Folders come back with their subfolders and files;
        file reads schedule a visit.
        """
        with self._transaction(f"Error reading path: {path}") as session:
            node = self._resolve(session, path)
            if node.is_file:
                view = self._file_view(session, node, user_id)
            else:
                view = self._folder_view(session, node, user_id)
        if view.kind == NodeKind.FILE:
            self._schedule_visit(user_id, view.id)
        return view

    def _resolve(self, session: Session, path: str) -> Node:
        match = _DISPLAY_PATH.match(path.strip())
        if match:
            node = self._nodes.get_by_id(session, int(match.group(1)))
            if node is None or node.slug != match.group(2).lower():
                raise NotFoundError(f"Path not found: {path}", path=path)
            return node

        canonical = Path.parse(path)
        node = self._nodes.get_by_path_hash(session, canonical.hash())
        if node is None:
            raise NotFoundError(f"Path not found: {canonical.path}", path=canonical.path)
        return node

    def list_children(self, parent_path_hash: bytes) -> List[FolderView]:
        with self._transaction("Error listing children") as session:
            return [
                self._node_view(child)
                for child in self._nodes.list_children(session, parent_path_hash)
            ]

    def get_namespace_folder(self, alias: str, user_id: Optional[str] = None) -> NamespaceFolderView:
        namespace = self._directory.get_namespace(alias)
        if namespace is None:
            raise NotFoundError(f"Namespace not found with name: {alias}")
        with self._transaction(f"Error reading namespace folder: {alias}") as session:
            return NamespaceFolderView(
                namespace=namespace,
                folder=self._root_view(session, Path.for_namespace(namespace["alias"]), user_id),
            )

    def get_user_folder(self, user_id: str) -> UserFolderView:
        """Personal root plus the roots of every member and followed namespace."""
        user_id = user_id_from_principal(user_id)
        with self._transaction(f"Error reading folders of user: {user_id}") as session:
            user = self._directory.get_user(session, user_id)
            if user is None:
                raise NotFoundError(f"User not found: {user_id}", principal=user_id)

            def namespace_views(namespaces) -> List[NamespaceFolderView]:
                return [
                    NamespaceFolderView(
                        namespace=ns.to_dict(),
                        folder=self._root_view(session, Path.for_namespace(ns.alias), user_id),
                    )
                    for ns in namespaces
                ]

            return UserFolderView(
                user={"user_id": user.user_id, "name": user.name},
                personal_folder=self._root_view(session, Path.for_user(user_id), user_id),
                member_namespaces=namespace_views(self._directory.member_namespaces(session, user_id)),
                follower_namespaces=namespace_views(self._directory.following_namespaces(session, user_id)),
                recent=self._recent(session, user_id, self._recent_limit),
                favorites=self._favorites(session, user_id),
            )

    def get_file_history(self, file_id: int) -> List[FileHistoryView]:
        with self._transaction(f"Error reading history of file: {file_id}") as session:
            if self._nodes.get_by_id(session, file_id, NodeKind.FILE) is None:
                raise NotFoundError(f"File not found with id: {file_id}", node_id=file_id)
            return [
                FileHistoryView(
                    id=entry.id,
                    file_id=entry.owner_id,
                    content_hash=entry.content_hash,
                    actor=entry.actor,
                    created_time=entry.created_time,
                )
                for entry in self._contents.list_history(session, file_id)
            ]

    # -------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------

    def update_folder(self, folder_id: int, name: str, principal: str) -> FolderView:
        """Rename a folder in place; every descendant is re-addressed."""
        audit: List[AuditEntry] = []
        with self._transaction(f"Error updating folder: {folder_id}") as session:
            node = self._nodes.get_by_id(session, folder_id, NodeKind.FOLDER)
            if node is None:
                raise NotFoundError(f"Folder not found with id: {folder_id}", node_id=folder_id)
            self._authorizer.check_access(session, Path.parse(node.path), principal)

            old_path = node.path
            descendants = self._rename(session, node, name, principal)
            if node.path != old_path:
                audit.append(log_tree_event(
                    "node_renamed", principal, node.id, node.path,
                    old_path=old_path, descendants=descendants,
                ))
            view = self._folder_view(session, node, user_id_from_principal(principal))
        self._emit(audit)
        return view

    def update_file(
        self,
        file_id: int,
        principal: str,
        name: Optional[str] = None,
        content: Any = None,
    ) -> FileView:
        """
        Rename a file and/or assign new content.

        Content is stored and a history row appended only when its hash
        differs from the current one.
        """
        audit: List[AuditEntry] = []
        with self._transaction(f"Error updating file: {file_id}") as session:
            node = self._nodes.get_by_id(session, file_id, NodeKind.FILE)
            if node is None:
                raise NotFoundError(f"File not found with id: {file_id}", node_id=file_id)
            self._authorizer.check_access(session, Path.parse(node.path), principal)

            if name is not None:
                old_path = node.path
                self._rename(session, node, name, principal)
                if node.path != old_path:
                    audit.append(log_tree_event(
                        "node_renamed", principal, node.id, node.path, old_path=old_path,
                    ))

            if content is not None:
                try:
                    digest, _ = encode(content)
                except (TypeError, ValueError) as e:
                    raise BadRequestError(f"Content is not JSON serializable: {e}") from e
                if digest != node.content_hash:
                    now = utcnow()
                    digest, created = self._put_content(session, content, principal, now)
                    node.content_hash = digest
                    node.updated_by = principal
                    node.updated_time = now
                    self._nodes.save(session, node)
                    self._contents.record_history(session, node.id, digest, principal, now)
                    audit.append(log_content_change(principal, node.id, digest, created))
                    logger.info(f"Updated content of file {node.id}: {digest[:12]}")

            view = self._file_view(session, node, user_id_from_principal(principal))
        self._emit(audit)
        return view

    def _rename(self, session: Session, node: Node, name: str, principal: str) -> int:
        """
        Give *node* a new display name within its current parent.

        Returns the number of descendants re-addressed.
        """
        path = Path.parse(node.path)
        new_path = path.with_leaf(name)
        now = utcnow()

        if new_path == path:
            node.name = name.strip()
            node.updated_by = principal
            node.updated_time = now
            self._nodes.save(session, node)
            return 0

        existing = self._nodes.get_by_path_hash(session, new_path.hash())
        if existing is not None and existing.id != node.id:
            raise ConflictError(
                f"A node with the name '{name}' already exists in {path.parent_path}",
                path=new_path.path,
            )

        old_hash = node.path_hash
        node.name = name.strip()
        node.slug = new_path.leaf
        node.path = new_path.path
        node.path_hash = new_path.hash()
        node.updated_by = principal
        node.updated_time = now
        self._nodes.save(session, node)

        descendants = self._readdress_descendants(session, node, old_hash, principal)
        logger.info(f"Renamed node {node.id}: {path.path} → {new_path.path} ({descendants} descendants)")
        return descendants

    # -------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------

    def move(self, source_id: int, destination_id: int, principal: str) -> FolderView:
        """
        Move a folder or file under another folder.

        - The destination must be a folder outside the source's subtree.
        - Moving a node onto itself changes nothing.
        - If the destination already has a node at the source's slug, the
          moved node is renamed once to "Copy of <name>"; a second
          collision is a ConflictError. The source counts as that node when
          the destination is its current parent.
        """
        audit: List[AuditEntry] = []
        with self._transaction(f"Error moving node {source_id} to {destination_id}") as session:
            source = self._nodes.get_by_id(session, source_id)
            if source is None:
                raise NotFoundError(f"Source not found with id: {source_id}", node_id=source_id)
            destination = self._nodes.get_by_id(session, destination_id)
            if destination is None:
                raise NotFoundError(f"Destination not found with id: {destination_id}", node_id=destination_id)
            if destination.is_file:
                raise BadRequestError("Destination must be a folder", node_id=destination_id)
            if source.is_root:
                raise BadRequestError("Home folder can't be moved", node_id=source_id)

            source_path = Path.parse(source.path)
            destination_path = Path.parse(destination.path)
            self._authorizer.check_access(session, source_path, principal)
            self._authorizer.check_access(session, destination_path, principal)

            if source_path == destination_path:
                return self._node_view(source)
            if source_path.is_ancestor(destination_path):
                raise BadRequestError(
                    f"Can't move {source_path.path} into itself or one of its descendants",
                    path=destination_path.path,
                )

            name = source.name
            new_path = child_path(destination_path.path, name)
            if self._nodes.get_by_path_hash(session, hash_path(new_path)) is not None:
                name = COPY_PREFIX + source.name
                new_path = child_path(destination_path.path, name)
                if self._nodes.get_by_path_hash(session, hash_path(new_path)) is not None:
                    raise ConflictError(
                        f"A node named '{name}' already exists in {destination_path.path}",
                        path=new_path,
                    )

            old_path = source.path
            old_hash = source.path_hash
            source.name = name
            source.slug = Path.parse(new_path).leaf
            source.path = new_path
            source.path_hash = hash_path(new_path)
            source.parent_path_hash = destination.path_hash
            source.updated_by = principal
            source.updated_time = utcnow()
            self._nodes.save(session, source)

            descendants = self._readdress_descendants(session, source, old_hash, principal)
            logger.info(f"Moved node {source.id}: {old_path} → {new_path} ({descendants} descendants)")
            audit.append(log_tree_event(
                "node_moved", principal, source.id, new_path,
                old_path=old_path, descendants=descendants,
            ))
            view = self._node_view(source)
        self._emit(audit)
        return view

    def _readdress_descendants(
        self,
        session: Session,
        root: Node,
        root_old_hash: bytes,
        principal: str,
    ) -> int:
        """
        Rewrite path, path_hash and parent_path_hash of every node under *root*.

        *root* already carries its new address. Children of each visited node
        are fetched by that node's pre-mutation hash, since that is what their
        parent_path_hash still holds.
        """
        count = 0
        worklist = deque([(root, root_old_hash)])
        while worklist:
            parent, parent_old_hash = worklist.popleft()
            for child in self._nodes.list_children(session, parent_old_hash):
                child_old_hash = child.path_hash
                child.path = f"{parent.path}/{child.slug}"
                child.path_hash = hash_path(child.path)
                child.parent_path_hash = parent.path_hash
                child.updated_by = principal
                child.updated_time = root.updated_time
                self._nodes.save(session, child)
                count += 1
                if not child.is_file:
                    worklist.append((child, child_old_hash))
        return count

    def verify_tree(self) -> List[str]:
        """
        Check the addressing of every node. Returns one message per problem.

        - path_hash is md5(path)
        - a Home row sits at a root path; every other node's
          parent_path_hash names an existing folder whose path is the
          node's path minus its slug
        - a file's content row exists
        """
        problems: List[str] = []
        with self._transaction("Error verifying tree") as session:
            nodes = self._nodes.list_all(session)
            by_hash = {node.path_hash: node for node in nodes}
            for node in nodes:
                if node.path_hash != hash_path(node.path):
                    problems.append(f"node {node.id}: path_hash does not match {node.path}")
                if node.is_root:
                    if not Path.parse(node.path).is_root:
                        problems.append(f"node {node.id}: no parent but {node.path} is not a root path")
                    continue
                parent = by_hash.get(node.parent_path_hash)
                if parent is None:
                    problems.append(f"node {node.id}: parent missing for {node.path}")
                elif parent.is_file:
                    problems.append(f"node {node.id}: parent {parent.id} is a file")
                elif node.path != f"{parent.path}/{node.slug}":
                    problems.append(f"node {node.id}: {node.path} is not under {parent.path}")
                if node.is_file and not self._contents.exists(session, node.content_hash or ""):
                    problems.append(f"node {node.id}: content {node.content_hash} missing")
        return problems

    # -------------------------------------------------------------------
    # Favorites & recently visited
    # -------------------------------------------------------------------

    def add_favorite(self, node_id: int, user_id: str) -> bool:
        """Favorite a node. Returns False when it was already a favorite."""
        user_id = user_id_from_principal(user_id)
        with self._transaction(f"Error adding favorite {node_id} for {user_id}") as session:
            self._require_user_and_node(session, user_id, node_id)
            created = self._nodes.add_favorite(session, user_id, node_id)
        if created:
            logger.info(f"Added favorite {node_id} for {user_id}")
        return created

    def remove_favorite(self, node_id: int, user_id: str) -> bool:
        """Unfavorite a node. Returns False when it was not a favorite."""
        user_id = user_id_from_principal(user_id)
        with self._transaction(f"Error removing favorite {node_id} for {user_id}") as session:
            self._require_user_and_node(session, user_id, node_id)
            removed = self._nodes.remove_favorite(session, user_id, node_id)
        return removed > 0

    def get_favorites(self, user_id: str) -> List[FolderView]:
        user_id = user_id_from_principal(user_id)
        with self._transaction(f"Error reading favorites of {user_id}") as session:
            return self._favorites(session, user_id)

    def get_recently_visited(self, user_id: str, limit: Optional[int] = None) -> List[FolderView]:
        user_id = user_id_from_principal(user_id)
        with self._transaction(f"Error reading recent activity of {user_id}") as session:
            return self._recent(session, user_id, limit or self._recent_limit)

    def _require_user_and_node(self, session: Session, user_id: str, node_id: int) -> None:
        if self._directory.get_user(session, user_id) is None:
            raise NotFoundError(f"User not found: {user_id}", principal=user_id)
        if self._nodes.get_by_id(session, node_id) is None:
            raise NotFoundError(f"Node not found with id: {node_id}", node_id=node_id)

    def _favorites(self, session: Session, user_id: str) -> List[FolderView]:
        return [
            self._node_view(node, favorite=True, favorited_time=favorited)
            for node, favorited in self._nodes.list_favorites(session, user_id)
        ]

    def _recent(self, session: Session, user_id: str, limit: int) -> List[FolderView]:
        return [
            self._node_view(
                node,
                favorite=self._nodes.is_favorite(session, user_id, node.id),
                last_visited_time=visited,
            )
            for node, visited in self._nodes.list_recently_visited(session, user_id, limit)
        ]

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------

    @staticmethod
    def _node_view(node: Node, **extra: Any) -> FolderView:
        if node.is_file:
            return FileView.from_node(node, **extra)
        return FolderView.from_node(node, **extra)

    def _is_favorite(self, session: Session, user_id: Optional[str], node_id: int) -> bool:
        if not user_id:
            return False
        return self._nodes.is_favorite(session, user_id_from_principal(user_id), node_id)

    def _folder_view(self, session: Session, node: Node, user_id: Optional[str]) -> FolderView:
        view = FolderView.from_node(node, favorite=self._is_favorite(session, user_id, node.id))
        children = self._nodes.list_children(session, node.path_hash)
        view.subfolders = [FolderView.from_node(c) for c in children if not c.is_file]
        view.files = [FileView.from_node(c) for c in children if c.is_file]
        return view

    def _file_view(self, session: Session, node: Node, user_id: Optional[str]) -> FileView:
        return FileView.from_node(
            node,
            favorite=self._is_favorite(session, user_id, node.id),
            content=self._contents.load(session, node.content_hash),
        )

    def _root_view(self, session: Session, root: Path, user_id: Optional[str]) -> Optional[FolderView]:
        home = self._nodes.get_by_path_hash(session, root.hash())
        if home is None:
            return None
        return self._folder_view(session, home, user_id)
