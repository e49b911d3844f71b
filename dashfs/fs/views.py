"""
dashfs View Models — Pydantic definitions returned by FolderService.

FolderView: a folder (or file, when listed inside a folder) with optional children.
FileView: a file with its decoded content.
FileHistoryView: one content assignment of a file.
NamespaceFolderView / UserFolderView: aggregates for the user's landing tree.

Display path: every persisted node is shown as /{id}/{slug}; the canonical
address is carried separately in full_path.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from dashfs.db.models import Node, NodeKind
from dashfs.fs.path import leaf_of


class FolderView(BaseModel):
    """Folder or file metadata. Folders fetched by path also carry their children."""

    id: Optional[int] = Field(default=None, description="Node id")
    name: str = Field(description="Display name")
    kind: NodeKind = Field(default=NodeKind.FOLDER)
    path: Optional[str] = Field(default=None, description="Display path /{id}/{slug}")
    full_path: Optional[str] = Field(default=None, description="Canonical address")
    created_by: Optional[str] = None
    created_time: Optional[datetime] = None
    updated_by: Optional[str] = None
    updated_time: Optional[datetime] = None
    favorite: bool = False
    favorited_time: Optional[datetime] = None
    last_visited_time: Optional[datetime] = None
    subfolders: Optional[List["FolderView"]] = None
    files: Optional[List["FolderView"]] = None

    @classmethod
    def from_node(cls, node: Node, **extra: Any) -> "FolderView":
        slug = node.slug or leaf_of(node.path)
        return cls(
            id=node.id,
            name=node.name,
            kind=node.kind,
            path=f"/{node.id}/{slug}" if node.id else None,
            full_path=node.path,
            created_by=node.created_by,
            created_time=node.created_time,
            updated_by=node.updated_by,
            updated_time=node.updated_time,
            **extra,
        )


class FileView(FolderView):
    """A file plus its decoded content."""

    kind: NodeKind = Field(default=NodeKind.FILE)
    content: Optional[Any] = Field(default=None, description="Decoded payload")
    content_hash: Optional[str] = None

    @classmethod
    def from_node(cls, node: Node, **extra: Any) -> "FileView":
        view = super().from_node(node, **extra)
        view.content_hash = node.content_hash
        return view


class FileHistoryView(BaseModel):
    id: int
    file_id: int
    content_hash: str
    actor: str
    created_time: datetime


class NamespaceFolderView(BaseModel):
    namespace: Dict[str, Any]
    folder: Optional[FolderView] = None


class UserFolderView(BaseModel):
    """Everything the landing page shows for one user."""

    user: Dict[str, Any]
    personal_folder: Optional[FolderView] = None
    member_namespaces: List[NamespaceFolderView] = Field(default_factory=list)
    follower_namespaces: List[NamespaceFolderView] = Field(default_factory=list)
    recent: Optional[List[FolderView]] = None
    favorites: Optional[List[FolderView]] = None


FolderView.model_rebuild()
