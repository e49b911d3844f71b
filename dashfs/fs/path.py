"""
dashfs Path Addressing — canonical hierarchical addresses and their hashes.

A path is '/'-delimited, lower-cased and rooted at a user or a namespace:

    /user/alice/reports/q1
    /namespace/ops/dashboards

Children of a node are found by an indexed equality lookup on
``parent_path_hash == hash_path(parent.path)`` instead of walking the tree,
so hashing must be a pure function of the canonical string.
"""

from __future__ import annotations

import enum
import hashlib
import re
import unicodedata
from typing import List

from dashfs.engine.errors import PathError

USER_TYPE_PREFIX = "user."

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class RootType(str, enum.Enum):
    USER = "user"
    NAMESPACE = "namespace"


def normalize(path: str) -> str:
    """Trim, force a leading '/', drop a trailing '/', lower-case."""
    path = path.strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path.lower()


def slugify(name: str) -> str:
    """
    Path-safe rendering of a display name.

    Examples:
        slugify("Q1 Reports")     → "q1-reports"
        slugify("Copy of Ops!")   → "copy-of-ops"
        slugify("Café  Déjà-vu")  → "cafe-deja-vu"
    """
    if name is None:
        return ""
    ascii_name = (
        unicodedata.normalize("NFKD", name)
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    return _NON_ALNUM.sub("-", ascii_name).strip("-")


def hash_path(path: str) -> bytes:
    """md5 digest of the canonical UTF-8 bytes of *path*."""
    return hashlib.md5(path.encode("utf-8")).digest()


def leaf_of(path: str) -> str:
    return path[path.rfind("/") + 1:]


def child_path(parent_path: str, leaf_name: str) -> str:
    """Append the slugified *leaf_name* to *parent_path*."""
    slug = slugify(leaf_name)
    if not slug:
        raise PathError(
            f"Invalid name: '{leaf_name}'",
            reason="empty_slug",
            path=parent_path,
        )
    return f"{parent_path}/{slug}"


def user_id_from_principal(principal: str) -> str:
    """'user.alice' → 'alice'; untyped principals are returned as-is."""
    if principal.startswith(USER_TYPE_PREFIX):
        return principal[len(USER_TYPE_PREFIX):]
    return principal


class Path:
    """
    A validated canonical path.

    Usage:
        p = Path.parse("/user/alice/reports")
        p.root_type   → RootType.USER
        p.root_name   → "alice"
        p.leaf        → "reports"
        p.hash()      → md5 bytes
    """

    __slots__ = ("_path", "_segments", "_root_type")

    def __init__(self, path_string: str):
        path = normalize(path_string)
        segments = path.split("/")[1:]

        if len(segments) < 2:
            raise PathError(f"Invalid path {path}", reason="missing_root", path=path)
        if any(segment == "" for segment in segments):
            raise PathError(f"Invalid path {path}", reason="empty_segment", path=path)
        try:
            root_type = RootType(segments[0])
        except ValueError:
            raise PathError(f"Invalid path {path}", reason="unknown_root", path=path) from None

        self._path = path
        self._segments = segments
        self._root_type = root_type

    # -------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------

    @classmethod
    def parse(cls, path_string: str) -> "Path":
        return cls(path_string)

    get = parse

    @classmethod
    def for_user(cls, principal: str) -> "Path":
        """Root path for a user; a typed principal 'user.alice' maps to /user/alice."""
        user_id = user_id_from_principal(principal)
        if not user_id or "/" in user_id:
            raise PathError(f"Invalid user id: '{principal}'", reason="bad_user_id")
        return cls(f"/{RootType.USER.value}/{user_id}")

    @classmethod
    def for_namespace(cls, alias: str) -> "Path":
        if not alias or "/" in alias:
            raise PathError(f"Invalid namespace alias: '{alias}'", reason="bad_alias")
        return cls(f"/{RootType.NAMESPACE.value}/{alias}")

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def root_type(self) -> RootType:
        return self._root_type

    @property
    def root_name(self) -> str:
        return self._segments[1]

    @property
    def root_path(self) -> str:
        return "/" + "/".join(self._segments[:2])

    @property
    def segments(self) -> List[str]:
        return list(self._segments)

    @property
    def leaf(self) -> str:
        return self._segments[-1]

    @property
    def is_root(self) -> bool:
        return len(self._segments) == 2

    @property
    def parent_path(self) -> str:
        return self._path[: self._path.rfind("/")]

    def hash(self) -> bytes:
        return hash_path(self._path)

    def child_path(self, leaf_name: str) -> str:
        return child_path(self._path, leaf_name)

    # -------------------------------------------------------------------
    # Relations
    # -------------------------------------------------------------------

    def is_ancestor(self, other: "Path") -> bool:
        """True iff *other* is strictly nested under this path.

        Matches whole segments: /a/b is not an ancestor of /a/bc.
        """
        return other._path.startswith(self._path + "/")

    def with_leaf(self, new_name: str) -> "Path":
        """Same parent, final segment replaced by slugify(new_name)."""
        if self.is_root:
            raise PathError(
                f"Root path can't be renamed: {self._path}",
                reason="root_rename",
                path=self._path,
            )
        return Path(child_path(self.parent_path, new_name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"<Path '{self._path}'>"
