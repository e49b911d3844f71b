"""
dashfs — Hierarchical folder/file tree for dashboards and documents.

Users and namespaces each own a tree rooted at /user/<id> or
/namespace/<alias>. Files carry JSON content kept in a deduplicating,
content-addressed store with an append-only history.
"""

__version__ = "1.0.0"
__all__ = ["engine", "db", "fs", "profile", "security"]
