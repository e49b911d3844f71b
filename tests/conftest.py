"""
dashfs Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v

Storage is a file-backed SQLite database under tmp_path so the request
path and the activity pool can use separate connections.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dashfs.db.models import Namespace, NamespaceFollower, NamespaceMember, User
from dashfs.db.session import Database
from dashfs.engine.config import DatabaseConfig
from dashfs.engine.logging import AuditLog
from dashfs.fs.activity import VisitActivityScheduler
from dashfs.fs.service import FolderService
from dashfs.profile.directory import ProfileDirectory
from dashfs.security.authorization import Authorizer

U1 = "user.u1"
U2 = "user.u2"
ROOT = "user.root"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by configure_logging so they never outlive a captured stream."""
    yield
    root = logging.getLogger("dashfs")
    for handler in list(root.handlers):
        if getattr(handler, "_dashfs_handler", False):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'dashfs.db'}"


@pytest.fixture
def database(db_url):
    db = Database(DatabaseConfig(url=db_url))
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def seeded(database):
    """
    Users u1, u2, root.
    Namespace "ops":   member u1, follower u2.
    Namespace "sales": member u2, follower u1.
    """
    with database.session_scope() as session:
        session.add_all([
            User(user_id="u1", name="User One"),
            User(user_id="u2", name="User Two"),
            User(user_id="root", name="Super Admin"),
        ])
        ops = Namespace(name="Operations", alias="ops", created_by="root")
        sales = Namespace(name="Sales", alias="sales", created_by="root")
        session.add_all([ops, sales])
        session.flush()
        session.add_all([
            NamespaceMember(namespace_id=ops.id, user_id="u1"),
            NamespaceFollower(namespace_id=ops.id, user_id="u2"),
            NamespaceMember(namespace_id=sales.id, user_id="u2"),
            NamespaceFollower(namespace_id=sales.id, user_id="u1"),
        ])
    return database


@pytest.fixture
def directory(seeded):
    return ProfileDirectory(seeded)


@pytest.fixture
def audit_log(tmp_path):
    return AuditLog(str(tmp_path / "logs"))


@pytest.fixture
def authorizer(directory, audit_log):
    return Authorizer(directory, super_admins=[ROOT], audit_log=audit_log)


@pytest.fixture
def activity(db_url, seeded):
    activity_db = Database(DatabaseConfig(url=db_url))
    scheduler = VisitActivityScheduler(activity_db, workers=2)
    yield scheduler
    scheduler.shutdown(wait=True)
    activity_db.dispose()


@pytest.fixture
def service(seeded, authorizer, directory, activity, audit_log):
    return FolderService(
        seeded,
        authorizer,
        directory,
        activity=activity,
        audit_log=audit_log,
        recent_limit=5,
    )


@pytest.fixture
def ops_home(service):
    """Provisioned Home of the "ops" namespace."""
    return service.create_home_folder("/namespace/ops", "system")


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "dashfs.yaml"
    path.write_text(
        "dashfs:\n"
        "  name: test-dashfs\n"
        "  environment: staging\n"
        "database:\n"
        f"  url: sqlite:///{tmp_path / 'cli.db'}\n"
        "  create_tables: true\n"
        "activity:\n"
        "  workers: 3\n"
        "  recent_limit: 7\n"
        "security:\n"
        "  super_admins:\n"
        "    - user.root\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  format: text\n"
        f"  directory: {tmp_path / 'audit'}\n",
        encoding="utf-8",
    )
    return path
