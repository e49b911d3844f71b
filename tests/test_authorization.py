"""Unit tests for dashfs.security.authorization and dashfs.profile.directory."""

import logging
from unittest.mock import MagicMock

import pytest

from dashfs.engine.errors import ForbiddenError, InternalError, NotFoundError
from dashfs.fs.path import Path
from dashfs.security.authorization import Authorizer

U1 = "user.u1"
U2 = "user.u2"
ROOT = "user.root"


class TestUserRoots:
    def test_owner_allowed(self, authorizer, seeded):
        with seeded.session_scope() as session:
            authorizer.check_access(session, Path.parse("/user/u1/reports"), U1)
            authorizer.check_access(session, Path.parse("/user/u1"), "u1")

    def test_other_user_denied(self, authorizer, seeded, audit_log):
        with seeded.session_scope() as session:
            with pytest.raises(ForbiddenError) as exc:
                authorizer.check_access(session, Path.parse("/user/u1/reports"), U2)
        assert exc.value.status_code == 403
        assert exc.value.principal == U2

        entry = audit_log.read("security")[-1]
        assert entry["path"] == "/user/u1/reports"
        assert entry["root_type"] == "user"

    def test_super_admin_has_no_say_over_user_roots(self, authorizer, seeded):
        with seeded.session_scope() as session:
            with pytest.raises(ForbiddenError):
                authorizer.check_access(session, Path.parse("/user/u1"), ROOT)

    def test_mixed_case_principal(self, authorizer, seeded):
        with seeded.session_scope() as session:
            authorizer.check_access(session, Path.parse("/user/u1/x"), "user.U1")


class TestNamespaceRoots:
    def test_member_allowed(self, authorizer, seeded):
        with seeded.session_scope() as session:
            authorizer.check_access(session, Path.parse("/namespace/ops/dashboards"), U1)

    def test_follower_denied(self, authorizer, seeded, audit_log):
        with seeded.session_scope() as session:
            with pytest.raises(ForbiddenError):
                authorizer.check_access(session, Path.parse("/namespace/ops/dashboards"), U2)
        assert audit_log.read("security")[-1]["root_type"] == "namespace"

    def test_super_admin_allowed_and_logged(self, authorizer, seeded, caplog):
        with caplog.at_level(logging.INFO, logger="dashfs.security.authorization"):
            with seeded.session_scope() as session:
                authorizer.check_access(session, Path.parse("/namespace/sales"), ROOT)
        assert "Used super admin privilege" in caplog.text

    def test_unknown_namespace(self, authorizer, seeded):
        with seeded.session_scope() as session:
            with pytest.raises(NotFoundError):
                authorizer.check_access(session, Path.parse("/namespace/ghost/x"), ROOT)

    def test_authorize(self, authorizer, directory, seeded):
        ops = directory.get_namespace("ops")
        with seeded.session_scope() as session:
            assert authorizer.authorize(session, ops, U1) is True
            assert authorizer.authorize(session, ops, U2) is False
            assert authorizer.authorize(session, ops, "root") is True

    def test_directory_failure_is_internal(self, seeded):
        directory = MagicMock()
        directory.get_namespace.side_effect = RuntimeError("cache down")
        authorizer = Authorizer(directory)
        with seeded.session_scope() as session:
            with pytest.raises(InternalError):
                authorizer.check_access(session, Path.parse("/namespace/ops"), U1)


class TestProfileDirectory:
    def test_get_namespace_case_insensitive(self, directory):
        assert directory.get_namespace("OPS") == directory.get_namespace("ops")
        assert directory.get_namespace("ops")["name"] == "Operations"
        assert directory.get_namespace("ghost") is None

    def test_memberships(self, directory, seeded):
        with seeded.session_scope() as session:
            assert [n.alias for n in directory.member_namespaces(session, "u1")] == ["ops"]
            assert [n.alias for n in directory.following_namespaces(session, "u1")] == ["sales"]
            assert directory.get_user(session, "u2").name == "User Two"
            assert directory.get_user(session, "nobody") is None

    def test_is_super_admin(self, authorizer):
        assert authorizer.is_super_admin(ROOT) is True
        assert authorizer.is_super_admin("root") is True
        assert authorizer.is_super_admin(U1) is False
