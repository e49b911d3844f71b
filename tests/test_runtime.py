"""Unit tests for dashfs.engine.runtime — subsystem wiring and lifecycle."""

import pytest

from dashfs.engine.config import load_config
from dashfs.engine.errors import InternalError
from dashfs.engine.runtime import DashboardRuntime


class TestLifecycle:
    def test_folders_requires_startup(self):
        runtime = DashboardRuntime(configure_logs=False)
        assert runtime.started is False
        with pytest.raises(InternalError):
            runtime.folders

    def test_context_manager(self, config_file, tmp_path):
        config = load_config(str(config_file))
        with DashboardRuntime(config, configure_logs=False) as runtime:
            assert runtime.started is True
            assert runtime.audit_log.directory == tmp_path / "audit"
            assert runtime.authorizer.is_super_admin("user.root") is True

            folder = runtime.folders.create_folder("Reports", "user.alice")
            assert folder.full_path == "/user/alice/reports"

            status = runtime.status()
            assert status["database"] is True
            assert status["environment"] == "staging"
            assert status["redis"] is False

        assert runtime.started is False
        with pytest.raises(InternalError):
            runtime.folders

    def test_visits_drained_on_shutdown(self, config_file):
        runtime = DashboardRuntime(load_config(str(config_file)), configure_logs=False)
        runtime.startup()
        summary = runtime.folders.create_file("Summary", {"total": 1}, "user.alice")
        runtime.folders.get_file_by_id(summary.id, "alice")
        runtime.activity.wait()
        recent = runtime.folders.get_recently_visited("alice")
        runtime.shutdown()

        assert [r.id for r in recent] == [summary.id]

    def test_startup_twice_is_harmless(self, config_file):
        runtime = DashboardRuntime(load_config(str(config_file)), configure_logs=False)
        runtime.startup()
        database = runtime.database
        runtime.startup()
        assert runtime.database is database
        runtime.shutdown()
        runtime.shutdown()
