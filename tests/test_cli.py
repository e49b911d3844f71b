"""Unit tests for dashfs.cli — command parsing and execution against SQLite."""

import pytest

import dashfs.cli as cli_mod


class TestCLIParsing:
    def test_module_has_expected_commands(self):
        assert hasattr(cli_mod, "cmd_init")
        assert hasattr(cli_mod, "cmd_home")
        assert hasattr(cli_mod, "cmd_tree")
        assert hasattr(cli_mod, "cmd_check")

    def test_no_command_prints_help(self, capsys):
        assert cli_mod.main([]) == 0
        assert "usage: dashfs" in capsys.readouterr().out

    def test_unknown_command_exits(self):
        with pytest.raises(SystemExit):
            cli_mod.main(["frobnicate"])


class TestCommands:
    def test_init(self, config_file, tmp_path, capsys):
        assert cli_mod.main(["--config", str(config_file), "init"]) == 0
        assert "[OK] Tables created" in capsys.readouterr().out
        assert (tmp_path / "cli.db").exists()

    def test_home_tree_and_check(self, config_file, capsys):
        args = ["--config", str(config_file)]
        assert cli_mod.main(args + ["init"]) == 0
        assert cli_mod.main(args + ["home", "/user/alice", "--principal", "user.alice"]) == 0
        assert cli_mod.main(args + ["tree", "/user/alice"]) == 0
        assert cli_mod.main(args + ["check"]) == 0

        out = capsys.readouterr().out
        assert "[OK] Home ready: /user/alice" in out
        assert "Home/  [1] /user/alice" in out
        assert "  Trash/  [2] /user/alice/trash" in out
        assert "[OK] Tree is consistent" in out

    def test_tree_of_missing_path(self, config_file, capsys):
        args = ["--config", str(config_file)]
        cli_mod.main(args + ["init"])
        assert cli_mod.main(args + ["tree", "/user/nobody/x"]) == 1
        assert "[ERROR] Path not found" in capsys.readouterr().out

    def test_home_for_unknown_namespace(self, config_file, capsys):
        args = ["--config", str(config_file)]
        cli_mod.main(args + ["init"])
        assert cli_mod.main(args + ["home", "/namespace/ghost"]) == 1
        assert "[ERROR] Namespace not found" in capsys.readouterr().out


class TestRenderTree:
    def test_nested_subtree(self, config_file):
        from dashfs.engine.config import load_config
        from dashfs.engine.runtime import DashboardRuntime

        with DashboardRuntime(load_config(str(config_file)), configure_logs=False) as runtime:
            folders = runtime.folders
            reports = folders.create_folder("Reports", "user.alice")
            q1 = folders.create_folder("Q1", "user.alice", parent_id=reports.id)
            folders.create_file("Summary", {"total": 1}, "user.alice", parent_id=q1.id)

            lines = cli_mod.render_tree(folders, folders.get_by_path("/user/alice/reports"))

        assert [line.split("  [")[0] for line in lines] == [
            "Reports/",
            "  Q1/",
            "    Summary",
        ]
