"""Unit tests for dashfs.engine.logging — formatters and the JSONL audit log."""

import json
import logging
from datetime import date, timedelta

from dashfs.engine.logging import (
    AUDIT_CATEGORIES,
    AuditLog,
    JsonFormatter,
    configure_logging,
    log_access_denied,
    log_content_change,
    log_tree_event,
)


class TestConfigureLogging:
    def test_single_handler_after_repeated_calls(self):
        configure_logging("DEBUG", "json")
        root = configure_logging("INFO", "text")
        handlers = [h for h in root.handlers if getattr(h, "_dashfs_handler", False)]
        assert len(handlers) == 1
        assert root.level == logging.INFO

    def test_json_formatter(self):
        record = logging.LogRecord("dashfs.fs.service", logging.WARNING, __file__, 1, "moved %s", ("x",), None)
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "dashfs.fs.service"
        assert data["message"] == "moved x"


class TestAuditLog:
    def test_creates_category_directories(self, tmp_path):
        audit = AuditLog(str(tmp_path / "audit"))
        for category in AUDIT_CATEGORIES:
            assert (audit.directory / category).is_dir()

    def test_write_and_read(self, tmp_path):
        audit = AuditLog(str(tmp_path / "audit"))
        audit.write(log_tree_event("node_created", "user.u1", 3, "/user/u1/reports"))
        audit.write(log_tree_event(
            "node_moved", "user.u1", 3, "/user/u1/archive/reports",
            old_path="/user/u1/reports", descendants=2,
        ))

        entries = audit.read("tree")
        assert [e["event"] for e in entries] == ["node_created", "node_moved"]
        assert "old_path" not in entries[0]
        assert entries[1]["descendants"] == 2
        assert (audit.directory / "tree" / f"{date.today().isoformat()}.jsonl").exists()

    def test_other_day_is_empty(self, tmp_path):
        audit = AuditLog(str(tmp_path / "audit"))
        audit.write(log_access_denied("user.u2", "/user/u1", "user"))
        assert audit.read("security", date.today() - timedelta(days=1)) == []

    def test_malformed_lines_skipped(self, tmp_path):
        audit = AuditLog(str(tmp_path / "audit"))
        audit.write(log_content_change("user.u1", 4, "ab" * 32, created=False))
        path = audit.directory / "content" / f"{date.today().isoformat()}.jsonl"
        with open(path, "a", encoding="utf-8") as f:
            f.write("{not json\n")

        entries = audit.read("content")
        assert len(entries) == 1
        assert entries[0]["created"] is False
        assert entries[0]["content_hash"] == "ab" * 32
