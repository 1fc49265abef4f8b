"""Integration tests for RotatingErrorFile (real filesystem, tmp_path)."""

import json

import pytest

from command_gateway.application.services import ErrorLogger
from command_gateway.infrastructure.logging import RotatingErrorFile


@pytest.mark.integration
class TestRotatingErrorFile:
    """JSON-lines writes and size-based rotation."""

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "logs" / "gateway" / "command-errors.log"

        sink = RotatingErrorFile(path, max_bytes=10_000, backup_count=2)
        sink.write({"id": "gw_err_1", "level": "HIGH"})
        sink.close()

        assert sink.path == path
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line) for line in lines] == [{"id": "gw_err_1", "level": "HIGH"}]

    def test_non_json_values_are_stringified(self, tmp_path):
        sink = RotatingErrorFile(tmp_path / "e.log", max_bytes=10_000, backup_count=1)

        sink.write({"path": tmp_path})
        sink.close()

        assert json.loads((tmp_path / "e.log").read_text(encoding="utf-8")) == {
            "path": str(tmp_path)
        }

    def test_rotation_keeps_backup_count(self, tmp_path):
        path = tmp_path / "command-errors.log"
        sink = RotatingErrorFile(path, max_bytes=200, backup_count=2)

        for index in range(30):
            sink.write({"id": f"gw_err_{index:03d}", "message": "x" * 40})
        sink.close()

        assert path.exists()
        assert (tmp_path / "command-errors.log.1").exists()
        assert (tmp_path / "command-errors.log.2").exists()
        assert not (tmp_path / "command-errors.log.3").exists()
        assert path.stat().st_size <= 200
        last = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
        assert last["id"] == "gw_err_029"

    def test_error_logger_writes_full_record(self, tmp_path, mock_logger, option_store):
        sink = RotatingErrorFile(tmp_path / "e.log", max_bytes=100_000, backup_count=1)
        error_logger = ErrorLogger(logger=mock_logger, option_store=option_store, error_sink=sink)

        error_id = error_logger.log_database_error("update_option", "Deadlock detected")
        sink.close()

        entry = json.loads((tmp_path / "e.log").read_text(encoding="utf-8"))
        assert entry["id"] == error_id
        assert entry["level"] == "HIGH"
        assert entry["category"] == "DATABASE"
        assert entry["data"]["message"] == "Deadlock detected"
        assert entry["data"]["context"]["operation"] == "update_option"
