"""
Tests for structlog configuration
"""

import json
import logging

from mcs_builder.logging_config import get_logger, mask_secret, setup_logging


def test_mask_secret():
    assert mask_secret("sk-ant-api03-secret") == "sk-an..."
    assert mask_secret(None) == "<unset>"
    assert mask_secret("") == "<unset>"


def test_setup_logging_writes_json_file(tmp_path):
    """Log events land in the file as JSON lines"""
    log_path = setup_logging(log_level="INFO", log_dir=str(tmp_path), console_output=False)
    try:
        assert log_path.parent == tmp_path
        assert log_path.name.startswith("claude-mod-")
        assert log_path.suffix == ".log"

        get_logger("tests.logging").info("Saved MCS file", path="/tmp/build_x.mcs")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines() if line]
        saved = [entry for entry in entries if entry["event"] == "Saved MCS file"]
        assert saved
        assert saved[0]["path"] == "/tmp/build_x.mcs"
        assert saved[0]["level"] == "info"
    finally:
        for handler in logging.getLogger().handlers[:]:
            handler.close()
            logging.getLogger().removeHandler(handler)


def test_explicit_log_file_name(tmp_path):
    log_path = setup_logging(log_file="builder.log", log_dir=str(tmp_path / "logs"), console_output=False)
    try:
        assert log_path == tmp_path / "logs" / "builder.log"
        assert log_path.exists()
    finally:
        for handler in logging.getLogger().handlers[:]:
            handler.close()
            logging.getLogger().removeHandler(handler)
