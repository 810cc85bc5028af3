"""Shared fixtures for the MCS builder tests"""

import pytest

from mcs_builder.config import BuilderConfig
from mcs_builder.engine import ExecutionEngine
from mcs_builder.store import CommandStore
from mocks import FeedbackRecorder, MockWorld


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep real credentials and settings out of the tests"""
    for name in ("CLAUDE_API_KEY", "CLAUDE_MODEL", "CLAUDE_BUILD_MODE", "CLAUDE_MAX_ROUNDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def config(tmp_path):
    return BuilderConfig(
        api_key="sk-ant-test-key",
        mcs_dir=str(tmp_path / "mcs_files"),
        config_dir=str(tmp_path / "config"),
        command_delay_ms=0,
    )


@pytest.fixture
def store(config):
    command_store = CommandStore(config.mcs_dir)
    command_store.initialize()
    return command_store


@pytest.fixture
def engine(store, config):
    return ExecutionEngine(store, config)


@pytest.fixture
def world():
    return MockWorld()


@pytest.fixture
def feedback():
    return FeedbackRecorder()
