"""Pytest configuration for peerwatch tests."""

import os
import sys
from pathlib import Path

import pytest
import structlog

# Add src directory to sys.path for test imports
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate each test from PEERWATCH_* environment and any .env file.

    This fixture:
    - Removes PEERWATCH_* variables inherited from the environment
    - Runs the test from an empty directory so no .env file is read
    - Resets the global settings instance before each test
    """
    for key in list(os.environ):
        if key.startswith("PEERWATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    from peerwatch.config import reset_settings

    reset_settings()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Reset structlog after each test so CLI-configured loggers don't leak."""
    yield
    structlog.reset_defaults()
