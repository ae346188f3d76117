"""Pytest fixtures for the EkoSim status server tests."""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for src/servers imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def config_path(project_root: Path) -> Path:
    return project_root / "config" / "config.yaml.example"


@pytest.fixture
def config(config_path: Path) -> dict:
    """Load default config dict from YAML."""
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class StepClock:
    """Deterministic clock: starts at `start`, advances `step` on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(milliseconds=1)):
        self._now = start
        self._step = step
        self.calls = 0

    def __call__(self) -> datetime:
        now = self._now
        self._now = self._now + self._step
        self.calls += 1
        return now


@pytest.fixture
def step_clock() -> StepClock:
    return StepClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def recorded():
    """List collecting IncomingRequest objects seen by a recording stage."""
    return []


@pytest.fixture
def client():
    """TestClient over the default app (default stages, real clock)."""
    from fastapi.testclient import TestClient

    from servers.app import create_app

    return TestClient(create_app())


@pytest.fixture
def restore_access_logger():
    """Undo setup_logging side effects on root and access loggers."""
    from src.core.logging_utils import get_access_logger

    access = get_access_logger()
    saved = (list(logging.root.handlers), logging.root.level, list(access.handlers), access.level, access.propagate)
    yield
    logging.root.handlers[:] = saved[0]
    logging.root.setLevel(saved[1])
    access.handlers[:] = saved[2]
    access.setLevel(saved[3])
    access.propagate = saved[4]
