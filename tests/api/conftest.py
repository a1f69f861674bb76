# tests/api/conftest.py
"""
Shared fixtures for API tests.
Uses FastAPI's TestClient with dependency overrides to inject the scheduler and config.
"""

import pytest
from fastapi.testclient import TestClient

from nodeagent.api.app import create_app
from nodeagent.api.dependencies import get_scheduler, get_watcher_config
from nodeagent.core.scheduler import Scheduler
from nodeagent.models.status import JobStatus


@pytest.fixture
def scheduler():
    """A scheduler with a registered job status and no running tasks."""
    sched = Scheduler()
    sched.statuses["reconcile"] = JobStatus(name="reconcile", interval_seconds=10, runs=3, failures=1)
    return sched


@pytest.fixture
def client(scheduler, watcher_config):
    app = create_app()
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    app.dependency_overrides[get_watcher_config] = lambda: watcher_config
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
