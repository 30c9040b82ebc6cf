"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; keep tests in memory and quiet.
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LATENCY_ENABLED", "false")

from database.db import Store  # noqa: E402
from services.fault_injection import NoFaults  # noqa: E402
from services.request_simulator import RequestSimulator  # noqa: E402


@pytest.fixture
def store():
    """Fresh in-memory store per test."""
    store = Store(":memory:").open()
    yield store
    store.close()


@pytest.fixture
def simulator(store):
    """Simulator without latency or injected failures."""
    return RequestSimulator(store, faults=NoFaults())


@pytest.fixture
def make_job(simulator):
    """Create a job through the API and return its payload."""

    async def _make(title, slug=None, tags=None):
        body = {"title": title, "slug": slug or title.lower().replace(" ", "-")}
        if tags is not None:
            body["tags"] = tags
        response = await simulator.post("/jobs", body)
        assert response.status == 201, response.body
        return response.body

    return _make


@pytest.fixture
def make_candidate(simulator):
    """Create a candidate through the API and return its payload."""

    async def _make(name="Ada Lovelace", email=None, job_id=1, stage=None):
        body = {"name": name, "email": email or f"{name.split()[0].lower()}@example.com", "jobId": job_id}
        if stage is not None:
            body["stage"] = stage
        response = await simulator.post("/candidates", body)
        assert response.status == 201, response.body
        return response.body

    return _make
