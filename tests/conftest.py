"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so unit tests can import:
    from config.settings import ProbeSettings
    from scripts.health import StatusAccumulator
    from tests.fixtures.sentinel import FakeNode, master_reply
"""
import os
import pathlib
import sys

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scripts.health import client  # noqa: E402
from tests.fixtures.sentinel import FakeNetwork  # noqa: E402


@pytest.fixture
def sentinel_net(monkeypatch):
    """Replace redis.Redis with an in-memory network of FakeNodes."""
    net = FakeNetwork()
    monkeypatch.setattr(client.redis, "Redis", net)
    return net


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep SENTINEL_* from the developer's shell and any ./.env out of tests."""
    for key in list(os.environ):
        if key.startswith("SENTINEL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
