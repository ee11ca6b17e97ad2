"""
Global test configuration and shared fixtures.
"""

import json
import os

import pytest


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_influx_frames_env(monkeypatch):
    """Ensure a clean INFLUX_FRAMES_* environment for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("INFLUX_FRAMES_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioral guarantees of the public parser API",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def make_body():
    """Serialize a response document to bytes."""

    def _make(document: dict) -> bytes:
        return json.dumps(document).encode("utf-8")

    return _make
