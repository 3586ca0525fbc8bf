"""
Pytest configuration for test discovery and imports.

Puts src/ on sys.path so tests can import modules directly, and keeps
real Forge credentials from the developer's shell out of the tests.
"""

import os
import sys

import pytest

ROOT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


@pytest.fixture(autouse=True)
def _isolate_forge_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("FORGE_"):
            monkeypatch.delenv(name)
