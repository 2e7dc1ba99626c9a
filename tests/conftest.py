"""
Funclang Test Configuration
===========================

Shared fixtures for the test suite. Every test starts from a clean
process-wide configuration, unaffected by FUNCLANG_* variables set in
the developer's shell.
"""

import pytest

from funclang.config import set_default_config
from funclang.frontend.ast import Arena


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Fixture: isolate tests from environment and cached configuration."""
    for name in ("FUNCLANG_LOG_LEVEL", "FUNCLANG_DIAGNOSTICS", "FUNCLANG_MAX_DEPTH"):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def arena():
    """Fixture: a fresh arena, released after the test."""
    with Arena() as a:
        yield a
