"""Shared fixtures."""

import pytest

from formwork import DiagnosticsLog


@pytest.fixture
def log() -> DiagnosticsLog:
    """A fresh diagnostics log per test."""
    return DiagnosticsLog()
