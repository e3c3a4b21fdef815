"""Shared fixtures for the querysketch test suite."""

from __future__ import annotations

import os

import pytest

from querysketch.config import reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from QUERYSKETCH_* variables and the config cache."""
    for key in list(os.environ):
        if key.startswith("QUERYSKETCH_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
