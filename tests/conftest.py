"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


class CountingProvider:
    """Parameter-name provider that records how often it was asked."""

    def __init__(self, names: list[list[str]]) -> None:
        self.names = names
        self.calls = 0

    def __call__(self) -> list[list[str]]:
        self.calls += 1
        return self.names


@pytest.fixture(scope="session")
def qt_app():
    """Provide a shared QApplication instance for widget tests."""

    return QApplication.instance() or QApplication([])


@pytest.fixture
def counting_provider():
    return CountingProvider
