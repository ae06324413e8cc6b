"""Shared pytest fixtures for MouseCheck tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from mousecheck.database.db import configure_engine, init_db
from mousecheck.monitor.engine import CycleController

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def controller(qapp):
    """Fresh CycleController with DB enabled and default 3s / 2s phases on a fake clock."""
    c = CycleController(parent=None, db_enabled=True, clock=FakeClock())
    yield c
    c.stop_cycle()


@pytest.fixture
def controller_no_db(qapp):
    """Fresh CycleController with DB disabled (pure state-machine tests)."""
    c = CycleController(parent=None, db_enabled=False, clock=FakeClock())
    yield c
    c.stop_cycle()
