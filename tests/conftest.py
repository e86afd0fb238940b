"""
Test configuration and fixtures
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from rollbook.core.config import reset_config
from rollbook.models.consultation import Consultation
from rollbook.models.person import Person
from rollbook.services.roster_service import reset_roster_service
from rollbook.store.roster import RosterStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point config, data and logs at a temporary directory for every test."""
    monkeypatch.setenv("ROLLBOOK_CONFIG", str(tmp_path / "missing-config.yaml"))
    monkeypatch.setenv("ROLLBOOK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ROLLBOOK_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("ROLLBOOK_LOG_LEVEL", raising=False)
    reset_config()
    reset_roster_service()
    yield tmp_path
    reset_roster_service()
    reset_config()


@pytest.fixture
def make_person():
    """Factory for valid students; keyword arguments override the defaults."""

    def _make(name="Alice Tan", nusnetid="E1234567", telegram="@alice_tan", group_id="T01", **extra):
        return Person(name=name, nusnetid=nusnetid, telegram=telegram, group_id=group_id, **extra)

    return _make


@pytest.fixture
def alice(make_person):
    return make_person(phone="91234567", email="alice@u.nus.edu")


@pytest.fixture
def bob(make_person):
    return make_person(name="Bob Lim", nusnetid="E7654321", telegram="@bob_lim", group_id="T01")


@pytest.fixture
def charlie(make_person):
    return make_person(name="Charlie Ng", nusnetid="E1111111", telegram="@charlie_ng", group_id="T02")


@pytest.fixture
def store():
    return RosterStore()


@pytest.fixture
def populated_store(alice, bob, charlie):
    """Alice and Bob in T01, Charlie in T02."""
    roster = RosterStore()
    roster.add_person(alice)
    roster.add_person(bob)
    roster.add_person(charlie)
    return roster


@pytest.fixture
def slot():
    """Factory for consultations on one day from HH:MM strings."""

    def _slot(nusnetid, start, end, day="2024-10-19"):
        return Consultation(
            nusnetid=nusnetid,
            start=datetime.strptime(f"{day} {start}", "%Y-%m-%d %H:%M"),
            end=datetime.strptime(f"{day} {end}", "%Y-%m-%d %H:%M"),
        )

    return _slot


@pytest.fixture
def client():
    """Create test client; the lifespan loads an empty roster from the temp data dir."""
    from rollbook.main import app

    with TestClient(app) as test_client:
        yield test_client
