"""Shared test fixtures for the jobboard test suite."""

import json
import os

import pytest
from bs4 import BeautifulSoup

from models import JobRecord

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def _load_sample_profile():
    with open(os.path.join(FIXTURES_DIR, "sample_board.json")) as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def mock_profile(monkeypatch):
    """Autouse fixture that injects a known board profile for every test.

    Resets board_profile._profile so get_profile() returns the test data,
    and calls config.reload() to refresh all config globals.
    """
    import board_profile
    import config

    profile = _load_sample_profile()
    monkeypatch.setattr(board_profile, "_profile", profile)
    config.reload()
    yield profile


@pytest.fixture
def make_job():
    """Factory fixture for creating JobRecord instances with defaults."""

    def _make(**overrides):
        defaults = {
            "job_id": "1",
            "job_header": "Family Medicine Physician",
            "specialty_name": "Family Medicine",
            "facility_name": "Valley Clinic",
            "city": "Austin",
            "state_name": "Texas",
            "member_id": "42",
            "member_name": "Valley Health",
            "verified_date": "2026-02-18T12:00:00Z",
            "is_featured": "0",
            "is_highlighted": "0",
        }
        defaults.update(overrides)
        return JobRecord(**defaults)

    return _make


class FakeTimer:
    """Stand-in for RepeatingTimer that only fires when told to."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.callback()


@pytest.fixture
def timers():
    """Collects every FakeTimer created through the returned factory."""
    created = []

    def factory(interval, callback):
        timer = FakeTimer(interval, callback)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def page():
    """A small document with a <time> element and a titled <abbr>."""
    return BeautifulSoup(
        '<html><body><ul>'
        '<li><time class="timeago" datetime="2026-02-19T11:00:00Z">February 19, 2026</time></li>'
        '<li><abbr class="timeago" title="2026-02-16T12:00:00Z">Feb 16</abbr></li>'
        '</ul></body></html>',
        "html.parser",
    )


@pytest.fixture
def fixture_path():
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


def load_fixture(filename):
    """Load a fixture file by name."""
    path = os.path.join(FIXTURES_DIR, filename)
    with open(path) as f:
        if filename.endswith(".json"):
            return json.load(f)
        return f.read()
