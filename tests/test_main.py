"""Tests for main.py — page build and suggestion entry points."""

import os
from unittest.mock import patch

from freezegun import freeze_time

import config


@freeze_time("2026-02-19 12:00:00", tz_offset=0)
def test_build_page(tmp_path, monkeypatch, fixture_path):
    """Payload in, rendered page out."""
    monkeypatch.setattr(config, "OUTPUT_DIR", str(tmp_path))

    from main import build_page
    page = build_page(os.path.join(fixture_path, "job_search_results.json"))

    assert os.path.exists(page)
    with open(page, encoding="utf-8") as f:
        content = f.read()
    assert "3 jobs found" in content
    assert "about 3 hours ago" in content


@patch("main.generate_results_page", return_value="reports/results.html")
@patch("main.load_results", return_value=[])
def test_build_page_uses_configured_path(mock_load, mock_generate):
    from main import build_page

    assert build_page() == "reports/results.html"
    mock_load.assert_called_once_with(config.RESULTS_PATH)
    mock_generate.assert_called_once_with([], output_dir=config.OUTPUT_DIR, settings=config.TIMEAGO)


def test_suggest_from_prefetch(monkeypatch, fixture_path):
    monkeypatch.setattr(config, "PREFETCH_PATH", os.path.join(fixture_path, "countries.json"))

    from main import suggest
    assert suggest("united kingdom")[0] == "United Kingdom"


def test_suggest_falls_back_to_states(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PREFETCH_PATH", str(tmp_path / "missing.json"))

    from main import suggest
    assert suggest("north") == ["North Carolina", "North Dakota"]
