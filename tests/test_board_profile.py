"""Tests for board_profile.py — profile caching."""

import json
import threading

import pytest

import board_profile


def test_loads_from_file(tmp_path, monkeypatch):
    """Reads and returns JSON from path."""
    profile_file = tmp_path / "board.json"
    profile_file.write_text(json.dumps({"output_dir": "site/"}))

    monkeypatch.setattr(board_profile, "_profile", None)
    result = board_profile.get_profile(str(profile_file))
    assert result["output_dir"] == "site/"


def test_caches_on_second_call(tmp_path, monkeypatch):
    """Second call returns same object without re-reading disk."""
    profile_file = tmp_path / "board.json"
    profile_file.write_text(json.dumps({"output_dir": "cached/"}))

    monkeypatch.setattr(board_profile, "_profile", None)
    result1 = board_profile.get_profile(str(profile_file))

    profile_file.write_text(json.dumps({"output_dir": "changed/"}))
    result2 = board_profile.get_profile(str(profile_file))

    assert result1 is result2
    assert result2["output_dir"] == "cached/"


def test_reload_clears_cache(tmp_path, monkeypatch):
    """reload_profile() → next get_profile() re-reads from disk."""
    profile_file = tmp_path / "board.json"
    profile_file.write_text(json.dumps({"output_dir": "original/"}))

    monkeypatch.setattr(board_profile, "_profile", None)
    board_profile.get_profile(str(profile_file))

    profile_file.write_text(json.dumps({"output_dir": "updated/"}))
    board_profile.reload_profile()
    result = board_profile.get_profile(str(profile_file))
    assert result["output_dir"] == "updated/"


def test_copies_example_if_missing(tmp_path, monkeypatch):
    """Missing board.json → copies from board.example.json."""
    example_file = tmp_path / "board.example.json"
    example_file.write_text(json.dumps({"output_dir": "from_example/"}))

    profile_file = tmp_path / "board.json"
    assert not profile_file.exists()

    monkeypatch.setattr(board_profile, "_profile", None)
    monkeypatch.setattr(board_profile, "_EXAMPLE_PATH", str(example_file))

    result = board_profile.get_profile(str(profile_file))
    assert result["output_dir"] == "from_example/"
    assert profile_file.exists()


def test_thread_safety(tmp_path, monkeypatch):
    """Concurrent get_profile() calls don't corrupt state."""
    profile_file = tmp_path / "board.json"
    profile_file.write_text(json.dumps({"output_dir": "thread_safe/"}))

    monkeypatch.setattr(board_profile, "_profile", None)

    results = []
    errors = []

    def reader():
        try:
            results.append(board_profile.get_profile(str(profile_file))["output_dir"])
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(errors) == 0
    assert results == ["thread_safe/"] * 10


def test_invalid_json_raises(tmp_path, monkeypatch):
    """Malformed JSON file raises json.JSONDecodeError."""
    bad_file = tmp_path / "bad.json"
    bad_file.write_text("not json at all {{{")

    monkeypatch.setattr(board_profile, "_profile", None)
    with pytest.raises(json.JSONDecodeError):
        board_profile.get_profile(str(bad_file))


def test_non_object_profile_raises(tmp_path, monkeypatch):
    """A board.json holding a list instead of settings is rejected."""
    bad_file = tmp_path / "board.json"
    bad_file.write_text(json.dumps(["reports/"]))

    monkeypatch.setattr(board_profile, "_profile", None)
    with pytest.raises(ValueError, match="must be a JSON object"):
        board_profile.get_profile(str(bad_file))
    assert board_profile._profile is None
