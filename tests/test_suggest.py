"""Tests for suggest.py — typeahead matching and the suggestion index."""

import os

import pytest

from suggest import (
    PROFESSIONS,
    US_STATES,
    SuggestionEngine,
    is_email,
    profession_options,
    substring_matcher,
    whitespace_tokenize,
)


# --- substring_matcher ---


def test_substring_matcher_case_insensitive():
    find = substring_matcher(US_STATES)
    assert find("new") == ["New Hampshire", "New Jersey", "New Mexico", "New York"]


def test_substring_matcher_literal_query():
    """Regex metacharacters in the query match literally."""
    find = substring_matcher(["C++ (dev)", "C#", "Cobol"])
    assert find("c++") == ["C++ (dev)"]
    assert find("(") == ["C++ (dev)"]


def test_substring_matcher_no_match():
    assert substring_matcher(US_STATES)("zzz") == []


# --- SuggestionEngine ---


def test_whitespace_tokenize():
    assert whitespace_tokenize("  New   York ") == ["New", "York"]


def test_engine_prefix_tokens():
    engine = SuggestionEngine(local=US_STATES)
    assert engine.search("new y") == ["New York"]
    assert engine.search("dakota") == ["North Dakota", "South Dakota"]
    assert engine.search("DAK no") == ["North Dakota"]


def test_engine_limit():
    engine = SuggestionEngine(local=US_STATES)
    results = engine.search("n")
    assert len(results) == 5
    assert results[0] == "Nebraska"
    assert len(engine.search("n", limit=20)) > 5


def test_engine_empty_query():
    assert SuggestionEngine(local=US_STATES).search("   ") == []


def test_engine_prefetch(fixture_path):
    """Prefetch file is loaded on first search; duplicates collapse."""
    engine = SuggestionEngine(prefetch=os.path.join(fixture_path, "countries.json"))
    assert engine.search("united") == ["United States", "United Kingdom", "United Arab Emirates"]
    assert len(engine) == 6


def test_engine_prefetch_missing_file(tmp_path):
    engine = SuggestionEngine(prefetch=str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        engine.search("united")


def test_engine_prefetch_not_a_list(tmp_path):
    path = tmp_path / "countries.json"
    path.write_text('{"US": "United States"}')
    with pytest.raises(ValueError):
        SuggestionEngine(prefetch=str(path)).search("united")


def test_engine_fuzzy_sorter():
    engine = SuggestionEngine(
        local=["United Arab Emirates", "United Kingdom", "United States"], sorter="fuzzy"
    )
    assert engine.search("united states")[0] == "United States"


def test_engine_callable_sorter():
    engine = SuggestionEngine(local=US_STATES, sorter=lambda q, m: sorted(m, reverse=True))
    assert engine.search("new") == ["New York", "New Mexico", "New Jersey", "New Hampshire"]


def test_engine_unknown_sorter():
    with pytest.raises(ValueError):
        SuggestionEngine(local=US_STATES, sorter="alphabetical").search("new")


# --- data tables ---


def test_professions_unique_and_clean():
    assert len(PROFESSIONS) == len(set(PROFESSIONS))
    assert "Aerospace Medicine" in PROFESSIONS
    assert "Clinical Genetics" in PROFESSIONS


def test_profession_options_shape():
    options = profession_options()
    assert options[0] == {"profession": PROFESSIONS[0]}
    assert len(options) == len(PROFESSIONS)


@pytest.mark.parametrize("text,expected", [
    ("jane.doe@example.com", True),
    ("  dr+jobs@clinic.org ", True),
    ("not-an-email", False),
    ("a@b", False),
])
def test_is_email(text, expected):
    assert is_email(text) is expected
