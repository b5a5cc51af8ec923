"""Configuration derived from board.json. Module-level constants plus reload()."""

from board_profile import get_profile
from timeago import Settings, Strings

# camelCase keys accepted in board.json -> Settings / Strings field names
_SETTINGS_KEYS = {
    "refreshMillis": "refresh_millis",
    "allowPast": "allow_past",
    "allowFuture": "allow_future",
    "localeTitle": "locale_title",
    "cutoff": "cutoff",
    "autoDispose": "auto_dispose",
}

_STRINGS_KEYS = {
    "prefixAgo": "prefix_ago",
    "prefixFromNow": "prefix_from_now",
    "suffixAgo": "suffix_ago",
    "suffixFromNow": "suffix_from_now",
    "inPast": "in_past",
    "wordSeparator": "word_separator",
}


def _rename(section: dict, keys: dict) -> dict:
    return {keys.get(k, k): v for k, v in section.items()}


def settings_from_profile(profile: dict) -> Settings:
    """Build timeago Settings from the profile's "timeago" section."""
    section = _rename(profile.get("timeago", {}), _SETTINGS_KEYS)
    strings = Strings(**_rename(section.pop("strings", {}), _STRINGS_KEYS))
    return Settings(strings=strings, **section)


def _load():
    """Load all config values from the current profile."""
    global RESULTS_PATH, PREFETCH_PATH, OUTPUT_DIR
    global FEATURED_STOP_INDEX, ROWS_STOP_INDEX, TIMEAGO

    _p = get_profile()
    RESULTS_PATH = _p.get("results_path", "data/jobSearchResults.json")
    PREFETCH_PATH = _p.get("prefetch_path", "data/countries.json")
    OUTPUT_DIR = _p.get("output_dir", "reports/")
    FEATURED_STOP_INDEX = _p.get("featured_stop_index", 80)
    ROWS_STOP_INDEX = _p.get("rows_stop_index", 1000)
    TIMEAGO = settings_from_profile(_p)


THUMBNAIL_PATH = "../assets/images/thumb{member_id}.jpg"
COUNTRY = "United States"

# Initial load
_load()


def reload():
    """Re-read board.json and refresh all module-level constants."""
    _load()
