"""The board profile: board.json, which says where the results payload lives,
where pages are written, how many rows to render and how ages are phrased.

Read once and cached for the process. config.py turns it into constants.
"""

import json
import logging
import os
import shutil
import threading

logger = logging.getLogger(__name__)

_dir = os.path.dirname(__file__)
PROFILE_PATH = os.path.join(_dir, "board.json")
_EXAMPLE_PATH = os.path.join(_dir, "board.example.json")

_profile = None
_lock = threading.Lock()


def get_profile(path: str = PROFILE_PATH) -> dict:
    """Return the board settings, reading board.json on first access.

    A fresh checkout has no board.json; it is seeded from board.example.json
    so the page builds with the stock row limits and English phrasing.
    """
    global _profile
    with _lock:
        if _profile is None:
            if not os.path.exists(path) and os.path.exists(_EXAMPLE_PATH):
                logger.info(f"No board profile at {path}, seeding it from {_EXAMPLE_PATH}")
                shutil.copy2(_EXAMPLE_PATH, path)
            with open(path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"{path}: board profile must be a JSON object, got {type(data).__name__}")
            _profile = data
        return _profile


def reload_profile():
    """Forget the cached board settings; config.reload() picks up the edits."""
    global _profile
    with _lock:
        _profile = None
