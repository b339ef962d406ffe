"""
Configuration for EchoBloom Coach.

Settings live in a JSON file under config/ and are merged over DEFAULT_CONFIG,
so a partial file only needs to carry the keys the user actually changed.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "coach.json"

DEFAULT_CONFIG = {
    "generation": {
        "model": "gpt-4o-mini",
        "session_max_tokens": 200,
        "reply_max_tokens": 150,
    },
    "speech": {
        "rate": 0.8,  # web-style rate, 1.0 is normal speed
        "preferred_voices": ["Female", "Samantha", "Karen", "Moira"],
    },
    "pacing": {
        "ms_per_char": 80,
        "pause_seconds": 2,
    },
    "listening": {
        "clip_seconds": 5,
        "transcribe_model": "whisper-1",
    },
    "toggles": {
        "speech_enabled": True,
        "speak_replies": True,
        "phase_cues": True,
    },
    "volume": 0.5,
    "log_file": "echobloom.log",
}


def load_config(path: Optional[Path] = None) -> dict:
    """Read the config file and merge it over the defaults."""
    path = path or CONFIG_PATH
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if not path.exists():
        return merged
    try:
        with open(path, encoding="utf-8") as f:
            cfg = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Bad coach config at %s (%s), using defaults.", path, e)
        return merged
    if not isinstance(cfg, dict):
        logger.warning("Coach config at %s is not an object, using defaults.", path)
        return merged

    for key, value in cfg.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def save_config(config: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


def reset_config(path: Optional[Path] = None) -> dict:
    config = copy.deepcopy(DEFAULT_CONFIG)
    save_config(config, path)
    return config


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Loads the coach's tunables (model name, token limits, speech rate,
#   step pacing, toggles) from config/coach.json, falling back to defaults.
#
# Key points:
#   - Section-level merge: {"pacing": {"pause_seconds": 3}} keeps the default
#     ms_per_char instead of wiping the whole section.
#   - A malformed file is logged and ignored; the app still starts.
#   - The API key is NOT stored here. The OpenAI client reads it from the
#     environment (or a .env file loaded by python-dotenv).
