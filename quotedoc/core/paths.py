"""
quotedoc/core/paths.py - Centralized Path Configuration

Single source of truth for the directories the exporter writes to.
Exports land in OUTPUT_DIR, rotating logs in LOG_DIR.
"""

import os
import logging

log = logging.getLogger("quotedoc.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))

_DEFAULT_DATA_DIR = os.path.join(PROJECT_ROOT, "data")


# Priority: QUOTEDOC_DATA_DIR env → project data/
def _resolve_data_dir() -> str:
    env_dir = os.environ.get("QUOTEDOC_DATA_DIR", "")
    if env_dir:
        return env_dir
    return _DEFAULT_DATA_DIR

DATA_DIR = _resolve_data_dir()

# ── Core Directories ─────────────────────────────────────────────────────────
OUTPUT_DIR = os.path.join(DATA_DIR, "output")
LOG_DIR = os.path.join(DATA_DIR, "logs")


def ensure_dir(path: str) -> str:
    """Create path if missing and return it."""
    os.makedirs(path, exist_ok=True)
    return path


def validate_paths() -> dict:
    """Runtime validation - call at app startup to catch path issues early.

    Returns:
        {"ok": bool, "errors": [str], "resolved": {name: path}}
    """
    result = {"ok": True, "errors": [], "resolved": {}}
    for name, path in (("DATA_DIR", DATA_DIR), ("OUTPUT_DIR", OUTPUT_DIR)):
        result["resolved"][name] = path
        try:
            ensure_dir(path)
        except OSError as e:
            result["errors"].append(f"{name} not creatable: {e}")
            result["ok"] = False
            continue
        test_file = os.path.join(path, ".write_test")
        try:
            with open(test_file, "w") as f:
                f.write("ok")
            os.remove(test_file)
        except OSError as e:
            result["errors"].append(f"{name} not writable: {e}")
            result["ok"] = False
    if not result["ok"]:
        log.warning("Path validation failed: %s", "; ".join(result["errors"]))
    return result
