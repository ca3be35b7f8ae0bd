"""Static configuration for printwatch.

All non-secret settings (polling, throttling, notifications, debug output)
live in a single JSON file for quick edits without touching Python. Secrets
stay in .env and are read through python-dotenv.
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

load_dotenv()


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _project_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database with users and subscriptions.
DB_PATH = _project_path(_CONFIG.get("database", {}).get("path", "printwatch.db"))

# Prusa Connect endpoint; the session cookie comes from PRUSA_CONNECT_COOKIE.
_prusa = _CONFIG.get("prusa", {})
PRUSA_BASE_URL = _prusa.get("base_url", "https://connect.prusa3d.com")

# Poll loop cadence.
_polling = _CONFIG.get("polling", {})
POLLING_INTERVAL_SECONDS = float(_polling.get("interval_seconds", 10))

# Progress notification window:
# - MIN: never repeat a progress message sooner than this
# - MAX: force a progress message at least this often
_throttle = _CONFIG.get("throttle", {})
THROTTLE_MIN_INTERVAL_SECONDS = float(_throttle.get("min_interval_seconds", 5 * 60))
THROTTLE_MAX_INTERVAL_SECONDS = float(_throttle.get("max_interval_seconds", 30 * 60))

# Notification method switches adapters without changing core logic.
_notifications = _CONFIG.get("notifications", {})
NOTIFICATION_METHOD = _notifications.get("notification_method", "bot")

# Admin HTTP API.
_http = _CONFIG.get("http", {})
HTTP_ENABLED = bool(_http.get("enabled", True))
HTTP_HOST = _http.get("host", "localhost")
HTTP_PORT = int(_http.get("port", 3000))

# Debug snapshot dump for offline payload inspection.
_debug = _CONFIG.get("debug", {})
WRITE_DEBUG_FILES = bool(_debug.get("write_snapshots", False))
DEBUG_DIRECTORY = _project_path(_debug.get("directory", "debug"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
