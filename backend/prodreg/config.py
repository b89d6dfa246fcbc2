# backend/prodreg/config.py
from __future__ import annotations
import json
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/prodreg.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///prodreg.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Keyboard layout the wireless scanners are (wrongly) configured for.
    # See services/layout_remap.py for the available tables.
    SCAN_KEYBOARD_LAYOUT = os.environ.get("SCAN_KEYBOARD_LAYOUT", "azerty")

    # Ordered [wrong, correct] pairs applied after remapping.
    # None means "use the layout's built-in fixes".
    SCAN_PATTERN_FIXES = (
        json.loads(os.environ["SCAN_PATTERN_FIXES"])
        if os.environ.get("SCAN_PATTERN_FIXES")
        else None
    )

    EXPORT_FILENAME_PREFIX = os.environ.get("EXPORT_FILENAME_PREFIX", "product-registraties")
