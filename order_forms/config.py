"""Runtime configuration defaults for persistence and export."""

from __future__ import annotations

import os

DB_PATH = "data/order_forms.db"
EXPORT_DIR = "exports"
DEBUG_LOG_PATH = "/tmp/order-forms-debug.log"

# Row key of the persisted editor snapshot.
STORAGE_KEY = "root"
SNAPSHOT_SCHEMA_VERSION = 2

_DB_PATH_ENV = "ORDER_FORMS_DB_PATH"
_EXPORT_DIR_ENV = "ORDER_FORMS_EXPORT_DIR"


def db_path() -> str:
    """Database path, honoring ORDER_FORMS_DB_PATH when set."""
    return os.environ.get(_DB_PATH_ENV, "").strip() or DB_PATH


def export_dir() -> str:
    """Export directory, honoring ORDER_FORMS_EXPORT_DIR when set."""
    return os.environ.get(_EXPORT_DIR_ENV, "").strip() or EXPORT_DIR
