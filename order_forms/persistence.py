"""SQLite persistence for the editor snapshot."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from order_forms.config import SNAPSHOT_SCHEMA_VERSION, STORAGE_KEY, db_path
from order_forms.constant import LEGACY_DEFAULT_SECTION_IDS
from order_forms.models import MAIN_QUESTION_INPUT, EditorState, Form, Question, Section

logger = logging.getLogger(__name__)

# Version 1 snapshots carried text_ar/text_en on every question.
_LEGACY_SCHEMA_VERSION = 1


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect() -> sqlite3.Connection:
    db_file = Path(db_path())
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def bootstrap_schema() -> None:
    """Create persistence schema if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS editor_snapshots (
                key TEXT PRIMARY KEY,
                schema_version INTEGER NOT NULL,
                payload TEXT NOT NULL,
                saved_at TEXT NOT NULL
            );
            """
        )


def _question_to_dict(question: Question) -> dict[str, Any]:
    data: dict[str, Any] = {
        "input": question.input,
        "text_fr": question.text_fr,
        "editable": question.editable,
    }
    if not question.is_main:
        data["price"] = question.price
        data["showPrice"] = question.show_price
        data["linkedForm"] = question.linked_form
    return data


def _form_to_dict(form: Form) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": form.id,
        "name": form.name,
        "type": form.type,
        "mainQuestion": _question_to_dict(form.main_question),
        "questions": [_question_to_dict(question) for question in form.questions],
        "globalLink": form.global_link,
    }
    if form.company_name is not None:
        data["companyName"] = form.company_name
    return data


def state_to_dict(state: EditorState) -> dict[str, Any]:
    return {
        "sections": [
            {
                "id": section.id,
                "name": section.name,
                "forms": [_form_to_dict(form) for form in section.forms],
                "isDefault": section.is_default,
            }
            for section in state.sections
        ],
        "currentSectionId": state.current_section_id,
        "currentFormId": state.current_form_id,
    }


def _question_from_dict(data: dict[str, Any]) -> Question:
    # Unknown keys (text_ar/text_en from version 1) are dropped here.
    question_input = str(data["input"])
    if question_input == MAIN_QUESTION_INPUT:
        return Question(input=question_input, text_fr=data.get("text_fr", ""), editable=data.get("editable", True))
    return Question(
        input=question_input,
        text_fr=data.get("text_fr", ""),
        price=data.get("price"),
        show_price=data.get("showPrice", True),
        linked_form=data.get("linkedForm"),
        editable=data.get("editable", True),
    )


def _form_from_dict(data: dict[str, Any]) -> Form:
    return Form(
        id=str(data["id"]),
        name=data.get("name", ""),
        type=data.get("type", "personnalise"),
        company_name=data.get("companyName"),
        main_question=_question_from_dict(data["mainQuestion"]),
        questions=[_question_from_dict(item) for item in data.get("questions", [])],
        global_link=data.get("globalLink"),
    )


def state_from_dict(data: dict[str, Any]) -> EditorState:
    if not isinstance(data, dict):
        raise ValueError(f"snapshot payload must be an object, got {type(data).__name__}")
    return EditorState(
        sections=[
            Section(
                id=str(item["id"]),
                name=item.get("name", ""),
                forms=[_form_from_dict(form) for form in item.get("forms", [])],
                is_default=item.get("isDefault", False),
            )
            for item in data.get("sections", [])
        ],
        current_section_id=data.get("currentSectionId"),
        current_form_id=data.get("currentFormId"),
    )


def save_snapshot(state: EditorState) -> None:
    """Overwrite the stored snapshot with ``state``."""
    payload = json.dumps(state_to_dict(state), ensure_ascii=False)
    with _connect() as conn:
        with conn:
            conn.execute(
                """
                INSERT INTO editor_snapshots (key, schema_version, payload, saved_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    schema_version = excluded.schema_version,
                    payload = excluded.payload,
                    saved_at = excluded.saved_at
                """,
                (STORAGE_KEY, SNAPSHOT_SCHEMA_VERSION, payload, _utc_now_iso()),
            )


def load_snapshot() -> EditorState | None:
    """Return the stored snapshot, or None when there is nothing usable."""
    with _connect() as conn:
        row = conn.execute(
            "SELECT schema_version, payload FROM editor_snapshots WHERE key = ?",
            (STORAGE_KEY,),
        ).fetchone()
    if row is None:
        return None

    schema_version, payload = row
    if schema_version not in (_LEGACY_SCHEMA_VERSION, SNAPSHOT_SCHEMA_VERSION):
        logger.warning("ignoring snapshot with unknown schema version %s", schema_version)
        return None

    try:
        state = state_from_dict(json.loads(payload))
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("ignoring unreadable snapshot: %s", exc)
        return None

    if schema_version == _LEGACY_SCHEMA_VERSION:
        state = _migrate_legacy(state)
    return state


def _migrate_legacy(state: EditorState) -> EditorState:
    for section in state.sections:
        if section.id in LEGACY_DEFAULT_SECTION_IDS:
            section.is_default = True
    return state


def clear_snapshot() -> None:
    """Delete the stored snapshot so the next start uses the seed."""
    with _connect() as conn:
        with conn:
            conn.execute("DELETE FROM editor_snapshots WHERE key = ?", (STORAGE_KEY,))
