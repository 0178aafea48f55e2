"""CSV generation and zip bundling for the ordering bot."""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable

from order_forms.constant import CSV_HEADER, DEFAULT_BUNDLE_NAME, UNNAMED_FORM_LABEL
from order_forms.links import all_forms
from order_forms.models import Form, Question, Section
from order_forms.validation import validate_sections

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")
_PATH_SEPARATORS = re.compile(r"[\\/]")


class ExportValidationError(ValueError):
    """Raised when the tree is not exportable; carries every violation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


def _question_output(question: Question, form: Form) -> str:
    return question.linked_form or form.global_link or ""


def _question_price(question: Question) -> str:
    if not question.show_price:
        return ""
    return question.price or ""


def _join_row(fields: list[str], form: Form) -> str:
    # Values are written unquoted; the bot splits rows on bare commas.
    for value in fields:
        if "," in value or "\n" in value:
            logger.warning("form %r has a value the bot cannot parse back: %r", form.name, value)
    return ",".join(fields)


def form_to_csv(form: Form) -> str:
    """Render one form as CSV text (no trailing newline)."""
    rows = [
        ",".join(CSV_HEADER),
        _join_row([form.main_question.input, "", form.main_question.text_fr, ""], form),
    ]
    for question in form.questions:
        rows.append(
            _join_row(
                [question.input, _question_output(question, form), question.text_fr, _question_price(question)],
                form,
            )
        )
    return "\n".join(rows)


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse whitespace runs into underscores."""
    return _WHITESPACE_RUN.sub("_", name.lower())


def csv_filename(form: Form) -> str:
    return f"{slugify(form.name or UNNAMED_FORM_LABEL)}.csv"


def bundle_name(company_name: str | None) -> str:
    """Name used for both the archive and its inner folder."""
    cleaned = _PATH_SEPARATORS.sub("_", (company_name or "").strip()).lstrip(".")
    if not any(char.isalnum() for char in cleaned):
        return DEFAULT_BUNDLE_NAME
    return slugify(cleaned)


def bundle_files(sections: Iterable[Section]) -> dict[str, str]:
    """Map each form's CSV filename to its content, in tree order.

    Forms sharing a filename overwrite each other; the last one wins.
    """
    files: dict[str, str] = {}
    for form in all_forms(sections):
        filename = csv_filename(form)
        if filename in files:
            logger.warning("duplicate export filename %s; keeping the form %s", filename, form.id)
        files[filename] = form_to_csv(form)
    return files


def build_archive(files: dict[str, str], folder: str | None = None) -> bytes:
    """Pack ``files`` into a deflated zip, optionally under ``folder/``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for filename, content in files.items():
            arcname = f"{folder}/{filename}" if folder else filename
            archive.writestr(arcname, content)
    return buffer.getvalue()


def export_bundle(sections: list[Section], output_dir: str | Path, nest_in_folder: bool = True) -> Path:
    """Validate the tree and write ``<company>.zip`` into ``output_dir``.

    Nothing is written when validation fails.
    """
    result = validate_sections(sections)
    if not result.ok:
        raise ExportValidationError(result.errors)

    name = bundle_name(result.company_name)
    payload = build_archive(bundle_files(sections), folder=name if nest_in_folder else None)

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / f"{name}.zip"

    fd, tmp_name = tempfile.mkstemp(dir=out_dir, prefix=f".{name}-", suffix=".zip.tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.replace(tmp_name, target)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)

    logger.info("exported %d bytes to %s", len(payload), target)
    return target
