"""Read form CSV files back into forms.

Both the current ``input,output,text_fr,price`` header and the older
trilingual header are accepted; the Arabic and English columns of the older
shape are discarded.
"""

from __future__ import annotations

from pathlib import Path

from order_forms.constant import CSV_HEADER, LEGACY_CSV_HEADER
from order_forms.models import MAIN_QUESTION_INPUT, Form, Question, new_form


class CsvFormatError(ValueError):
    """Raised when a CSV does not match a known form layout."""


def _parse_header(line: str) -> tuple[str, ...]:
    header = tuple(cell.strip() for cell in line.split(","))
    if header not in (CSV_HEADER, LEGACY_CSV_HEADER):
        raise CsvFormatError(f"Unrecognized CSV header: {line!r}")
    return header


def read_form_csv(text: str, name: str = "") -> Form:
    """Build a new custom form from CSV text.

    Row ``0`` becomes the main question; the remaining rows are renumbered
    1..N in file order. ``output`` values are kept as per-question links.
    """
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
    if not lines:
        raise CsvFormatError("CSV is empty")

    header = _parse_header(lines[0])
    form = new_form(name=name)
    questions: list[Question] = []

    for line_no, line in enumerate(lines[1:], start=2):
        cells = line.split(",")
        if len(cells) != len(header):
            raise CsvFormatError(f"Line {line_no}: expected {len(header)} fields, got {len(cells)}")
        row = dict(zip(header, cells))

        if row["input"] == MAIN_QUESTION_INPUT:
            form.main_question = Question(input=MAIN_QUESTION_INPUT, text_fr=row["text_fr"])
            continue

        questions.append(
            Question(
                input=str(len(questions) + 1),
                text_fr=row["text_fr"],
                price=row["price"],
                linked_form=row["output"] or None,
            )
        )

    form.questions = questions
    return form


def import_form_csv(path: str | Path) -> Form:
    """Read a CSV file, naming the form after the file stem."""
    csv_path = Path(path)
    name = csv_path.stem.replace("_", " ")
    try:
        text = csv_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CsvFormatError(f"{path}: not UTF-8 text") from exc
    return read_form_csv(text, name=name)
