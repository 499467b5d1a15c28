# smartstudy/utils/csv_loader.py
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from smartstudy.services.repository import TaskRepository

log = logging.getLogger(__name__)

# Accept multiple date formats, including common regional ones
_DATE_FMTS: list[str] = [
    "%Y-%m-%d",  # ISO
    "%m/%d/%Y",  # US
    "%d/%m/%Y",  # EU
    "%Y/%m/%d",
]


def _parse_date(s: str | None) -> Optional[date]:
    if not s:
        return None
    s = str(s).strip()
    if not s:
        return None
    for fmt in _DATE_FMTS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def _get_first_present(row: dict, *keys: str, default=None):
    """Return row[key] for the first present key (case-sensitive), else default."""
    for k in keys:
        if k in row and row[k] not in (None, ""):
            return row[k]
    return default


def _day_offset(raw) -> Optional[int]:
    """Whole days from "3", "3.0" or " -1 "; None when not a number."""
    try:
        return int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        return None


@dataclass
class _DetectedDialect:
    delimiter: str = ","


def _detect_dialect(sample: str) -> _DetectedDialect:
    # Prefer tab if tabs exist in the first line (common for spreadsheets copied as TSV)
    if "\t" in sample.splitlines()[0]:
        return _DetectedDialect(delimiter="\t")
    try:
        sniffer = csv.Sniffer()
        dialect = sniffer.sniff(sample, delimiters=",\t;|")
        return _DetectedDialect(delimiter=dialect.delimiter)
    except csv.Error:
        return _DetectedDialect()


def _read_rows(csv_path: Path) -> list[dict]:
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        head = f.read(4096)
        if not head.strip():
            return []
        f.seek(0)
        dialect = _detect_dialect(head)
        reader = csv.DictReader(f, delimiter=dialect.delimiter)
        return list(reader)


def task_payload_from_row(row: dict, today: date) -> dict:
    """
    Map one CSV row to a task payload. The deadline is either an absolute
    date (deadline) or an offset from today (due_in_days). Hours, difficulty
    and priority are passed through untouched; normalization happens in the
    repository.
    """
    deadline = _parse_date(_get_first_present(row, "deadline", "Deadline"))
    if deadline is None:
        offset = _day_offset(_get_first_present(row, "due_in_days", "days", default=""))
        if offset is not None:
            deadline = today + timedelta(days=offset)
    return {
        "subject": _get_first_present(row, "subject", "Subject", default=""),
        "description": _get_first_present(row, "description", "Description", default=""),
        "deadline": deadline,
        "estimated_hours": _get_first_present(row, "estimated_hours", "hours"),
        "difficulty": _get_first_present(row, "difficulty", "Difficulty"),
        "priority": _get_first_present(row, "priority", "Priority"),
        "icon": _get_first_present(row, "icon"),
    }


def bootstrap_from_csv(db: Session, csv_path: Path, today: Optional[date] = None) -> int:
    """
    Seed the task table from a CSV/TSV file when it is empty.

    Columns: subject, description, deadline or due_in_days, estimated_hours,
    difficulty, priority, icon. Delimiter is auto-detected. Returns the number
    of tasks inserted.
    """
    repo = TaskRepository(db)
    if not csv_path.exists() or repo.count() > 0:
        return 0

    rows = _read_rows(csv_path)
    today = today or date.today()
    for row in rows:
        repo.add(task_payload_from_row(row, today))
    log.info("[SEED] inserted %d demo tasks from %s", len(rows), csv_path.name)
    return len(rows)
