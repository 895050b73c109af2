"""
Export projections of a form's submissions.

The tabular projection has one column per distinct answer label, in the
order labels are first seen, plus a leading submission timestamp. The
structured projection is a list of ``{id, submitted_at, data}`` records.
"""

import csv
import io
from typing import Any, Dict, List, Sequence

TIMESTAMP_COLUMN = "Submission Date"


def collect_columns(submissions: Sequence[Any]) -> List[str]:
    """Union of answer labels across submissions, first-seen order."""
    columns: Dict[str, None] = {}
    for submission in submissions:
        for label in (submission.data or {}):
            columns.setdefault(label, None)
    return list(columns)


def format_cell(value: Any) -> str:
    """Render one answer for a flat table; missing answers become empty cells."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def tabular_rows(submissions: Sequence[Any]) -> List[List[str]]:
    """Header row followed by one row per submission."""
    columns = collect_columns(submissions)
    rows = [[TIMESTAMP_COLUMN] + columns]
    for submission in submissions:
        data = submission.data or {}
        rows.append(
            [submission.submitted_at.isoformat()]
            + [format_cell(data.get(column)) for column in columns]
        )
    return rows


def to_csv(submissions: Sequence[Any]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerows(tabular_rows(submissions))
    return buffer.getvalue()


def to_records(submissions: Sequence[Any]) -> List[Dict[str, Any]]:
    return [
        {
            "id": submission.id,
            "submitted_at": submission.submitted_at,
            "data": submission.data or {},
        }
        for submission in submissions
    ]
