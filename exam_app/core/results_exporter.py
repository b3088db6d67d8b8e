"""Utilities for exporting submitted results as CSV."""

from __future__ import annotations

import csv
import io

from exam_app.constants.exam_constants import CSV_EXPORT_FIELDS
from exam_app.core.models import Result

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def results_to_csv(results: list[Result]) -> str:
    """Serialize results to CSV text with a header row, in the order given."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_EXPORT_FIELDS)
    for result in results:
        writer.writerow(_serialize_result(result))
    return buffer.getvalue()


def _serialize_result(result: Result) -> list[str]:
    return [
        result.student_name,
        result.student_roll,
        str(result.score),
        result.submitted_at.strftime(_TIME_FORMAT),
    ]
