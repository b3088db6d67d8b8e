from __future__ import annotations

from datetime import datetime

from exam_app.core.models import Result
from exam_app.core.results_exporter import results_to_csv


def test_results_to_csv_quotes_free_text_fields():
    result = Result(
        id=1,
        exam_id=1,
        student_name="Lovelace, Ada",
        student_roll="R-1",
        answers=(0, None),
        score=1,
        total=2,
        submitted_at=datetime(2024, 3, 4, 5, 6, 7),
    )
    assert results_to_csv([result]) == (
        "Name,Roll No,Score,Time\n"
        "\"Lovelace, Ada\",R-1,1,2024-03-04 05:06:07\n"
    )


def test_empty_export_has_header_only():
    assert results_to_csv([]) == "Name,Roll No,Score,Time\n"
