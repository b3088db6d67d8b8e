"""Encoding and decoding of the ``answersJson`` form field.

The student page and the kiosk both serialize the collected answers as a JSON
array aligned with the exam's question order, e.g. ``[0, null, 3]``. Only
integers and ``null`` are accepted; booleans, floats and strings are rejected
instead of being coerced, so a tampered payload cannot slip a ``true`` through
as choice 1.
"""

from __future__ import annotations

import json

from pydantic import StrictInt, TypeAdapter, ValidationError

from exam_app.core.errors import AnswerPayloadError

_ANSWERS_ADAPTER: TypeAdapter[list[StrictInt | None]] = TypeAdapter(list[StrictInt | None])


def decode_answers(raw: str | None) -> list[int | None]:
    """Decode a serialized answers list, raising ``AnswerPayloadError`` on bad input."""

    if raw is None or not raw.strip():
        raise AnswerPayloadError("Answers payload is missing.")
    try:
        return _ANSWERS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise AnswerPayloadError(f"Answers payload is malformed: {exc.error_count()} error(s)") from exc


def encode_answers(answers: list[int | None]) -> str:
    return json.dumps(list(answers))
