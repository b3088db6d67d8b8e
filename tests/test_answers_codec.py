from __future__ import annotations

import pytest

from exam_app.core.answers_codec import decode_answers, encode_answers
from exam_app.core.errors import AnswerPayloadError


def test_decode_accepts_integers_and_nulls():
    assert decode_answers("[0, null, 3]") == [0, None, 3]
    assert decode_answers("[]") == []


def test_encode_writes_json_nulls():
    assert encode_answers([1, None]) == "[1, null]"


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "not json", "{\"0\": 1}", "[true]", "[1.5]", "[\"1\"]", "3"],
)
def test_decode_rejects_malformed_payloads(raw):
    with pytest.raises(AnswerPayloadError):
        decode_answers(raw)
