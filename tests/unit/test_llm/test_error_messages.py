"""Tests for provider error normalization."""

import pytest

from analogix.llm.error_messages import extract_message, format_error


class TestExtractMessage:
    def test_error_string_field(self) -> None:
        assert extract_message('{"error":"bad key"}', "") == "bad key"

    def test_message_object_is_stringified(self) -> None:
        assert extract_message('{"message":{"code":7}}', "") == '{"code":7}'

    def test_plain_text_body(self) -> None:
        assert extract_message("plain text", "Not Found") == "plain text"

    def test_empty_body_uses_status_text(self) -> None:
        assert extract_message("", "Not Found") == "Not Found"

    def test_none_body_uses_status_text(self) -> None:
        assert extract_message(None, "Bad Gateway") == "Bad Gateway"

    def test_json_string_body(self) -> None:
        assert extract_message('"model overloaded"', "") == "model overloaded"

    def test_error_object_is_stringified(self) -> None:
        body = '{"error": {"message": "Invalid API Key", "type": "invalid_request_error"}}'
        assert extract_message(body, "") == (
            '{"message":"Invalid API Key","type":"invalid_request_error"}'
        )

    def test_error_wins_over_message(self) -> None:
        assert extract_message('{"error":"a","message":"b"}', "") == "a"

    def test_other_object_returned_whole(self) -> None:
        assert extract_message('{"detail":"nope"}', "") == '{"detail":"nope"}'

    def test_json_array_returned_whole(self) -> None:
        assert extract_message("[1, 2]", "") == "[1,2]"

    def test_bytes_body(self) -> None:
        assert extract_message(b'{"error":"bad key"}', "") == "bad key"

    @pytest.mark.parametrize(
        "body",
        ["{", "\xff\x00", b"\xff\xfe", "[" * 5000, '{"error": NaN}'],
    )
    def test_never_raises(self, body: str | bytes) -> None:
        assert isinstance(extract_message(body, None), str)


class TestFormatError:
    def test_exception_message(self) -> None:
        assert format_error(RuntimeError("boom")) == "boom"

    def test_exception_without_message_uses_type(self) -> None:
        assert format_error(TimeoutError()) == "TimeoutError"

    def test_non_exception(self) -> None:
        assert format_error("oops") == "Unknown error"
