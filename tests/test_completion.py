"""Tests for the Completion codec."""

from __future__ import annotations

import logging

import pytest

from blazorpack.config.model import CodecConfig
from blazorpack.dispatcher import classify_binary
from blazorpack.messages import completion
from blazorpack.protocol.errors import InvalidResultKind, MalformedHeader
from blazorpack.protocol.structures import CompletionMessage


def _decode(payload: bytes) -> CompletionMessage:
    classified = classify_binary(payload)
    assert classified is not None
    assert classified.codec is completion.CODEC
    return classified.decode()


class TestCompletionEncode:
    def test_non_void_uses_five_elements(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 3, "Headers": 0, "InvocationId": "1", "ResultKind": 3, "Result": 42}
        assert completion.encode(message, codec_config) == b"\x07\x95\x03\x80\xa11\x03\x2a"

    def test_void_uses_four_elements(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 3, "Headers": 0, "InvocationId": "1", "ResultKind": 2}
        assert completion.encode(message, codec_config) == b"\x06\x94\x03\x80\xa11\x02"

    def test_error_result(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 3, "Headers": 0, "ResultKind": 1, "Result": "boom"}
        assert completion.encode(message, codec_config) == b"\x0a\x95\x03\x80\xc0\x01\xa4boom"

    def test_null_result_text_written_as_nil(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 3, "Headers": 0, "ResultKind": 3, "Result": "NULL"}
        assert completion.encode(message, codec_config) == b"\x06\x95\x03\x80\xc0\x03\xc0"

    def test_encode_raises_on_kind_violation(self, codec_config: CodecConfig) -> None:
        with pytest.raises(InvalidResultKind):
            completion.encode({"MessageType": 3, "Headers": 0, "ResultKind": 2, "Result": 1}, codec_config)


class TestCompletionValidate:
    @pytest.mark.parametrize(
        ("message", "reason"),
        [
            ({"MessageType": 3, "Headers": 0, "ResultKind": 4, "Result": 1}, "must be between 1 and 3, got 4"),
            ({"MessageType": 3, "Headers": 0, "ResultKind": 0}, "must be between 1 and 3, got 0"),
            ({"MessageType": 3, "Headers": 0, "ResultKind": 3}, "'ResultKind' 3 requires a 'Result' field"),
            ({"MessageType": 3, "Headers": 0, "ResultKind": 1, "Result": None}, "requires a 'Result' field"),
            (
                {"MessageType": 3, "Headers": 0, "ResultKind": 2, "Result": 5},
                "'ResultKind' 2 does not allow a 'Result' field",
            ),
            ({"MessageType": 3, "Headers": 0, "ResultKind": "3", "Result": 5}, "'ResultKind' must be an integer"),
            ({"MessageType": 3, "Headers": 0}, "missing required field 'ResultKind'"),
        ],
    )
    def test_invalid(self, message: dict[str, object], reason: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            assert completion.validate(message) is False
        assert reason in caplog.text

    @pytest.mark.parametrize("kind", [1, 3])
    def test_kinds_with_result(self, kind: int) -> None:
        assert completion.validate({"MessageType": 3, "Headers": 0, "ResultKind": kind, "Result": "x"})

    def test_void(self) -> None:
        assert completion.validate({"MessageType": 3, "Headers": 0, "ResultKind": 2})


class TestCompletionDecode:
    def test_non_void(self) -> None:
        decoded = _decode(b"\x95\x03\x80\xa11\x03\x2a")
        assert decoded.to_json() == {
            "MessageType": 3,
            "Headers": 0,
            "InvocationId": "1",
            "ResultKind": 3,
            "Result": 42,
        }

    def test_void(self) -> None:
        decoded = _decode(b"\x94\x03\x80\xa11\x02")
        assert decoded.to_json() == {"MessageType": 3, "Headers": 0, "InvocationId": "1", "ResultKind": 2}

    def test_binary_result(self) -> None:
        decoded = _decode(b"\x95\x03\x80\xc0\x03\xc4\x02\x01\x02")
        assert decoded.to_json()["Result"] == {"BinaryHeader": 2, "BinaryBytes": "0102"}

    def test_nil_result_becomes_null_text(self) -> None:
        assert _decode(b"\x95\x03\x80\xc0\x03\xc0").to_json()["Result"] == "null"

    def test_missing_result_for_non_void(self) -> None:
        with pytest.raises(MalformedHeader, match="ResultKind 3 carries no result"):
            _decode(b"\x94\x03\x80\xc0\x03")

    def test_result_for_void_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="blazorpack")
        assert _decode(b"\x95\x03\x80\xc0\x02\x01").result is None
        assert "carries a result; dropped" in caplog.text


@pytest.mark.parametrize(
    "message",
    [
        {"MessageType": 3, "Headers": 0, "InvocationId": "7", "ResultKind": 1, "Result": "failed"},
        {"MessageType": 3, "Headers": 0, "ResultKind": 2},
        {"MessageType": 3, "Headers": 0, "InvocationId": "7", "ResultKind": 3, "Result": True},
        {"MessageType": 3, "Headers": 0, "ResultKind": 3, "Result": "null"},
        {"MessageType": 3, "Headers": 0, "ResultKind": 3, "Result": {"BinaryHeader": 3, "BinaryBytes": "DEADBE"}},
    ],
)
def test_structured_round_trip(message: dict[str, object], codec_config: CodecConfig) -> None:
    assert _decode(completion.encode(message, codec_config)[1:]).to_json() == message
