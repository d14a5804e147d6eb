"""Tests for the Invocation codec."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from blazorpack.config.model import CodecConfig
from blazorpack.dispatcher import classify_binary
from blazorpack.messages import invocation
from blazorpack.protocol.errors import InvalidFieldType, MalformedHeader, UnexpectedValueType
from blazorpack.protocol.structures import InvocationMessage

FOO_PAYLOAD = bytes.fromhex("950180c0a3466f6f90")


def _decode(payload: bytes) -> InvocationMessage:
    classified = classify_binary(payload)
    assert classified is not None
    assert classified.codec is invocation.CODEC
    return classified.decode()


class TestInvocationEncode:
    def test_without_invocation_id(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 1, "Headers": 0, "Target": "Foo", "Arguments": []}
        assert invocation.encode(message, codec_config) == bytes.fromhex("09950180c0a3466f6f90")

    def test_arguments_by_kind(self, codec_config: CodecConfig) -> None:
        message = {
            "MessageType": 1,
            "Headers": 0,
            "InvocationId": "1",
            "Target": "Foo",
            "Arguments": [1, "null", True, "x"],
        }
        expected_payload = b"\x95\x01\x80\xa11\xa3Foo\x94\x01\xc0\xc3\xa1x"
        assert invocation.encode(message, codec_config) == bytes([len(expected_payload)]) + expected_payload

    def test_stream_invocation_keeps_its_type(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 4, "Headers": 0, "Target": "Foo", "Arguments": []}
        assert invocation.encode(message, codec_config)[2] == 0x04

    def test_stream_ids_follow_the_array(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 1, "Headers": 0, "Target": "Foo", "Arguments": [], "StreamIds": ["s1"]}
        expected_payload = FOO_PAYLOAD + b'\xa6["s1"]'
        assert invocation.encode(message, codec_config) == bytes([len(expected_payload)]) + expected_payload

    def test_null_invocation_id_is_absent(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 1, "Headers": 0, "InvocationId": None, "Target": "Foo", "Arguments": []}
        assert invocation.encode(message, codec_config)[1:] == FOO_PAYLOAD

    def test_float_argument_precision(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 1, "Headers": 0, "Target": "F", "Arguments": [1.5]}

        double = invocation.encode(message, codec_config)
        single = invocation.encode(message, dataclasses.replace(codec_config, use_single_float=True))

        assert double.endswith(b"\x91\xcb\x3f\xf8\x00\x00\x00\x00\x00\x00")
        assert single.endswith(b"\x91\xca\x3f\xc0\x00\x00")

    def test_binary_and_nested_arguments(self, codec_config: CodecConfig) -> None:
        message = {
            "MessageType": 1,
            "Headers": 0,
            "Target": "F",
            "Arguments": [{"BinaryHeader": 2, "BinaryBytes": "BEEF"}, [1, 2]],
        }
        assert invocation.encode(message, codec_config).endswith(b"\x92\xc4\x02\xbe\xef\xa5[1,2]")

    def test_encode_rejects_bad_headers(self, codec_config: CodecConfig) -> None:
        message = {"MessageType": 1, "Headers": "none", "Target": "Foo", "Arguments": []}
        with pytest.raises(InvalidFieldType, match="field 'Headers' must be an integer"):
            invocation.encode(message, codec_config)


class TestInvocationValidate:
    def test_valid(self) -> None:
        assert invocation.validate({"MessageType": 1, "Headers": 0, "Target": "Foo", "Arguments": []})

    @pytest.mark.parametrize(
        ("message", "reason"),
        [
            ({"MessageType": 1, "Headers": 0, "Arguments": []}, "missing required field 'Target'"),
            ({"MessageType": 1, "Headers": 0, "Target": "Foo"}, "missing required field 'Arguments'"),
            ({"MessageType": 1, "Target": "Foo", "Arguments": []}, "missing required field 'Headers'"),
            ({"MessageType": True, "Headers": 0, "Target": "Foo", "Arguments": []}, "'MessageType' must be"),
            ({"MessageType": 1, "Headers": 0, "Target": 5, "Arguments": []}, "'Target' must be a string"),
            ({"MessageType": 1, "Headers": 0, "Target": "F", "Arguments": {}}, "'Arguments' must be an array"),
            (
                {"MessageType": 1, "Headers": 0, "Target": "F", "Arguments": [], "InvocationId": 3},
                "'InvocationId' must be a string",
            ),
            (
                {"MessageType": 1, "Headers": 0, "Target": "F", "Arguments": [], "StreamIds": "s1"},
                "'StreamIds' must be an array",
            ),
        ],
    )
    def test_invalid_logs_reason(
        self, message: dict[str, object], reason: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR):
            assert invocation.validate(message) is False
        assert "Invalid Invocation message" in caplog.text
        assert reason in caplog.text


class TestInvocationDecode:
    def test_without_invocation_id(self) -> None:
        decoded = _decode(FOO_PAYLOAD)
        assert decoded.to_json() == {"MessageType": 1, "Headers": 0, "Target": "Foo", "Arguments": []}

    def test_arguments_and_nil(self) -> None:
        decoded = _decode(b"\x95\x01\x80\xa11\xa3Foo\x94\x01\xc0\xc3\xa1x")
        assert decoded.to_json() == {
            "MessageType": 1,
            "Headers": 0,
            "InvocationId": "1",
            "Target": "Foo",
            "Arguments": [1, "null", True, "x"],
        }

    def test_stream_ids_from_trailing_string(self) -> None:
        assert _decode(FOO_PAYLOAD + b'\xa6["s1"]').stream_ids == ["s1"]

    def test_stream_ids_from_sixth_element(self) -> None:
        assert _decode(b"\x96\x01\x80\xc0\xa3Foo\x90\x91\xa2s1").stream_ids == ["s1"]

    def test_stream_ids_must_be_json_array(self) -> None:
        with pytest.raises(UnexpectedValueType, match="'StreamIds'"):
            _decode(FOO_PAYLOAD + b"\xa3abc")

    def test_unknown_type_keeps_discriminant(self) -> None:
        assert _decode(b"\x95\x09\x80\xc0\xa3Foo\x90").message_type == 9

    def test_short_array_rejected(self) -> None:
        with pytest.raises(MalformedHeader, match="declares 3 elements"):
            _decode(b"\x93\x01\x80\xc0")

    def test_non_empty_headers_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="blazorpack")
        decoded = _decode(b"\x95\x01\x81\xa1k\xa1v\xc0\xa3Foo\x90")

        assert decoded.headers == 1
        assert decoded.target == "Foo"
        assert "non-empty headers map" in caplog.text


def test_structured_round_trip(codec_config: CodecConfig) -> None:
    message = {
        "MessageType": 1,
        "Headers": 0,
        "InvocationId": "42",
        "Target": "DispatchEvent",
        "Arguments": [7, "click", False, [1, "two"], {"BinaryHeader": 1, "BinaryBytes": "0A"}, "null"],
        "StreamIds": ["a", "b"],
    }
    frame = invocation.encode(message, codec_config)
    assert _decode(frame[1:]).to_json() == message
