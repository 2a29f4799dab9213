from __future__ import annotations

import json

import pytest

from tlcache import (
    HEADER_SIZE,
    CacheDecodeError,
    CacheEncodeError,
    ContentLengthMismatchError,
    ErrorClass,
    SourceError,
    decode,
    encode,
    error_class,
)


class _HttpError(Exception):
    def __init__(self, status_code) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


class _Response:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code


class _WrappedHttpError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__("wrapped")
        self.response = _Response(status_code)


def test_encode_text_payload_layout():
    value = encode(None, "hello", {"content-type": "text/plain"})
    assert value is not None
    assert len(value) == HEADER_SIZE + len(b"hello")
    assert value[HEADER_SIZE:] == b"hello"
    head = value[:HEADER_SIZE]
    assert head.startswith(b'{"content-type":"text/plain"}')
    assert head.rstrip(b" ") == b'{"content-type":"text/plain"}'


def test_encode_bytes_payload_is_kept_verbatim():
    body = bytes(range(256))
    value = encode(None, body, {})
    assert value == b"{}".ljust(HEADER_SIZE, b" ") + body


def test_encode_missing_payload_and_headers():
    value = encode(None, None, None)
    assert value == b"{}".ljust(HEADER_SIZE, b" ")


def test_encode_structured_payload_sets_json_flag_without_mutating_headers():
    headers = {"a": "b"}
    value = encode(None, {"x": [1, 2]}, headers)
    assert headers == {"a": "b"}
    assert json.loads(value[:HEADER_SIZE]) == {"a": "b", "x-tl-json": True}
    assert value[HEADER_SIZE:] == b'{"x":[1,2]}'


def test_decode_restores_structured_payload_and_marks_hit():
    entry = decode(encode(None, {"x": [1, 2]}, {"a": "b"}))
    assert entry.error is None
    assert entry.payload == {"x": [1, 2]}
    assert entry.headers == {"a": "b", "x-tl-json": True, "x-tl-cache": "hit"}
    assert entry.from_cache is True


def test_decode_text_payload_comes_back_as_bytes():
    entry = decode(encode(None, "héllo", {"content-length": 6}))
    assert entry.payload == "héllo".encode("utf-8")
    assert entry.headers["content-length"] == 6


@pytest.mark.parametrize(
    ("status", "expected"),
    [(404, ErrorClass.NOT_FOUND), (403, ErrorClass.FORBIDDEN)],
)
def test_cacheable_errors_encode_to_three_byte_sentinel(status, expected):
    value = encode(SourceError(status), "ignored", {"ignored": "yes"})
    assert value == str(status).encode("ascii")
    assert len(value) == 3

    entry = decode(value)
    assert entry.error is expected
    assert entry.payload is None
    assert entry.headers is None
    assert entry.from_cache is True


def test_non_cacheable_error_is_not_encoded():
    assert encode(_HttpError(500), "body", {}) is None
    assert encode(RuntimeError("boom"), "body", {}) is None


def test_error_class_reads_nested_response_status():
    assert error_class(_WrappedHttpError(404)) is ErrorClass.NOT_FOUND
    assert error_class(_HttpError("403")) is ErrorClass.FORBIDDEN
    assert error_class(_HttpError(True)) is None
    assert error_class(_HttpError("nope")) is None
    assert error_class(None) is None


def test_decode_accepts_sentinel_as_text():
    assert decode("404").error is ErrorClass.NOT_FOUND


def test_oversized_headers_fail_encode():
    headers = {"big": "x" * HEADER_SIZE}
    with pytest.raises(CacheEncodeError, match="exceed 1024 bytes"):
        encode(None, "body", headers)


def test_headers_exactly_at_limit_encode():
    # {"k":"..."} is 8 bytes of framing.
    headers = {"k": "x" * (HEADER_SIZE - 8)}
    value = encode(None, b"", headers)
    assert len(value) == HEADER_SIZE
    assert b" " not in value


def test_multibyte_headers_are_measured_in_bytes():
    headers = {"k": "é" * 510}
    with pytest.raises(CacheEncodeError):
        encode(None, b"", headers)


def test_unserializable_headers_fail_encode():
    with pytest.raises(CacheEncodeError):
        encode(None, b"", {"when": object()})


def test_content_length_mismatch_fails_decode():
    value = encode(None, "hello", {"content-length": "6"})
    with pytest.raises(ContentLengthMismatchError) as info:
        decode(value)
    assert info.value.actual == 5


def test_truncated_value_fails_content_length_check():
    value = encode(None, "hello world", {"Content-Length": 11})
    with pytest.raises(ContentLengthMismatchError):
        decode(value[:-3])


def test_content_length_is_checked_against_raw_json_bytes():
    body = b'{"a":1}'
    value = encode(None, {"a": 1}, {"content-length": len(body)})
    assert decode(value).payload == {"a": 1}


def test_short_value_fails_decode():
    with pytest.raises(CacheDecodeError):
        decode(b"500")
    with pytest.raises(CacheDecodeError):
        decode(b"x" * (HEADER_SIZE - 1))


def test_invalid_header_json_fails_decode():
    with pytest.raises(CacheDecodeError, match="Invalid cache value"):
        decode(b"not json".ljust(HEADER_SIZE, b" ") + b"body")
    with pytest.raises(CacheDecodeError):
        decode(b"[1,2]".ljust(HEADER_SIZE, b" "))


def test_invalid_json_payload_fails_decode():
    value = b'{"x-tl-json":true}'.ljust(HEADER_SIZE, b" ") + b"{oops"
    with pytest.raises(CacheDecodeError):
        decode(value)


def test_deeply_nested_json_payload_fails_decode():
    value = b'{"x-tl-json":true}'.ljust(HEADER_SIZE, b" ") + b"[" * 200_000 + b"]" * 200_000
    with pytest.raises(CacheDecodeError):
        decode(value)


def test_deeply_nested_payload_fails_encode():
    payload: list = []
    for _ in range(200_000):
        payload = [payload]
    with pytest.raises(CacheEncodeError):
        encode(None, payload, {})
