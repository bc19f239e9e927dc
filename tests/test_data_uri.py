import base64
import random

import pytest

from unified_pipeline.audio import encode, from_data_uri, synthesize, to_data_uri
from unified_pipeline.errors import EncodingError

PREFIX = "data:audio/wav;base64,"


def test_empty_input() -> None:
    assert to_data_uri(b"", "audio/wav") == PREFIX


def test_single_byte() -> None:
    uri = to_data_uri(b"\x00", "audio/wav")
    assert uri == PREFIX + "AA=="
    assert from_data_uri(uri) == ("audio/wav", b"\x00")


def test_large_input_spans_many_chunks() -> None:
    data = random.Random(0).randbytes(100_000)
    uri = to_data_uri(data, "audio/wav")
    assert uri == PREFIX + base64.b64encode(data).decode("ascii")
    assert "\n" not in uri
    assert base64.b64decode(uri[len(PREFIX):]) == data


@pytest.mark.parametrize("chunk", [3, 6, 999, 32766])
def test_chunk_size_does_not_change_output(chunk) -> None:
    data = random.Random(1).randbytes(10_001)
    assert to_data_uri(data, "application/octet-stream", chunk_bytes=chunk) == (
        "data:application/octet-stream;base64," + base64.b64encode(data).decode("ascii")
    )


def test_bytearray_and_memoryview_inputs() -> None:
    data = bytes(range(256))
    expected = to_data_uri(data, "audio/wav")
    assert to_data_uri(bytearray(data), "audio/wav") == expected
    assert to_data_uri(memoryview(data), "audio/wav") == expected


def test_demo_artifact_length() -> None:
    uri = to_data_uri(encode(synthesize(440, 1.5, 44100, 0.2), 44100), "audio/wav")
    assert uri.startswith(PREFIX)
    mime, raw = from_data_uri(uri)
    assert mime == "audio/wav"
    assert len(raw) == 44 + 2 * 66150 == 132344


def test_non_bytes_input_rejected() -> None:
    with pytest.raises(EncodingError):
        to_data_uri("not bytes", "audio/wav")


def test_chunk_size_must_be_multiple_of_three() -> None:
    with pytest.raises(EncodingError):
        to_data_uri(b"abcd", "audio/wav", chunk_bytes=4)


@pytest.mark.parametrize("mime", ["", "a,b", "audio/wav;name=a,b"])
def test_bad_mime_type_rejected(mime) -> None:
    with pytest.raises(EncodingError):
        to_data_uri(b"x", mime)


@pytest.mark.parametrize("uri", ["audio/wav;base64,AA==", "data:audio/wav,AA==", "data:audio/wav;base64,A!=="])
def test_malformed_uri_rejected(uri) -> None:
    with pytest.raises(EncodingError):
        from_data_uri(uri)


def test_mime_type_parameters_round_trip() -> None:
    uri = to_data_uri(b"\x00", "audio/wav;codecs=1")
    assert uri == "data:audio/wav;codecs=1;base64,AA=="
    assert from_data_uri(uri) == ("audio/wav;codecs=1", b"\x00")
