import pytest

from sse_events.parser import MalformedChunk, StreamEvent, parse_chunk


@pytest.mark.parametrize(
    "chunk,name,data",
    [
        ("event:stdout\ndata:hi there", "stdout", "hi there"),
        ("event: stdout \ndata:  padded  \n\n", "stdout", "padded"),
        ("event:error\ndata:", "error", ""),
        ("event:error\ndata:\n\n", "error", ""),
        ("event:stderr\r\ndata:crlf\r\n", "stderr", "crlf"),
        ("event:progress\ndata:50%", "progress", "50%"),
    ],
)
def test_parses_well_formed_chunks(chunk, name, data):
    assert parse_chunk(chunk) == StreamEvent(name=name, data=data)


def test_accepts_bytes():
    assert parse_chunk(b"event:stdout\ndata:total 64K\n\n") == StreamEvent("stdout", "total 64K")


def test_invalid_utf8_does_not_raise():
    result = parse_chunk(b"event:stdout\ndata:\xff\xfe ok")
    assert isinstance(result, StreamEvent)
    assert result.data.endswith("ok")


def test_multi_event_chunk_keeps_last_data_field():
    result = parse_chunk("event:stdout\ndata:line one\nline two\nevent:stderr\ndata:x\n")
    # Greedy name capture: everything up to the last data: field belongs to the name
    assert result.name == "stdout\ndata:line one\nline two\nevent:stderr"
    assert result.data == "x"


def test_multiline_data_is_kept_whole():
    result = parse_chunk("event:stdout\ndata:first\nsecond\n  third  \n")
    assert result == StreamEvent("stdout", "first\nsecond\n  third")


def test_whitespace_only_name_trims_to_empty():
    assert parse_chunk("event:   \ndata:payload") == StreamEvent("", "payload")


def test_leading_noise_is_skipped():
    assert parse_chunk("\n\nevent:stdout\ndata:hi") == StreamEvent("stdout", "hi")


@pytest.mark.parametrize(
    "chunk",
    [
        "",
        "data:only data",
        "event:only-name",
        "data:hi\nevent:stdout",
        "event:\ndata:missing name",
        "just some text",
    ],
)
def test_malformed_chunks(chunk):
    result = parse_chunk(chunk)
    assert result == MalformedChunk(raw=chunk)
    assert result.as_event() == StreamEvent(name="", data="")
