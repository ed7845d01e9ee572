import pytest

from shelldb.framing import OutputBuffer, is_complete, make_sentinel_token

SENTINEL = b"__SHELLDB_TEST__\n"


def test_is_complete_requires_exact_suffix():
    assert is_complete(b"1\tx\n" + SENTINEL, SENTINEL)
    assert is_complete(SENTINEL, SENTINEL)


def test_is_complete_rejects_one_byte_short():
    assert not is_complete(b"1\tx\n" + SENTINEL[:-1], SENTINEL)
    assert not is_complete(SENTINEL[1:], SENTINEL)


def test_is_complete_rejects_shifted_sentinel():
    assert not is_complete(b"1\tx\n" + SENTINEL + b"x", SENTINEL)
    assert not is_complete(b"1\tx\n" + SENTINEL[1:] + b"\n", SENTINEL)


def test_is_complete_handles_short_and_empty_buffers():
    assert not is_complete(b"", SENTINEL)
    assert not is_complete(b"\n", SENTINEL)
    assert not is_complete(b"anything", b"")


def test_output_buffer_completes_only_after_final_chunk():
    buffer = OutputBuffer(SENTINEL)

    assert buffer.append(b"1\tx\t\\N\n") is False
    assert buffer.append(SENTINEL[:7]) is False
    assert buffer.append(SENTINEL[7:]) is True
    assert buffer.complete


def test_output_buffer_drain_resets():
    buffer = OutputBuffer(SENTINEL)
    buffer.append(b"1\n" + SENTINEL)

    assert buffer.drain() == b"1\n" + SENTINEL
    assert len(buffer) == 0
    assert not buffer.complete


def test_output_buffer_requires_sentinel():
    with pytest.raises(ValueError):
        OutputBuffer(b"")


def test_sentinel_tokens_are_unique_per_call():
    first = make_sentinel_token()
    second = make_sentinel_token()

    assert first != second
    assert first.startswith("__SHELLDB_") and first.endswith("__")
