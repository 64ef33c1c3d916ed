"""Unit tests for fixed-capacity response buffer writes."""

from __future__ import annotations

from extension.response_buffer import encode_response, write_str_to_buffer


def test_write_fits_text_and_terminator() -> None:
    """Short text should be copied whole and NUL-terminated."""
    buffer = bytearray(b"\xff" * 8)

    written = write_str_to_buffer("abc", buffer)

    assert written == 3 and bytes(buffer[:4]) == b"abc\x00" and buffer[4] == 0xFF


def test_write_truncates_to_capacity_minus_one() -> None:
    """Long text should be cut so the terminator fits in the buffer."""
    buffer = bytearray(4)

    written = write_str_to_buffer("abcdef", buffer)

    assert written == 3 and bytes(buffer) == b"abc\x00"


def test_write_into_single_byte_buffer_writes_only_terminator() -> None:
    """A one-byte buffer should receive just the terminator."""
    buffer = bytearray(b"\xff")

    assert write_str_to_buffer("abc", buffer) == 0 and bytes(buffer) == b"\x00"


def test_write_refuses_non_ascii_text_but_terminates() -> None:
    """Non-ASCII text should leave an empty NUL-terminated string."""
    buffer = bytearray(b"STALE")

    written = write_str_to_buffer("café", buffer)

    assert written is None and buffer[0] == 0


def test_write_refuses_embedded_nul_but_terminates() -> None:
    """Text holding a NUL byte should leave an empty terminated string."""
    buffer = bytearray(b"STALE")

    written = write_str_to_buffer("a\x00b", buffer)

    assert written is None and buffer[0] == 0


def test_write_refuses_zero_capacity() -> None:
    """An empty buffer cannot hold the terminator."""
    assert write_str_to_buffer("abc", bytearray()) is None


def test_write_through_memoryview() -> None:
    """Writes should work through a memoryview over host memory."""
    backing = bytearray(6)

    write_str_to_buffer("hi", memoryview(backing))

    assert bytes(backing[:3]) == b"hi\x00"


def test_encode_response_matches_buffer_contents() -> None:
    """Encoded responses should include text and terminator only."""
    assert encode_response("[1, 2]", 5) == b"[1, \x00"
