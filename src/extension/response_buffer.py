"""Fixed-capacity output buffer writes.

The host hands over a buffer of fixed size for every call. Text is
truncated to capacity minus one bytes and always NUL-terminated; nothing
is ever written past the buffer end.
"""

from __future__ import annotations

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def write_str_to_buffer(text: str, buffer: bytearray | memoryview) -> int | None:
    """Copy ASCII text into a buffer as a NUL-terminated string.

    Args:
        text: Rendered result text.
        buffer: Mutable output buffer; its length is the capacity.

    Returns:
        Number of text bytes written, excluding the terminator, or None
        when the text or buffer cannot be used. A rejected text still
        leaves an empty NUL-terminated string in a non-empty buffer.
    """
    capacity = len(buffer)
    if capacity < 1:
        _LOGGER.error("response_buffer_empty")
        return None
    if not text.isascii():
        _LOGGER.error("response_not_ascii", length=len(text))
        buffer[0] = 0
        return None
    raw = text.encode("ascii")
    if b"\x00" in raw:
        _LOGGER.error("response_contains_nul", length=len(raw))
        buffer[0] = 0
        return None
    amount = min(len(raw), capacity - 1)
    buffer[:amount] = raw[:amount]
    buffer[amount] = 0
    return amount


def encode_response(text: str, capacity: int) -> bytes:
    """Return the bytes a buffer of capacity would hold after a write."""
    buffer = bytearray(capacity)
    written = write_str_to_buffer(text, buffer)
    if written is None:
        return b""
    return bytes(buffer[: written + 1])
