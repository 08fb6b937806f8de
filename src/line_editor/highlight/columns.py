"""Byte offset to character column conversion for UTF-8 text.

Terminal cells are counted in characters, while patterns and backend
cursors work on encoded bytes. Every conversion between the two goes
through this module. The scan trusts the leading byte of each sequence and
never validates continuation bytes, so malformed input degrades to slightly
misplaced columns instead of raising.
"""

from __future__ import annotations

from typing import Union

Text = Union[str, bytes, bytearray, memoryview]

_FOUR = 0b1111_0000
_THREE = 0b1110_0000
_TWO = 0b1100_0000


def _as_bytes(data: Text) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def sequence_length(lead: int) -> int:
    """Number of bytes the sequence starting with ``lead`` claims."""

    if lead & _FOUR == _FOUR:
        return 4
    if lead & _THREE == _THREE:
        return 3
    if lead & _TWO == _TWO:
        return 2
    return 1


def char_length(data: Text) -> int:
    """Count the characters encoded in ``data``."""

    raw = _as_bytes(data)
    size = len(raw)
    index = 0
    count = 0
    while index < size:
        index += sequence_length(raw[index])
        count += 1
    return count


def byte_to_char_index(data: Text, byte_offset: int) -> int:
    """Character column of ``byte_offset`` within ``data``."""

    if byte_offset <= 0:
        return 0
    return char_length(_as_bytes(data)[:byte_offset])


def char_index_to_byte(data: Text, char_index: int) -> int:
    """Byte offset at which character ``char_index`` starts.

    Indices past the end clamp to the encoded length.
    """

    raw = _as_bytes(data)
    size = len(raw)
    index = 0
    count = 0
    while index < size and count < char_index:
        index += sequence_length(raw[index])
        count += 1
    return min(index, size)


__all__ = [
    "Text",
    "byte_to_char_index",
    "char_index_to_byte",
    "char_length",
    "sequence_length",
]
