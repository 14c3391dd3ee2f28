# -*- coding: utf-8 -*-
"""
Bounds-safe byte scanning primitives.

Out-of-range positions and malformed input are treated as "no match",
functions here never raise on bad offsets.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     02.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""

## Printable ASCII byte range, inclusive
PRINTABLE_MIN, PRINTABLE_MAX = 32, 126


def is_printable(byte):
    """Returns whether byte value is printable ASCII."""
    return PRINTABLE_MIN <= byte <= PRINTABLE_MAX


def is_token_char(byte):
    """Returns whether byte value is an ASCII letter, digit or underscore."""
    return 48 <= byte <= 57 or 65 <= byte <= 90 or 97 <= byte <= 122 or 95 == byte


def to_utf16(literal):
    """Returns ASCII literal as UTF-16LE bytes, each byte followed by a zero byte."""
    return b"".join(bytes((b, 0)) for b in literal.encode("ascii"))


def starts_with_ascii(buffer, offset, literal):
    """Returns whether buffer contains ASCII literal at offset."""
    if offset < 0 or offset + len(literal) > len(buffer): return False
    return buffer[offset:offset + len(literal)] == literal.encode("ascii")


def find_bytes(buffer, needle, start=0, end=None):
    """
    Returns index of first occurrence of needle fully inside buffer[start:end], or -1.

    @param   start  first index to check, negative values clamped to 0
    @param   end    exclusive end of search range, defaults to buffer length
    """
    end = len(buffer) if end is None else min(end, len(buffer))
    start = max(0, start)
    if not needle or start >= end: return -1
    return buffer.find(needle, start, end)


def find_ascii(buffer, literal, start=0, end=None):
    """Returns index of first ASCII literal occurrence in buffer[start:end], or -1."""
    return find_bytes(buffer, literal.encode("ascii"), start, end)


def find_utf16(buffer, literal, start=0, end=None):
    """Returns index of first UTF-16LE-encoded literal occurrence in buffer[start:end], or -1."""
    return find_bytes(buffer, to_utf16(literal), start, end)


def read_asciiz(buffer, offset, maxlen):
    """
    Returns text from offset until zero byte, maxlen or buffer end.

    Returns empty string if nothing to read.
    """
    if offset < 0 or offset >= len(buffer): return ""
    limit = min(len(buffer), offset + maxlen)
    end = offset
    while end < limit and buffer[end]: end += 1
    return bytes(buffer[offset:end]).decode("latin-1")


def read_token(buffer, offset, maxlen=256):
    """Returns maximal run of ASCII letters, digits and underscores from offset."""
    if offset < 0 or offset >= len(buffer): return ""
    limit = min(len(buffer), offset + maxlen)
    end = offset
    while end < limit and is_token_char(buffer[end]): end += 1
    return bytes(buffer[offset:end]).decode("ascii")


def ascii_run_end(buffer, start, end):
    """Returns exclusive end of printable ASCII run from start, not going past end."""
    end, pos = min(end, len(buffer)), max(0, start)
    while pos < end and is_printable(buffer[pos]): pos += 1
    return pos


def utf16_run_end(buffer, start, end, maxchars):
    """
    Returns exclusive end of UTF-16LE printable run from start, not going past end.

    Each code unit must have printable low byte and zero high byte.
    Stops after maxchars code units.
    """
    end, pos, count = min(end, len(buffer)), max(0, start), 0
    while pos + 1 < end and count < maxchars:
        if buffer[pos + 1] or not is_printable(buffer[pos]): break # while
        pos, count = pos + 2, count + 1
    return pos


def decode_utf16(buffer, start, count):
    """Returns text from count UTF-16LE code units at start, taking the low bytes."""
    return "".join(chr(buffer[start + i * 2]) for i in range(count))
