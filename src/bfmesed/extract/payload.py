# -*- coding: utf-8 -*-
"""
Binary-payload decoder for chunks with structured content, splits the bytes
between chunk name and end sentinel into strings, 4-byte words and single bytes.

Field kinds are tried in fixed order at each position:
length-prefixed UTF-16LE string, length-prefixed ASCII string,
zero-terminated ASCII string, 4-byte word, single byte.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     04.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import collections
import math
import struct

from .. lib import scan, util
from .. import chunk
from .. import metadata
from . import tokens


## Annotations for special word bit patterns, as {value: (text, type)}
WORD_LITERALS = {
    0x00000000: ("false", metadata.EntryType.UINT32),
    0x00000001: ("true",  metadata.EntryType.UINT32),
    0x3F800000: ("1.0f",  metadata.EntryType.FLOAT32),
}

## Label templates per field kind
LABELS = {"string": "String_%s", "word": "Word_%s", "byte": "Byte_%s"}


def get_payload_range(raw, start, end):
    """
    Returns (payload start, payload end) for chunk at raw[start:end], or None.

    Payload follows the chunk name and its zero terminator,
    and ends at the nearer of ASCII or UTF-16LE end sentinel.
    """
    token = scan.read_token(raw, start, metadata.CHUNK_TOKEN_MAX)
    if not chunk.is_chunk_token(token): return None
    pos = start + len(token)
    if pos < min(end, len(raw)) and not raw[pos]: pos += 1

    marker = chunk.find_end_marker(raw, pos, end)
    if not marker or marker[0] <= pos: return None
    return pos, marker[0]


def match_utf16_len8(raw, pos, end):
    """Returns (text, size, type) for a count-prefixed UTF-16LE string at pos, or None."""
    count, (minv, maxv) = raw[pos], metadata.UTF16_COUNT_RANGE
    stop = pos + 1 + count * 2
    if not minv <= count <= maxv or stop > end: return None
    if scan.utf16_run_end(raw, pos + 1, stop, count) != stop: return None

    text = scan.decode_utf16(raw, pos + 1, count)
    if not tokens.is_valid(text): return None
    return text, 1 + count * 2, metadata.EntryType.UTF16LE8


def match_ascii_len8(raw, pos, end):
    """Returns (text, size, type) for a length-prefixed ASCII string at pos, or None."""
    count, (minv, maxv) = raw[pos], metadata.ASCII_COUNT_RANGE
    stop = pos + 1 + count
    if not minv <= count <= maxv or stop > end: return None
    if scan.ascii_run_end(raw, pos + 1, stop) != stop: return None

    text = bytes(raw[pos + 1:stop]).decode("ascii")
    if not tokens.is_valid(text): return None
    return text, 1 + count, metadata.EntryType.ASCII8


def match_asciiz(raw, pos, end):
    """Returns (text, size, type) for a zero-terminated ASCII string at pos, or None."""
    stop = scan.ascii_run_end(raw, pos, end)
    if stop - pos < metadata.ASCIIZ_MIN_LENGTH or stop >= end or raw[stop]: return None

    text = bytes(raw[pos:stop]).decode("ascii")
    if not tokens.is_valid(text): return None
    return text, stop - pos + 1, metadata.EntryType.ASCIIZ


def format_float(value):
    """Returns float formatted with single-precision significant digits."""
    return "%.7g" % value


def format_word(blob):
    """
    Returns (text, type) for 4 bytes interpreted as unsigned, signed and float.

    Float rendering is preferred for finite values with magnitude in range,
    showing both integer interpretations as well.
    """
    u32 = util.bytoi(blob)
    i32, f32 = struct.unpack("<i", blob)[0], struct.unpack("<f", blob)[0]
    if u32 in WORD_LITERALS:
        text, etype = WORD_LITERALS[u32]
        return "%s (0x%08X)" % (text, u32), etype

    minv, maxv = metadata.FLOAT_RANGE
    if math.isfinite(f32) and minv <= abs(f32) <= maxv:
        text = "%s (0x%08X, u32 %s, i32 %s)" % (format_float(f32), u32, u32, i32)
        return text, metadata.EntryType.FLOAT32
    if i32 < 0:
        return "0x%08X (%s / %s)" % (u32, u32, i32), metadata.EntryType.INT32
    return "0x%08X (%s)" % (u32, u32), metadata.EntryType.UINT32


def extract(raw, start, end):
    """Returns [metadata.Entry, ] decoded from payload of chunk at raw[start:end]."""
    entries = []
    payload = get_payload_range(raw, start, end)
    if not payload: return entries

    counters = collections.Counter() # {kind: next index}
    def make_entry(kind, etype, pos, size, value):
        label = LABELS[kind] % counters[kind]
        counters[kind] += 1
        return metadata.Entry(etype, label, pos, size, value)

    pos, end = payload
    while pos < end:
        match = match_utf16_len8(raw, pos, end) or match_ascii_len8(raw, pos, end) \
                or match_asciiz(raw, pos, end)
        if match:
            text, size, etype = match
            entries.append(make_entry("string", etype, pos, size, text))
        elif pos + 4 <= end:
            text, etype = format_word(bytes(raw[pos:pos + 4]))
            size = 4
            entries.append(make_entry("word", etype, pos, size, text))
        else:
            size = 1
            text = "0x%02X (%s)" % (raw[pos], raw[pos])
            entries.append(make_entry("byte", metadata.EntryType.BYTE, pos, size, text))
        pos += size
    return entries
