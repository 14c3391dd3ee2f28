# -*- coding: utf-8 -*-
"""
String-heuristic scanner, extracts printable ASCII and UTF-16LE strings
from a chunk's byte range, attributing property tokens to hero tokens.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     03.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
from .. lib import scan
from .. import metadata
from . import tokens


## Initial owner state: (owner name, owner sequence index)
NO_OWNER = (None, -1)


def match_utf16(raw, pos, end):
    """
    Returns (text, size, type) for a zero-terminated UTF-16LE string at pos, or None.

    String must start at even offset and consist of printable characters.
    """
    if pos % 2 or pos + 3 >= end: return None
    if not scan.is_printable(raw[pos]) or raw[pos + 1]: return None

    stop = scan.utf16_run_end(raw, pos, end, metadata.UTF16_MAX_CHARS)
    if not (stop + 1 < end and not raw[stop] and not raw[stop + 1]): return None

    count = (stop - pos) // 2
    text = tokens.sanitize(scan.decode_utf16(raw, pos, count))
    if not tokens.is_valid(text): return None
    return text, count * 2 + 2, metadata.EntryType.UTF16Z


def match_ascii(raw, pos, end):
    """
    Returns (text, size, type) for a printable ASCII run at pos, or None.

    Size includes the zero terminator if the run has one.
    """
    if not scan.is_printable(raw[pos]): return None

    stop = scan.ascii_run_end(raw, pos, end)
    text = tokens.sanitize(bytes(raw[pos:stop]).decode("ascii"))
    if not tokens.is_valid(text): return None

    terminated = stop < end and not raw[stop]
    etype = metadata.EntryType.ASCIIZ if terminated else metadata.EntryType.UNKNOWN
    return text, stop - pos + terminated, etype


def classify(text, etype, offset, size, owner):
    """
    Returns (metadata.Entry or None, owner state) for extracted token.

    @param   owner  current (owner name, owner index)
    """
    if tokens.is_end_marker(text):
        return None, owner

    if tokens.is_owner(text):
        owner = (text, owner[1] + 1)
        return metadata.Entry(etype, metadata.LABEL_HERO, offset, size, text), owner

    if tokens.is_property(text):
        entry = metadata.Entry(etype, metadata.LABEL_UPGRADE, offset, size, text, *owner)
        return entry, owner

    return metadata.Entry(etype, tokens.guess_label(text), offset, size, text), owner


def extract(raw, start, end):
    """Returns [metadata.Entry, ] for strings found in raw[start:end], in scan order."""
    entries, owner = [], NO_OWNER
    pos, end = max(0, start), min(end, len(raw))
    while pos < end:
        match = match_utf16(raw, pos, end) or match_ascii(raw, pos, end)
        if not match:
            pos += 1
            continue # while pos

        text, size, etype = match
        entry, owner = classify(text, etype, pos, size, owner)
        if entry: entries.append(entry)
        pos += size
    return entries
