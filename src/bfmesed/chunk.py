# -*- coding: utf-8 -*-
"""
Chunk boundary locator: finds chunk start markers in savefile bytes,
determines chunk ends, and normalizes chunk names.

A chunk starts with a marker token like "CHUNK_CampaignKOLBH" and ends at
an end sentinel "SG_EOF" in ASCII or UTF-16LE, or at the next chunk start.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     02.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import logging

from . lib import scan
from . import metadata


logger = logging.getLogger(__name__)


def normalize_kolb_suffix(text):
    """
    Returns text with a single trailing letter after a final "KOLB" dropped.

    Collapses game version specific variants like "CHUNK_CampaignKOLBH"
    to "CHUNK_CampaignKOLB", other texts are returned as is.
    """
    if not text or not text.strip(): return text
    index = text.upper().rfind(metadata.CHUNK_MARKER)
    if index >= 0 and index + len(metadata.CHUNK_MARKER) == len(text) - 1 \
    and text[-1].isalpha():
        return text[:-1]
    return text


def token_prefix(text):
    """Returns the leading run of ASCII letters, digits and underscores in text."""
    end = 0
    while end < len(text) and scan.is_token_char(ord(text[end])): end += 1
    return text[:end]


def normalize_name(token):
    """Returns normalized chunk name from raw chunk marker token."""
    if not token: return ""
    return normalize_kolb_suffix(token_prefix(token.strip()))


def is_chunk_token(token):
    """Returns whether text is a valid chunk start token."""
    return len(token) >= metadata.CHUNK_TOKEN_MIN and metadata.CHUNK_MARKER in token.upper()


def find_chunk_starts(raw):
    """Returns sorted unique offsets of validated chunk start markers in savefile bytes."""
    starts, pos = set(), 0
    while True:
        index = scan.find_ascii(raw, metadata.CHUNK_PREFIX, pos)
        if index < 0: break # while True
        token = scan.read_token(raw, index, metadata.CHUNK_TOKEN_MAX)
        if is_chunk_token(token): starts.add(index)
        pos = index + len(metadata.CHUNK_PREFIX)
    return sorted(starts)


def find_end_marker(raw, start, limit):
    """
    Returns (offset, byte length) of the earliest end sentinel in raw[start:limit],
    in either ASCII or UTF-16LE form, or None if not found.
    """
    found = []
    for finder, width in [(scan.find_ascii, 1), (scan.find_utf16, 2)]:
        index = finder(raw, metadata.END_MARKER, start, limit)
        if index >= 0: found.append((index, len(metadata.END_MARKER) * width))
    return min(found) if found else None


def find_chunk_end(raw, start, limit):
    """
    Returns exclusive end offset for chunk starting at given offset.

    End is after the end sentinel and its zero padding, or limit if no sentinel.

    @param   limit  next chunk start or savefile length
    """
    marker = find_end_marker(raw, start, limit)
    if not marker:
        logger.debug("No end marker for chunk at 0x%X, ending at 0x%X.", start, limit)
        return limit
    end = sum(marker)
    while end < limit and not raw[end]: end += 1
    return min(end, limit)


def locate_chunks(raw):
    """Returns [metadata.Chunk, ] without entries, in ascending offset order."""
    chunks = []
    starts = find_chunk_starts(raw)
    for i, start in enumerate(starts):
        limit = starts[i + 1] if i + 1 < len(starts) else len(raw)
        end = find_chunk_end(raw, start, limit)
        name = normalize_name(scan.read_token(raw, start, metadata.CHUNK_TOKEN_MAX))
        if not name or not name.strip():
            name = "%s?@0x%X" % (metadata.CHUNK_PREFIX, start)
            logger.warning("Could not determine name for chunk at 0x%X.", start)
        chunks.append(metadata.Chunk(name, start, end - start))
    return chunks
