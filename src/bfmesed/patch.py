# -*- coding: utf-8 -*-
"""
Patch and insert engine: overwrites fixed-size string fields in place,
and inserts new zero-terminated strings with offset renumbering.

No edit ever writes partially: all checks happen before bytes change.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     06.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import logging

from . import metadata


logger = logging.getLogger(__name__)


class PatchError(ValueError):
    """Raised for edits that cannot be applied."""


class ValueTooLargeError(PatchError):
    """Raised for replacement value not fitting the field being patched."""

    def __init__(self, max_length, length=None):
        self.max_length = max_length
        self.length     = length
        super(ValueTooLargeError, self).__init__(
            "New value is too long%s. Max length: %s bytes." %
            ("" if length is None else " (%s bytes)" % length, max_length))


class OffsetOutOfRangeError(PatchError):
    """Raised for edit offset outside savefile bytes."""

    def __init__(self, offset, size=0, limit=None):
        self.offset = offset
        self.size   = size
        self.limit  = limit
        super(OffsetOutOfRangeError, self).__init__(
            "Offset %s%s is out of range%s." % (offset, " +%s" % size if size else "",
            "" if limit is None else " 0..%s" % limit))


def encode(value, encoding="ascii"):
    """Returns text encoded, raises PatchError if not encodable."""
    try: return (value or "").encode(encoding)
    except UnicodeError:
        raise PatchError("New value %r is not valid %s." % (value, encoding.upper()))


def patch_bytes(raw, offset, size, data):
    """
    Zero-fills raw[offset:offset + size] and writes data at its start.

    @param   size  allocated field size, including any terminator
    """
    if offset is None or offset < 0 or size < 0 or offset + size > len(raw):
        raise OffsetOutOfRangeError(offset, size, len(raw))
    if len(data) > size:
        raise ValueTooLargeError(size, len(data))
    raw[offset:offset + size] = bytes(data) + b"\x00" * (size - len(data))


def patch_ascii(raw, offset, size, value):
    """
    Overwrites fixed-size field in bytearray with ASCII text, zero-padded.

    @param   size  allocated field size, including any terminator
    @throws  ValueTooLargeError if encoded text is longer than size
    """
    patch_bytes(raw, offset, size, encode(value))


def patch_utf16(raw, offset, size, value):
    """
    Overwrites fixed-size field in bytearray with UTF-16LE text, zero-padded.

    @param   size  allocated field size in bytes, including any terminator
    @throws  ValueTooLargeError if encoded text is longer than size
    """
    patch_bytes(raw, offset, size, encode(value, "utf-16-le"))


def make_asciiz(value):
    """Returns text as ASCII bytes with zero terminator."""
    return encode(value) + b"\x00"


def fixup_offsets(chunks, offset, delta):
    """
    Shifts all chunk and entry offsets at or after given offset by delta.

    Chunk whose byte range contains the offset is lengthened by delta.
    Pending entries and synthetic chunks are left as is.
    """
    for chunk in chunks:
        if chunk.offset is not None:
            if chunk.offset >= offset: chunk.offset += delta
            elif offset <= chunk.offset + chunk.length: chunk.length += delta
        for entry in chunk.entries:
            if entry.offset is not None and entry.offset >= offset:
                entry.offset += delta


def insert_bytes(savefile, offset, data):
    """
    Replaces savefile bytes with a new buffer having data inserted at offset,
    and renumbers all offsets after it.

    @return  offset
    """
    if offset is None or not 0 <= offset <= len(savefile.raw):
        raise OffsetOutOfRangeError(offset, limit=len(savefile.raw))
    raw = bytearray(len(savefile.raw) + len(data))
    raw[:offset] = savefile.raw[:offset]
    raw[offset:offset + len(data)] = data
    raw[offset + len(data):] = savefile.raw[offset:]
    savefile.raw = raw
    fixup_offsets(savefile.chunks, offset, len(data))
    logger.debug("Inserted %s bytes at 0x%X.", len(data), offset)
    return offset


def insert_asciiz(savefile, offset, value):
    """
    Inserts text as new zero-terminated ASCII field at offset in savefile bytes.

    @param   savefile  object with .raw bytearray and .chunks [metadata.Chunk, ]
    @return            offset of the new field
    @throws            OffsetOutOfRangeError if offset outside savefile bytes
    """
    return insert_bytes(savefile, offset, make_asciiz(value))


def find_insert_offset(chunk, owner):
    """
    Returns offset for a new property of given owner in chunk:
    the end of the last written entry being the owner or belonging to it,
    falling back to chunk start.
    """
    ends = [e.end for e in chunk.entries if not e.is_pending and (
            (metadata.LABEL_HERO == e.label and owner == e.value) or owner == e.owner)]
    return max(ends) if ends else chunk.offset
