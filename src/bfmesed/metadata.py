# -*- coding: utf-8 -*-
"""
Savegame format constants and data model for chunks and entries.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     02.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import copy


"""Savefile header signature, checked but not enforced."""
SIGNATURE = "ALAE2STR"

"""Minimum number of bytes a savefile must have."""
HEADER_SIZE = 8

"""Literal starting every chunk marker token."""
CHUNK_PREFIX = "CHUNK_"

"""Substring a chunk marker token must contain to count as a chunk start."""
CHUNK_MARKER = "KOLB"

"""Minimum length of a chunk marker token."""
CHUNK_TOKEN_MIN = 10

"""Maximum number of bytes read for a chunk marker token."""
CHUNK_TOKEN_MAX = 256

"""End-of-chunk sentinel, present in ASCII or UTF-16LE form."""
END_MARKER = "SG_EOF"

"""Name of the synthetic chunk aggregating sciences from all chunks."""
SCIENCES_CHUNK = "GLOBAL_SCIENCES"

"""Chunks containing structured binary payload instead of freeform strings."""
BINARY_PAYLOAD_CHUNKS = frozenset(x.upper() for x in (
    "CHUNK_LivingWorldLogicKOLB",
    "CHUNK_GameStateMapKOLB",
    "CHUNK_GameStateKOLB",
    "CHUNK_GameLogicKOLB",
    "CHUNK_AudioKOLB",
))

"""Token prefixes for classifying extracted strings."""
PROPERTY_PREFIX = "Upgrade_"
SCIENCE_PREFIX  = "SCIENCE_"
OWNER_PREFIXES  = ("Fellowship", "Campaign")

"""Token validation length range, inclusive."""
TOKEN_LENGTH_RANGE = (4, 512)

"""Camel-case owner name length range, inclusive."""
OWNER_LENGTH_RANGE = (6, 64)

"""Maximum characters in a heuristic UTF-16LE string run."""
UTF16_MAX_CHARS = 512

"""Length-prefixed string count ranges in binary payload, inclusive."""
UTF16_COUNT_RANGE = (4, 120)
ASCII_COUNT_RANGE = (4, 80)

"""Minimum length of a zero-terminated string in binary payload."""
ASCIIZ_MIN_LENGTH = 4

"""Float magnitude range for rendering a binary payload word as float, inclusive."""
FLOAT_RANGE = (1e-6, 1e6)

"""Entry labels."""
LABEL_HERO, LABEL_UPGRADE, LABEL_SCIENCE = "Hero", "Upgrade", "Science"
LABEL_MAP, LABEL_PATH, LABEL_STRING      = "Map", "Path", "String"



class StructuralError(ValueError):
    """Raised for savefile contents too broken to parse."""


class EntryType(object):
    """Entry field types."""
    ASCIIZ   = "asciiz"    # ASCII, zero-terminated
    ASCII8   = "ascii8"    # ASCII, length-prefixed by one byte
    UTF16Z   = "utf16z"    # UTF-16LE, zero-terminated
    UTF16LE8 = "utf16le8"  # UTF-16LE, character count prefixed by one byte
    UINT32   = "uint32"
    INT32    = "int32"
    UINT16   = "uint16"
    FLOAT32  = "float32"
    BYTE     = "byte"
    UNKNOWN  = "unknown"

    ## Types patchable in place as plain strings
    PATCHABLE = (ASCIIZ, UTF16Z, UNKNOWN)



class Entry(object):
    """One decoded field in a chunk."""

    def __init__(self, type, label, offset, size, value, owner=None, owner_index=-1):
        """
        @param   type         EntryType value
        @param   label        role tag like "Hero" or "Word_3"
        @param   offset       absolute offset in savefile bytes, or None if not written yet
        @param   size         byte span, including terminator or length prefix
        @param   value        decoded display value
        @param   owner        display value of owning hero, if any
        @param   owner_index  sequence number of owning hero in chunk, -1 if none
        """
        self.type        = type
        self.label       = label
        self.offset      = offset
        self.size        = size
        self.value       = value
        self.owner       = owner
        self.owner_index = owner_index


    @property
    def is_pending(self):
        """Whether entry exists in memory only, without bytes in savefile."""
        return self.offset is None


    @property
    def end(self):
        """Exclusive end offset in savefile bytes, or None if pending."""
        return None if self.offset is None else self.offset + self.size


    def copy(self, **kwargs):
        """Returns a copy of this entry, with given attributes replaced."""
        result = copy.copy(self)
        for k, v in kwargs.items(): setattr(result, k, v)
        return result


    def __eq__(self, other):
        return isinstance(other, Entry) and vars(self) == vars(other)


    def __ne__(self, other):
        return not self == other


    __hash__ = None


    def __repr__(self):
        return "Entry(%s %r @%s, %s bytes%s)" % (
            self.label, self.value, "-" if self.offset is None else "0x%X" % self.offset,
            self.size, (", owner %r" % self.owner) if self.owner else "")



class Chunk(object):
    """Named byte range in savefile, with decoded entries."""

    def __init__(self, name, offset, length, entries=None):
        """
        @param   name     normalized chunk identifier
        @param   offset   start offset in savefile bytes, or None for synthetic chunk
        @param   length   byte length, or entry count for synthetic chunk
        @param   entries  [Entry, ]
        """
        self.name    = name
        self.offset  = offset
        self.length  = length
        self.entries = list(entries or [])


    @property
    def is_synthetic(self):
        """Whether chunk is not backed by a contiguous byte range."""
        return self.offset is None


    @property
    def end(self):
        """Exclusive end offset in savefile bytes, or None if synthetic."""
        return None if self.offset is None else self.offset + self.length


    def get_properties(self, owner):
        """Returns entries attributed to given owner name."""
        return [e for e in self.entries if e.owner == owner]


    def __str__(self):
        if self.offset is None:
            return "%s (%s entries)" % (self.name, len(self.entries))
        return "%s @0x%X (%s bytes)" % (self.name, self.offset, self.length)


    def __repr__(self):
        return "Chunk(%s, %s entries)" % (self, len(self.entries))


def is_binary_payload_chunk(name):
    """Returns whether chunk with given normalized name holds structured binary payload."""
    return bool(name) and name.strip().upper() in BINARY_PAYLOAD_CHUNKS
