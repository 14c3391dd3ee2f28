# -*- coding: utf-8 -*-
"""
Savegame file: raw contents, parsed chunks, and edit operations.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     06.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import datetime
import logging
import os
import shutil

from . lib import scan, util
from . import chunk as chunklib
from . import conf
from . import extract
from . import metadata
from . import patch
from . import sciences


logger = logging.getLogger(__name__)


class Savefile(object):
    """Game savefile."""

    def __init__(self, filename=None, raw=None):
        """
        @param   filename  path to read savefile from, if raw not given
        @param   raw       savefile contents as bytes
        """
        self.filename     = filename
        self.raw          = None  # Current contents, bytearray
        self.raw0         = None  # Contents as read or last written
        self.chunks       = []    # [metadata.Chunk, ]
        self.signature_ok = False
        self.dt           = None
        self.size         = 0
        if raw is not None: self.parse(raw)
        elif filename: self.read()


    def read(self):
        """Reads in file raw contents and parses chunks."""
        with open(self.filename, "rb") as f: raw = f.read()
        self.parse(raw)
        self.update_info()
        logger.info("Opened %s (%s, %s).", self.filename, util.format_bytes(self.size),
                    util.plural("chunk", self.chunks))


    def parse(self, raw):
        """
        Parses savefile contents into chunks and entries.

        @throws  metadata.StructuralError if contents too short for a savefile
        """
        if len(raw) < metadata.HEADER_SIZE:
            raise metadata.StructuralError("File too small: %s." %
                                           util.plural("byte", len(raw)))
        self.raw, self.raw0 = bytearray(raw), bytes(raw)
        self.signature_ok = scan.starts_with_ascii(self.raw, 0, metadata.SIGNATURE)
        if not self.signature_ok:
            logger.warning("Unexpected signature %r in %s, parsing anyway.",
                           bytes(self.raw[:metadata.HEADER_SIZE]), self.filename or "savefile")
        self.chunks = chunklib.locate_chunks(self.raw)
        extract.populate(self.raw, self.chunks)
        sciences.attach_sciences(self.chunks)
        logger.debug("Parsed %s with %s.", self.filename or "savefile",
                     util.plural("chunk", self.chunks))


    def write(self, filename=None):
        """Writes out savefile contents, creating backup of existing file if configured."""
        filename = filename or self.filename
        if not filename: raise ValueError("No filename to write savefile to.")
        if conf.Backup and os.path.isfile(filename):
            backup = util.unique_path(filename + conf.BackupSuffix)
            shutil.copy(filename, backup)
            logger.info("Backed up %s as %s.", filename, backup)
        dirname = os.path.dirname(filename)
        if dirname and not os.path.isdir(dirname): os.makedirs(dirname)
        with open(filename, "wb") as f: f.write(bytes(self.raw))
        self.raw0 = bytes(self.raw)
        self.filename = filename
        self.update_info(filename)
        logger.info("Saved %s (%s).", filename, util.format_bytes(self.size))


    def update_info(self, filename=None):
        """Updates file modification and size information."""
        filename = filename or self.filename
        self.dt   = datetime.datetime.fromtimestamp(os.path.getmtime(filename))
        self.size = os.path.getsize(filename)


    def is_changed(self):
        """Returns whether loaded contents have changed."""
        return bytes(self.raw) != self.raw0 or any(e.is_pending for c in self.chunks
                                                   for e in c.entries)


    def find_chunk(self, name):
        """Returns first chunk with given name, case-insensitive, or None."""
        name = chunklib.normalize_name(name) or name
        return next((c for c in self.chunks if c.name.upper() == name.upper()), None)


    def find_entry(self, offset, chunk=None):
        """Returns first written entry starting at given offset, in given chunk or any."""
        for c in [chunk] if chunk else [c for c in self.chunks if not c.is_synthetic]:
            for entry in c.entries:
                if entry.offset == offset: return entry
        return None


    def find_owners(self, chunk=None):
        """Returns owner names in given chunk or all chunks, in scan order."""
        result = []
        for c in [chunk] if chunk else self.chunks:
            result.extend(e.value for e in extract.get_owners(c) if e.value not in result)
        return result


    def patch_entry(self, entry, value):
        """
        Overwrites entry bytes in place with new string value.
        Bytes are left as is if value equals current value, as display values
        can be sanitized from the raw text.

        @throws  patch.PatchError if entry not patchable or value does not fit
        """
        if entry.is_pending:
            raise patch.PatchError("Entry %r has not been written yet." % entry.value)
        if entry.type not in metadata.EntryType.PATCHABLE:
            raise patch.PatchError("Entry %s of type %s is not a patchable string." %
                                   (entry.label, entry.type))
        if value == entry.value: return
        if metadata.EntryType.UTF16Z == entry.type:
            patch.patch_utf16(self.raw, entry.offset, entry.size, value)
        else:
            patch.patch_ascii(self.raw, entry.offset, entry.size, value)
        logger.info("Patched %s at 0x%X from %r to %r.", entry.label, entry.offset,
                    entry.value, value)
        self.update_copies(entry, value=value)
        entry.value = value


    def update_copies(self, entry, **kwargs):
        """Updates attributes of other entries at the same offset, like science copies."""
        for c in self.chunks:
            for other in c.entries:
                if other is not entry and other.offset == entry.offset:
                    for k, v in kwargs.items(): setattr(other, k, v)


    def new_property(self, chunk, owner, value):
        """
        Adds a pending property entry for owner in chunk, to be written on realize().

        @throws  patch.PatchError if value not ASCII or owner unknown in chunk
        """
        patch.encode(value)
        indexes = [i for i, e in enumerate(extract.get_owners(chunk)) if e.value == owner]
        if not indexes:
            raise patch.PatchError("No owner %r in %s." % (owner, chunk.name))
        index = indexes[-1] # New bytes go after the last occurrence
        entry = metadata.Entry(metadata.EntryType.ASCIIZ, metadata.LABEL_UPGRADE, None,
                               len(value) + 1, value, owner, index)
        chunk.entries.append(entry)
        return entry


    def realize(self):
        """Writes all pending entries into savefile bytes, giving them real offsets."""
        for c in self.chunks:
            for entry in [e for e in c.entries if e.is_pending]:
                offset = patch.find_insert_offset(c, entry.owner)
                entry.offset = patch.insert_asciiz(self, offset, entry.value)
                logger.info("Inserted %s %r for %r at 0x%X.", entry.label, entry.value,
                            entry.owner, entry.offset)


    def add_property(self, chunk, owner, value):
        """Adds and writes a property entry for owner in chunk, returns the entry."""
        entry = self.new_property(chunk, owner, value)
        self.realize()
        return entry


    def __str__(self):
        return self.filename or "savefile (%s)" % util.format_bytes(len(self.raw or b""))
