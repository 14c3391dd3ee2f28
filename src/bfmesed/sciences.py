# -*- coding: utf-8 -*-
"""
Synthetic aggregation of science tokens scattered across all chunks
into one pseudo-chunk not backed by a contiguous byte range.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     05.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
from . import metadata
from . extract import tokens


def is_sciences_chunk(chunk):
    """Returns whether chunk is the synthetic sciences chunk."""
    return chunk.name.upper() == metadata.SCIENCES_CHUNK.upper()


def make_sciences_chunk(chunks):
    """
    Returns new synthetic metadata.Chunk with science entries from given chunks.

    Entries are deduplicated by source offset, copied with "Science" label
    and no owner. Existing synthetic sciences chunks are skipped.
    """
    entries, seen = [], set() # {offset, }
    for chunk in chunks:
        if is_sciences_chunk(chunk): continue # for chunk
        for entry in chunk.entries:
            if not entry.value or not tokens.istartswith(entry.value, metadata.SCIENCE_PREFIX):
                continue # for entry
            if entry.offset in seen: continue # for entry
            seen.add(entry.offset)
            entries.append(entry.copy(label=metadata.LABEL_SCIENCE, owner=None, owner_index=-1))
    return metadata.Chunk(metadata.SCIENCES_CHUNK, None, len(entries), entries)


def attach_sciences(chunks):
    """
    Replaces synthetic sciences chunk in given list with a freshly aggregated one,
    prepended if not empty.

    @return  the new chunk, or None if no sciences found
    """
    chunks[:] = [x for x in chunks if not is_sciences_chunk(x)]
    result = make_sciences_chunk(chunks)
    if not result.entries: return None
    chunks.insert(0, result)
    return result
