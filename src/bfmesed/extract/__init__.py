# -*- coding: utf-8 -*-
"""
Entry extraction API: turns a chunk's byte range into decoded entries,
with strategy chosen by chunk name.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     03.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import collections
import logging

from .. import metadata
from . import payload
from . import strings
from . import tokens


logger = logging.getLogger(__name__)


## Extraction strategies by name
STRATEGIES = collections.OrderedDict([
    ("strings", strings),  # Freeform strings, default
    ("payload", payload),  # Structured binary payload
])


def get_strategy(name):
    """Returns extraction strategy name for chunk with given normalized name."""
    return "payload" if metadata.is_binary_payload_chunk(name) else "strings"


def extract_entries(raw, chunk):
    """Returns [metadata.Entry, ] decoded from the byte range of given metadata.Chunk."""
    strategy = get_strategy(chunk.name)
    entries = STRATEGIES[strategy].extract(raw, chunk.offset, chunk.end)
    logger.debug("Extracted %s entries from %s using %s.", len(entries), chunk, strategy)
    return entries


def populate(raw, chunks):
    """Populates entries in given chunks, skipping synthetic chunks."""
    for chunk in chunks:
        if not chunk.is_synthetic: chunk.entries[:] = extract_entries(raw, chunk)


def get_owners(chunk):
    """
    Returns owner entries in chunk, in scan order, as the string scanner
    attributes properties to them. Binary payload chunks have no owners.
    """
    if "strings" != get_strategy(chunk.name): return []
    return [e for e in chunk.entries if not e.is_pending and tokens.is_owner(e.value)]
