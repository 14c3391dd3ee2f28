# -*- coding: utf-8 -*-
"""
Token sanitation, validation and classification for extracted strings.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     03.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
from .. import chunk
from .. import metadata


## Characters allowed in ordinary tokens besides letters and digits
TOKEN_EXTRA_CHARS = "_\\/.- "

## Path tokens sometimes carry a leading delimiter from the binary stream
MAP_PATH_PREFIXES = (",maps\\", ",maps/")


def istartswith(text, prefix):
    """Returns whether text starts with prefix or any of prefixes, case-insensitively."""
    prefixes = (prefix, ) if isinstance(prefix, str) else prefix
    return text.lower().startswith(tuple(x.lower() for x in prefixes))


def is_chunk_text(text):
    """Returns whether text looks like a chunk marker token."""
    return bool(text) and bool(text.strip()) and istartswith(text, metadata.CHUNK_PREFIX)


def sanitize(text):
    """
    Returns extracted token cleaned from decoding artifacts.

    Chunk marker tokens are cut to their leading letters-digits-underscores
    and have version suffix collapsed; map paths lose leading delimiters.
    Others are returned stripped of surrounding whitespace.
    """
    if not text: return text
    text = text.strip()
    if is_chunk_text(text):
        return chunk.normalize_kolb_suffix(chunk.token_prefix(text))
    if istartswith(text, MAP_PATH_PREFIXES):
        return text.lstrip(", ")
    return text


def is_valid(text):
    """
    Returns whether text is acceptable as an extracted token.

    Chunk marker tokens must be strictly letters-digits-underscores,
    other tokens may have up to a quarter of unexpected characters.
    """
    if not text or not text.strip(): return False
    minlen, maxlen = metadata.TOKEN_LENGTH_RANGE
    if not minlen <= len(text) <= maxlen: return False

    if is_chunk_text(text):
        return all(c.isalnum() or "_" == c for c in text)

    weird = sum(1 for c in text if not (c.isalnum() or c in TOKEN_EXTRA_CHARS))
    return weird <= len(text) // 4


def is_end_marker(text):
    """Returns whether text is the end-of-chunk sentinel."""
    return bool(text) and text.upper() == metadata.END_MARKER.upper()


def is_property(text):
    """Returns whether text is a hero property token like "Upgrade_Sword"."""
    return bool(text) and bool(text.strip()) and istartswith(text, metadata.PROPERTY_PREFIX)


def is_owner(text):
    """
    Returns whether text is a hero token owning subsequent property tokens.

    Accepts texts starting with known owner prefixes, and camel-case compound
    names like "HeroAragorn": letters and digits only, starting with a letter,
    at least two uppercase letters.
    """
    if not text or not text.strip(): return False
    if istartswith(text, (metadata.PROPERTY_PREFIX, metadata.SCIENCE_PREFIX)): return False
    if "\\" in text or "/" in text or ".map" in text.lower(): return False

    if istartswith(text, metadata.OWNER_PREFIXES): return True

    minlen, maxlen = metadata.OWNER_LENGTH_RANGE
    if "_" in text or not minlen <= len(text) <= maxlen: return False
    if not text[0].isalpha() or not text.isalnum(): return False
    return sum(1 for c in text if c.isupper()) >= 2


def guess_label(text):
    """Returns entry label guessed from token content."""
    if not text or not text.strip(): return metadata.LABEL_STRING

    if istartswith(text, metadata.OWNER_PREFIXES):  return metadata.LABEL_HERO
    if istartswith(text, metadata.PROPERTY_PREFIX): return metadata.LABEL_UPGRADE
    if istartswith(text, metadata.SCIENCE_PREFIX):  return metadata.LABEL_SCIENCE
    if ".map" in text.lower():                      return metadata.LABEL_MAP
    if any(x[1:] in text.lower() for x in MAP_PATH_PREFIXES): return metadata.LABEL_PATH
    return metadata.LABEL_STRING
