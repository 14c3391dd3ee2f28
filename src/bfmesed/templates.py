# -*- coding: utf-8 -*-
"""
Export data structures and HTML templates.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     08.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import collections
import json

import step
import yaml

from . lib import util
from . import conf
from . import extract


def make_entry_data(entry):
    """Returns entry as dictionary for export."""
    result = collections.OrderedDict([
        ("label",  entry.label),
        ("type",   entry.type),
        ("offset", entry.offset),
        ("size",   entry.size),
        ("value",  entry.value),
    ])
    if entry.owner is not None:
        result.update(owner=entry.owner, owner_index=entry.owner_index)
    return result


def make_chunk_data(chunk, entries=True):
    """Returns chunk as dictionary for export, with or without entries."""
    result = collections.OrderedDict([
        ("name",    chunk.name),
        ("offset",  chunk.offset),
        ("length",  chunk.length),
        ("count",   len(chunk.entries)),
    ])
    owners = [e.value for e in extract.get_owners(chunk)]
    if owners:
        result["heroes"] = collections.OrderedDict(
            (x, [e.value for e in chunk.get_properties(x)]) for x in owners)
    if entries:
        result["entries"] = [make_entry_data(x) for x in chunk.entries]
    return result


def make_savefile_data(savefile, chunks=None, entries=False):
    """
    Returns savefile metadata as dictionary for export.

    @param   chunks   chunks to include if not all
    @param   entries  whether to include chunk entries
    """
    chunks = savefile.chunks if chunks is None else chunks
    result = collections.OrderedDict()
    if savefile.filename: result["file"] = savefile.filename
    result["size"]      = len(savefile.raw)
    result["signature"] = savefile.signature_ok
    result["heroes"]    = len(savefile.find_owners())
    result["chunks"]    = [make_chunk_data(x, entries) for x in chunks]
    return result


def to_plain(data):
    """Returns data with ordered dictionaries converted to plain ones, recursively."""
    if isinstance(data, dict):
        return {k: to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_plain(x) for x in data]
    return data


def export_savefile(filename, format, savefile, chunks=None):
    """
    Writes savefile chunks and entries to file in given format.

    @param   format  one of conf.ExportFormats
    @param   chunks  chunks to export if not all
    """
    chunks = savefile.chunks if chunks is None else chunks
    if "html" == format:
        content = step.Template(EXPORT_HTML, escape=True).expand(
            savefile=savefile, chunks=chunks, conf=conf, util=util)
    else:
        data = to_plain(make_savefile_data(savefile, chunks, entries=True))
        if "json" == format:
            content = json.dumps(data, indent=2)
        else:
            content = yaml.safe_dump(data, sort_keys=False)
    with open(filename, "w", encoding="utf-8") as f: f.write(content)



"""
HTML export of savefile chunks and entries.

@param   savefile  savefile.Savefile instance
@param   chunks    [metadata.Chunk, ]
@param   conf      conf module
@param   util      lib.util module
"""
EXPORT_HTML = """<!DOCTYPE HTML><html lang="en">
<head>
  <meta http-equiv="Content-Type" content="text/html; charset=utf-8" />
  <meta name="generator" content="{{ conf.Title }} {{ conf.Version }}" />
  <title>{{ savefile.filename or conf.Title }}</title>
  <style>
    body  { font-family: Tahoma, sans-serif; font-size: 11px; }
    table { border-collapse: collapse; }
    th    { text-align: left; background: #D4D0C8; }
    td, th { border: 1px solid #C0C0C0; padding: 2px 5px; vertical-align: top; }
    td.offset { font-family: monospace; text-align: right; }
  </style>
</head>
<body>
<h3>{{ savefile.filename or "Savefile" }}</h3>
<p>
{{ util.format_bytes(len(savefile.raw)) }},
{{ util.plural("chunk", chunks) }}.
%if not savefile.signature_ok:
<br />Unexpected file signature.
%endif
</p>
%for chunk in chunks:
<h4>{{ chunk.name }}
%if chunk.offset is not None:
  at 0x{{ "%X" % chunk.offset }}, {{ util.format_bytes(chunk.length) }}
%endif
</h4>
    %if chunk.entries:
<table>
  <tr><th>#</th><th>Label</th><th>Type</th><th>Offset</th><th>Size</th><th>Value</th><th>Owner</th></tr>
        %for i, entry in enumerate(chunk.entries):
  <tr>
    <td>{{ i + 1 }}</td>
    <td>{{ entry.label }}</td>
    <td>{{ entry.type }}</td>
    <td class="offset">{{ "" if entry.offset is None else "0x%X" % entry.offset }}</td>
    <td>{{ entry.size }}</td>
    <td>{{ entry.value }}</td>
    <td>{{ entry.owner or "" }}</td>
  </tr>
        %endfor
</table>
    %else:
<p>No entries.</p>
    %endif
%endfor
<p>Exported with {{ conf.Title }} {{ conf.Version }}.</p>
</body>
</html>
"""
