# -*- coding: utf-8 -*-
"""
Main program entrance: command-line interface for inspecting, exporting
and editing savegames.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     08.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
import argparse
import datetime
import errno
import glob
import logging
import os
import sys
import tempfile

import yaml

from . lib import util
from . import conf
from . import savefile as savefilelib
from . import templates


logger = logging.getLogger(__package__)


ARGUMENTS = {
    "description": "%s - %s." % (conf.Name, conf.Title),
    "arguments": [
        {"args": ["-v", "--version"], "action": "version",
         "version": "%s %s, %s." % (conf.Title, conf.Version, conf.VersionDate)},
        {"args": ["--verbose"], "action": "store_true",
         "help": "print detailed log messages to stderr"},
    ],
    "commands": [
        {"name": "info",
         "help": "print information on savegame",
         "description": "Print information on given savegame(s).",
         "arguments": [
             {"args": ["FILE"], "metavar": "SAVEGAME", "nargs": "+",
              "help": "savegame(s) to read (supports * wildcards)"},
        ]},
        {"name": "export",
         "help": "export chunks and entries from savegame",
         "description": "Export savegame chunks and entries as HTML, JSON or YAML.",
         "arguments": [
             {"args": ["FILE"], "metavar": "SAVEGAME", "nargs": "+",
              "help": "savegame(s) to read (supports * wildcards)"},
             {"args": ["-f", "--format"], "dest": "format", "default": None,
              "choices": conf.ExportFormats, "type": str.lower,
              "help": 'output format (defaults to "%s")' % conf.ExportFormat},
             {"args": ["-c", "--chunk"], "dest": "chunks", "metavar": "NAME",
              "nargs": "*", "default": [],
              "help": "export only chunks with given names"},
             {"args": ["-o", "--output"], "dest": "OUTFILE", "metavar": "OUTFILE",
                       "nargs": "?", "const": "",
              "help": "write output to file instead of printing to console;\n"
                      "filename will be auto-generated if not given;\n"
                      "automatic for non-printable formats (html)"},
        ]},
        {"name": "patch",
         "help": "overwrite string entry in savegame",
         "description": "Overwrite string entry at given offset in savegame, "
                        "new value must fit into existing entry size.",
         "arguments": [
             {"args": ["FILE"], "metavar": "SAVEGAME",
              "help": "savegame to modify"},
             {"args": ["--offset"], "dest": "offset", "required": True, "type": util.parse_int,
              "help": "entry start offset in savegame, decimal or 0x-prefixed hex"},
             {"args": ["--value"], "dest": "value", "required": True,
              "help": "new string value"},
             {"args": ["-o", "--output"], "dest": "OUTFILE", "metavar": "OUTFILE",
              "help": "write modified savegame to another file"},
        ]},
        {"name": "insert",
         "help": "add hero property to savegame",
         "description": "Add new property string like an upgrade for hero in savegame chunk.",
         "arguments": [
             {"args": ["FILE"], "metavar": "SAVEGAME",
              "help": "savegame to modify"},
             {"args": ["--chunk"], "dest": "chunk", "required": True,
              "help": 'chunk name, like "CHUNK_CampaignKOLB"'},
             {"args": ["--owner"], "dest": "owner", "required": True,
              "help": "hero name to add property for"},
             {"args": ["--value"], "dest": "value", "required": True,
              "help": 'new property value, like "Upgrade_HeroSword"'},
             {"args": ["-o", "--output"], "dest": "OUTFILE", "metavar": "OUTFILE",
              "help": "write modified savegame to another file"},
        ]},
    ],
}


def output(s="", *args, **kwargs):
    """
    Print wrapper, avoids "Broken pipe" errors if piping is interrupted.

    @param   args    format arguments for text
    @param   kwargs  additional arguments to print()
    """
    BREAK_EXS = (KeyboardInterrupt, BrokenPipeError)

    stream = kwargs.get("file", sys.stdout)
    if args: s %= args
    try: print(s, **kwargs)
    except BREAK_EXS:
        # Redirect remaining output to devnull to avoid another BrokenPipeError
        try: os.dup2(os.open(os.devnull, os.O_WRONLY), stream.fileno())
        except (Exception, KeyboardInterrupt): pass
        sys.exit()

    try:
        stream.flush() # Uncatchable error otherwise if interrupted
    except IOError as e:
        if e.errno in (errno.EINVAL, errno.EPIPE):
            sys.exit() # Stop work in progress if stream or pipe closed
        raise # Propagate any other errors


def open_savefile(filename):
    """Returns savefile.Savefile for filename, or None after printing error."""
    if not os.path.isfile(filename):
        output("\nFile not found: %s" % filename)
        return None
    exts = [x.lower() for _, xx in conf.FileExtensions for x in xx]
    if os.path.splitext(filename)[-1].lower() not in exts:
        logger.info("Unexpected extension for %s, expected one of %s.", filename, ", ".join(exts))
    try: return savefilelib.Savefile(filename)
    except Exception as e:
        logger.debug("Error reading %s.", filename, exc_info=True)
        output("\nError reading %s: %s" % (filename, util.format_exc(e)))
    return None


def save_savefile(savefile, outname=None):
    """Writes savefile to given or its own file, remembers it in recent files."""
    savefile.write(outname or savefile.filename)
    util.add_unique(conf.RecentFiles, os.path.abspath(savefile.filename), -1,
                    conf.MaxRecentFiles)
    conf.save()


def run_info(filenames):
    """Parses given files and prints metadata."""
    for filename in filenames:
        savefile = open_savefile(filename)
        if not savefile: continue # for filename

        data = templates.to_plain(templates.make_savefile_data(savefile))
        output()
        output(yaml.safe_dump(data, sort_keys=False))


def run_export(filenames, format, outname=None, chunknames=()):
    """Parses given files and prints or writes output files with chunk data."""
    format = format.lower()
    is_printable = format in conf.PrintableFormats

    for filename in filenames:
        savefile = open_savefile(filename)
        if not savefile: continue # for filename

        chunks = savefile.chunks
        if chunknames:
            chunks = [c for c in map(savefile.find_chunk, chunknames) if c]
            missing = [x for x in chunknames if not savefile.find_chunk(x)]
            if missing: output("\nChunks not found in %s: %s" % (filename, ", ".join(missing)))

        if outname is None and is_printable:
            with tempfile.NamedTemporaryFile() as f:
                outfile = f.name
        elif not outname:
            now = datetime.datetime.now()
            outfile = ".".join([os.path.basename(filename), now.strftime("%Y%m%d_%H%M%S"), format])
            outfile = util.unique_path(outfile, suffix="_%(counter)s%(ext)s")
        else: outfile = util.unique_path(outname, suffix="_%(counter)s%(ext)s")
        templates.export_savefile(outfile, format, savefile, chunks)

        if is_printable and outname is None:
            with open(outfile, encoding="utf-8") as f: output(f.read())
            try: os.remove(outfile)
            except Exception: pass
        else:
            output()
            output("Wrote %s of %s." % (outfile, util.format_bytes(os.path.getsize(outfile))))


def run_patch(filename, offset, value, outname=None):
    """Overwrites entry at offset in savegame, returns success."""
    savefile = open_savefile(filename)
    if not savefile: return False

    entry = savefile.find_entry(offset)
    if not entry:
        output("\nNo entry at offset %s (0x%X) in %s." % (offset, offset, filename))
        return False
    try:
        old = entry.value
        savefile.patch_entry(entry, value)
        save_savefile(savefile, outname)
    except Exception as e:
        logger.debug("Error patching %s.", filename, exc_info=True)
        output("\nError patching %s: %s" % (filename, util.format_exc(e)))
        return False
    output("\nPatched %s at 0x%X from %r to %r in %s." %
           (entry.label, entry.offset, old, value, savefile.filename))
    return True


def run_insert(filename, chunkname, owner, value, outname=None):
    """Adds property for owner in savegame chunk, returns success."""
    savefile = open_savefile(filename)
    if not savefile: return False

    chunk = savefile.find_chunk(chunkname)
    if not chunk or chunk.is_synthetic:
        output("\nNo chunk %r in %s." % (chunkname, filename))
        return False
    try:
        entry = savefile.add_property(chunk, owner, value)
        save_savefile(savefile, outname)
    except Exception as e:
        logger.debug("Error inserting into %s.", filename, exc_info=True)
        output("\nError inserting into %s: %s" % (filename, util.format_exc(e)))
        return False
    output("\nInserted %r for %r at 0x%X in %s." %
           (entry.value, owner, entry.offset, savefile.filename))
    return True


def init_logging(verbose=False):
    """Sets up package logging to stderr."""
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if logger.handlers: return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s\t%(levelname)s\t%(message)s"))
    logger.addHandler(handler)


def run(argv=None):
    """Parses command-line arguments and runs application CLI."""
    conf.load()
    argparser = argparse.ArgumentParser(description=ARGUMENTS["description"], prog=conf.Name)
    for arg in map(dict, ARGUMENTS["arguments"]):
        argparser.add_argument(*arg.pop("args"), **arg)
    subparsers = argparser.add_subparsers(dest="command")
    for cmd in ARGUMENTS["commands"]:
        kwargs = dict((k, cmd[k]) for k in ["help", "description"] if k in cmd)
        kwargs.update(formatter_class=argparse.RawTextHelpFormatter)
        subparser = subparsers.add_parser(cmd["name"], **kwargs)
        for arg in map(dict, cmd["arguments"]):
            subparser.add_argument(*arg.pop("args"), **arg)

    argv = sys.argv[1:] if argv is None else list(argv)
    if len(argv) > 1 and ("-h" in argv or "--help" in argv) and argv[-1] not in ("-h", "--help"):
        argv = [x for x in argv if x not in ("-h", "--help")] + ["-h"] # "-h option" to "option -h"

    arguments = argparser.parse_args(argv)
    if not arguments.command:
        argparser.print_help()
        return

    init_logging(arguments.verbose)
    filearg = util.tuplefy(arguments.FILE)
    if arguments.command in ("info", "export"):
        filearg = sum([sorted(glob.glob(f)) if "*" in f else [f] for f in filearg], [])

    if "info" == arguments.command:
        run_info(filearg)
    elif "export" == arguments.command:
        run_export(filearg, arguments.format or conf.ExportFormat, arguments.OUTFILE, arguments.chunks)
    elif "patch" == arguments.command:
        if not run_patch(filearg[0], arguments.offset, arguments.value, arguments.OUTFILE):
            sys.exit(1)
    elif "insert" == arguments.command:
        if not run_insert(filearg[0], arguments.chunk, arguments.owner, arguments.value,
                          arguments.OUTFILE):
            sys.exit(1)


if "__main__" == __name__:
    run()
