# -*- coding: utf-8 -*-
"""
Application settings, and functionality to save/load some of them from
an external file. Configuration file has simple INI file format,
and all values are kept in JSON.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     02.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
from configparser import RawConfigParser
import copy
import datetime
import io
import json
import os
import re
import sys


"""Program title, version number and version date."""
Name = "bfmesed"
Title = "BFME2 Savegame Editor"
Version = "1.0"
VersionDate = "19.10.2026"

Frozen = getattr(sys, "frozen", False)
if Frozen:
    # Running as a pyinstaller executable
    ApplicationDirectory = os.path.dirname(sys.executable)
    EtcDirectory = ApplicationDirectory
else:
    ApplicationDirectory = os.path.realpath(os.path.dirname(__file__))
    EtcDirectory = os.path.join(ApplicationDirectory, "etc")

"""Name of file where FileDirectives are kept."""
ConfigFile = "%s.ini" % os.path.join(EtcDirectory, Name.lower())

"""List of attribute names that can be saved to and loaded from ConfigFile."""
FileDirectives = ["Backup", "RecentFiles"]
"""List of user-modifiable attributes, saved if changed from default."""
OptionalFileDirectives = ["BackupSuffix", "ExportFormat", "FileExtensions", "MaxRecentFiles"]
Defaults = {}

"""---------------------------- FileDirectives: ----------------------------"""

"""Create a backup of savegame file before overwriting it."""
Backup = True

"""Contents of recently edited files list."""
RecentFiles = []

"""---------------------------- /FileDirectives ----------------------------"""

"""Filename suffix for savegame backups, made unique if backup already exists."""
BackupSuffix = ".bak"

"""Default format for exporting savegame contents."""
ExportFormat = "yaml"

"""Savefile filename extensions, as [(description, (".ext1", ".ext2"))]."""
FileExtensions = [("BFME2 campaign savefiles", (".BfME2Campaign", ))]

"""How many items to keep in RecentFiles."""
MaxRecentFiles = 20

"""Supported export formats, printable formats written to console by default."""
ExportFormats = ["yaml", "json", "html"]
PrintableFormats = ["yaml", "json"]


def load():
    """Loads FileDirectives from ConfigFile into this module's attributes."""
    global Defaults

    VARTYPES = (bytes, str, bool, int, list, tuple, dict, type(None))

    def safecopy(v):
        """Tries to return a deep copy, or a shallow copy, or given value if copy fails."""
        for f in (copy.deepcopy, copy.copy, lambda x: x):
            try: return f(v)
            except Exception: pass

    section = "*"
    module = sys.modules[__name__]
    Defaults = {k: safecopy(v) for k, v in vars(module).items()
                if not k.startswith("_") and isinstance(v, VARTYPES)}

    parser = RawConfigParser()
    parser.optionxform = str # Force case-sensitivity on names
    try:
        def parse_value(name):
            try: # parser.get can throw an error if value not found
                value_raw = parser.get(section, name)
            except Exception:
                return None, False
            try: # Try to interpret as JSON, fall back on raw string
                value = json.loads(value_raw)
            except ValueError:
                value = value_raw
            return value, True

        with open(ConfigFile, "r") as f:
            txt = f.read()
        if not re.search("\\[\\w+\\]", txt): txt = "[DEFAULT]\n" + txt
        parser.read_file(io.StringIO(txt), ConfigFile)

        for name in FileDirectives:
            [setattr(module, name, v) for v, s in [parse_value(name)] if s]
        for name in OptionalFileDirectives:
            [setattr(module, name, v) for v, s in [parse_value(name)] if s]
    except Exception:
        pass # Fail silently


def save():
    """Saves FileDirectives into ConfigFile."""
    section = "*"
    module = sys.modules[__name__]
    parser = RawConfigParser()
    parser.optionxform = str # Force case-sensitivity on names
    parser.add_section(section)
    try:
        try: os.makedirs(os.path.dirname(ConfigFile))
        except Exception: pass
        with open(ConfigFile, "w") as f:
            f.write("# %s %s configuration written on %s.\n" % (Title, Version,
                    datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")))
            for name in FileDirectives:
                try: parser.set(section, name, json.dumps(getattr(module, name)))
                except Exception: pass
            for name in OptionalFileDirectives:
                try:
                    value = getattr(module, name, None)
                    if Defaults.get(name) != value:
                        parser.set(section, name, json.dumps(value))
                except Exception: pass
            parser.write(f)
    except Exception:
        pass # Fail silently
