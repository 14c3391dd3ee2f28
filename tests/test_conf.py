import os

from bfmesed import conf
from bfmesed.lib import util


def test_load_missing_file():
    conf.load()
    assert conf.Backup is True
    assert conf.RecentFiles == []
    assert conf.Defaults["ExportFormat"] == conf.ExportFormat


def test_save_and_load(monkeypatch):
    monkeypatch.setattr(conf, "ExportFormat", "yaml")
    monkeypatch.setattr(conf, "BackupSuffix", ".bak")
    conf.load()

    monkeypatch.setattr(conf, "Backup", False)
    monkeypatch.setattr(conf, "RecentFiles", ["/saves/Save01.BfME2Campaign"])
    monkeypatch.setattr(conf, "ExportFormat", "json")
    conf.save()
    assert os.path.isfile(conf.ConfigFile)
    with open(conf.ConfigFile) as f: text = f.read()
    assert "ExportFormat" in text
    assert "BackupSuffix" not in text # Unchanged from default

    monkeypatch.setattr(conf, "Backup", True)
    monkeypatch.setattr(conf, "RecentFiles", [])
    monkeypatch.setattr(conf, "ExportFormat", "yaml")
    conf.load()
    assert conf.Backup is False
    assert conf.RecentFiles == ["/saves/Save01.BfME2Campaign"]
    assert conf.ExportFormat == "json"


def test_load_raw_string_value(monkeypatch):
    monkeypatch.setattr(conf, "BackupSuffix", ".bak")
    os.makedirs(os.path.dirname(conf.ConfigFile))
    with open(conf.ConfigFile, "w") as f:
        f.write("[*]\nBackupSuffix = .orig\nMaxRecentFiles = 5\n")
    monkeypatch.setattr(conf, "MaxRecentFiles", 20)
    conf.load()
    assert conf.BackupSuffix == ".orig"
    assert conf.MaxRecentFiles == 5


def test_add_unique():
    items = ["a", "b", "c"]
    util.add_unique(items, "b", -1, maxlen=2)
    assert items == ["b", "a"]
    util.add_unique(items, "d")
    assert items == ["b", "a", "d"]


def test_util_formatting():
    assert util.format_bytes(0) == "0 bytes"
    assert util.format_bytes(2048) == "2 KB"
    assert util.plural("chunk", [1]) == "1 chunk"
    assert util.plural("entry", 3) == "3 entries"
    assert util.parse_int("0x1F") == 31
    assert util.parse_int(" 42 ") == 42
    assert util.format_exc(ValueError("bad")) == "ValueError: bad"
