import struct

import pytest

from bfmesed import conf


SIGNATURE = b"ALAE2STR"


def asciiz(text):
    return text.encode("ascii") + b"\x00"


def utf16(text):
    return text.encode("utf-16-le")


def make_campaign_chunk():
    return b"".join([
        asciiz("CHUNK_CampaignKOLBH"),
        b"\x01\x02\x03\x04",
        asciiz("HeroAragorn"),
        asciiz("Upgrade_Sword"),
        b"\x05\x06",
        asciiz("HeroLegolas"),
        asciiz("Upgrade_Bow"),
        asciiz("SCIENCE_Fire"),
        asciiz("SG_EOF"),
        b"\x00\x00",
    ])


def make_logic_chunk():
    return b"".join([
        asciiz("CHUNK_GameLogicKOLB"),
        b"\x00\x00\x00\x00",
        struct.pack("<f", 2.5),
        b"\x01\x00\x00\x00",
        b"\x05Rohan",
        b"\x04" + utf16("Gond"),
        asciiz("SCIENCE_Fire"),
        b"\x07\x08",
        asciiz("SG_EOF"),
    ])


def make_savegame(*chunks, header=SIGNATURE + b"\x01\x00\x00\x00"):
    chunks = chunks or (make_campaign_chunk(), make_logic_chunk())
    return header + b"".join(chunks)


@pytest.fixture
def raw():
    return make_savegame()


@pytest.fixture
def savegame_path(tmp_path, raw):
    path = tmp_path / "Save01.BfME2Campaign"
    path.write_bytes(raw)
    return path


@pytest.fixture(autouse=True)
def isolated_conf(tmp_path, monkeypatch):
    monkeypatch.setattr(conf, "ConfigFile", str(tmp_path / "etc" / "bfmesed.ini"))
    monkeypatch.setattr(conf, "RecentFiles", [])
    monkeypatch.setattr(conf, "Backup", True)
    monkeypatch.setattr(conf, "Defaults", {})
