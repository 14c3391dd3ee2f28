from bfmesed import chunk
from bfmesed import metadata

from conftest import asciiz, make_savegame, utf16


def test_normalize_kolb_suffix():
    assert chunk.normalize_kolb_suffix("CHUNK_CampaignKOLBH") == "CHUNK_CampaignKOLB"
    assert chunk.normalize_kolb_suffix("CHUNK_CampaignKOLB") == "CHUNK_CampaignKOLB"
    assert chunk.normalize_kolb_suffix("CHUNK_AudioKOLBEX") == "CHUNK_AudioKOLBEX"
    assert chunk.normalize_kolb_suffix("CHUNK_AudioKOLB1") == "CHUNK_AudioKOLB1"
    assert chunk.normalize_kolb_suffix("") == ""


def test_normalize_name():
    assert chunk.normalize_name("CHUNK_GameLogicKOLBA") == "CHUNK_GameLogicKOLB"
    assert chunk.normalize_name(" CHUNK_GameLogicKOLB") == "CHUNK_GameLogicKOLB"
    assert chunk.normalize_name("") == ""


def test_find_chunk_starts_validates_tokens():
    raw = make_savegame(
        asciiz("CHUNK_A"),                  # Too short
        asciiz("CHUNK_NoMarkerHere"),       # No KOLB
        asciiz("CHUNK_TeamsKOLB") + asciiz("SG_EOF"),
    )
    starts = chunk.find_chunk_starts(raw)
    assert starts == [raw.index(b"CHUNK_TeamsKOLB")]


def test_locate_chunks(raw):
    chunks = chunk.locate_chunks(raw)
    assert [c.name for c in chunks] == ["CHUNK_CampaignKOLB", "CHUNK_GameLogicKOLB"]
    campaign, logic = chunks
    assert campaign.offset == raw.index(b"CHUNK_Campaign")
    assert campaign.end == logic.offset
    assert logic.end == len(raw)
    assert all(not c.entries for c in chunks)


def test_utf16_end_marker_before_ascii():
    body = b"\x00" + utf16("SG_EOF") + b"\x00\x00" + asciiz("Trailer") + asciiz("SG_EOF")
    raw = make_savegame(asciiz("CHUNK_AlphaKOLB") + body, asciiz("CHUNK_BetaKOLB"))
    first, second = chunk.locate_chunks(raw)
    marker = raw.index(utf16("SG_EOF"))
    assert first.end == marker + 12 + 2
    assert second.offset == raw.index(b"CHUNK_BetaKOLB")
    assert second.end == len(raw)


def test_missing_end_marker_runs_to_next_chunk():
    raw = make_savegame(asciiz("CHUNK_AlphaKOLB") + b"\x01\x02", asciiz("CHUNK_BetaKOLB"))
    first, second = chunk.locate_chunks(raw)
    assert first.end == second.offset
    assert second.end == len(raw)


def test_no_chunks():
    assert chunk.locate_chunks(make_savegame(b"no chunks here")) == []


def test_binary_payload_names():
    assert metadata.is_binary_payload_chunk("CHUNK_GameLogicKOLB")
    assert metadata.is_binary_payload_chunk("chunk_audiokolb")
    assert not metadata.is_binary_payload_chunk("CHUNK_CampaignKOLB")
    assert not metadata.is_binary_payload_chunk("")
