import pytest

from bfmesed import metadata
from bfmesed import patch
from bfmesed.savefile import Savefile

from conftest import asciiz, make_savegame


def snapshot(savefile):
    """Returns {id(object): offset} for all written chunks and entries."""
    result = {}
    for chunk in savefile.chunks:
        if not chunk.is_synthetic: result[id(chunk)] = chunk.offset
        for entry in chunk.entries:
            if not entry.is_pending: result[id(entry)] = entry.offset
    return result


def test_patch_bytes_zero_fills():
    raw = bytearray(b"xxUpgrade_Sword\x00yy")
    patch.patch_ascii(raw, 2, 14, "Upgrade_Axe")
    assert raw == bytearray(b"xxUpgrade_Axe\x00\x00\x00yy")


def test_patch_full_size_without_terminator():
    raw = bytearray(b"abcd\x00")
    patch.patch_ascii(raw, 0, 5, "wxyz!")
    assert raw == bytearray(b"wxyz!")


def test_patch_overflow_leaves_buffer_unchanged():
    raw = bytearray(b"xxUpgrade_Sword\x00yy")
    before = bytes(raw)
    with pytest.raises(patch.ValueTooLargeError) as e:
        patch.patch_ascii(raw, 2, 14, "Upgrade_Swordfish")
    assert e.value.max_length == 14
    assert isinstance(e.value, ValueError)
    assert bytes(raw) == before


def test_patch_out_of_range():
    raw = bytearray(b"abc\x00")
    with pytest.raises(patch.OffsetOutOfRangeError):
        patch.patch_ascii(raw, 2, 4, "x")
    with pytest.raises(patch.OffsetOutOfRangeError):
        patch.patch_ascii(raw, None, 4, "x")
    assert raw == bytearray(b"abc\x00")


def test_patch_non_ascii():
    raw = bytearray(b"abc\x00")
    with pytest.raises(patch.PatchError):
        patch.patch_ascii(raw, 0, 4, "äbc")
    assert raw == bytearray(b"abc\x00")


def test_patch_utf16():
    raw = bytearray("Rohan".encode("utf-16-le") + b"\x00\x00")
    patch.patch_utf16(raw, 0, 12, "Isen")
    assert raw == bytearray("Isen".encode("utf-16-le") + b"\x00" * 4)
    with pytest.raises(patch.ValueTooLargeError) as e:
        patch.patch_utf16(raw, 0, 12, "Isengard")
    assert e.value.max_length == 12


def test_round_trip(raw):
    savefile = Savefile(raw=raw)
    entries = [e for c in savefile.chunks if not c.is_synthetic for e in c.entries
               if e.type in metadata.EntryType.PATCHABLE]
    assert len(entries) == 7
    for entry in entries:
        savefile.patch_entry(entry, entry.value)
    assert bytes(savefile.raw) == raw
    assert not savefile.is_changed()


def test_round_trip_sanitized_tokens():
    raw = make_savegame(b"".join([
        asciiz("CHUNK_CampaignKOLBH"), b"\x01",
        asciiz(" HeroAragorn"), asciiz(",maps\\rohan.map"), asciiz("Upgrade_Sword"),
        asciiz("SG_EOF"),
    ]))
    savefile = Savefile(raw=raw)
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    assert [e.value for e in campaign.entries] == \
           ["CHUNK_CampaignKOLB", "HeroAragorn", "maps\\rohan.map", "Upgrade_Sword"]
    for entry in campaign.entries:
        savefile.patch_entry(entry, entry.value)
    assert bytes(savefile.raw) == raw

    hero = campaign.entries[1]
    savefile.patch_entry(hero, "HeroGimli")
    assert bytes(savefile.raw[hero.offset:hero.end]) == b"HeroGimli\x00\x00\x00\x00"


def test_patch_entry(raw):
    savefile = Savefile(raw=raw)
    offset = raw.index(b"Upgrade_Sword")
    entry = savefile.find_entry(offset)
    savefile.patch_entry(entry, "Upgrade_Axe")
    assert entry.value == "Upgrade_Axe"
    assert savefile.is_changed()
    assert bytes(savefile.raw[offset:offset + 14]) == b"Upgrade_Axe\x00\x00\x00"
    assert len(savefile.raw) == len(raw)

    reparsed = Savefile(raw=bytes(savefile.raw))
    found = reparsed.find_entry(offset)
    assert (found.value, found.owner, found.owner_index) == ("Upgrade_Axe", "HeroAragorn", 0)


def test_patch_entry_overflow(raw):
    savefile = Savefile(raw=raw)
    entry = savefile.find_entry(raw.index(b"Upgrade_Sword"))
    with pytest.raises(patch.ValueTooLargeError) as e:
        savefile.patch_entry(entry, "Upgrade_Swordfish")
    assert e.value.max_length == 14
    assert entry.value == "Upgrade_Sword"
    assert bytes(savefile.raw) == raw


def test_patch_entry_updates_science_copies(raw):
    savefile = Savefile(raw=raw)
    offset = raw.index(b"SCIENCE_Fire")
    savefile.patch_entry(savefile.find_entry(offset), "SCIENCE_Ice")
    science = savefile.find_chunk(metadata.SCIENCES_CHUNK)
    assert [e.value for e in science.entries if e.offset == offset] == ["SCIENCE_Ice"]


def test_patch_entry_rejects_binary_fields(raw):
    savefile = Savefile(raw=raw)
    logic = savefile.find_chunk("CHUNK_GameLogicKOLB")
    word = logic.entries[0]
    with pytest.raises(patch.PatchError):
        savefile.patch_entry(word, "true")
    assert bytes(savefile.raw) == raw


def test_insert_asciiz_fixup(raw):
    savefile = Savefile(raw=raw)
    offset = raw.index(b"HeroLegolas")
    before = snapshot(savefile)
    old_raw = savefile.raw
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    campaign_length = campaign.length

    result = patch.insert_asciiz(savefile, offset, "Upgrade_Shield")

    assert result == offset
    assert old_raw == bytearray(raw)
    assert savefile.raw is not old_raw
    assert bytes(savefile.raw) == raw[:offset] + b"Upgrade_Shield\x00" + raw[offset:]
    after = snapshot(savefile)
    for key, value in before.items():
        assert after[key] == (value + 15 if value >= offset else value)
    assert campaign.length == campaign_length + 15


def test_insert_out_of_range(raw):
    savefile = Savefile(raw=raw)
    before = snapshot(savefile)
    with pytest.raises(patch.OffsetOutOfRangeError):
        patch.insert_asciiz(savefile, len(raw) + 1, "Upgrade_Shield")
    with pytest.raises(patch.OffsetOutOfRangeError):
        patch.insert_asciiz(savefile, -1, "Upgrade_Shield")
    assert bytes(savefile.raw) == raw
    assert snapshot(savefile) == before


def test_insert_at_end(raw):
    savefile = Savefile(raw=raw)
    assert patch.insert_asciiz(savefile, len(raw), "Tail") == len(raw)
    assert bytes(savefile.raw) == raw + b"Tail\x00"


def test_add_property(raw):
    savefile = Savefile(raw=raw)
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    sword = savefile.find_entry(raw.index(b"Upgrade_Sword"))
    expected = sword.end

    entry = savefile.add_property(campaign, "HeroAragorn", "Upgrade_Shield")

    assert entry.offset == expected
    assert not entry.is_pending
    assert (entry.owner, entry.owner_index) == ("HeroAragorn", 0)
    assert campaign.entries[-1] is entry

    reparsed = Savefile(raw=bytes(savefile.raw))
    found = reparsed.find_entry(expected)
    assert found.value == "Upgrade_Shield"
    assert (found.owner, found.owner_index) == ("HeroAragorn", 0)
    assert reparsed.find_entry(raw.index(b"HeroLegolas") + 15).value == "HeroLegolas"


def test_new_property_pending(raw):
    savefile = Savefile(raw=raw)
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    entry = savefile.new_property(campaign, "HeroLegolas", "Upgrade_Cloak")
    assert entry.is_pending and entry.end is None
    assert savefile.is_changed()
    assert bytes(savefile.raw) == raw
    with pytest.raises(patch.PatchError):
        savefile.patch_entry(entry, "Upgrade_Hood")

    savefile.realize()
    bow = raw.index(b"Upgrade_Bow")
    assert entry.offset == bow + len(b"Upgrade_Bow\x00")
    assert (entry.owner, entry.owner_index) == ("HeroLegolas", 1)


def test_new_property_unknown_owner(raw):
    savefile = Savefile(raw=raw)
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    count = len(campaign.entries)
    with pytest.raises(patch.PatchError):
        savefile.new_property(campaign, "HeroGimli", "Upgrade_Axe")
    assert len(campaign.entries) == count


def test_find_insert_offset_fallback():
    chunk = metadata.Chunk("CHUNK_CampaignKOLB", 40, 100)
    assert patch.find_insert_offset(chunk, "HeroGimli") == 40


def test_add_property_skips_non_owner_hero_labels():
    raw = make_savegame(b"".join([
        asciiz("CHUNK_CampaignKOLB"),
        asciiz("Campaign/Intro.map"), asciiz("HeroAragorn"), asciiz("Upgrade_Sword"),
        asciiz("SG_EOF"),
    ]))
    savefile = Savefile(raw=raw)
    campaign = savefile.find_chunk("CHUNK_CampaignKOLB")
    assert campaign.entries[1].label == metadata.LABEL_HERO
    assert savefile.find_owners() == ["HeroAragorn"]

    entry = savefile.add_property(campaign, "HeroAragorn", "Upgrade_Bow")
    assert entry.owner_index == 0

    reparsed = Savefile(raw=bytes(savefile.raw))
    found = reparsed.find_entry(entry.offset)
    assert (found.value, found.owner, found.owner_index) == (entry.value, "HeroAragorn", 0)
    with pytest.raises(patch.PatchError):
        savefile.new_property(campaign, "Campaign/Intro.map", "Upgrade_Axe")
