import struct

import pytest

from assetreg.codec.errors import InvalidTypeTag
from assetreg.codec.primitives import (
    MapHandle,
    NameIndexFlagged,
    Pair,
    ValueId,
    ValueType,
)
from assetreg.codec.stream import RegistryReader, RegistryWriter


def _encode(value) -> bytes:
    w = RegistryWriter()
    value.write(w)
    return w.getvalue()


@pytest.mark.parametrize(
    "index, number",
    [(0, None), (5, 0), (5, None), (0x7FFFFFFF, 0xFFFFFFFF), (1234, 7)],
)
def test_flagged_name_symmetry(index, number):
    value = NameIndexFlagged(index, number)
    raw = _encode(value)
    assert len(raw) == (8 if number is not None else 4)
    assert NameIndexFlagged.read(RegistryReader(raw)) == value


def test_flagged_name_bit_layout():
    assert _encode(NameIndexFlagged(3)) == struct.pack("<I", 3)
    assert _encode(NameIndexFlagged(3, 0)) == struct.pack("<II", 0x80000003, 0)
    decoded = NameIndexFlagged.read(RegistryReader(struct.pack("<II", 0x80000009, 2)))
    assert decoded.index == 9
    assert decoded.number == 2
    # absent bit means "no number", not number zero
    assert NameIndexFlagged.read(RegistryReader(struct.pack("<I", 9))).number is None


def test_flagged_name_rejects_top_bit():
    with pytest.raises(ValueError):
        NameIndexFlagged(0x80000000)


@pytest.mark.parametrize("value_type", list(ValueType))
@pytest.mark.parametrize("index", [0, 1, 12345, (1 << 29) - 1])
def test_value_id_packing(value_type, index):
    value = ValueId(value_type, index)
    word = value.pack()
    assert word & 0x7 == int(value_type)
    assert word >> 3 == index
    assert ValueId.unpack(word) == value


def test_value_id_rejects_wide_index():
    with pytest.raises(ValueError):
        ValueId(ValueType.NAME, 1 << 29)
    with pytest.raises(ValueError):
        ValueId(ValueType.NAME, -1)


def test_invalid_type_tag_fails_decode():
    raw = struct.pack("<II", 0, (5 << 3) | 7)
    with pytest.raises(InvalidTypeTag):
        Pair.read(RegistryReader(raw))
    with pytest.raises(InvalidTypeTag):
        ValueType.from_tag(8)


def test_pair_wire_format():
    pair = Pair.read(RegistryReader(struct.pack("<II", 4, (2 << 3) | 3)))
    assert pair.name.index == 4
    assert pair.value == ValueId(ValueType.NAME, 2)
    assert _encode(pair) == struct.pack("<II", 4, (2 << 3) | 3)


def test_map_handle_bit_layout():
    handle = MapHandle(has_numberless_keys=True, num=0x1234, pair_begin=0xDEADBEEF)
    word = struct.unpack("<Q", _encode(handle))[0]
    assert word == (1 << 63) | (0x1234 << 32) | 0xDEADBEEF
    assert MapHandle.read(RegistryReader(_encode(handle))) == handle
    assert handle.pair_end == 0xDEADBEEF + 0x1234


def test_map_handle_without_numberless_flag():
    handle = MapHandle.unpack(7 << 32 | 2)
    assert not handle.has_numberless_keys
    assert (handle.num, handle.pair_begin) == (7, 2)
