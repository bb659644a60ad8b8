from __future__ import annotations

import struct
from pathlib import Path

import pytest

from u8arc.errors import EncodingFailure, LayoutOverflow
from u8arc.nodes import NodeKind, NodeTable, U8Node


def _subtree_extent(parents: dict[int, int], directory: int, count: int) -> int:
    """1 + largest index whose parent chain passes through directory."""
    last = None
    for i in range(count):
        j = i
        while j in parents:
            j = parents[j]
            if j == directory:
                last = i
                break
    return 0 if last is None else last + 1


def test_root_is_its_own_parent_with_empty_name():
    table = NodeTable()
    root = table.add_root()
    assert root.index == 0
    assert root.is_dir
    assert root.parent == 0
    assert root.name_offset == 0
    assert root.b == 0
    assert table.string_table == b"\x00"


def test_second_root_rejected():
    table = NodeTable()
    table.add_root()
    with pytest.raises(ValueError):
        table.add_root()


def test_names_appended_in_creation_order():
    table = NodeTable()
    table.add_root()
    f = table.add_file("a.txt", 0)
    d = table.add_dir("sub", 0)
    g = table.add_file("b.bin", d.index)
    assert (f.name_offset, d.name_offset, g.name_offset) == (1, 7, 11)
    assert table.string_table == b"\x00a.txt\x00sub\x00b.bin\x00"
    assert [n.index for n in table] == [0, 1, 2, 3]


def test_every_append_extends_all_ancestors():
    table = NodeTable()
    table.add_root()
    d1 = table.add_dir("d1", 0)
    assert table[0].b == 2
    assert d1.b == 0
    d2 = table.add_dir("d2", d1.index)
    assert (table[0].b, d1.b, d2.b) == (3, 3, 0)
    table.add_file("f", d2.index)
    assert (table[0].b, d1.b, d2.b) == (4, 4, 4)
    # a later sibling of d1 extends only the root
    table.add_file("g", 0)
    assert (table[0].b, d1.b, d2.b) == (5, 4, 4)


def test_directory_extent_matches_descendants():
    table = NodeTable()
    table.add_root()
    parents: dict[int, int] = {}
    layout = [
        ("file", 0), ("dir", 0), ("file", 2), ("dir", 2), ("file", 4),
        ("file", 4), ("dir", 0), ("dir", 7), ("file", 8), ("file", 7),
    ]
    for kind, parent in layout:
        node = table.add_dir("d", parent) if kind == "dir" else table.add_file("f", parent)
        parents[node.index] = parent

    for node in table:
        if node.is_dir:
            assert node.b == _subtree_extent(parents, node.index, len(table)), node.index
    assert table[0].b == len(table)


def test_file_has_no_parent_field():
    table = NodeTable()
    table.add_root()
    f = table.add_file("x", 0, Path("x"))
    assert f.source == Path("x")
    with pytest.raises(TypeError):
        _ = f.parent


def test_pack_encodes_type_in_high_byte():
    node = U8Node(kind=NodeKind.DIRECTORY, name_offset=0x123, index=2, a=1, b=9)
    assert node.pack() == struct.pack(">IIII", 0x01000123, 1, 9, 0)
    node = U8Node(kind=NodeKind.FILE, name_offset=0xABCDEF, index=3, a=0x80, b=10, size=2)
    assert node.pack() == struct.pack(">IIII", 0x00ABCDEF, 0x80, 10, 2)


def test_pack_rejects_values_wider_than_32_bits():
    node = U8Node(kind=NodeKind.FILE, name_offset=1, index=1, a=1 << 32)
    with pytest.raises(LayoutOverflow):
        node.pack()


def test_unencodable_name_raises_encoding_failure():
    table = NodeTable()
    table.add_root()
    with pytest.raises(EncodingFailure):
        table.add_file("bad\udcffname", 0)
    with pytest.raises(EncodingFailure):
        table.add_file("nul\x00name", 0)
    # nothing was appended
    assert len(table) == 1
    assert table.string_table == b"\x00"


def test_name_offset_beyond_24_bits_overflows():
    table = NodeTable()
    table.add_root()
    table._strings = bytearray(0x1000000)
    with pytest.raises(LayoutOverflow):
        table.add_file("late", 0)


def test_non_ascii_names_stored_as_utf8():
    table = NodeTable()
    table.add_root()
    table.add_file("テスト.bin", 0)
    assert table.string_table == b"\x00" + "テスト.bin".encode("utf-8") + b"\x00"
