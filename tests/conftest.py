from __future__ import annotations

import struct
from pathlib import Path
from typing import NamedTuple

import pytest

from u8arc.app_log import clear_app_log, drain_log_queue


class ArcNode(NamedTuple):
    kind: int
    name_offset: int
    a: int
    b: int
    size: int


class ParsedArc(NamedTuple):
    raw: bytes
    magic: bytes
    header_size: int
    table_length: int
    data_offset: int
    reserved: bytes
    nodes: list[ArcNode]
    strings: bytes

    def name(self, node: ArcNode) -> str:
        end = self.strings.index(b"\x00", node.name_offset)
        return self.strings[node.name_offset:end].decode("utf-8")


def _parse(path: Path) -> ParsedArc:
    raw = path.read_bytes()
    magic = raw[:4]
    header_size, table_length, data_offset = struct.unpack_from(">III", raw, 4)
    # root entry's b is the total node count
    root_b = struct.unpack_from(">I", raw, 0x20 + 8)[0]
    count = max(root_b, 1)
    nodes = []
    for i in range(count):
        type_name, a, b, size = struct.unpack_from(">IIII", raw, 0x20 + i * 16)
        nodes.append(ArcNode(type_name >> 24, type_name & 0xFFFFFF, a, b, size))
    strings = raw[0x20 + count * 16 : 0x20 + table_length]
    return ParsedArc(raw, magic, header_size, table_length, data_offset, raw[16:32], nodes, strings)


@pytest.fixture
def parse_arc():
    """Parse a written archive's header, node table and string table."""
    return _parse


@pytest.fixture
def make_tree():
    """Create files under a root from a {relative path: bytes | None} mapping.

    None creates an empty directory.
    """

    def _make(root: Path, entries: dict[str, bytes | None]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in entries.items():
            path = root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(content)
        return root

    return _make


@pytest.fixture
def pkg_tree(tmp_path, make_tree):
    """pkg/a.txt = b"AB", pkg/sub/b.bin empty."""
    return make_tree(tmp_path / "pkg", {"a.txt": b"AB", "sub/b.bin": b""})


@pytest.fixture(autouse=True)
def _reset_app_log():
    yield
    drain_log_queue()
    clear_app_log()
